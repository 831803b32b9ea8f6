"""Exceptions raised by the content data service."""

from typing import Any, Optional


class NomadServiceError(Exception):
    """Base exception for all Nomad Service errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DatabaseNotInitializedError(NomadServiceError):
    """Raised when a session is requested before init_database()."""
    pass


class UnknownCollectionError(NomadServiceError):
    """Raised for a collection name that has no registered model."""
    pass


class InvalidFilterError(NomadServiceError):
    """Raised for malformed filters, sort or populate arguments."""
    pass


class EntityValidationError(NomadServiceError):
    """Raised when a write payload does not match the collection."""
    pass
