"""Content data service over the registered collections."""

from .entity_service import EntityService
from .filters import compile_filters
from .query import apply_sort, normalize_populate, serialize

__all__ = [
    "EntityService",
    "compile_filters",
    "apply_sort",
    "normalize_populate",
    "serialize",
]
