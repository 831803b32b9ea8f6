"""GraphQL request context."""

from typing import Optional

from strawberry.fastapi import BaseContext

from nomad_service.config import get_settings
from nomad_service.dates import Clock, make_clock
from nomad_service.queries import NomadQueries
from nomad_service.repositories import EntityService


class NomadContext(BaseContext):
    """Per-request context carrying the entity service and clock."""

    def __init__(self, entities: EntityService, clock: Optional[Clock] = None):
        super().__init__()
        self.entities = entities
        self.clock = clock or make_clock(get_settings().timezone)
        self.queries = NomadQueries(entities, self.clock)


def make_context_getter(entities: EntityService, clock: Optional[Clock] = None):
    """Build the FastAPI context getter for GraphQLRouter."""

    async def get_context() -> NomadContext:
        return NomadContext(entities, clock)

    return get_context
