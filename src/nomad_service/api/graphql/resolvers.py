"""GraphQL resolvers."""

import logging
from datetime import date
from typing import Optional

import strawberry
from strawberry.types import Info

from nomad_service.api.graphql.context import NomadContext
from nomad_service.api.graphql.types import (
    Contact,
    PowerUpEntityResponse,
    PowerUpRequest,
    SlotEntityResponse,
)

logger = logging.getLogger("graphql_resolvers")


@strawberry.type
class Query:
    """GraphQL queries."""

    @strawberry.field
    async def next_blackout(
        self,
        info: Info[NomadContext, None],
        group: strawberry.ID,
    ) -> Optional[SlotEntityResponse]:
        """Next upcoming slot that is inactive for a group.

        Example:
        ```graphql
        query {
            nextBlackout(group: "3") {
                data { id attributes { date time_slot { start } } }
            }
        }
        ```
        """
        slot = await info.context.queries.next_blackout(group)
        if slot is None:
            return None
        return SlotEntityResponse.from_record(slot)

    @strawberry.field
    async def contacts(
        self,
        info: Info[NomadContext, None],
        numbers: Optional[list[Optional[str]]] = None,
    ) -> Optional[list[Optional[Contact]]]:
        """Contacts whose phone is in ``numbers``.

        Example:
        ```graphql
        query {
            contacts(numbers: ["+254700000001"]) {
                name
                location { name district region groupId }
                lastActive
            }
        }
        ```
        """
        records = await info.context.queries.contacts(numbers)
        return [Contact.from_record(r) for r in records]

    @strawberry.field
    async def available_days(self, info: Info[NomadContext, None]) -> Optional[list[Optional[date]]]:
        """Dates from today on that have slots."""
        return await info.context.queries.available_days()


@strawberry.type
class Mutation:
    """GraphQL mutations."""

    @strawberry.mutation
    async def request_power_up(
        self,
        info: Info[NomadContext, None],
        data: PowerUpRequest,
    ) -> Optional[PowerUpEntityResponse]:
        """Request a power-up and notify the contact.

        Example:
        ```graphql
        mutation {
            requestPowerUp(data: {nomad: "1", contact: "2", slot: "7", name: "Ana"}) {
                data { id attributes { name } }
            }
        }
        ```
        """
        logger.debug("requestPowerUp nomad=%s slot=%s", data.nomad, data.slot)
        power_up = await info.context.queries.request_power_up(data.to_data())
        if power_up is None:
            return None
        return PowerUpEntityResponse.from_record(power_up)
