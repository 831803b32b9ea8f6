"""Slot, contact and power-up queries over the entity service."""

import logging
from datetime import date, tzinfo
from typing import Any, Iterable, Optional

from .dates import Clock, as_date, calendar_date, day_month, short_time
from .exceptions import InvalidFilterError
from .repositories import EntityService

logger = logging.getLogger("nomad_queries")

CONTACT_POPULATE = ["location.group", "location.district.region"]
POWER_UP_POPULATE = {"nomad": True, "slot": {"populate": {"time_slot": True}}}
SLOT_POPULATE = {"time_slot": True, "state": {"populate": {"group": True}}}


class NomadQueries:
    """Queries backing the GraphQL extension."""

    def __init__(self, entities: EntityService, clock: Clock):
        self.entities = entities
        self.clock = clock

    # ==================== SLOTS ====================

    async def next_blackout(self, group_id: Any) -> Optional[dict[str, Any]]:
        """Earliest upcoming slot whose state is inactive for the group.

        Upcoming means later today (start strictly after now) or any later date.
        A group id the store cannot match returns None.
        """
        logger.debug(f"Next blackout for group {group_id}")
        now = self.clock()
        today = now.date()
        current = now.time().replace(microsecond=0, tzinfo=None)
        inactive = {"status": False, "group": {"id": group_id}}

        try:
            slots = await self.entities.find_many(
                "slot",
                filters={
                    "$or": [
                        {
                            "date": today,
                            "time_slot": {"start": {"$gt": current}},
                            "state": inactive,
                        },
                        {
                            "date": {"$gt": today},
                            "state": inactive,
                        },
                    ]
                },
                sort={"date": "ASC", "time_slot": {"start": "ASC"}},
                populate=SLOT_POPULATE,
                limit=1,
            )
        except InvalidFilterError as e:
            logger.debug(f"No blackout for unmatched group id {group_id!r}: {e}")
            return None
        return slots[0] if slots else None

    async def available_days(self) -> list[date]:
        """Distinct dates, today or later, that have at least one slot."""
        today = self.clock().date()
        logger.debug(f"Available days from {today}")
        slots = await self.entities.find_many(
            "slot",
            filters={"date": {"$gte": today}},
            sort={"date": "ASC"},
        )
        return sorted({as_date(slot["date"]) for slot in slots})

    # ==================== CONTACTS ====================

    async def contacts(self, numbers: Optional[Iterable[Optional[str]]] = None) -> list[dict[str, Any]]:
        """Contacts by phone number, redacted by their visibility flags."""
        filters = None
        if numbers is not None:
            filters = {"phone": [n for n in numbers if n is not None]}
            logger.debug(f"Contacts for {len(filters['phone'])} numbers")
        else:
            logger.debug("Contacts without phone filter")

        nomads = await self.entities.find_many(
            "nomad",
            filters=filters,
            populate=CONTACT_POPULATE,
        )
        tz = self.clock().tzinfo
        return [self._contact(nomad, tz) for nomad in nomads]

    @staticmethod
    def _contact(nomad: dict[str, Any], tz: Optional[tzinfo]) -> dict[str, Any]:
        location = nomad.get("location")
        contact_location = None
        group_id = None
        if location is not None:
            district = location.get("district") or {}
            region = district.get("region") or {}
            group = location.get("group") or {}
            group_id = group.get("id")
            contact_location = {
                "id": location.get("id"),
                "name": None if nomad.get("hide_location") else location.get("name"),
                "district": district.get("name"),
                "region": region.get("name"),
                "group_id": group_id,
            }

        return {
            "id": nomad["id"],
            "name": nomad.get("name"),
            "phone": nomad.get("phone"),
            "location": contact_location,
            "group_id": group_id,
            "last_active": (
                None if nomad.get("hide_activity")
                else calendar_date(nomad.get("last_active"), tz)
            ),
        }

    # ==================== POWER-UPS ====================

    async def request_power_up(self, data: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Create a power-up request and notify the contact.

        The two writes are independent: a failed notification leaves the
        power-up in place and the error propagates.
        """
        power_up = await self.entities.create(
            "power-up",
            data=data,
            populate=POWER_UP_POPULATE,
        )
        if power_up is None:
            return None
        logger.info(f"Power-up {power_up['id']} requested by nomad {data.get('nomad')}")

        try:
            await self.entities.create(
                "notification",
                data={
                    "type": "power-up",
                    "nomad": data["contact"],
                    "message": self.power_up_message(data["name"], power_up.get("slot")),
                    "meta": {"id": power_up["id"]},
                },
            )
        except Exception as e:
            logger.error(f"Failed to notify contact for power-up {power_up['id']}: {e}")
            raise

        return power_up

    @staticmethod
    def power_up_message(name: str, slot: Optional[dict[str, Any]]) -> str:
        """'Ana is requesting Power Up on 5th March at 09:30'."""
        message = f"{name} is requesting Power Up"
        if not slot:
            return message
        message += f" on {day_month(slot['date'])}"
        time_slot = slot.get("time_slot")
        if time_slot and time_slot.get("start") is not None:
            message += f" at {short_time(time_slot['start'])}"
        return message
