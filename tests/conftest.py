"""Pytest configuration and fixtures."""

from datetime import date, datetime, time, timezone

import pytest
import pytest_asyncio
from unittest.mock import AsyncMock

from nomad_service.database import close_database, init_database
from nomad_service.repositories import EntityService

# Frozen "now" for every time-dependent test: 2026-10-18 10:00 UTC
NOW = datetime(2026, 10, 18, 10, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


@pytest.fixture
def clock():
    """Clock frozen at NOW."""
    return lambda: NOW


@pytest.fixture
def mock_entities():
    """Entity service double for resolver-level tests."""
    return AsyncMock(spec=EntityService)


@pytest_asyncio.fixture
async def entities():
    """Entity service over a fresh in-memory SQLite database."""
    await init_database("sqlite+aiosqlite:///:memory:", echo=False)
    yield EntityService()
    await close_database()


@pytest_asyncio.fixture
async def seeded(entities):
    """Locations, nomads and slots around NOW.

    Slots (group A / group B status):
        yesterday 12:00   A inactive
        today     09:00   A inactive          (already started)
        today     12:00   A active, B inactive
        tomorrow  08:00   A inactive
        +3 days   08:00   A inactive, B active
    """
    ids = {}

    region = await entities.create("region", {"name": "Nairobi"})
    district = await entities.create("district", {"name": "Westlands", "region": region["id"]})
    group_a = await entities.create("group", {"name": "Group A"})
    group_b = await entities.create("group", {"name": "Group B"})
    group_c = await entities.create("group", {"name": "Group C"})
    location = await entities.create("location", {
        "name": "Westlands Hub",
        "district": district["id"],
        "group": group_a["id"],
    })
    ids.update(group_a=group_a["id"], group_b=group_b["id"], group_c=group_c["id"], location=location["id"])

    last_active = datetime(2026, 10, 17, 22, 30, tzinfo=timezone.utc)
    for key, payload in {
        "amina": {"name": "Amina", "phone": "+254700000001", "location": location["id"]},
        "brian": {"name": "Brian", "phone": "+254700000002", "location": location["id"],
                  "hide_location": True},
        "cynthia": {"name": "Cynthia", "phone": "+254700000003", "location": location["id"],
                    "hide_activity": True},
        "david": {"name": "David", "phone": "+254700000004"},
    }.items():
        nomad = await entities.create("nomad", {**payload, "last_active": last_active})
        ids[key] = nomad["id"]

    morning = await entities.create("time-slot", {"name": "Morning", "start": time(8, 0), "end": time(9, 0)})
    nine = await entities.create("time-slot", {"name": "Nine", "start": time(9, 0), "end": time(10, 0)})
    noon = await entities.create("time-slot", {"name": "Noon", "start": time(12, 0), "end": time(13, 0)})

    async def slot(key, day, time_slot, states):
        record = await entities.create("slot", {"date": day, "time_slot": time_slot["id"]})
        for group_id, status in states:
            await entities.create("slot-state", {"slot": record["id"], "group": group_id, "status": status})
        ids[key] = record["id"]

    await slot("yesterday", date(2026, 10, 17), noon, [(group_a["id"], False)])
    await slot("today_early", TODAY, nine, [(group_a["id"], False)])
    await slot("today_late", TODAY, noon, [(group_a["id"], True), (group_b["id"], False)])
    await slot("tomorrow", date(2026, 10, 19), morning, [(group_a["id"], False)])
    await slot("later", date(2026, 10, 21), morning, [(group_a["id"], False), (group_b["id"], True)])

    return ids
