"""Tests for the GraphQL schema."""

import pytest
import strawberry

from nomad_service.api.graphql import NomadContext, create_schema, schema


NEXT_BLACKOUT = """
query NextBlackout($group: ID!) {
    nextBlackout(group: $group) {
        data {
            id
            attributes {
                date
                time_slot { start }
                state { status groupId }
            }
        }
    }
}
"""

CONTACTS = """
query Contacts($numbers: [String]) {
    contacts(numbers: $numbers) {
        id
        name
        phone
        groupId
        location { name district region groupId }
        lastActive
    }
}
"""

REQUEST_POWER_UP = """
mutation RequestPowerUp($data: PowerUpRequest!) {
    requestPowerUp(data: $data) {
        data {
            id
            attributes {
                name
                request_note
                nomad { name }
                slot { data { attributes { date time_slot { start } } } }
            }
        }
    }
}
"""


@pytest.mark.asyncio
async def test_next_blackout(seeded, entities, clock):
    """Test nextBlackout returns tomorrow's slot at 10:00."""
    result = await schema.execute(
        NEXT_BLACKOUT,
        variable_values={"group": str(seeded["group_a"])},
        context_value=NomadContext(entities, clock),
    )

    assert result.errors is None
    data = result.data["nextBlackout"]["data"]
    assert data["id"] == str(seeded["tomorrow"])
    assert data["attributes"]["date"] == "2026-10-19"
    assert data["attributes"]["time_slot"]["start"] == "08:00:00"
    assert data["attributes"]["state"] == [{"status": False, "groupId": str(seeded["group_a"])}]


@pytest.mark.asyncio
async def test_next_blackout_null(seeded, entities, clock):
    """Test nextBlackout is null when nothing matches."""
    result = await schema.execute(
        NEXT_BLACKOUT,
        variable_values={"group": str(seeded["group_c"])},
        context_value=NomadContext(entities, clock),
    )

    assert result.errors is None
    assert result.data["nextBlackout"] is None


@pytest.mark.asyncio
async def test_next_blackout_non_numeric_group(seeded, entities, clock):
    """Test nextBlackout is null for a group id that matches nothing."""
    result = await schema.execute(
        NEXT_BLACKOUT,
        variable_values={"group": "abc"},
        context_value=NomadContext(entities, clock),
    )

    assert result.errors is None
    assert result.data["nextBlackout"] is None


@pytest.mark.asyncio
async def test_available_days(seeded, entities, clock):
    """Test availableDays."""
    result = await schema.execute(
        "{ availableDays }",
        context_value=NomadContext(entities, clock),
    )

    assert result.errors is None
    assert result.data["availableDays"] == ["2026-10-18", "2026-10-19", "2026-10-21"]


@pytest.mark.asyncio
async def test_contacts(seeded, entities, clock):
    """Test contacts with redaction."""
    result = await schema.execute(
        CONTACTS,
        variable_values={"numbers": ["+254700000002", "+254700000003"]},
        context_value=NomadContext(entities, clock),
    )

    assert result.errors is None
    by_name = {c["name"]: c for c in result.data["contacts"]}
    assert by_name["Brian"]["location"] == {
        "name": None,
        "district": "Westlands",
        "region": "Nairobi",
        "groupId": str(seeded["group_a"]),
    }
    assert by_name["Brian"]["lastActive"] == "2026-10-17"
    assert by_name["Cynthia"]["location"]["name"] == "Westlands Hub"
    assert by_name["Cynthia"]["lastActive"] is None
    assert by_name["Cynthia"]["groupId"] == str(seeded["group_a"])


@pytest.mark.asyncio
async def test_request_power_up(seeded, entities, clock):
    """Test the requestPowerUp mutation."""
    result = await schema.execute(
        REQUEST_POWER_UP,
        variable_values={"data": {
            "nomad": str(seeded["amina"]),
            "contact": str(seeded["brian"]),
            "slot": str(seeded["today_late"]),
            "name": "Amina",
            "request_note": "Battery low",
        }},
        context_value=NomadContext(entities, clock),
    )

    assert result.errors is None
    attributes = result.data["requestPowerUp"]["data"]["attributes"]
    assert attributes["name"] == "Amina"
    assert attributes["request_note"] == "Battery low"
    assert attributes["nomad"] == {"name": "Amina"}
    assert attributes["slot"]["data"]["attributes"]["time_slot"]["start"] == "12:00:00"

    assert await entities.count("notification", {"nomad": seeded["brian"], "type": "power-up"}) == 1


@pytest.mark.asyncio
async def test_request_power_up_unknown_slot(seeded, entities, clock):
    """Test that data-service errors surface as GraphQL errors."""
    result = await schema.execute(
        REQUEST_POWER_UP,
        variable_values={"data": {
            "nomad": str(seeded["amina"]),
            "contact": str(seeded["brian"]),
            "slot": "999",
            "name": "Amina",
        }},
        context_value=NomadContext(entities, clock),
    )

    assert result.errors is not None
    assert "Slot not found" in result.errors[0].message
    assert await entities.count("power-up") == 0


def test_create_schema_merges_host_types():
    """Test merging the extension into host Query types."""

    @strawberry.type
    class HostQuery:
        @strawberry.field
        def version(self) -> str:
            return "1.0"

    sdl = create_schema(extra_queries=(HostQuery,)).as_str()

    assert "version: String!" in sdl
    assert "nextBlackout(group: ID!): SlotEntityResponse" in sdl
    assert "input PowerUpRequest" in sdl
    assert "request_note: String" in sdl
    assert "): [Contact]\n" in sdl
    assert "availableDays: [Date]\n" in sdl
