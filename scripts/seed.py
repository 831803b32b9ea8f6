"""Seed script for initial development data."""

import asyncio
from datetime import date, datetime, time, timedelta, timezone

from nomad_service.database import Base, close_database, init_database
from nomad_service.repositories import EntityService


async def seed_data():
    """Seed the database with regions, nomads and two weeks of slots."""
    engine = await init_database(create_tables=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    print("🧹 Reset schema")

    entities = EntityService()

    # Locations
    region = await entities.create("region", {"name": "Nairobi"})
    districts = [
        await entities.create("district", {"name": name, "region": region["id"]})
        for name in ("Westlands", "Kibra", "Kasarani")
    ]
    groups = [
        await entities.create("group", {"name": name})
        for name in ("Group A", "Group B")
    ]
    locations = [
        await entities.create("location", {
            "name": f"{district['name']} Hub",
            "district": district["id"],
            "group": groups[i % len(groups)]["id"],
        })
        for i, district in enumerate(districts)
    ]
    print(f"📍 Created {len(locations)} locations")

    # Nomads
    now = datetime.now(timezone.utc)
    nomads = [
        {"name": "Amina Otieno", "phone": "+254700000001", "location": locations[0]["id"]},
        {"name": "Brian Mwangi", "phone": "+254700000002", "location": locations[1]["id"],
         "hide_location": True},
        {"name": "Cynthia Wanjiru", "phone": "+254700000003", "location": locations[2]["id"],
         "hide_activity": True},
        {"name": "David Kamau", "phone": "+254700000004", "location": locations[0]["id"]},
    ]
    for n in nomads:
        await entities.create("nomad", {**n, "last_active": now - timedelta(hours=5)})
    print(f"👤 Created {len(nomads)} nomads")

    # Time slots and dated slots
    time_slots = [
        await entities.create("time-slot", {"name": name, "start": start, "end": end})
        for name, start, end in (
            ("Morning", time(8, 0), time(12, 0)),
            ("Afternoon", time(12, 0), time(16, 0)),
            ("Evening", time(16, 0), time(20, 0)),
        )
    ]
    today = date.today()
    slot_count = 0
    for offset in range(14):
        for i, time_slot in enumerate(time_slots):
            slot = await entities.create("slot", {
                "date": today + timedelta(days=offset),
                "time_slot": time_slot["id"],
            })
            for j, group in enumerate(groups):
                # Rotate blackouts through the groups
                await entities.create("slot-state", {
                    "slot": slot["id"],
                    "group": group["id"],
                    "status": (offset + i + j) % 4 != 0,
                })
            slot_count += 1
    print(f"🗓️ Created {slot_count} slots")

    await close_database()
    print("\n✅ Seed data created successfully!")


if __name__ == "__main__":
    asyncio.run(seed_data())
