"""GraphQL types."""

import datetime
from typing import Any, Optional

import strawberry


@strawberry.type
class ContactLocation:
    """Location of a contact, flattened to names."""
    id: Optional[strawberry.ID] = None
    name: Optional[str] = None
    district: Optional[str] = None
    region: Optional[str] = None
    group_id: Optional[str] = None


@strawberry.type
class Contact:
    """Contact (nomad) with visibility redaction applied."""
    id: strawberry.ID
    name: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[ContactLocation] = None
    group_id: Optional[str] = None
    last_active: Optional[datetime.date] = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Contact":
        location = record.get("location")
        return cls(
            id=strawberry.ID(str(record["id"])),
            name=record.get("name"),
            phone=record.get("phone"),
            location=ContactLocation(
                id=_id(location.get("id")),
                name=location.get("name"),
                district=location.get("district"),
                region=location.get("region"),
                group_id=_str(location.get("group_id")),
            ) if location else None,
            group_id=_str(record.get("group_id")),
            last_active=record.get("last_active"),
        )


@strawberry.type
class TimeSlot:
    """Window of a day."""
    id: strawberry.ID
    name: Optional[str] = None
    start: Optional[datetime.time] = None
    end: Optional[datetime.time] = None


@strawberry.type
class SlotStateEntry:
    """Availability of a slot for one group."""
    id: strawberry.ID
    status: bool
    group_id: Optional[str] = None


@strawberry.type
class Slot:
    """Slot attributes."""
    date: datetime.date
    time_slot: Optional[TimeSlot] = strawberry.field(default=None, name="time_slot")
    state: list[SlotStateEntry] = strawberry.field(default_factory=list)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Slot":
        time_slot = record.get("time_slot")
        return cls(
            date=record["date"],
            time_slot=TimeSlot(
                id=strawberry.ID(str(time_slot["id"])),
                name=time_slot.get("name"),
                start=time_slot.get("start"),
                end=time_slot.get("end"),
            ) if time_slot else None,
            state=[
                SlotStateEntry(
                    id=strawberry.ID(str(s["id"])),
                    status=s["status"],
                    group_id=_str((s.get("group") or {}).get("id")),
                )
                for s in record.get("state") or []
            ],
        )


@strawberry.type
class SlotEntity:
    """Slot with its id."""
    id: strawberry.ID
    attributes: Slot


@strawberry.type
class SlotEntityResponse:
    """Single slot envelope."""
    data: Optional[SlotEntity] = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "SlotEntityResponse":
        return cls(data=SlotEntity(id=strawberry.ID(str(record["id"])), attributes=Slot.from_record(record)))


@strawberry.type
class NomadRef:
    """Nomad embedded in a power-up."""
    id: strawberry.ID
    name: Optional[str] = None
    phone: Optional[str] = None


@strawberry.type
class PowerUp:
    """Power-up request attributes."""
    name: str
    request_note: Optional[str] = strawberry.field(default=None, name="request_note")
    nomad: Optional[NomadRef] = None
    slot: Optional[SlotEntityResponse] = None
    created_at: Optional[datetime.datetime] = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "PowerUp":
        nomad = record.get("nomad")
        slot = record.get("slot")
        return cls(
            name=record["name"],
            request_note=record.get("request_note"),
            nomad=NomadRef(
                id=strawberry.ID(str(nomad["id"])),
                name=nomad.get("name"),
                phone=nomad.get("phone"),
            ) if nomad else None,
            slot=SlotEntityResponse.from_record(slot) if slot else None,
            created_at=record.get("created_at"),
        )


@strawberry.type
class PowerUpEntity:
    """Power-up with its id."""
    id: strawberry.ID
    attributes: PowerUp


@strawberry.type
class PowerUpEntityResponse:
    """Single power-up envelope."""
    data: Optional[PowerUpEntity] = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "PowerUpEntityResponse":
        return cls(data=PowerUpEntity(id=strawberry.ID(str(record["id"])), attributes=PowerUp.from_record(record)))


@strawberry.input
class PowerUpRequest:
    """Input for requesting a power-up."""
    nomad: strawberry.ID
    contact: strawberry.ID
    slot: strawberry.ID
    name: str
    request_note: Optional[str] = strawberry.field(default=None, name="request_note")

    def to_data(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "nomad": self.nomad,
            "contact": self.contact,
            "slot": self.slot,
            "name": self.name,
        }
        if self.request_note is not None:
            data["request_note"] = self.request_note
        return data


def _str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _id(value: Any) -> Optional[strawberry.ID]:
    return None if value is None else strawberry.ID(str(value))
