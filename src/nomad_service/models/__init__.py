"""SQLAlchemy models and the collection registry."""

from ..exceptions import UnknownCollectionError
from ..database import Base
from .location import District, Group, Location, Region
from .nomad import Nomad
from .power_up import Notification, PowerUp
from .slot import Slot, SlotState, TimeSlot

# Collection name -> model
COLLECTIONS: dict[str, type[Base]] = {
    "region": Region,
    "district": District,
    "group": Group,
    "location": Location,
    "nomad": Nomad,
    "time-slot": TimeSlot,
    "slot": Slot,
    "slot-state": SlotState,
    "power-up": PowerUp,
    "notification": Notification,
}


def collection_uid(name: str) -> str:
    """Full UID of a collection, e.g. ``api::slot.slot``."""
    return f"api::{name}.{name}"


def resolve_collection(collection: str) -> type[Base]:
    """Resolve a collection name or UID to its model."""
    name = collection
    if collection.startswith("api::"):
        name = collection[len("api::"):].split(".", 1)[0]
    try:
        return COLLECTIONS[name]
    except KeyError:
        raise UnknownCollectionError(
            f"Unknown collection: {collection}",
            {"collection": collection, "known": sorted(COLLECTIONS)},
        ) from None


__all__ = [
    "COLLECTIONS",
    "collection_uid",
    "resolve_collection",
    "Region",
    "District",
    "Group",
    "Location",
    "Nomad",
    "TimeSlot",
    "Slot",
    "SlotState",
    "PowerUp",
    "Notification",
]
