"""Power-up request and notification models."""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base
from .nomad import Nomad
from .slot import Slot


class PowerUp(Base):
    """Request from a nomad to a contact for a power-up in a slot."""

    __tablename__ = "power_ups"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    request_note: Mapped[Optional[str]] = mapped_column(Text)
    nomad_id: Mapped[Optional[int]] = mapped_column(ForeignKey("nomads.id"))
    contact_id: Mapped[Optional[int]] = mapped_column(ForeignKey("nomads.id"))
    slot_id: Mapped[Optional[int]] = mapped_column(ForeignKey("slots.id"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    nomad: Mapped[Optional[Nomad]] = relationship(foreign_keys=[nomad_id])
    contact: Mapped[Optional[Nomad]] = relationship(foreign_keys=[contact_id])
    slot: Mapped[Optional[Slot]] = relationship()


class Notification(Base):
    """Message addressed to a nomad."""

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(primary_key=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    meta: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON)
    nomad_id: Mapped[Optional[int]] = mapped_column(ForeignKey("nomads.id"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    nomad: Mapped[Optional[Nomad]] = relationship()
