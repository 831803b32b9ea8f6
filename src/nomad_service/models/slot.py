"""Slot models: time slots, dated slots and per-group slot state."""

import datetime as dt
from typing import Optional

from sqlalchemy import Boolean, Date, ForeignKey, String, Time
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base
from .location import Group


class TimeSlot(Base):
    """Reusable start/end window of a day."""

    __tablename__ = "time_slots"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(100))
    start: Mapped[dt.time] = mapped_column(Time, nullable=False)
    end: Mapped[Optional[dt.time]] = mapped_column(Time)


class Slot(Base):
    """A time slot on a given date."""

    __tablename__ = "slots"

    id: Mapped[int] = mapped_column(primary_key=True)
    date: Mapped[dt.date] = mapped_column(Date, index=True, nullable=False)
    time_slot_id: Mapped[Optional[int]] = mapped_column(ForeignKey("time_slots.id"))

    time_slot: Mapped[Optional[TimeSlot]] = relationship()
    state: Mapped[list["SlotState"]] = relationship(
        back_populates="slot",
        cascade="all, delete-orphan",
    )


class SlotState(Base):
    """Availability of a slot for one group. status=False means inactive."""

    __tablename__ = "slot_states"

    id: Mapped[int] = mapped_column(primary_key=True)
    status: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    slot_id: Mapped[Optional[int]] = mapped_column(ForeignKey("slots.id", ondelete="CASCADE"))
    group_id: Mapped[Optional[int]] = mapped_column(ForeignKey("groups.id"))

    slot: Mapped[Optional[Slot]] = relationship(back_populates="state")
    group: Mapped[Optional[Group]] = relationship()
