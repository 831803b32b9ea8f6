"""Nomad (contact) model."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base
from .location import Location


class Nomad(Base):
    """A contact, with per-record visibility flags."""

    __tablename__ = "nomads"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), index=True)
    location_id: Mapped[Optional[int]] = mapped_column(ForeignKey("locations.id"))
    last_active: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    # Visibility
    hide_location: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    hide_activity: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    location: Mapped[Optional[Location]] = relationship()
