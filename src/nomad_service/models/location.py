"""Location hierarchy models: region, district, group, location."""

from typing import Optional

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base


class Region(Base):
    """Top-level geographic region."""

    __tablename__ = "regions"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)


class District(Base):
    """District inside a region."""

    __tablename__ = "districts"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    region_id: Mapped[Optional[int]] = mapped_column(ForeignKey("regions.id"))

    region: Mapped[Optional[Region]] = relationship()


class Group(Base):
    """Group of locations sharing one slot schedule."""

    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)


class Location(Base):
    """Location a nomad is attached to."""

    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    district_id: Mapped[Optional[int]] = mapped_column(ForeignKey("districts.id"))
    group_id: Mapped[Optional[int]] = mapped_column(ForeignKey("groups.id"))

    district: Mapped[Optional[District]] = relationship()
    group: Mapped[Optional[Group]] = relationship()
