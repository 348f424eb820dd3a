"""SQLAlchemy ORM models owned by Coffees Service."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import declarative_base, relationship

metadata = MetaData()
Base = declarative_base(metadata=metadata)


def _utcnow() -> datetime:
    """Return the current UTC timestamp for Python-side defaults."""
    return datetime.now(UTC)


coffees_flavors = Table(
    "coffees_flavors",
    metadata,
    Column(
        "coffee_id",
        Integer,
        ForeignKey("coffees.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "flavor_id",
        Integer,
        ForeignKey("flavors.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Flavor(Base):
    """Flavor shared by many coffees; unique by name."""

    __tablename__ = "flavors"
    __table_args__ = (UniqueConstraint("name", name="uq_flavors_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(128), nullable=False)


class Coffee(Base):
    """Coffee with an owned many-to-many link to flavors."""

    __tablename__ = "coffees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(256), nullable=False)
    brand = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    recommendations = Column(Integer, nullable=False, default=0, server_default="0")

    flavors = relationship(
        Flavor,
        secondary=coffees_flavors,
        order_by=Flavor.id,
    )


class Event(Base):
    """Insert-only audit record."""

    __tablename__ = "events"
    __table_args__ = (Index("ix_events_name_type", "name", "type"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(128), nullable=False, index=True)
    type = Column(String(64), nullable=False)
    payload = Column(JSON, nullable=False, default=dict)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
