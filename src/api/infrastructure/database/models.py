"""Declarative base for the tenant store's ORM models.

Every ``Mapped[datetime]`` column maps to ``TIMESTAMP WITH TIME ZONE``;
naive datetimes are never written.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utc_now() -> datetime:
    """Current UTC time, used as an INSERT/UPDATE default."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for the tenants and outbox tables."""

    type_annotation_map: dict[type, Any] = {
        datetime: DateTime(timezone=True),
    }


class TimestampMixin:
    """created_at / updated_at columns.

    The tenant aggregate stamps both values itself; the defaults only
    apply to rows inserted outside the domain layer (fixtures, manual
    repairs).
    """

    created_at: Mapped[datetime] = mapped_column(insert_default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        insert_default=_utc_now,
        onupdate=_utc_now,
    )
