"""
Module: ledger_kernel.db.base
Responsibility: Declarative bases for the ledger's ORM models: string-stored
    UUID keys, Decimal-safe numeric columns and creator/timestamp tracking.
Architecture position: Kernel > DB.  Module ORM files (``ledger_modules.*.orm``)
    subclass ``TrackedBase``; nothing here imports them.

Invariants enforced:
    - Every row gets a uuid4 primary key, so a deleted amendment's id is
      never handed out again.
    - ``Decimal`` annotations map to Numeric(38, 9), the same shape
      ``to_decimal`` enforces, so stored amounts read back unchanged.
    - ``created_by_id`` is NOT NULL on every tracked row.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import BigInteger, DateTime, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from ledger_kernel.domain.values import AMOUNT_PRECISION, AMOUNT_SCALE


class UUIDString(TypeDecorator):
    """UUIDs as 36-character text, readable on PostgreSQL and SQLite alike."""

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else PyUUID(value)


class Base(DeclarativeBase):
    """Root of the ORM hierarchy; supplies the ``id`` column and type map."""

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(AMOUNT_PRECISION, AMOUNT_SCALE),
        datetime: DateTime(timezone=True),
        PyUUID: UUIDString(),
        int: BigInteger,
    }

    id: Mapped[PyUUID] = mapped_column(UUIDString(), primary_key=True, default=uuid4)


class TrackedBase(Base):
    """
    Adds who-and-when columns.

    ``created_at`` falls back to the database clock when the caller leaves
    it unset; amendment intake always sets it from the service Clock.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    created_by_id: Mapped[PyUUID] = mapped_column(UUIDString(), nullable=False)
    updated_by_id: Mapped[PyUUID | None] = mapped_column(UUIDString(), nullable=True)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps read back from backends without tz support."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
