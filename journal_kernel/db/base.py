"""
Module: journal_kernel.db.base
Responsibility: Declarative base classes for all SQLAlchemy ORM models.
    Provides the integer primary key convention, the type annotation map for
    consistent column types, and the TrackedBase mixin for audit timestamps.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the kernel.  ALL model files import from here.  This module MUST NOT
    import from models/, services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - Ascending integer primary keys.  Ledger rows break movement-date ties
      on id and the property-label fallback reads the first installment by
      id, so ids must follow insertion order.
    - Decimal precision: type_annotation_map maps Python Decimal to
      Numeric(18, 2).  NEVER use float for monetary amounts.
    - Audit timestamps: TrackedBase provides created_at and updated_at.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import BigInteger, Date, DateTime, Integer, Numeric, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# SQLite only autoincrements INTEGER PRIMARY KEY columns
Identifier = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Contract:
        Every ORM model in the system inherits from Base (or TrackedBase).
        Base provides an autoincrement integer primary key and a
        type_annotation_map that enforces consistent column types across the
        entire schema.

    Guarantees:
        - id is a database-generated, ascending integer.
        - Decimal maps to Numeric(18, 2).
        - datetime maps to DateTime(timezone=True).
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(18, 2),
        datetime: DateTime(timezone=True),
        date: Date,
        int: Identifier,
    }

    id: Mapped[int] = mapped_column(
        Identifier,
        primary_key=True,
        autoincrement=True,
    )


class TrackedBase(Base):
    """
    Abstract base with audit timestamps.

    Guarantees:
        - created_at is set to server NOW() on INSERT and never changes.
        - updated_at is set on INSERT and auto-updates on every UPDATE.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
