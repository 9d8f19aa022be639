"""Database layer - engine, base classes and column types."""

from journal_kernel.db.base import Base, TrackedBase
from journal_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    get_session_factory,
    session_scope,
)
from journal_kernel.db.types import MONEY_DECIMAL_PLACES, round_money

__all__ = [
    "get_engine",
    "get_session",
    "get_session_factory",
    "session_scope",
    "create_tables",
    "Base",
    "TrackedBase",
    "MONEY_DECIMAL_PLACES",
    "round_money",
]
