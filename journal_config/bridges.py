"""
Config -> Kernel Bridges.

Functions that turn Settings into kernel objects.  These live in
journal_config (the producer) because the kernel must NEVER import
journal_config.

Usage:
    from journal_config import get_settings
    from journal_config.bridges import build_clock, init_engine, init_logging

    settings = get_settings()
    init_logging(settings)
    engine = init_engine(settings)
    clock = build_clock(settings)
"""

from __future__ import annotations

from sqlalchemy.engine import Engine

from journal_config.schema import Settings
from journal_kernel.db.engine import init_engine_from_url
from journal_kernel.domain.clock import SystemClock
from journal_kernel.logging_config import configure_logging
from journal_kernel.selectors.ledger_selector import BankLedgerSelector


def init_logging(settings: Settings) -> None:
    configure_logging(level=settings.logging.level)


def init_engine(settings: Settings) -> Engine:
    db = settings.database
    return init_engine_from_url(
        db.url,
        echo=db.echo,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
    )


def build_clock(settings: Settings) -> SystemClock:
    """System clock whose today() is the calendar day in the configured zone."""
    return SystemClock(tz=settings.clock.timezone)


def build_ledger_selector(session, settings: Settings) -> BankLedgerSelector:
    return BankLedgerSelector(
        session,
        all_accounts_label=settings.reporting.all_accounts_label,
        property_meta_key=settings.reporting.property_meta_key,
    )
