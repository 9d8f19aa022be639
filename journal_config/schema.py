"""
Settings schema.

Typed, immutable settings for the journal kernel's runtime: database
connection, logging, the timezone that defines "today", and report
wording.  YAML files are parsed into these types by the loader.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection parameters passed to init_engine_from_url()."""

    url: str = "sqlite:///journal_kernel.db"
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class ClockSettings:
    """The calendar day used by status derivation is taken in this zone."""

    timezone: str = "UTC"


@dataclass(frozen=True)
class ReportingSettings:
    all_accounts_label: str = "Todos os bancos"
    property_meta_key: str = "property_label"


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Settings:
    """Complete runtime settings."""

    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    clock: ClockSettings = field(default_factory=ClockSettings)
    reporting: ReportingSettings = field(default_factory=ReportingSettings)
    source: str = "<defaults>"
