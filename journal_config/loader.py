"""
Settings loader (``journal_config.loader``).

Responsibility
--------------
Reads a YAML settings file, validates it section by section and builds the
frozen ``journal_config.schema.Settings``.  Applies environment overrides
on top.  Runtime callers go through ``journal_config.get_settings()``.

Invariants enforced
-------------------
* Unknown sections and unknown keys are rejected, never ignored.
* Every parsed object is a frozen dataclass from ``schema.py``.
* Environment variables win over file values.

Failure modes
-------------
* Missing file, malformed YAML, wrong types, unknown keys, invalid log
  level or timezone -> ``ConfigurationError`` naming the source.
"""

from __future__ import annotations

import logging
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from journal_config.schema import (
    ClockSettings,
    DatabaseSettings,
    LoggingSettings,
    ReportingSettings,
    Settings,
)
from journal_kernel.exceptions import ConfigurationError

ENV_DATABASE_URL = "JOURNAL_KERNEL_DATABASE_URL"
ENV_LOG_LEVEL = "JOURNAL_KERNEL_LOG_LEVEL"
ENV_TIMEZONE = "JOURNAL_KERNEL_TIMEZONE"

_SECTIONS: dict[str, type] = {
    "database": DatabaseSettings,
    "logging": LoggingSettings,
    "clock": ClockSettings,
    "reporting": ReportingSettings,
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        ConfigurationError: if the file is missing, unreadable, not valid
            YAML, or its top level is not a mapping.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigurationError(str(path), f"cannot read file: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(str(path), f"invalid YAML: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    return data


def _parse_section(name: str, data: Any, source: str):
    section_cls = _SECTIONS[name]
    if data is None:
        return section_cls()
    if not isinstance(data, dict):
        raise ConfigurationError(source, f"section '{name}' must be a mapping")

    known = {f.name: f for f in fields(section_cls)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigurationError(
            source, f"unknown key(s) in '{name}': {', '.join(unknown)}"
        )

    defaults = section_cls()
    values: dict[str, Any] = {}
    for key, value in data.items():
        expected = type(getattr(defaults, key))
        # bool is a subclass of int; keep them apart
        if expected is int and isinstance(value, bool):
            raise ConfigurationError(source, f"'{name}.{key}' must be an integer")
        if not isinstance(value, expected):
            raise ConfigurationError(
                source, f"'{name}.{key}' must be of type {expected.__name__}"
            )
        values[key] = value
    return section_cls(**values)


def validate_settings(settings: Settings) -> Settings:
    """Cross-field checks that types alone do not cover."""
    source = settings.source

    if not settings.database.url.strip():
        raise ConfigurationError(source, "'database.url' must not be empty")
    if settings.database.pool_size < 1:
        raise ConfigurationError(source, "'database.pool_size' must be >= 1")
    if settings.database.max_overflow < 0:
        raise ConfigurationError(source, "'database.max_overflow' must be >= 0")

    level = settings.logging.level.upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(source, f"unknown log level: {settings.logging.level!r}")

    try:
        ZoneInfo(settings.clock.timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(
            source, f"unknown timezone: {settings.clock.timezone!r}"
        ) from exc

    if not settings.reporting.property_meta_key.strip():
        raise ConfigurationError(source, "'reporting.property_meta_key' must not be empty")

    return replace(settings, logging=replace(settings.logging, level=level))


def parse_settings(data: Mapping[str, Any], source: str = "<mapping>") -> Settings:
    """
    Build Settings from an already-parsed mapping.

    Raises:
        ConfigurationError: on unknown sections/keys or wrong value types.
    """
    unknown = sorted(set(data) - set(_SECTIONS))
    if unknown:
        raise ConfigurationError(source, f"unknown section(s): {', '.join(unknown)}")

    sections = {name: _parse_section(name, data.get(name), source) for name in _SECTIONS}
    return Settings(source=source, **sections)


def apply_env_overrides(settings: Settings, environ: Mapping[str, str]) -> Settings:
    """Overlay JOURNAL_KERNEL_* environment variables."""
    if environ.get(ENV_DATABASE_URL):
        settings = replace(
            settings, database=replace(settings.database, url=environ[ENV_DATABASE_URL])
        )
    if environ.get(ENV_LOG_LEVEL):
        settings = replace(
            settings, logging=replace(settings.logging, level=environ[ENV_LOG_LEVEL])
        )
    if environ.get(ENV_TIMEZONE):
        settings = replace(
            settings, clock=replace(settings.clock, timezone=environ[ENV_TIMEZONE])
        )
    return settings


def load_settings(path: Path, environ: Mapping[str, str] | None = None) -> Settings:
    """Load, override and validate settings from ``path``."""
    settings = parse_settings(load_yaml_file(path), source=str(path))
    if environ is not None:
        settings = apply_env_overrides(settings, environ)
    return validate_settings(settings)
