"""
journal_config -- single public entrypoint for runtime settings.

Responsibility:
    Provides the ONLY way to obtain settings at runtime through
    ``get_settings()``: database connection, log level, the timezone that
    defines "today", and report wording.

Architecture position:
    Configuration.  This package sits above ``journal_kernel``.  The kernel
    MUST NEVER import from ``journal_config``; ``journal_config.bridges``
    turns settings into kernel inputs (engine, logging, clock).

Invariants enforced:
    - Single entrypoint: scripts and applications read settings through
      ``get_settings()`` only.
    - Environment variables override file values.
    - The returned Settings are frozen and validated.

Failure modes:
    - ``ConfigurationError`` -- missing file, malformed YAML, unknown keys,
      wrong types, unknown log level or timezone.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

from journal_config.loader import load_settings
from journal_config.schema import Settings

_logger = logging.getLogger("journal_kernel.config")

# Default settings directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"
DEFAULT_SETTINGS_PATH = _DEFAULT_CONFIG_DIR / "default.yaml"


def get_settings(
    path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """The ONLY public settings entrypoint.

    Args:
        path: YAML settings file.  Defaults to ``sets/default.yaml``.
        environ: Environment used for overrides.  Defaults to ``os.environ``.

    Raises:
        ConfigurationError: If the file is missing or invalid.
    """
    settings_path = Path(path) if path is not None else DEFAULT_SETTINGS_PATH
    settings = load_settings(settings_path, os.environ if environ is None else environ)

    _logger.info(
        "journal_config_loaded",
        extra={
            "source": settings.source,
            "log_level": settings.logging.level,
            "timezone": settings.clock.timezone,
        },
    )
    return settings


__all__ = ["DEFAULT_SETTINGS_PATH", "Settings", "get_settings"]
