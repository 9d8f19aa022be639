"""
Structured logging -- one JSON object per line for every kernel log call.

Responsibility:
    Owns the ``journal_kernel`` logger namespace.  Renders records as JSON,
    carries request-scoped identifiers (correlation, actor, entry and
    installment ids) across calls without threading them through
    signatures, and installs a single handler on first configuration.

Architecture position:
    Kernel > cross-cutting.  Imported by services, selectors and db; imports
    nothing from the kernel itself.

Invariants enforced:
    - Context fields win over an ``extra`` of the same name.
    - Decimals, dates, UUIDs and enum members render as JSON strings.
    - ``configure_logging`` installs at most one handler per process until
      ``reset_logging`` is called.

Failure modes:
    - None of its own.  Unserializable values fall back to ``str()``.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from enum import Enum
from types import MappingProxyType
from typing import IO, Any, Iterator, Mapping

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

NAMESPACE = "journal_kernel"

_EMPTY: Mapping[str, str] = MappingProxyType({})
_context: ContextVar[Mapping[str, str]] = ContextVar("journal_log_context", default=_EMPTY)


class LogContext:
    """Request-scoped log fields, safe across threads and asyncio tasks."""

    FIELDS = frozenset({"correlation_id", "actor_id", "entry_id", "installment_id"})

    @classmethod
    def _merged(cls, fields: Mapping[str, str | None]) -> Mapping[str, str]:
        current = dict(_context.get())
        current.update(
            (name, value)
            for name, value in fields.items()
            if name in cls.FIELDS and value is not None
        )
        return MappingProxyType(current)

    @classmethod
    def set(
        cls,
        *,
        correlation_id: str | None = None,
        actor_id: str | None = None,
        entry_id: str | None = None,
        installment_id: str | None = None,
    ) -> None:
        """Update the given fields; ``None`` leaves a field as it is."""
        _context.set(
            cls._merged(
                {
                    "correlation_id": correlation_id,
                    "actor_id": actor_id,
                    "entry_id": entry_id,
                    "installment_id": installment_id,
                }
            )
        )

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_context.get())

    @classmethod
    def clear(cls) -> None:
        _context.set(_EMPTY)

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[type[LogContext]]:
        """
        Scope fields to a ``with`` block.

        On exit the context is exactly what it was on entry, including
        fields that were unset.  Names outside ``FIELDS`` are dropped.
        """
        token = _context.set(cls._merged(fields))
        try:
            yield cls
        finally:
            _context.reset(token)


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    # UUID, Decimal and anything else the encoder does not know
    return str(value)


# Attributes every LogRecord carries; anything else on a record came from ``extra``.
_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "taskName"}


class StructuredFormatter(logging.Formatter):
    """Render a record as a JSON line: base fields, context, extras, exception."""

    def format(self, record: logging.LogRecord) -> str:
        payload = self._base(record)
        payload.update(LogContext.get_all())
        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and key not in payload
        )
        if record.exc_info and record.exc_info[1] is not None:
            payload.update(self._exception(record))
        return json.dumps(payload, default=_json_default)

    @staticmethod
    def _base(record: logging.LogRecord) -> dict[str, Any]:
        return {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

    def _exception(self, record: logging.LogRecord) -> dict[str, Any]:
        exc = record.exc_info[1]
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        code = getattr(exc, "code", None)
        if code is not None:
            fields["exc_code"] = code
        # Kernel errors keep their context (entry_id, installment_id, ...) as attributes
        fields.update(
            (f"exc_{name}", value)
            for name, value in vars(exc).items()
            if not name.startswith("_") and name != "code"
        )
        fields["traceback"] = self.formatException(record.exc_info)
        return fields


def get_logger(name: str) -> logging.Logger:
    """Return ``journal_kernel.<name>``."""
    return logging.getLogger(f"{NAMESPACE}.{name}")


_setup_lock = threading.Lock()
_installed: logging.Handler | None = None


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: IO[str] | None = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Send the kernel's logs to ``handler``, or to a stream handler on
    ``stream`` (stderr by default), formatted as JSON.

    Only the first call has an effect.  Records do not propagate to the
    root logger, so host applications see them once.
    """
    global _installed
    with _setup_lock:
        if _installed is not None:
            return
        target = handler or logging.StreamHandler(stream or sys.stderr)
        target.setFormatter(StructuredFormatter())

        kernel_logger = logging.getLogger(NAMESPACE)
        kernel_logger.setLevel(level)
        kernel_logger.propagate = False
        kernel_logger.addHandler(target)
        _installed = target


def reset_logging() -> None:
    """Undo ``configure_logging``.  Used by tests."""
    global _installed
    with _setup_lock:
        kernel_logger = logging.getLogger(NAMESPACE)
        kernel_logger.handlers.clear()
        kernel_logger.setLevel(logging.WARNING)
        kernel_logger.propagate = True
        _installed = None
