"""
EventDispatcher -- post-commit publication of domain events.

Responsibility:
    Routes DomainEvent instances to subscribed handlers, and holds events
    produced inside a unit of work until that unit commits.

Architecture position:
    Kernel > Services -- imperative shell.  Services call ``enqueue`` while
    they mutate; SQLAlchemy session hooks call ``publish`` after COMMIT and
    drop the queue after ROLLBACK.

Invariants enforced:
    - Nothing is published for a transaction that did not commit.
    - Events are published in the order they were enqueued.
    - A failing handler is logged and skipped; it never reaches the caller
      and never undoes a committed payment.

Failure modes:
    - None propagated.  Handler exceptions are logged as
      ``event_handler_failed`` with the event type and handler name.
"""

from __future__ import annotations

from collections import defaultdict
from threading import RLock
from typing import Callable

from sqlalchemy import event
from sqlalchemy.orm import Session

from journal_kernel.domain.events import DomainEvent
from journal_kernel.logging_config import get_logger

logger = get_logger("services.event_dispatcher")

EventHandler = Callable[[DomainEvent], None]

_PENDING_KEY = "journal_kernel.pending_events"
_DISPATCHER_KEY = "journal_kernel.event_dispatcher"


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class EventDispatcher:
    """Publish/subscribe registry keyed by event class."""

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(list)
        self._global_handlers: list[EventHandler] = []
        self._lock = RLock()

    def subscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        with self._lock:
            self._handlers[event_type].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        with self._lock:
            self._global_handlers.append(handler)

    def unsubscribe(self, event_type: type[DomainEvent], handler: EventHandler) -> None:
        with self._lock:
            try:
                self._handlers[event_type].remove(handler)
            except ValueError:
                logger.warning(
                    "event_handler_not_subscribed",
                    extra={
                        "event_type": event_type.__name__,
                        "handler": _handler_name(handler),
                    },
                )

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()
            self._global_handlers.clear()

    def publish(self, domain_event: DomainEvent) -> None:
        """Deliver one event to its specific handlers, then to global ones."""
        with self._lock:
            handlers = list(self._handlers.get(type(domain_event), []))
            handlers.extend(self._global_handlers)

        logger.debug(
            "event_published",
            extra={
                "event_type": domain_event.event_type,
                "event_id": str(domain_event.event_id),
                "handler_count": len(handlers),
            },
        )

        for handler in handlers:
            try:
                handler(domain_event)
            except Exception:
                logger.exception(
                    "event_handler_failed",
                    extra={
                        "event_type": domain_event.event_type,
                        "event_id": str(domain_event.event_id),
                        "handler": _handler_name(handler),
                    },
                )

    # ------------------------------------------------------------------
    # Session-bound outbox
    # ------------------------------------------------------------------

    def enqueue(self, session: Session, domain_event: DomainEvent) -> None:
        """
        Hold an event until ``session`` commits.

        The first enqueue on a session binds this dispatcher to it; the
        commit/rollback hooks are registered once per session.
        """
        bound = session.info.get(_DISPATCHER_KEY)
        if bound is None:
            session.info[_DISPATCHER_KEY] = self
            if not event.contains(session, "after_commit", _publish_pending):
                event.listen(session, "after_commit", _publish_pending)
                event.listen(session, "after_rollback", _discard_pending)
        elif bound is not self:
            bound.enqueue(session, domain_event)
            return

        session.info.setdefault(_PENDING_KEY, []).append(domain_event)


def pending_events(session: Session) -> list[DomainEvent]:
    """Events waiting for the current transaction of ``session`` to commit."""
    return list(session.info.get(_PENDING_KEY, ()))


def _publish_pending(session: Session) -> None:
    pending = session.info.pop(_PENDING_KEY, None)
    dispatcher = session.info.get(_DISPATCHER_KEY)
    if not pending or dispatcher is None:
        return
    for domain_event in pending:
        dispatcher.publish(domain_event)


def _discard_pending(session: Session) -> None:
    dropped = session.info.pop(_PENDING_KEY, None)
    if dropped:
        logger.info(
            "pending_events_discarded",
            extra={"event_count": len(dropped)},
        )
