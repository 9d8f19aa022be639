"""
JournalEntryStateService -- persists derived journal entry statuses.

Responsibility:
    Applies domain.entry_state.derive_status to an entry, validates the
    resulting transition against the state machine, writes it when it
    differs and announces the change.

Architecture position:
    Kernel > Services -- imperative shell around the pure derivation.
    Flush-only; called inside the payment unit of work and by the overdue
    maintenance batch.

Invariants enforced:
    - cancelled is absorbing: sync never moves an entry out of it.
    - Writes happen only when the derived status differs from the stored one.
    - sync is total: the installments decide.  A paid entry whose
      installments were reopened moves back to pending or overdue; the move
      is logged as a warning because it leaves VALID_TRANSITIONS.
    - "today" comes from the injected Clock, never from the system directly.

Failure modes:
    - None of its own.  Flush errors propagate to the caller.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from journal_kernel.domain.clock import Clock, SystemClock
from journal_kernel.domain.entry_state import EntryState, derive_status
from journal_kernel.domain.events import EntryStatusChanged
from journal_kernel.domain.status import JournalEntryStatus
from journal_kernel.logging_config import get_logger
from journal_kernel.models.journal import JournalEntry
from journal_kernel.services.base import BaseService
from journal_kernel.services.event_dispatcher import EventDispatcher

logger = get_logger("services.entry_state")


class JournalEntryStateService(BaseService[JournalEntry]):
    """
    Keeps an entry's stored status equal to the status its installments imply.

    Contract:
        ``sync`` is safe to call any number of times; with unchanged data and
        the same day it writes at most once.

    Non-goals:
        - Does NOT cancel entries.  Cancellation belongs to the surrounding
          application and is only honored here.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        dispatcher: EventDispatcher | None = None,
    ):
        super().__init__(session)
        self._clock = clock or SystemClock()
        self._dispatcher = dispatcher

    def derive(self, entry: JournalEntry, today: date | None = None) -> JournalEntryStatus:
        """Status the entry should hold, without writing anything."""
        return derive_status(EntryState.of(entry), today or self._clock.today())

    def sync(
        self,
        entry: JournalEntry,
        previous_status: JournalEntryStatus | None = None,
        today: date | None = None,
    ) -> JournalEntryStatus:
        """
        Recompute and persist ``entry``'s status.

        Args:
            entry: Entry with its installments loaded.
            previous_status: Status observed by the caller before its own
                mutation.  Only used for the change event and logs.
            today: Reference day; defaults to the clock's today.

        Returns:
            The entry's status after the call.
        """
        current = entry.status
        target = self.derive(entry, today)

        if target == current:
            logger.debug(
                "entry_status_unchanged",
                extra={"entry_id": entry.id, "status": current},
            )
            return current

        if not current.can_transition_to(target):
            logger.warning(
                "entry_status_reopened",
                extra={"entry_id": entry.id, "from_status": current, "to_status": target},
            )

        entry.status = target
        self.session.flush()

        from_status = previous_status or current
        logger.info(
            "entry_status_changed",
            extra={
                "entry_id": entry.id,
                "from_status": from_status,
                "to_status": target,
            },
        )

        if self._dispatcher is not None:
            self._dispatcher.enqueue(
                self.session,
                EntryStatusChanged(
                    occurred_at=self._clock.now(),
                    entry_id=entry.id,
                    from_status=from_status,
                    to_status=target,
                ),
            )
        return target

    def refresh_overdue(self, as_of: date | None = None) -> list[int]:
        """
        Re-derive every non-terminal entry as of ``as_of`` (default: today).

        Entries that change are written; the caller commits.

        Returns:
            Ids of the entries whose status changed.
        """
        today = as_of or self._clock.today()
        open_statuses = [s for s in JournalEntryStatus if not s.is_terminal]
        entries = self.session.scalars(
            select(JournalEntry)
            .where(JournalEntry.status.in_(open_statuses))
            .order_by(JournalEntry.id)
        ).all()

        changed: list[int] = []
        for entry in entries:
            before = entry.status
            if self.sync(entry, today=today) != before:
                changed.append(entry.id)

        logger.info(
            "overdue_refresh_completed",
            extra={
                "as_of": today,
                "entries_checked": len(entries),
                "entries_changed": len(changed),
            },
        )
        return changed
