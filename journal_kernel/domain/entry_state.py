"""
Entry state -- pure status derivation for journal entries.

Responsibility:
    Computes the status a journal entry should hold from its installments,
    its own dates and the current calendar day.  The service layer decides
    whether and how to persist the result.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Receives "today" as
    an argument; never reads the clock itself.

Rules, applied in order:
    1. cancelled stays cancelled (absorbing).
    2. every installment paid -> paid.
    3. any open installment strictly past its due date -> overdue.
    4. otherwise pending; planned is kept while the entry is still planned,
       nothing has been paid and the movement date is in the future.

    An entry without installments is judged on its own due date: overdue
    when past, otherwise rule 4.

Time dependence:
    Rules 3 and 4 compare against ``today``, so the same stored state can
    derive a different status on a later day.  This is intended: an unpaid
    installment becomes overdue without any write.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from journal_kernel.domain.status import JournalEntryStatus


@dataclass(frozen=True)
class InstallmentState:
    """The two facts about an installment that status derivation reads."""

    due_date: date
    is_paid: bool

    @classmethod
    def of(cls, installment) -> InstallmentState:
        return cls(due_date=installment.due_date, is_paid=installment.is_paid)


@dataclass(frozen=True)
class EntryState:
    """Snapshot of everything ``derive_status`` depends on."""

    current_status: JournalEntryStatus
    movement_date: date
    due_date: date | None
    installments: tuple[InstallmentState, ...]

    @classmethod
    def of(cls, entry) -> EntryState:
        return cls(
            current_status=entry.status,
            movement_date=entry.movement_date,
            due_date=entry.due_date,
            installments=tuple(InstallmentState.of(i) for i in entry.installments),
        )


def _any_overdue(installments: Iterable[InstallmentState], today: date) -> bool:
    return any(not i.is_paid and i.due_date < today for i in installments)


def derive_status(state: EntryState, today: date) -> JournalEntryStatus:
    """
    Derive an entry's status.

    Postconditions:
        Deterministic: the same ``state`` and ``today`` always yield the same
        status, and feeding the result back as ``current_status`` yields it
        again (idempotent).
    """
    if state.current_status == JournalEntryStatus.CANCELLED:
        return JournalEntryStatus.CANCELLED

    installments = state.installments

    if installments:
        if all(i.is_paid for i in installments):
            return JournalEntryStatus.PAID
        if _any_overdue(installments, today):
            return JournalEntryStatus.OVERDUE
    elif state.due_date is not None and state.due_date < today:
        return JournalEntryStatus.OVERDUE

    nothing_paid = not any(i.is_paid for i in installments)
    if (
        state.current_status == JournalEntryStatus.PLANNED
        and nothing_paid
        and state.movement_date > today
    ):
        return JournalEntryStatus.PLANNED

    return JournalEntryStatus.PENDING
