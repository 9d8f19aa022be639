"""
InstallmentLedgerService -- installment schedule of a journal entry.

Responsibility:
    Appends installments to an entry's payment schedule and answers
    schedule questions needed before a payment (ordered listing, "has at
    least one installment").

Architecture position:
    Kernel > Services -- imperative shell.  Flush-only (see BaseService).

Invariants enforced:
    - A new installment is open (status PENDING) with zero penalty,
      interest and discount, and takes the next sequential number.
    - Installment amounts are non-negative two-place Decimals.
    - Installments are listed in ascending id order.

Failure modes:
    - InvalidAmountError: negative or non-numeric amount.
    - EmptyScheduleError: ensure_schedule() on an entry with no installments.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from sqlalchemy import func, select

from journal_kernel.db.types import ZERO
from journal_kernel.domain.status import JournalEntryStatus
from journal_kernel.domain.values import AmountLike, to_amount, to_calendar_date
from journal_kernel.exceptions import EmptyScheduleError
from journal_kernel.logging_config import get_logger
from journal_kernel.models.journal import JournalEntry, JournalEntryInstallment
from journal_kernel.services.base import BaseService

logger = get_logger("services.installment_ledger")


class InstallmentLedgerService(BaseService[JournalEntryInstallment]):
    """Schedule maintenance for journal entries."""

    def add_installment(
        self,
        entry: JournalEntry,
        due_date: date | datetime | str,
        amount: AmountLike,
        meta: dict[str, Any] | None = None,
    ) -> JournalEntryInstallment:
        """
        Append an open installment to ``entry``'s schedule.

        The entry must already be flushed (it needs an id).  The new
        installment is flushed before returning.
        """
        if entry.id is None:
            self.session.flush()

        next_number = self.session.scalar(
            select(func.coalesce(func.max(JournalEntryInstallment.number), 0)).where(
                JournalEntryInstallment.journal_entry_id == entry.id
            )
        ) + 1

        installment = JournalEntryInstallment(
            journal_entry=entry,
            number=next_number,
            amount=to_amount(amount),
            due_date=to_calendar_date(due_date),
            status=JournalEntryStatus.PENDING,
            penalty_amount=ZERO,
            interest_amount=ZERO,
            discount_amount=ZERO,
            meta=dict(meta) if meta else None,
        )
        self.session.add(installment)
        self.session.flush()

        logger.info(
            "installment_added",
            extra={
                "entry_id": entry.id,
                "installment_id": installment.id,
                "installment_number": next_number,
                "amount": installment.amount,
                "due_date": installment.due_date,
            },
        )
        return installment

    def installments_for(self, entry_id: int) -> list[JournalEntryInstallment]:
        """All installments of an entry, oldest first."""
        return list(
            self.session.scalars(
                select(JournalEntryInstallment)
                .where(JournalEntryInstallment.journal_entry_id == entry_id)
                .order_by(JournalEntryInstallment.id)
            )
        )

    def ensure_schedule(self, entry: JournalEntry) -> list[JournalEntryInstallment]:
        """
        Return the entry's installments, refusing an empty schedule.

        Raises:
            EmptyScheduleError: If the entry has no installments.
        """
        installments = self.installments_for(entry.id)
        if not installments:
            raise EmptyScheduleError(entry.id)
        return installments
