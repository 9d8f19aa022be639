"""
InstallmentPaymentService -- pays one installment and re-derives its entry.

Responsibility:
    Marks an open installment as paid (payment date, optional penalty,
    interest and discount) and brings the parent journal entry's status in
    line, as a single unit of work.

Architecture position:
    Kernel > Services -- imperative shell, orchestrator.  Consumes
    JournalEntryStateService and EventDispatcher.  Owns the transaction
    boundary when ``auto_commit=True``.

Invariants enforced:
    - Payment exclusivity: an installment is paid at most once.  The row is
      locked (SELECT ... FOR UPDATE) and the write is a conditional UPDATE
      guarded by ``status <> 'paid'``; of two concurrent payments exactly one
      updates a row, the other fails with InstallmentAlreadySettledError.
    - Cancelled entries never have installments paid.
    - Atomicity: installment update and entry status sync commit together
      or not at all.
    - Amounts not supplied keep their stored values; payment_date keeps
      calendar-date precision only.
    - Events are published only after COMMIT.

Failure modes:
    - InstallmentNotFoundError: unknown installment id.
    - InstallmentAlreadySettledError: installment already paid (checked
      before any write and again under the lock).
    - EntryCancelledError: parent entry is cancelled.
    - InvalidAmountError: negative or non-numeric penalty/interest/discount.
    - TransactionFailureError: the database aborted the transaction.  The
      driver error is chained as ``__cause__``.  Never retried here.
"""

from __future__ import annotations

import time
from datetime import date, datetime
from uuid import uuid4

from sqlalchemy import select, update
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, selectinload

from journal_kernel.domain.clock import Clock, SystemClock
from journal_kernel.domain.events import InstallmentPaid
from journal_kernel.domain.status import JournalEntryStatus
from journal_kernel.domain.values import (
    AmountLike,
    to_calendar_date,
    to_optional_amount,
)
from journal_kernel.exceptions import (
    EntryCancelledError,
    InstallmentAlreadySettledError,
    InstallmentNotFoundError,
    TransactionFailureError,
)
from journal_kernel.logging_config import LogContext, get_logger
from journal_kernel.models.journal import JournalEntry, JournalEntryInstallment
from journal_kernel.services.entry_state_service import JournalEntryStateService
from journal_kernel.services.event_dispatcher import EventDispatcher

logger = get_logger("services.payment")


class InstallmentPaymentService:
    """
    Orchestrates installment payment.

    Contract:
        ``pay`` either returns the paid installment with its entry re-synced
        and committed, or raises with nothing applied.

    Guarantees:
        - Commit on success, rollback on failure (when auto_commit=True).
          With auto_commit=False the caller owns commit/rollback and the
          service only flushes.

    Non-goals:
        - Does NOT retry on TransactionFailureError.
        - Does NOT check permissions or validate HTTP input.
    """

    def __init__(
        self,
        session: Session,
        state_service: JournalEntryStateService | None = None,
        clock: Clock | None = None,
        dispatcher: EventDispatcher | None = None,
        auto_commit: bool = True,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._dispatcher = dispatcher
        self._state_service = state_service or JournalEntryStateService(
            session, clock=self._clock, dispatcher=dispatcher
        )
        self._auto_commit = auto_commit

    def pay(
        self,
        installment_id: int,
        payment_date: date | datetime | str,
        penalty: AmountLike | None = None,
        interest: AmountLike | None = None,
        discount: AmountLike | None = None,
    ) -> JournalEntryInstallment:
        """
        Pay one installment.

        Args:
            installment_id: Installment to settle.
            payment_date: Settlement date; a datetime loses its time of day.
            penalty: Late-payment penalty; None keeps the stored value.
            interest: Interest charged; None keeps the stored value.
            discount: Discount granted; None keeps the stored value.

        Returns:
            The paid installment, refreshed from the database.
        """
        correlation_id = str(uuid4())
        with LogContext.bind(
            correlation_id=correlation_id,
            installment_id=str(installment_id),
        ):
            logger.info("installment_payment_started")
            t0 = time.monotonic()

            try:
                installment = self._do_pay(
                    installment_id,
                    payment_date=payment_date,
                    penalty=penalty,
                    interest=interest,
                    discount=discount,
                )

                if self._auto_commit:
                    self._session.commit()

                duration_ms = round((time.monotonic() - t0) * 1000, 2)
                logger.info(
                    "installment_payment_completed",
                    extra={
                        "entry_id": installment.journal_entry_id,
                        "payment_date": installment.payment_date,
                        "duration_ms": duration_ms,
                    },
                )
                return installment

            except DBAPIError as exc:
                if self._auto_commit:
                    self._session.rollback()
                logger.error(
                    "installment_payment_transaction_failed",
                    extra={"duration_ms": round((time.monotonic() - t0) * 1000, 2)},
                    exc_info=True,
                )
                raise TransactionFailureError("pay_installment", exc) from exc

            except Exception:
                if self._auto_commit:
                    self._session.rollback()
                logger.warning(
                    "installment_payment_rejected",
                    extra={"duration_ms": round((time.monotonic() - t0) * 1000, 2)},
                    exc_info=True,
                )
                raise

    def _do_pay(
        self,
        installment_id: int,
        payment_date: date | datetime | str,
        penalty: AmountLike | None,
        interest: AmountLike | None,
        discount: AmountLike | None,
    ) -> JournalEntryInstallment:
        paid_on = to_calendar_date(payment_date)
        adjustments = {
            "penalty_amount": to_optional_amount(penalty, "penalty"),
            "interest_amount": to_optional_amount(interest, "interest"),
            "discount_amount": to_optional_amount(discount, "discount"),
        }

        installment = self._session.execute(
            select(JournalEntryInstallment)
            .where(JournalEntryInstallment.id == installment_id)
            .options(
                selectinload(JournalEntryInstallment.journal_entry).selectinload(
                    JournalEntry.installments
                )
            )
        ).scalar_one_or_none()

        if installment is None:
            raise InstallmentNotFoundError(installment_id)

        entry = installment.journal_entry

        if installment.is_paid:
            raise InstallmentAlreadySettledError(installment.id, installment.payment_date)
        if entry.is_cancelled:
            raise EntryCancelledError(entry.id, installment.id)

        previous_status = entry.status

        # Lock, then re-read: another transaction may have paid it meanwhile.
        locked = self._session.execute(
            select(JournalEntryInstallment)
            .where(JournalEntryInstallment.id == installment_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one()
        if locked.is_paid:
            raise InstallmentAlreadySettledError(locked.id, locked.payment_date)

        values = {
            "payment_date": paid_on,
            "status": JournalEntryStatus.PAID,
        }
        values.update({k: v for k, v in adjustments.items() if v is not None})

        result = self._session.execute(
            update(JournalEntryInstallment)
            .where(
                JournalEntryInstallment.id == installment_id,
                JournalEntryInstallment.status != JournalEntryStatus.PAID,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise InstallmentAlreadySettledError(installment_id)

        self._session.refresh(locked)

        if self._dispatcher is not None:
            self._dispatcher.enqueue(
                self._session,
                InstallmentPaid(
                    occurred_at=self._clock.now(),
                    installment_id=locked.id,
                    entry_id=locked.journal_entry_id,
                    payment_date=paid_on,
                    amount=locked.amount,
                    penalty_amount=locked.penalty_amount,
                    interest_amount=locked.interest_amount,
                    discount_amount=locked.discount_amount,
                ),
            )

        entry = self._session.execute(
            select(JournalEntry)
            .where(JournalEntry.id == locked.journal_entry_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one()
        if entry.is_cancelled:
            raise EntryCancelledError(entry.id, locked.id)

        with LogContext.bind(entry_id=str(entry.id)):
            new_status = self._state_service.sync(entry, previous_status)

            logger.info(
                "installment_paid",
                extra={
                    "payment_date": paid_on,
                    "amount": locked.amount,
                    "penalty_amount": locked.penalty_amount,
                    "interest_amount": locked.interest_amount,
                    "discount_amount": locked.discount_amount,
                    "entry_status": new_status,
                },
            )

        return locked
