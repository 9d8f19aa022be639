"""
Module: journal_kernel.selectors.journal_selector
Responsibility: Read-only access to journal entries and their installments
    for listings and detail views.  Converts ORM models to DTOs.
Architecture position: Kernel > Selectors.  May import from models/,
    domain/ and selectors/.

Invariants enforced:
    - Read-only: no mutations performed on any queried data.
    - Installments are listed in ascending id order.
    - Listing totals sum unsigned amounts per type; transfers are in neither.

Failure modes:
    - get_entry/get_installment return None when the id does not exist.
    - require_entry raises EntryNotFoundError instead.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from journal_kernel.db.types import ZERO, round_money
from journal_kernel.domain.status import (
    JournalEntryStatus,
    JournalEntryType,
    StatusCategory,
)
from journal_kernel.exceptions import EntryNotFoundError
from journal_kernel.models.journal import JournalEntry, JournalEntryInstallment
from journal_kernel.selectors.base import BaseSelector
from journal_kernel.selectors.criteria import LedgerCriteria, apply_criteria


@dataclass
class InstallmentDTO:
    """Data transfer object for an installment."""

    id: int
    journal_entry_id: int
    number: int
    amount: Decimal
    due_date: date
    payment_date: date | None
    status: JournalEntryStatus
    penalty_amount: Decimal
    interest_amount: Decimal
    discount_amount: Decimal
    meta: dict | None

    @property
    def is_paid(self) -> bool:
        return self.status == JournalEntryStatus.PAID

    @property
    def settled_amount(self) -> Decimal:
        """amount + penalty + interest - discount."""
        return round_money(
            self.amount + self.penalty_amount + self.interest_amount - self.discount_amount
        )


@dataclass
class JournalEntryDTO:
    """Data transfer object for a journal entry."""

    id: int
    type: JournalEntryType
    status: JournalEntryStatus
    amount: Decimal
    movement_date: date
    due_date: date | None
    description: str | None
    notes: str | None
    reference_code: str | None
    bank_account_id: int
    counter_bank_account_id: int | None
    cost_center_id: int | None
    person_id: int | None
    property_id: int | None
    installments: list[InstallmentDTO]

    @property
    def status_label(self) -> str:
        return self.status.label(self.type)

    @property
    def status_category(self) -> StatusCategory:
        return self.status.category

    @property
    def signed_amount(self) -> Decimal:
        return self.amount * self.type.sign


@dataclass
class SummaryTotals:
    """Income, expense and their difference for a listing."""

    income: Decimal
    expense: Decimal
    balance: Decimal


class JournalSelector(BaseSelector[JournalEntry]):
    """Selector for journal entry listings and detail views."""

    def __init__(self, session: Session):
        super().__init__(session)

    def _installment_dto(self, installment: JournalEntryInstallment) -> InstallmentDTO:
        return InstallmentDTO(
            id=installment.id,
            journal_entry_id=installment.journal_entry_id,
            number=installment.number,
            amount=installment.amount,
            due_date=installment.due_date,
            payment_date=installment.payment_date,
            status=installment.status,
            penalty_amount=installment.penalty_amount,
            interest_amount=installment.interest_amount,
            discount_amount=installment.discount_amount,
            meta=dict(installment.meta) if installment.meta else None,
        )

    def _to_dto(self, entry: JournalEntry) -> JournalEntryDTO:
        return JournalEntryDTO(
            id=entry.id,
            type=entry.type,
            status=entry.status,
            amount=entry.amount,
            movement_date=entry.movement_date,
            due_date=entry.due_date,
            description=entry.description,
            notes=entry.notes,
            reference_code=entry.reference_code,
            bank_account_id=entry.bank_account_id,
            counter_bank_account_id=entry.counter_bank_account_id,
            cost_center_id=entry.cost_center_id,
            person_id=entry.person_id,
            property_id=entry.property_id,
            installments=[
                self._installment_dto(i)
                for i in sorted(entry.installments, key=lambda i: i.id)
            ],
        )

    def get_entry(self, entry_id: int) -> JournalEntryDTO | None:
        entry = self.session.execute(
            select(JournalEntry)
            .where(JournalEntry.id == entry_id)
            .options(selectinload(JournalEntry.installments))
        ).scalar_one_or_none()
        if entry is None:
            return None
        return self._to_dto(entry)

    def require_entry(self, entry_id: int) -> JournalEntryDTO:
        """Like get_entry(), but raises EntryNotFoundError when missing."""
        dto = self.get_entry(entry_id)
        if dto is None:
            raise EntryNotFoundError(entry_id)
        return dto

    def get_installment(self, installment_id: int) -> InstallmentDTO | None:
        installment = self.session.get(JournalEntryInstallment, installment_id)
        if installment is None:
            return None
        return self._installment_dto(installment)

    def list_entries(
        self,
        criteria: LedgerCriteria,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[JournalEntryDTO]:
        """Entries matching ``criteria``, newest movement first."""
        stmt = (
            select(JournalEntry)
            .options(selectinload(JournalEntry.installments))
            .order_by(JournalEntry.movement_date.desc(), JournalEntry.id.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        stmt = apply_criteria(stmt, criteria)
        return [self._to_dto(e) for e in self.session.scalars(stmt)]

    def count_entries(self, criteria: LedgerCriteria) -> int:
        stmt = apply_criteria(select(func.count(JournalEntry.id)), criteria)
        return self.session.execute(stmt).scalar_one()

    def summary_totals(self, criteria: LedgerCriteria) -> SummaryTotals:
        """
        Income and expense totals for the listing filters.

        The criteria's type filter is ignored: both types are always summed.
        """
        income = self._sum_for_type(criteria, JournalEntryType.INCOME)
        expense = self._sum_for_type(criteria, JournalEntryType.EXPENSE)
        return SummaryTotals(
            income=income,
            expense=expense,
            balance=round_money(income - expense),
        )

    def _sum_for_type(self, criteria: LedgerCriteria, entry_type: JournalEntryType) -> Decimal:
        stmt = select(func.coalesce(func.sum(JournalEntry.amount), 0)).where(
            JournalEntry.type == entry_type
        )
        stmt = apply_criteria(stmt, criteria, include_type=False)
        total = self.session.execute(stmt).scalar_one()
        if total is None:
            return ZERO
        return round_money(Decimal(str(total)))
