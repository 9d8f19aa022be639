"""
Module: journal_kernel.models.journal
Responsibility: ORM persistence for journal entries and their installment
    schedules -- the single source of financial truth in this system.
Architecture position: Kernel > Models.  May import from db/ and
    domain/status.py only.  MUST NOT import from services/ or selectors/.

Invariants enforced:
    - JournalEntry.amount is never negative (CHECK constraint).  The sign is
      derived from the entry type at read time.
    - A paid installment always has a payment date (CHECK constraint).
    - Installment penalty/interest/discount are never negative.
    - Entries are never deleted by the kernel; cancellation is a status.

Failure modes:
    - IntegrityError when a CHECK constraint is violated at flush time.
    - LookupError when a stored status/type is outside the closed enums.
"""

from datetime import date
from decimal import Decimal

from sqlalchemy import JSON, CheckConstraint, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journal_kernel.db.base import TrackedBase
from journal_kernel.domain.status import JournalEntryStatus, JournalEntryType
from journal_kernel.models.reference import (
    CostCenter,
    FinancialAccount,
    Person,
    Property,
)


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


def _status_column() -> Enum:
    return Enum(
        JournalEntryStatus,
        name="journal_entry_status",
        native_enum=False,
        length=20,
        values_callable=_enum_values,
        validate_strings=True,
    )


class JournalEntry(TrackedBase):
    """
    A single financial movement with one amount and a lifecycle status.

    Contract:
        The status is owned by JournalEntryStateService: after creation it is
        written only by ``sync`` (derived from installments) and by the
        external cancellation workflow.

    Guarantees:
        - amount >= 0; signed_amount applies the type's sign.
        - installments are always loaded together with the entry (selectin),
          ordered by ascending id.
    """

    __tablename__ = "journal_entries"

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_journal_entry_amount_non_negative"),
        Index("idx_journal_entry_account_movement", "bank_account_id", "movement_date"),
        Index("idx_journal_entry_status", "status"),
        Index("idx_journal_entry_movement", "movement_date", "id"),
    )

    type: Mapped[JournalEntryType] = mapped_column(
        Enum(
            JournalEntryType,
            name="journal_entry_type",
            native_enum=False,
            length=20,
            values_callable=_enum_values,
            validate_strings=True,
        ),
        nullable=False,
    )

    status: Mapped[JournalEntryStatus] = mapped_column(
        _status_column(),
        default=JournalEntryStatus.PLANNED,
        nullable=False,
    )

    amount: Mapped[Decimal] = mapped_column(nullable=False)

    movement_date: Mapped[date] = mapped_column(nullable=False)

    due_date: Mapped[date | None] = mapped_column(nullable=True)

    description: Mapped[str | None] = mapped_column(String(255), nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    reference_code: Mapped[str | None] = mapped_column(String(100), nullable=True)

    bank_account_id: Mapped[int] = mapped_column(
        ForeignKey("financial_accounts.id"),
        nullable=False,
    )

    # Destination account of a transfer
    counter_bank_account_id: Mapped[int | None] = mapped_column(
        ForeignKey("financial_accounts.id"),
        nullable=True,
    )

    cost_center_id: Mapped[int | None] = mapped_column(
        ForeignKey("cost_centers.id"),
        nullable=True,
    )

    person_id: Mapped[int | None] = mapped_column(
        ForeignKey("people.id"),
        nullable=True,
    )

    property_id: Mapped[int | None] = mapped_column(
        ForeignKey("properties.id"),
        nullable=True,
    )

    # Relationships
    bank_account: Mapped[FinancialAccount] = relationship(
        foreign_keys=[bank_account_id],
    )

    counter_bank_account: Mapped[FinancialAccount | None] = relationship(
        foreign_keys=[counter_bank_account_id],
    )

    cost_center: Mapped[CostCenter | None] = relationship()

    person: Mapped[Person | None] = relationship()

    property_unit: Mapped[Property | None] = relationship()

    installments: Mapped[list["JournalEntryInstallment"]] = relationship(
        back_populates="journal_entry",
        order_by="JournalEntryInstallment.id",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<JournalEntry {self.id} {self.type.value} status={self.status.value}>"

    @property
    def is_cancelled(self) -> bool:
        return self.status == JournalEntryStatus.CANCELLED

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the type's sign: income positive, expense/transfer negative."""
        return self.amount * self.type.sign


class JournalEntryInstallment(TrackedBase):
    """
    One scheduled payment line of a journal entry.

    Contract:
        Created open (status PENDING) by the schedule workflow; marked PAID
        exactly once by InstallmentPaymentService.  Never deleted once paid.

    Guarantees:
        - status is PENDING ("open") or PAID.
        - status == PAID implies payment_date is set, and neither changes
          afterwards.
        - penalty/interest/discount default to zero.
    """

    __tablename__ = "journal_entry_installments"

    __table_args__ = (
        CheckConstraint(
            "status <> 'paid' OR payment_date IS NOT NULL",
            name="ck_installment_paid_has_date",
        ),
        CheckConstraint(
            "penalty_amount >= 0 AND interest_amount >= 0 AND discount_amount >= 0",
            name="ck_installment_adjustments_non_negative",
        ),
        Index("idx_installment_entry", "journal_entry_id", "id"),
        Index("idx_installment_due", "status", "due_date"),
    )

    journal_entry_id: Mapped[int] = mapped_column(
        ForeignKey("journal_entries.id"),
        nullable=False,
    )

    number: Mapped[int] = mapped_column(nullable=False, default=1)

    amount: Mapped[Decimal] = mapped_column(nullable=False)

    due_date: Mapped[date] = mapped_column(nullable=False)

    payment_date: Mapped[date | None] = mapped_column(nullable=True)

    status: Mapped[JournalEntryStatus] = mapped_column(
        _status_column(),
        default=JournalEntryStatus.PENDING,
        nullable=False,
    )

    penalty_amount: Mapped[Decimal] = mapped_column(
        default=Decimal("0.00"),
        nullable=False,
    )

    interest_amount: Mapped[Decimal] = mapped_column(
        default=Decimal("0.00"),
        nullable=False,
    )

    discount_amount: Mapped[Decimal] = mapped_column(
        default=Decimal("0.00"),
        nullable=False,
    )

    # Free-form metadata, e.g. {"property_label": "..."} for legacy entries
    meta: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    journal_entry: Mapped[JournalEntry] = relationship(
        back_populates="installments",
    )

    def __repr__(self) -> str:
        return (
            f"<JournalEntryInstallment {self.id} entry={self.journal_entry_id} "
            f"status={self.status.value}>"
        )

    @property
    def is_paid(self) -> bool:
        return self.status == JournalEntryStatus.PAID

    def is_overdue(self, today: date) -> bool:
        """Open and strictly past its due date."""
        return not self.is_paid and self.due_date < today
