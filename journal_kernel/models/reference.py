"""
Module: journal_kernel.models.reference
Responsibility: ORM persistence for the reference records a journal entry
    points at: the bank (financial) account it moves, the cost center it is
    attributed to, the counterparty person and the managed property.
Architecture position: Kernel > Models.  May import from db/ only.

These records are maintained by the surrounding application; the kernel only
reads them (eager-loaded with entries for reports).
"""

from decimal import Decimal

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journal_kernel.db.base import TrackedBase


class FinancialAccount(TrackedBase):
    """A bank or cash account whose statement the ledger reports reproduce."""

    __tablename__ = "financial_accounts"

    name: Mapped[str] = mapped_column(String(150), nullable=False)

    opening_balance: Mapped[Decimal] = mapped_column(
        default=Decimal("0.00"),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<FinancialAccount {self.id} {self.name!r}>"


class CostCenter(TrackedBase):
    """Organizational bucket an entry is attributed to, independent of property."""

    __tablename__ = "cost_centers"

    name: Mapped[str] = mapped_column(String(150), nullable=False)
    code: Mapped[str | None] = mapped_column(String(50), nullable=True)

    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("cost_centers.id"),
        nullable=True,
    )

    parent: Mapped["CostCenter | None"] = relationship(
        remote_side="CostCenter.id",
    )

    def __repr__(self) -> str:
        return f"<CostCenter {self.id} {self.code!r}>"


class Person(TrackedBase):
    """Counterparty (tenant, owner, supplier) of a journal entry."""

    __tablename__ = "people"

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    def __repr__(self) -> str:
        return f"<Person {self.id} {self.name!r}>"


class Property(TrackedBase):
    """A managed real-estate unit, labelled by its address."""

    __tablename__ = "properties"

    code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    complement: Mapped[str | None] = mapped_column(String(150), nullable=True)
    street: Mapped[str | None] = mapped_column(String(200), nullable=True)
    number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    district: Mapped[str | None] = mapped_column(String(120), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)

    def __repr__(self) -> str:
        return f"<Property {self.id} {self.code!r}>"
