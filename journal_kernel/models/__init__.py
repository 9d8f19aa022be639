"""ORM models for the journal kernel."""

from journal_kernel.models.journal import JournalEntry, JournalEntryInstallment
from journal_kernel.models.reference import (
    CostCenter,
    FinancialAccount,
    Person,
    Property,
)

__all__ = [
    "JournalEntry",
    "JournalEntryInstallment",
    "FinancialAccount",
    "CostCenter",
    "Person",
    "Property",
]
