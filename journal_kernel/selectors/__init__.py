"""Selectors for the journal kernel (read side)."""

from journal_kernel.selectors.criteria import LedgerCriteria
from journal_kernel.selectors.journal_selector import (
    InstallmentDTO,
    JournalEntryDTO,
    JournalSelector,
    SummaryTotals,
)
from journal_kernel.selectors.ledger_selector import BankLedgerSelector, LedgerReport

__all__ = [
    "BankLedgerSelector",
    "InstallmentDTO",
    "JournalEntryDTO",
    "JournalSelector",
    "LedgerCriteria",
    "LedgerReport",
    "SummaryTotals",
]
