"""
Module: journal_kernel.selectors.criteria
Responsibility: Filter criteria shared by the read-side selectors, and their
    translation into SQL WHERE clauses over journal_entries.
Architecture position: Kernel > Selectors.  May import from models/ and
    domain/status.py.

Invariants enforced:
    - Status tokens are accepted in both vocabularies (legacy and new) and
      expanded through filter_values() here, at the input boundary.
    - An unknown status or type token matches no rows; it is never ignored.
    - Date bounds are inclusive and compared at calendar-date precision.

Failure modes:
    - ValueError when date_to precedes date_from.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy import Select, false, or_

from journal_kernel.domain.status import (
    JournalEntryStatus,
    JournalEntryType,
    filter_values,
)
from journal_kernel.models.journal import JournalEntry


@dataclass(frozen=True)
class LedgerCriteria:
    """Filters for statement and listing queries.  Every field is optional."""

    account_id: int | None = None
    type: str | None = None
    status: str | None = None
    date_from: date | None = None
    date_to: date | None = None
    cost_center_id: int | None = None
    search: str | None = None

    def __post_init__(self) -> None:
        if (
            self.date_from is not None
            and self.date_to is not None
            and self.date_to < self.date_from
        ):
            raise ValueError(
                f"date_to ({self.date_to}) must not precede date_from ({self.date_from})"
            )

    @property
    def statuses(self) -> frozenset[JournalEntryStatus] | None:
        """Canonical statuses selected, or None when no status filter is set."""
        if not self.status or not self.status.strip():
            return None
        return filter_values(self.status)

    @property
    def search_term(self) -> str | None:
        if not self.search:
            return None
        term = self.search.replace("%", "").strip()
        return term or None


def apply_account_and_status(stmt: Select, criteria: LedgerCriteria) -> Select:
    """Filters that also bound the opening balance."""
    if criteria.account_id is not None:
        stmt = stmt.where(JournalEntry.bank_account_id == criteria.account_id)

    statuses = criteria.statuses
    if statuses is not None:
        if not statuses:
            stmt = stmt.where(false())
        elif len(statuses) == 1:
            (only,) = statuses
            stmt = stmt.where(JournalEntry.status == only)
        else:
            stmt = stmt.where(JournalEntry.status.in_(sorted(statuses, key=lambda s: s.value)))
    return stmt


def apply_criteria(
    stmt: Select,
    criteria: LedgerCriteria,
    include_type: bool = True,
) -> Select:
    """Every filter of ``criteria`` applied to a statement over JournalEntry."""
    stmt = apply_account_and_status(stmt, criteria)

    if include_type and criteria.type:
        entry_type = JournalEntryType.parse(criteria.type)
        if entry_type is None:
            stmt = stmt.where(false())
        else:
            stmt = stmt.where(JournalEntry.type == entry_type)

    if criteria.cost_center_id is not None:
        stmt = stmt.where(JournalEntry.cost_center_id == criteria.cost_center_id)

    if criteria.date_from is not None:
        stmt = stmt.where(JournalEntry.movement_date >= criteria.date_from)
    if criteria.date_to is not None:
        stmt = stmt.where(JournalEntry.movement_date <= criteria.date_to)

    term = criteria.search_term
    if term is not None:
        pattern = f"%{term}%"
        stmt = stmt.where(
            or_(
                JournalEntry.description.ilike(pattern),
                JournalEntry.notes.ilike(pattern),
            )
        )
    return stmt
