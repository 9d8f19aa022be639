"""
Module: journal_kernel.selectors.ledger_selector
Responsibility: Read-only bank statement queries: the opening balance before
    a period, the entries inside it, and the assembled statement report.
    Balances are derived from journal entries at query time; nothing is
    stored.
Architecture position: Kernel > Selectors.  Queries through models/ and
    hands loaded entries to domain/ledger_balance.py for the arithmetic.

Invariants enforced:
    - Opening balance applies the same account and status filters as the
      statement rows, over movement_date strictly before date_from.  Type,
      cost center and search filters do not bound it.
    - Rows are ordered by (movement_date, id), which makes the running
      balance deterministic.
    - Relations the rows display (cost center, person, property,
      installments) are eager-loaded; building rows never issues queries.

Failure modes:
    - FinancialAccountNotFoundError from report() when criteria.account_id
      does not exist.
    - ValueError from LedgerCriteria on an inverted date range.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session, selectinload

from journal_kernel.db.types import ZERO, round_money
from journal_kernel.domain.ledger_balance import (
    DEFAULT_PROPERTY_META_KEY,
    LedgerRow,
    LedgerTotals,
    build_rows,
    closing_balance,
    compute_totals,
)
from journal_kernel.domain.status import JournalEntryType
from journal_kernel.exceptions import FinancialAccountNotFoundError
from journal_kernel.logging_config import get_logger
from journal_kernel.models.journal import JournalEntry
from journal_kernel.models.reference import FinancialAccount
from journal_kernel.selectors.base import BaseSelector
from journal_kernel.selectors.criteria import (
    LedgerCriteria,
    apply_account_and_status,
    apply_criteria,
)

logger = get_logger("selectors.ledger")

ALL_ACCOUNTS_LABEL = "Todos os bancos"


@dataclass(frozen=True)
class LedgerReport:
    """A bank statement for one account (or all accounts) over a period."""

    account_id: int | None
    account_name: str
    date_from: date | None
    date_to: date | None
    opening_balance: Decimal
    closing_balance: Decimal
    totals: LedgerTotals
    rows: list[LedgerRow]


def _signed_amount_expr():
    return case(
        (JournalEntry.type == JournalEntryType.INCOME, JournalEntry.amount),
        (
            JournalEntry.type.in_([JournalEntryType.EXPENSE, JournalEntryType.TRANSFER]),
            -JournalEntry.amount,
        ),
        else_=0,
    )


class BankLedgerSelector(BaseSelector[JournalEntry]):
    """
    Selector for bank statements.

    Contract:
        Read-only.  ``report`` is the composition of ``opening_balance``,
        ``entries`` and domain.ledger_balance.build_rows.
    """

    def __init__(
        self,
        session: Session,
        all_accounts_label: str = ALL_ACCOUNTS_LABEL,
        property_meta_key: str = DEFAULT_PROPERTY_META_KEY,
    ):
        super().__init__(session)
        self._all_accounts_label = all_accounts_label
        self._property_meta_key = property_meta_key

    def opening_balance(self, criteria: LedgerCriteria) -> Decimal:
        """
        Sum of signed amounts before ``criteria.date_from``.

        Returns 0 when the criteria have no start date.
        """
        if criteria.date_from is None:
            return ZERO

        stmt = select(func.coalesce(func.sum(_signed_amount_expr()), 0)).where(
            JournalEntry.movement_date < criteria.date_from
        )
        stmt = apply_account_and_status(stmt, criteria)

        total = self.session.execute(stmt).scalar_one()
        return round_money(Decimal(str(total)))

    def entries(self, criteria: LedgerCriteria) -> list[JournalEntry]:
        """Entries matching every filter, ordered by (movement_date, id)."""
        stmt = (
            select(JournalEntry)
            .options(
                selectinload(JournalEntry.cost_center),
                selectinload(JournalEntry.person),
                selectinload(JournalEntry.property_unit),
                selectinload(JournalEntry.installments),
            )
            .order_by(JournalEntry.movement_date, JournalEntry.id)
        )
        stmt = apply_criteria(stmt, criteria)
        return list(self.session.scalars(stmt))

    def rows(self, criteria: LedgerCriteria, detailed: bool = False) -> list[LedgerRow]:
        return build_rows(
            self.entries(criteria),
            self.opening_balance(criteria),
            detailed=detailed,
            meta_key=self._property_meta_key,
        )

    def report(self, criteria: LedgerCriteria, detailed: bool = True) -> LedgerReport:
        """
        Assemble the statement for ``criteria``.

        Raises:
            FinancialAccountNotFoundError: If criteria.account_id is unknown.
        """
        account_name = self._all_accounts_label
        if criteria.account_id is not None:
            account = self.session.get(FinancialAccount, criteria.account_id)
            if account is None:
                raise FinancialAccountNotFoundError(criteria.account_id)
            account_name = account.name

        opening = self.opening_balance(criteria)
        rows = build_rows(
            self.entries(criteria),
            opening,
            detailed=detailed,
            meta_key=self._property_meta_key,
        )
        totals = compute_totals(rows)

        logger.debug(
            "bank_ledger_report_built",
            extra={
                "account_id": criteria.account_id,
                "row_count": len(rows),
                "opening_balance": opening,
            },
        )

        return LedgerReport(
            account_id=criteria.account_id,
            account_name=account_name,
            date_from=criteria.date_from,
            date_to=criteria.date_to,
            opening_balance=opening,
            closing_balance=closing_balance(rows, opening),
            totals=totals,
            rows=rows,
        )
