#!/usr/bin/env python3
"""
Print a bank statement (running balance) from the database.

Usage:
    python3 scripts/view_bank_ledger.py --account 3 --from 2024-01-01 --to 2024-01-31
    python3 scripts/view_bank_ledger.py --status open --type despesa
    python3 scripts/view_bank_ledger.py --config path/to/settings.yaml
"""

import argparse
import logging
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

W = 110


def _fmt(v) -> str:
    d = Decimal(str(v))
    return f"{d:,.2f}"


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {value!r}") from exc


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Print a bank statement with running balance.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", type=Path, default=None, help="Settings YAML file")
    parser.add_argument("--account", type=int, default=None, help="Financial account id")
    parser.add_argument("--from", dest="date_from", type=_parse_date, default=None)
    parser.add_argument("--to", dest="date_to", type=_parse_date, default=None)
    parser.add_argument("--type", dest="entry_type", default=None, help="income/expense/transfer")
    parser.add_argument("--status", default=None, help="open, settled, overdue, pago, ...")
    parser.add_argument("--cost-center", type=int, default=None)
    parser.add_argument("--search", default=None)
    parser.add_argument("--summary", action="store_true", help="Omit detail columns")
    args = parser.parse_args()

    logging.disable(logging.CRITICAL)

    from journal_config import get_settings
    from journal_config.bridges import build_ledger_selector, init_engine
    from journal_kernel.db.engine import get_session
    from journal_kernel.domain.ledger_balance import export_totals
    from journal_kernel.exceptions import JournalKernelError
    from journal_kernel.selectors.criteria import LedgerCriteria

    try:
        settings = get_settings(args.config)
        init_engine(settings)
        criteria = LedgerCriteria(
            account_id=args.account,
            type=args.entry_type,
            status=args.status,
            date_from=args.date_from,
            date_to=args.date_to,
            cost_center_id=args.cost_center,
            search=args.search,
        )
    except (JournalKernelError, ValueError) as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    session = get_session()

    try:
        selector = build_ledger_selector(session, settings)
        report = selector.report(criteria, detailed=not args.summary)

        print()
        print("=" * W)
        print(f"EXTRATO -- {report.account_name}".center(W))
        period = f"{report.date_from or 'Início'} a {report.date_to or 'Hoje'}"
        print(period.center(W))
        print("=" * W)
        print(f"  Saldo inicial: {_fmt(report.opening_balance):>16}")
        print()
        print(
            f"  {'Data':<10} {'Descrição':<32} {'Imóvel':<24} "
            f"{'Entrada':>12} {'Saída':>12} {'Saldo':>14}"
        )
        print(f"  {'-'*10} {'-'*32} {'-'*24} {'-'*12} {'-'*12} {'-'*14}")

        for row in report.rows:
            prop = row.property.name if row.property else ""
            print(
                f"  {str(row.movement_date):<10} {(row.description or '')[:32]:<32} "
                f"{prop[:24]:<24} {_fmt(row.amount_in):>12} {_fmt(row.amount_out):>12} "
                f"{_fmt(row.balance_after):>14}"
            )

        if not report.rows:
            print("  No entries in this period.")

        print()
        print(f"  Entradas:    {_fmt(report.totals.inflow):>16}")
        print(f"  Saídas:      {_fmt(report.totals.outflow):>16}")
        print(f"  Líquido:     {_fmt(report.totals.net):>16}")
        print(f"  Saldo final: {_fmt(report.closing_balance):>16}")

        if not args.summary:
            footer = export_totals(report.rows)
            print(f"  Total movimentado:  {_fmt(footer.total_absolute):>16}")
            print(f"  Total de receitas:  {_fmt(footer.total_revenue):>16}")
        print()
        return 0

    except JournalKernelError as exc:
        print(f"  ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 1
    finally:
        session.close()


if __name__ == "__main__":
    raise SystemExit(main())
