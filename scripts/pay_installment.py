#!/usr/bin/env python3
"""
Pay one installment and print the resulting entry status.

Usage:
    python3 scripts/pay_installment.py 42 --date 2024-03-05
    python3 scripts/pay_installment.py 42 --date 2024-03-05 --penalty 10.00 --interest 2.35
"""

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Pay one installment of a journal entry.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("installment_id", type=int)
    parser.add_argument("--date", dest="payment_date", default=None,
                        help="Payment date YYYY-MM-DD (default: today)")
    parser.add_argument("--penalty", default=None)
    parser.add_argument("--interest", default=None)
    parser.add_argument("--discount", default=None)
    parser.add_argument("--config", type=Path, default=None, help="Settings YAML file")
    parser.add_argument("--verbose", action="store_true", help="Emit JSON logs to stderr")
    args = parser.parse_args()

    from journal_config import get_settings
    from journal_config.bridges import build_clock, init_engine, init_logging
    from journal_kernel.db.engine import get_session
    from journal_kernel.exceptions import JournalKernelError
    from journal_kernel.selectors.journal_selector import JournalSelector
    from journal_kernel.services.event_dispatcher import EventDispatcher
    from journal_kernel.services.payment_service import InstallmentPaymentService

    try:
        settings = get_settings(args.config)
    except JournalKernelError as exc:
        print(f"  ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 1

    if args.verbose:
        init_logging(settings)
    else:
        logging.disable(logging.CRITICAL)

    init_engine(settings)
    clock = build_clock(settings)
    dispatcher = EventDispatcher()
    dispatcher.subscribe_all(lambda e: print(f"  event: {e.event_type} {e.to_dict()}"))

    session = get_session()
    try:
        service = InstallmentPaymentService(session, clock=clock, dispatcher=dispatcher)
        installment = service.pay(
            args.installment_id,
            payment_date=args.payment_date or clock.today(),
            penalty=args.penalty,
            interest=args.interest,
            discount=args.discount,
        )
        entry = JournalSelector(session).require_entry(installment.journal_entry_id)
        print(
            f"  Installment {installment.id} paid on {installment.payment_date}; "
            f"entry {entry.id} is now {entry.status.value} ({entry.status_label})"
        )
        return 0
    except (JournalKernelError, ValueError) as exc:
        code = getattr(exc, "code", "INVALID_INPUT")
        print(f"  ERROR [{code}]: {exc}", file=sys.stderr)
        return 1
    finally:
        session.close()


if __name__ == "__main__":
    raise SystemExit(main())
