"""
Values -- monetary and calendar-date primitives.

Responsibility:
    Normalizes caller-supplied amounts and dates at the kernel boundary:
    amounts become non-negative two-place Decimals, payment dates become
    calendar dates with the time of day discarded.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Amounts are Decimal, never float.  Floats are accepted only through
      their shortest ``repr`` (``Decimal(str(x))``), never their binary value.
    - Rounding is ROUND_HALF_UP to two places via db.types.round_money.

Failure modes:
    - InvalidAmountError on non-numeric or negative amounts.
    - ValueError on unparseable date strings.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from journal_kernel.db.types import round_money
from journal_kernel.exceptions import InvalidAmountError

AmountLike = Decimal | int | float | str


def to_amount(value: AmountLike, field: str = "amount") -> Decimal:
    """
    Convert a caller-supplied amount into a non-negative, rounded Decimal.

    Raises:
        InvalidAmountError: If value is not numeric, not finite, or negative.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(field, value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmountError(field, value) from exc

    if not amount.is_finite() or amount < 0:
        raise InvalidAmountError(field, value)
    return round_money(amount)


def to_optional_amount(value: AmountLike | None, field: str) -> Decimal | None:
    """Like to_amount(), but None means "not supplied" and stays None."""
    if value is None:
        return None
    return to_amount(value, field)


def to_calendar_date(value: date | datetime | str) -> date:
    """
    Normalize a date-ish value to calendar-date precision.

    datetimes lose their time of day; strings are parsed as ISO-8601 dates
    or datetimes ("2024-03-01", "2024-03-01T18:30:00-03:00").

    Raises:
        ValueError: If the string cannot be parsed.
        TypeError: If value is not a date, datetime or string.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            return datetime.fromisoformat(text).date()
    raise TypeError(f"Expected date, datetime or ISO string, got {type(value).__name__}")

