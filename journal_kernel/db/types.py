"""
Module: journal_kernel.db.types
Responsibility: Precision constants and rounding helpers for monetary
    columns.  Centralizes precision and rounding so that every model,
    service and selector rounds money the same way.
Architecture position: Kernel > DB.  May be imported by models/, domain/,
    services/, and selectors/.  MUST NOT import from any of those layers.

Invariants enforced:
    - Two decimal places, ROUND_HALF_UP.  round_money() is the ONLY
      sanctioned rounding function for financial values.
    - No floats anywhere in the kernel.  Amounts are Decimal end to end.

Failure modes:
    - ValueError on a non-numeric string passed to money_from_str().
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP


MONEY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP
ZERO = Decimal("0.00")


def money_from_str(value: str) -> Decimal:
    """
    Create a money Decimal from a string.

    Not rounded; callers apply round_money() where needed.

    Raises:
        ValueError: If value cannot be converted to Decimal.
    """
    try:
        return Decimal(value.strip())
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"Not a monetary amount: {value!r}") from exc


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to the given decimal places (half-up by default).

    This is the ONLY sanctioned rounding function for financial values.
    Rounding is idempotent: round_money(round_money(x)) == round_money(x).

    Args:
        value: The Decimal value to round.
        decimal_places: Number of decimal places to round to.
        rounding: Rounding mode (default: ROUND_HALF_UP).

    Returns:
        Rounded Decimal value.
    """
    quantum = Decimal(1).scaleb(-decimal_places)
    return value.quantize(quantum, rounding=rounding)
