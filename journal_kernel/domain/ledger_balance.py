"""
Ledger balance -- running-balance rows and totals for bank statements.

Responsibility:
    Turns an ordered sequence of journal entries plus an opening balance
    into statement rows (inflow, outflow, balance after each movement) and
    the totals printed under them.  Callers fetch and order the entries;
    this module only computes.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Reads attributes of
    already-loaded ORM objects (or anything shaped like them) and never
    triggers queries itself beyond relationship attributes the caller has
    eager-loaded.

Invariants enforced:
    - Balance continuity: row[i].balance_after ==
      round(opening + sum(signed amounts of rows 0..i)).  The running sum is
      kept unrounded; rounding happens per displayed figure.
    - amount_in and amount_out are never both non-zero.
    - Totals are rounded independently: net is round(sum_in - sum_out), not
      round(sum_in) - round(sum_out).
    - Entries whose type is unknown contribute 0 and still produce a row.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Sequence

from journal_kernel.db.types import ZERO, round_money
from journal_kernel.domain.status import (
    JournalEntryType,
    StatusCategory,
    status_category,
    status_label,
    type_label,
)

DEFAULT_PROPERTY_META_KEY = "property_label"

PROPERTY_LABEL_SEPARATOR = " • "


@dataclass(frozen=True)
class RefLabel:
    """Compact reference to a related record as shown on a statement."""

    id: int | None
    name: str | None
    code: str | None = None


@dataclass(frozen=True)
class LedgerRow:
    """One statement line.  Fields after ``status_category`` are set only in detailed mode."""

    id: int
    movement_date: date | None
    due_date: date | None
    description: str | None
    type: str | None
    type_label: str
    property: RefLabel | None
    cost_center: RefLabel | None
    amount_in: Decimal
    amount_out: Decimal
    balance_after: Decimal
    status_label: str | None
    status_category: StatusCategory | None
    detailed: bool = False
    notes: str | None = None
    reference_code: str | None = None
    amount: Decimal | None = None
    person: RefLabel | None = None
    signed_amount: Decimal | None = None
    absolute_amount: Decimal | None = None
    status: str | None = None


@dataclass(frozen=True)
class LedgerTotals:
    inflow: Decimal
    outflow: Decimal
    net: Decimal


@dataclass(frozen=True)
class ExportTotals:
    """Footer figures of exported statements."""

    total_absolute: Decimal
    total_revenue: Decimal


def _raw(value: Any) -> str | None:
    if value is None:
        return None
    return getattr(value, "value", value)


def signed_amount(entry) -> Decimal:
    """
    Signed contribution of an entry to a balance.

    income -> +amount, expense and transfer -> -amount, anything else -> 0.
    """
    entry_type = JournalEntryType.parse(entry.type)
    if entry_type is None or entry.amount is None:
        return ZERO
    return Decimal(entry.amount) * entry_type.sign


def address_label(prop) -> str | None:
    """Human label for a property: address parts, else its code."""
    if prop is None:
        return None

    segments: list[str] = []
    if prop.complement and prop.complement.strip():
        segments.append(prop.complement.strip())
    if prop.street and prop.street.strip():
        street = prop.street.strip()
        if prop.number and str(prop.number).strip():
            street = f"{street} {str(prop.number).strip()}"
        segments.append(street)
    if prop.district and prop.district.strip():
        segments.append(prop.district.strip())
    if prop.city and prop.city.strip():
        segments.append(prop.city.strip())

    if segments:
        return PROPERTY_LABEL_SEPARATOR.join(segments)
    if prop.code and prop.code.strip():
        return prop.code.strip()
    return None


def property_label(entry, meta_key: str = DEFAULT_PROPERTY_META_KEY) -> str | None:
    """
    Resolve the property shown for an entry.

    Precedence: the entry's own property, then its cost center's name, then
    ``meta[meta_key]`` of its first installment (lowest id).  None when
    nothing matches.
    """
    label = address_label(getattr(entry, "property_unit", None))
    if label:
        return label

    cost_center = getattr(entry, "cost_center", None)
    if cost_center is not None and cost_center.name:
        return cost_center.name

    installments = getattr(entry, "installments", None) or []
    if installments:
        first = min(installments, key=lambda i: i.id)
        meta = first.meta
        if isinstance(meta, dict) and meta.get(meta_key):
            return str(meta[meta_key])
    return None


def _cost_center_ref(entry) -> RefLabel | None:
    cost_center = getattr(entry, "cost_center", None)
    if cost_center is None:
        return None
    return RefLabel(id=cost_center.id, name=cost_center.name, code=cost_center.code)


def _person_ref(entry) -> RefLabel | None:
    person = getattr(entry, "person", None)
    if person is None:
        return None
    return RefLabel(id=person.id, name=person.name)


def build_rows(
    entries: Iterable,
    opening_balance: Decimal | int | str = ZERO,
    detailed: bool = False,
    meta_key: str = DEFAULT_PROPERTY_META_KEY,
) -> list[LedgerRow]:
    """
    Build statement rows in the order given.

    Args:
        entries: Journal entries, already sorted by (movement_date, id).
        opening_balance: Balance before the first entry.
        detailed: Include notes, reference, person and raw amounts.
        meta_key: Installment meta key for the property label fallback.
    """
    running = Decimal(opening_balance)
    rows: list[LedgerRow] = []

    for entry in entries:
        signed = signed_amount(entry)
        running += signed

        label = property_label(entry, meta_key)
        prop = getattr(entry, "property_unit", None)
        property_ref = (
            RefLabel(id=prop.id if prop is not None else None, name=label)
            if label
            else None
        )

        raw_type = _raw(entry.type)
        raw_status = _raw(entry.status)

        fields: dict[str, Any] = dict(
            id=entry.id,
            movement_date=entry.movement_date,
            due_date=entry.due_date,
            description=entry.description,
            type=raw_type,
            type_label=type_label(raw_type),
            property=property_ref,
            cost_center=_cost_center_ref(entry),
            amount_in=round_money(signed) if signed > 0 else ZERO,
            amount_out=round_money(abs(signed)) if signed < 0 else ZERO,
            balance_after=round_money(running),
            status_label=status_label(raw_status, raw_type),
            status_category=status_category(raw_status),
        )

        if detailed:
            fields.update(
                detailed=True,
                notes=entry.notes,
                reference_code=entry.reference_code,
                amount=round_money(Decimal(entry.amount)),
                person=_person_ref(entry),
                signed_amount=round_money(signed),
                absolute_amount=round_money(abs(signed)),
                status=raw_status,
            )

        rows.append(LedgerRow(**fields))

    return rows


def compute_totals(rows: Sequence[LedgerRow]) -> LedgerTotals:
    total_in = sum((row.amount_in for row in rows), ZERO)
    total_out = sum((row.amount_out for row in rows), ZERO)
    return LedgerTotals(
        inflow=round_money(total_in),
        outflow=round_money(total_out),
        net=round_money(total_in - total_out),
    )


def closing_balance(rows: Sequence[LedgerRow], opening_balance: Decimal) -> Decimal:
    """Balance after the last row, or the rounded opening balance when empty."""
    if rows:
        return rows[-1].balance_after
    return round_money(Decimal(opening_balance))


def export_totals(rows: Sequence[LedgerRow]) -> ExportTotals:
    """
    Expense and revenue footers of exported statements.

    total_absolute sums every row's absolute amount; total_revenue sums the
    absolute amount of rows whose signed amount is not negative.
    """
    total_absolute = ZERO
    total_revenue = ZERO
    for row in rows:
        signed = row.signed_amount
        if signed is None:
            signed = row.amount_in - row.amount_out
        absolute = row.absolute_amount if row.absolute_amount is not None else abs(signed)
        total_absolute += absolute
        if signed >= 0:
            total_revenue += absolute
    return ExportTotals(
        total_absolute=round_money(total_absolute),
        total_revenue=round_money(total_revenue),
    )
