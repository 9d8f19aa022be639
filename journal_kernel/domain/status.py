"""
Status and type enumerations for journal entries.

Responsibility:
    Closed sets of entry types and entry statuses, with their display labels,
    report categories, allowed status transitions, and the bilingual filter
    vocabulary.  Every mapping is a static lookup table; nothing here does
    I/O or reads the clock.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Imported by models/
    for column types and by every service and selector.

Invariants enforced:
    - Only the five canonical statuses and three canonical types exist past
      the input boundary.  Legacy Portuguese tokens are translated here and
      nowhere else.
    - filter_values() is total: unknown tokens yield an empty set, never an
      exception, so filtered queries degrade to "no rows".
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum


class JournalEntryType(str, Enum):
    """Kind of financial movement.

    Contract: amount is stored unsigned; the type decides its sign.
    """

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"

    @property
    def sign(self) -> Decimal:
        """+1 for income, -1 for money leaving the account."""
        return _TYPE_SIGNS[self]

    @property
    def label(self) -> str:
        return _TYPE_LABELS[self]

    @classmethod
    def parse(cls, token: object) -> JournalEntryType | None:
        """Translate a canonical or legacy type token; None when unknown."""
        if isinstance(token, JournalEntryType):
            return token
        if not isinstance(token, str):
            return None
        return _TYPE_ALIASES.get(token.strip().lower())


class StatusCategory(str, Enum):
    """Coarse bucket used for report grouping and coloring."""

    OPEN = "open"
    SETTLED = "settled"
    CANCELLED = "cancelled"
    OVERDUE = "overdue"


class JournalEntryStatus(str, Enum):
    """Lifecycle status of a journal entry.

    Contract:
        planned -> pending -> {paid, overdue}; overdue <-> pending; any
        non-terminal status -> cancelled.  paid and cancelled are terminal.
        Installments reuse PENDING ("open") and PAID.
    """

    PLANNED = "planned"
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"
    OVERDUE = "overdue"

    @property
    def category(self) -> StatusCategory:
        return _STATUS_CATEGORIES[self]

    @property
    def is_terminal(self) -> bool:
        return not VALID_TRANSITIONS[self]

    def label(self, entry_type: JournalEntryType | str | None = None) -> str:
        """Display label, specialised by entry type where the wording differs."""
        parsed = JournalEntryType.parse(entry_type)
        return _TYPE_STATUS_LABELS.get((self, parsed), _STATUS_LABELS[self])

    def can_transition_to(self, target: JournalEntryStatus) -> bool:
        return target == self or target in VALID_TRANSITIONS[self]


_TYPE_SIGNS: dict[JournalEntryType, Decimal] = {
    JournalEntryType.INCOME: Decimal("1"),
    JournalEntryType.EXPENSE: Decimal("-1"),
    JournalEntryType.TRANSFER: Decimal("-1"),
}

_TYPE_LABELS: dict[JournalEntryType, str] = {
    JournalEntryType.INCOME: "Receita",
    JournalEntryType.EXPENSE: "Despesa",
    JournalEntryType.TRANSFER: "Transferência",
}

_TYPE_ALIASES: dict[str, JournalEntryType] = {
    "income": JournalEntryType.INCOME,
    "expense": JournalEntryType.EXPENSE,
    "transfer": JournalEntryType.TRANSFER,
    # legacy vocabulary
    "receita": JournalEntryType.INCOME,
    "despesa": JournalEntryType.EXPENSE,
    "transferencia": JournalEntryType.TRANSFER,
    "transferência": JournalEntryType.TRANSFER,
}

_STATUS_CATEGORIES: dict[JournalEntryStatus, StatusCategory] = {
    JournalEntryStatus.PLANNED: StatusCategory.OPEN,
    JournalEntryStatus.PENDING: StatusCategory.OPEN,
    JournalEntryStatus.PAID: StatusCategory.SETTLED,
    JournalEntryStatus.CANCELLED: StatusCategory.CANCELLED,
    JournalEntryStatus.OVERDUE: StatusCategory.OVERDUE,
}

_STATUS_LABELS: dict[JournalEntryStatus, str] = {
    JournalEntryStatus.PLANNED: "Planejado",
    JournalEntryStatus.PENDING: "Aberto",
    JournalEntryStatus.PAID: "Pago",
    JournalEntryStatus.CANCELLED: "Cancelado",
    JournalEntryStatus.OVERDUE: "Atrasado",
}

# Transfers and untyped entries keep the generic wording above.
_TYPE_STATUS_LABELS: dict[tuple[JournalEntryStatus, JournalEntryType], str] = {
    (JournalEntryStatus.PENDING, JournalEntryType.INCOME): "A receber",
    (JournalEntryStatus.PENDING, JournalEntryType.EXPENSE): "A pagar",
    (JournalEntryStatus.PAID, JournalEntryType.INCOME): "Recebido",
}

VALID_TRANSITIONS: dict[JournalEntryStatus, frozenset[JournalEntryStatus]] = {
    JournalEntryStatus.PLANNED: frozenset({
        JournalEntryStatus.PENDING,
        JournalEntryStatus.OVERDUE,
        JournalEntryStatus.PAID,
        JournalEntryStatus.CANCELLED,
    }),
    JournalEntryStatus.PENDING: frozenset({
        JournalEntryStatus.OVERDUE,
        JournalEntryStatus.PAID,
        JournalEntryStatus.CANCELLED,
    }),
    JournalEntryStatus.OVERDUE: frozenset({
        JournalEntryStatus.PENDING,
        JournalEntryStatus.PAID,
        JournalEntryStatus.CANCELLED,
    }),
    JournalEntryStatus.PAID: frozenset(),
    JournalEntryStatus.CANCELLED: frozenset(),
}

_S = JournalEntryStatus
_STATUS_FILTER_ALIASES: dict[str, frozenset[JournalEntryStatus]] = {
    # legacy vocabulary
    "planejado": frozenset({_S.PLANNED}),
    "pendente": frozenset({_S.PENDING}),
    "pago": frozenset({_S.PAID}),
    "cancelado": frozenset({_S.CANCELLED}),
    "atrasado": frozenset({_S.OVERDUE}),
    # new vocabulary
    "open": frozenset({_S.PLANNED, _S.PENDING}),
    "pending": frozenset({_S.PENDING}),
    "settled": frozenset({_S.PAID}),
    "cancelled": frozenset({_S.CANCELLED}),
    "overdue": frozenset({_S.OVERDUE}),
    # canonical values not covered above
    "planned": frozenset({_S.PLANNED}),
    "paid": frozenset({_S.PAID}),
}
del _S


def filter_values(token: str | None) -> frozenset[JournalEntryStatus]:
    """
    Expand a (possibly aliased) status filter token into canonical statuses.

    Accepts the legacy tokens (planejado, pendente, pago, cancelado,
    atrasado), the new tokens (open, pending, settled, cancelled, overdue)
    and the canonical values, case- and whitespace-insensitively.

    Postconditions:
        Never raises.  Unknown, empty or non-string tokens return an empty set.
    """
    if not isinstance(token, str):
        return frozenset()
    return _STATUS_FILTER_ALIASES.get(token.strip().lower(), frozenset())


def status_label(
    status: JournalEntryStatus | str | None,
    entry_type: JournalEntryType | str | None = None,
) -> str | None:
    """Label for a raw status value; unknown values are capitalised as-is."""
    if status is None or status == "":
        return None
    try:
        return JournalEntryStatus(status).label(entry_type)
    except ValueError:
        return str(status).capitalize()


def status_category(status: JournalEntryStatus | str | None) -> StatusCategory | None:
    """Category for a raw status value; None when the value is unknown."""
    try:
        return JournalEntryStatus(status).category
    except ValueError:
        return None


def type_label(entry_type: JournalEntryType | str | None) -> str:
    """Label for a raw type value; unknown values are capitalised as-is."""
    parsed = JournalEntryType.parse(entry_type)
    if parsed is not None:
        return parsed.label
    return str(entry_type or "").capitalize()
