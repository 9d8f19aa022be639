"""
Domain events -- immutable facts emitted by kernel mutations.

Responsibility:
    Payload types for the notifications published after a successful
    commit.  Subscribers (audit trail, notifications, cache busting) live
    outside the kernel.

Architecture position:
    Kernel > Domain -- pure data, zero I/O.  Dispatching is done by
    services/event_dispatcher.py.

Invariants enforced:
    - Events are frozen; a handler cannot alter what other handlers see.
    - Every event carries a unique event_id and the clock time of the
      mutation that produced it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from journal_kernel.domain.status import JournalEntryStatus


@dataclass(frozen=True)
class DomainEvent:
    """Base class for kernel events."""

    occurred_at: datetime
    event_id: UUID = field(default_factory=uuid4, kw_only=True)

    @property
    def event_type(self) -> str:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        """Flat, JSON-friendly representation."""
        data: dict[str, Any] = {"event_type": self.event_type}
        for name in self.__dataclass_fields__:
            value = getattr(self, name)
            if isinstance(value, (UUID, Decimal)):
                value = str(value)
            elif isinstance(value, (date, datetime)):
                value = value.isoformat()
            elif isinstance(value, JournalEntryStatus):
                value = value.value
            data[name] = value
        return data


@dataclass(frozen=True)
class InstallmentPaid(DomainEvent):
    """An installment moved from open to paid."""

    installment_id: int
    entry_id: int
    payment_date: date
    amount: Decimal
    penalty_amount: Decimal
    interest_amount: Decimal
    discount_amount: Decimal

    @property
    def event_type(self) -> str:
        return "installment.paid"


@dataclass(frozen=True)
class EntryStatusChanged(DomainEvent):
    """A journal entry's persisted status changed."""

    entry_id: int
    from_status: JournalEntryStatus
    to_status: JournalEntryStatus

    @property
    def event_type(self) -> str:
        return "entry.status_changed"
