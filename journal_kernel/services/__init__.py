"""Services for the journal kernel (write side)."""

from journal_kernel.services.entry_state_service import JournalEntryStateService
from journal_kernel.services.event_dispatcher import EventDispatcher, pending_events
from journal_kernel.services.installment_ledger import InstallmentLedgerService
from journal_kernel.services.payment_service import InstallmentPaymentService

__all__ = [
    "EventDispatcher",
    "InstallmentLedgerService",
    "InstallmentPaymentService",
    "JournalEntryStateService",
    "pending_events",
]
