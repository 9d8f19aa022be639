"""
Typed exception hierarchy for the journal kernel.

Every error has a typed class (catch by type, not by message), a ``code``
class attribute (machine-readable, API-safe) and structured attributes
(never only a message string).

    JournalKernelError (base)
    |
    +-- NotFoundError
    |   +-- EntryNotFoundError
    |   +-- InstallmentNotFoundError
    |   +-- FinancialAccountNotFoundError
    |
    +-- PaymentError
    |   +-- InstallmentAlreadySettledError
    |   +-- EntryCancelledError
    |
    +-- ScheduleError
    |   +-- EmptyScheduleError
    |   +-- InvalidAmountError
    |
    +-- TransactionFailureError
    |
    +-- ConfigurationError

Code                    | When raised
------------------------|------------------------------------------------
ENTRY_NOT_FOUND         | Journal entry id doesn't exist
INSTALLMENT_NOT_FOUND   | Installment id doesn't exist
ACCOUNT_NOT_FOUND       | Financial (bank) account id doesn't exist
ALREADY_SETTLED         | Paying an installment that is already paid
ENTRY_CANCELLED         | Paying an installment of a cancelled entry
EMPTY_SCHEDULE          | Entry has no installments to pay
INVALID_AMOUNT          | Negative or non-numeric monetary amount
TRANSACTION_FAILURE     | Storage transaction aborted (deadlock, connectivity)
CONFIGURATION_ERROR     | Settings file missing, malformed or invalid

Handling patterns:

    try:
        payment_service.pay(installment_id, payment_date=today)
    except InstallmentAlreadySettledError as e:
        reject(code=e.code, installment=e.installment_id)
    except NotFoundError as e:
        not_found(code=e.code)

``TransactionFailureError`` is never retried by the kernel: retrying a
financial mutation is the caller's decision.
"""


class JournalKernelError(Exception):
    """
    Base exception for all journal kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "JOURNAL_KERNEL_ERROR"


# Lookup exceptions


class NotFoundError(JournalKernelError):
    """Base exception for missing records (404-equivalent)."""

    code: str = "NOT_FOUND"


class EntryNotFoundError(NotFoundError):
    """Journal entry with given ID was not found."""

    code: str = "ENTRY_NOT_FOUND"

    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(f"Journal entry not found: {entry_id}")


class InstallmentNotFoundError(NotFoundError):
    """Installment with given ID was not found."""

    code: str = "INSTALLMENT_NOT_FOUND"

    def __init__(self, installment_id: int):
        self.installment_id = installment_id
        super().__init__(f"Installment not found: {installment_id}")


class FinancialAccountNotFoundError(NotFoundError):
    """Financial (bank) account with given ID was not found."""

    code: str = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_id: int):
        self.account_id = account_id
        super().__init__(f"Financial account not found: {account_id}")


# Payment exceptions


class PaymentError(JournalKernelError):
    """Base exception for rejected installment payments."""

    code: str = "PAYMENT_ERROR"


class InstallmentAlreadySettledError(PaymentError):
    """Installment has already been paid (no re-payment)."""

    code: str = "ALREADY_SETTLED"

    def __init__(self, installment_id: int, payment_date=None):
        self.installment_id = installment_id
        self.payment_date = payment_date
        super().__init__(f"Installment {installment_id} is already settled")


class EntryCancelledError(PaymentError):
    """Parent journal entry is cancelled; its installments cannot be paid."""

    code: str = "ENTRY_CANCELLED"

    def __init__(self, entry_id: int, installment_id: int | None = None):
        self.entry_id = entry_id
        self.installment_id = installment_id
        super().__init__(
            f"Cannot pay installment {installment_id} of cancelled entry {entry_id}"
        )


# Schedule exceptions


class ScheduleError(JournalKernelError):
    """Base exception for installment schedule errors."""

    code: str = "SCHEDULE_ERROR"


class EmptyScheduleError(ScheduleError):
    """Entry has no installments."""

    code: str = "EMPTY_SCHEDULE"

    def __init__(self, entry_id: int):
        self.entry_id = entry_id
        super().__init__(f"Journal entry {entry_id} has no installments")


class InvalidAmountError(ScheduleError):
    """Monetary amount is negative or not a number."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"Invalid amount for {field}: {value!r}")


# Storage exceptions


class TransactionFailureError(JournalKernelError):
    """
    The storage transaction aborted (deadlock, serialization, connectivity).

    The original driver error is kept as ``__cause__`` and ``original``.
    Nothing was applied: the unit of work was rolled back.
    """

    code: str = "TRANSACTION_FAILURE"

    def __init__(self, operation: str, original: Exception):
        self.operation = operation
        self.original = original
        super().__init__(f"Transaction failed during {operation}: {original}")


# Configuration exceptions


class ConfigurationError(JournalKernelError):
    """Settings could not be loaded or are invalid."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid configuration in {source}: {reason}")
