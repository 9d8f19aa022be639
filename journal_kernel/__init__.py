"""
Journal Kernel - installment-driven bookkeeping core

Journal entries (income, expense, transfer) for a property-management
business, with:
- Status derived from installment payments
- Atomic, exactly-once installment payment
- Running-balance bank ledger reports
- Bilingual (legacy Portuguese / English) status filters
"""

__version__ = "0.1.0"
