"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Provides the common constructor and session-handling contract for
    every service in the kernel layer.  Building-block services receive a
    SQLAlchemy ``Session`` and use ``session.flush()`` -- never
    ``session.commit()``.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.

Invariants enforced:
    Transaction boundaries: building-block services (InstallmentLedgerService,
    JournalEntryStateService) flush within the caller's transaction and never
    commit or rollback themselves.  Only the payment orchestrator owns a
    commit, and only when constructed with ``auto_commit=True``.

Failure modes:
    - A subclass calling ``session.commit()`` breaks the atomicity of the
      payment unit of work (installment update + entry status sync).
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from journal_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for all kernel services.

    Contract:
        Accepts a SQLAlchemy ``Session`` from the caller and uses
        ``session.flush()`` to persist changes within the active
        transaction.

    Non-goals:
        - Does NOT provide query-only (read) methods -- those belong
          in ``journal_kernel/selectors/``.
    """

    def __init__(self, session: Session):
        self.session = session
