"""
Tests for entry status and type enumerations.

Verifies:
- Labels, including the type-specific wording of open and paid entries
- Category mapping
- The bilingual filter vocabulary and its totality
- The status state machine
"""

from decimal import Decimal

import pytest

from journal_kernel.domain.status import (
    VALID_TRANSITIONS,
    JournalEntryStatus,
    JournalEntryType,
    StatusCategory,
    filter_values,
    status_category,
    status_label,
    type_label,
)

S = JournalEntryStatus
T = JournalEntryType


class TestStatusLabels:

    @pytest.mark.parametrize(
        "status, entry_type, expected",
        [
            (S.PLANNED, None, "Planejado"),
            (S.PENDING, None, "Aberto"),
            (S.PENDING, T.TRANSFER, "Aberto"),
            (S.PENDING, T.INCOME, "A receber"),
            (S.PENDING, T.EXPENSE, "A pagar"),
            (S.PAID, T.INCOME, "Recebido"),
            (S.PAID, T.EXPENSE, "Pago"),
            (S.PAID, None, "Pago"),
            (S.CANCELLED, T.INCOME, "Cancelado"),
            (S.OVERDUE, T.EXPENSE, "Atrasado"),
        ],
    )
    def test_label(self, status, entry_type, expected):
        assert status.label(entry_type) == expected

    def test_legacy_type_token_specializes_label(self):
        assert S.PENDING.label("receita") == "A receber"

    def test_raw_value_label(self):
        assert status_label("pending", "expense") == "A pagar"

    def test_unknown_raw_value_capitalized(self):
        assert status_label("estornado") == "Estornado"

    def test_missing_status_has_no_label(self):
        assert status_label(None) is None


class TestStatusCategory:

    @pytest.mark.parametrize(
        "status, category",
        [
            (S.PLANNED, StatusCategory.OPEN),
            (S.PENDING, StatusCategory.OPEN),
            (S.PAID, StatusCategory.SETTLED),
            (S.CANCELLED, StatusCategory.CANCELLED),
            (S.OVERDUE, StatusCategory.OVERDUE),
        ],
    )
    def test_category(self, status, category):
        assert status.category == category
        assert status_category(status.value) == category

    def test_unknown_value_has_no_category(self):
        assert status_category("estornado") is None


class TestFilterValues:
    """Both vocabularies map onto the canonical statuses."""

    @pytest.mark.parametrize(
        "token, expected",
        [
            ("planejado", {S.PLANNED}),
            ("pendente", {S.PENDING}),
            ("pago", {S.PAID}),
            ("cancelado", {S.CANCELLED}),
            ("atrasado", {S.OVERDUE}),
            ("open", {S.PLANNED, S.PENDING}),
            ("pending", {S.PENDING}),
            ("settled", {S.PAID}),
            ("cancelled", {S.CANCELLED}),
            ("overdue", {S.OVERDUE}),
            ("planned", {S.PLANNED}),
            ("paid", {S.PAID}),
        ],
    )
    def test_known_tokens(self, token, expected):
        assert filter_values(token) == frozenset(expected)

    def test_case_and_whitespace_insensitive(self):
        assert filter_values("  Open ") == frozenset({S.PLANNED, S.PENDING})
        assert filter_values("PAGO") == frozenset({S.PAID})

    @pytest.mark.parametrize("token", ["", "   ", "quitado", None, 3])
    def test_unknown_tokens_yield_empty_set(self, token):
        assert filter_values(token) == frozenset()

    def test_every_token_maps_to_canonical_statuses(self):
        for token in ["planejado", "pendente", "pago", "cancelado", "atrasado",
                      "open", "pending", "settled", "cancelled", "overdue"]:
            assert filter_values(token) <= set(JournalEntryStatus)


class TestTransitions:

    def test_terminal_statuses(self):
        assert S.PAID.is_terminal
        assert S.CANCELLED.is_terminal
        assert not S.PENDING.is_terminal

    def test_cancelled_is_absorbing(self):
        for target in JournalEntryStatus:
            if target != S.CANCELLED:
                assert not S.CANCELLED.can_transition_to(target)

    def test_paid_never_reopens(self):
        assert not S.PAID.can_transition_to(S.PENDING)
        assert not S.PAID.can_transition_to(S.OVERDUE)

    def test_overdue_can_return_to_pending(self):
        assert S.OVERDUE.can_transition_to(S.PENDING)

    def test_pending_cannot_return_to_planned(self):
        assert not S.PENDING.can_transition_to(S.PLANNED)

    def test_self_transition_allowed(self):
        for status in JournalEntryStatus:
            assert status.can_transition_to(status)

    def test_every_non_terminal_status_can_be_cancelled(self):
        for status, targets in VALID_TRANSITIONS.items():
            if targets:
                assert S.CANCELLED in targets


class TestEntryType:

    def test_signs(self):
        assert T.INCOME.sign == Decimal("1")
        assert T.EXPENSE.sign == Decimal("-1")
        assert T.TRANSFER.sign == Decimal("-1")

    @pytest.mark.parametrize(
        "token, expected",
        [
            ("income", T.INCOME),
            ("receita", T.INCOME),
            ("Despesa", T.EXPENSE),
            ("transferencia", T.TRANSFER),
            ("transferência", T.TRANSFER),
            ("outro", None),
            (None, None),
        ],
    )
    def test_parse(self, token, expected):
        assert JournalEntryType.parse(token) == expected

    def test_type_labels(self):
        assert type_label("income") == "Receita"
        assert type_label(T.TRANSFER) == "Transferência"
        assert type_label("outro") == "Outro"
