"""
Tests for pure status derivation (journal_kernel/domain/entry_state.py).

Verifies:
- Rule precedence: cancelled > all paid > overdue > planned/pending
- Entries without installments judged on their own due date
- Determinism and idempotence (property-based)
"""

from datetime import date, timedelta

from hypothesis import given
from hypothesis import strategies as st

from journal_kernel.domain.entry_state import EntryState, InstallmentState, derive_status
from journal_kernel.domain.status import JournalEntryStatus

S = JournalEntryStatus
TODAY = date(2024, 1, 15)
YESTERDAY = TODAY - timedelta(days=1)
TOMORROW = TODAY + timedelta(days=1)


def _state(
    current=S.PENDING,
    movement_date=TODAY,
    due_date=None,
    installments=(),
) -> EntryState:
    return EntryState(
        current_status=current,
        movement_date=movement_date,
        due_date=due_date,
        installments=tuple(InstallmentState(due_date=d, is_paid=p) for d, p in installments),
    )


class TestDeriveStatus:

    def test_cancelled_stays_cancelled(self):
        state = _state(current=S.CANCELLED, installments=[(YESTERDAY, False)])
        assert derive_status(state, TODAY) == S.CANCELLED

    def test_all_installments_paid(self):
        state = _state(installments=[(YESTERDAY, True), (TOMORROW, True)])
        assert derive_status(state, TODAY) == S.PAID

    def test_open_installment_past_due_is_overdue(self):
        state = _state(installments=[(YESTERDAY, False), (TOMORROW, False)])
        assert derive_status(state, TODAY) == S.OVERDUE

    def test_due_today_is_not_overdue(self):
        state = _state(installments=[(TODAY, False)])
        assert derive_status(state, TODAY) == S.PENDING

    def test_paid_past_installment_does_not_make_overdue(self):
        state = _state(installments=[(YESTERDAY, True), (TOMORROW, False)])
        assert derive_status(state, TODAY) == S.PENDING

    def test_overdue_recovers_to_pending_once_caught_up(self):
        state = _state(current=S.OVERDUE, installments=[(YESTERDAY, True), (TOMORROW, False)])
        assert derive_status(state, TODAY) == S.PENDING

    def test_planned_kept_for_future_movement_without_payments(self):
        state = _state(current=S.PLANNED, movement_date=TOMORROW, installments=[(TOMORROW, False)])
        assert derive_status(state, TODAY) == S.PLANNED

    def test_planned_becomes_pending_on_movement_date(self):
        state = _state(current=S.PLANNED, movement_date=TODAY, installments=[(TOMORROW, False)])
        assert derive_status(state, TODAY) == S.PENDING

    def test_partial_payment_leaves_planned(self):
        state = _state(
            current=S.PLANNED,
            movement_date=TOMORROW,
            installments=[(TOMORROW, True), (TOMORROW + timedelta(days=30), False)],
        )
        assert derive_status(state, TODAY) == S.PENDING

    def test_pending_never_returns_to_planned(self):
        state = _state(current=S.PENDING, movement_date=TOMORROW, installments=[(TOMORROW, False)])
        assert derive_status(state, TODAY) == S.PENDING

    def test_time_dependence(self):
        """The same stored state turns overdue once its due date has passed."""
        state = _state(installments=[(TODAY, False)])
        assert derive_status(state, TODAY) == S.PENDING
        assert derive_status(state, TOMORROW) == S.OVERDUE


class TestEntryWithoutInstallments:

    def test_past_due_date_is_overdue(self):
        assert derive_status(_state(due_date=YESTERDAY), TODAY) == S.OVERDUE

    def test_future_due_date_is_pending(self):
        assert derive_status(_state(due_date=TOMORROW), TODAY) == S.PENDING

    def test_no_due_date_planned_in_future(self):
        state = _state(current=S.PLANNED, movement_date=TOMORROW)
        assert derive_status(state, TODAY) == S.PLANNED

    def test_paid_entry_without_installments(self):
        """No installments means nothing to pay; rule 2 does not apply vacuously."""
        assert derive_status(_state(due_date=TOMORROW), TODAY) == S.PENDING


_statuses = st.sampled_from(list(JournalEntryStatus))
_dates = st.dates(min_value=date(2023, 1, 1), max_value=date(2025, 12, 31))
_installments = st.lists(st.tuples(_dates, st.booleans()), max_size=6)


@st.composite
def entry_states(draw) -> EntryState:
    return _state(
        current=draw(_statuses),
        movement_date=draw(_dates),
        due_date=draw(st.one_of(st.none(), _dates)),
        installments=draw(_installments),
    )


class TestDerivationProperties:

    @given(entry_states(), _dates)
    def test_deterministic(self, state, today):
        assert derive_status(state, today) == derive_status(state, today)

    @given(entry_states(), _dates)
    def test_idempotent(self, state, today):
        first = derive_status(state, today)
        again = EntryState(
            current_status=first,
            movement_date=state.movement_date,
            due_date=state.due_date,
            installments=state.installments,
        )
        assert derive_status(again, today) == first

    @given(entry_states(), _dates)
    def test_cancellation_absorbs(self, state, today):
        cancelled = EntryState(
            current_status=S.CANCELLED,
            movement_date=state.movement_date,
            due_date=state.due_date,
            installments=state.installments,
        )
        assert derive_status(cancelled, today) == S.CANCELLED

    @given(entry_states(), _dates)
    def test_never_derives_cancelled_from_live_entry(self, state, today):
        if state.current_status != S.CANCELLED:
            assert derive_status(state, today) != S.CANCELLED
