# tests/unit/test_state_machine.py
"""Unit tests for the order lifecycle state machine."""
from datetime import UTC, datetime

import pytest

from src.ex_common.enums import OrderEvent, OrderState, StateReason
from src.ex_common.errors import StateError, TotalsMismatchError
from src.ex_order.domain.models import OrderTotals
from src.ex_order.domain.state_machine import TRANSITIONS, allowed_events, next_state, transition
from tests.factories import make_order

LEGAL = [
    (OrderState.PENDING, OrderEvent.SUBMIT, OrderState.SUBMITTED),
    (OrderState.SUBMITTED, OrderEvent.APPROVE, OrderState.APPROVED),
    (OrderState.APPROVED, OrderEvent.FULFILL, OrderState.FULFILLED),
    (OrderState.APPROVED, OrderEvent.REFUND, OrderState.REFUNDED),
    (OrderState.FULFILLED, OrderEvent.REFUND, OrderState.REFUNDED),
]


class TestTransitionTable:
    @pytest.mark.parametrize("source,event,target", LEGAL)
    def test_legal_transition(
        self, source: OrderState, event: OrderEvent, target: OrderState
    ) -> None:
        order = make_order(state=source)
        result = transition(order, event)
        assert result.state is target
        assert result.state_reason is None

    @pytest.mark.parametrize("source", [OrderState.PENDING, OrderState.SUBMITTED, OrderState.APPROVED])
    def test_cancel_stores_reason(self, source: OrderState) -> None:
        order = make_order(state=source)
        result = transition(order, OrderEvent.CANCEL, reason=StateReason.SELLER_LAPSED)
        assert result.state is OrderState.CANCELED
        assert result.state_reason is StateReason.SELLER_LAPSED

    def test_every_undefined_pair_raises(self) -> None:
        for state in OrderState:
            for event in OrderEvent:
                if (state, event) in TRANSITIONS:
                    continue
                reason = StateReason.ADMIN_CANCELED if event is OrderEvent.CANCEL else None
                order = make_order(state=state)
                with pytest.raises(StateError):
                    transition(order, event, reason=reason)

    def test_terminal_states_have_no_exits(self) -> None:
        assert allowed_events(OrderState.CANCELED) == []
        assert allowed_events(OrderState.REFUNDED) == []

    def test_allowed_events_from_pending(self) -> None:
        assert set(allowed_events(OrderState.PENDING)) == {OrderEvent.SUBMIT, OrderEvent.CANCEL}

    def test_next_state_message(self) -> None:
        with pytest.raises(StateError) as exc_info:
            next_state(OrderState.PENDING, OrderEvent.FULFILL)
        assert "fulfill" in exc_info.value.message
        assert "pending" in exc_info.value.message


class TestReasons:
    def test_cancel_without_reason_rejected(self) -> None:
        with pytest.raises(StateError):
            transition(make_order(), OrderEvent.CANCEL)

    def test_reason_on_non_cancel_rejected(self) -> None:
        with pytest.raises(StateError):
            transition(make_order(), OrderEvent.SUBMIT, reason=StateReason.BUYER_RESCINDED)

    def test_reason_cleared_on_leaving_state(self) -> None:
        # reasons never leak forward: submitted carries no reason
        result = transition(make_order(), OrderEvent.SUBMIT)
        assert result.state_reason is None


class TestAtomicity:
    def test_input_order_untouched(self) -> None:
        order = make_order()
        transition(order, OrderEvent.SUBMIT)
        assert order.state is OrderState.PENDING
        assert order.version == 1

    def test_version_and_updated_at_bumped(self) -> None:
        now = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)
        order = make_order()
        result = transition(order, OrderEvent.SUBMIT, now=now)
        assert result.version == order.version + 1
        assert result.updated_at == now
        assert result.created_at == order.created_at

    def test_totals_applied_with_transition(self) -> None:
        totals = OrderTotals(
            items_total_cents=200_00,
            shipping_total_cents=25_00,
            commission_fee_cents=20_00,
            seller_total_cents=205_00,
            buyer_total_cents=225_00,
        )
        result = transition(make_order(), OrderEvent.SUBMIT, totals=totals)
        assert result.state is OrderState.SUBMITTED
        assert result.totals == totals

    def test_bad_totals_block_transition(self) -> None:
        order = make_order()
        bad = OrderTotals(items_total_cents=100, buyer_total_cents=999)
        with pytest.raises(TotalsMismatchError):
            transition(order, OrderEvent.SUBMIT, totals=bad)
        assert order.state is OrderState.PENDING
        assert order.buyer_total_cents == 100_00

    def test_illegal_event_ignores_totals(self) -> None:
        order = make_order(state=OrderState.REFUNDED)
        with pytest.raises(StateError):
            transition(order, OrderEvent.SUBMIT, totals=order.totals)

    def test_currency_and_parties_preserved(self) -> None:
        order = make_order()
        result = transition(order, OrderEvent.SUBMIT)
        assert result.currency_code == order.currency_code
        assert (result.buyer_id, result.seller_id) == (order.buyer_id, order.seller_id)
