"""Tests for ex_common.enums — values must match DB CHECK constraints."""

from src.ex_common.enums import (
    REASON_BEARING_STATES,
    OrderEvent,
    OrderState,
    PartyType,
    StateReason,
)


def test_order_states() -> None:
    assert {s.value for s in OrderState} == {
        "pending",
        "submitted",
        "approved",
        "canceled",
        "fulfilled",
        "refunded",
    }


def test_state_reasons() -> None:
    assert {r.value for r in StateReason} == {
        "seller_lapsed",
        "seller_rejected",
        "buyer_rescinded",
        "buyer_abandoned",
        "admin_canceled",
    }


def test_only_canceled_bears_reason() -> None:
    assert REASON_BEARING_STATES == frozenset({OrderState.CANCELED})


def test_events() -> None:
    assert {e.value for e in OrderEvent} == {"submit", "approve", "cancel", "fulfill", "refund"}


def test_party_types() -> None:
    assert PartyType.USER.value == "user"
    assert PartyType.PARTNER.value == "partner"
