"""Order lifecycle state machine.

Transitions are table-driven: a (state, event) pair is legal only if it is a
key of ``TRANSITIONS``. ``transition`` never mutates its input; it returns a
new ``Order`` or raises, so a failed transition leaves the caller's order
untouched.

    pending   -> submitted (submit) | canceled (cancel)
    submitted -> approved (approve) | canceled (cancel)
    approved  -> fulfilled (fulfill) | canceled (cancel) | refunded (refund)
    fulfilled -> refunded (refund)
"""
import dataclasses
from datetime import datetime

from src.ex_common.datetime_utils import utc_now
from src.ex_common.enums import OrderEvent, OrderState, StateReason
from src.ex_common.errors import StateError
from src.ex_order.domain.models import Order, OrderTotals

TRANSITIONS: dict[tuple[OrderState, OrderEvent], OrderState] = {
    (OrderState.PENDING, OrderEvent.SUBMIT): OrderState.SUBMITTED,
    (OrderState.PENDING, OrderEvent.CANCEL): OrderState.CANCELED,
    (OrderState.SUBMITTED, OrderEvent.APPROVE): OrderState.APPROVED,
    (OrderState.SUBMITTED, OrderEvent.CANCEL): OrderState.CANCELED,
    (OrderState.APPROVED, OrderEvent.FULFILL): OrderState.FULFILLED,
    (OrderState.APPROVED, OrderEvent.CANCEL): OrderState.CANCELED,
    (OrderState.APPROVED, OrderEvent.REFUND): OrderState.REFUNDED,
    (OrderState.FULFILLED, OrderEvent.REFUND): OrderState.REFUNDED,
}

# Events whose target state requires a reason.
REASON_EVENTS: frozenset[OrderEvent] = frozenset({OrderEvent.CANCEL})


def allowed_events(state: OrderState) -> list[OrderEvent]:
    return [event for (src, event) in TRANSITIONS if src is state]


def next_state(state: OrderState, event: OrderEvent) -> OrderState:
    try:
        return TRANSITIONS[(state, event)]
    except KeyError:
        raise StateError(
            f"Cannot {event.value} an order in state {state.value}"
        ) from None


def transition(
    order: Order,
    event: OrderEvent,
    reason: StateReason | None = None,
    totals: OrderTotals | None = None,
    now: datetime | None = None,
) -> Order:
    """Apply *event* to *order* and return the resulting order.

    Raises:
        StateError: (state, event) is not in the table, or the reason does not
            fit the event (missing on cancel, present on anything else).
        TotalsMismatchError: *totals* were supplied and do not reconcile.
    """
    target = next_state(order.state, event)

    if event in REASON_EVENTS and reason is None:
        raise StateError(f"A reason is required to {event.value} an order")
    if event not in REASON_EVENTS and reason is not None:
        raise StateError(f"A reason is only accepted when canceling, not on {event.value}")

    changes: dict[str, object] = {}
    if totals is not None:
        totals.check_consistent()
        changes = dataclasses.asdict(totals)

    return dataclasses.replace(
        order,
        state=target,
        state_reason=reason,
        version=order.version + 1,
        updated_at=now or utc_now(),
        line_items=list(order.line_items),
        **changes,
    )
