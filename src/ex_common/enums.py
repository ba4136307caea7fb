"""Global enums — must match DB CHECK constraints exactly.

See alembic/versions/001_create_orders.py.
"""

from enum import Enum


class OrderState(str, Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    CANCELED = "canceled"
    FULFILLED = "fulfilled"
    REFUNDED = "refunded"


class StateReason(str, Enum):
    """Why an order was canceled. Only valid alongside OrderState.CANCELED."""
    SELLER_LAPSED = "seller_lapsed"
    SELLER_REJECTED = "seller_rejected"
    BUYER_RESCINDED = "buyer_rescinded"
    BUYER_ABANDONED = "buyer_abandoned"
    ADMIN_CANCELED = "admin_canceled"


class OrderEvent(str, Enum):
    SUBMIT = "submit"
    APPROVE = "approve"
    CANCEL = "cancel"
    FULFILL = "fulfill"
    REFUND = "refund"


class PartyType(str, Enum):
    USER = "user"
    PARTNER = "partner"


# States whose entry requires a reason; state_reason must be NULL everywhere else.
REASON_BEARING_STATES: frozenset[OrderState] = frozenset({OrderState.CANCELED})
