"""Order domain model — pure dataclasses, no SQLAlchemy dependency."""
from dataclasses import dataclass, field
from datetime import datetime

from src.ex_common.cents import validate_non_negative
from src.ex_common.enums import REASON_BEARING_STATES, OrderState, PartyType, StateReason
from src.ex_common.errors import TotalsMismatchError


@dataclass(frozen=True)
class OrderTotals:
    """The five money fields of an order, set together and checked together.

    Reconciliation rule:
        buyer_total  = items_total + shipping_total
        seller_total = items_total + shipping_total - commission_fee
    """

    items_total_cents: int = 0
    shipping_total_cents: int = 0
    commission_fee_cents: int = 0
    seller_total_cents: int = 0
    buyer_total_cents: int = 0

    def check_consistent(self) -> None:
        for name in (
            "items_total_cents",
            "shipping_total_cents",
            "commission_fee_cents",
            "seller_total_cents",
            "buyer_total_cents",
        ):
            try:
                validate_non_negative(name, getattr(self, name))
            except ValueError as e:
                raise TotalsMismatchError(str(e)) from None

        gross = self.items_total_cents + self.shipping_total_cents
        if self.buyer_total_cents != gross:
            raise TotalsMismatchError(
                f"buyer_total {self.buyer_total_cents} != items + shipping {gross}"
            )
        if self.seller_total_cents != gross - self.commission_fee_cents:
            raise TotalsMismatchError(
                f"seller_total {self.seller_total_cents} != "
                f"items + shipping - commission {gross - self.commission_fee_cents}"
            )

    @classmethod
    def from_items(cls, items_total_cents: int) -> "OrderTotals":
        """Totals of a freshly created order: no shipping, no commission yet."""
        return cls(
            items_total_cents=items_total_cents,
            seller_total_cents=items_total_cents,
            buyer_total_cents=items_total_cents,
        )


@dataclass
class LineItem:
    id: str
    order_id: str
    artwork_id: str
    price_cents: int
    edition_set_id: str | None = None  # None means "no edition set", not "any"
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        validate_non_negative("price_cents", self.price_cents)


@dataclass
class Order:
    id: str
    code: str
    buyer_id: str
    seller_id: str
    currency_code: str  # ISO 4217, upper-case
    buyer_type: str = PartyType.USER.value
    seller_type: str = PartyType.PARTNER.value
    state: OrderState = OrderState.PENDING
    state_reason: StateReason | None = None
    # Money, all int cents
    items_total_cents: int = 0
    shipping_total_cents: int = 0
    commission_fee_cents: int = 0
    seller_total_cents: int = 0
    buyer_total_cents: int = 0
    version: int = 1
    created_at: datetime | None = None
    updated_at: datetime | None = None
    line_items: list[LineItem] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.buyer_id or not self.seller_id:
            raise ValueError("Order requires both a buyer and a seller")
        if len(self.currency_code) != 3:
            raise ValueError(f"currency_code must be a 3-letter code, got {self.currency_code!r}")
        self.state = OrderState(self.state)
        if self.state_reason is not None:
            self.state_reason = StateReason(self.state_reason)
        if (self.state_reason is not None) != (self.state in REASON_BEARING_STATES):
            raise ValueError(
                f"state_reason {self.state_reason!r} is not valid for state {self.state.value!r}"
            )

    @property
    def totals(self) -> OrderTotals:
        return OrderTotals(
            items_total_cents=self.items_total_cents,
            shipping_total_cents=self.shipping_total_cents,
            commission_fee_cents=self.commission_fee_cents,
            seller_total_cents=self.seller_total_cents,
            buyer_total_cents=self.buyer_total_cents,
        )

    @property
    def is_pending(self) -> bool:
        return self.state is OrderState.PENDING
