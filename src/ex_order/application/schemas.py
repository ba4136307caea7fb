# src/ex_order/application/schemas.py
from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.ex_common.datetime_utils import to_iso8601
from src.ex_common.enums import OrderEvent, StateReason
from src.ex_order.domain.models import LineItem, Order, OrderTotals
from src.ex_order.domain.state_machine import allowed_events


class LineItemRequest(BaseModel):
    artwork_id: str = Field(min_length=1, max_length=64)
    edition_set_id: str | None = Field(default=None, max_length=64)
    price_cents: int = Field(ge=0)

    @field_validator("edition_set_id")
    @classmethod
    def blank_is_none(cls, v: str | None) -> str | None:
        # "" would otherwise be a distinct edition set from "no edition set"
        return v or None


class CreateOrderRequest(BaseModel):
    buyer_id: str = Field(min_length=1, max_length=64)
    seller_id: str = Field(min_length=1, max_length=64)
    currency_code: str = Field(min_length=1, max_length=8)
    line_items: list[LineItemRequest]


class TotalsRequest(BaseModel):
    items_total_cents: int = Field(ge=0)
    shipping_total_cents: int = Field(ge=0)
    commission_fee_cents: int = Field(ge=0)
    seller_total_cents: int = Field(ge=0)
    buyer_total_cents: int = Field(ge=0)

    def to_domain(self) -> OrderTotals:
        return OrderTotals(**self.model_dump())


class TransitionRequest(BaseModel):
    event: OrderEvent
    reason: StateReason | None = None
    totals: TotalsRequest | None = None


class PartyView(BaseModel):
    id: str
    type: str


class LineItemView(BaseModel):
    id: str
    artwork_id: str
    edition_set_id: str | None
    price_cents: int

    @classmethod
    def from_domain(cls, li: LineItem) -> "LineItemView":
        return cls(
            id=li.id,
            artwork_id=li.artwork_id,
            edition_set_id=li.edition_set_id,
            price_cents=li.price_cents,
        )


class OrderView(BaseModel):
    """Order as returned to callers.

    Every key is always present; fields the caller may not read are null.
    """

    id: str | None = None
    code: str | None = None
    buyer: PartyView | None = None
    seller: PartyView | None = None
    state: str | None = None
    state_reason: str | None = None
    currency_code: str | None = None
    items_total_cents: int | None = None
    shipping_total_cents: int | None = None
    commission_fee_cents: int | None = None
    seller_total_cents: int | None = None
    buyer_total_cents: int | None = None
    created_at: str | None = None
    updated_at: str | None = None
    line_items: list[LineItemView] | None = None
    available_events: list[str] | None = None

    @classmethod
    def project(cls, order: Order, visible: frozenset[str]) -> "OrderView":
        full: dict[str, Any] = {
            "id": order.id,
            "code": order.code,
            "buyer": PartyView(id=order.buyer_id, type=order.buyer_type),
            "seller": PartyView(id=order.seller_id, type=order.seller_type),
            "state": order.state.value.upper(),
            "state_reason": order.state_reason.value if order.state_reason else None,
            "currency_code": order.currency_code.upper(),
            "items_total_cents": order.items_total_cents,
            "shipping_total_cents": order.shipping_total_cents,
            "commission_fee_cents": order.commission_fee_cents,
            "seller_total_cents": order.seller_total_cents,
            "buyer_total_cents": order.buyer_total_cents,
            "created_at": to_iso8601(order.created_at) if order.created_at else None,
            "updated_at": to_iso8601(order.updated_at) if order.updated_at else None,
            "line_items": [LineItemView.from_domain(li) for li in order.line_items],
            "available_events": [e.value for e in allowed_events(order.state)],
        }
        return cls(**{k: (v if k in visible else None) for k, v in full.items()})
