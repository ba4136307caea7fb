"""Who may load an order, and which of its fields they may read.

Two independent decisions, composed by the caller:

1. ``access_level`` — evaluated top to bottom, first match wins:
     party to the order (id and type match)  -> FULL
     elevated role (e.g. sales_admin)        -> FULL
     trusted role                            -> RESTRICTED
     anything else                           -> NONE
2. ``visible_fields`` — derived from the level. RESTRICTED callers load the
   order but never see seller-only money fields.
"""
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from src.ex_common.enums import PartyType
from src.ex_order.domain.models import Order

ORDER_FIELDS: frozenset[str] = frozenset({
    "id",
    "code",
    "buyer",
    "seller",
    "state",
    "state_reason",
    "currency_code",
    "items_total_cents",
    "shipping_total_cents",
    "commission_fee_cents",
    "seller_total_cents",
    "buyer_total_cents",
    "created_at",
    "updated_at",
    "line_items",
    "available_events",
})

SELLER_ONLY_FIELDS: frozenset[str] = frozenset({
    "commission_fee_cents",
    "seller_total_cents",
})


class AccessLevel(str, Enum):
    FULL = "FULL"
    RESTRICTED = "RESTRICTED"
    NONE = "NONE"


@dataclass(frozen=True)
class Requester:
    """Identity of the caller for one request, as verified upstream."""

    user_id: str | None = None
    partner_ids: frozenset[str] = field(default_factory=frozenset)
    roles: frozenset[str] = field(default_factory=frozenset)

    def is_party(self, party_id: str, party_type: str) -> bool:
        if party_type == PartyType.USER.value:
            return self.user_id is not None and self.user_id == party_id
        if party_type == PartyType.PARTNER.value:
            return party_id in self.partner_ids
        return False


class AccessPolicy:
    def __init__(self, elevated_roles: Iterable[str], trusted_roles: Iterable[str]) -> None:
        self._elevated = frozenset(elevated_roles)
        self._trusted = frozenset(trusted_roles)

    def is_elevated(self, requester: Requester) -> bool:
        return bool(requester.roles & self._elevated)

    def is_trusted(self, requester: Requester) -> bool:
        return bool(requester.roles & self._trusted)

    def access_level(self, requester: Requester, order: Order) -> AccessLevel:
        if requester.is_party(order.buyer_id, order.buyer_type) or requester.is_party(
            order.seller_id, order.seller_type
        ):
            return AccessLevel.FULL
        if self.is_elevated(requester):
            return AccessLevel.FULL
        if self.is_trusted(requester):
            return AccessLevel.RESTRICTED
        return AccessLevel.NONE

    def can_view(self, requester: Requester, order: Order) -> bool:
        return self.access_level(requester, order) is not AccessLevel.NONE

    def visible_fields(self, requester: Requester, order: Order) -> frozenset[str]:
        level = self.access_level(requester, order)
        if level is AccessLevel.FULL:
            return ORDER_FIELDS
        if level is AccessLevel.RESTRICTED:
            return ORDER_FIELDS - SELLER_ONLY_FIELDS
        return frozenset()

    def can_act(self, requester: Requester, order: Order) -> bool:
        """Trusted callers are read-only; only parties and elevated roles mutate."""
        return self.access_level(requester, order) is AccessLevel.FULL

    def can_create_for(self, requester: Requester, buyer_id: str) -> bool:
        """Buyers create for themselves; trusted callers only read."""
        if requester.is_party(buyer_id, PartyType.USER.value):
            return True
        return self.is_elevated(requester)
