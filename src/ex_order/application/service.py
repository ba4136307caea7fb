# src/ex_order/application/service.py
"""OrderApplicationService — creation workflow, lookup and lifecycle transitions.

Mutating operations run in one transaction on the request's session and
commit or roll back as a unit. Lookups are read-only.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ex_common.cents import cents_to_display
from src.ex_common.datetime_utils import utc_now
from src.ex_common.errors import (
    AuthorizationError,
    CurrencyError,
    DuplicatePendingOrderError,
    EmptyOrderError,
    InternalError,
    InvalidLookupError,
    NotFoundError,
    OrderConflictError,
)
from src.ex_common.id_generator import generate_code, generate_id
from src.ex_order.application.schemas import (
    CreateOrderRequest,
    OrderView,
    TransitionRequest,
)
from src.ex_order.domain.access import AccessPolicy, Requester
from src.ex_order.domain.currency import CurrencyValidator
from src.ex_order.domain.models import LineItem, Order, OrderTotals
from src.ex_order.domain.pending import PendingOrderDetector
from src.ex_order.domain.repository import (
    LineItemRepositoryProtocol,
    OrderRepositoryProtocol,
)
from src.ex_order.domain.state_machine import transition
from src.ex_order.infrastructure.persistence import (
    LineItemRepository,
    OrderRepository,
    pending_lock_key,
)

logger = logging.getLogger(__name__)

_CODE_ATTEMPTS = 5


class OrderApplicationService:
    def __init__(
        self,
        repo: OrderRepositoryProtocol | None = None,
        line_item_repo: LineItemRepositoryProtocol | None = None,
        currency_validator: CurrencyValidator | None = None,
        access_policy: AccessPolicy | None = None,
    ) -> None:
        self._repo: OrderRepositoryProtocol = repo or OrderRepository()
        self._line_items: LineItemRepositoryProtocol = line_item_repo or LineItemRepository()
        self._currency = currency_validator or CurrencyValidator(settings.SUPPORTED_CURRENCY_CODES)
        self._policy = access_policy or AccessPolicy(
            elevated_roles=settings.ELEVATED_ROLES,
            trusted_roles=settings.TRUSTED_ROLES,
        )
        self._detector = PendingOrderDetector(self._repo)

    @property
    def policy(self) -> AccessPolicy:
        return self._policy

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create_order(
        self, db: AsyncSession, requester: Requester, req: CreateOrderRequest
    ) -> OrderView:
        if not self._policy.can_create_for(requester, req.buyer_id):
            logger.info("Order creation denied for buyer %s", req.buyer_id)
            raise AuthorizationError()
        if not self._currency.is_supported(req.currency_code):
            raise CurrencyError(req.currency_code)
        if not req.line_items:
            raise EmptyOrderError()

        try:
            order = await self._create_in_transaction(db, req)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Order %s created: buyer=%s seller=%s items=%d total=%s",
            order.id,
            order.buyer_id,
            order.seller_id,
            len(order.line_items),
            cents_to_display(order.buyer_total_cents),
        )
        return OrderView.project(order, self._policy.visible_fields(requester, order))

    async def _create_in_transaction(self, db: AsyncSession, req: CreateOrderRequest) -> Order:
        # Advisory locks in a stable order so concurrent requests cannot deadlock.
        keys = sorted(
            {(li.artwork_id, li.edition_set_id) for li in req.line_items},
            key=lambda k: pending_lock_key(req.buyer_id, k[0], k[1]),
        )
        for artwork_id, edition_set_id in keys:
            await self._repo.lock_pending_key(db, req.buyer_id, artwork_id, edition_set_id)

        conflict = await self._detector.first_conflict(db, req.buyer_id, req.line_items)
        if conflict is not None:
            raise DuplicatePendingOrderError(conflict.artwork_id, conflict.edition_set_id)

        now = utc_now()
        totals = OrderTotals.from_items(sum(li.price_cents for li in req.line_items))
        order = Order(
            id=generate_id(),
            code=generate_code(),
            buyer_id=req.buyer_id,
            seller_id=req.seller_id,
            currency_code=req.currency_code.strip().upper(),
            items_total_cents=totals.items_total_cents,
            shipping_total_cents=totals.shipping_total_cents,
            commission_fee_cents=totals.commission_fee_cents,
            seller_total_cents=totals.seller_total_cents,
            buyer_total_cents=totals.buyer_total_cents,
            created_at=now,
            updated_at=now,
        )
        for _ in range(_CODE_ATTEMPTS):
            if await self._repo.save(db, order):
                break
            logger.warning("Order code %s already taken, regenerating", order.code)
            order.code = generate_code()
        else:
            raise InternalError("Could not allocate a unique order code")

        for item in req.line_items:
            line_item = LineItem(
                id=generate_id(),
                order_id=order.id,
                artwork_id=item.artwork_id,
                edition_set_id=item.edition_set_id,
                price_cents=item.price_cents,
                created_at=now,
                updated_at=now,
            )
            await self._line_items.save(db, line_item)
            order.line_items.append(line_item)
        return order

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    async def find_order(
        self,
        db: AsyncSession,
        requester: Requester,
        order_id: str | None = None,
        code: str | None = None,
    ) -> OrderView:
        """Resolve an order by id or public code and project it for *requester*.

        A missing order and an order the requester may not see raise
        different errors that render identically.
        """
        if (order_id is None) == (code is None):
            raise InvalidLookupError()

        if order_id is not None:
            order = await self._repo.get_by_id(db, order_id)
        else:
            order = await self._repo.get_by_code(db, code)  # type: ignore[arg-type]

        if order is None:
            raise NotFoundError()
        if not self._policy.can_view(requester, order):
            logger.info("Order %s lookup denied for user=%s", order.id, requester.user_id)
            raise AuthorizationError()

        visible = self._policy.visible_fields(requester, order)
        order.line_items = await self._line_items.list_by_order(db, order.id)
        return OrderView.project(order, visible)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def transition_order(
        self,
        db: AsyncSession,
        requester: Requester,
        order_id: str,
        req: TransitionRequest,
    ) -> OrderView:
        totals = req.totals.to_domain() if req.totals is not None else None
        try:
            order = await self._repo.get_by_id(db, order_id, for_update=True)
            if order is None:
                raise NotFoundError()
            if not self._policy.can_act(requester, order):
                logger.info("Order %s %s denied for user=%s", order.id, req.event.value, requester.user_id)
                raise AuthorizationError()

            updated = transition(order, req.event, reason=req.reason, totals=totals)
            if not await self._repo.update_state(db, updated, expected_version=order.version):
                raise OrderConflictError(order.id)
            updated.line_items = await self._line_items.list_by_order(db, order.id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Order %s %s: %s -> %s (reason=%s)",
            order.id,
            req.event.value,
            order.state.value,
            updated.state.value,
            updated.state_reason.value if updated.state_reason else None,
        )
        return OrderView.project(updated, self._policy.visible_fields(requester, updated))


_service: OrderApplicationService | None = None


def get_order_service() -> OrderApplicationService:
    global _service  # noqa: PLW0603
    if _service is None:
        _service = OrderApplicationService()
    return _service
