# src/ex_order/infrastructure/persistence.py
"""Order and line item repositories — raw SQL persistence implementation."""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ex_order.domain.models import LineItem, Order

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

# A taken public code inserts no row; the caller retries with a fresh code.
_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (id, code, buyer_id, buyer_type, seller_id, seller_type,
        currency_code, state, state_reason,
        items_total_cents, shipping_total_cents, commission_fee_cents,
        seller_total_cents, buyer_total_cents, version, created_at, updated_at)
    VALUES (:id, :code, :buyer_id, :buyer_type, :seller_id, :seller_type,
        :currency_code, :state, :state_reason,
        :items_total_cents, :shipping_total_cents, :commission_fee_cents,
        :seller_total_cents, :buyer_total_cents, :version, :created_at, :updated_at)
    ON CONFLICT (code) DO NOTHING
""")

# Optimistic check: the row is only touched if nobody bumped the version first.
_UPDATE_STATE_SQL = text("""
    UPDATE orders
    SET state = :state, state_reason = :state_reason,
        items_total_cents = :items_total_cents,
        shipping_total_cents = :shipping_total_cents,
        commission_fee_cents = :commission_fee_cents,
        seller_total_cents = :seller_total_cents,
        buyer_total_cents = :buyer_total_cents,
        version = :version, updated_at = :updated_at
    WHERE id = :id AND version = :expected_version
""")

_SELECT_COLUMNS = """
    o.id, o.code, o.buyer_id, o.buyer_type, o.seller_id, o.seller_type,
    o.currency_code, o.state, o.state_reason,
    o.items_total_cents, o.shipping_total_cents, o.commission_fee_cents,
    o.seller_total_cents, o.buyer_total_cents, o.version, o.created_at, o.updated_at
"""

_GET_ORDER_BY_ID_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders o WHERE o.id = :id
""")

_GET_ORDER_BY_ID_FOR_UPDATE_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders o WHERE o.id = :id FOR UPDATE
""")

_GET_ORDER_BY_CODE_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders o WHERE o.code = :code
""")

# IS NOT DISTINCT FROM: a NULL edition_set_id only matches NULL.
_FIND_PENDING_FOR_ARTWORK_SQL = text(f"""
    SELECT {_SELECT_COLUMNS}
    FROM orders o
    JOIN line_items li ON li.order_id = o.id
    WHERE o.state = 'pending'
      AND o.buyer_id = :buyer_id
      AND li.artwork_id = :artwork_id
      AND li.edition_set_id IS NOT DISTINCT FROM CAST(:edition_set_id AS TEXT)
    ORDER BY o.created_at DESC
    LIMIT 1
""")

_LOCK_PENDING_KEY_SQL = text("SELECT pg_advisory_xact_lock(hashtext(:lock_key))")

_INSERT_LINE_ITEM_SQL = text("""
    INSERT INTO line_items (id, order_id, artwork_id, edition_set_id, price_cents,
        created_at, updated_at)
    VALUES (:id, :order_id, :artwork_id, :edition_set_id, :price_cents,
        :created_at, :updated_at)
""")

_LIST_LINE_ITEMS_SQL = text("""
    SELECT id, order_id, artwork_id, edition_set_id, price_cents, created_at, updated_at
    FROM line_items
    WHERE order_id = :order_id
    ORDER BY created_at ASC, id ASC
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_order(row: Any) -> Order:
    """Convert a DB result row to an Order domain object."""
    return Order(
        id=row.id,
        code=row.code,
        buyer_id=row.buyer_id,
        buyer_type=row.buyer_type,
        seller_id=row.seller_id,
        seller_type=row.seller_type,
        currency_code=row.currency_code,
        state=row.state,
        state_reason=row.state_reason,
        items_total_cents=row.items_total_cents,
        shipping_total_cents=row.shipping_total_cents,
        commission_fee_cents=row.commission_fee_cents,
        seller_total_cents=row.seller_total_cents,
        buyer_total_cents=row.buyer_total_cents,
        version=row.version,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_line_item(row: Any) -> LineItem:
    return LineItem(
        id=row.id,
        order_id=row.order_id,
        artwork_id=row.artwork_id,
        edition_set_id=row.edition_set_id,
        price_cents=row.price_cents,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def pending_lock_key(buyer_id: str, artwork_id: str, edition_set_id: str | None) -> str:
    return f"pending:{buyer_id}:{artwork_id}:{edition_set_id or ''}"


# ---------------------------------------------------------------------------
# Repositories
# ---------------------------------------------------------------------------


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def save(self, db: AsyncSession, order: Order) -> bool:
        """Insert *order*; False if its public code is already taken."""
        result = await db.execute(
            _INSERT_ORDER_SQL,
            {
                "id": order.id,
                "code": order.code,
                "buyer_id": order.buyer_id,
                "buyer_type": order.buyer_type,
                "seller_id": order.seller_id,
                "seller_type": order.seller_type,
                "currency_code": order.currency_code,
                "state": order.state.value,
                "state_reason": order.state_reason.value if order.state_reason else None,
                "items_total_cents": order.items_total_cents,
                "shipping_total_cents": order.shipping_total_cents,
                "commission_fee_cents": order.commission_fee_cents,
                "seller_total_cents": order.seller_total_cents,
                "buyer_total_cents": order.buyer_total_cents,
                "version": order.version,
                "created_at": order.created_at,
                "updated_at": order.updated_at,
            },
        )
        return bool(result.rowcount == 1)

    async def get_by_id(
        self, db: AsyncSession, order_id: str, for_update: bool = False
    ) -> Order | None:
        sql = _GET_ORDER_BY_ID_FOR_UPDATE_SQL if for_update else _GET_ORDER_BY_ID_SQL
        result = await db.execute(sql, {"id": order_id})
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def get_by_code(self, db: AsyncSession, code: str) -> Order | None:
        result = await db.execute(_GET_ORDER_BY_CODE_SQL, {"code": code})
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def find_pending_for_artwork(
        self,
        db: AsyncSession,
        buyer_id: str,
        artwork_id: str,
        edition_set_id: str | None,
    ) -> Order | None:
        result = await db.execute(
            _FIND_PENDING_FOR_ARTWORK_SQL,
            {
                "buyer_id": buyer_id,
                "artwork_id": artwork_id,
                "edition_set_id": edition_set_id,
            },
        )
        row = result.fetchone()
        return _row_to_order(row) if row else None

    async def update_state(
        self, db: AsyncSession, order: Order, expected_version: int
    ) -> bool:
        """Persist state, reason and totals. False if the version check lost."""
        result = await db.execute(
            _UPDATE_STATE_SQL,
            {
                "id": order.id,
                "state": order.state.value,
                "state_reason": order.state_reason.value if order.state_reason else None,
                "items_total_cents": order.items_total_cents,
                "shipping_total_cents": order.shipping_total_cents,
                "commission_fee_cents": order.commission_fee_cents,
                "seller_total_cents": order.seller_total_cents,
                "buyer_total_cents": order.buyer_total_cents,
                "version": order.version,
                "updated_at": order.updated_at,
                "expected_version": expected_version,
            },
        )
        return bool(result.rowcount == 1)

    async def lock_pending_key(
        self,
        db: AsyncSession,
        buyer_id: str,
        artwork_id: str,
        edition_set_id: str | None,
    ) -> None:
        """Serialize check-then-insert per buyer/artwork until the transaction ends."""
        await db.execute(
            _LOCK_PENDING_KEY_SQL,
            {"lock_key": pending_lock_key(buyer_id, artwork_id, edition_set_id)},
        )


class LineItemRepository:
    """Concrete implementation of LineItemRepositoryProtocol using raw SQL."""

    async def save(self, db: AsyncSession, line_item: LineItem) -> None:
        await db.execute(
            _INSERT_LINE_ITEM_SQL,
            {
                "id": line_item.id,
                "order_id": line_item.order_id,
                "artwork_id": line_item.artwork_id,
                "edition_set_id": line_item.edition_set_id,
                "price_cents": line_item.price_cents,
                "created_at": line_item.created_at,
                "updated_at": line_item.updated_at,
            },
        )

    async def list_by_order(self, db: AsyncSession, order_id: str) -> list[LineItem]:
        result = await db.execute(_LIST_LINE_ITEMS_SQL, {"order_id": order_id})
        return [_row_to_line_item(row) for row in result.fetchall()]
