# src/ex_order/domain/repository.py
"""Repository Protocols — interface contract for the persistence layer."""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ex_order.domain.models import LineItem, Order


class OrderRepositoryProtocol(Protocol):
    async def save(self, db: AsyncSession, order: Order) -> bool: ...

    async def get_by_id(
        self, db: AsyncSession, order_id: str, for_update: bool = False
    ) -> Order | None: ...

    async def get_by_code(self, db: AsyncSession, code: str) -> Order | None: ...

    async def find_pending_for_artwork(
        self,
        db: AsyncSession,
        buyer_id: str,
        artwork_id: str,
        edition_set_id: str | None,
    ) -> Order | None: ...

    async def update_state(
        self, db: AsyncSession, order: Order, expected_version: int
    ) -> bool: ...

    async def lock_pending_key(
        self,
        db: AsyncSession,
        buyer_id: str,
        artwork_id: str,
        edition_set_id: str | None,
    ) -> None: ...


class LineItemRepositoryProtocol(Protocol):
    async def save(self, db: AsyncSession, line_item: LineItem) -> None: ...

    async def list_by_order(self, db: AsyncSession, order_id: str) -> list[LineItem]: ...
