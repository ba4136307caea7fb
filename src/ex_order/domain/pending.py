"""Detects an existing pending order for the same buyer and artwork variant."""
from collections.abc import Iterable
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ex_order.domain.repository import OrderRepositoryProtocol


class ArtworkVariant(Protocol):
    artwork_id: str
    edition_set_id: str | None


class PendingOrderDetector:
    def __init__(self, repo: OrderRepositoryProtocol) -> None:
        self._repo = repo

    async def has_pending(
        self,
        db: AsyncSession,
        buyer_id: str,
        artwork_id: str,
        edition_set_id: str | None = None,
    ) -> bool:
        # edition_set_id=None matches only line items without an edition set
        found = await self._repo.find_pending_for_artwork(
            db, buyer_id, artwork_id, edition_set_id
        )
        return found is not None

    async def first_conflict(
        self, db: AsyncSession, buyer_id: str, items: Iterable[ArtworkVariant]
    ) -> ArtworkVariant | None:
        """Return the first requested item that already has a pending order."""
        for item in items:
            if await self.has_pending(db, buyer_id, item.artwork_id, item.edition_set_id):
                return item
        return None

    async def any_pending(
        self, db: AsyncSession, buyer_id: str, items: Iterable[ArtworkVariant]
    ) -> bool:
        return await self.first_conflict(db, buyer_id, items) is not None
