"""Shared test fixtures."""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use-in-prod")

from collections.abc import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.ex_common.database import get_db_session  # noqa: E402
from src.ex_order.application.service import (  # noqa: E402
    OrderApplicationService,
    get_order_service,
)
from src.ex_order.domain.access import AccessPolicy  # noqa: E402
from src.ex_order.domain.currency import CurrencyValidator  # noqa: E402
from src.main import app  # noqa: E402
from tests.factories import InMemoryLineItemRepository, InMemoryOrderRepository  # noqa: E402


@pytest.fixture
def order_repo() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture
def line_item_repo(order_repo: InMemoryOrderRepository) -> InMemoryLineItemRepository:
    return InMemoryLineItemRepository(order_repo)


@pytest.fixture
def service(
    order_repo: InMemoryOrderRepository, line_item_repo: InMemoryLineItemRepository
) -> OrderApplicationService:
    return OrderApplicationService(
        repo=order_repo,
        line_item_repo=line_item_repo,
        currency_validator=CurrencyValidator(["USD"]),
        access_policy=AccessPolicy(elevated_roles=["sales_admin"], trusted_roles=["trusted"]),
    )


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
async def client(
    service: OrderApplicationService, db: AsyncMock
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for the FastAPI app, wired to the in-memory service."""

    async def _db_override() -> AsyncGenerator[AsyncMock, None]:
        yield db

    app.dependency_overrides[get_db_session] = _db_override
    app.dependency_overrides[get_order_service] = lambda: service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
