# src/ex_order/api/router.py
"""Order API router: create, lookup, transition.

All endpoints return ApiResponse. request_id is read from request.state
(injected by RequestLogMiddleware).
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ex_common.database import get_db_session
from src.ex_common.response import ApiResponse, success_response
from src.ex_gateway.auth.dependencies import get_requester
from src.ex_order.application.schemas import CreateOrderRequest, TransitionRequest
from src.ex_order.application.service import OrderApplicationService, get_order_service
from src.ex_order.domain.access import Requester

router = APIRouter(prefix="/orders", tags=["orders"])


def _get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="Create a pending order",
)
async def create_order(
    request: Request,
    body: CreateOrderRequest,
    requester: Annotated[Requester, Depends(get_requester)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    svc: Annotated[OrderApplicationService, Depends(get_order_service)],
) -> ApiResponse:
    view = await svc.create_order(db, requester, body)
    resp = success_response(view.model_dump())
    resp.request_id = _get_request_id(request)
    resp.message = "Order created"
    return resp


@router.get("/lookup", response_model=ApiResponse, summary="Find an order by id or code")
async def lookup_order(
    request: Request,
    requester: Annotated[Requester, Depends(get_requester)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    svc: Annotated[OrderApplicationService, Depends(get_order_service)],
    order_id: str | None = Query(None, alias="id", description="Internal order id"),
    code: str | None = Query(None, description="Public order code"),
) -> ApiResponse:
    view = await svc.find_order(db, requester, order_id=order_id, code=code)
    resp = success_response(view.model_dump())
    resp.request_id = _get_request_id(request)
    return resp


@router.post(
    "/{order_id}/transitions",
    response_model=ApiResponse,
    summary="Apply a lifecycle event to an order",
)
async def transition_order(
    request: Request,
    order_id: str,
    body: TransitionRequest,
    requester: Annotated[Requester, Depends(get_requester)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    svc: Annotated[OrderApplicationService, Depends(get_order_service)],
) -> ApiResponse:
    view = await svc.transition_order(db, requester, order_id, body)
    resp = success_response(view.model_dump())
    resp.request_id = _get_request_id(request)
    return resp
