from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Query, status

from auth import require_payment_provider
from errors import (
    ConcurrentUpdateError,
    ExpiredOrUnknownStateError,
    InvalidTransitionError,
    OrderCoreError,
    OrderNotFoundError,
    ValidationError,
)
from schemas import (
    FieldErrorItem,
    OrderListResponse,
    OrderResponse,
    PaymentStatusUpdateRequest,
    StatusUpdateResponse,
    ValidationErrorResponse,
)
from services.order_views import format_order, format_outcome
from services.orders_service import OrdersService

from .dependencies import get_orders_service

router = APIRouter(prefix="/api/orders", tags=["orders"])


def to_http_error(exc: OrderCoreError) -> HTTPException:
    if isinstance(exc, OrderNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    if isinstance(exc, (InvalidTransitionError, ConcurrentUpdateError)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, ExpiredOrUnknownStateError):
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired verification token",
        )
    if isinstance(exc, ValidationError):
        body = ValidationErrorResponse(
            message="Order submission is invalid",
            errors=[
                FieldErrorItem(field=error.field, code=error.code, message=error.message)
                for error in exc.errors
            ],
        )
        return HTTPException(
            status_code=422,
            detail=body.model_dump(),
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def submit_order(
    payload: Dict[str, Any] = Body(...),
    csrf_token: Optional[str] = Header(default=None, alias="X-CSRF-Token"),
    orders: OrdersService = Depends(get_orders_service),
) -> OrderResponse:
    token = csrf_token or payload.get("verificationToken")
    try:
        order = orders.submit_order(payload, token)
    except OrderCoreError as exc:
        raise to_http_error(exc) from exc
    return format_order(order)


@router.get("", response_model=OrderListResponse)
async def list_orders(
    phone: Optional[str] = Query(default=None),
    orders: OrdersService = Depends(get_orders_service),
) -> OrderListResponse:
    if not phone:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="phone query is required to list orders",
        )
    return OrderListResponse(items=[format_order(o) for o in orders.list_by_phone(phone)])


@router.get("/{order_id}", response_model=OrderResponse)
async def read_order(
    order_id: str,
    orders: OrdersService = Depends(get_orders_service),
) -> OrderResponse:
    try:
        order = orders.get_order(order_id)
    except OrderCoreError as exc:
        raise to_http_error(exc) from exc
    return format_order(order)


@router.post("/{order_id}/cancel", response_model=StatusUpdateResponse)
async def cancel_order(
    order_id: str,
    orders: OrdersService = Depends(get_orders_service),
) -> StatusUpdateResponse:
    try:
        outcome = orders.cancel_order(order_id)
    except OrderCoreError as exc:
        raise to_http_error(exc) from exc
    return format_outcome(outcome)


@router.post(
    "/{order_id}/payment-status",
    response_model=StatusUpdateResponse,
    dependencies=[Depends(require_payment_provider)],
)
async def update_payment_status(
    order_id: str,
    payload: PaymentStatusUpdateRequest,
    orders: OrdersService = Depends(get_orders_service),
) -> StatusUpdateResponse:
    try:
        outcome = orders.record_payment_status(order_id, payload.paymentStatus, payload.isPaid)
    except OrderCoreError as exc:
        raise to_http_error(exc) from exc
    return format_outcome(outcome)
