from fastapi import APIRouter, Depends

from auth import require_admin
from errors import OrderCoreError
from schemas import StatusUpdateRequest, StatusUpdateResponse
from services.order_views import format_outcome
from services.orders_service import OrdersService

from .dependencies import get_orders_service
from .orders import to_http_error

router = APIRouter(
    prefix="/api/admin/orders",
    tags=["admin-orders"],
    dependencies=[Depends(require_admin)],
)


@router.patch("/{order_id}/status", response_model=StatusUpdateResponse)
async def set_order_status(
    order_id: str,
    payload: StatusUpdateRequest,
    orders: OrdersService = Depends(get_orders_service),
) -> StatusUpdateResponse:
    try:
        outcome = orders.update_status(
            order_id,
            payload.status,
            driver_name=payload.driverName,
            expected_version=payload.expectedVersion,
        )
    except OrderCoreError as exc:
        raise to_http_error(exc) from exc
    return format_outcome(outcome)
