from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from domain import OAuthProvider, OrderStatus


class HandshakeTokenResponse(BaseModel):
    token: str
    nonce: str


class OAuthStartResponse(BaseModel):
    provider: OAuthProvider
    state: str
    nonce: str


class OAuthCallbackResponse(BaseModel):
    provider: OAuthProvider
    nonce: str
    redirect_to: str


class CustomerResponse(BaseModel):
    name: str
    phone: str
    address: str
    lat: Optional[float] = None
    lng: Optional[float] = None


class OrderItemResponse(BaseModel):
    menu_item_id: str
    name: str
    qty: int
    unit_price: int
    options: Optional[Dict[str, Any]] = None


class DeliveryResponse(BaseModel):
    type: str
    fee: int
    distance_km: Optional[float] = None


class StatusChangeResponse(BaseModel):
    from_status: OrderStatus
    to_status: OrderStatus
    at: datetime
    driver_name: Optional[str] = None


class OrderResponse(BaseModel):
    id: str
    status: OrderStatus
    customer: CustomerResponse
    items: List[OrderItemResponse]
    delivery: DeliveryResponse
    payment_method: str
    payment_status: Optional[str]
    is_paid: bool
    subtotal: int
    total: int
    version: int
    created_at: datetime
    updated_at: datetime
    history: List[StatusChangeResponse] = []


class OrderListResponse(BaseModel):
    items: List[OrderResponse]


class StatusUpdateRequest(BaseModel):
    status: OrderStatus = Field(..., description="Target order status")
    driverName: Optional[str] = Field(
        default=None, description="Driver assigned to the order, informational only"
    )
    expectedVersion: Optional[int] = Field(
        default=None, description="Reject the update if the order changed since this version"
    )


class PaymentStatusUpdateRequest(BaseModel):
    paymentStatus: str = Field(..., min_length=1, description="Status reported by the payment provider")
    isPaid: bool = False


class StatusUpdateResponse(BaseModel):
    order: OrderResponse
    refund_action: str
    should_refund: bool


class DeliveryEstimateRequest(BaseModel):
    distanceKm: Optional[float] = None


class DeliveryEstimateResponse(BaseModel):
    distance_km: float
    fee: int


class FieldErrorItem(BaseModel):
    field: str
    code: str
    message: str


class ValidationErrorResponse(BaseModel):
    message: str
    errors: List[FieldErrorItem]


class HandshakeSweepStatus(BaseModel):
    running: bool
    interval_seconds: int
    last_run_at: Optional[datetime]
    last_removed: int
    pending_tokens: int


class HealthResponse(BaseModel):
    ok: bool
    handshake_sweep: HandshakeSweepStatus
