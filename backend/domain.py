from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class OrderStatus(str, Enum):
    RECEIVED = "received"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out-for-delivery"
    COMPLETED = "completed"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    PROMPTPAY = "promptpay"
    CARD = "card"
    COD = "cod"


class DeliveryType(str, Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


class HandshakePurpose(str, Enum):
    OAUTH = "oauth"
    FORM_SUBMIT = "form-submit"


class OAuthProvider(str, Enum):
    GOOGLE = "google"
    LINE = "line"


class RefundAction(str, Enum):
    NONE = "none"
    # unsettled authorization: drop the hold / stop collecting
    RELEASE_HOLD = "release-hold"
    # captured funds: flag for reconciliation
    REFUND_CAPTURED = "refund-captured"


@dataclass(frozen=True)
class DeliveryTier:
    max_distance_km: float
    fee: int

    @property
    def is_unbounded(self) -> bool:
        return math.isinf(self.max_distance_km)


@dataclass(frozen=True)
class HandshakeStateRecord:
    token: str
    purpose: HandshakePurpose
    nonce: str
    created_at: float
    provider: Optional[OAuthProvider] = None
    redirect_target: Optional[str] = None


@dataclass(frozen=True)
class OrderItem:
    menu_item_id: str
    name: str
    qty: int
    unit_price: int
    options: Optional[Dict[str, Any]] = None

    @property
    def line_total(self) -> int:
        return self.qty * self.unit_price


@dataclass(frozen=True)
class Customer:
    name: str
    phone: str
    address: str
    lat: Optional[float] = None
    lng: Optional[float] = None


@dataclass(frozen=True)
class DeliveryInfo:
    type: DeliveryType
    fee: int
    distance_km: Optional[float] = None


@dataclass(frozen=True)
class StatusChange:
    from_status: OrderStatus
    to_status: OrderStatus
    at: datetime
    driver_name: Optional[str] = None


@dataclass(frozen=True)
class Order:
    id: str
    customer: Customer
    items: Tuple[OrderItem, ...]
    delivery: DeliveryInfo
    payment_method: PaymentMethod
    created_at: datetime
    updated_at: datetime
    status: OrderStatus = OrderStatus.RECEIVED
    payment_status: Optional[str] = None
    is_paid: bool = False
    version: int = 1
    history: Tuple[StatusChange, ...] = field(default_factory=tuple)

    @property
    def subtotal(self) -> int:
        return sum(item.line_total for item in self.items)

    @property
    def total(self) -> int:
        return self.subtotal + self.delivery.fee


def order_items(items: List[OrderItem]) -> Tuple[OrderItem, ...]:
    if not items:
        raise ValueError("An order needs at least one item")
    return tuple(items)
