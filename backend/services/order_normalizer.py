from __future__ import annotations

import math
import uuid
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Sequence

from domain import (
    Customer,
    DeliveryInfo,
    DeliveryTier,
    DeliveryType,
    Order,
    OrderItem,
    PaymentMethod,
    order_items,
)
from services.delivery_fees import calc_fee
from services.order_state_machine import INITIAL_STATUS
from services.phone import clean_phone, normalize_thai_phone
from services.validation import FieldError, Validation, collect

MIN_PHONE_LENGTH = 6
FEE_UNDETERMINED = "fee_undetermined"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _missing(field: str) -> FieldError:
    return FieldError(field, "required", f"{field} is required")


def _check_customer(raw: Any) -> Validation[Customer]:
    if not isinstance(raw, Mapping):
        return Validation.fail(FieldError("", "type", "customer must be an object"))

    errors: List[FieldError] = []
    name = raw.get("name")
    phone = raw.get("phone")
    address = raw.get("address")
    if not isinstance(name, str) or not name.strip():
        errors.append(_missing("name"))
    if not isinstance(phone, str):
        errors.append(_missing("phone"))
    elif len(clean_phone(phone)) < MIN_PHONE_LENGTH:
        errors.append(
            FieldError("phone", "min_length", f"phone must have at least {MIN_PHONE_LENGTH} characters")
        )
    if not isinstance(address, str):
        errors.append(FieldError("address", "type", "address must be a string"))
    for coord in ("lat", "lng"):
        value = raw.get(coord)
        if value is not None and not _is_number(value):
            errors.append(FieldError(coord, "type", f"{coord} must be a number"))
    if errors:
        return Validation.fail(*errors)

    return Validation.ok(
        Customer(
            name=name.strip(),
            phone=normalize_thai_phone(phone),
            address=address,
            lat=raw.get("lat"),
            lng=raw.get("lng"),
        )
    )


def _check_item(raw: Any) -> Validation[OrderItem]:
    if not isinstance(raw, Mapping):
        return Validation.fail(FieldError("", "type", "item must be an object"))

    errors: List[FieldError] = []
    menu_item_id = raw.get("menuItemId")
    name = raw.get("name")
    qty = raw.get("qty")
    unit_price = raw.get("unitPrice")
    options = raw.get("options")
    if not isinstance(menu_item_id, str) or not menu_item_id:
        errors.append(_missing("menuItemId"))
    if not isinstance(name, str):
        errors.append(FieldError("name", "type", "name must be a string"))
    if not _is_int(qty) or qty < 1:
        errors.append(FieldError("qty", "min", "qty must be an integer of at least 1"))
    if not _is_int(unit_price) or unit_price < 0:
        errors.append(FieldError("unitPrice", "min", "unitPrice must be a non-negative integer"))
    if options is not None and not isinstance(options, Mapping):
        errors.append(FieldError("options", "type", "options must be an object"))
    if errors:
        return Validation.fail(*errors)

    return Validation.ok(
        OrderItem(
            menu_item_id=menu_item_id,
            name=name,
            qty=qty,
            unit_price=unit_price,
            options=dict(options) if options is not None else None,
        )
    )


def _check_items(raw: Any) -> Validation[List[OrderItem]]:
    if not isinstance(raw, list):
        return Validation.fail(FieldError("", "type", "items must be a list"))
    if not raw:
        return Validation.fail(FieldError("", "min_items", "items must not be empty"))
    return collect(_check_item(item).under(str(index)) for index, item in enumerate(raw))


def _check_delivery(raw: Any, tiers: Sequence[DeliveryTier]) -> Validation[DeliveryInfo]:
    if not isinstance(raw, Mapping):
        return Validation.fail(FieldError("", "type", "delivery must be an object"))

    errors: List[FieldError] = []
    raw_type = raw.get("type")
    distance = raw.get("distanceKm")
    fee = raw.get("fee")
    try:
        delivery_type: Optional[DeliveryType] = DeliveryType(raw_type)
    except ValueError:
        delivery_type = None
        errors.append(FieldError("type", "enum", "type must be one of: delivery, pickup"))
    if distance is not None and (not _is_number(distance) or distance < 0):
        errors.append(FieldError("distanceKm", "type", "distanceKm must be a non-negative number"))
    # pickup ignores whatever fee was sent
    if delivery_type is not DeliveryType.PICKUP and fee is not None and (not _is_int(fee) or fee < 0):
        errors.append(FieldError("fee", "type", "fee must be a non-negative integer"))
    if errors:
        return Validation.fail(*errors)

    if delivery_type is DeliveryType.PICKUP:
        resolved_fee = 0
    elif fee is not None:
        resolved_fee = fee
    elif distance is not None:
        resolved_fee = calc_fee(distance, tiers)
    else:
        return Validation.fail(
            FieldError("fee", FEE_UNDETERMINED, "delivery orders need either fee or distanceKm")
        )

    return Validation.ok(
        DeliveryInfo(type=delivery_type, fee=resolved_fee, distance_km=distance)
    )


def _check_payment_method(raw: Any) -> Validation[PaymentMethod]:
    try:
        return Validation.ok(PaymentMethod(raw))
    except ValueError:
        return Validation.fail(
            FieldError("", "enum", "paymentMethod must be one of: promptpay, card, cod")
        )


def normalize_order(
    payload: Any,
    tiers: Sequence[DeliveryTier],
    *,
    order_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Validation[Order]:
    """Validate a raw order submission and build the canonical ``Order``.

    Every violation is reported at once, keyed by a dotted field path
    (``customer.phone``, ``items.1.qty``). The resulting order always starts
    in ``received`` with no payment status.
    """
    if not isinstance(payload, Mapping):
        return Validation.fail(FieldError("", "type", "order must be an object"))

    customer = _check_customer(payload.get("customer")).under("customer")
    items = _check_items(payload.get("items")).under("items")
    delivery = _check_delivery(payload.get("delivery"), tiers).under("delivery")
    payment_method = _check_payment_method(payload.get("paymentMethod")).under("paymentMethod")

    combined = collect([customer, items, delivery, payment_method])
    if not combined.is_valid:
        return Validation.fail(*combined.errors)

    created_at = now or datetime.now(timezone.utc)
    return Validation.ok(
        Order(
            id=order_id or uuid.uuid4().hex,
            customer=customer.value,
            items=order_items(items.value),
            delivery=delivery.value,
            payment_method=payment_method.value,
            created_at=created_at,
            updated_at=created_at,
            status=INITIAL_STATUS,
            payment_status=None,
        )
    )
