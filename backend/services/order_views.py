from domain import Order
from schemas import (
    CustomerResponse,
    DeliveryResponse,
    OrderItemResponse,
    OrderResponse,
    StatusChangeResponse,
    StatusUpdateResponse,
)
from services.orders_service import StatusUpdateOutcome


def format_order(order: Order) -> OrderResponse:
    customer = order.customer
    return OrderResponse(
        id=order.id,
        status=order.status,
        customer=CustomerResponse(
            name=customer.name,
            phone=customer.phone,
            address=customer.address,
            lat=customer.lat,
            lng=customer.lng,
        ),
        items=[
            OrderItemResponse(
                menu_item_id=item.menu_item_id,
                name=item.name,
                qty=item.qty,
                unit_price=item.unit_price,
                options=item.options,
            )
            for item in order.items
        ],
        delivery=DeliveryResponse(
            type=order.delivery.type.value,
            fee=order.delivery.fee,
            distance_km=order.delivery.distance_km,
        ),
        payment_method=order.payment_method.value,
        payment_status=order.payment_status,
        is_paid=order.is_paid,
        subtotal=order.subtotal,
        total=order.total,
        version=order.version,
        created_at=order.created_at,
        updated_at=order.updated_at,
        history=[
            StatusChangeResponse(
                from_status=change.from_status,
                to_status=change.to_status,
                at=change.at,
                driver_name=change.driver_name,
            )
            for change in order.history
        ],
    )


def format_outcome(outcome: StatusUpdateOutcome) -> StatusUpdateResponse:
    return StatusUpdateResponse(
        order=format_order(outcome.order),
        refund_action=outcome.refund_action.value,
        should_refund=outcome.should_refund,
    )
