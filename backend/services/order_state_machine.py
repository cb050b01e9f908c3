from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, FrozenSet, Optional, Tuple

from domain import Order, OrderStatus, StatusChange
from errors import InvalidTransitionError

TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.RECEIVED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset(
        {OrderStatus.DELIVERED, OrderStatus.COMPLETED, OrderStatus.CANCELLED}
    ),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

_unmapped = set(OrderStatus) - set(TRANSITIONS)
if _unmapped:
    raise RuntimeError(f"Transition table is missing statuses: {sorted(s.value for s in _unmapped)}")

INITIAL_STATUS = OrderStatus.RECEIVED


def allowed_targets(status: OrderStatus) -> FrozenSet[OrderStatus]:
    return TRANSITIONS[status]


def is_terminal(status: OrderStatus) -> bool:
    return not TRANSITIONS[status]


def can_transition(from_status: OrderStatus, to_status: OrderStatus) -> bool:
    return to_status in TRANSITIONS[from_status]


def apply_transition(
    order: Order,
    target: OrderStatus,
    driver_name: Optional[str] = None,
    *,
    at: Optional[datetime] = None,
) -> Tuple[Order, StatusChange]:
    """Move ``order`` to ``target`` or raise ``InvalidTransitionError``.

    Only the status changes. ``driver_name`` is carried on the returned
    ``StatusChange`` and has no bearing on whether the move is allowed.
    """
    if not can_transition(order.status, target):
        raise InvalidTransitionError(order.status, target)
    change = StatusChange(
        from_status=order.status,
        to_status=target,
        at=at or datetime.now(timezone.utc),
        driver_name=driver_name,
    )
    return replace(order, status=target), change
