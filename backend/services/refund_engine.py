from typing import Optional

from domain import OrderStatus, RefundAction

UNSETTLED_PAYMENT_STATUSES = frozenset({"pending", "unpaid"})


def decide_refund(
    payment_status: Optional[str],
    order_status: OrderStatus,
    is_paid: bool = False,
) -> RefundAction:
    if not payment_status:
        return RefundAction.NONE
    if order_status != OrderStatus.CANCELLED:
        return RefundAction.NONE
    if payment_status in UNSETTLED_PAYMENT_STATUSES:
        return RefundAction.RELEASE_HOLD
    if is_paid:
        # Captured funds: no reversal flow exists yet, flag for reconciliation.
        return RefundAction.REFUND_CAPTURED
    return RefundAction.NONE


def should_refund(
    payment_status: Optional[str],
    order_status: OrderStatus,
    is_paid: bool = False,
) -> bool:
    return decide_refund(payment_status, order_status, is_paid) is not RefundAction.NONE
