import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence

from domain import DeliveryTier, HandshakePurpose, Order, OrderStatus, RefundAction
from errors import OrderNotFoundError, UndeterminedFeeError, ValidationError
from repositories.order_repository import InMemoryOrderRepository
from services.handshake_store import HandshakeStateStore
from services.order_normalizer import FEE_UNDETERMINED, normalize_order
from services.order_state_machine import apply_transition
from services.phone import normalize_thai_phone
from services.refund_engine import decide_refund

logger = logging.getLogger("food-orders")


@dataclass(frozen=True)
class StatusUpdateOutcome:
    order: Order
    refund_action: RefundAction

    @property
    def should_refund(self) -> bool:
        return self.refund_action is not RefundAction.NONE


class OrdersService:
    def __init__(
        self,
        store: HandshakeStateStore,
        repository: InMemoryOrderRepository,
        tiers: Sequence[DeliveryTier],
    ) -> None:
        self.store = store
        self.repository = repository
        self.tiers = list(tiers)

    def submit_order(self, payload: Any, verification_token: Optional[str]) -> Order:
        self.store.require(
            verification_token or "",
            expected_purpose=HandshakePurpose.FORM_SUBMIT,
        )
        result = normalize_order(payload, self.tiers)
        if not result.is_valid:
            if any(error.code == FEE_UNDETERMINED for error in result.errors):
                raise UndeterminedFeeError(list(result.errors))
            raise ValidationError(list(result.errors))
        order = self.repository.add(result.value)
        logger.info(
            "Order %s received: %s items, total=%s, payment=%s",
            order.id,
            len(order.items),
            order.total,
            order.payment_method.value,
        )
        return order

    def get_order(self, order_id: str) -> Order:
        order = self.repository.get(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def list_by_phone(self, phone: str) -> List[Order]:
        return self.repository.list_by_phone(normalize_thai_phone(phone))

    def update_status(
        self,
        order_id: str,
        target: OrderStatus,
        driver_name: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> StatusUpdateOutcome:
        current = self.get_order(order_id)
        version = current.version if expected_version is None else expected_version
        moved, change = apply_transition(current, target, driver_name)
        stored = self.repository.save(
            replace(moved, updated_at=change.at, history=current.history + (change,)),
            expected_version=version,
        )
        logger.info(
            "Order %s moved %s -> %s%s",
            order_id,
            change.from_status.value,
            change.to_status.value,
            f" (driver {driver_name})" if driver_name else "",
        )
        action = RefundAction.NONE
        if target is OrderStatus.CANCELLED:
            action = self._reconcile(stored)
        return StatusUpdateOutcome(order=stored, refund_action=action)

    def cancel_order(self, order_id: str) -> StatusUpdateOutcome:
        return self.update_status(order_id, OrderStatus.CANCELLED)

    def record_payment_status(
        self,
        order_id: str,
        payment_status: str,
        is_paid: bool = False,
    ) -> StatusUpdateOutcome:
        current = self.get_order(order_id)
        stored = self.repository.save(
            replace(
                current,
                payment_status=payment_status,
                is_paid=is_paid,
                updated_at=datetime.now(timezone.utc),
            ),
            expected_version=current.version,
        )
        logger.info("Order %s payment status -> %s", order_id, payment_status)
        return StatusUpdateOutcome(order=stored, refund_action=self._reconcile(stored))

    def _reconcile(self, order: Order) -> RefundAction:
        action = decide_refund(order.payment_status, order.status, order.is_paid)
        if action is RefundAction.RELEASE_HOLD:
            logger.info(
                "Order %s cancelled with %s payment: releasing hold",
                order.id,
                order.payment_status,
            )
        elif action is RefundAction.REFUND_CAPTURED:
            logger.warning(
                "Order %s cancelled after capture (payment=%s): flagged for refund reconciliation",
                order.id,
                order.payment_status,
            )
        return action
