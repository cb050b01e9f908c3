from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from domain import OrderStatus
    from services.validation import FieldError


class OrderCoreError(Exception):
    """Base class for errors the order core reports back to its caller."""


class ValidationError(OrderCoreError):
    def __init__(self, errors: List["FieldError"]):
        self.errors = list(errors)
        fields = ", ".join(error.field for error in self.errors)
        super().__init__(f"Order submission is invalid: {fields}")


class UndeterminedFeeError(ValidationError):
    """Delivery order carried neither a fee nor a distance."""


class ExpiredOrUnknownStateError(OrderCoreError):
    def __init__(self, message: str = "Invalid or expired state"):
        super().__init__(message)


class ProviderMismatchError(ExpiredOrUnknownStateError):
    pass


class InvalidTransitionError(OrderCoreError):
    def __init__(self, from_status: "OrderStatus", to_status: "OrderStatus"):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Cannot move order from {from_status.value} to {to_status.value}"
        )


class OrderNotFoundError(OrderCoreError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class ConcurrentUpdateError(OrderCoreError):
    def __init__(self, order_id: str, expected_version: int, actual_version: int):
        self.order_id = order_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Order {order_id} was modified concurrently "
            f"(expected version {expected_version}, found {actual_version})"
        )
