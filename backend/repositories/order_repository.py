import threading
from dataclasses import replace
from typing import Dict, List, Optional

from domain import Order
from errors import ConcurrentUpdateError, OrderNotFoundError


class InMemoryOrderRepository:
    """Process-local order storage with a version check on every write."""

    def __init__(self) -> None:
        self._orders: Dict[str, Order] = {}
        self._lock = threading.Lock()

    def add(self, order: Order) -> Order:
        with self._lock:
            if order.id in self._orders:
                raise RuntimeError(f"Order {order.id} already exists")
            self._orders[order.id] = order
        return order

    def get(self, order_id: str) -> Optional[Order]:
        with self._lock:
            return self._orders.get(order_id)

    def list_by_phone(self, phone: str) -> List[Order]:
        with self._lock:
            matches = [o for o in self._orders.values() if o.customer.phone == phone]
        return sorted(matches, key=lambda o: o.created_at, reverse=True)

    def save(self, order: Order, expected_version: int) -> Order:
        with self._lock:
            current = self._orders.get(order.id)
            if current is None:
                raise OrderNotFoundError(order.id)
            if current.version != expected_version:
                raise ConcurrentUpdateError(order.id, expected_version, current.version)
            stored = replace(order, version=expected_version + 1)
            self._orders[order.id] = stored
        return stored
