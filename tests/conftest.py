import copy

import pytest
from fastapi.testclient import TestClient

from main import create_app
from repositories.order_repository import InMemoryOrderRepository
from services.delivery_fees import DEFAULT_DELIVERY_TIERS
from services.handshake_store import HandshakeStateStore
from services.orders_service import OrdersService

ADMIN_TOKEN = "admin-test-token"
PAYMENT_TOKEN = "payment-test-token"

BASE_ORDER = {
    "customer": {
        "name": "Somchai",
        "phone": "081-234-5678",
        "address": "99 Sukhumvit Rd",
        "lat": 13.7367,
        "lng": 100.5231,
    },
    "items": [
        {"menuItemId": "pizza-margherita", "name": "Margherita", "qty": 2, "unitPrice": 250},
        {"menuItemId": "cola", "name": "Cola", "qty": 1, "unitPrice": 30, "options": {"ice": True}},
    ],
    "delivery": {"type": "delivery", "distanceKm": 4},
    "paymentMethod": "promptpay",
}


class FakeClock:
    def __init__(self, start_ms: float = 1_700_000_000_000) -> None:
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> None:
        self.now_ms += ms


@pytest.fixture
def order_payload():
    return copy.deepcopy(BASE_ORDER)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return HandshakeStateStore(ttl_ms=10 * 60 * 1000, clock=clock)


@pytest.fixture
def orders_service(store):
    return OrdersService(
        store=store,
        repository=InMemoryOrderRepository(),
        tiers=DEFAULT_DELIVERY_TIERS,
    )


@pytest.fixture
def client(store, orders_service):
    app = create_app(
        store=store,
        orders_service=orders_service,
        admin_api_token=ADMIN_TOKEN,
        payment_webhook_token=PAYMENT_TOKEN,
    )
    return TestClient(app)


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def payment_headers():
    return {"Authorization": f"Bearer {PAYMENT_TOKEN}"}
