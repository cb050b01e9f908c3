from typing import List

from fastapi import Request

from domain import DeliveryTier
from services.handshake_store import HandshakeStateStore
from services.orders_service import OrdersService


def get_handshake_store(request: Request) -> HandshakeStateStore:
    return request.app.state.handshake_store


def get_orders_service(request: Request) -> OrdersService:
    return request.app.state.orders_service


def get_delivery_tiers(request: Request) -> List[DeliveryTier]:
    return request.app.state.orders_service.tiers
