import pytest

from domain import HandshakePurpose, OAuthProvider, OrderStatus, RefundAction
from errors import (
    ConcurrentUpdateError,
    ExpiredOrUnknownStateError,
    InvalidTransitionError,
    OrderNotFoundError,
    UndeterminedFeeError,
    ValidationError,
)


def _token(store):
    return store.issue(HandshakePurpose.FORM_SUBMIT).token


def test_submit_creates_received_order(orders_service, store, order_payload):
    order = orders_service.submit_order(order_payload, _token(store))
    assert order.status is OrderStatus.RECEIVED
    assert order.delivery.fee == 60
    assert orders_service.get_order(order.id) == order


def test_submit_requires_fresh_form_token(orders_service, store, order_payload):
    token = _token(store)
    orders_service.submit_order(order_payload, token)
    with pytest.raises(ExpiredOrUnknownStateError):
        orders_service.submit_order(order_payload, token)
    with pytest.raises(ExpiredOrUnknownStateError):
        orders_service.submit_order(order_payload, None)


def test_oauth_state_cannot_authorize_submission(orders_service, store, order_payload):
    state = store.issue(HandshakePurpose.OAUTH, provider=OAuthProvider.GOOGLE).token
    with pytest.raises(ExpiredOrUnknownStateError):
        orders_service.submit_order(order_payload, state)


def test_invalid_submission_consumes_token(orders_service, store, order_payload):
    token = _token(store)
    order_payload["items"] = []
    with pytest.raises(ValidationError) as excinfo:
        orders_service.submit_order(order_payload, token)
    assert [e.field for e in excinfo.value.errors] == ["items"]
    assert len(store) == 0


def test_undetermined_fee_error(orders_service, store, order_payload):
    order_payload["delivery"] = {"type": "delivery"}
    with pytest.raises(UndeterminedFeeError):
        orders_service.submit_order(order_payload, _token(store))


def test_status_updates_record_history(orders_service, store, order_payload):
    order = orders_service.submit_order(order_payload, _token(store))
    orders_service.update_status(order.id, OrderStatus.PREPARING)
    outcome = orders_service.update_status(
        order.id, OrderStatus.OUT_FOR_DELIVERY, driver_name="Niran"
    )
    assert outcome.order.status is OrderStatus.OUT_FOR_DELIVERY
    assert outcome.order.version == 3
    assert outcome.refund_action is RefundAction.NONE
    assert [c.to_status for c in outcome.order.history] == [
        OrderStatus.PREPARING,
        OrderStatus.OUT_FOR_DELIVERY,
    ]
    assert outcome.order.history[-1].driver_name == "Niran"


def test_invalid_transition_leaves_order_untouched(orders_service, store, order_payload):
    order = orders_service.submit_order(order_payload, _token(store))
    with pytest.raises(InvalidTransitionError):
        orders_service.update_status(order.id, OrderStatus.DELIVERED)
    assert orders_service.get_order(order.id) == order


def test_stale_expected_version_is_rejected(orders_service, store, order_payload):
    order = orders_service.submit_order(order_payload, _token(store))
    orders_service.update_status(order.id, OrderStatus.PREPARING, expected_version=1)
    with pytest.raises(ConcurrentUpdateError):
        orders_service.update_status(order.id, OrderStatus.CANCELLED, expected_version=1)


def test_unknown_order(orders_service):
    with pytest.raises(OrderNotFoundError):
        orders_service.cancel_order("missing")


def test_cancel_with_pending_payment_releases_hold(orders_service, store, order_payload):
    order = orders_service.submit_order(order_payload, _token(store))
    pending = orders_service.record_payment_status(order.id, "pending")
    assert pending.refund_action is RefundAction.NONE
    outcome = orders_service.cancel_order(order.id)
    assert outcome.order.status is OrderStatus.CANCELLED
    assert outcome.refund_action is RefundAction.RELEASE_HOLD
    assert outcome.should_refund


def test_cancel_without_payment_status_needs_no_refund(orders_service, store, order_payload):
    order = orders_service.submit_order(order_payload, _token(store))
    outcome = orders_service.cancel_order(order.id)
    assert outcome.refund_action is RefundAction.NONE
    assert not outcome.should_refund


def test_capture_after_cancellation_is_flagged(orders_service, store, order_payload):
    order = orders_service.submit_order(order_payload, _token(store))
    orders_service.cancel_order(order.id)
    outcome = orders_service.record_payment_status(order.id, "paid", is_paid=True)
    assert outcome.order.payment_status == "paid"
    assert outcome.order.is_paid is True
    assert outcome.refund_action is RefundAction.REFUND_CAPTURED


def test_list_by_phone_accepts_local_format(orders_service, store, order_payload):
    order = orders_service.submit_order(order_payload, _token(store))
    assert [o.id for o in orders_service.list_by_phone("0812345678")] == [order.id]
