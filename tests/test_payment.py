from __future__ import annotations

import pytest
from returns.result import Success

from grocery_api.core.domain.model.errors import OrderNotFound, ValidationError
from grocery_api.core.domain.model.order import (
    OrderId,
    OrderStatus,
    PaymentStatus,
    now_utc,
)
from grocery_api.core.domain.service.update_payment_service import (
    UpdatePaymentStatusDeps,
    UpdatePaymentStatusService,
)
from grocery_api.core.ports.inbound.update_payment import UpdatePaymentStatusCommand


@pytest.fixture
def update_payment(store, notifier) -> UpdatePaymentStatusService:
    return UpdatePaymentStatusService(
        UpdatePaymentStatusDeps(orders=store, events=notifier)
    )


def _pay(svc: UpdatePaymentStatusService, order_id: OrderId, status: str = "paid"):
    return svc.update_payment_status(
        UpdatePaymentStatusCommand(order_id=str(order_id), payment_status=status)
    )


def test_paying_a_pending_order_confirms_it(
    update_payment, store, notifier, tomato_order
):
    view = _pay(update_payment, tomato_order).unwrap()

    assert view.payment_status is PaymentStatus.PAID
    assert view.status is OrderStatus.CONFIRMED
    assert store.get(tomato_order).unwrap().payment_status is PaymentStatus.PAID
    assert notifier.sent[-1].template == "order_confirmed"


def test_paying_an_order_further_along_keeps_its_status(
    update_payment, store, notifier, tomato_order
):
    store.update_status(tomato_order, OrderStatus.OUT_FOR_DELIVERY, now_utc())
    sent_before = len(notifier.sent)

    view = _pay(update_payment, tomato_order).unwrap()

    assert view.payment_status is PaymentStatus.PAID
    assert view.status is OrderStatus.OUT_FOR_DELIVERY
    assert len(notifier.sent) == sent_before


def test_failed_payment_leaves_status_alone(update_payment, tomato_order):
    view = _pay(update_payment, tomato_order, "failed").unwrap()

    assert view.payment_status is PaymentStatus.FAILED
    assert view.status is OrderStatus.PENDING


def test_same_payment_status_is_a_no_op(update_payment, store, notifier, tomato_order):
    before = store.get(tomato_order).unwrap()
    sent_before = len(notifier.sent)

    result = _pay(update_payment, tomato_order, "pending")

    assert isinstance(result, Success)
    assert store.get(tomato_order).unwrap() == before
    assert len(notifier.sent) == sent_before


def test_payment_validation(update_payment, tomato_order):
    assert isinstance(_pay(update_payment, tomato_order, "refunded").failure(), ValidationError)
    assert isinstance(
        update_payment.update_payment_status(
            UpdatePaymentStatusCommand(order_id="nope", payment_status="paid")
        ).failure(),
        ValidationError,
    )
    assert isinstance(_pay(update_payment, OrderId.new()).failure(), OrderNotFound)
