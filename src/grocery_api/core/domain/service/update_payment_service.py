from __future__ import annotations

import logging
from dataclasses import dataclass

from returns.result import Failure, Result, Success

from grocery_api.core.domain.model.errors import OrderError, ValidationError
from grocery_api.core.domain.model.order import (
    Order,
    OrderId,
    OrderStatus,
    PaymentStatus,
    now_utc,
)
from grocery_api.core.domain.service.get_order_service import to_order_view
from grocery_api.core.ports.inbound.get_order import OrderView
from grocery_api.core.ports.inbound.update_payment import (
    UpdatePaymentStatusCommand,
    UpdatePaymentStatusUseCase,
)
from grocery_api.core.ports.outbound.events import EventPublisher, OrderStatusChanged
from grocery_api.core.ports.outbound.orders import OrderRepository

logger = logging.getLogger(__name__)

_VALID = ", ".join(s.value for s in PaymentStatus)


@dataclass(frozen=True)
class UpdatePaymentStatusDeps:
    orders: OrderRepository
    events: EventPublisher


@dataclass(frozen=True)
class UpdatePaymentStatusService(UpdatePaymentStatusUseCase):
    """
    Records payment for an order.

    Marking a pending order as paid also confirms it; the customer then gets
    the regular "order confirmed" notification. Orders past pending keep
    their status.
    """

    deps: UpdatePaymentStatusDeps

    def update_payment_status(
        self, command: UpdatePaymentStatusCommand
    ) -> Result[OrderView, OrderError]:
        try:
            oid = OrderId.parse(command.order_id)
        except ValueError:
            return Failure(ValidationError(message="order_id must be a valid UUID"))
        try:
            payment = PaymentStatus(command.payment_status)
        except ValueError:
            return Failure(
                ValidationError(message=f"invalid payment status; expected one of: {_VALID}")
            )

        return self.deps.orders.get(oid).bind(lambda o: self._apply(o, payment)).map(
            to_order_view
        )

    def _apply(self, order: Order, payment: PaymentStatus) -> Result[Order, OrderError]:
        if order.payment_status is payment:
            return Success(order)

        status = order.status
        if payment is PaymentStatus.PAID and status is OrderStatus.PENDING:
            status = OrderStatus.CONFIRMED

        updated = self.deps.orders.update_status(
            order.order_id, status, now_utc(), payment_status=payment
        )
        if isinstance(updated, Failure) or status is order.status:
            return updated.map(lambda o: _logged(o, order.payment_status))

        return updated.bind(
            lambda o: self.deps.events.publish(
                OrderStatusChanged(
                    order_id=o.order_id,
                    previous=order.status,
                    current=status,
                    customer_id=o.customer.customer_id,
                )
            ).map(lambda _: _logged(o, order.payment_status))
        )


def _logged(order: Order, previous: PaymentStatus) -> Order:
    logger.info(
        "payment status changed: order=%s %s -> %s (status=%s)",
        order.order_id,
        previous.value,
        order.payment_status.value,
        order.status.value,
    )
    return order
