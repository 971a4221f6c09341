from __future__ import annotations

import logging
from dataclasses import dataclass

from returns.result import Failure, Result, Success

from grocery_api.core.domain.model.errors import OrderError, ValidationError
from grocery_api.core.domain.model.order import Order, OrderId, OrderStatus, now_utc
from grocery_api.core.domain.service.get_order_service import to_order_view
from grocery_api.core.ports.inbound.get_order import OrderView
from grocery_api.core.ports.inbound.update_status import (
    UpdateOrderStatusCommand,
    UpdateOrderStatusUseCase,
)
from grocery_api.core.ports.outbound.events import EventPublisher, OrderStatusChanged
from grocery_api.core.ports.outbound.orders import OrderRepository

logger = logging.getLogger(__name__)

_VALID = ", ".join(s.value for s in OrderStatus)


@dataclass(frozen=True)
class UpdateOrderStatusDeps:
    orders: OrderRepository
    events: EventPublisher


@dataclass(frozen=True)
class UpdateOrderStatusService(UpdateOrderStatusUseCase):
    deps: UpdateOrderStatusDeps

    def update_status(
        self, command: UpdateOrderStatusCommand
    ) -> Result[OrderView, OrderError]:
        try:
            oid = OrderId.parse(command.order_id)
        except ValueError:
            return Failure(ValidationError(message="order_id must be a valid UUID"))
        try:
            status = OrderStatus(command.status)
        except ValueError:
            return Failure(
                ValidationError(message=f"invalid order status; expected one of: {_VALID}")
            )

        return self.deps.orders.get(oid).bind(lambda o: self._apply(o, status)).map(
            to_order_view
        )

    def _apply(self, order: Order, status: OrderStatus) -> Result[Order, OrderError]:
        if order.status is status:
            return Success(order)

        previous = order.status
        return (
            self.deps.orders.update_status(order.order_id, status, now_utc())
            .bind(
                lambda updated: self.deps.events.publish(
                    OrderStatusChanged(
                        order_id=updated.order_id,
                        previous=previous,
                        current=status,
                        customer_id=updated.customer.customer_id,
                    )
                ).map(lambda _: updated)
            )
            .map(lambda updated: _logged(updated, previous))
        )


def _logged(order: Order, previous: OrderStatus) -> Order:
    logger.info(
        "order status changed: order=%s %s -> %s",
        order.order_id,
        previous.value,
        order.status.value,
    )
    return order
