from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Tuple

from returns.pipeline import flow
from returns.pointfree import bind, map_
from returns.result import Failure, Result, Success

from grocery_api.core.domain.model.errors import OrderError, ValidationError
from grocery_api.core.domain.model.order import (
    CustomerInfo,
    LineItem,
    Order,
    OrderId,
    new_durable_id,
    now_utc,
)
from grocery_api.core.domain.model.totals import reconcile_totals
from grocery_api.core.domain.service.catalog_lookup import find_orderable
from grocery_api.core.ports.inbound.place_order import (
    OrderReceipt,
    PlaceOrderCommand,
    PlaceOrderUseCase,
)
from grocery_api.core.ports.outbound.catalog import ProductCatalog
from grocery_api.core.ports.outbound.events import EventPublisher, OrderPlaced
from grocery_api.core.ports.outbound.orders import OrderRepository

logger = logging.getLogger(__name__)

MAX_LINE_QUANTITY = 1000


@dataclass(frozen=True)
class PlaceOrderDeps:
    catalog: ProductCatalog
    orders: OrderRepository
    events: EventPublisher


@dataclass(frozen=True)
class PlaceOrderService(PlaceOrderUseCase):
    deps: PlaceOrderDeps

    def place_order(
        self, command: PlaceOrderCommand
    ) -> Result[OrderReceipt, OrderError]:
        return flow(
            command,
            _validate_command,
            bind(self._build_order),
            bind(self._persist),
            bind(self._publish),
            map_(_to_receipt),
        )

    def _build_order(self, cmd: PlaceOrderCommand) -> Result[Order, OrderError]:
        order_id = OrderId.new()
        items: List[LineItem] = []
        for ln in cmd.lines:
            found = find_orderable(self.deps.catalog, ln.product_id.strip())
            if isinstance(found, Failure):
                return found
            product = found.unwrap()
            items.append(
                LineItem(
                    item_id=new_durable_id(),
                    order_id=order_id,
                    product_id=product.product_id,
                    product_name=product.name,
                    quantity=ln.quantity,
                    unit_price=product.price,
                )
            )

        now = now_utc()
        return Success(
            Order(
                order_id=order_id,
                customer=CustomerInfo(
                    name=cmd.customer_name.strip(),
                    phone=cmd.customer_phone.strip(),
                    delivery_address=cmd.delivery_address.strip(),
                    email=_blank_to_none(cmd.customer_email),
                    customer_id=_blank_to_none(cmd.customer_id),
                ),
                total_amount=reconcile_totals(items, ()).grand_total,
                created_at=now,
                updated_at=now,
                items=tuple(items),
                payment_method=_blank_to_none(cmd.payment_method),
                notes=_blank_to_none(cmd.notes),
            )
        )

    def _persist(self, order: Order) -> Result[Order, OrderError]:
        return self.deps.orders.save(order).map(lambda _: order)

    def _publish(self, order: Order) -> Result[Order, OrderError]:
        event = OrderPlaced(order.order_id, customer_id=order.customer.customer_id)
        return self.deps.events.publish(event).map(lambda _: _logged(order))


# ---- pure helpers ----------------------------------------------------------

_FORM_CHECKS: Tuple[Tuple[str, Callable[[PlaceOrderCommand], str]], ...] = (
    ("customer_name", lambda c: c.customer_name),
    ("customer_phone", lambda c: c.customer_phone),
    ("delivery_address", lambda c: c.delivery_address),
)


def _validate_command(cmd: PlaceOrderCommand) -> Result[PlaceOrderCommand, OrderError]:
    for name, get in _FORM_CHECKS:
        if not (get(cmd) or "").strip():
            return Failure(ValidationError(f"{name} is required"))
    if cmd.customer_email is not None and cmd.customer_email.strip():
        if "@" not in cmd.customer_email:
            return Failure(ValidationError("customer_email is not a valid address"))
    if not cmd.lines:
        return Failure(ValidationError("at least one line item is required"))

    for i, ln in enumerate(cmd.lines):
        if not ln.product_id.strip():
            return Failure(ValidationError(f"lines[{i}].product_id is required"))
        if ln.quantity <= 0:
            return Failure(ValidationError(f"lines[{i}].quantity must be > 0"))
        if ln.quantity > MAX_LINE_QUANTITY:
            return Failure(
                ValidationError(f"lines[{i}].quantity must be <= {MAX_LINE_QUANTITY}")
            )

    return Success(cmd)


def _to_receipt(order: Order) -> OrderReceipt:
    return OrderReceipt(
        order_id=order.order_id,
        customer_id=order.customer.customer_id,
        total=order.total_amount,
    )


def _logged(order: Order) -> Order:
    logger.info("order placed: order=%s total=%s", order.order_id, order.total_amount.amount)
    return order


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()
