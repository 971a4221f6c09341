from __future__ import annotations

from dataclasses import dataclass

from returns.result import Failure, Result

from grocery_api.core.domain.model.errors import OrderError, ValidationError
from grocery_api.core.domain.model.order import Order, OrderId
from grocery_api.core.domain.model.totals import reconcile_totals
from grocery_api.core.ports.inbound.get_order import (
    GetOrderQuery,
    GetOrderUseCase,
    OrderChargeView,
    OrderLineView,
    OrderView,
)
from grocery_api.core.ports.outbound.orders import OrderRepository


@dataclass(frozen=True)
class GetOrderDeps:
    orders: OrderRepository


@dataclass(frozen=True)
class GetOrderService(GetOrderUseCase):
    deps: GetOrderDeps

    def get_order(self, query: GetOrderQuery) -> Result[OrderView, OrderError]:
        return self.find(query).map(to_order_view)

    def find(self, query: GetOrderQuery) -> Result[Order, OrderError]:
        try:
            oid = OrderId.parse(query.order_id)
        except ValueError:
            return Failure(ValidationError(message="order_id must be a valid UUID"))

        return self.deps.orders.get(oid)


def to_order_view(order: Order) -> OrderView:
    totals = reconcile_totals(order.items, order.charges)
    lines = tuple(
        OrderLineView(
            item_id=li.item_id,
            product_id=li.product_id,
            product_name=li.product_name,
            unit_price=li.unit_price,
            quantity=li.quantity,
            line_total=li.line_total,
        )
        for li in order.items
    )
    charges = tuple(
        OrderChargeView(
            charge_id=ch.charge_id,
            name=ch.name,
            amount=ch.amount,
            description=ch.description,
        )
        for ch in order.charges
    )
    return OrderView(
        order_id=order.order_id,
        customer=order.customer,
        status=order.status,
        payment_status=order.payment_status,
        payment_method=order.payment_method,
        notes=order.notes,
        items_subtotal=totals.items_subtotal,
        charges_total=totals.charges_total,
        total=order.total_amount,
        lines=lines,
        charges=charges,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )
