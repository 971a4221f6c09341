from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, Sequence

from returns.result import Result

from grocery_api.core.domain.model.errors import OrderError
from grocery_api.core.domain.model.order import (
    CustomerInfo,
    Money,
    OrderId,
    OrderStatus,
    PaymentStatus,
)


@dataclass(frozen=True)
class GetOrderQuery:
    order_id: str  # UUID string


@dataclass(frozen=True)
class OrderLineView:
    item_id: str
    product_id: Optional[str]
    product_name: str
    unit_price: Money
    quantity: int
    line_total: Money


@dataclass(frozen=True)
class OrderChargeView:
    charge_id: str
    name: str
    amount: Money
    description: Optional[str]


@dataclass(frozen=True)
class OrderView:
    order_id: OrderId
    customer: CustomerInfo
    status: OrderStatus
    payment_status: PaymentStatus
    payment_method: Optional[str]
    notes: Optional[str]
    items_subtotal: Money
    charges_total: Money
    total: Money
    lines: Sequence[OrderLineView]
    charges: Sequence[OrderChargeView]
    created_at: datetime
    updated_at: datetime


class GetOrderUseCase(Protocol):
    def get_order(self, query: GetOrderQuery) -> Result[OrderView, OrderError]: ...
