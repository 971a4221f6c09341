from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from returns.result import Result

from grocery_api.core.domain.model.errors import OrderError
from grocery_api.core.domain.model.order import Money, OrderId


@dataclass(frozen=True)
class PlaceOrderLine:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class PlaceOrderCommand:
    """Checkout form plus the cart lines, passed in explicitly."""

    customer_name: str
    customer_phone: str
    delivery_address: str
    lines: Sequence[PlaceOrderLine]
    customer_email: Optional[str] = None
    customer_id: Optional[str] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class OrderReceipt:
    order_id: OrderId
    customer_id: Optional[str]
    total: Money


class PlaceOrderUseCase(Protocol):
    def place_order(
        self, command: PlaceOrderCommand
    ) -> Result[OrderReceipt, OrderError]: ...
