from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from returns.result import Result

from grocery_api.core.domain.model.errors import OrderError
from grocery_api.core.domain.model.order import (
    Order,
    OrderId,
    OrderStatus,
    PaymentStatus,
)


class OrderRepository(Protocol):
    def save(self, order: Order) -> Result[OrderId, OrderError]: ...

    def get(self, order_id: OrderId) -> Result[Order, OrderError]: ...

    def list(
        self,
        offset: int,
        limit: int,
        status: OrderStatus | None = None,
        customer_id: str | None = None,
        sort_by: str = "created_at",
        sort_dir: str = "desc",
    ) -> Result[Sequence[Order], OrderError]: ...

    def update_status(
        self,
        order_id: OrderId,
        status: OrderStatus,
        updated_at: datetime,
        payment_status: PaymentStatus | None = None,
    ) -> Result[Order, OrderError]:
        """Sets status, and payment_status when given, in one write."""
        ...
