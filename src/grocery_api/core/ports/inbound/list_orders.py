from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol, Sequence

from returns.result import Result

from grocery_api.core.domain.model.errors import OrderError
from grocery_api.core.domain.model.order import Money, OrderId, OrderStatus


@dataclass(frozen=True)
class ListOrdersQuery:
    offset: int = 0
    limit: int = 50
    status: str | None = None  # an OrderStatus value or "all"
    customer_id: str | None = None
    sort_by: str = "created_at"  # created_at | total
    sort_dir: str = "desc"  # asc | desc


@dataclass(frozen=True)
class OrderSummaryView:
    order_id: OrderId
    customer_id: Optional[str]
    customer_name: str
    status: OrderStatus
    total: Money
    created_at: datetime


class ListOrdersUseCase(Protocol):
    def list_orders(
        self, query: ListOrdersQuery
    ) -> Result[Sequence[OrderSummaryView], OrderError]: ...
