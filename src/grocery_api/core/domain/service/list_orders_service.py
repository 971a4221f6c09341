from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from returns.result import Failure, Result

from grocery_api.core.domain.model.errors import OrderError, ValidationError
from grocery_api.core.domain.model.order import Order, OrderStatus
from grocery_api.core.ports.inbound.list_orders import (
    ListOrdersQuery,
    ListOrdersUseCase,
    OrderSummaryView,
)
from grocery_api.core.ports.outbound.orders import OrderRepository


@dataclass(frozen=True)
class ListOrdersDeps:
    orders: OrderRepository


@dataclass(frozen=True)
class ListOrdersService(ListOrdersUseCase):
    deps: ListOrdersDeps

    def list_orders(
        self, query: ListOrdersQuery
    ) -> Result[Sequence[OrderSummaryView], OrderError]:
        if query.offset < 0:
            return Failure(ValidationError(message="offset must be >= 0"))
        if query.limit <= 0:
            return Failure(ValidationError(message="limit must be > 0"))
        if query.limit > 100:
            return Failure(ValidationError(message="limit must be <= 100"))

        status: OrderStatus | None = None
        if query.status is not None and query.status != "all":
            try:
                status = OrderStatus(query.status)
            except ValueError:
                return Failure(
                    ValidationError(message=f"unknown status: {query.status}")
                )

        customer: str | None = None
        if query.customer_id is not None:
            customer = query.customer_id.strip()
            if not customer:
                return Failure(
                    ValidationError(
                        message="customer_id must be non-empty when provided"
                    )
                )

        if query.sort_by not in {"created_at", "total"}:
            return Failure(
                ValidationError(message="sort_by must be one of: created_at, total")
            )
        if query.sort_dir not in {"asc", "desc"}:
            return Failure(ValidationError(message="sort_dir must be 'asc' or 'desc'"))

        return self.deps.orders.list(
            query.offset,
            query.limit,
            status=status,
            customer_id=customer,
            sort_by=query.sort_by,
            sort_dir=query.sort_dir,
        ).map(_to_summaries)


def _to_summaries(orders: Sequence[Order]) -> Sequence[OrderSummaryView]:
    return tuple(
        OrderSummaryView(
            order_id=o.order_id,
            customer_id=o.customer.customer_id,
            customer_name=o.customer.name,
            status=o.status,
            total=o.total_amount,
            created_at=o.created_at,
        )
        for o in orders
    )
