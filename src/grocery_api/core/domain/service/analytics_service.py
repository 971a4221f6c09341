from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Dict, List, Sequence

from returns.result import Failure, Result, Success

from grocery_api.core.domain.model.errors import OrderError, ValidationError
from grocery_api.core.domain.model.order import (
    Money,
    Order,
    OrderStatus,
    PaymentStatus,
    fold_money,
    now_utc,
)
from grocery_api.core.ports.inbound.analytics import (
    DailyRevenue,
    SalesAnalyticsUseCase,
    SalesSummaryQuery,
    SalesSummaryView,
)
from grocery_api.core.ports.outbound.orders import OrderRepository

PAGE_SIZE = 100
MAX_DAYS = 90


@dataclass(frozen=True)
class SalesAnalyticsDeps:
    orders: OrderRepository
    clock: Callable[[], datetime] = now_utc


@dataclass(frozen=True)
class SalesAnalyticsService(SalesAnalyticsUseCase):
    """
    Dashboard figures computed over every stored order.

    Revenue counts paid orders only, while the average divides it by all
    orders. Days are calendar days in UTC.
    """

    deps: SalesAnalyticsDeps

    def sales_summary(
        self, query: SalesSummaryQuery
    ) -> Result[SalesSummaryView, OrderError]:
        if not 1 <= query.days <= MAX_DAYS:
            return Failure(
                ValidationError(message=f"days must be between 1 and {MAX_DAYS}")
            )
        today = self.deps.clock().astimezone(timezone.utc).date()
        return self._all_orders().map(lambda orders: _summarize(orders, today, query.days))

    def _all_orders(self) -> Result[Sequence[Order], OrderError]:
        orders: List[Order] = []
        offset = 0
        while True:
            page = self.deps.orders.list(offset, PAGE_SIZE, sort_dir="asc")
            if isinstance(page, Failure):
                return page
            batch = page.unwrap()
            orders.extend(batch)
            if len(batch) < PAGE_SIZE:
                return Success(orders)
            offset += PAGE_SIZE


def _summarize(orders: Sequence[Order], today: date, days: int) -> SalesSummaryView:
    paid = [o for o in orders if o.payment_status is PaymentStatus.PAID]
    revenue = fold_money(o.total_amount for o in paid)

    average = Money.zero()
    if orders:
        average = Money.of(revenue.amount / Decimal(len(orders)))

    by_status: Dict[OrderStatus, int] = {s: 0 for s in OrderStatus}
    for o in orders:
        by_status[o.status] += 1

    window = [today - timedelta(days=n) for n in range(days - 1, -1, -1)]
    per_day: Dict[date, List[Money]] = {d: [] for d in window}
    for o in paid:
        day = o.created_at.astimezone(timezone.utc).date()
        if day in per_day:
            per_day[day].append(o.total_amount)

    return SalesSummaryView(
        total_revenue=revenue,
        total_orders=len(orders),
        average_order_value=average,
        orders_by_status=by_status,
        revenue_by_day=tuple(
            DailyRevenue(day=d, revenue=fold_money(per_day[d])) for d in window
        ),
    )
