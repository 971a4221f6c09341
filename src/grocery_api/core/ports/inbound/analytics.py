from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Mapping, Protocol, Tuple

from returns.result import Result

from grocery_api.core.domain.model.errors import OrderError
from grocery_api.core.domain.model.order import Money, OrderStatus


@dataclass(frozen=True)
class SalesSummaryQuery:
    days: int = 7  # length of the revenue_by_day window, ending today


@dataclass(frozen=True)
class DailyRevenue:
    day: date
    revenue: Money


@dataclass(frozen=True)
class SalesSummaryView:
    total_revenue: Money  # paid orders only
    total_orders: int
    average_order_value: Money  # total_revenue / total_orders
    orders_by_status: Mapping[OrderStatus, int]
    revenue_by_day: Tuple[DailyRevenue, ...]  # oldest day first


class SalesAnalyticsUseCase(Protocol):
    def sales_summary(
        self, query: SalesSummaryQuery
    ) -> Result[SalesSummaryView, OrderError]: ...
