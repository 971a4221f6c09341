from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Union

from returns.result import Result

from grocery_api.core.domain.model.errors import OrderError
from grocery_api.core.domain.model.order import OrderId, OrderStatus


@dataclass(frozen=True)
class OrderPlaced:
    order_id: OrderId
    customer_id: Optional[str] = None


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: OrderId
    previous: OrderStatus
    current: OrderStatus
    customer_id: Optional[str] = None


OrderEvent = Union[OrderPlaced, OrderStatusChanged]


class EventPublisher(Protocol):
    def publish(self, event: OrderEvent) -> Result[None, OrderError]: ...
