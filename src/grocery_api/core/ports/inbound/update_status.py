from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from grocery_api.core.domain.model.errors import OrderError
from grocery_api.core.ports.inbound.get_order import OrderView


@dataclass(frozen=True)
class UpdateOrderStatusCommand:
    order_id: str
    status: str


class UpdateOrderStatusUseCase(Protocol):
    def update_status(
        self, command: UpdateOrderStatusCommand
    ) -> Result[OrderView, OrderError]: ...
