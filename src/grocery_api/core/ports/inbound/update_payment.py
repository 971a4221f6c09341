from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from grocery_api.core.domain.model.errors import OrderError
from grocery_api.core.ports.inbound.get_order import OrderView


@dataclass(frozen=True)
class UpdatePaymentStatusCommand:
    order_id: str
    payment_status: str


class UpdatePaymentStatusUseCase(Protocol):
    def update_payment_status(
        self, command: UpdatePaymentStatusCommand
    ) -> Result[OrderView, OrderError]: ...
