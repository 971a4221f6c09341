from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from returns.result import Result

from grocery_api.core.domain.model.errors import OrderError
from grocery_api.core.ports.inbound.get_order import GetOrderQuery


@dataclass(frozen=True)
class BusinessInfo:
    name: str
    address: str
    phone: str
    email: Optional[str] = None


class ReceiptUseCase(Protocol):
    def receipt_text(self, query: GetOrderQuery) -> Result[str, OrderError]: ...
