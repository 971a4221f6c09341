from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Protocol

from returns.result import Result

from grocery_api.core.domain.model.errors import OrderError
from grocery_api.core.domain.model.order import Product


@dataclass(frozen=True)
class CreateProductCommand:
    name: str
    price: Decimal | str
    unit: str = "pieces"
    category: Optional[str] = None
    description: str = ""
    is_available: bool = True
    product_id: Optional[str] = None  # generated when omitted


@dataclass(frozen=True)
class UpdateProductCommand:
    """Partial update; ``None`` leaves a field as it is."""

    product_id: str
    name: Optional[str] = None
    price: Optional[Decimal | str] = None
    unit: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    is_available: Optional[bool] = None


class ManageProductsUseCase(Protocol):
    def get_product(self, product_id: str) -> Result[Product, OrderError]: ...

    def create_product(
        self, command: CreateProductCommand
    ) -> Result[Product, OrderError]: ...

    def update_product(
        self, command: UpdateProductCommand
    ) -> Result[Product, OrderError]: ...
