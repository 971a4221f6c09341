from __future__ import annotations

from typing import Protocol, Sequence

from returns.result import Result

from grocery_api.core.domain.model.errors import OrderError
from grocery_api.core.domain.model.order import Product


class ProductCatalog(Protocol):
    def get(self, product_id: str) -> Result[Product, OrderError]: ...

    def list_products(
        self, available_only: bool = False
    ) -> Result[Sequence[Product], OrderError]: ...

    def add(self, product: Product) -> Result[Product, OrderError]:
        """Fails with ProductExists when the id is already taken."""
        ...

    def update(self, product: Product) -> Result[Product, OrderError]:
        """Replaces a stored product; ProductNotFound when it does not exist."""
        ...
