from __future__ import annotations

from returns.result import Failure, Result, Success

from grocery_api.core.domain.model.errors import OrderError, ProductUnavailable
from grocery_api.core.domain.model.order import Product
from grocery_api.core.ports.outbound.catalog import ProductCatalog


def find_orderable(catalog: ProductCatalog, product_id: str) -> Result[Product, OrderError]:
    """Catalog lookup that also rejects products marked unavailable."""

    def check(product: Product) -> Result[Product, OrderError]:
        if not product.is_available:
            return Failure(
                ProductUnavailable(message="product is not available", product_id=product_id)
            )
        return Success(product)

    return catalog.get(product_id).bind(check)
