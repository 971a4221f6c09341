from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, Sequence

from returns.result import Failure, Result, Success

from grocery_api.core.domain.model.errors import (
    OrderError,
    ProductExists,
    ProductNotFound,
)
from grocery_api.core.domain.model.order import Money, Product
from grocery_api.core.ports.outbound.catalog import ProductCatalog


@dataclass
class InMemoryProductCatalog(ProductCatalog):
    _products: Dict[str, Product] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    @classmethod
    def of(cls, products: Iterable[Product]) -> "InMemoryProductCatalog":
        return cls(_products={p.product_id: p for p in products})

    def get(self, product_id: str) -> Result[Product, OrderError]:
        product = self._products.get(product_id)
        if product is None:
            return Failure(
                ProductNotFound(message="product not found", product_id=product_id)
            )
        return Success(product)

    def list_products(
        self, available_only: bool = False
    ) -> Result[Sequence[Product], OrderError]:
        with self._lock:
            products = sorted(
                self._products.values(), key=lambda p: (p.category or "", p.name)
            )
        if available_only:
            products = [p for p in products if p.is_available]
        return Success(tuple(products))

    def add(self, product: Product) -> Result[Product, OrderError]:
        with self._lock:
            if product.product_id in self._products:
                return Failure(
                    ProductExists(
                        message="product id already taken",
                        product_id=product.product_id,
                    )
                )
            self._products[product.product_id] = product
        return Success(product)

    def update(self, product: Product) -> Result[Product, OrderError]:
        with self._lock:
            if product.product_id not in self._products:
                return Failure(
                    ProductNotFound(
                        message="product not found", product_id=product.product_id
                    )
                )
            self._products[product.product_id] = product
        return Success(product)


def demo_products() -> tuple[Product, ...]:
    return (
        Product("tomatoes", "Tomatoes", Money.of("50"), unit="kg", category="vegetables"),
        Product("onions", "Red Onions", Money.of("40"), unit="kg", category="vegetables"),
        Product("sukuma", "Sukuma Wiki", Money.of("20"), unit="bunches", category="vegetables"),
        Product("bananas", "Bananas", Money.of("10"), unit="pieces", category="fruits"),
        Product("mangoes", "Mangoes", Money.of("30"), unit="pieces", category="fruits"),
        Product("maize-flour", "Maize Flour 2kg", Money.of("180"), unit="packets", category="grains"),
        Product(
            "avocado",
            "Avocado",
            Money.of("25"),
            unit="pieces",
            category="fruits",
            is_available=False,
        ),
    )
