from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from returns.result import Failure, Result, Success

from grocery_api.core.domain.model.errors import OrderError, ValidationError
from grocery_api.core.domain.model.order import Money, Product, new_durable_id
from grocery_api.core.ports.inbound.products import (
    CreateProductCommand,
    ManageProductsUseCase,
    UpdateProductCommand,
)
from grocery_api.core.ports.outbound.catalog import ProductCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManageProductsDeps:
    catalog: ProductCatalog


@dataclass(frozen=True)
class ManageProductsService(ManageProductsUseCase):
    """Back-office maintenance of the product catalog."""

    deps: ManageProductsDeps

    def get_product(self, product_id: str) -> Result[Product, OrderError]:
        return self.deps.catalog.get(product_id)

    def create_product(
        self, command: CreateProductCommand
    ) -> Result[Product, OrderError]:
        product_id = (command.product_id or "").strip() or new_durable_id()
        return (
            _price(command.price)
            .map(
                lambda price: Product(
                    product_id=product_id,
                    name=(command.name or "").strip(),
                    price=price,
                    unit=(command.unit or "").strip(),
                    category=_blank_to_none(command.category),
                    description=command.description or "",
                    is_available=command.is_available,
                )
            )
            .bind(_validate)
            .bind(self.deps.catalog.add)
            .map(_logged("product added"))
        )

    def update_product(
        self, command: UpdateProductCommand
    ) -> Result[Product, OrderError]:
        def patch(current: Product) -> Result[Product, OrderError]:
            changes = {}
            if command.name is not None:
                changes["name"] = command.name.strip()
            if command.unit is not None:
                changes["unit"] = command.unit.strip()
            if command.category is not None:
                changes["category"] = _blank_to_none(command.category)
            if command.description is not None:
                changes["description"] = command.description
            if command.is_available is not None:
                changes["is_available"] = command.is_available
            if command.price is not None:
                price = _price(command.price)
                if isinstance(price, Failure):
                    return price
                changes["price"] = price.unwrap()
            return _validate(replace(current, **changes))

        return (
            self.deps.catalog.get(command.product_id)
            .bind(patch)
            .bind(self.deps.catalog.update)
            .map(_logged("product updated"))
        )


def _price(raw: Decimal | str) -> Result[Money, OrderError]:
    try:
        price = Money.parse(raw)
    except ValueError:
        return Failure(ValidationError(message="price must be a number"))
    if price.amount < 0:
        return Failure(ValidationError(message="price must be >= 0"))
    return Success(price)


def _validate(product: Product) -> Result[Product, OrderError]:
    if not product.name:
        return Failure(ValidationError(message="product name is required"))
    if not product.unit:
        return Failure(ValidationError(message="product unit is required"))
    return Success(product)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def _logged(what: str):
    def log(product: Product) -> Product:
        logger.info("%s: id=%s name=%r", what, product.product_id, product.name)
        return product

    return log
