from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from returns.result import Failure, Result, Success
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from grocery_api.adapters.outbound.sql.tables import ProductRow
from grocery_api.core.domain.model.errors import (
    OrderError,
    PersistenceError,
    ProductExists,
    ProductNotFound,
)
from grocery_api.core.domain.model.order import Money, Product
from grocery_api.core.ports.outbound.catalog import ProductCatalog


@dataclass(frozen=True)
class SqlProductCatalog(ProductCatalog):
    sessions: sessionmaker[Session]

    def get(self, product_id: str) -> Result[Product, OrderError]:
        try:
            with self.sessions() as db:
                row = db.get(ProductRow, product_id)
        except SQLAlchemyError as err:
            return Failure(PersistenceError(message=f"could not load product: {err}"))
        if row is None:
            return Failure(_not_found(product_id))
        return Success(_to_product(row))

    def list_products(
        self, available_only: bool = False
    ) -> Result[Sequence[Product], OrderError]:
        stmt = select(ProductRow).order_by(ProductRow.category, ProductRow.name)
        if available_only:
            stmt = stmt.where(ProductRow.is_available.is_(True))
        try:
            with self.sessions() as db:
                rows = db.scalars(stmt).all()
        except SQLAlchemyError as err:
            return Failure(PersistenceError(message=f"could not list products: {err}"))
        return Success(tuple(_to_product(r) for r in rows))

    def add(self, product: Product) -> Result[Product, OrderError]:
        try:
            with self.sessions.begin() as db:
                if db.get(ProductRow, product.product_id) is not None:
                    return Failure(
                        ProductExists(
                            message="product id already taken",
                            product_id=product.product_id,
                        )
                    )
                db.add(_to_row(product))
        except SQLAlchemyError as err:
            return Failure(PersistenceError(message=f"could not add product: {err}"))
        return Success(product)

    def update(self, product: Product) -> Result[Product, OrderError]:
        try:
            with self.sessions.begin() as db:
                if db.get(ProductRow, product.product_id) is None:
                    return Failure(_not_found(product.product_id))
                db.merge(_to_row(product))
        except SQLAlchemyError as err:
            return Failure(PersistenceError(message=f"could not update product: {err}"))
        return Success(product)

    def upsert(self, products: Iterable[Product]) -> Result[int, OrderError]:
        count = 0
        try:
            with self.sessions.begin() as db:
                for p in products:
                    db.merge(_to_row(p))
                    count += 1
        except SQLAlchemyError as err:
            return Failure(PersistenceError(message=f"could not store products: {err}"))
        return Success(count)


def _not_found(product_id: str) -> ProductNotFound:
    return ProductNotFound(message="product not found", product_id=product_id)


def _to_row(p: Product) -> ProductRow:
    return ProductRow(
        id=p.product_id,
        name=p.name,
        description=p.description,
        price=p.price.amount,
        unit=p.unit,
        category=p.category,
        is_available=p.is_available,
    )


def _to_product(row: ProductRow) -> Product:
    return Product(
        product_id=row.id,
        name=row.name,
        price=Money.of(row.price),
        unit=row.unit,
        category=row.category,
        description=row.description,
        is_available=row.is_available,
    )
