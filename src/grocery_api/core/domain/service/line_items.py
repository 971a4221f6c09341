from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import List, Sequence, Tuple

from returns.result import Failure, Result, Success

from grocery_api.core.domain.model.errors import OrderError, ValidationError
from grocery_api.core.domain.model.order import (
    LineItem,
    Money,
    OrderId,
    Product,
    new_temp_id,
)

logger = logging.getLogger(__name__)


@dataclass
class LineItemStore:
    """Working set of line items for one order.

    Purely in-memory. Every operation answers ``Success(changed)`` where
    ``changed`` tells the caller whether the working set was touched.
    """

    order_id: OrderId
    _items: List[LineItem] = field(default_factory=list)

    @classmethod
    def seeded(cls, order_id: OrderId, items: Sequence[LineItem]) -> "LineItemStore":
        return cls(order_id=order_id, _items=list(items))

    @property
    def items(self) -> Tuple[LineItem, ...]:
        return tuple(self._items)

    def reset(self, items: Sequence[LineItem]) -> None:
        self._items = list(items)

    def add_item(
        self, product: Product, initial_quantity: int = 1
    ) -> Result[LineItem, OrderError]:
        # a product already on the order gets a second line, not a bumped quantity
        if initial_quantity < 1:
            return Failure(ValidationError("quantity must be >= 1"))
        if product.price.amount < 0:
            return Failure(ValidationError("product price must be >= 0"))

        item = LineItem(
            item_id=new_temp_id(),
            order_id=self.order_id,
            product_id=product.product_id,
            product_name=product.name,
            quantity=initial_quantity,
            unit_price=product.price,
        )
        self._items.append(item)
        logger.debug("item added: order=%s item=%s", self.order_id, item.item_id)
        return Success(item)

    def update_quantity(
        self, item_id: str, new_quantity: int
    ) -> Result[bool, OrderError]:
        if new_quantity < 1:
            return Failure(ValidationError("quantity must be >= 1"))
        return Success(self._replace(item_id, quantity=new_quantity))

    def update_price(
        self, item_id: str, new_unit_price: Decimal | int | str
    ) -> Result[bool, OrderError]:
        try:
            price = Money.parse(new_unit_price)
        except ValueError:
            return Failure(ValidationError("unit_price must be a number"))
        if price.amount < 0:
            return Failure(ValidationError("unit_price must be >= 0"))
        return Success(self._replace(item_id, unit_price=price))

    def remove_item(self, item_id: str) -> Result[bool, OrderError]:
        kept = [it for it in self._items if it.item_id != item_id]
        changed = len(kept) != len(self._items)
        self._items = kept
        return Success(changed)

    def _replace(self, item_id: str, **changes) -> bool:
        for i, it in enumerate(self._items):
            if it.item_id == item_id:
                self._items[i] = replace(it, **changes)
                return True
        return False
