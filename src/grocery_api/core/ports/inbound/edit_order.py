from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Protocol, Tuple

from returns.result import Result

from grocery_api.core.domain.model.errors import OrderError
from grocery_api.core.domain.model.order import (
    AdditionalCharge,
    LineItem,
    OrderContents,
    OrderId,
)
from grocery_api.core.domain.model.totals import OrderTotals, reconcile_totals


class EditMode(str, Enum):
    VIEWING = "viewing"
    EDITING = "editing"


@dataclass(frozen=True)
class EditSessionView:
    order_id: OrderId
    mode: EditMode
    dirty: bool
    items: Tuple[LineItem, ...]
    charges: Tuple[AdditionalCharge, ...]
    totals: OrderTotals

    @staticmethod
    def viewing(contents: OrderContents) -> "EditSessionView":
        """View of persisted contents with no edit in progress."""
        return EditSessionView(
            order_id=contents.order_id,
            mode=EditMode.VIEWING,
            dirty=False,
            items=contents.items,
            charges=contents.charges,
            totals=reconcile_totals(contents.items, contents.charges),
        )


class EditOrderUseCase(Protocol):
    """Back-office editing of an order's line items and additional charges."""

    def view(self, order_id: str) -> Result[EditSessionView, OrderError]: ...

    def begin_edit(self, order_id: str) -> Result[EditSessionView, OrderError]: ...

    def add_item(
        self, order_id: str, product_id: str, quantity: int = 1
    ) -> Result[EditSessionView, OrderError]: ...

    def update_item(
        self,
        order_id: str,
        item_id: str,
        quantity: Optional[int] = None,
        unit_price: Optional[Decimal] = None,
    ) -> Result[EditSessionView, OrderError]: ...

    def remove_item(
        self, order_id: str, item_id: str
    ) -> Result[EditSessionView, OrderError]: ...

    def add_charge(
        self,
        order_id: str,
        name: str,
        amount: Decimal,
        description: Optional[str] = None,
    ) -> Result[EditSessionView, OrderError]: ...

    def remove_charge(
        self, order_id: str, charge_id: str
    ) -> Result[EditSessionView, OrderError]: ...

    def commit(self, order_id: str) -> Result[EditSessionView, OrderError]: ...

    def discard(self, order_id: str) -> Result[EditSessionView, OrderError]: ...
