from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from returns.result import Result

from grocery_api.core.domain.model.errors import OrderError
from grocery_api.core.domain.model.order import (
    AdditionalCharge,
    LineItem,
    Money,
    OrderContents,
    OrderId,
)


class OrderContentsStore(Protocol):
    """
    Persisted line items and additional charges of an order.

    ``replace_contents`` must run as ONE transaction:
      1. delete the order's line items
      2. insert ``items`` as new rows (ids assigned by the store)
      3. delete the order's additional charges
      4. insert ``charges`` (skipped entirely when empty)
      5. set the order's total_amount / updated_at
    Any failure rolls back all five steps.
    """

    def load_contents(self, order_id: OrderId) -> Result[OrderContents, OrderError]: ...

    def replace_contents(
        self,
        order_id: OrderId,
        items: Sequence[LineItem],
        charges: Sequence[AdditionalCharge],
        total_amount: Money,
        updated_at: datetime,
    ) -> Result[OrderContents, OrderError]: ...
