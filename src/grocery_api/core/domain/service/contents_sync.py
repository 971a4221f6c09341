from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Sequence

from returns.result import Result, Success

from grocery_api.core.domain.model.errors import OrderError
from grocery_api.core.domain.model.order import (
    AdditionalCharge,
    LineItem,
    OrderContents,
    OrderId,
    now_utc,
)
from grocery_api.core.domain.model.totals import reconcile_totals
from grocery_api.core.ports.outbound.contents import OrderContentsStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentsSynchronizerDeps:
    store: OrderContentsStore
    clock: Callable[[], datetime] = now_utc


@dataclass(frozen=True)
class ContentsSynchronizer:
    """Makes the persisted items/charges of an order match a working set."""

    deps: ContentsSynchronizerDeps

    def load(self, order_id: OrderId) -> Result[OrderContents, OrderError]:
        return self.deps.store.load_contents(order_id)

    def commit(
        self,
        order_id: OrderId,
        items: Sequence[LineItem],
        charges: Sequence[AdditionalCharge],
    ) -> Result[OrderContents, OrderError]:
        totals = reconcile_totals(items, charges)
        result = self.deps.store.replace_contents(
            order_id,
            tuple(items),
            tuple(charges),
            total_amount=totals.grand_total,
            updated_at=self.deps.clock(),
        )
        if isinstance(result, Success):
            persisted = result.unwrap()
            logger.info(
                "order contents replaced: order=%s items=%d charges=%d total=%s",
                order_id,
                len(persisted.items),
                len(persisted.charges),
                totals.grand_total.amount,
            )
        else:
            logger.warning(
                "order contents commit failed: order=%s error=%s",
                order_id,
                result.failure(),
            )
        return result
