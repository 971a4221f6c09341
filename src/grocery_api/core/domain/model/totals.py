from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from grocery_api.core.domain.model.order import (
    DEFAULT_CURRENCY,
    AdditionalCharge,
    LineItem,
    Money,
    fold_money,
)


@dataclass(frozen=True)
class OrderTotals:
    items_subtotal: Money
    charges_total: Money
    grand_total: Money


def reconcile_totals(
    items: Iterable[LineItem],
    charges: Iterable[AdditionalCharge],
    currency: str = DEFAULT_CURRENCY,
) -> OrderTotals:
    """Recompute every total from the lists themselves (no running sums)."""
    items_subtotal = fold_money((it.line_total for it in items), currency=currency)
    charges_total = fold_money((ch.amount for ch in charges), currency=currency)
    return OrderTotals(
        items_subtotal=items_subtotal,
        charges_total=charges_total,
        grand_total=items_subtotal + charges_total,
    )
