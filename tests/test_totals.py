from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from grocery_api.core.domain.model.order import (
    AdditionalCharge,
    LineItem,
    Money,
    OrderId,
)
from grocery_api.core.domain.model.totals import reconcile_totals

OID = OrderId(uuid4())


def _item(qty: int, price: str) -> LineItem:
    return LineItem(
        item_id=f"i-{qty}-{price}",
        order_id=OID,
        product_name="Thing",
        quantity=qty,
        unit_price=Money.of(price),
    )


def _charge(amount: str) -> AdditionalCharge:
    return AdditionalCharge(
        charge_id=f"c-{amount}", order_id=OID, name="Fee", amount=Money.of(amount)
    )


def test_empty_lists_total_zero():
    totals = reconcile_totals([], [])
    assert totals.items_subtotal == Money.zero()
    assert totals.charges_total == Money.zero()
    assert totals.grand_total == Money.zero()


def test_grand_total_is_items_plus_charges():
    totals = reconcile_totals(
        [_item(2, "50"), _item(3, "19.99")], [_charge("80"), _charge("15.50")]
    )
    assert totals.items_subtotal.amount == Decimal("159.97")
    assert totals.charges_total.amount == Decimal("95.50")
    assert totals.grand_total.amount == Decimal("255.47")


def test_line_total_derives_from_quantity_and_price():
    item = _item(3, "0.335")
    # unit price is stored at cent precision
    assert item.unit_price.amount == Decimal("0.34")
    assert item.line_total.amount == Decimal("1.02")


def test_money_rejects_currency_mix():
    with pytest.raises(ValueError):
        Money.of("1", "KES") + Money.of("1", "USD")
