from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest
from returns.result import Failure, Success

from grocery_api.core.domain.model.errors import ValidationError
from grocery_api.core.domain.model.order import Money, OrderId, Product
from grocery_api.core.domain.service.line_items import LineItemStore

TOMATOES = Product("tomatoes", "Tomatoes", Money.of("50"), unit="kg")


def _store() -> LineItemStore:
    return LineItemStore(order_id=OrderId(uuid4()))


def test_add_item_appends_with_temp_id():
    store = _store()
    result = store.add_item(TOMATOES, 2)

    assert isinstance(result, Success)
    item = result.unwrap()
    assert item.is_temporary
    assert item.product_id == "tomatoes"
    assert item.line_total.amount == Decimal("100.00")
    assert store.items == (item,)


def test_same_product_twice_gives_two_lines():
    store = _store()
    store.add_item(TOMATOES)
    store.add_item(TOMATOES)

    assert len(store.items) == 2
    assert store.items[0].item_id != store.items[1].item_id


def test_add_item_rejects_zero_quantity():
    store = _store()
    result = store.add_item(TOMATOES, 0)

    assert isinstance(result, Failure)
    assert isinstance(result.failure(), ValidationError)
    assert store.items == ()


def test_update_quantity_recomputes_line_total():
    store = _store()
    item = store.add_item(TOMATOES, 2).unwrap()

    assert store.update_quantity(item.item_id, 3) == Success(True)
    assert store.items[0].quantity == 3
    assert store.items[0].line_total.amount == Decimal("150.00")


def test_update_quantity_rejects_non_positive_and_keeps_item():
    store = _store()
    item = store.add_item(TOMATOES, 2).unwrap()

    for bad in (0, -1):
        result = store.update_quantity(item.item_id, bad)
        assert isinstance(result, Failure)
    assert store.items == (item,)


def test_update_price_accepts_zero_rejects_negative_and_garbage():
    store = _store()
    item = store.add_item(TOMATOES, 2).unwrap()

    assert store.update_price(item.item_id, "0") == Success(True)
    assert store.items[0].line_total == Money.zero()

    assert isinstance(store.update_price(item.item_id, "-1"), Failure)
    assert isinstance(store.update_price(item.item_id, "abc"), Failure)
    assert store.items[0].unit_price == Money.zero()


def test_unknown_ids_are_no_ops():
    store = _store()
    item = store.add_item(TOMATOES, 2).unwrap()

    assert store.update_quantity("missing", 5) == Success(False)
    assert store.update_price("missing", "10") == Success(False)
    assert store.remove_item("missing") == Success(False)
    assert store.items == (item,)


def test_line_total_holds_after_any_mutation_sequence():
    store = _store()
    a = store.add_item(TOMATOES, 1).unwrap()
    b = store.add_item(Product("mango", "Mangoes", Money.of("30")), 4).unwrap()
    store.update_price(a.item_id, "12.50")
    store.update_quantity(b.item_id, 7)
    store.update_quantity(a.item_id, 3)

    for it in store.items:
        assert it.line_total.amount == it.unit_price.amount * it.quantity


def test_remove_item_drops_the_line():
    store = _store()
    a = store.add_item(TOMATOES).unwrap()
    b = store.add_item(TOMATOES).unwrap()

    assert store.remove_item(a.item_id) == Success(True)
    assert store.items == (b,)


@pytest.mark.parametrize("price", ["NaN", "Infinity", "-Infinity", "1e40"])
def test_update_price_non_finite_is_a_validation_failure(price):
    store = _store()
    item = store.add_item(TOMATOES, 2).unwrap()

    result = store.update_price(item.item_id, price)

    assert isinstance(result.failure(), ValidationError)
    assert store.items == (item,)
