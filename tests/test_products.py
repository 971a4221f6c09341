from __future__ import annotations

from decimal import Decimal

import pytest

from conftest import make_command
from grocery_api.core.domain.model.errors import (
    ProductExists,
    ProductNotFound,
    ProductUnavailable,
    ValidationError,
)
from grocery_api.core.domain.service.product_admin_service import (
    ManageProductsDeps,
    ManageProductsService,
)
from grocery_api.core.ports.inbound.products import (
    CreateProductCommand,
    UpdateProductCommand,
)


@pytest.fixture
def products(catalog) -> ManageProductsService:
    return ManageProductsService(ManageProductsDeps(catalog=catalog))


def test_create_product_generates_an_id(products, catalog):
    created = products.create_product(
        CreateProductCommand(
            name="  Cabbage ", price="45", unit="pieces", category="vegetables"
        )
    ).unwrap()

    assert created.product_id
    assert created.name == "Cabbage"
    assert created.price.amount == Decimal("45.00")
    assert catalog.get(created.product_id).unwrap() == created


def test_created_product_can_be_ordered(products, place_order):
    products.create_product(
        CreateProductCommand(product_id="cabbage", name="Cabbage", price="45")
    )

    receipt = place_order.place_order(make_command(("cabbage", 2))).unwrap()

    assert receipt.total.amount == Decimal("90.00")


def test_duplicate_id_is_rejected(products):
    result = products.create_product(
        CreateProductCommand(product_id="tomatoes", name="More Tomatoes", price="10")
    )
    assert isinstance(result.failure(), ProductExists)


@pytest.mark.parametrize(
    "command",
    [
        CreateProductCommand(name=" ", price="10"),
        CreateProductCommand(name="Kale", price="10", unit=""),
        CreateProductCommand(name="Kale", price="-1"),
        CreateProductCommand(name="Kale", price="NaN"),
        CreateProductCommand(name="Kale", price="ten"),
    ],
)
def test_create_validation(products, catalog, command):
    before = len(catalog.list_products().unwrap())

    assert isinstance(products.create_product(command).failure(), ValidationError)
    assert len(catalog.list_products().unwrap()) == before


def test_update_changes_only_given_fields(products):
    updated = products.update_product(
        UpdateProductCommand(product_id="tomatoes", price=Decimal("55.5"), description="Ripe")
    ).unwrap()

    assert updated.price.amount == Decimal("55.50")
    assert updated.description == "Ripe"
    assert updated.name == "Tomatoes"
    assert updated.unit == "kg"
    assert products.get_product("tomatoes").unwrap() == updated


def test_product_taken_off_sale_cannot_be_added_to_an_order(products, edit_order, tomato_order):
    oid = str(tomato_order)
    products.update_product(UpdateProductCommand(product_id="onions", is_available=False))
    edit_order.begin_edit(oid)

    assert isinstance(edit_order.add_item(oid, "onions").failure(), ProductUnavailable)


def test_update_errors(products):
    missing = products.update_product(UpdateProductCommand(product_id="durian", name="Durian"))
    blank = products.update_product(UpdateProductCommand(product_id="tomatoes", name=""))
    bad_price = products.update_product(
        UpdateProductCommand(product_id="tomatoes", price="Infinity")
    )

    assert isinstance(missing.failure(), ProductNotFound)
    assert isinstance(blank.failure(), ValidationError)
    assert isinstance(bad_price.failure(), ValidationError)
    assert products.get_product("tomatoes").unwrap().name == "Tomatoes"
