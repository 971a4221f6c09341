from __future__ import annotations

from typing import Callable

import pytest
from returns.result import Success

from grocery_api.adapters.outbound.in_memory_catalog import (
    InMemoryProductCatalog,
    demo_products,
)
from grocery_api.adapters.outbound.in_memory_orders import InMemoryOrderStore
from grocery_api.adapters.outbound.log_notifications import (
    LoggingNotificationPublisher,
)
from grocery_api.core.domain.model.order import OrderId
from grocery_api.core.domain.service.contents_sync import (
    ContentsSynchronizer,
    ContentsSynchronizerDeps,
)
from grocery_api.core.domain.service.edit_order_service import (
    EditOrderDeps,
    EditOrderService,
)
from grocery_api.core.domain.service.place_order_service import (
    PlaceOrderDeps,
    PlaceOrderService,
)
from grocery_api.core.ports.inbound.place_order import (
    PlaceOrderCommand,
    PlaceOrderLine,
)


def make_command(*lines: tuple[str, int], **overrides) -> PlaceOrderCommand:
    fields = dict(
        customer_name="Jane Wanjiku",
        customer_phone="+254712345678",
        delivery_address="Kilimani, Nairobi",
        customer_id="cust-1",
        lines=tuple(PlaceOrderLine(product_id=p, quantity=q) for p, q in lines),
    )
    fields.update(overrides)
    return PlaceOrderCommand(**fields)


@pytest.fixture
def catalog() -> InMemoryProductCatalog:
    return InMemoryProductCatalog.of(demo_products())


@pytest.fixture
def store() -> InMemoryOrderStore:
    return InMemoryOrderStore()


@pytest.fixture
def notifier() -> LoggingNotificationPublisher:
    return LoggingNotificationPublisher()


@pytest.fixture
def place_order(catalog, store, notifier) -> PlaceOrderService:
    return PlaceOrderService(
        PlaceOrderDeps(catalog=catalog, orders=store, events=notifier)
    )


@pytest.fixture
def synchronizer(store) -> ContentsSynchronizer:
    return ContentsSynchronizer(ContentsSynchronizerDeps(store=store))


@pytest.fixture
def edit_order(synchronizer, catalog) -> EditOrderService:
    return EditOrderService(EditOrderDeps(synchronizer=synchronizer, catalog=catalog))


@pytest.fixture
def new_order(place_order) -> Callable[..., OrderId]:
    def _place(*lines: tuple[str, int], **overrides) -> OrderId:
        result = place_order.place_order(make_command(*lines, **overrides))
        assert isinstance(result, Success), result
        return result.unwrap().order_id

    return _place


@pytest.fixture
def tomato_order(new_order) -> OrderId:
    """Tomatoes x2 at 50.00, no charges: total 100.00."""
    return new_order(("tomatoes", 2))
