from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from fastapi import FastAPI
from returns.result import Failure

from grocery_api.adapters.inbound.web.fastapi_app import create_app
from grocery_api.adapters.outbound.in_memory_catalog import (
    InMemoryProductCatalog,
    demo_products,
)
from grocery_api.adapters.outbound.in_memory_orders import InMemoryOrderStore
from grocery_api.adapters.outbound.log_notifications import (
    LoggingNotificationPublisher,
)
from grocery_api.adapters.outbound.sql.database import (
    create_db_engine,
    init_schema,
    session_factory,
)
from grocery_api.adapters.outbound.sql.sql_catalog import SqlProductCatalog
from grocery_api.adapters.outbound.sql.sql_orders import SqlOrderStore
from grocery_api.config import Settings, settings
from grocery_api.core.domain.service.analytics_service import (
    SalesAnalyticsDeps,
    SalesAnalyticsService,
)
from grocery_api.core.domain.service.contents_sync import (
    ContentsSynchronizer,
    ContentsSynchronizerDeps,
)
from grocery_api.core.domain.service.edit_order_service import (
    EditOrderDeps,
    EditOrderService,
)
from grocery_api.core.domain.service.get_order_service import (
    GetOrderDeps,
    GetOrderService,
)
from grocery_api.core.domain.service.list_orders_service import (
    ListOrdersDeps,
    ListOrdersService,
)
from grocery_api.core.domain.service.place_order_service import (
    PlaceOrderDeps,
    PlaceOrderService,
)
from grocery_api.core.domain.service.product_admin_service import (
    ManageProductsDeps,
    ManageProductsService,
)
from grocery_api.core.domain.service.receipt import ReceiptDeps, ReceiptService
from grocery_api.core.domain.service.update_payment_service import (
    UpdatePaymentStatusDeps,
    UpdatePaymentStatusService,
)
from grocery_api.core.domain.service.update_status_service import (
    UpdateOrderStatusDeps,
    UpdateOrderStatusService,
)
from grocery_api.core.ports.inbound.receipt import BusinessInfo
from grocery_api.core.ports.outbound.catalog import ProductCatalog
from grocery_api.log import configure_logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UseCases:
    place_order: PlaceOrderService
    get_order: GetOrderService
    list_orders: ListOrdersService
    update_status: UpdateOrderStatusService
    update_payment: UpdatePaymentStatusService
    receipt: ReceiptService
    edit_order: EditOrderService
    catalog: ProductCatalog
    notifier: LoggingNotificationPublisher
    products: ManageProductsService
    analytics: SalesAnalyticsService


def build_usecases(config: Settings | None = None) -> UseCases:
    config = config or settings
    configure_logging(config.LOG_LEVEL)

    store, catalog = _build_storage(config)
    notifier = LoggingNotificationPublisher(business_name=config.BUSINESS_NAME)

    get_order = GetOrderService(GetOrderDeps(orders=store))
    synchronizer = ContentsSynchronizer(ContentsSynchronizerDeps(store=store))

    return UseCases(
        place_order=PlaceOrderService(
            PlaceOrderDeps(catalog=catalog, orders=store, events=notifier)
        ),
        get_order=get_order,
        list_orders=ListOrdersService(ListOrdersDeps(orders=store)),
        update_status=UpdateOrderStatusService(
            UpdateOrderStatusDeps(orders=store, events=notifier)
        ),
        update_payment=UpdatePaymentStatusService(
            UpdatePaymentStatusDeps(orders=store, events=notifier)
        ),
        receipt=ReceiptService(
            ReceiptDeps(
                orders=get_order,
                business=BusinessInfo(
                    name=config.BUSINESS_NAME,
                    address=config.BUSINESS_ADDRESS,
                    phone=config.BUSINESS_PHONE,
                    email=config.BUSINESS_EMAIL,
                ),
                currency_symbol=config.CURRENCY_SYMBOL,
            )
        ),
        edit_order=EditOrderService(
            EditOrderDeps(synchronizer=synchronizer, catalog=catalog)
        ),
        catalog=catalog,
        notifier=notifier,
        products=ManageProductsService(ManageProductsDeps(catalog=catalog)),
        analytics=SalesAnalyticsService(SalesAnalyticsDeps(orders=store)),
    )


def _build_storage(
    config: Settings,
) -> Tuple[InMemoryOrderStore | SqlOrderStore, ProductCatalog]:
    backend = config.STORAGE_BACKEND.lower()
    seed = demo_products() if config.SEED_DEMO_CATALOG else ()

    if backend == "memory":
        return InMemoryOrderStore(), InMemoryProductCatalog.of(seed)

    if backend == "sql":
        engine = create_db_engine(config.DATABASE_URL, echo=config.DATABASE_ECHO)
        init_schema(engine)
        sessions = session_factory(engine)
        catalog = SqlProductCatalog(sessions)
        seeded = catalog.upsert(seed)
        if isinstance(seeded, Failure):
            raise seeded.failure()
        logger.info("sql storage ready: %s", engine.url.render_as_string(hide_password=True))
        return SqlOrderStore(sessions), catalog

    raise ValueError(f"unknown STORAGE_BACKEND: {config.STORAGE_BACKEND!r}")


def build_app(config: Settings | None = None) -> FastAPI:
    usecases = build_usecases(config)
    return create_app(
        place_order_uc=usecases.place_order,
        get_order_uc=usecases.get_order,
        list_orders_uc=usecases.list_orders,
        update_status_uc=usecases.update_status,
        receipt_uc=usecases.receipt,
        edit_order_uc=usecases.edit_order,
        catalog=usecases.catalog,
        products_uc=usecases.products,
        update_payment_uc=usecases.update_payment,
        analytics_uc=usecases.analytics,
    )


def create_asgi_app() -> FastAPI:
    return build_app()
