from __future__ import annotations

from decimal import Decimal
from typing import Any

from fastapi import FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field
from returns.result import Result, Success

from grocery_api.core.domain.model.errors import (
    EditSessionError,
    OrderError,
    OrderNotFound,
    PersistenceError,
    ProductExists,
    ProductNotFound,
    ProductUnavailable,
    PublishError,
    ValidationError,
)
from grocery_api.core.domain.model.order import (
    AdditionalCharge,
    LineItem,
    Money,
    Product,
)
from grocery_api.core.ports.inbound.analytics import (
    SalesAnalyticsUseCase,
    SalesSummaryQuery,
    SalesSummaryView,
)
from grocery_api.core.ports.inbound.edit_order import EditOrderUseCase, EditSessionView
from grocery_api.core.ports.inbound.get_order import (
    GetOrderQuery,
    GetOrderUseCase,
    OrderView,
)
from grocery_api.core.ports.inbound.list_orders import (
    ListOrdersQuery,
    ListOrdersUseCase,
)
from grocery_api.core.ports.inbound.place_order import (
    PlaceOrderCommand,
    PlaceOrderLine,
    PlaceOrderUseCase,
)
from grocery_api.core.ports.inbound.products import (
    CreateProductCommand,
    ManageProductsUseCase,
    UpdateProductCommand,
)
from grocery_api.core.ports.inbound.receipt import ReceiptUseCase
from grocery_api.core.ports.inbound.update_payment import (
    UpdatePaymentStatusCommand,
    UpdatePaymentStatusUseCase,
)
from grocery_api.core.ports.inbound.update_status import (
    UpdateOrderStatusCommand,
    UpdateOrderStatusUseCase,
)
from grocery_api.core.ports.outbound.catalog import ProductCatalog

# ---- HTTP DTOs (adapter layer) ---------------------------------------------


class PlaceOrderLineIn(BaseModel):
    product_id: str = Field(min_length=1, examples=["tomatoes"])
    quantity: int = Field(gt=0, examples=[2])


class PlaceOrderRequest(BaseModel):
    customer_name: str = Field(min_length=1, examples=["Jane Wanjiku"])
    customer_phone: str = Field(min_length=1, examples=["+254712345678"])
    delivery_address: str = Field(min_length=1, examples=["Kilimani, Nairobi"])
    customer_email: str | None = Field(None, examples=["jane@example.com"])
    customer_id: str | None = None
    payment_method: str | None = Field(None, examples=["cash_on_delivery"])
    notes: str | None = None
    lines: list[PlaceOrderLineIn] = Field(min_length=1)


class UpdateStatusRequest(BaseModel):
    status: str = Field(examples=["confirmed"])


class UpdatePaymentRequest(BaseModel):
    payment_status: str = Field(examples=["paid"])


class AddItemRequest(BaseModel):
    product_id: str = Field(min_length=1, examples=["tomatoes"])
    quantity: int = Field(1, examples=[1])


class UpdateItemRequest(BaseModel):
    quantity: int | None = Field(None, examples=[3])
    unit_price: Decimal | None = Field(None, examples=["55.00"])


class AddChargeRequest(BaseModel):
    name: str = Field(examples=["Delivery Fee"])
    amount: Decimal = Field(gt=0, examples=["80.00"])
    description: str | None = None


class CreateProductRequest(BaseModel):
    product_id: str | None = Field(None, examples=["cabbage"])
    name: str = Field(min_length=1, examples=["Cabbage"])
    price: Decimal = Field(ge=0, examples=["45.00"])
    unit: str = Field("pieces", min_length=1, examples=["pieces"])
    category: str | None = Field(None, examples=["vegetables"])
    description: str = ""
    is_available: bool = True


class UpdateProductRequest(BaseModel):
    name: str | None = None
    price: Decimal | None = Field(None, ge=0, examples=["42.00"])
    unit: str | None = None
    category: str | None = None
    description: str | None = None
    is_available: bool | None = None


class ProductOut(BaseModel):
    product_id: str
    name: str
    price: str
    unit: str
    category: str | None
    description: str
    is_available: bool


class OrderLineOut(BaseModel):
    item_id: str
    product_id: str | None
    product_name: str
    unit_price: str
    quantity: int
    line_total: str


class OrderChargeOut(BaseModel):
    charge_id: str
    name: str
    amount: str
    description: str | None


class OrderReceiptResponse(BaseModel):
    order_id: str
    customer_id: str | None
    total: str
    currency: str


class OrderDetailsResponse(BaseModel):
    order_id: str
    customer_id: str | None
    customer_name: str
    customer_phone: str
    customer_email: str | None
    delivery_address: str
    status: str
    payment_status: str
    payment_method: str | None
    notes: str | None
    items_subtotal: str
    charges_total: str
    total: str
    currency: str
    lines: list[OrderLineOut]
    charges: list[OrderChargeOut]
    created_at: str
    updated_at: str


class OrderSummaryOut(BaseModel):
    order_id: str
    customer_id: str | None
    customer_name: str
    status: str
    total: str
    currency: str
    created_at: str


class OrderListResponse(BaseModel):
    offset: int
    limit: int
    items: list[OrderSummaryOut]


class EditSessionResponse(BaseModel):
    order_id: str
    mode: str
    dirty: bool
    items: list[OrderLineOut]
    charges: list[OrderChargeOut]
    items_subtotal: str
    charges_total: str
    grand_total: str
    currency: str


class DailyRevenueOut(BaseModel):
    day: str
    revenue: str


class SalesSummaryResponse(BaseModel):
    total_revenue: str
    total_orders: int
    average_order_value: str
    currency: str
    orders_by_status: dict[str, int]
    revenue_by_day: list[DailyRevenueOut]


class ErrorResponse(BaseModel):
    type: str
    message: str
    details: list[dict[str, Any]] | None = None


# ---- mapping helpers -------------------------------------------------------


def _amount(m: Money) -> str:
    return str(m.amount)


def _line_out(li: LineItem) -> OrderLineOut:
    return OrderLineOut(
        item_id=li.item_id,
        product_id=li.product_id,
        product_name=li.product_name,
        unit_price=_amount(li.unit_price),
        quantity=li.quantity,
        line_total=_amount(li.line_total),
    )


def _charge_out(ch: AdditionalCharge) -> OrderChargeOut:
    return OrderChargeOut(
        charge_id=ch.charge_id,
        name=ch.name,
        amount=_amount(ch.amount),
        description=ch.description,
    )


def _product_out(p: Product) -> ProductOut:
    return ProductOut(
        product_id=p.product_id,
        name=p.name,
        price=_amount(p.price),
        unit=p.unit,
        category=p.category,
        description=p.description,
        is_available=p.is_available,
    )


def _details_out(view: OrderView) -> OrderDetailsResponse:
    return OrderDetailsResponse(
        order_id=str(view.order_id),
        customer_id=view.customer.customer_id,
        customer_name=view.customer.name,
        customer_phone=view.customer.phone,
        customer_email=view.customer.email,
        delivery_address=view.customer.delivery_address,
        status=view.status.value,
        payment_status=view.payment_status.value,
        payment_method=view.payment_method,
        notes=view.notes,
        items_subtotal=_amount(view.items_subtotal),
        charges_total=_amount(view.charges_total),
        total=_amount(view.total),
        currency=view.total.currency,
        lines=[
            OrderLineOut(
                item_id=ln.item_id,
                product_id=ln.product_id,
                product_name=ln.product_name,
                unit_price=_amount(ln.unit_price),
                quantity=ln.quantity,
                line_total=_amount(ln.line_total),
            )
            for ln in view.lines
        ],
        charges=[
            OrderChargeOut(
                charge_id=ch.charge_id,
                name=ch.name,
                amount=_amount(ch.amount),
                description=ch.description,
            )
            for ch in view.charges
        ],
        created_at=view.created_at.isoformat(),
        updated_at=view.updated_at.isoformat(),
    )


def _session_out(view: EditSessionView) -> EditSessionResponse:
    return EditSessionResponse(
        order_id=str(view.order_id),
        mode=view.mode.value,
        dirty=view.dirty,
        items=[_line_out(li) for li in view.items],
        charges=[_charge_out(ch) for ch in view.charges],
        items_subtotal=_amount(view.totals.items_subtotal),
        charges_total=_amount(view.totals.charges_total),
        grand_total=_amount(view.totals.grand_total),
        currency=view.totals.grand_total.currency,
    )


def _summary_out(view: SalesSummaryView) -> SalesSummaryResponse:
    return SalesSummaryResponse(
        total_revenue=_amount(view.total_revenue),
        total_orders=view.total_orders,
        average_order_value=_amount(view.average_order_value),
        currency=view.total_revenue.currency,
        orders_by_status={s.value: n for s, n in view.orders_by_status.items()},
        revenue_by_day=[
            DailyRevenueOut(day=d.day.isoformat(), revenue=_amount(d.revenue))
            for d in view.revenue_by_day
        ],
    )


def _session_or_raise(result: Result[EditSessionView, OrderError]) -> EditSessionResponse:
    if isinstance(result, Success):
        return _session_out(result.unwrap())
    raise result.failure()


def _map_error_to_http(err: OrderError) -> tuple[int, ErrorResponse]:
    if isinstance(err, ValidationError):
        return 400, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, (OrderNotFound, ProductNotFound)):
        return 404, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, (ProductUnavailable, ProductExists, EditSessionError)):
        return 409, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, PublishError):
        return 503, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, PersistenceError):
        return 500, ErrorResponse(type=type(err).__name__, message=str(err))

    return 500, ErrorResponse(type=type(err).__name__, message=str(err))


_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def create_app(
    place_order_uc: PlaceOrderUseCase,
    get_order_uc: GetOrderUseCase,
    list_orders_uc: ListOrdersUseCase,
    update_status_uc: UpdateOrderStatusUseCase,
    receipt_uc: ReceiptUseCase,
    edit_order_uc: EditOrderUseCase,
    catalog: ProductCatalog,
    products_uc: ManageProductsUseCase,
    update_payment_uc: UpdatePaymentStatusUseCase,
    analytics_uc: SalesAnalyticsUseCase,
) -> FastAPI:
    app = FastAPI(title="grocery_api")

    # --- exception handlers --------------------------------------------------

    @app.exception_handler(OrderError)
    async def handle_domain_error(_: Request, exc: OrderError) -> JSONResponse:
        status, body = _map_error_to_http(exc)
        return JSONResponse(status_code=status, content=body.model_dump())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        body = ErrorResponse(
            type="RequestValidationError",
            message="invalid request",
            details=[
                {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
                for e in exc.errors()
            ],
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        body = ErrorResponse(type=type(exc).__name__, message="internal server error")
        return JSONResponse(status_code=500, content=body.model_dump())

    # --- storefront ----------------------------------------------------------

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/products", response_model=list[ProductOut])
    def list_products(available_only: bool = Query(False)) -> Any:
        result = catalog.list_products(available_only=available_only)
        if isinstance(result, Success):
            return [_product_out(p) for p in result.unwrap()]
        raise result.failure()

    @app.get("/products/{product_id}", response_model=ProductOut, responses=_ERRORS)
    def get_product(product_id: str) -> Any:
        result = products_uc.get_product(product_id)
        if isinstance(result, Success):
            return _product_out(result.unwrap())
        raise result.failure()

    @app.post(
        "/orders",
        response_model=OrderReceiptResponse,
        status_code=201,
        responses={**_ERRORS, 503: {"model": ErrorResponse}},
    )
    def place_order(req: PlaceOrderRequest, response: Response) -> Any:
        cmd = PlaceOrderCommand(
            customer_name=req.customer_name,
            customer_phone=req.customer_phone,
            delivery_address=req.delivery_address,
            customer_email=req.customer_email,
            customer_id=req.customer_id,
            payment_method=req.payment_method,
            notes=req.notes,
            lines=tuple(
                PlaceOrderLine(product_id=ln.product_id, quantity=ln.quantity)
                for ln in req.lines
            ),
        )

        result = place_order_uc.place_order(cmd)

        if isinstance(result, Success):
            receipt = result.unwrap()
            order_id = str(receipt.order_id)
            response.headers["Location"] = f"/orders/{order_id}"
            return OrderReceiptResponse(
                order_id=order_id,
                customer_id=receipt.customer_id,
                total=_amount(receipt.total),
                currency=receipt.total.currency,
            )

        raise result.failure()

    @app.get("/orders", response_model=OrderListResponse, responses=_ERRORS)
    def list_orders(
        offset: int = Query(0, ge=0),
        limit: int = Query(50, ge=1, le=100),
        status: str | None = Query(None),
        customer_id: str | None = Query(None, min_length=1),
        sort_by: str = Query("created_at"),
        sort_dir: str = Query("desc"),
    ) -> Any:
        result = list_orders_uc.list_orders(
            ListOrdersQuery(
                offset=offset,
                limit=limit,
                status=status,
                customer_id=customer_id,
                sort_by=sort_by,
                sort_dir=sort_dir,
            )
        )

        if isinstance(result, Success):
            return OrderListResponse(
                offset=offset,
                limit=limit,
                items=[
                    OrderSummaryOut(
                        order_id=str(v.order_id),
                        customer_id=v.customer_id,
                        customer_name=v.customer_name,
                        status=v.status.value,
                        total=_amount(v.total),
                        currency=v.total.currency,
                        created_at=v.created_at.isoformat(),
                    )
                    for v in result.unwrap()
                ],
            )

        raise result.failure()

    @app.get("/orders/{order_id}", response_model=OrderDetailsResponse, responses=_ERRORS)
    def get_order(order_id: str) -> Any:
        result = get_order_uc.get_order(GetOrderQuery(order_id=order_id))
        if isinstance(result, Success):
            return _details_out(result.unwrap())
        raise result.failure()

    @app.put(
        "/orders/{order_id}/status",
        response_model=OrderDetailsResponse,
        responses={**_ERRORS, 503: {"model": ErrorResponse}},
    )
    def update_status(order_id: str, req: UpdateStatusRequest) -> Any:
        result = update_status_uc.update_status(
            UpdateOrderStatusCommand(order_id=order_id, status=req.status)
        )
        if isinstance(result, Success):
            return _details_out(result.unwrap())
        raise result.failure()

    @app.put(
        "/orders/{order_id}/payment",
        response_model=OrderDetailsResponse,
        responses={**_ERRORS, 503: {"model": ErrorResponse}},
    )
    def update_payment(order_id: str, req: UpdatePaymentRequest) -> Any:
        result = update_payment_uc.update_payment_status(
            UpdatePaymentStatusCommand(order_id=order_id, payment_status=req.payment_status)
        )
        if isinstance(result, Success):
            return _details_out(result.unwrap())
        raise result.failure()

    @app.get(
        "/orders/{order_id}/receipt",
        response_class=PlainTextResponse,
        responses=_ERRORS,
    )
    def receipt(order_id: str) -> Any:
        result = receipt_uc.receipt_text(GetOrderQuery(order_id=order_id))
        if isinstance(result, Success):
            return PlainTextResponse(
                result.unwrap(),
                headers={
                    "Content-Disposition": f'inline; filename="receipt-{order_id}.txt"'
                },
            )
        raise result.failure()

    # --- back office: catalog and analytics ---------------------------------

    @app.post("/products", response_model=ProductOut, status_code=201, responses=_ERRORS)
    def create_product(req: CreateProductRequest, response: Response) -> Any:
        result = products_uc.create_product(
            CreateProductCommand(
                product_id=req.product_id,
                name=req.name,
                price=req.price,
                unit=req.unit,
                category=req.category,
                description=req.description,
                is_available=req.is_available,
            )
        )
        if isinstance(result, Success):
            product = result.unwrap()
            response.headers["Location"] = f"/products/{product.product_id}"
            return _product_out(product)
        raise result.failure()

    @app.patch("/products/{product_id}", response_model=ProductOut, responses=_ERRORS)
    def update_product(product_id: str, req: UpdateProductRequest) -> Any:
        result = products_uc.update_product(
            UpdateProductCommand(
                product_id=product_id,
                name=req.name,
                price=req.price,
                unit=req.unit,
                category=req.category,
                description=req.description,
                is_available=req.is_available,
            )
        )
        if isinstance(result, Success):
            return _product_out(result.unwrap())
        raise result.failure()

    @app.get("/analytics/sales", response_model=SalesSummaryResponse, responses=_ERRORS)
    def sales_summary(days: int = Query(7)) -> Any:
        result = analytics_uc.sales_summary(SalesSummaryQuery(days=days))
        if isinstance(result, Success):
            return _summary_out(result.unwrap())
        raise result.failure()

    # --- back office: order editing ------------------------------------------

    @app.get("/orders/{order_id}/edit", response_model=EditSessionResponse, responses=_ERRORS)
    def edit_view(order_id: str) -> Any:
        return _session_or_raise(edit_order_uc.view(order_id))

    @app.post(
        "/orders/{order_id}/edit/begin",
        response_model=EditSessionResponse,
        responses=_ERRORS,
    )
    def edit_begin(order_id: str) -> Any:
        return _session_or_raise(edit_order_uc.begin_edit(order_id))

    @app.post(
        "/orders/{order_id}/edit/items",
        response_model=EditSessionResponse,
        responses=_ERRORS,
    )
    def edit_add_item(order_id: str, req: AddItemRequest) -> Any:
        return _session_or_raise(
            edit_order_uc.add_item(order_id, req.product_id, req.quantity)
        )

    @app.patch(
        "/orders/{order_id}/edit/items/{item_id}",
        response_model=EditSessionResponse,
        responses=_ERRORS,
    )
    def edit_update_item(order_id: str, item_id: str, req: UpdateItemRequest) -> Any:
        return _session_or_raise(
            edit_order_uc.update_item(
                order_id, item_id, quantity=req.quantity, unit_price=req.unit_price
            )
        )

    @app.delete(
        "/orders/{order_id}/edit/items/{item_id}",
        response_model=EditSessionResponse,
        responses=_ERRORS,
    )
    def edit_remove_item(order_id: str, item_id: str) -> Any:
        return _session_or_raise(edit_order_uc.remove_item(order_id, item_id))

    @app.post(
        "/orders/{order_id}/edit/charges",
        response_model=EditSessionResponse,
        responses=_ERRORS,
    )
    def edit_add_charge(order_id: str, req: AddChargeRequest) -> Any:
        return _session_or_raise(
            edit_order_uc.add_charge(order_id, req.name, req.amount, req.description)
        )

    @app.delete(
        "/orders/{order_id}/edit/charges/{charge_id}",
        response_model=EditSessionResponse,
        responses=_ERRORS,
    )
    def edit_remove_charge(order_id: str, charge_id: str) -> Any:
        return _session_or_raise(edit_order_uc.remove_charge(order_id, charge_id))

    @app.post(
        "/orders/{order_id}/edit/commit",
        response_model=EditSessionResponse,
        responses=_ERRORS,
    )
    def edit_commit(order_id: str) -> Any:
        return _session_or_raise(edit_order_uc.commit(order_id))

    @app.post(
        "/orders/{order_id}/edit/discard",
        response_model=EditSessionResponse,
        responses=_ERRORS,
    )
    def edit_discard(order_id: str) -> Any:
        return _session_or_raise(edit_order_uc.discard(order_id))

    return app
