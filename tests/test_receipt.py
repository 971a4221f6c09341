from __future__ import annotations

from datetime import datetime, timezone

from grocery_api.core.domain.model.errors import OrderNotFound
from grocery_api.core.domain.model.order import (
    AdditionalCharge,
    CustomerInfo,
    LineItem,
    Money,
    Order,
    OrderId,
    OrderStatus,
)
from grocery_api.core.domain.service.get_order_service import (
    GetOrderDeps,
    GetOrderService,
)
from grocery_api.core.domain.service.receipt import (
    ReceiptDeps,
    ReceiptService,
    render_receipt_text,
)
from grocery_api.core.ports.inbound.get_order import GetOrderQuery
from grocery_api.core.ports.inbound.receipt import BusinessInfo

SHOP = BusinessInfo(name="Fresh Market", address="Ngong Road, Nairobi", phone="0700 000000")


def _order(**overrides) -> Order:
    oid = OrderId.new()
    fields = dict(
        order_id=oid,
        customer=CustomerInfo(
            name="Jane Wanjiku", phone="0712 345678", delivery_address="Kilimani"
        ),
        total_amount=Money.of("330"),
        created_at=datetime(2024, 3, 9, 14, 5, tzinfo=timezone.utc),
        updated_at=datetime(2024, 3, 9, 14, 5, tzinfo=timezone.utc),
        items=(
            LineItem("i1", oid, "Tomatoes", 3, Money.of("50"), product_id="tomatoes"),
            LineItem("i2", oid, "Extra Long Organic Spinach", 1, Money.of("100")),
        ),
        charges=(AdditionalCharge("c1", oid, "Delivery Fee", Money.of("80")),),
        payment_method="cash_on_delivery",
        status=OrderStatus.OUT_FOR_DELIVERY,
    )
    fields.update(overrides)
    return Order(**fields)


def test_receipt_layout():
    order = _order(notes="Leave at the gate")
    text = render_receipt_text(order, SHOP)
    lines = text.splitlines()

    assert lines[0] == "Fresh Market"
    assert "RECEIPT" in lines
    assert f"Order #: {order.order_id}" in lines
    assert "Date: 2024-03-09 14:05" in lines
    assert "Extra Long Organic.." in text
    assert "KSh 150.00" in text
    assert "ADDITIONAL CHARGES:" in lines
    assert any(ln.startswith("Subtotal:") and ln.endswith("KSh 250.00") for ln in lines)
    assert any(ln.startswith("Charges:") and ln.endswith("KSh 80.00") for ln in lines)
    assert any(ln.startswith("TOTAL:") and ln.endswith("KSh 330.00") for ln in lines)
    assert "Payment Method: CASH ON DELIVERY" in lines
    assert "Payment Status: PENDING" in lines
    assert lines[lines.index("DELIVERY ADDRESS:") + 1] == "Kilimani"
    assert lines[lines.index("SPECIAL INSTRUCTIONS:") + 1] == "Leave at the gate"
    assert lines[-1] == "Order Status: OUT FOR DELIVERY"


def test_receipt_without_charges_or_notes():
    text = render_receipt_text(
        _order(charges=(), notes=None, payment_method=None, total_amount=Money.of("250")),
        SHOP,
        currency_symbol="KES",
    )

    assert "ADDITIONAL CHARGES:" not in text
    assert "Charges:" not in text
    assert "SPECIAL INSTRUCTIONS:" not in text
    assert "Payment Method: N/A" in text
    assert "KES 250.00" in text


def test_receipt_service(store, tomato_order):
    svc = ReceiptService(
        ReceiptDeps(orders=GetOrderService(GetOrderDeps(orders=store)), business=SHOP)
    )

    text = svc.receipt_text(GetOrderQuery(order_id=str(tomato_order))).unwrap()
    assert "Tomatoes" in text
    assert text.endswith("Order Status: PENDING\n")

    missing = svc.receipt_text(GetOrderQuery(order_id=str(OrderId.new())))
    assert isinstance(missing.failure(), OrderNotFound)
