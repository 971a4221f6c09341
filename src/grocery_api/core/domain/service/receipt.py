from __future__ import annotations

from dataclasses import dataclass
from typing import List

from returns.result import Result

from grocery_api.core.domain.model.errors import OrderError
from grocery_api.core.domain.model.order import Money, Order
from grocery_api.core.domain.model.totals import reconcile_totals
from grocery_api.core.domain.service.get_order_service import GetOrderService
from grocery_api.core.ports.inbound.get_order import GetOrderQuery
from grocery_api.core.ports.inbound.receipt import BusinessInfo, ReceiptUseCase

NAME_WIDTH = 20
QTY_WIDTH = 5
AMOUNT_WIDTH = 11
LABEL_WIDTH = NAME_WIDTH + QTY_WIDTH + AMOUNT_WIDTH + 2
RULE = "-" * (LABEL_WIDTH + AMOUNT_WIDTH + 1)


def render_receipt_text(
    order: Order, business: BusinessInfo, currency_symbol: str = "KSh"
) -> str:
    """Plain-text receipt laid out for a fixed-width font."""

    def money(m: Money) -> str:
        return f"{currency_symbol} {m.amount:.2f}"

    def total_row(label: str, m: Money) -> str:
        return f"{label:<{LABEL_WIDTH}} {money(m):>{AMOUNT_WIDTH}}"

    totals = reconcile_totals(order.items, order.charges)
    out: List[str] = [business.name, business.address, f"Phone: {business.phone}"]
    if business.email:
        out.append(f"Email: {business.email}")
    out += [
        "",
        "RECEIPT",
        f"Order #: {order.order_id}",
        f"Date: {order.created_at:%Y-%m-%d %H:%M}",
        f"Customer: {order.customer.name}",
        f"Phone: {order.customer.phone}",
        "",
        "ITEMS:",
        f"{'Item':<{NAME_WIDTH}} {'Qty':<{QTY_WIDTH}} {'Price':<{AMOUNT_WIDTH}} "
        f"{'Total':>{AMOUNT_WIDTH}}",
        RULE,
    ]
    for item in order.items:
        name = item.product_name
        if len(name) > NAME_WIDTH - 2:
            name = name[: NAME_WIDTH - 2] + ".."
        out.append(
            f"{name:<{NAME_WIDTH}} {item.quantity:<{QTY_WIDTH}} "
            f"{money(item.unit_price):<{AMOUNT_WIDTH}} "
            f"{money(item.line_total):>{AMOUNT_WIDTH}}"
        )
    out.append(RULE)

    if order.charges:
        out.append("ADDITIONAL CHARGES:")
        out += [total_row(ch.name, ch.amount) for ch in order.charges]
        out.append(RULE)

    out.append(total_row("Subtotal:", totals.items_subtotal))
    if order.charges:
        out.append(total_row("Charges:", totals.charges_total))
    out += [
        total_row("TOTAL:", order.total_amount),
        "",
        f"Payment Method: {_label(order.payment_method) or 'N/A'}",
        f"Payment Status: {_label(order.payment_status.value)}",
        "",
        "DELIVERY ADDRESS:",
        order.customer.delivery_address,
        "",
    ]
    if order.notes:
        out += ["SPECIAL INSTRUCTIONS:", order.notes, ""]
    out += [
        "Thank you for your business!",
        f"Order Status: {_label(order.status.value)}",
    ]
    return "\n".join(out) + "\n"


def _label(raw: str | None) -> str:
    return (raw or "").replace("_", " ").upper()


@dataclass(frozen=True)
class ReceiptDeps:
    orders: GetOrderService
    business: BusinessInfo
    currency_symbol: str = "KSh"


@dataclass(frozen=True)
class ReceiptService(ReceiptUseCase):
    deps: ReceiptDeps

    def receipt_text(self, query: GetOrderQuery) -> Result[str, OrderError]:
        return self.deps.orders.find(query).map(
            lambda order: render_receipt_text(
                order, self.deps.business, self.deps.currency_symbol
            )
        )
