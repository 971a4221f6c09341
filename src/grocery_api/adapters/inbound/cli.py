from __future__ import annotations

import json
from typing import Any

from returns.result import Success

from grocery_api.core.ports.inbound.get_order import GetOrderQuery
from grocery_api.core.ports.inbound.place_order import (
    PlaceOrderCommand,
    PlaceOrderLine,
    PlaceOrderUseCase,
)
from grocery_api.core.ports.inbound.receipt import ReceiptUseCase


def run_cli(
    place_order_uc: PlaceOrderUseCase, receipt_uc: ReceiptUseCase, raw: str
) -> int:
    """
    raw: JSON string.
    Example:
      {"customer_name":"Jane Wanjiku","customer_phone":"+254712345678",
       "delivery_address":"Kilimani, Nairobi",
       "lines":[{"product_id":"tomatoes","quantity":2}]}
    """
    try:
        payload = json.loads(raw)
        cmd = _parse_command(payload)
    except (ValueError, KeyError, TypeError) as e:
        print(f"invalid_input: {e}")
        return 2

    result = place_order_uc.place_order(cmd)

    if not isinstance(result, Success):
        print("[ng]", str(result.failure()))
        return 1

    receipt = result.unwrap()
    print(
        "[ok]",
        {
            "order_id": str(receipt.order_id),
            "customer_id": receipt.customer_id,
            "total": str(receipt.total.amount),
            "currency": receipt.total.currency,
        },
    )

    text = receipt_uc.receipt_text(GetOrderQuery(order_id=str(receipt.order_id)))
    if isinstance(text, Success):
        print(text.unwrap())
    else:
        print("[warn] receipt unavailable:", str(text.failure()))
    return 0


def _parse_command(payload: dict[str, Any]) -> PlaceOrderCommand:
    if not isinstance(payload, dict):
        raise TypeError("payload must be a JSON object")

    lines = [
        PlaceOrderLine(
            product_id=str(x["product_id"]),
            quantity=int(x.get("quantity", 1)),
        )
        for x in payload.get("lines", [])
    ]
    return PlaceOrderCommand(
        customer_name=str(payload.get("customer_name", "")),
        customer_phone=str(payload.get("customer_phone", "")),
        delivery_address=str(payload.get("delivery_address", "")),
        lines=lines,
        customer_email=payload.get("customer_email"),
        customer_id=payload.get("customer_id"),
        payment_method=payload.get("payment_method"),
        notes=payload.get("notes"),
    )
