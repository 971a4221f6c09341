from __future__ import annotations

import json

from grocery_api.adapters.inbound.cli import run_cli
from grocery_api.core.domain.service.get_order_service import (
    GetOrderDeps,
    GetOrderService,
)
from grocery_api.core.domain.service.receipt import ReceiptDeps, ReceiptService
from grocery_api.core.ports.inbound.receipt import BusinessInfo


def _receipts(store) -> ReceiptService:
    return ReceiptService(
        ReceiptDeps(
            orders=GetOrderService(GetOrderDeps(orders=store)),
            business=BusinessInfo(name="Fresh Market", address="Nairobi", phone="0700"),
        )
    )


def test_cli_places_order_and_prints_receipt(place_order, store, capsys):
    payload = {
        "customer_name": "Jane Wanjiku",
        "customer_phone": "+254712345678",
        "delivery_address": "Kilimani",
        "lines": [{"product_id": "bananas", "quantity": 4}],
    }

    code = run_cli(place_order, _receipts(store), json.dumps(payload))

    out = capsys.readouterr().out
    assert code == 0
    assert "[ok]" in out
    assert "'total': '40.00'" in out
    assert "RECEIPT" in out


def test_cli_invalid_json(place_order, store, capsys):
    assert run_cli(place_order, _receipts(store), "{not json") == 2
    assert "invalid_input" in capsys.readouterr().out


def test_cli_domain_failure(place_order, store, capsys):
    payload = {
        "customer_name": "Jane",
        "customer_phone": "0712",
        "delivery_address": "Kilimani",
        "lines": [{"product_id": "avocado", "quantity": 1}],
    }

    assert run_cli(place_order, _receipts(store), json.dumps(payload)) == 1
    assert "[ng] product_unavailable: avocado" in capsys.readouterr().out
