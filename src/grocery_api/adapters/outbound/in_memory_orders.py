from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from returns.result import Failure, Result, Success

from grocery_api.core.domain.model.errors import (
    OrderError,
    OrderNotFound,
    PersistenceError,
)
from grocery_api.core.domain.model.order import (
    AdditionalCharge,
    LineItem,
    Money,
    Order,
    OrderContents,
    OrderId,
    OrderStatus,
    PaymentStatus,
    new_durable_id,
)
from grocery_api.core.ports.outbound.contents import OrderContentsStore
from grocery_api.core.ports.outbound.orders import OrderRepository

REPLACE_STEPS = (
    "delete_items",
    "insert_items",
    "delete_charges",
    "insert_charges",
    "update_order",
)


@dataclass
class InMemoryOrderStore(OrderRepository, OrderContentsStore):
    """
    Dict-backed order storage.

    ``replace_contents`` stages every step on a copy and publishes the copy
    with a single assignment, so a failing step leaves nothing behind.
    ``fail_at`` names a step in REPLACE_STEPS that should fail (tests);
    ``calls`` records the steps that ran.
    """

    _store: Dict[str, Order] = field(default_factory=dict)
    fail_at: Optional[str] = None
    calls: List[str] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    # ---- OrderRepository ---------------------------------------------------

    def save(self, order: Order) -> Result[OrderId, OrderError]:
        key = str(order.order_id)
        with self._lock:
            if key in self._store:
                return Failure(PersistenceError(message="order_id already exists"))
            self._store[key] = order
        return Success(order.order_id)

    def get(self, order_id: OrderId) -> Result[Order, OrderError]:
        key = str(order_id)
        with self._lock:
            order = self._store.get(key)
        if order is None:
            return Failure(OrderNotFound(message="order not found", order_id=key))
        return Success(order)

    def list(
        self,
        offset: int,
        limit: int,
        status: OrderStatus | None = None,
        customer_id: str | None = None,
        sort_by: str = "created_at",
        sort_dir: str = "desc",
    ) -> Result[Sequence[Order], OrderError]:
        with self._lock:
            orders = list(self._store.values())  # insertion order

        if status is not None:
            orders = [o for o in orders if o.status is status]
        if customer_id is not None:
            orders = [o for o in orders if o.customer.customer_id == customer_id]

        reverse = sort_dir == "desc"

        if sort_by == "created_at":
            orders = sorted(orders, key=lambda o: o.created_at, reverse=reverse)
        elif sort_by == "total":
            orders = sorted(orders, key=lambda o: o.total_amount.amount, reverse=reverse)

        sliced = orders[offset : offset + limit]
        return Success(tuple(sliced))

    def update_status(
        self,
        order_id: OrderId,
        status: OrderStatus,
        updated_at: datetime,
        payment_status: PaymentStatus | None = None,
    ) -> Result[Order, OrderError]:
        key = str(order_id)
        with self._lock:
            current = self._store.get(key)
            if current is None:
                return Failure(OrderNotFound(message="order not found", order_id=key))
            updated = replace(
                current,
                status=status,
                payment_status=payment_status or current.payment_status,
                updated_at=updated_at,
            )
            self._store[key] = updated
        return Success(updated)

    # ---- OrderContentsStore ------------------------------------------------

    def load_contents(self, order_id: OrderId) -> Result[OrderContents, OrderError]:
        return self.get(order_id).map(lambda o: o.contents)

    def replace_contents(
        self,
        order_id: OrderId,
        items: Sequence[LineItem],
        charges: Sequence[AdditionalCharge],
        total_amount: Money,
        updated_at: datetime,
    ) -> Result[OrderContents, OrderError]:
        key = str(order_id)
        with self._lock:
            staged = self._store.get(key)
            if staged is None:
                return Failure(OrderNotFound(message="order not found", order_id=key))

            try:
                self._step("delete_items")
                staged = replace(staged, items=())
                self._step("insert_items")
                staged = replace(
                    staged,
                    items=tuple(
                        replace(it, item_id=new_durable_id(), order_id=order_id)
                        for it in items
                    ),
                )
                self._step("delete_charges")
                staged = replace(staged, charges=())
                if charges:
                    self._step("insert_charges")
                    staged = replace(
                        staged,
                        charges=tuple(
                            replace(ch, charge_id=new_durable_id(), order_id=order_id)
                            for ch in charges
                        ),
                    )
                self._step("update_order")
                staged = replace(
                    staged, total_amount=total_amount, updated_at=updated_at
                )
            except PersistenceError as err:
                return Failure(err)

            self._store[key] = staged
        return Success(staged.contents)

    def _step(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_at == name:
            raise PersistenceError(message=f"{name} failed")
