from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Sequence
from uuid import UUID

from returns.result import Failure, Result, Success
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from grocery_api.adapters.outbound.sql.tables import (
    OrderChargeRow,
    OrderItemRow,
    OrderRow,
)
from grocery_api.core.domain.model.errors import (
    OrderError,
    OrderNotFound,
    PersistenceError,
)
from grocery_api.core.domain.model.order import (
    AdditionalCharge,
    CustomerInfo,
    LineItem,
    Money,
    Order,
    OrderContents,
    OrderId,
    OrderStatus,
    PaymentStatus,
)
from grocery_api.core.ports.outbound.contents import OrderContentsStore
from grocery_api.core.ports.outbound.orders import OrderRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SqlOrderStore(OrderRepository, OrderContentsStore):
    sessions: sessionmaker[Session]

    # ---- OrderRepository ---------------------------------------------------

    def save(self, order: Order) -> Result[OrderId, OrderError]:
        try:
            with self.sessions.begin() as db:
                if db.get(OrderRow, order.order_id.value) is not None:
                    return Failure(PersistenceError(message="order_id already exists"))
                db.add(_order_row(order))
                db.flush()
                db.add_all(_item_rows(order.order_id, order.items, keep_ids=True))
                db.add_all(_charge_rows(order.order_id, order.charges, keep_ids=True))
        except SQLAlchemyError as err:
            return _failed("save", order.order_id, err)
        return Success(order.order_id)

    def get(self, order_id: OrderId) -> Result[Order, OrderError]:
        try:
            with self.sessions() as db:
                row = db.get(OrderRow, order_id.value)
                if row is None:
                    return Failure(_not_found(order_id))
                return Success(_load_orders(db, [row])[0])
        except SQLAlchemyError as err:
            return _failed("load", order_id, err)

    def list(
        self,
        offset: int,
        limit: int,
        status: OrderStatus | None = None,
        customer_id: str | None = None,
        sort_by: str = "created_at",
        sort_dir: str = "desc",
    ) -> Result[Sequence[Order], OrderError]:
        column = OrderRow.total_amount if sort_by == "total" else OrderRow.created_at
        stmt = select(OrderRow)
        if status is not None:
            stmt = stmt.where(OrderRow.status == status.value)
        if customer_id is not None:
            stmt = stmt.where(OrderRow.customer_id == customer_id)
        stmt = stmt.order_by(column.desc() if sort_dir == "desc" else column.asc())
        stmt = stmt.offset(offset).limit(limit)

        try:
            with self.sessions() as db:
                rows = list(db.scalars(stmt).all())
                return Success(tuple(_load_orders(db, rows)))
        except SQLAlchemyError as err:
            return Failure(PersistenceError(message=f"could not list orders: {err}"))

    def update_status(
        self,
        order_id: OrderId,
        status: OrderStatus,
        updated_at: datetime,
        payment_status: PaymentStatus | None = None,
    ) -> Result[Order, OrderError]:
        try:
            with self.sessions.begin() as db:
                row = db.get(OrderRow, order_id.value)
                if row is None:
                    return Failure(_not_found(order_id))
                row.status = status.value
                if payment_status is not None:
                    row.payment_status = payment_status.value
                row.updated_at = updated_at
                db.flush()
                return Success(_load_orders(db, [row])[0])
        except SQLAlchemyError as err:
            return _failed("update status of", order_id, err)

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
        oid = order_id.value
        try:
            # one transaction: any error below rolls back every step
            with self.sessions.begin() as db:
                row = db.get(OrderRow, oid, with_for_update=True)
                if row is None:
                    return Failure(_not_found(order_id))

                db.execute(delete(OrderItemRow).where(OrderItemRow.order_id == oid))
                db.add_all(_item_rows(order_id, items, keep_ids=False))
                db.execute(delete(OrderChargeRow).where(OrderChargeRow.order_id == oid))
                if charges:
                    db.add_all(_charge_rows(order_id, charges, keep_ids=False))
                row.total_amount = total_amount.amount
                row.updated_at = updated_at
                db.flush()
                return Success(_load_orders(db, [row])[0].contents)
        except SQLAlchemyError as err:
            return _failed("replace contents of", order_id, err)


# ---- row mapping -----------------------------------------------------------


def _order_row(order: Order) -> OrderRow:
    return OrderRow(
        id=order.order_id.value,
        customer_id=order.customer.customer_id,
        customer_name=order.customer.name,
        customer_phone=order.customer.phone,
        customer_email=order.customer.email,
        delivery_address=order.customer.delivery_address,
        total_amount=order.total_amount.amount,
        status=order.status.value,
        payment_status=order.payment_status.value,
        payment_method=order.payment_method,
        notes=order.notes,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def _item_rows(
    order_id: OrderId, items: Sequence[LineItem], keep_ids: bool
) -> List[OrderItemRow]:
    rows = []
    for pos, it in enumerate(items):
        row = OrderItemRow(
            order_id=order_id.value,
            position=pos,
            product_id=it.product_id,
            product_name=it.product_name,
            quantity=it.quantity,
            unit_price=it.unit_price.amount,
            total_price=it.line_total.amount,
        )
        if keep_ids:
            row.id = UUID(it.item_id)
        rows.append(row)
    return rows


def _charge_rows(
    order_id: OrderId, charges: Sequence[AdditionalCharge], keep_ids: bool
) -> List[OrderChargeRow]:
    rows = []
    for pos, ch in enumerate(charges):
        row = OrderChargeRow(
            order_id=order_id.value,
            position=pos,
            name=ch.name,
            amount=ch.amount.amount,
            description=ch.description,
        )
        if keep_ids:
            row.id = UUID(ch.charge_id)
        rows.append(row)
    return rows


def _load_orders(db: Session, rows: Sequence[OrderRow]) -> List[Order]:
    ids = [r.id for r in rows]
    items: Dict[UUID, List[OrderItemRow]] = {i: [] for i in ids}
    charges: Dict[UUID, List[OrderChargeRow]] = {i: [] for i in ids}
    if ids:
        for it in db.scalars(
            select(OrderItemRow)
            .where(OrderItemRow.order_id.in_(ids))
            .order_by(OrderItemRow.position)
        ):
            items[it.order_id].append(it)
        for ch in db.scalars(
            select(OrderChargeRow)
            .where(OrderChargeRow.order_id.in_(ids))
            .order_by(OrderChargeRow.position)
        ):
            charges[ch.order_id].append(ch)
    return [_to_order(r, items[r.id], charges[r.id]) for r in rows]


def _to_order(
    row: OrderRow, items: Sequence[OrderItemRow], charges: Sequence[OrderChargeRow]
) -> Order:
    order_id = OrderId(row.id)
    return Order(
        order_id=order_id,
        customer=CustomerInfo(
            name=row.customer_name,
            phone=row.customer_phone,
            delivery_address=row.delivery_address,
            email=row.customer_email,
            customer_id=row.customer_id,
        ),
        total_amount=Money.of(row.total_amount),
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
        items=tuple(
            LineItem(
                item_id=str(it.id),
                order_id=order_id,
                product_id=it.product_id,
                product_name=it.product_name,
                quantity=it.quantity,
                unit_price=Money.of(it.unit_price),
            )
            for it in items
        ),
        charges=tuple(
            AdditionalCharge(
                charge_id=str(ch.id),
                order_id=order_id,
                name=ch.name,
                amount=Money.of(ch.amount),
                description=ch.description,
            )
            for ch in charges
        ),
        status=OrderStatus(row.status),
        payment_status=PaymentStatus(row.payment_status),
        payment_method=row.payment_method,
        notes=row.notes,
    )


def _aware(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _not_found(order_id: OrderId) -> OrderNotFound:
    return OrderNotFound(message="order not found", order_id=str(order_id))


def _failed(action: str, order_id: OrderId, err: SQLAlchemyError) -> Result:
    logger.error("could not %s order %s: %s", action, order_id, err)
    return Failure(PersistenceError(message=f"could not {action} order {order_id}"))
