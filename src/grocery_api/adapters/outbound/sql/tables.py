from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Column, DateTime
from sqlmodel import Field, SQLModel


def _timestamp() -> Column:
    return Column(DateTime(timezone=True), nullable=False)


class OrderRow(SQLModel, table=True):
    __tablename__ = "orders"
    id: uuid.UUID = Field(primary_key=True)
    customer_id: Optional[str] = Field(default=None, index=True)
    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    delivery_address: str
    total_amount: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
    status: str = Field(default="pending", index=True)
    payment_status: str = "pending"
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = Field(sa_column=_timestamp())
    updated_at: datetime = Field(sa_column=_timestamp())


class OrderItemRow(SQLModel, table=True):
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_items_quantity"),
        CheckConstraint("unit_price >= 0", name="ck_order_items_unit_price"),
    )
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    order_id: uuid.UUID = Field(foreign_key="orders.id", index=True)
    position: int = 0
    product_id: Optional[str] = None
    product_name: str
    quantity: int
    unit_price: Decimal = Field(max_digits=12, decimal_places=2)
    total_price: Decimal = Field(max_digits=12, decimal_places=2)


class OrderChargeRow(SQLModel, table=True):
    __tablename__ = "order_additional_charges"
    __table_args__ = (CheckConstraint("amount > 0", name="ck_order_charges_amount"),)
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    order_id: uuid.UUID = Field(foreign_key="orders.id", index=True)
    position: int = 0
    name: str
    amount: Decimal = Field(max_digits=12, decimal_places=2)
    description: Optional[str] = None


class ProductRow(SQLModel, table=True):
    __tablename__ = "products"
    id: str = Field(primary_key=True)
    name: str
    description: str = ""
    price: Decimal = Field(max_digits=12, decimal_places=2)
    unit: str = "pieces"
    category: Optional[str] = Field(default=None, index=True)
    is_available: bool = True
