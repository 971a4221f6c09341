from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Iterable, Optional, Tuple
from uuid import UUID, uuid4

DEFAULT_CURRENCY = "KES"
TEMP_ID_PREFIX = "temp-"

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class OrderId:
    value: UUID

    @staticmethod
    def new() -> "OrderId":
        return OrderId(uuid4())

    @staticmethod
    def parse(raw: str) -> "OrderId":
        """Raises ValueError when raw is not a UUID string."""
        return OrderId(UUID(str(raw)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    @staticmethod
    def of(amount: Decimal | int | str, currency: str = DEFAULT_CURRENCY) -> "Money":
        dec = Decimal(str(amount)).quantize(_CENTS, rounding=ROUND_HALF_UP)
        return Money(dec, currency)

    @staticmethod
    def parse(raw: Decimal | int | str, currency: str = DEFAULT_CURRENCY) -> "Money":
        """Like ``of`` but for untrusted input.

        Raises ValueError for anything that is not a finite number
        representable at cent precision (NaN, Infinity, garbage).
        """
        try:
            dec = Decimal(str(raw))
            if dec.is_finite():
                return Money.of(dec, currency=currency)
        except InvalidOperation:
            pass
        raise ValueError(f"not a finite amount: {raw!r}")

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> "Money":
        return Money.of(0, currency=currency)

    def __add__(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, n: int) -> "Money":
        return Money(
            (self.amount * Decimal(n)).quantize(_CENTS, rounding=ROUND_HALF_UP),
            self.currency,
        )

    def _assert_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise ValueError(f"currency_mismatch: {self.currency} vs {other.currency}")


def fold_money(values: Iterable[Money], currency: str = DEFAULT_CURRENCY) -> Money:
    total = Money.zero(currency=currency)
    for v in values:
        total = total + v
    return total


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


@dataclass(frozen=True)
class Product:
    product_id: str
    name: str
    price: Money
    unit: str = "pieces"
    category: Optional[str] = None
    description: str = ""
    is_available: bool = True


@dataclass(frozen=True)
class LineItem:
    """One product entry on an order.

    ``line_total`` is always derived from quantity and unit price; there is no
    way to set it independently.
    """

    item_id: str
    order_id: OrderId
    product_name: str
    quantity: int
    unit_price: Money
    product_id: Optional[str] = None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity

    @property
    def is_temporary(self) -> bool:
        return self.item_id.startswith(TEMP_ID_PREFIX)


@dataclass(frozen=True)
class AdditionalCharge:
    charge_id: str
    order_id: OrderId
    name: str
    amount: Money
    description: Optional[str] = None

    @property
    def is_temporary(self) -> bool:
        return self.charge_id.startswith(TEMP_ID_PREFIX)


@dataclass(frozen=True)
class OrderContents:
    """Line items and additional charges of one order, in display order."""

    order_id: OrderId
    items: Tuple[LineItem, ...] = ()
    charges: Tuple[AdditionalCharge, ...] = ()


@dataclass(frozen=True)
class CustomerInfo:
    name: str
    phone: str
    delivery_address: str
    email: Optional[str] = None
    customer_id: Optional[str] = None


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    customer: CustomerInfo
    total_amount: Money
    created_at: datetime
    updated_at: datetime
    items: Tuple[LineItem, ...] = ()
    charges: Tuple[AdditionalCharge, ...] = ()
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: Optional[str] = None
    notes: Optional[str] = None

    @property
    def contents(self) -> OrderContents:
        return OrderContents(order_id=self.order_id, items=self.items, charges=self.charges)


def new_temp_id() -> str:
    return f"{TEMP_ID_PREFIX}{uuid4().hex}"


def new_durable_id() -> str:
    return str(uuid4())


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
