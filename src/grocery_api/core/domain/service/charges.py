from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from returns.result import Failure, Result, Success

from grocery_api.core.domain.model.errors import OrderError, ValidationError
from grocery_api.core.domain.model.order import (
    AdditionalCharge,
    Money,
    OrderId,
    new_temp_id,
)

logger = logging.getLogger(__name__)


@dataclass
class AdditionalChargeStore:
    """Working set of ad-hoc charges (delivery fee and the like) for one order."""

    order_id: OrderId
    _charges: List[AdditionalCharge] = field(default_factory=list)

    @classmethod
    def seeded(
        cls, order_id: OrderId, charges: Sequence[AdditionalCharge]
    ) -> "AdditionalChargeStore":
        return cls(order_id=order_id, _charges=list(charges))

    @property
    def charges(self) -> Tuple[AdditionalCharge, ...]:
        return tuple(self._charges)

    def reset(self, charges: Sequence[AdditionalCharge]) -> None:
        self._charges = list(charges)

    def add_charge(
        self,
        name: str,
        amount: Decimal | int | str,
        description: Optional[str] = None,
    ) -> Result[AdditionalCharge, OrderError]:
        name = (name or "").strip()
        if not name:
            return Failure(ValidationError("charge name is required"))
        try:
            money = Money.parse(amount)
        except ValueError:
            return Failure(ValidationError("charge amount must be a number"))
        # checked after rounding: 0.004 would be stored as 0.00
        if money.amount <= 0:
            return Failure(ValidationError("charge amount must be > 0"))

        charge = AdditionalCharge(
            charge_id=new_temp_id(),
            order_id=self.order_id,
            name=name,
            amount=money,
            description=description or None,
        )
        self._charges.append(charge)
        logger.debug("charge added: order=%s charge=%s", self.order_id, charge.charge_id)
        return Success(charge)

    def remove_charge(self, charge_id: str) -> Result[bool, OrderError]:
        kept = [ch for ch in self._charges if ch.charge_id != charge_id]
        changed = len(kept) != len(self._charges)
        self._charges = kept
        return Success(changed)
