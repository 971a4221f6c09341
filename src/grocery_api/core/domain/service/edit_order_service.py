from __future__ import annotations

import threading
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Dict, Optional

from returns.result import Failure, Result, Success

from grocery_api.core.domain.model.errors import (
    NotEditing,
    OrderError,
    ValidationError,
)
from grocery_api.core.domain.model.order import Money, OrderId
from grocery_api.core.domain.service.catalog_lookup import find_orderable
from grocery_api.core.domain.service.contents_sync import ContentsSynchronizer
from grocery_api.core.domain.service.edit_session import EditSession
from grocery_api.core.ports.inbound.edit_order import (
    EditMode,
    EditOrderUseCase,
    EditSessionView,
)
from grocery_api.core.ports.outbound.catalog import ProductCatalog


@dataclass(frozen=True)
class EditOrderDeps:
    synchronizer: ContentsSynchronizer
    catalog: ProductCatalog


@dataclass(frozen=True)
class EditOrderService(EditOrderUseCase):
    """
    Holds an EditSession only while its order is being edited.

    Sessions are registered by ``begin_edit`` and dropped again once
    ``commit`` or ``discard`` brings them back to viewing; orders that are
    merely looked at are served straight from storage. Sessions of different
    orders share no state.
    """

    deps: EditOrderDeps
    _sessions: Dict[str, EditSession] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def view(self, order_id: str) -> Result[EditSessionView, OrderError]:
        def current(oid: OrderId) -> Result[EditSessionView, OrderError]:
            session = self._lookup(oid)
            if session is not None and session.mode is EditMode.EDITING:
                return Success(session.view())
            return self.deps.synchronizer.load(oid).map(EditSessionView.viewing)

        return _parse(order_id).bind(current)

    def begin_edit(self, order_id: str) -> Result[EditSessionView, OrderError]:
        def begin(oid: OrderId) -> Result[EditSessionView, OrderError]:
            loaded = self.deps.synchronizer.load(oid)
            if isinstance(loaded, Failure):
                return loaded
            snapshot = loaded.unwrap()
            # registry lock held across the transition so eviction cannot race it
            with self._lock:
                session = self._sessions.setdefault(str(oid), EditSession(snapshot))
                return session.begin_edit(snapshot)

        return _parse(order_id).bind(begin)

    def add_item(
        self, order_id: str, product_id: str, quantity: int = 1
    ) -> Result[EditSessionView, OrderError]:
        return self._editing(order_id).bind(
            lambda s: find_orderable(self.deps.catalog, product_id)
            .bind(lambda product: s.add_item(product, quantity))
            .map(lambda _: s.view())
        )

    def update_item(
        self,
        order_id: str,
        item_id: str,
        quantity: Optional[int] = None,
        unit_price: Optional[Decimal] = None,
    ) -> Result[EditSessionView, OrderError]:
        if quantity is None and unit_price is None:
            return Failure(ValidationError("quantity or unit_price is required"))
        # validated up front: apply() below sets both or neither
        if quantity is not None and quantity < 1:
            return Failure(ValidationError("quantity must be >= 1"))
        if unit_price is not None:
            try:
                price = Money.parse(unit_price)
            except ValueError:
                return Failure(ValidationError("unit_price must be a number"))
            if price.amount < 0:
                return Failure(ValidationError("unit_price must be >= 0"))

        def apply(s: EditSession) -> Result[EditSessionView, OrderError]:
            if quantity is not None:
                done = s.update_quantity(item_id, quantity)
                if isinstance(done, Failure):
                    return done
            if unit_price is not None:
                done = s.update_price(item_id, unit_price)
                if isinstance(done, Failure):
                    return done
            return Success(s.view())

        return self._editing(order_id).bind(apply)

    def remove_item(
        self, order_id: str, item_id: str
    ) -> Result[EditSessionView, OrderError]:
        return self._editing(order_id).bind(
            lambda s: s.remove_item(item_id).map(lambda _: s.view())
        )

    def add_charge(
        self,
        order_id: str,
        name: str,
        amount: Decimal,
        description: Optional[str] = None,
    ) -> Result[EditSessionView, OrderError]:
        return self._editing(order_id).bind(
            lambda s: s.add_charge(name, amount, description).map(lambda _: s.view())
        )

    def remove_charge(
        self, order_id: str, charge_id: str
    ) -> Result[EditSessionView, OrderError]:
        return self._editing(order_id).bind(
            lambda s: s.remove_charge(charge_id).map(lambda _: s.view())
        )

    def commit(self, order_id: str) -> Result[EditSessionView, OrderError]:
        return self._editing(order_id).bind(
            lambda s: self._closing(s, lambda: s.commit(self.deps.synchronizer))
        )

    def discard(self, order_id: str) -> Result[EditSessionView, OrderError]:
        return self._editing(order_id).bind(lambda s: self._closing(s, s.discard))

    @property
    def open_sessions(self) -> int:
        with self._lock:
            return len(self._sessions)

    # ---- helpers -----------------------------------------------------------

    def _lookup(self, oid: OrderId) -> Optional[EditSession]:
        with self._lock:
            return self._sessions.get(str(oid))

    def _editing(self, order_id: str) -> Result[EditSession, OrderError]:
        def registered(oid: OrderId) -> Result[EditSession, OrderError]:
            session = self._lookup(oid)
            if session is not None:
                return Success(session)
            # unknown orders answer not-found rather than not-editing
            return self.deps.synchronizer.load(oid).bind(
                lambda _: Failure(NotEditing("order is not being edited"))
            )

        return _parse(order_id).bind(registered)

    def _closing(
        self,
        session: EditSession,
        op: Callable[[], Result[EditSessionView, OrderError]],
    ) -> Result[EditSessionView, OrderError]:
        result = op()
        if isinstance(result, Success):
            key = str(session.order_id)
            with self._lock:
                if self._sessions.get(key) is session and session.mode is EditMode.VIEWING:
                    del self._sessions[key]
        return result


def _parse(order_id: str) -> Result[OrderId, OrderError]:
    try:
        return Success(OrderId.parse(order_id))
    except ValueError:
        return Failure(ValidationError(message="order_id must be a valid UUID"))
