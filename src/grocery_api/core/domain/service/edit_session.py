from __future__ import annotations

import logging
import threading
from decimal import Decimal
from typing import Any, Callable, Optional, Tuple

from returns.result import Failure, Result, Success

from grocery_api.core.domain.model.errors import (
    AlreadyEditing,
    CommitInProgress,
    EditSessionError,
    NotEditing,
    NothingToCommit,
    OrderError,
)
from grocery_api.core.domain.model.order import (
    AdditionalCharge,
    LineItem,
    OrderContents,
    Product,
)
from grocery_api.core.domain.model.totals import OrderTotals, reconcile_totals
from grocery_api.core.domain.service.charges import AdditionalChargeStore
from grocery_api.core.domain.service.contents_sync import ContentsSynchronizer
from grocery_api.core.domain.service.line_items import LineItemStore
from grocery_api.core.ports.inbound.edit_order import EditMode, EditSessionView

logger = logging.getLogger(__name__)


class EditSession:
    """
    Edit state of one order.

    viewing --begin_edit--> editing --commit/discard--> viewing

    Mutations are only accepted while editing and set ``dirty`` when they
    change the working set. ``commit`` hands the whole working set to the
    synchronizer; on failure the session stays editing and dirty so the
    caller can retry or discard. While a commit is in flight every other
    operation answers ``CommitInProgress``.
    """

    def __init__(self, snapshot: OrderContents) -> None:
        self.order_id = snapshot.order_id
        self._snapshot = snapshot
        self._items = LineItemStore.seeded(snapshot.order_id, snapshot.items)
        self._charges = AdditionalChargeStore.seeded(snapshot.order_id, snapshot.charges)
        self._mode = EditMode.VIEWING
        self._dirty = False
        self._committing = False
        self._lock = threading.Lock()

    # ---- state --------------------------------------------------------------

    @property
    def mode(self) -> EditMode:
        return self._mode

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def snapshot(self) -> OrderContents:
        return self._snapshot

    @property
    def working_items(self) -> Tuple[LineItem, ...]:
        return self._items.items

    @property
    def working_charges(self) -> Tuple[AdditionalCharge, ...]:
        return self._charges.charges

    def totals(self) -> OrderTotals:
        return reconcile_totals(self._items.items, self._charges.charges)

    def view(self) -> EditSessionView:
        with self._lock:
            return self._view()

    # ---- transitions --------------------------------------------------------

    def begin_edit(
        self, snapshot: Optional[OrderContents] = None
    ) -> Result[EditSessionView, OrderError]:
        with self._lock:
            if self._committing:
                return Failure(CommitInProgress("commit in progress"))
            if self._mode is EditMode.EDITING:
                return Failure(AlreadyEditing("order is already being edited"))
            if snapshot is not None:
                self._snapshot = snapshot
            self._reset_working()
            self._mode = EditMode.EDITING
            self._dirty = False
            logger.info("edit started: order=%s", self.order_id)
            return Success(self._view())

    def discard(self) -> Result[EditSessionView, OrderError]:
        with self._lock:
            if self._committing:
                return Failure(CommitInProgress("commit in progress"))
            if self._mode is not EditMode.EDITING:
                return Failure(NotEditing("order is not being edited"))
            self._reset_working()
            self._mode = EditMode.VIEWING
            self._dirty = False
            logger.info("edit discarded: order=%s", self.order_id)
            return Success(self._view())

    def commit(
        self, synchronizer: ContentsSynchronizer
    ) -> Result[EditSessionView, OrderError]:
        with self._lock:
            blocked = self._blocked()
            if blocked is not None:
                return Failure(blocked)
            if not self._dirty:
                return Failure(NothingToCommit("no changes to save"))
            self._committing = True
            items, charges = self._items.items, self._charges.charges

        # no lock held during I/O; _committing keeps other callers out
        try:
            result = synchronizer.commit(self.order_id, items, charges)
        except Exception:
            with self._lock:
                self._committing = False
            raise

        with self._lock:
            self._committing = False
            return result.map(self._adopt_persisted)

    # ---- mutations ----------------------------------------------------------

    def add_item(
        self, product: Product, initial_quantity: int = 1
    ) -> Result[OrderTotals, OrderError]:
        return self._mutate(lambda: self._items.add_item(product, initial_quantity))

    def update_quantity(
        self, item_id: str, new_quantity: int
    ) -> Result[OrderTotals, OrderError]:
        return self._mutate(lambda: self._items.update_quantity(item_id, new_quantity))

    def update_price(
        self, item_id: str, new_unit_price: Decimal | int | str
    ) -> Result[OrderTotals, OrderError]:
        return self._mutate(lambda: self._items.update_price(item_id, new_unit_price))

    def remove_item(self, item_id: str) -> Result[OrderTotals, OrderError]:
        return self._mutate(lambda: self._items.remove_item(item_id))

    def add_charge(
        self,
        name: str,
        amount: Decimal | int | str,
        description: Optional[str] = None,
    ) -> Result[OrderTotals, OrderError]:
        return self._mutate(lambda: self._charges.add_charge(name, amount, description))

    def remove_charge(self, charge_id: str) -> Result[OrderTotals, OrderError]:
        return self._mutate(lambda: self._charges.remove_charge(charge_id))

    # ---- internals ----------------------------------------------------------

    def _mutate(
        self, op: Callable[[], Result[Any, OrderError]]
    ) -> Result[OrderTotals, OrderError]:
        with self._lock:
            blocked = self._blocked()
            if blocked is not None:
                return Failure(blocked)
            result = op()
            # stores answer False when the id was absent
            if isinstance(result, Success) and result.unwrap() is not False:
                self._dirty = True
            return result.map(lambda _: self.totals())

    def _blocked(self) -> Optional[EditSessionError]:
        if self._committing:
            return CommitInProgress("commit in progress")
        if self._mode is not EditMode.EDITING:
            return NotEditing("order is not being edited")
        return None

    def _adopt_persisted(self, persisted: OrderContents) -> EditSessionView:
        self._snapshot = persisted
        self._reset_working()
        self._mode = EditMode.VIEWING
        self._dirty = False
        logger.info("edit committed: order=%s", self.order_id)
        return self._view()

    def _reset_working(self) -> None:
        self._items.reset(self._snapshot.items)
        self._charges.reset(self._snapshot.charges)

    def _view(self) -> EditSessionView:
        return EditSessionView(
            order_id=self.order_id,
            mode=self._mode,
            dirty=self._dirty,
            items=self._items.items,
            charges=self._charges.charges,
            totals=self.totals(),
        )
