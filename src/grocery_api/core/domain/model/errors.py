from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class OrderError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return self.message


@dataclass(frozen=True)
class ValidationError(OrderError):
    pass


@dataclass(frozen=True)
class ProductNotFound(OrderError):
    product_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"product_not_found: {self.product_id} ({self.message})"


@dataclass(frozen=True)
class ProductUnavailable(OrderError):
    product_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"product_unavailable: {self.product_id} ({self.message})"


@dataclass(frozen=True)
class ProductExists(OrderError):
    product_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"product_exists: {self.product_id} ({self.message})"


# ---- edit session preconditions ---------------------------------------------


@dataclass(frozen=True)
class EditSessionError(OrderError):
    pass


@dataclass(frozen=True)
class NotEditing(EditSessionError):
    pass


@dataclass(frozen=True)
class AlreadyEditing(EditSessionError):
    pass


@dataclass(frozen=True)
class NothingToCommit(EditSessionError):
    pass


@dataclass(frozen=True)
class CommitInProgress(EditSessionError):
    pass


# ---- infrastructure ---------------------------------------------------------


@dataclass(frozen=True)
class PersistenceError(OrderError):
    pass


@dataclass(frozen=True)
class OrderNotFound(PersistenceError):
    order_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"order_not_found: {self.order_id} ({self.message})"


@dataclass(frozen=True)
class PublishError(OrderError):
    pass
