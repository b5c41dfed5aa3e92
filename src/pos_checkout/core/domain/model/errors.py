from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CheckoutError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return self.message


@dataclass(frozen=True)
class ValidationError(CheckoutError):
    pass


@dataclass(frozen=True)
class InsufficientPayment(CheckoutError):
    total: Decimal
    received: Decimal

    def __str__(self) -> str:  # pragma: no cover
        return (
            f"insufficient_payment: total={self.total} received={self.received}"
            f" ({self.message})"
        )


@dataclass(frozen=True)
class UpstreamError(CheckoutError):
    """Any failure talking to the sales-history backend."""


@dataclass(frozen=True)
class UpstreamUnavailable(UpstreamError):
    pass


@dataclass(frozen=True)
class OrderIdFetchError(UpstreamError):
    pass


@dataclass(frozen=True)
class PersistenceError(UpstreamError):
    pass


@dataclass(frozen=True)
class DuplicateOrderId(PersistenceError):
    order_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"duplicate_order_id: {self.order_id} ({self.message})"
