from __future__ import annotations

from typing import Protocol, Sequence

from returns.result import Result

from pos_checkout.core.domain.model.errors import CheckoutError
from pos_checkout.core.domain.model.order import OrderPersistRequest
from pos_checkout.core.domain.model.shift import SaleRow


class SalesHistoryGateway(Protocol):
    """
    The backend owns order-id uniqueness: ``save`` must fail with
    DuplicateOrderId when the id is already taken.
    """

    def list_order_ids(self) -> Result[Sequence[str], CheckoutError]: ...

    def save(self, request: OrderPersistRequest) -> Result[None, CheckoutError]: ...

    def list_today(self) -> Result[Sequence[SaleRow], CheckoutError]: ...

    def close(self) -> None: ...
