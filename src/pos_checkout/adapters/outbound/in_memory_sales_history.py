from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Sequence

from returns.result import Failure, Result, Success

from pos_checkout.core.domain.model.errors import (
    CheckoutError,
    DuplicateOrderId,
    OrderIdFetchError,
    PersistenceError,
)
from pos_checkout.core.domain.model.order import OrderPersistRequest
from pos_checkout.core.domain.model.payment import PaymentMethod
from pos_checkout.core.domain.model.shift import SaleRow
from pos_checkout.core.ports.outbound.sales_history import SalesHistoryGateway


@dataclass
class InMemorySalesHistoryGateway(SalesHistoryGateway):
    """Process-local stand-in for the sales-history backend."""

    _store: Dict[str, OrderPersistRequest] = field(default_factory=dict)
    # ids already used elsewhere (e.g. older data), reported by list_order_ids
    seed_ids: list[str] = field(default_factory=list)
    fail_fetch: bool = False
    fail_save: bool = False

    def list_order_ids(self) -> Result[Sequence[str], CheckoutError]:
        if self.fail_fetch:
            return Failure(OrderIdFetchError("order id listing is down"))
        return Success(tuple(self.seed_ids) + tuple(self._store))

    def save(self, request: OrderPersistRequest) -> Result[None, CheckoutError]:
        if self.fail_save:
            return Failure(PersistenceError("sales history is down"))
        key = request.order_id.value
        if key in self._store or key in self.seed_ids:
            return Failure(
                DuplicateOrderId(message="order id already exists", order_id=key)
            )
        self._store[key] = request
        return Success(None)

    def list_today(self) -> Result[Sequence[SaleRow], CheckoutError]:
        # everything stored in-process counts as today's
        return Success(
            tuple(
                SaleRow(
                    order_id=req.order_id.value,
                    timestamp=req.timestamp.isoformat(),
                    product_name=it.product_name,
                    quantity=it.quantity,
                    price=it.price,
                    payment_method=PaymentMethod.of_id(req.payment_method_id).label,
                    discount=req.discount,
                    delivery_fee=req.delivery_fee,
                    total=req.total,
                )
                for req in self._store.values()
                for it in req.items
            )
        )

    def close(self) -> None:
        return None

    def get(self, order_id: str) -> OrderPersistRequest | None:
        return self._store.get(order_id)
