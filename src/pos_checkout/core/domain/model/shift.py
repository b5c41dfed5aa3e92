from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from pos_checkout.core.domain.model.money import Money


@dataclass(frozen=True)
class SaleRow:
    """One flattened row of ``GET /sales-history/today`` (one per order item)."""

    order_id: str
    timestamp: str
    product_name: str
    quantity: int
    price: Money
    payment_method: str
    discount: Money
    delivery_fee: Money
    # order total as persisted; None when the backend omits it
    total: Money | None = None


@dataclass(frozen=True)
class SaleItem:
    name: str
    quantity: int
    price: Money


@dataclass(frozen=True)
class Sale:
    order_id: str
    timestamp: str
    payment_method: str
    discount: Money
    delivery_fee: Money
    items: Tuple[SaleItem, ...]
    total: Money | None = None

    def subtotal(self) -> Money:
        total = Money.zero(self.discount.currency)
        for it in self.items:
            total = total + it.price * it.quantity
        return total

    def grand_total(self) -> Money:
        if self.total is not None:
            return self.total
        return self.subtotal() - self.discount + self.delivery_fee

    def item_count(self) -> int:
        return sum(it.quantity for it in self.items)


@dataclass(frozen=True)
class ShiftSummary:
    sales: Tuple[Sale, ...]
    total_sales: Money
    total_items: int
    by_payment_method: dict[str, Money] = field(default_factory=dict)

    @property
    def sale_count(self) -> int:
        return len(self.sales)
