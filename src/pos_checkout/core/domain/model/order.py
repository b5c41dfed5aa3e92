from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Tuple

from pos_checkout.core.domain.model.cart import Cart
from pos_checkout.core.domain.model.money import Money
from pos_checkout.core.domain.model.payment import PaymentMethod


@dataclass(frozen=True)
class OrderId:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CustomerInfo:
    name: str = ""
    number: str = ""
    address: str = ""
    notes: str = ""


@dataclass(frozen=True)
class OrderDraft:
    cart: Cart
    payment_method: PaymentMethod
    customer: CustomerInfo = CustomerInfo()
    discount: Money = Money.zero()
    delivery_fee: Money = Money.zero()
    # None means the exact amount was tendered
    amount_received: Money | None = None


@dataclass(frozen=True)
class PersistedOrderItem:
    product_name: str
    quantity: int
    # per-unit price with the line's add-on cost folded in
    price: Money


@dataclass(frozen=True)
class OrderPersistRequest:
    order_id: OrderId
    timestamp: datetime
    total: Money
    payment_method_id: int | None
    discount: Money
    delivery_fee: Money
    items: Tuple[PersistedOrderItem, ...]

    def to_wire(self) -> dict[str, Any]:
        """Body of ``POST /sales-history``."""
        return {
            "orderId": self.order_id.value,
            "timestamp": self.timestamp.isoformat(),
            "total": float(self.total.rounded().amount),
            "paymentMethodId": self.payment_method_id,
            "discount": float(self.discount.rounded().amount),
            "deliveryFee": float(self.delivery_fee.rounded().amount),
            "items": [
                {
                    "productName": it.product_name,
                    "quantity": it.quantity,
                    "price": float(it.price.rounded().amount),
                }
                for it in self.items
            ],
        }


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
