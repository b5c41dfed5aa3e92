from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Protocol, Sequence

from returns.result import Result

from pos_checkout.core.domain.model.errors import CheckoutError
from pos_checkout.core.domain.model.order import (
    CustomerInfo,
    OrderId,
    PersistedOrderItem,
)
from pos_checkout.core.domain.model.payment import PaymentMethod
from pos_checkout.core.domain.service.pricing import PriceQuote


@dataclass(frozen=True)
class CheckoutAddon:
    addon_id: str
    name: str
    price: Decimal


@dataclass(frozen=True)
class CheckoutLine:
    product_id: str
    name: str
    price: Decimal
    quantity: int
    category_name: str = ""
    size: str | None = None
    flavor: str | None = None
    addons: Mapping[str, int] = field(default_factory=dict)
    addon_catalog: Sequence[CheckoutAddon] = ()


@dataclass(frozen=True)
class CheckoutCommand:
    lines: Sequence[CheckoutLine]
    payment_method: str
    discount: Decimal = Decimal(0)
    delivery_fee: Decimal = Decimal(0)
    amount_received: Decimal | None = None
    customer: CustomerInfo = CustomerInfo()


@dataclass(frozen=True)
class LineQuote:
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal


@dataclass(frozen=True)
class QuoteView:
    quote: PriceQuote
    lines: Sequence[LineQuote]


@dataclass(frozen=True)
class CheckoutReceipt:
    order_id: OrderId
    timestamp: datetime
    payment_method: PaymentMethod
    quote: PriceQuote
    items: Sequence[PersistedOrderItem]


class QuoteUseCase(Protocol):
    def quote(self, command: CheckoutCommand) -> Result[QuoteView, CheckoutError]: ...


class CheckoutUseCase(Protocol):
    def checkout(
        self, command: CheckoutCommand
    ) -> Result[CheckoutReceipt, CheckoutError]: ...
