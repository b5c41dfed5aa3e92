from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from returns.result import Result

from pos_checkout.core.domain.model.errors import CheckoutError
from pos_checkout.core.domain.model.money import CURRENCY, Money, fold_money
from pos_checkout.core.domain.model.shift import Sale, SaleItem, SaleRow, ShiftSummary
from pos_checkout.core.ports.inbound.shift_summary import ShiftSummaryUseCase
from pos_checkout.core.ports.outbound.sales_history import SalesHistoryGateway


@dataclass(frozen=True)
class ShiftSummaryDeps:
    sales_history: SalesHistoryGateway


@dataclass(frozen=True)
class ShiftSummaryService(ShiftSummaryUseCase):
    deps: ShiftSummaryDeps

    def summarize(self) -> Result[ShiftSummary, CheckoutError]:
        return self.deps.sales_history.list_today().map(summarize_sales)


def group_sales(rows: Sequence[SaleRow]) -> tuple[Sale, ...]:
    """Fold item rows into one Sale per order id, in first-seen order.

    Order-level fields (timestamp, discount, fee, method, total) come from
    the first row of each order.
    """
    heads: dict[str, SaleRow] = {}
    items: dict[str, list[SaleItem]] = {}
    for row in rows:
        heads.setdefault(row.order_id, row)
        items.setdefault(row.order_id, []).append(
            SaleItem(name=row.product_name, quantity=row.quantity, price=row.price)
        )
    return tuple(
        Sale(
            order_id=order_id,
            timestamp=head.timestamp,
            payment_method=head.payment_method,
            discount=head.discount,
            delivery_fee=head.delivery_fee,
            items=tuple(items[order_id]),
            total=head.total,
        )
        for order_id, head in heads.items()
    )


def summarize_sales(rows: Sequence[SaleRow]) -> ShiftSummary:
    sales = group_sales(rows)
    by_method: dict[str, Money] = {}
    for sale in sales:
        label = sale.payment_method or "Unknown"
        by_method[label] = by_method.get(label, Money.zero()) + sale.grand_total()
    return ShiftSummary(
        sales=sales,
        total_sales=fold_money((s.grand_total() for s in sales), currency=CURRENCY),
        total_items=sum(s.item_count() for s in sales),
        by_payment_method=by_method,
    )
