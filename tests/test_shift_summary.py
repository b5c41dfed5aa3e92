from decimal import Decimal

from returns.result import Failure, Success

from conftest import make_command
from pos_checkout.core.domain.model.money import Money
from pos_checkout.core.domain.model.shift import SaleRow
from pos_checkout.core.domain.service.checkout_service import (
    CheckoutDeps,
    CheckoutService,
)
from pos_checkout.core.domain.service.shift_summary_service import (
    ShiftSummaryDeps,
    ShiftSummaryService,
    summarize_sales,
)


def _row(
    order_id, name, qty, price, method="Cash", discount="0", fee="0", total=None
):
    return SaleRow(
        order_id=order_id,
        timestamp="2026-10-19T08:00:00",
        product_name=name,
        quantity=qty,
        price=Money.of(price),
        payment_method=method,
        discount=Money.of(discount),
        delivery_fee=Money.of(fee),
        total=Money.of(total) if total is not None else None,
    )


def test_rows_are_grouped_per_order():
    rows = [
        _row("SALE001", "Egg Sandwich", 2, "160", discount="20", fee="30"),
        _row("SALE002", "Water", 1, "20", method="GCash"),
        _row("SALE001", "Ham Sandwich", 1, "99.99", discount="20", fee="30"),
    ]

    summary = summarize_sales(rows)

    assert [s.order_id for s in summary.sales] == ["SALE001", "SALE002"]
    first = summary.sales[0]
    assert first.subtotal().amount == Decimal("419.99")
    assert first.grand_total().amount == Decimal("429.99")
    assert summary.total_items == 4
    assert summary.sale_count == 2
    assert summary.total_sales.amount == Decimal("449.99")
    assert summary.by_payment_method["Cash"].amount == Decimal("429.99")
    assert summary.by_payment_method["GCash"].amount == Decimal("20")


def test_empty_day():
    summary = summarize_sales([])

    assert summary.sale_count == 0
    assert summary.total_sales.amount == 0


def test_summary_reads_back_placed_orders(gateway):
    checkout = CheckoutService(CheckoutDeps(sales_history=gateway))
    checkout.checkout(make_command())
    checkout.checkout(make_command(payment_method="Credit", discount="0"))

    result = ShiftSummaryService(ShiftSummaryDeps(sales_history=gateway)).summarize()

    assert isinstance(result, Success)
    summary = result.unwrap()
    assert summary.sale_count == 2
    assert summary.sales[0].grand_total().amount == Decimal("320.00")
    assert summary.by_payment_method["Credit"].amount == Decimal("340.00")
    assert summary.total_sales.amount == Decimal("660.00")


def test_fetch_failure_propagates():
    class _Down:
        def list_today(self):
            return Failure(Exception("down"))

    result = ShiftSummaryService(ShiftSummaryDeps(sales_history=_Down())).summarize()

    assert isinstance(result, Failure)


def test_persisted_total_wins_over_item_rebuild():
    # per-unit prices carry add-ons, so quantity x price overstates the sale
    rows = [
        _row("SALE001", "Egg Sandwich", 2, "160", discount="20", fee="30", total="320"),
        _row("SALE002", "Water", 1, "20", method="GCash"),
    ]

    summary = summarize_sales(rows)

    assert summary.sales[0].subtotal().amount == Decimal("320")
    assert summary.sales[0].grand_total().amount == Decimal("320")
    assert summary.sales[1].grand_total().amount == Decimal("20")
    assert summary.total_sales.amount == Decimal("340")
    assert summary.by_payment_method["Cash"].amount == Decimal("320")


def test_summary_matches_persisted_order_total(gateway):
    checkout = CheckoutService(CheckoutDeps(sales_history=gateway))
    receipt = checkout.checkout(make_command(amount_received="400")).unwrap()
    persisted = gateway.get(receipt.order_id.value).total.amount

    summary = (
        ShiftSummaryService(ShiftSummaryDeps(sales_history=gateway))
        .summarize()
        .unwrap()
    )

    assert persisted == Decimal("320.00")
    assert summary.total_sales.amount == persisted
    assert summary.by_payment_method["Cash"].amount == persisted
