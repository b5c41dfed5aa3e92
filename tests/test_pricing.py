import logging
from decimal import Decimal

from pos_checkout.core.domain.model.cart import Cart
from pos_checkout.core.domain.model.catalog import Product
from pos_checkout.core.domain.model.money import Money, to_amount
from pos_checkout.core.domain.model.order import OrderDraft
from pos_checkout.core.domain.model.payment import CASH, GCASH
from pos_checkout.core.domain.service.pricing import (
    cart_subtotal,
    change_due,
    line_item_cost,
    order_total,
    quote,
    unit_price_with_addons,
)


def test_line_item_cost_includes_addons(egg_sandwich, extra_egg):
    cart = Cart().add(egg_sandwich, 2, {"1": 2}, [extra_egg])

    assert line_item_cost(cart.items[0]).amount == Decimal("310.00")
    assert unit_price_with_addons(cart.items[0]).amount == Decimal("160.00")


def test_end_to_end_totals(egg_sandwich, extra_egg):
    cart = Cart().add(egg_sandwich, 2, {"1": 2}, [extra_egg])
    subtotal = cart_subtotal(cart)
    total = order_total(subtotal, Money.of("20.00"), Money.of("30.00"))

    assert subtotal.amount == Decimal("310.00")
    assert total.amount == Decimal("320.00")
    assert change_due(Money.of("400.00"), total).amount == Decimal("80.00")


def test_empty_cart_subtotal_is_zero():
    assert cart_subtotal(Cart()).amount == 0


def test_subtotal_is_sum_of_line_costs(egg_sandwich, extra_egg, cheese):
    water = Product(product_id="P-9", name="Water", price=Money.of("20"))
    cart = (
        Cart()
        .add(egg_sandwich, 1, {"1": 1, "2": 3}, [extra_egg, cheese])
        .add(water, 3)
    )

    expected = sum(line_item_cost(it).amount for it in cart)
    assert cart_subtotal(cart).amount == expected == Decimal("252.50")
    # pure: same input, same answer
    assert cart_subtotal(cart) == cart_subtotal(cart)


def test_empty_addon_selection_contributes_nothing(egg_sandwich):
    cart = Cart().add(egg_sandwich, 3, {}, [])

    assert line_item_cost(cart.items[0]).amount == Decimal("450.00")


def test_unknown_addon_is_skipped_and_logged(egg_sandwich, extra_egg, caplog):
    cart = Cart().add(egg_sandwich, 1, {"1": 1, "99": 4}, [extra_egg])

    with caplog.at_level(logging.WARNING):
        cost = line_item_cost(cart.items[0])

    assert cost.amount == Decimal("155.00")
    assert "unknown addon 99" in caplog.text


def test_order_total_is_not_clamped():
    total = order_total(Money.of("50"), Money.of("80"), Money.of("0"))

    assert total.amount == Decimal("-30")


def test_change_due_can_be_negative():
    assert change_due(Money.of("100"), Money.of("120.50")).amount == Decimal("-20.50")


def test_no_rounding_during_accumulation():
    third = Product(product_id="P-3", name="Slice", price=Money.of("0.333"))
    cart = Cart().add(third, 3)

    assert cart_subtotal(cart).amount == Decimal("0.999")
    assert cart_subtotal(cart).rounded().amount == Decimal("1.00")


def test_quote_defaults_received_to_total(egg_sandwich, extra_egg):
    cart = Cart().add(egg_sandwich, 2, {"1": 2}, [extra_egg])
    draft = OrderDraft(
        cart=cart,
        payment_method=GCASH,
        discount=Money.of("20"),
        delivery_fee=Money.of("30"),
    )

    q = quote(draft)

    assert q.total.amount == Decimal("320.00")
    assert q.received == q.total
    assert q.change.amount == 0
    assert not q.is_short


def test_quote_flags_short_payment(egg_sandwich):
    draft = OrderDraft(
        cart=Cart().add(egg_sandwich, 1),
        payment_method=CASH,
        amount_received=Money.of("100"),
    )

    q = quote(draft)

    assert q.change.amount == Decimal("-50.00")
    assert q.is_short


def test_to_amount_coerces_junk_to_zero():
    assert to_amount(None) == 0
    assert to_amount("") == 0
    assert to_amount("abc") == 0
    assert to_amount("nan") == 0
    assert to_amount(" 12.50 ") == Decimal("12.50")
    assert to_amount(3) == Decimal(3)
