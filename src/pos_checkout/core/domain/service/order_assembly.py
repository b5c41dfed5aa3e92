from __future__ import annotations

from datetime import datetime
from typing import Tuple

from pos_checkout.core.domain.model.cart import Cart
from pos_checkout.core.domain.model.catalog import Addon, Product
from pos_checkout.core.domain.model.money import Money
from pos_checkout.core.domain.model.order import (
    OrderDraft,
    OrderId,
    OrderPersistRequest,
    PersistedOrderItem,
    now_utc,
)
from pos_checkout.core.domain.model.payment import PaymentMethod
from pos_checkout.core.domain.service.pricing import (
    cart_subtotal,
    line_item_cost,
    order_total,
    unit_price_with_addons,
)
from pos_checkout.core.ports.inbound.checkout import CheckoutCommand, LineQuote


def build_cart(cmd: CheckoutCommand) -> Cart:
    cart = Cart()
    for ln in cmd.lines:
        product = Product(
            product_id=str(ln.product_id),
            name=ln.name,
            price=Money.of(ln.price),
            category_name=ln.category_name,
            size=ln.size,
            flavor=ln.flavor,
        )
        details = tuple(
            Addon(addon_id=str(a.addon_id), name=a.name, price=Money.of(a.price))
            for a in ln.addon_catalog
        )
        cart = cart.add(product, ln.quantity, ln.addons, details)
    return cart


def build_draft(cmd: CheckoutCommand) -> OrderDraft:
    return OrderDraft(
        cart=build_cart(cmd),
        payment_method=PaymentMethod.parse(cmd.payment_method),
        customer=cmd.customer,
        discount=Money.of(cmd.discount),
        delivery_fee=Money.of(cmd.delivery_fee),
        amount_received=(
            Money.of(cmd.amount_received) if cmd.amount_received is not None else None
        ),
    )


def line_quotes(cart: Cart) -> Tuple[LineQuote, ...]:
    return tuple(
        LineQuote(
            product_name=it.product.display_name(),
            quantity=it.quantity,
            unit_price=it.product.price.amount,
            line_total=line_item_cost(it).amount,
        )
        for it in cart
    )


def build_order_payload(
    order_id: OrderId, draft: OrderDraft, timestamp: datetime | None = None
) -> OrderPersistRequest:
    """Flatten a draft into the persisted-order shape.

    Each line becomes one item whose ``price`` is the product price plus the
    line's whole add-on cost, so add-ons are not sent as separate items.
    """
    items = tuple(
        PersistedOrderItem(
            product_name=it.product.display_name(),
            quantity=it.quantity,
            price=unit_price_with_addons(it),
        )
        for it in draft.cart
    )
    total = order_total(cart_subtotal(draft.cart), draft.discount, draft.delivery_fee)
    return OrderPersistRequest(
        order_id=order_id,
        timestamp=timestamp or now_utc(),
        total=total.rounded(),
        payment_method_id=draft.payment_method.payment_method_id,
        discount=draft.discount,
        delivery_fee=draft.delivery_fee,
        items=items,
    )
