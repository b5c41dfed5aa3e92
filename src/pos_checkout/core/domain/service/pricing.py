"""Cart pricing.

Pure functions over a cart and its fee/discount inputs. Nothing here
rounds; amounts are quantized only when presented or persisted.

    subtotal = sum(price * quantity + sum(addon.price * addon_qty))
    total    = subtotal - discount + delivery_fee   (not clamped)
    change   = received - total                     (negative = short)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pos_checkout.core.domain.model.cart import Cart, CartLineItem
from pos_checkout.core.domain.model.money import Money, fold_money
from pos_checkout.core.domain.model.order import OrderDraft

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceQuote:
    subtotal: Money
    discount: Money
    delivery_fee: Money
    total: Money
    received: Money
    change: Money

    @property
    def is_short(self) -> bool:
        return self.change.is_negative()


def addon_cost(item: CartLineItem) -> Money:
    """Add-on cost of one line. Add-ons missing from the line's catalog are skipped."""
    cost = Money.zero(item.product.price.currency)
    for addon_id, qty in item.addons:
        addon = item.find_addon(addon_id)
        if addon is None:
            logger.warning(
                "skipping unknown addon %s on product %s",
                addon_id,
                item.product.product_id,
            )
            continue
        cost = cost + addon.price * qty
    return cost


def line_item_cost(item: CartLineItem) -> Money:
    return item.product.price * item.quantity + addon_cost(item)


def unit_price_with_addons(item: CartLineItem) -> Money:
    return item.product.price + addon_cost(item)


def cart_subtotal(cart: Cart) -> Money:
    return fold_money(line_item_cost(it) for it in cart)


def order_total(subtotal: Money, discount: Money, delivery_fee: Money) -> Money:
    return subtotal - discount + delivery_fee


def change_due(received: Money, total: Money) -> Money:
    return received - total


def quote(draft: OrderDraft) -> PriceQuote:
    subtotal = cart_subtotal(draft.cart)
    total = order_total(subtotal, draft.discount, draft.delivery_fee)
    received = draft.amount_received if draft.amount_received is not None else total
    return PriceQuote(
        subtotal=subtotal,
        discount=draft.discount,
        delivery_fee=draft.delivery_fee,
        total=total,
        received=received,
        change=change_due(received, total),
    )
