from decimal import Decimal

import pytest

from pos_checkout.adapters.outbound.in_memory_sales_history import (
    InMemorySalesHistoryGateway,
)
from pos_checkout.core.domain.model.catalog import Addon, Product
from pos_checkout.core.domain.model.money import Money
from pos_checkout.core.ports.inbound.checkout import (
    CheckoutAddon,
    CheckoutCommand,
    CheckoutLine,
)


@pytest.fixture
def egg_sandwich():
    return Product(
        product_id="P-1",
        name="Egg Sandwich",
        price=Money.of("150.00"),
        category_name="Sandwiches",
        size="Large",
        flavor="Spicy",
    )


@pytest.fixture
def extra_egg():
    return Addon(addon_id="1", name="Extra Egg", price=Money.of("5.00"))


@pytest.fixture
def cheese():
    return Addon(addon_id="2", name="Cheese", price=Money.of("12.50"))


@pytest.fixture
def gateway():
    return InMemorySalesHistoryGateway()


def make_line(price="150.00", quantity=2, addons=None, addon_catalog=None, **kw):
    return CheckoutLine(
        product_id=kw.pop("product_id", "P-1"),
        name=kw.pop("name", "Egg Sandwich"),
        price=Decimal(price),
        quantity=quantity,
        addons={"1": 2} if addons is None else addons,
        addon_catalog=(
            (CheckoutAddon(addon_id="1", name="Extra Egg", price=Decimal("5.00")),)
            if addon_catalog is None
            else addon_catalog
        ),
        **kw,
    )


def make_command(lines=None, payment_method="Cash", **kw):
    return CheckoutCommand(
        lines=(make_line(),) if lines is None else lines,
        payment_method=payment_method,
        discount=Decimal(kw.pop("discount", "20.00")),
        delivery_fee=Decimal(kw.pop("delivery_fee", "30.00")),
        amount_received=(
            Decimal(kw["amount_received"])
            if kw.get("amount_received") is not None
            else None
        ),
    )
