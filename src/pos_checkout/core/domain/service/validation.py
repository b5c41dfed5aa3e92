from __future__ import annotations

from decimal import Decimal
from typing import Any

from returns.result import Failure, Result, Success

from pos_checkout.core.domain.model.errors import CheckoutError, ValidationError
from pos_checkout.core.ports.inbound.checkout import CheckoutCommand


def _non_negative(value: Any, name: str) -> Result[Any, CheckoutError]:
    amount = Decimal(value)
    if not amount.is_finite():
        return Failure(ValidationError(f"{name} must be a finite number"))
    if amount < 0:
        return Failure(ValidationError(f"{name} must be >= 0"))
    return Success(value)


def validate_lines(cmd: CheckoutCommand) -> Result[CheckoutCommand, CheckoutError]:
    if not cmd.lines:
        return Failure(ValidationError("cart is empty"))
    for i, ln in enumerate(cmd.lines):
        if not str(ln.product_id).strip():
            return Failure(ValidationError(f"lines[{i}].product_id is required"))
        if ln.quantity < 1:
            return Failure(ValidationError(f"lines[{i}].quantity must be >= 1"))
        checked = _non_negative(ln.price, f"lines[{i}].price")
        if isinstance(checked, Failure):
            return checked
        for addon in ln.addon_catalog:
            checked = _non_negative(
                addon.price, f"lines[{i}].addon_details[{addon.addon_id}].price"
            )
            if isinstance(checked, Failure):
                return checked
        for addon_id, qty in ln.addons.items():
            if qty < 0:
                return Failure(
                    ValidationError(f"lines[{i}].addons[{addon_id}] must be >= 0")
                )
    return Success(cmd)


def validate_adjustments(
    cmd: CheckoutCommand,
) -> Result[CheckoutCommand, CheckoutError]:
    return (
        _non_negative(cmd.discount, "discount")
        .bind(lambda _: _non_negative(cmd.delivery_fee, "delivery_fee"))
        .bind(
            lambda _: Success(None)
            if cmd.amount_received is None
            else _non_negative(cmd.amount_received, "amount_received")
        )
        .map(lambda _: cmd)
    )


def validate_command(cmd: CheckoutCommand) -> Result[CheckoutCommand, CheckoutError]:
    return Success(cmd).bind(validate_lines).bind(validate_adjustments)
