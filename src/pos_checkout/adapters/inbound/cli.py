from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from returns.result import Success

from pos_checkout.core.domain.model.money import to_amount
from pos_checkout.core.ports.inbound.checkout import (
    CheckoutAddon,
    CheckoutCommand,
    CheckoutLine,
    QuoteUseCase,
)


def run_cli(usecase: QuoteUseCase, raw: str) -> int:
    """
    raw: JSON string.
    Example:
      {"payment_method":"Cash","discount":"20","delivery_fee":"30",
       "amount_received":"400",
       "lines":[{"product_id":"P-1","name":"Egg Sandwich","price":"150.00",
                 "quantity":2,"addons":{"1":2},
                 "addon_details":[{"addon_id":1,"name":"Egg","price":"5.00"}]}]}
    """
    try:
        payload = json.loads(raw)
        cmd = _parse_command(payload)
    except Exception as e:  # noqa: BLE001
        print(f"invalid_input: {e}")
        return 2

    result = usecase.quote(cmd)

    if isinstance(result, Success):
        view = result.unwrap()
        q = view.quote
        print(
            "[ok]",
            {
                "lines": [
                    {
                        "product_name": ln.product_name,
                        "quantity": ln.quantity,
                        "line_total": str(ln.line_total),
                    }
                    for ln in view.lines
                ],
                "subtotal": str(q.subtotal),
                "total": str(q.total),
                "received": str(q.received),
                "change": str(q.change),
                "currency": q.total.currency,
            },
        )
        return 0

    err = result.failure()
    print("[ng]", str(err))
    return 1


def _parse_command(payload: dict[str, Any]) -> CheckoutCommand:
    lines = [
        CheckoutLine(
            product_id=str(x["product_id"]),
            name=str(x.get("name", "")),
            price=Decimal(str(x["price"])),
            quantity=int(x["quantity"]),
            size=x.get("size"),
            flavor=x.get("flavor"),
            addons={str(k): int(v) for k, v in (x.get("addons") or {}).items()},
            addon_catalog=tuple(
                CheckoutAddon(
                    addon_id=str(a["addon_id"]),
                    name=str(a.get("name", "")),
                    price=Decimal(str(a["price"])),
                )
                for a in x.get("addon_details", [])
            ),
        )
        for x in payload.get("lines", [])
    ]
    received = payload.get("amount_received")
    return CheckoutCommand(
        lines=lines,
        payment_method=str(payload.get("payment_method", "Cash")),
        discount=to_amount(payload.get("discount")),
        delivery_fee=to_amount(payload.get("delivery_fee")),
        amount_received=to_amount(received) if received is not None else None,
    )
