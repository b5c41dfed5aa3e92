from __future__ import annotations

import re
from typing import Iterable

from pos_checkout.core.domain.model.order import OrderId

ORDER_ID_PREFIX = "SALE"
_ORDER_ID_PATTERN = re.compile(rf"^{ORDER_ID_PREFIX}([0-9]+)$")
_MIN_DIGITS = 3


def parse_sequence(raw: str) -> int | None:
    m = _ORDER_ID_PATTERN.match(raw)
    if m is None:
        return None
    return int(m.group(1))


def format_order_id(sequence: int) -> OrderId:
    # zfill pads but never truncates: 1000 -> "SALE1000"
    return OrderId(f"{ORDER_ID_PREFIX}{str(sequence).zfill(_MIN_DIGITS)}")


def next_order_id(existing: Iterable[str]) -> OrderId:
    """Next ``SALE`` id after the highest well-formed one; ``SALE001`` if none."""
    parsed = (parse_sequence(str(raw)) for raw in existing)
    sequences = [n for n in parsed if n is not None]
    return format_order_id(max(sequences, default=0) + 1)
