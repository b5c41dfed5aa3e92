from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

CURRENCY = "PHP"
_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Unrounded amount; call ``rounded()`` only when presenting or persisting."""

    amount: Decimal
    currency: str = CURRENCY

    @staticmethod
    def of(amount: Decimal | int | float | str, currency: str = CURRENCY) -> "Money":
        return Money(Decimal(str(amount)), currency)

    @staticmethod
    def zero(currency: str = CURRENCY) -> "Money":
        return Money(Decimal(0), currency)

    def __add__(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, n: int) -> "Money":
        return Money(self.amount * Decimal(n), self.currency)

    def rounded(self) -> "Money":
        return Money(
            self.amount.quantize(_CENTS, rounding=ROUND_HALF_UP), self.currency
        )

    def is_negative(self) -> bool:
        return self.amount < 0

    def __str__(self) -> str:
        return str(self.rounded().amount)

    def _assert_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise ValueError(f"currency_mismatch: {self.currency} vs {other.currency}")


def fold_money(values: Iterable[Money], currency: str = CURRENCY) -> Money:
    total = Money.zero(currency)
    for v in values:
        total = total + v
    return total


def to_amount(value: Any) -> Decimal:
    """Coerce loosely typed input to a Decimal; missing or junk input counts as 0."""
    if value is None or isinstance(value, bool):
        return Decimal(0)
    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal(0)
    try:
        dec = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal(0)
    return dec if dec.is_finite() else Decimal(0)
