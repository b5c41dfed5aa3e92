from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PaymentMethodKind(str, Enum):
    CASH = "Cash"
    CREDIT = "Credit"
    GCASH = "GCash"
    OTHER = "Other"


# ids assigned by the backend's payment_methods table
_PAYMENT_METHOD_IDS: dict[PaymentMethodKind, int] = {
    PaymentMethodKind.CASH: 1,
    PaymentMethodKind.CREDIT: 2,
    PaymentMethodKind.GCASH: 3,
}


@dataclass(frozen=True)
class PaymentMethod:
    kind: PaymentMethodKind
    label: str

    @staticmethod
    def parse(label: str | None) -> "PaymentMethod":
        """Match a known method by its exact label; anything else is ``OTHER``."""
        raw = (label or "").strip()
        for kind in _PAYMENT_METHOD_IDS:
            if raw == kind.value:
                return PaymentMethod(kind, kind.value)
        return PaymentMethod(PaymentMethodKind.OTHER, raw)

    @staticmethod
    def of_id(payment_method_id: int | None) -> "PaymentMethod":
        for kind, pm_id in _PAYMENT_METHOD_IDS.items():
            if pm_id == payment_method_id:
                return PaymentMethod(kind, kind.value)
        return PaymentMethod(PaymentMethodKind.OTHER, "")

    @property
    def payment_method_id(self) -> int | None:
        return _PAYMENT_METHOD_IDS.get(self.kind)

    @property
    def tenders_change(self) -> bool:
        return self.kind is PaymentMethodKind.CASH


CASH = PaymentMethod(PaymentMethodKind.CASH, PaymentMethodKind.CASH.value)
CREDIT = PaymentMethod(PaymentMethodKind.CREDIT, PaymentMethodKind.CREDIT.value)
GCASH = PaymentMethod(PaymentMethodKind.GCASH, PaymentMethodKind.GCASH.value)
