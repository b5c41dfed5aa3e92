from __future__ import annotations

from typing import Protocol

from returns.result import Result

from pos_checkout.core.domain.model.errors import CheckoutError
from pos_checkout.core.domain.model.shift import ShiftSummary


class ShiftSummaryUseCase(Protocol):
    def summarize(self) -> Result[ShiftSummary, CheckoutError]: ...
