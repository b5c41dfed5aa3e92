from __future__ import annotations

from dataclasses import dataclass

from returns.pipeline import flow
from returns.pointfree import map_
from returns.result import Result

from pos_checkout.core.domain.model.errors import CheckoutError
from pos_checkout.core.domain.model.order import OrderDraft
from pos_checkout.core.domain.service.order_assembly import build_draft, line_quotes
from pos_checkout.core.domain.service.pricing import quote
from pos_checkout.core.domain.service.validation import validate_command
from pos_checkout.core.ports.inbound.checkout import (
    CheckoutCommand,
    QuoteUseCase,
    QuoteView,
)


@dataclass(frozen=True)
class QuoteService(QuoteUseCase):
    """Live totals for a cart that is still being edited. No I/O."""

    def quote(self, command: CheckoutCommand) -> Result[QuoteView, CheckoutError]:
        return flow(
            command,
            validate_command,
            map_(build_draft),
            map_(_to_view),
        )


def _to_view(draft: OrderDraft) -> QuoteView:
    return QuoteView(quote=quote(draft), lines=line_quotes(draft.cart))
