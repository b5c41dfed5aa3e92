from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Sequence

from returns.pipeline import flow
from returns.pointfree import bind, map_
from returns.result import Failure, Result, Success

from pos_checkout.core.domain.model.errors import (
    CheckoutError,
    DuplicateOrderId,
    InsufficientPayment,
)
from pos_checkout.core.domain.model.order import (
    OrderDraft,
    OrderPersistRequest,
    now_utc,
)
from pos_checkout.core.domain.service.order_assembly import (
    build_draft,
    build_order_payload,
)
from pos_checkout.core.domain.service.order_ids import next_order_id
from pos_checkout.core.domain.service.pricing import PriceQuote, quote
from pos_checkout.core.domain.service.validation import validate_command
from pos_checkout.core.ports.inbound.checkout import (
    CheckoutCommand,
    CheckoutReceipt,
    CheckoutUseCase,
)
from pos_checkout.core.ports.outbound.sales_history import SalesHistoryGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutDeps:
    sales_history: SalesHistoryGateway
    # total tries when the backend rejects a generated id as taken
    order_id_attempts: int = 3
    clock: Callable[[], datetime] = now_utc


@dataclass(frozen=True)
class CheckoutContext:
    draft: OrderDraft
    quote: PriceQuote
    timestamp: datetime


@dataclass(frozen=True)
class PlacedOrder:
    context: CheckoutContext
    request: OrderPersistRequest


@dataclass(frozen=True)
class CheckoutService(CheckoutUseCase):
    deps: CheckoutDeps

    def checkout(
        self, command: CheckoutCommand
    ) -> Result[CheckoutReceipt, CheckoutError]:
        return flow(
            command,
            validate_command,
            bind(self._build_context),
            bind(_ensure_paid),
            bind(self._place),
            map_(_to_receipt),
        )

    def _build_context(
        self, cmd: CheckoutCommand
    ) -> Result[CheckoutContext, CheckoutError]:
        draft = build_draft(cmd)
        return Success(
            CheckoutContext(
                draft=draft, quote=quote(draft), timestamp=self.deps.clock()
            )
        )

    # ---- side effects ------------------------------------------------------

    def _place(self, ctx: CheckoutContext) -> Result[PlacedOrder, CheckoutError]:
        """Generate an id from the backend's current ids and persist the order.

        Id assignment is not atomic against other devices; when the backend
        reports the id as taken the ids are fetched again and a new one is
        generated, up to ``order_id_attempts`` times. Any other failure ends
        the checkout immediately.
        """
        attempts = max(1, self.deps.order_id_attempts)
        attempt = 1
        while True:
            result = self._place_once(ctx)
            if isinstance(result, Success):
                request = result.unwrap()
                logger.info(
                    "order %s placed total=%s payment=%s",
                    request.order_id,
                    request.total,
                    ctx.draft.payment_method.label,
                )
                return Success(PlacedOrder(context=ctx, request=request))

            err = result.failure()
            if not isinstance(err, DuplicateOrderId) or attempt >= attempts:
                logger.warning("checkout aborted: %s", err)
                return Failure(err)

            logger.warning(
                "order id %s already taken, regenerating (attempt %d/%d)",
                err.order_id,
                attempt,
                attempts,
            )
            attempt += 1

    def _place_once(
        self, ctx: CheckoutContext
    ) -> Result[OrderPersistRequest, CheckoutError]:
        return (
            self.deps.sales_history.list_order_ids()
            .map(lambda ids: _assemble(ids, ctx))
            .bind(self._save)
        )

    def _save(
        self, request: OrderPersistRequest
    ) -> Result[OrderPersistRequest, CheckoutError]:
        return self.deps.sales_history.save(request).map(lambda _: request)


# ---- pure helpers ----------------------------------------------------------


def _ensure_paid(ctx: CheckoutContext) -> Result[CheckoutContext, CheckoutError]:
    if ctx.draft.payment_method.tenders_change and ctx.quote.is_short:
        return Failure(
            InsufficientPayment(
                message="amount received does not cover the total",
                total=ctx.quote.total.rounded().amount,
                received=ctx.quote.received.rounded().amount,
            )
        )
    return Success(ctx)


def _assemble(ids: Sequence[str], ctx: CheckoutContext) -> OrderPersistRequest:
    return build_order_payload(next_order_id(ids), ctx.draft, ctx.timestamp)


def _to_receipt(placed: PlacedOrder) -> CheckoutReceipt:
    ctx = placed.context
    return CheckoutReceipt(
        order_id=placed.request.order_id,
        timestamp=ctx.timestamp,
        payment_method=ctx.draft.payment_method,
        quote=ctx.quote,
        items=placed.request.items,
    )
