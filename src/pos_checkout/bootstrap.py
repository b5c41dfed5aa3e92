from __future__ import annotations

import logging
from dataclasses import dataclass

from pos_checkout.adapters.outbound.http_sales_history import HttpSalesHistoryGateway
from pos_checkout.adapters.outbound.in_memory_sales_history import (
    InMemorySalesHistoryGateway,
)
from pos_checkout.config import Settings
from pos_checkout.core.domain.service.checkout_service import (
    CheckoutDeps,
    CheckoutService,
)
from pos_checkout.core.domain.service.quote_service import QuoteService
from pos_checkout.core.domain.service.shift_summary_service import (
    ShiftSummaryDeps,
    ShiftSummaryService,
)
from pos_checkout.core.ports.outbound.sales_history import SalesHistoryGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UseCases:
    quote: QuoteService
    checkout: CheckoutService
    shift_summary: ShiftSummaryService


def build_sales_history(settings: Settings) -> SalesHistoryGateway:
    if settings.backend == "memory":
        logger.info("using in-memory sales history")
        return InMemorySalesHistoryGateway()
    logger.info("using sales history at %s", settings.api_base_url)
    return HttpSalesHistoryGateway(
        base_url=settings.api_base_url, timeout=settings.api_timeout_seconds
    )


def build_usecases(
    settings: Settings | None = None,
    sales_history: SalesHistoryGateway | None = None,
) -> UseCases:
    settings = settings or Settings()
    sales_history = sales_history or build_sales_history(settings)

    checkout = CheckoutService(
        CheckoutDeps(
            sales_history=sales_history,
            order_id_attempts=settings.order_id_attempts,
        )
    )
    shift_summary = ShiftSummaryService(ShiftSummaryDeps(sales_history=sales_history))

    return UseCases(
        quote=QuoteService(), checkout=checkout, shift_summary=shift_summary
    )


def build_quote() -> QuoteService:
    # CLI only needs pricing; no backend is contacted
    return QuoteService()
