from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Any, AsyncIterator, Callable

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from returns.result import Success

from pos_checkout.core.domain.model.errors import (
    CheckoutError,
    DuplicateOrderId,
    InsufficientPayment,
    OrderIdFetchError,
    PersistenceError,
    UpstreamUnavailable,
    ValidationError,
)
from pos_checkout.core.domain.model.money import Money
from pos_checkout.core.domain.model.order import CustomerInfo
from pos_checkout.core.domain.service.pricing import PriceQuote
from pos_checkout.core.ports.inbound.checkout import (
    CheckoutAddon,
    CheckoutCommand,
    CheckoutLine,
    CheckoutUseCase,
    QuoteUseCase,
)
from pos_checkout.core.ports.inbound.shift_summary import ShiftSummaryUseCase

logger = logging.getLogger(__name__)

# ---- HTTP DTOs (adapter layer) ---------------------------------------------


class AddonIn(BaseModel):
    addon_id: int | str = Field(examples=[1])
    name: str = Field(default="", examples=["Extra Egg"])
    price: Decimal = Field(ge=0, examples=["15.00"])


class CartLineIn(BaseModel):
    product_id: int | str = Field(examples=["P-1"])
    name: str = Field(min_length=1, examples=["Egg Sandwich"])
    price: Decimal = Field(ge=0, examples=["150.00"])
    quantity: int = Field(ge=1, examples=[2])
    category_name: str = ""
    size: str | None = Field(default=None, examples=["Large"])
    flavor: str | None = Field(default=None, examples=["Spicy"])
    addons: dict[str, int] = Field(default_factory=dict, examples=[{"1": 2}])
    addon_details: list[AddonIn] = Field(default_factory=list)


class CustomerIn(BaseModel):
    name: str = ""
    number: str = ""
    address: str = ""
    notes: str = ""


class CheckoutRequest(BaseModel):
    lines: list[CartLineIn] = Field(min_length=1)
    payment_method: str = Field(default="Cash", examples=["Cash"])
    discount: Decimal = Field(default=Decimal(0), ge=0)
    delivery_fee: Decimal = Field(default=Decimal(0), ge=0)
    amount_received: Decimal | None = Field(default=None, ge=0)
    customer: CustomerIn | None = None


class LineQuoteOut(BaseModel):
    product_name: str
    quantity: int
    unit_price: str
    line_total: str


class QuoteResponse(BaseModel):
    subtotal: str
    discount: str
    delivery_fee: str
    total: str
    received: str
    change: str
    currency: str
    lines: list[LineQuoteOut]


class OrderItemOut(BaseModel):
    product_name: str
    quantity: int
    price: str


class CheckoutResponse(BaseModel):
    order_id: str
    timestamp: str
    payment_method: str
    payment_method_id: int | None
    subtotal: str
    discount: str
    delivery_fee: str
    total: str
    received: str
    change: str
    currency: str
    items: list[OrderItemOut]


class SaleOut(BaseModel):
    order_id: str
    timestamp: str
    payment_method: str
    subtotal: str
    discount: str
    delivery_fee: str
    grand_total: str
    items: int


class ShiftSummaryResponse(BaseModel):
    sale_count: int
    total_items: int
    total_sales: str
    by_payment_method: dict[str, str]
    sales: list[SaleOut]


class ErrorResponse(BaseModel):
    type: str
    message: str
    details: list[dict[str, Any]] | None = None


def _map_error_to_http(err: CheckoutError) -> tuple[int, ErrorResponse]:
    if isinstance(err, ValidationError):
        return 400, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, InsufficientPayment):
        return 402, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, DuplicateOrderId):
        return 409, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, (UpstreamUnavailable, OrderIdFetchError)):
        return 503, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, PersistenceError):
        return 502, ErrorResponse(type=type(err).__name__, message=str(err))

    return 500, ErrorResponse(type=type(err).__name__, message=str(err))


def _error_response(err: CheckoutError) -> JSONResponse:
    status, body = _map_error_to_http(err)
    return JSONResponse(status_code=status, content=body.model_dump())


def _to_command(req: CheckoutRequest) -> CheckoutCommand:
    customer = req.customer or CustomerIn()
    return CheckoutCommand(
        lines=tuple(
            CheckoutLine(
                product_id=str(ln.product_id),
                name=ln.name,
                price=ln.price,
                quantity=ln.quantity,
                category_name=ln.category_name,
                size=ln.size,
                flavor=ln.flavor,
                addons=dict(ln.addons),
                addon_catalog=tuple(
                    CheckoutAddon(addon_id=str(a.addon_id), name=a.name, price=a.price)
                    for a in ln.addon_details
                ),
            )
            for ln in req.lines
        ),
        payment_method=req.payment_method,
        discount=req.discount,
        delivery_fee=req.delivery_fee,
        amount_received=req.amount_received,
        customer=CustomerInfo(
            name=customer.name,
            number=customer.number,
            address=customer.address,
            notes=customer.notes,
        ),
    )


def _money(m: Money | Decimal) -> str:
    if isinstance(m, Money):
        return str(m.rounded().amount)
    return str(Money(m).rounded().amount)


def _quote_fields(q: PriceQuote) -> dict[str, str]:
    return {
        "subtotal": _money(q.subtotal),
        "discount": _money(q.discount),
        "delivery_fee": _money(q.delivery_fee),
        "total": _money(q.total),
        "received": _money(q.received),
        "change": _money(q.change),
        "currency": q.total.currency,
    }


def create_app(
    quote_uc: QuoteUseCase,
    checkout_uc: CheckoutUseCase,
    shift_summary_uc: ShiftSummaryUseCase,
    on_shutdown: Callable[[], None] | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        if on_shutdown is not None:
            on_shutdown()

    app = FastAPI(title="pos_checkout", lifespan=lifespan)

    # --- exception handlers -------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        body = ErrorResponse(
            type="RequestValidationError",
            message="invalid request",
            details=[
                {"loc": list(e.get("loc", ())), "msg": str(e.get("msg", ""))}
                for e in exc.errors()
            ],
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error")
        body = ErrorResponse(type=type(exc).__name__, message="internal server error")
        return JSONResponse(status_code=500, content=body.model_dump())

    # --- routes --------------------------------------------------------------

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(
        "/quote",
        response_model=QuoteResponse,
        responses={400: {"model": ErrorResponse}},
    )
    def quote(req: CheckoutRequest) -> Any:
        result = quote_uc.quote(_to_command(req))

        if isinstance(result, Success):
            view = result.unwrap()
            return QuoteResponse(
                **_quote_fields(view.quote),
                lines=[
                    LineQuoteOut(
                        product_name=ln.product_name,
                        quantity=ln.quantity,
                        unit_price=_money(ln.unit_price),
                        line_total=_money(ln.line_total),
                    )
                    for ln in view.lines
                ],
            )

        return _error_response(result.failure())

    @app.post(
        "/checkout",
        response_model=CheckoutResponse,
        status_code=201,
        responses={
            400: {"model": ErrorResponse},
            402: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
            502: {"model": ErrorResponse},
            503: {"model": ErrorResponse},
        },
    )
    def checkout(req: CheckoutRequest, response: Response) -> Any:
        result = checkout_uc.checkout(_to_command(req))

        if isinstance(result, Success):
            receipt = result.unwrap()
            order_id = receipt.order_id.value
            response.headers["Location"] = f"/sales-history/{order_id}"
            return CheckoutResponse(
                order_id=order_id,
                timestamp=receipt.timestamp.isoformat(),
                payment_method=receipt.payment_method.label,
                payment_method_id=receipt.payment_method.payment_method_id,
                **_quote_fields(receipt.quote),
                items=[
                    OrderItemOut(
                        product_name=it.product_name,
                        quantity=it.quantity,
                        price=_money(it.price),
                    )
                    for it in receipt.items
                ],
            )

        return _error_response(result.failure())

    @app.get(
        "/shift-summary",
        response_model=ShiftSummaryResponse,
        responses={500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    )
    def shift_summary() -> Any:
        result = shift_summary_uc.summarize()

        if isinstance(result, Success):
            summary = result.unwrap()
            return ShiftSummaryResponse(
                sale_count=summary.sale_count,
                total_items=summary.total_items,
                total_sales=_money(summary.total_sales),
                by_payment_method={
                    k: _money(v) for k, v in summary.by_payment_method.items()
                },
                sales=[
                    SaleOut(
                        order_id=s.order_id,
                        timestamp=s.timestamp,
                        payment_method=s.payment_method,
                        subtotal=_money(s.subtotal()),
                        discount=_money(s.discount),
                        delivery_fee=_money(s.delivery_fee),
                        grand_total=_money(s.grand_total()),
                        items=s.item_count(),
                    )
                    for s in summary.sales
                ],
            )

        return _error_response(result.failure())

    return app
