from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

import requests
from returns.result import Failure, Result, Success

from pos_checkout.core.domain.model.errors import (
    CheckoutError,
    DuplicateOrderId,
    OrderIdFetchError,
    PersistenceError,
    UpstreamError,
    UpstreamUnavailable,
)
from pos_checkout.core.domain.model.money import Money, to_amount
from pos_checkout.core.domain.model.order import OrderPersistRequest
from pos_checkout.core.domain.model.shift import SaleRow
from pos_checkout.core.ports.outbound.sales_history import SalesHistoryGateway

logger = logging.getLogger(__name__)

ErrorFactory = Callable[[str], CheckoutError]


@dataclass
class HttpSalesHistoryGateway(SalesHistoryGateway):
    """Sales-history backend over REST. One request per call, no retries."""

    base_url: str
    timeout: float = 10.0
    session: requests.Session = field(default_factory=requests.Session)

    def list_order_ids(self) -> Result[Sequence[str], CheckoutError]:
        # unreachable backend counts as a failed id fetch too
        return self._get_json(
            "/sales-history/order-ids", OrderIdFetchError, unreachable=OrderIdFetchError
        ).bind(_parse_order_ids)

    def save(self, request: OrderPersistRequest) -> Result[None, CheckoutError]:
        sent = self._send("POST", "/sales-history", json=request.to_wire())
        if isinstance(sent, Failure):
            return sent

        response = sent.unwrap()
        if response.status_code == 409:
            logger.warning("backend reports order id %s as taken", request.order_id)
            return Failure(
                DuplicateOrderId(
                    message=_error_detail(response), order_id=request.order_id.value
                )
            )
        if not response.ok:
            return Failure(
                PersistenceError(
                    f"POST /sales-history -> HTTP {response.status_code}: "
                    f"{_error_detail(response)}"
                )
            )
        return Success(None)

    def list_today(self) -> Result[Sequence[SaleRow], CheckoutError]:
        return self._get_json("/sales-history/today", UpstreamError).bind(
            _parse_sale_rows
        )

    def close(self) -> None:
        self.session.close()

    # ---- transport ---------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{path}"

    def _send(
        self,
        method: str,
        path: str,
        json: Any = None,
        unreachable: ErrorFactory = UpstreamUnavailable,
    ) -> Result[requests.Response, CheckoutError]:
        url = self._url(path)
        try:
            response = self.session.request(
                method,
                url,
                json=json,
                timeout=self.timeout,
                headers={"Content-Type": "application/json"},
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            return Failure(unreachable(f"unable to reach backend: {e}"))
        logger.debug("%s %s -> %s", method, url, response.status_code)
        return Success(response)

    def _get_json(
        self,
        path: str,
        error_type: ErrorFactory,
        unreachable: ErrorFactory = UpstreamUnavailable,
    ) -> Result[Any, CheckoutError]:
        sent = self._send("GET", path, unreachable=unreachable)
        if isinstance(sent, Failure):
            return sent

        response = sent.unwrap()
        if not response.ok:
            return Failure(
                error_type(
                    f"GET {path} -> HTTP {response.status_code}: "
                    f"{_error_detail(response)}"
                )
            )
        try:
            return Success(response.json())
        except ValueError:
            return Failure(error_type(f"GET {path} returned invalid JSON"))


def _error_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return (response.text or "").strip()[:200] or "An error occurred."
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return "An error occurred."


def _parse_order_ids(payload: Any) -> Result[Sequence[str], CheckoutError]:
    if not isinstance(payload, list):
        return Failure(OrderIdFetchError("order-ids payload is not a list"))
    return Success(tuple(str(x) for x in payload if x is not None))


def _parse_sale_rows(payload: Any) -> Result[Sequence[SaleRow], CheckoutError]:
    if not isinstance(payload, list):
        return Failure(UpstreamError("today's sales payload is not a list"))
    try:
        rows = tuple(
            SaleRow(
                order_id=str(x["orderId"]),
                timestamp=str(x.get("timestamp") or ""),
                product_name=str(x.get("productName") or ""),
                quantity=int(x.get("quantity") or 0),
                price=Money(to_amount(x.get("price"))),
                payment_method=str(x.get("paymentMethod") or ""),
                discount=Money(to_amount(x.get("discount"))),
                delivery_fee=Money(to_amount(x.get("deliveryFee"))),
                total=_optional_money(x.get("total")),
            )
            for x in payload
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        return Failure(UpstreamError(f"malformed sales row: {e}"))
    return Success(rows)


def _optional_money(value: Any) -> Money | None:
    if value is None:
        return None
    return Money(to_amount(value))
