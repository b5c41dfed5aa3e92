from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from returns.result import Failure, Result, Success

from conftest import make_command, make_line
from pos_checkout.core.domain.model.errors import (
    DuplicateOrderId,
    InsufficientPayment,
    OrderIdFetchError,
    PersistenceError,
    ValidationError,
)
from pos_checkout.core.domain.service.checkout_service import (
    CheckoutDeps,
    CheckoutService,
)
from pos_checkout.core.domain.service.quote_service import QuoteService
from pos_checkout.core.ports.inbound.checkout import CheckoutAddon

TS = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _service(gateway, attempts=3):
    deps = CheckoutDeps(
        sales_history=gateway, order_id_attempts=attempts, clock=lambda: TS
    )
    return CheckoutService(deps)


def test_checkout_places_order_with_next_id(gateway):
    gateway.seed_ids = ["SALE001", "SALE003", "SALE010"]

    result = _service(gateway).checkout(make_command(amount_received="400"))

    assert isinstance(result, Success)
    receipt = result.unwrap()
    assert receipt.order_id.value == "SALE011"
    assert receipt.timestamp == TS
    assert receipt.quote.subtotal.amount == Decimal("310.00")
    assert receipt.quote.total.amount == Decimal("320.00")
    assert receipt.quote.change.amount == Decimal("80.00")

    saved = gateway.get("SALE011")
    assert saved is not None
    assert saved.payment_method_id == 1
    assert saved.total.amount == Decimal("320.00")
    assert saved.items[0].price.amount == Decimal("160.00")
    assert receipt.items == saved.items
    assert receipt.payment_method.label == "Cash"


def test_consecutive_checkouts_get_sequential_ids(gateway):
    svc = _service(gateway)

    first = svc.checkout(make_command()).unwrap()
    second = svc.checkout(make_command()).unwrap()

    assert (first.order_id.value, second.order_id.value) == ("SALE001", "SALE002")


def test_insufficient_cash_blocks_submission(gateway):
    result = _service(gateway).checkout(make_command(amount_received="300"))

    assert isinstance(result, Failure)
    err = result.failure()
    assert isinstance(err, InsufficientPayment)
    assert err.total == Decimal("320.00")
    assert err.received == Decimal("300.00")
    assert gateway.get("SALE001") is None


def test_non_cash_methods_do_not_tender_change(gateway):
    result = _service(gateway).checkout(
        make_command(payment_method="GCash", amount_received="0")
    )

    assert isinstance(result, Success)
    assert gateway.get("SALE001").payment_method_id == 3


def test_unknown_payment_method_is_persisted_with_null_id(gateway):
    result = _service(gateway).checkout(make_command(payment_method="Maya"))

    assert isinstance(result, Success)
    assert result.unwrap().payment_method.label == "Maya"
    assert gateway.get("SALE001").payment_method_id is None


def test_negative_total_is_preserved(gateway):
    cmd = make_command(discount="500.00", delivery_fee="0")

    receipt = _service(gateway).checkout(cmd).unwrap()

    assert receipt.quote.total.amount == Decimal("-190.00")
    assert gateway.get("SALE001").total.amount == Decimal("-190.00")


def test_validation_failures(gateway):
    svc = _service(gateway)

    empty = svc.checkout(make_command(lines=()))
    bad_qty = svc.checkout(make_command(lines=(make_line(quantity=0),)))
    bad_discount = svc.checkout(make_command(discount="-1"))

    for result in (empty, bad_qty, bad_discount):
        assert isinstance(result, Failure)
        assert isinstance(result.failure(), ValidationError)


def test_id_fetch_failure_aborts_without_persisting(gateway):
    gateway.fail_fetch = True

    result = _service(gateway).checkout(make_command())

    assert isinstance(result.failure(), OrderIdFetchError)
    assert gateway.get("SALE001") is None


def test_persistence_failure_is_not_retried(gateway):
    gateway.fail_save = True

    result = _service(gateway).checkout(make_command())

    assert isinstance(result.failure(), PersistenceError)
    assert not isinstance(result.failure(), DuplicateOrderId)


@dataclass
class _RacingGateway:
    """Another device grabs SALE00n between our id fetch and our save."""

    taken_by_others: list = field(default_factory=list)
    visible: list = field(default_factory=list)
    saved: list = field(default_factory=list)
    fetches: int = 0

    def list_order_ids(self) -> Result:
        self.fetches += 1
        return Success(tuple(self.visible))

    def save(self, request) -> Result:
        oid = request.order_id.value
        if oid in self.taken_by_others:
            self.visible.append(oid)
            return Failure(DuplicateOrderId(message="taken", order_id=oid))
        self.saved.append(oid)
        return Success(None)

    def list_today(self) -> Result:
        return Success(())


def test_duplicate_id_is_regenerated():
    gw = _RacingGateway(taken_by_others=["SALE001", "SALE002"])

    result = _service(gw, attempts=3).checkout(make_command())

    assert result.unwrap().order_id.value == "SALE003"
    assert gw.saved == ["SALE003"]
    assert gw.fetches == 3


def test_duplicate_id_gives_up_after_attempts():
    gw = _RacingGateway(taken_by_others=["SALE001", "SALE002", "SALE003"])

    result = _service(gw, attempts=2).checkout(make_command())

    assert isinstance(result.failure(), DuplicateOrderId)
    assert result.failure().order_id == "SALE002"
    assert gw.saved == []


def test_quote_service_needs_no_backend():
    result = QuoteService().quote(make_command(amount_received="400"))

    view = result.unwrap()
    assert view.quote.total.amount == Decimal("320.00")
    assert view.quote.change.amount == Decimal("80.00")
    assert view.lines[0].product_name == "Egg Sandwich"
    assert view.lines[0].line_total == Decimal("310.00")


@pytest.mark.parametrize(
    "cmd",
    [
        make_command(lines=(make_line(price="NaN"),)),
        make_command(lines=(make_line(price="Infinity"),)),
        make_command(
            lines=(
                make_line(
                    addon_catalog=(
                        CheckoutAddon(addon_id="1", name="Egg", price=Decimal("NaN")),
                    )
                ),
            )
        ),
        make_command(discount="Infinity"),
        make_command(delivery_fee="-Infinity"),
        make_command(amount_received="NaN"),
    ],
)
def test_non_finite_amounts_are_rejected(cmd, gateway):
    quoted = QuoteService().quote(cmd)
    checked_out = _service(gateway).checkout(cmd)

    for result in (quoted, checked_out):
        assert isinstance(result, Failure)
        assert isinstance(result.failure(), ValidationError)
        assert "finite" in result.failure().message
    assert gateway.get("SALE001") is None
