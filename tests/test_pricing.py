import pytest

from core.errors import UnsupportedPricingMethod, ValidationAppException
from modules.costing.pricing import (
    break_even_price,
    metrics_from_price,
    price_from_method,
    resolve_pricing,
    value_from_method,
)
from modules.costing.types import PricingMethod


def test_markup_price_and_metrics():
    price = price_from_method("markup", 50, 10)
    assert price == pytest.approx(15.0)

    metrics = metrics_from_price(price, 10)
    assert metrics.profit == pytest.approx(5.0)
    assert metrics.margin == pytest.approx(33.33)
    assert metrics.markup == pytest.approx(50.0)
    assert metrics.costs_percentage == pytest.approx(66.67)


def test_margin_price_and_inverse():
    assert price_from_method(PricingMethod.MARGIN, 20, 80) == pytest.approx(100.0)
    assert value_from_method(PricingMethod.MARGIN, 100, 80) == pytest.approx(20.0)


def test_fixed_price_and_profit_methods():
    assert price_from_method("price", 24.5, 10) == pytest.approx(24.5)
    assert price_from_method("profit", 7, 10) == pytest.approx(17.0)
    assert value_from_method("price", 24.5, 10) == pytest.approx(24.5)
    assert value_from_method("profit", 17, 10) == pytest.approx(7.0)


@pytest.mark.parametrize("value", [100, 100.5, 250])
def test_margin_of_100_or_more_prices_at_zero(value):
    assert price_from_method("margin", value, 40) == 0


def test_margin_just_below_100_is_clamped():
    assert price_from_method("margin", 99.999, 1) == price_from_method("margin", 99.99, 1)
    assert price_from_method("margin", 99.99, 1) == pytest.approx(10000.0)


@pytest.mark.parametrize(
    "method, value, cost",
    [
        ("markup", 0, 12),
        ("markup", 35, 8.4),
        ("markup", 250, 2),
        ("price", 19.99, 4),
        ("price", 0, 4),
        ("profit", 12.5, 30),
        ("profit", 0, 0),
        ("margin", 0, 9),
        ("margin", 45, 22),
        ("margin", 80, 3.75),
    ],
)
def test_value_survives_a_round_trip_through_price(method, value, cost):
    price = price_from_method(method, value, cost)
    assert value_from_method(method, price, cost) == pytest.approx(value, abs=0.01)


@pytest.mark.parametrize("method", ["markup", "margin", "profit", "price"])
def test_exact_value_reproduces_the_target_price(method):
    value = value_from_method(method, 1234.56, 1000, rounded=False)
    assert price_from_method(method, value, 1000) == pytest.approx(1234.56, abs=1e-9)


def test_rounded_value_can_drift_on_large_costs():
    assert value_from_method("markup", 1234.56, 1000) == pytest.approx(23.46)
    assert price_from_method("markup", 23.46, 1000) == pytest.approx(1234.6)


@pytest.mark.parametrize(
    "method, value, cost, price, value_back",
    [
        ("markup", 50, 0.01, 0.01, 0.0),
        ("margin", 97, 0.01, 0.33, 96.97),
    ],
)
def test_sub_cent_costs_lose_the_value_to_cent_rounding(method, value, cost, price, value_back):
    assert price_from_method(method, value, cost) == pytest.approx(price)
    assert value_from_method(method, price, cost) == pytest.approx(value_back)


def test_zero_cost_guards():
    assert value_from_method("markup", 10, 0) == 0
    metrics = metrics_from_price(10, 0)
    assert metrics.markup == 0
    assert metrics.margin == pytest.approx(100.0)


def test_zero_price_guards():
    assert value_from_method("margin", 0, 5) == 0
    metrics = metrics_from_price(0, 5)
    assert metrics.profit == pytest.approx(-5.0)
    assert metrics.margin == 0
    assert metrics.costs_percentage is None


def test_selling_below_cost_reports_negative_profit():
    metrics = metrics_from_price(8, 10)
    assert metrics.profit == pytest.approx(-2.0)
    assert metrics.margin == pytest.approx(-25.0)
    assert metrics.markup == pytest.approx(-20.0)


def test_outputs_are_rounded_to_cents():
    assert price_from_method("markup", 33.333, 1) == pytest.approx(1.33)
    metrics = metrics_from_price(3, 1)
    assert metrics.margin == pytest.approx(66.67)


@pytest.mark.parametrize(
    "call",
    [
        lambda: price_from_method("markup", -5, 10),
        lambda: price_from_method("profit", 5, -1),
        lambda: value_from_method("margin", -10, 5),
        lambda: metrics_from_price(-1, 5),
        lambda: price_from_method("markup", None, 10),
    ],
)
def test_negative_inputs_are_rejected(call):
    with pytest.raises(ValidationAppException):
        call()


def test_unknown_method_is_rejected():
    with pytest.raises(UnsupportedPricingMethod) as excinfo:
        price_from_method("discount", 10, 5)
    assert excinfo.value.code == "unsupported_method"
    assert excinfo.value.status_code == 422


def test_resolve_pricing_pairs_price_with_metrics():
    spec, metrics = resolve_pricing("margin", 25, 30)
    assert spec.method is PricingMethod.MARGIN
    assert spec.value == 25
    assert spec.resulting_price == pytest.approx(40.0)
    assert metrics.price == spec.resulting_price
    assert metrics.profit == pytest.approx(10.0)


def test_break_even_price():
    assert break_even_price(12.5) == pytest.approx(12.5)
    assert break_even_price(0) == 0
    assert break_even_price(-3) == 0


def test_every_method_has_a_description():
    for method in PricingMethod:
        assert method.description
