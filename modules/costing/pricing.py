"""Pricing methods and the metrics derived from a price.

Four interchangeable ways of arriving at a selling price from a per-unit cost:

- ``markup``: percentage of cost added on top of cost
- ``price``: the price itself
- ``profit``: absolute amount added on top of cost
- ``margin``: percentage of the final price that is profit

``price_from_method`` and ``value_from_method`` are inverses for the same
method, so switching a product between methods keeps its price. The one
exception is a margin of 100% or more, which has no finite price and
resolves to 0.
"""

import math
from typing import Tuple, Union

from core.errors import UnsupportedPricingMethod, ValidationAppException
from modules.costing.types import PricingMethod, PricingMetrics, PricingSpec

MONEY_DECIMALS = 2
PERCENT_DECIMALS = 2
MAX_MARGIN_PERCENT = 99.99

MethodLike = Union[PricingMethod, str]


def coerce_method(method: MethodLike) -> PricingMethod:
    if isinstance(method, PricingMethod):
        return method
    try:
        return PricingMethod(method)
    except ValueError as exc:
        raise UnsupportedPricingMethod(method) from exc


def _require_non_negative(label: str, value: float) -> float:
    if value is None:
        raise ValidationAppException(f"{label} is required")
    number = float(value)
    if math.isnan(number):
        raise ValidationAppException(f"{label} must be a number")
    if number < 0:
        raise ValidationAppException(f"{label} must be zero or positive")
    return number


def _money(value: float) -> float:
    return round(value, MONEY_DECIMALS)


def _percent(value: float) -> float:
    return round(value, PERCENT_DECIMALS)


def price_from_method(method: MethodLike, value: float, cost: float) -> float:
    method = coerce_method(method)
    value = _require_non_negative("Pricing value", value)
    cost = _require_non_negative("Cost", cost)

    if method is PricingMethod.MARKUP:
        price = cost * (1 + value / 100)
    elif method is PricingMethod.PRICE:
        price = value
    elif method is PricingMethod.PROFIT:
        price = cost + value
    else:
        if value >= 100:
            return 0.0
        margin = min(value, MAX_MARGIN_PERCENT)
        price = cost / (1 - margin / 100)
    return _money(price)


def value_from_method(method: MethodLike, target_price: float, cost: float, rounded: bool = True) -> float:
    """Method input that prices a product at ``target_price``.

    With ``rounded=False`` the exact value is returned, which a caller should
    store when the price itself has to be kept to the cent.
    """
    method = coerce_method(method)
    price = _require_non_negative("Price", target_price)
    cost = _require_non_negative("Cost", cost)

    if method is PricingMethod.MARKUP:
        value = (price - cost) / cost * 100 if cost > 0 else 0.0
        percent = True
    elif method is PricingMethod.PRICE:
        value, percent = price, False
    elif method is PricingMethod.PROFIT:
        value, percent = price - cost, False
    else:
        value = (price - cost) / price * 100 if price > 0 else 0.0
        percent = True
    if not rounded:
        return value
    return _percent(value) if percent else _money(value)


def metrics_from_price(price: float, cost: float) -> PricingMetrics:
    price = _require_non_negative("Price", price)
    cost = _require_non_negative("Cost", cost)

    profit = price - cost
    margin = profit / price * 100 if price > 0 else 0.0
    markup = profit / cost * 100 if cost > 0 else 0.0
    costs_percentage = _percent(cost / price * 100) if price > 0 else None

    return PricingMetrics(
        price=_money(price),
        profit=_money(profit),
        margin=_percent(margin),
        markup=_percent(markup),
        costs_percentage=costs_percentage,
    )


def resolve_pricing(method: MethodLike, value: float, cost: float) -> Tuple[PricingSpec, PricingMetrics]:
    """Price a product and report what that price earns."""
    method = coerce_method(method)
    price = price_from_method(method, value, cost)
    spec = PricingSpec(method=method, value=float(value), resulting_price=price)
    return spec, metrics_from_price(price, cost)


def break_even_price(cost: float) -> float:
    return _money(max(0.0, cost or 0.0))
