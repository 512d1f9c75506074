"""Display formatting for money and percentages."""

from typing import Optional, Union

CURRENCY_SYMBOLS = {
    "USD": "$",
    "CAD": "CA$",
    "AUD": "A$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "INR": "₹",
    "TRY": "₺",
    "CHF": "CHF ",
    "SEK": "SEK ",
}

Number = Union[int, float, str, None]


def _to_float(value: Number) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if value != value:  # NaN
        return None
    return float(value)


def currency_symbol(currency: str = "USD") -> str:
    code = (currency or "USD").upper()
    return CURRENCY_SYMBOLS.get(code, f"{code} ")


def format_currency(value: Number, currency: str = "USD") -> str:
    """Format a number as currency, e.g. ``$1,234.50`` or ``-$3.00``.

    Strings are coerced as form inputs are; anything non-numeric renders as ``-``.
    """
    number = _to_float(value)
    if number is None:
        return "-"
    sign = "-" if number < 0 else ""
    return f"{sign}{currency_symbol(currency)}{abs(number):,.2f}"


def format_percentage(value: Number, decimals: int = 1) -> str:
    number = _to_float(value)
    if number is None:
        return "-"
    return f"{number:.{decimals}f}%"


def format_number(value: Number, decimals: int = 2) -> str:
    number = _to_float(value)
    if number is None:
        return "-"
    return f"{number:,.{decimals}f}"
