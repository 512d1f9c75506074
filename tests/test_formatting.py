from core.formatting import currency_symbol, format_currency, format_number, format_percentage


def test_format_currency():
    assert format_currency(1234.5) == "$1,234.50"
    assert format_currency(-3, "EUR") == "-€3.00"
    assert format_currency("12.4", "GBP") == "£12.40"


def test_unknown_currency_falls_back_to_code():
    assert currency_symbol("NZD") == "NZD "
    assert format_currency(5, "nzd") == "NZD 5.00"


def test_missing_values_render_as_dash():
    assert format_currency(None) == "-"
    assert format_currency("abc") == "-"
    assert format_currency(float("nan")) == "-"
    assert format_percentage(None) == "-"
    assert format_number(None) == "-"


def test_format_percentage_and_number():
    assert format_percentage(33.333) == "33.3%"
    assert format_percentage(33.333, 2) == "33.33%"
    assert format_number(1234.5678, 3) == "1,234.568"
