from core.formatting import format_currency, format_number


def test_format_number_locales():
    assert format_number(1234567.891) == "1.234.567,89"
    assert format_number(1234567.891, "en-US") == "1,234,567.89"
    assert format_number(0) == "0,00"


def test_negative_zero_has_no_sign():
    assert format_number(-0.001) == "0,00"


def test_format_currency_brl():
    assert format_currency(1234.56) == "R$ 1.234,56"
    assert format_currency(-1500) == "-R$ 1.500,00"


def test_format_currency_other_codes():
    assert format_currency(-1500, "USD", "en-US") == "-$1,500.00"
    assert format_currency(10, "EUR") == "€ 10,00"
    assert format_currency(10, "JPY", "en-US") == "JPY 10.00"
