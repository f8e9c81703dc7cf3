"""Display formatting for money amounts."""

from __future__ import annotations

from typing import Union

CURRENCY_SYMBOLS = {
    "BRL": "R$",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}

# (thousands separator, decimal separator)
LOCALE_SEPARATORS = {
    "pt-BR": (".", ","),
    "pt-PT": (" ", ","),
    "de-DE": (".", ","),
    "en-US": (",", "."),
    "en-GB": (",", "."),
}


def format_number(amount: Union[float, int], language: str = "pt-BR") -> str:
    """Two decimals with the locale's grouping, e.g. ``1.234,56`` for pt-BR."""
    thousands, decimal = LOCALE_SEPARATORS.get(language, (",", "."))
    text = f"{abs(amount):,.2f}"
    text = text.replace(",", "\0").replace(".", decimal).replace("\0", thousands)
    return f"-{text}" if amount < 0 and round(abs(amount), 2) != 0 else text


def format_currency(amount: Union[float, int], currency: str = "BRL", language: str = "pt-BR") -> str:
    """Format an amount the way the dashboard cards show it.

    Example:
        >>> format_currency(1234.56)
        'R$ 1.234,56'
        >>> format_currency(-1500, "USD", "en-US")
        '-$1,500.00'
    """
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    number = format_number(amount, language)
    sign = ""
    if number.startswith("-"):
        sign, number = "-", number[1:]
    if language.startswith("en") and symbol in ("$", "£"):
        return f"{sign}{symbol}{number}"
    return f"{sign}{symbol} {number}"
