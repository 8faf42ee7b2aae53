"""
Formatting utilities for amounts and rates.
"""

from decimal import Decimal


def format_currency(
    amount: float | Decimal,
    currency: str = "INR",
    decimals: int = 2,
) -> str:
    """
    Format amount with thousands separators and a currency code.

    Example:
        >>> format_currency(Decimal("1234.5"))
        '1,234.50 INR'
        >>> format_currency(1000, currency="$", decimals=0)
        '$1,000'
    """
    formatted = f"{float(amount):,.{decimals}f}"
    if currency.startswith("$") or currency.startswith("€") or currency.startswith("₹"):
        return f"{currency}{formatted}"
    return f"{formatted} {currency}"


def format_percentage(
    value: float | Decimal,
    decimals: int = 2,
    show_sign: bool = False,
) -> str:
    """
    Format a value that is already in percent.

    Example:
        >>> format_percentage(Decimal("7"), decimals=0)
        '7%'
        >>> format_percentage(12.5, show_sign=True)
        '+12.50%'
    """
    sign = "+" if show_sign and float(value) > 0 else ""
    return f"{sign}{float(value):.{decimals}f}%"


def format_rate(rate: Decimal, decimals: int = 2) -> str:
    """Format a fractional rate (0.07) as a percentage string."""
    return format_percentage(rate * 100, decimals=decimals)
