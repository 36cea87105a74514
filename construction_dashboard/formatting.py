"""Formatting utilities for currency display in reports."""

from __future__ import annotations

from typing import Union

from .settings import get_labels_config


def _group_digits(amount: float, decimals: int) -> str:
    currency = get_labels_config()['currency']
    formatted = f"{amount:,.{decimals}f}"
    # Swap the US separators for the configured ones
    return (
        formatted.replace(',', '\0')
        .replace('.', currency['decimal_separator'])
        .replace('\0', currency['thousands_separator'])
    )


def format_currency(amount: Union[float, int], include_sign: bool = True) -> str:
    """Format a currency amount with the configured separators.

    Args:
        amount: The amount to format
        include_sign: Whether to include the currency symbol

    Returns:
        Formatted currency string (e.g., "R$ 1.234,56" or "1.234,56")

    Example:
        >>> format_currency(1234.56)
        'R$ 1.234,56'
        >>> format_currency(-50)
        '-R$ 50,00'
    """
    symbol = get_labels_config()['currency']['symbol']
    formatted = _group_digits(abs(amount), 2)
    sign = '-' if amount < 0 else ''
    return f"{sign}{symbol} {formatted}" if include_sign else f"{sign}{formatted}"


def format_currency_abbrev(amount: Union[float, int]) -> str:
    """Compact currency label for dense monthly tables.

    Example:
        >>> format_currency_abbrev(1250000)
        'R$ 1.25M'
        >>> format_currency_abbrev(45300)
        'R$ 45K'
        >>> format_currency_abbrev(812.4)
        'R$ 812'
    """
    symbol = get_labels_config()['currency']['symbol']
    if amount >= 1_000_000:
        return f"{symbol} {amount / 1_000_000:.2f}M"
    if amount >= 1_000:
        return f"{symbol} {amount / 1_000:.0f}K"
    return f"{symbol} {amount:.0f}"
