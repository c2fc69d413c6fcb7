"""Number format strings for ``Range.set_number_format``."""

from __future__ import annotations

NUMBER_FORMAT_NONE = "@"
NUMBER_FORMAT_PERCENT = "0.00%"


def _build_number_format(base: str, decimals: int = 0, minus_red: bool = True) -> str:
    fmt = base
    if decimals > 0:
        fmt = f"{base}.{'0' * decimals}"
    if minus_red:
        fmt = f"{fmt}_);[Red]-{fmt}"
    return fmt


def number_format_number(decimals: int = 0, minus_red: bool = True) -> str:
    """Thousands-separated number, e.g. ``#,##0.00_);[Red]-#,##0.00``."""
    return _build_number_format("#,##0", decimals, minus_red)


def number_format_currency(decimals: int = 0, minus_red: bool = True, symbol: str = "¥") -> str:
    """Currency, e.g. ``¥#,##0_);[Red]-¥#,##0``."""
    return _build_number_format(f"{symbol}#,##0", decimals, minus_red)


NUMBER_FORMAT_NUMBER_DEFAULT = number_format_number(0, False)
NUMBER_FORMAT_CURRENCY_DEFAULT = number_format_currency(0, False)
