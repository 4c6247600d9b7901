"""Amount conversion and valuation module."""

from .amounts import calc_market_cap, format_amount, format_raw_amount, to_decimal

__all__ = ["calc_market_cap", "format_amount", "format_raw_amount", "to_decimal"]
