"""Exact conversion between raw token amounts and decimal values.

Formulas:
- Decimal amount = raw_amount / 10^decimals
- Market Cap = price × decimal total supply

Raw amounts are Python ints and every conversion goes through
Decimal built from strings, so no digit is lost to float rounding.
"""

import logging
from decimal import MAX_EMAX, MIN_EMIN, Decimal, localcontext

from ..core.exceptions import ValidationError
from ..core.types import RawAmount

logger = logging.getLogger(__name__)


def _check_inputs(raw: RawAmount, decimals: int) -> None:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ValidationError("raw", repr(raw), "raw amount must be an integer")
    if raw < 0:
        raise ValidationError("raw", str(raw), "raw amount must be non-negative")
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise ValidationError("decimals", repr(decimals), "decimals must be an integer")
    if decimals < 0:
        raise ValidationError("decimals", str(decimals), "decimals must be non-negative")


def to_decimal(raw: RawAmount, decimals: int) -> Decimal:
    """
    Scale a raw amount down by 10^decimals without rounding.

    Args:
        raw: Amount in the smallest indivisible unit
        decimals: Number of decimal places of the mint

    Returns:
        Exact Decimal value, e.g. (123456789012345678, 9) -> 123456789.012345678

    Raises:
        ValidationError: If raw is not a non-negative int or decimals is negative
    """
    _check_inputs(raw, decimals)
    # String construction is exact; arithmetic would round to context precision
    return Decimal(f"{raw}E-{decimals}")


def format_amount(value: Decimal) -> str:
    """
    Format a decimal with thousands separators and no trailing zeros.

    Examples:
        1000000.000000 -> "1,000,000"
        123456789.012345678 -> "123,456,789.012345678"
    """
    text = format(value, ",f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_raw_amount(raw: RawAmount, decimals: int) -> str:
    """Shortcut for format_amount(to_decimal(raw, decimals))."""
    return format_amount(to_decimal(raw, decimals))


def calc_market_cap(price: Decimal, raw_supply: RawAmount, decimals: int) -> Decimal:
    """
    Market Cap = price × (raw_supply / 10^decimals).

    The multiplication runs in a local context sized to the operands so
    the product keeps every digit and cannot overflow for finite inputs.
    """
    supply = to_decimal(raw_supply, decimals)
    digits = len(supply.as_tuple().digits) + len(price.as_tuple().digits)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, digits + 2)
        ctx.Emax = MAX_EMAX
        ctx.Emin = MIN_EMIN
        market_cap = price * supply

    logger.debug(f"Market Cap = {format_amount(supply)} tokens × ${price} = ${market_cap}")
    return market_cap
