"""
pt-BR display formatting for the preview and the PDF.

Amounts are rounded half away from zero only here, at display time.
"""

import math
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP, localcontext

from .config import settings

_PT_BR_SEPARATORS = str.maketrans({",": ".", ".": ","})


def _round(value, places: int) -> Decimal:
    exact = Decimal(str(value))
    exponent = Decimal(1).scaleb(-places)
    # quantize needs every integer digit plus `places` within the context precision
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, exact.adjusted() + places + 2)
        return exact.quantize(exponent, rounding=ROUND_HALF_UP)


def format_number(value, places: int = 2) -> str:
    """Format a number as 1.234,56"""
    try:
        number = float(value)
    except (ValueError, TypeError):
        number = 0.0
    if not math.isfinite(number):
        number = 0.0
    rounded = _round(number, places)
    if rounded.is_zero():
        rounded = abs(rounded)
    return f"{rounded:,.{places}f}".translate(_PT_BR_SEPARATORS)


def format_currency(value) -> str:
    """Format an amount as R$ 1.234,56"""
    text = format_number(value, 2)
    if text.startswith("-"):
        return f"-{settings.CURRENCY_SYMBOL} {text[1:]}"
    return f"{settings.CURRENCY_SYMBOL} {text}"


def format_measure(width: float, height: float) -> str:
    """Format a slab size as 2,85 x 1,85"""
    return f"{format_number(width)} x {format_number(height)}"


def format_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def default_validity_date(today: date = None, days: int = None) -> date:
    """Quotations are valid for a week unless configured otherwise."""
    today = today or date.today()
    if days is None:
        days = settings.DEFAULT_VALID_DAYS
    return today + timedelta(days=days)
