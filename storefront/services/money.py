"""
Money helpers for cart prices.

PostgREST returns `numeric` columns as JSON numbers, so prices arrive as
floats. They are converted to Decimal on the way in, summed as integer
cents, and only turned back into floats when a response is serialized.
"""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

Number = Union[str, int, float, Decimal]

CENT = Decimal("0.01")

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}


def to_decimal(value: Union[Number, None]) -> Decimal:
    """Decimal for a price from the database or a request; None and garbage become 0."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        # via str so 22.1 stays 22.1 and not 22.10000000000000142...
        return Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def to_minor_units(value: Number) -> int:
    """22.50 -> 2250, half-up on sub-cent input."""
    return int((to_decimal(value) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def from_minor_units(minor: int) -> Decimal:
    """2250 -> Decimal("22.50")."""
    return (Decimal(minor) / 100).quantize(CENT)


def round_money(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_float(value: Number) -> float:
    """JSON boundary only; never feed the result back into arithmetic."""
    return float(to_decimal(value))


def format_money(value: Number, currency: str = "USD") -> str:
    """Display string: "$44.00", "£1,234.50", or "5.00 SEK" for unknown symbols."""
    amount = f"{round_money(value):,.2f}"
    symbol = CURRENCY_SYMBOLS.get(currency)
    return f"{symbol}{amount}" if symbol else f"{amount} {currency}"
