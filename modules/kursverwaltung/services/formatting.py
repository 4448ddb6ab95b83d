"""
Display formatting for the dashboard (German locale conventions).
"""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

EMPTY = "–"
CENTS = Decimal("0.01")
WHOLE = Decimal("1")


def _round_half_up(value: Decimal, exponent: Decimal) -> Decimal:
    return value.quantize(exponent, rounding=ROUND_HALF_UP)


def format_date(value: Optional[str]) -> str:
    """
    Format an ISO date (or datetime) as dd.MM.yyyy.

    Empty values render as "–"; unparsable values are returned unchanged.
    """
    if not value:
        return EMPTY
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        try:
            parsed = date.fromisoformat(value[:10])
        except ValueError:
            return value
    return parsed.strftime("%d.%m.%Y")


def format_price(value: Optional[Union[Decimal, float, int]]) -> str:
    """Course price with two decimals, e.g. "299.00 €". Ties round up."""
    if value is None:
        return EMPTY
    return f"{_round_half_up(Decimal(str(value)), CENTS)} €"


def format_revenue(value: Decimal) -> str:
    """Revenue rounded to whole euros, e.g. "250 €". Ties round up."""
    return f"{_round_half_up(value, WHOLE)} €"
