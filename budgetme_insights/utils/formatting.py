"""Money and percentage text for insight copy"""

import math
from datetime import datetime

CURRENCY_SYMBOL = "₱"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives, matching what users see on screen; 0 for NaN/Infinity"""
    if not math.isfinite(value):
        return 0
    return math.floor(value + 0.5)


def format_currency(amount: float) -> str:
    """₱12,345 style, no decimals"""
    rounded = round_half_up(abs(amount))
    sign = "-" if amount < 0 and rounded != 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{rounded:,}"


def format_percentage(value: float) -> str:
    """value is already in percent units: 12.345 -> '12.3%'"""
    return f"{value if math.isfinite(value) else 0.0:.1f}%"


def format_date(moment: datetime) -> str:
    """Jan 05, 2024"""
    return moment.strftime("%b %d, %Y")
