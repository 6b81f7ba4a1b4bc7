#!/usr/bin/env python3
"""
Currency Conversion Utilities

Source amounts arrive as signed integers in minor units. YNAB reports
milliunits: 1000 milliunits = $1.00. The destination expects a positive
decimal amount in major units with two fractional digits.

Key Principles:
- Never use floating-point arithmetic for currency calculations
- Convert with Decimal and quantize once, at the edge
"""

from decimal import ROUND_HALF_UP, Decimal

MILLIUNITS_PER_UNIT = 1000

_TWO_PLACES = Decimal("0.01")


def minor_to_major(amount: int, scale: int = MILLIUNITS_PER_UNIT) -> Decimal:
    """
    Convert a minor-unit integer to a major-unit Decimal, sign preserved.

    Args:
        amount: Amount in minor units (e.g. -45990 milliunits)
        scale: Minor units per major unit (1000 for YNAB)

    Returns:
        Decimal rounded half-up to two places

    Example:
        minor_to_major(-45990) -> Decimal("-45.99")
    """
    if scale <= 0:
        raise ValueError(f"Minor unit scale must be positive, got {scale}")
    return (Decimal(amount) / Decimal(scale)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def expense_cost(amount: int, scale: int = MILLIUNITS_PER_UNIT) -> Decimal:
    """Absolute major-unit cost of an outflow, as submitted to the destination."""
    return minor_to_major(abs(amount), scale)


def format_major(value: Decimal) -> str:
    """Format a major-unit amount as a plain two-decimal string ("4.25")."""
    return f"{value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP):.2f}"
