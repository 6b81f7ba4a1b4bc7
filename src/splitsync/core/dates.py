#!/usr/bin/env python3
"""
FinancialDate Primitive Type

Immutable day-granularity date wrapper with consistent formatting.
Used for sync watermarks, transaction dates and cache periods.
"""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True, order=True)
class FinancialDate:
    """Immutable financial date wrapper with consistent formatting."""

    date: date

    @classmethod
    def from_string(cls, date_str: str, date_format: str = "%Y-%m-%d") -> "FinancialDate":
        """
        Parse from string in specified format.

        Args:
            date_str: Date string to parse
            date_format: Date format (default: ISO format "%Y-%m-%d")

        Returns:
            FinancialDate object

        Raises:
            ValueError: If the string does not match the format
        """
        return cls(date=datetime.strptime(date_str.strip(), date_format).date())

    @classmethod
    def today(cls) -> "FinancialDate":
        """Get today's date."""
        return cls(date=date.today())

    @classmethod
    def earliest(cls) -> "FinancialDate":
        """Earliest representable date, used when no sync has happened yet."""
        return cls(date=date.min)

    @property
    def is_earliest(self) -> bool:
        return self.date == date.min

    def to_iso_string(self) -> str:
        """Format as YYYY-MM-DD."""
        return self.date.isoformat()

    def __str__(self) -> str:
        return self.to_iso_string()

    def __repr__(self) -> str:
        return f"FinancialDate(date={self.date!r})"
