"""Splitwise Integration Package"""

from .client import SplitwiseAPIError, SplitwiseClient

__all__ = ["SplitwiseAPIError", "SplitwiseClient"]
