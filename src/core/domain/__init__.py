"""
Domain models and value objects.

Contains fundamental domain entities like Money, Percentage, CartItem, CartResult.
"""

from src.core.domain.cart import (
    CartItem,
    CartItemRequest,
    CartRequest,
    CartResult,
    DiscountBreakdown,
    DiscountKind,
    LineItemResult,
    TaxBreakdown,
)
from src.core.domain.money import DEFAULT_CURRENCY, Money
from src.core.domain.percentage import PERCENTAGE_MAX, PERCENTAGE_MIN, Percentage

__all__ = [
    # Money
    "DEFAULT_CURRENCY",
    "Money",
    # Percentage
    "PERCENTAGE_MIN",
    "PERCENTAGE_MAX",
    "Percentage",
    # Cart
    "CartItem",
    "CartItemRequest",
    "CartRequest",
    "CartResult",
    "LineItemResult",
    "DiscountBreakdown",
    "DiscountKind",
    "TaxBreakdown",
]
