"""Pricing - политики налога и скидок, калькулятор корзины и service facade.

Поток: CartRequest -> CartCalculator (DiscountPolicy, TaxPolicy) -> CartResult
"""

from .calculator import CalculatorConfig, CartCalculator
from .discount_policy import (
    DEFAULT_DISCOUNT_RULES,
    DiscountPolicy,
    DiscountRule,
    FixedDiscount,
    PercentageDiscount,
    StaticDiscountPolicy,
)
from .service import CartPricingService, calculate_cart
from .tax_policy import DEFAULT_TAX_RATES, StaticTaxPolicy, TaxPolicy, TaxRule

__all__ = [
    "CalculatorConfig",
    "CartCalculator",
    "DEFAULT_DISCOUNT_RULES",
    "DiscountPolicy",
    "DiscountRule",
    "FixedDiscount",
    "PercentageDiscount",
    "StaticDiscountPolicy",
    "CartPricingService",
    "calculate_cart",
    "DEFAULT_TAX_RATES",
    "StaticTaxPolicy",
    "TaxPolicy",
    "TaxRule",
]
