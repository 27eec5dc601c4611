"""
Contract Validation Module

Модуль для валидации JSON контрактов расчёта корзины.
"""

from .validators import (
    CartRequestValidator,
    CartResponseValidator,
    ContractValidator,
    ContractViolation,
    SchemaLoader,
    validate_cart_request,
    validate_cart_response,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "CartRequestValidator",
    "CartResponseValidator",
    "ContractViolation",
    # Functions
    "validate_cart_request",
    "validate_cart_response",
]
