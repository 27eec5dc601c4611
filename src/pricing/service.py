"""CartPricingService - request dict -> response envelope.

Граница ядра для внешнего HTTP слоя:
1. Проверка формы payload по контракту cart_request (jsonschema)
2. Десериализация в CartRequest
3. Расчёт CartCalculator
4. Success-конверт или failure-конверт {code, message}

Доменные ошибки (CartError) и ошибки контракта превращаются в
failure-конверт. Прочие исключения пропагируют: это дефекты, а не
невалидный ввод. HTTP метод, маршрут и статусы - вне ядра.
"""

import logging
from typing import Any, Dict

from src.core.contracts import CartRequestValidator
from src.core.domain.cart import CartRequest
from src.core.errors import CartError
from src.pricing.calculator import CartCalculator

logger = logging.getLogger(__name__)

# Код ошибки для payload, не прошедшего контракт
INVALID_REQUEST_CODE = "INVALID_REQUEST"


def failure(code: str, message: str) -> Dict[str, Any]:
    """Failure-конверт."""
    return {"success": False, "error": {"code": code, "message": message}}


class CartPricingService:
    """Facade: payload dict -> envelope dict."""

    def __init__(self, calculator: CartCalculator | None = None):
        self.calculator = calculator or CartCalculator()
        self._request_validator = CartRequestValidator()

    def handle(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Обработка запроса расчёта.

        Args:
            payload: Десериализованный JSON запроса

        Returns:
            {"success": True, "cart": {...}, "currency": ...} либо
            {"success": False, "error": {"code": ..., "message": ...}}
        """
        violations = self._request_validator.violations(payload)
        if violations:
            logger.warning(
                "cart request rejected by contract: %d violation(s), first at %s (%s)",
                len(violations),
                violations[0].path,
                violations[0].keyword,
            )
            return failure(INVALID_REQUEST_CODE, "; ".join(str(v) for v in violations))

        request = CartRequest.model_validate(payload)

        try:
            result = self.calculator.calculate_request(request)
        except CartError as e:
            logger.warning("cart calculation failed: %s (%s)", e.code, e.message)
            return failure(e.code, e.message)

        logger.info(
            "cart calculated: items=%d subtotal=%d total=%d %s",
            len(result.items),
            result.subtotal,
            result.total,
            result.currency,
        )
        return result.to_response()


def calculate_cart(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Расчёт с калькулятором по умолчанию."""
    return CartPricingService().handle(payload)
