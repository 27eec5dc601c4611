"""
Errors - Таксономия ошибок расчёта корзины

Все ошибки терминальны для одного вызова расчёта: вычисление чистое и
детерминированное, повторы бессмысленны. Ошибка поднимается в точке
обнаружения и пропагирует до вызывающего без локального восстановления.

Каждый класс несёт стабильный `code`, который внешний слой отображает
в пользовательское сообщение и HTTP статус.

ВАЖНО: базовый класс наследуется от Exception, а не от ValueError.
Pydantic оборачивает ValueError из валидаторов в ValidationError,
а прочие исключения пропускает как есть - так тип ошибки сохраняется.
"""


class CartError(Exception):
    """Базовая ошибка расчёта корзины."""

    code: str = "CART_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, str]:
        """Структурированное представление для failure-конверта."""
        return {"code": self.code, "message": self.message}


# =============================================================================
# ВАЛИДАЦИЯ КОРЗИНЫ
# =============================================================================


class EmptyCart(CartError):
    """Корзина без позиций."""

    code = "EMPTY_CART"


class InvalidQuantity(CartError):
    """Количество позиции меньше 1."""

    code = "INVALID_QUANTITY"


class InvalidUnitPrice(CartError):
    """Отрицательная цена за единицу."""

    code = "INVALID_UNIT_PRICE"


# =============================================================================
# ПОЛИТИКИ
# =============================================================================


class InvalidDiscountCode(CartError):
    """Код скидки отсутствует в таблице политики (или пустой)."""

    code = "INVALID_DISCOUNT_CODE"


class UnsupportedCountry(CartError):
    """Для страны нет ставки налога."""

    code = "UNSUPPORTED_COUNTRY"


# =============================================================================
# VALUE OBJECTS
# =============================================================================


class CurrencyMismatch(CartError):
    """Арифметика между Money в разных валютах."""

    code = "CURRENCY_MISMATCH"


class InvalidAmount(CartError):
    """Нарушен инвариант Money (отрицательная сумма, неверная валюта)."""

    code = "INVALID_AMOUNT"


class InvalidPercentage(CartError):
    """Процент вне диапазона [0, 100]."""

    code = "INVALID_PERCENTAGE"


class NegativeResult(CartError):
    """Вычитание дало бы отрицательную сумму (используйте subtract_clamped)."""

    code = "NEGATIVE_RESULT"
