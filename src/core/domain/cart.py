"""
Cart - Модели корзины: вход расчёта и результат

Immutable Pydantic модели:
- CartItem: позиция корзины с ценой Money (доменная модель)
- CartItemRequest / CartRequest: провалидированный по схеме вход
- CartResult и вложенные блоки: результат расчёта

Границы quantity и unit_price в CartItemRequest намеренно не заданы
через Field: их проверяет калькулятор, чтобы вернуть InvalidQuantity /
InvalidUnitPrice, а не ValidationError.
"""

from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from src.core.domain.money import DEFAULT_CURRENCY, Money
from src.core.errors import InvalidQuantity, InvalidUnitPrice


# =============================================================================
# ENUMS
# =============================================================================


class DiscountKind(str, Enum):
    """Тип скидки"""

    PERCENTAGE = "percentage"
    FIXED = "fixed"


# =============================================================================
# CART ITEM
# =============================================================================


class CartItem(BaseModel):
    """
    Позиция корзины.

    line_total = unit_price * quantity (целочисленно, без округления).
    """

    sku: str = Field(..., min_length=1, description="Артикул")
    name: str = Field(..., description="Название товара")
    quantity: int = Field(..., description="Количество (>= 1)")
    unit_price: Money = Field(..., description="Цена за единицу")

    model_config = {"frozen": True}

    @field_validator("quantity", mode="before")
    @classmethod
    def validate_quantity(cls, v: object) -> int:
        if isinstance(v, bool) or not isinstance(v, int) or v < 1:
            raise InvalidQuantity(f"quantity must be an integer >= 1, got {v!r}")
        return v

    @field_validator("unit_price", mode="before")
    @classmethod
    def validate_unit_price(cls, v: object, info: ValidationInfo) -> object:
        # Сырые центы приходят словарём из create(); Money проверяет себя сам
        if isinstance(v, dict):
            cents = v.get("amount_cents")
            if isinstance(cents, bool) or not isinstance(cents, int) or cents < 0:
                raise InvalidUnitPrice(
                    f"Item {info.data.get('sku')!r}: unit price must be non-negative "
                    f"integer cents, got {cents!r}"
                )
        return v

    @classmethod
    def create(
        cls,
        sku: str,
        name: str,
        quantity: int,
        unit_price_cents: int,
        currency: str = DEFAULT_CURRENCY,
    ) -> "CartItem":
        """
        Построение позиции из сырых целых значений.

        Raises:
            InvalidQuantity: quantity < 1
            InvalidUnitPrice: unit_price_cents < 0
        """
        return cls(
            sku=sku,
            name=name,
            quantity=quantity,
            unit_price={"amount_cents": unit_price_cents, "currency": currency},
        )

    @property
    def line_total(self) -> Money:
        return self.unit_price.multiply(self.quantity)


# =============================================================================
# REQUEST
# =============================================================================


class CartItemRequest(BaseModel):
    """Позиция во входном запросе (цена в центах)"""

    sku: str = Field(..., min_length=1)
    name: str = ""
    quantity: int
    unit_price: int = Field(..., description="Цена за единицу в центах")

    model_config = {"frozen": True}


class CartRequest(BaseModel):
    """
    Провалидированный и десериализованный запрос расчёта.

    discount_code=None означает "скидка не запрошена".
    """

    items: tuple[CartItemRequest, ...]
    discount_code: str | None = None
    country_code: str = Field(..., min_length=1)
    taxes_included: bool = True
    currency: str | None = Field(None, description="None -> валюта конфигурации")

    model_config = {"frozen": True}


# =============================================================================
# RESULT
# =============================================================================


class LineItemResult(BaseModel):
    """Позиция результата с line_total"""

    sku: str
    name: str
    quantity: int
    unit_price: int
    line_total: int

    model_config = {"frozen": True}


class DiscountBreakdown(BaseModel):
    """
    Применённая скидка.

    value: процент для PERCENTAGE, сумма в центах для FIXED.
    """

    code: str
    type: DiscountKind
    value: Decimal
    amount: int = Field(..., ge=0)

    model_config = {"frozen": True}


class TaxBreakdown(BaseModel):
    """
    Налоговый блок.

    net_amount: сумма без налога (included: извлечённая база, added: база до налога).
    Инвариант: net_amount + amount == subtotal_after_discount (included)
    """

    country_code: str
    rate: Decimal
    amount: int = Field(..., ge=0)
    included: bool
    net_amount: int = Field(..., ge=0)

    model_config = {"frozen": True}


class CartResult(BaseModel):
    """
    Полный результат расчёта корзины.

    Создаётся один раз на вызов и не изменяется.
    discount=None означает "скидка не применялась" (в отличие от нулевой скидки).
    """

    items: tuple[LineItemResult, ...]
    subtotal: int = Field(..., ge=0)
    discount: DiscountBreakdown | None
    subtotal_after_discount: int = Field(..., ge=0)
    tax: TaxBreakdown
    total: int = Field(..., ge=0)
    currency: str

    model_config = {"frozen": True}

    def to_cart_dict(self) -> dict[str, Any]:
        """Блок `cart` внешнего контракта (JSON-совместимые типы)."""
        discount = None
        if self.discount is not None:
            discount = {
                "code": self.discount.code,
                "type": self.discount.type.value,
                "value": _number(self.discount.value),
                "amount": self.discount.amount,
            }

        return {
            "items": [item.model_dump() for item in self.items],
            "subtotal": self.subtotal,
            "discount": discount,
            "subtotal_after_discount": self.subtotal_after_discount,
            "tax": {
                "rate": float(self.tax.rate),
                "amount": self.tax.amount,
                "included": self.tax.included,
            },
            "total": self.total,
        }

    def to_response(self) -> dict[str, Any]:
        """Success-конверт: {success, cart, currency}."""
        return {"success": True, "cart": self.to_cart_dict(), "currency": self.currency}


def _number(value: Decimal) -> int | float:
    """Целые Decimal -> int, дробные -> float"""
    if value == value.to_integral_value():
        return int(value)
    return float(value)
