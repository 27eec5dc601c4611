"""
Percentage - Ограниченная ставка в процентах

Immutable Pydantic модель для ставок налога (например 20.0) и скидок (10).
Значение хранится как Decimal, дробные ставки допустимы.
"""

from decimal import Decimal, InvalidOperation
from fractions import Fraction
from typing import Final

from pydantic import BaseModel, field_validator

from src.core.domain.money import Money
from src.core.errors import InvalidPercentage
from src.core.math.rounding import RoundingMode, to_fraction

PERCENTAGE_MIN: Final[Decimal] = Decimal(0)
PERCENTAGE_MAX: Final[Decimal] = Decimal(100)


class Percentage(BaseModel):
    """Процент в диапазоне [0, 100]"""

    value: Decimal

    model_config = {"frozen": True}

    @field_validator("value", mode="before")
    @classmethod
    def validate_value(cls, v: object) -> Decimal:
        """
        Приведение к Decimal и проверка диапазона.

        Float приводится через str, чтобы 19.0 стал Decimal('19.0'),
        а не двоичным приближением.
        """
        if isinstance(v, bool):
            raise InvalidPercentage(f"percentage must be numeric, got {v!r}")
        try:
            d = v if isinstance(v, Decimal) else Decimal(str(v))
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidPercentage(f"percentage must be numeric, got {v!r}")

        if not d.is_finite():
            raise InvalidPercentage(f"percentage must be finite, got {v!r}")
        if d < PERCENTAGE_MIN or d > PERCENTAGE_MAX:
            raise InvalidPercentage(f"percentage {d} outside [0, 100]")
        return d

    def of(self, money: Money, rounding: RoundingMode = RoundingMode.HALF_UP) -> Money:
        """Доля от суммы: делегирует Money.apply_percentage."""
        return money.apply_percentage(self, rounding)

    def as_fraction(self) -> Fraction:
        return to_fraction(self.value)

    def is_zero(self) -> bool:
        return self.value == 0

    def __str__(self) -> str:
        return f"{self.value}%"
