"""
Money - Денежная величина в минимальных единицах валюты

Immutable Pydantic модель: точная целочисленная сумма в центах и код валюты.
Все операции возвращают новый экземпляр.

Инварианты:
- amount_cents - int >= 0 (float запрещён, никакой дробной арифметики)
- currency - трёхбуквенный код ISO 4217 в верхнем регистре
- Арифметика между разными валютами запрещена (CurrencyMismatch)
- Вычитание в минус запрещено: вызывающий выбирает subtract (NegativeResult)
  или subtract_clamped (clamp к нулю) явно
"""

import re
from typing import TYPE_CHECKING, Final

from pydantic import BaseModel, field_validator

from src.core.errors import CurrencyMismatch, InvalidAmount, NegativeResult
from src.core.math.rounding import RoundingMode, percent_of

if TYPE_CHECKING:
    from src.core.domain.percentage import Percentage


# Единственная поддерживаемая валюта ядра (конверсия валют вне scope)
DEFAULT_CURRENCY: Final[str] = "EUR"

_CURRENCY_RE: Final = re.compile(r"^[A-Z]{3}$")


class Money(BaseModel):
    """
    Денежная величина.

    Examples:
        >>> Money(amount_cents=2999).multiply(2).amount_cents
        5998
    """

    amount_cents: int
    currency: str = DEFAULT_CURRENCY

    model_config = {"frozen": True}

    @field_validator("amount_cents", mode="before")
    @classmethod
    def validate_amount(cls, v: object) -> int:
        """Только целые неотрицательные центы"""
        if isinstance(v, bool) or not isinstance(v, int):
            raise InvalidAmount(f"amount_cents must be an integer, got {v!r}")
        if v < 0:
            raise InvalidAmount(f"amount_cents cannot be negative: {v}")
        return v

    @field_validator("currency", mode="before")
    @classmethod
    def validate_currency(cls, v: object) -> str:
        if not isinstance(v, str) or not _CURRENCY_RE.match(v):
            raise InvalidAmount(f"currency must be a 3-letter upper-case code, got {v!r}")
        return v

    # -------------------------------------------------------------------------
    # Конструкторы
    # -------------------------------------------------------------------------

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(amount_cents=0, currency=currency)

    # -------------------------------------------------------------------------
    # Арифметика
    # -------------------------------------------------------------------------

    def _ensure_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise CurrencyMismatch(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    def add(self, other: "Money") -> "Money":
        self._ensure_same_currency(other)
        return Money(amount_cents=self.amount_cents + other.amount_cents, currency=self.currency)

    def subtract(self, other: "Money") -> "Money":
        """
        Строгое вычитание.

        Raises:
            CurrencyMismatch: Разные валюты
            NegativeResult: Результат был бы отрицательным
        """
        self._ensure_same_currency(other)
        diff = self.amount_cents - other.amount_cents
        if diff < 0:
            raise NegativeResult(
                f"{self.amount_cents} - {other.amount_cents} would be negative"
            )
        return Money(amount_cents=diff, currency=self.currency)

    def subtract_clamped(self, other: "Money") -> "Money":
        """Вычитание с ограничением снизу нулём: max(self - other, 0)."""
        self._ensure_same_currency(other)
        diff = max(self.amount_cents - other.amount_cents, 0)
        return Money(amount_cents=diff, currency=self.currency)

    def multiply(self, factor: int) -> "Money":
        """Умножение на целый неотрицательный множитель (точно, без округления)."""
        if isinstance(factor, bool) or not isinstance(factor, int):
            raise InvalidAmount(f"factor must be an integer, got {factor!r}")
        if factor < 0:
            raise InvalidAmount(f"factor cannot be negative: {factor}")
        return Money(amount_cents=self.amount_cents * factor, currency=self.currency)

    def apply_percentage(
        self, pct: "Percentage", rounding: RoundingMode = RoundingMode.HALF_UP
    ) -> "Money":
        """
        amount_cents * pct / 100 с округлением по режиму.

        Единая формула для скидок (HALF_UP) и добавленного налога (UP).

        Args:
            pct: Процент (0..100)
            rounding: Режим округления результата в центы

        Returns:
            Новая сумма в той же валюте
        """
        cents = percent_of(self.amount_cents, pct.value, rounding)
        return Money(amount_cents=cents, currency=self.currency)

    # -------------------------------------------------------------------------
    # Сравнение
    # -------------------------------------------------------------------------

    def is_zero(self) -> bool:
        return self.amount_cents == 0

    def compare(self, other: "Money") -> int:
        """
        Сравнение сумм одной валюты.

        Returns:
            -1 если self < other, 0 если равны, 1 если self > other
        """
        self._ensure_same_currency(other)
        if self.amount_cents < other.amount_cents:
            return -1
        if self.amount_cents > other.amount_cents:
            return 1
        return 0

    def min_with(self, other: "Money") -> "Money":
        """Меньшая из двух сумм (при равенстве - self)."""
        return other if self.compare(other) > 0 else self

    def __str__(self) -> str:
        return f"{self.amount_cents} {self.currency}"
