"""
Rounding - Точное округление денежных величин

Все промежуточные величины считаются в рациональных числах (Fraction),
округление происходит ровно один раз - при переходе обратно в центы.
Float в денежной арифметике не используется.

Режимы:
- HALF_UP: к ближайшему, половина вверх (суммы скидок)
- UP: вверх, ceil (добавленный налог)
- DOWN: вниз, floor (цена без налога при извлечении)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Результат всегда int (центы)
2. Округление детерминировано и не зависит от платформы
3. Отрицательные значения не поддерживаются (деньги >= 0)
"""

import math
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import Union

Rational = Union[int, Decimal, Fraction]


class RoundingMode(str, Enum):
    """Режим округления в центы"""

    HALF_UP = "half_up"
    UP = "up"
    DOWN = "down"


# =============================================================================
# ПРЕОБРАЗОВАНИЯ
# =============================================================================


def to_fraction(value: Rational) -> Fraction:
    """
    Точное рациональное представление значения.

    Decimal преобразуется без потерь (Fraction(Decimal) точен).

    Raises:
        ValueError: Если значение не конечно (NaN/Inf Decimal)
    """
    if isinstance(value, Decimal) and not value.is_finite():
        raise ValueError(f"Value must be finite, got {value}")
    return Fraction(value)


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


def round_half_up(value: Fraction) -> int:
    """
    Округление к ближайшему целому, половина вверх.

    Examples:
        >>> round_half_up(Fraction(5, 2))
        3
        >>> round_half_up(Fraction(249, 100))
        2
    """
    return math.floor(value + Fraction(1, 2))


def round_up(value: Fraction) -> int:
    """Округление вверх (ceil)."""
    return math.ceil(value)


def round_down(value: Fraction) -> int:
    """Округление вниз (floor)."""
    return math.floor(value)


def apply_rounding(value: Rational, mode: RoundingMode) -> int:
    """
    Округление рационального значения в центы по заданному режиму.

    Args:
        value: Значение в центах (может быть дробным)
        mode: Режим округления

    Returns:
        Целое число центов

    Raises:
        ValueError: Если значение отрицательное или режим неизвестен
    """
    exact = to_fraction(value)
    if exact < 0:
        raise ValueError(f"Cannot round negative monetary value: {exact}")

    if mode == RoundingMode.HALF_UP:
        return round_half_up(exact)
    if mode == RoundingMode.UP:
        return round_up(exact)
    if mode == RoundingMode.DOWN:
        return round_down(exact)

    raise ValueError(f"Unknown rounding mode: {mode}")


def percent_of(amount_cents: int, rate: Rational, mode: RoundingMode) -> int:
    """
    amount_cents * rate / 100 с единственным округлением.

    Общая формула для скидок и налога: отличается только режим округления.
    """
    return apply_rounding(Fraction(amount_cents) * to_fraction(rate) / 100, mode)


def extract_inclusive_base(gross_cents: int, rate: Rational) -> int:
    """
    Цена без налога из цены с налогом: floor(gross * 100 / (100 + rate)).

    Налог затем вычисляется как остаток gross - base, поэтому
    base + tax == gross выполняется точно, без утечки округления.

    Examples:
        >>> extract_inclusive_base(10997, 20)
        9164
        >>> extract_inclusive_base(10000, 20)
        8333
    """
    if gross_cents < 0:
        raise ValueError(f"Gross amount cannot be negative: {gross_cents}")
    base = Fraction(gross_cents) * 100 / (100 + to_fraction(rate))
    return round_down(base)
