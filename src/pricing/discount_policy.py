"""
DiscountPolicy - Коды скидок и расчёт суммы скидки

Правила:
- PercentageDiscount: amount = round_half_up(subtotal * rate / 100),
  затем min(amount, cap) если cap задан
- FixedDiscount: amount = min(fixed, subtotal), скидка никогда не больше
  подытога

apply() возвращает сумму скидки, а не подытог после скидки: вычитание
(с clamp к нулю) делает калькулятор.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Protocol, Union

from src.core.domain.cart import DiscountKind
from src.core.domain.money import Money
from src.core.domain.percentage import Percentage
from src.core.errors import InvalidAmount, InvalidDiscountCode
from src.core.math.rounding import RoundingMode


# =============================================================================
# RULES
# =============================================================================


def _validate_cents(field: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidAmount(f"{field} must be non-negative integer cents, got {value!r}")


@dataclass(frozen=True)
class PercentageDiscount:
    """
    Процентная скидка с необязательным потолком.

    cap_cents хранится без валюты: Money строится в валюте подытога.
    """

    code: str
    rate: Percentage
    cap_cents: int | None = None

    def __post_init__(self) -> None:
        if self.cap_cents is not None:
            _validate_cents("cap_cents", self.cap_cents)

    @property
    def kind(self) -> DiscountKind:
        return DiscountKind.PERCENTAGE

    def cap_in(self, currency: str) -> Money | None:
        if self.cap_cents is None:
            return None
        return Money(amount_cents=self.cap_cents, currency=currency)


@dataclass(frozen=True)
class FixedDiscount:
    """Фиксированная скидка в центах валюты корзины"""

    code: str
    amount_cents: int

    def __post_init__(self) -> None:
        _validate_cents("amount_cents", self.amount_cents)

    @property
    def kind(self) -> DiscountKind:
        return DiscountKind.FIXED

    def amount_in(self, currency: str) -> Money:
        return Money(amount_cents=self.amount_cents, currency=currency)


DiscountRule = Union[PercentageDiscount, FixedDiscount]


def _default_rules() -> dict[str, DiscountRule]:
    return {
        "SAVE10": PercentageDiscount(code="SAVE10", rate=Percentage(value=10)),
        "FLAT500": FixedDiscount(code="FLAT500", amount_cents=500),
        "WELCOME20": PercentageDiscount(
            code="WELCOME20", rate=Percentage(value=20), cap_cents=1000
        ),
    }


DEFAULT_DISCOUNT_RULES: Mapping[str, DiscountRule] = MappingProxyType(_default_rules())


# =============================================================================
# POLICY
# =============================================================================


class DiscountPolicy(Protocol):
    """Источник правил скидок"""

    def resolve(self, code: str | None) -> DiscountRule:
        ...

    def apply(self, rule: DiscountRule, subtotal: Money) -> Money:
        ...


def normalize_discount_code(code: str | None) -> str:
    """' save10' -> 'SAVE10'"""
    return (code or "").strip().upper()


def compute_discount_amount(
    rule: DiscountRule,
    subtotal: Money,
    rounding: RoundingMode = RoundingMode.HALF_UP,
) -> Money:
    """
    Сумма скидки для подытога.

    Args:
        rule: Правило скидки
        subtotal: Подытог корзины
        rounding: Округление процентной скидки

    Returns:
        Сумма скидки, 0 <= amount <= subtotal
    """
    if isinstance(rule, PercentageDiscount):
        amount = subtotal.apply_percentage(rule.rate, rounding)
        cap = rule.cap_in(subtotal.currency)
        if cap is not None:
            amount = amount.min_with(cap)
        return amount

    if isinstance(rule, FixedDiscount):
        return rule.amount_in(subtotal.currency).min_with(subtotal)

    raise TypeError(f"Unknown discount rule: {rule!r}")


class StaticDiscountPolicy:
    """Политика скидок на статической таблице"""

    def __init__(
        self,
        rules: Mapping[str, DiscountRule] | None = None,
        rounding: RoundingMode = RoundingMode.HALF_UP,
    ):
        source = DEFAULT_DISCOUNT_RULES if rules is None else rules
        self._rules: Mapping[str, DiscountRule] = MappingProxyType(
            {normalize_discount_code(code): rule for code, rule in source.items()}
        )
        self._rounding = rounding

    def resolve(self, code: str | None) -> DiscountRule:
        """
        Правило по коду.

        Raises:
            InvalidDiscountCode: Код пустой, None или отсутствует в таблице
        """
        normalized = normalize_discount_code(code)
        if not normalized:
            raise InvalidDiscountCode("Discount code is empty")

        rule = self._rules.get(normalized)
        if rule is None:
            raise InvalidDiscountCode(f"Invalid discount code: {code!r}")
        return rule

    def apply(self, rule: DiscountRule, subtotal: Money) -> Money:
        return compute_discount_amount(rule, subtotal, self._rounding)

    def codes(self) -> tuple[str, ...]:
        return tuple(sorted(self._rules))
