"""
TaxPolicy - Ставки НДС/GST по странам

Чистый lookup: код страны -> Percentage. Таблица read-only после
инициализации, поэтому экземпляр безопасно разделяется между
конкурентными расчётами без синхронизации.

Калькулятор зависит от протокола TaxPolicy, а не от StaticTaxPolicy:
альтернативный источник ставок (например per-tenant) подставляется
без изменения калькулятора.
"""

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Protocol

from src.core.domain.percentage import Percentage
from src.core.errors import UnsupportedCountry


# Ставки по умолчанию (проценты)
DEFAULT_TAX_RATES: Mapping[str, Decimal] = MappingProxyType(
    {
        "FR": Decimal("20.0"),
        "DE": Decimal("19.0"),
        "US": Decimal("0.0"),
        "CA": Decimal("5.0"),
    }
)


@dataclass(frozen=True)
class TaxRule:
    """Ставка налога страны"""

    country_code: str
    rate: Percentage


class TaxPolicy(Protocol):
    """Источник ставок налога"""

    def rate_for(self, country_code: str) -> Percentage:
        ...


def normalize_country_code(country_code: str | None) -> str:
    """'fr ' -> 'FR'"""
    return (country_code or "").strip().upper()


class StaticTaxPolicy:
    """
    Политика налога на статической таблице.

    Правила строятся один раз в конструкторе (валидация ставок сразу,
    а не при первом расчёте).
    """

    def __init__(self, rates: Mapping[str, Decimal | int | float | str] | None = None):
        source = DEFAULT_TAX_RATES if rates is None else rates
        rules = {}
        for code, rate in source.items():
            normalized = normalize_country_code(code)
            rules[normalized] = TaxRule(country_code=normalized, rate=Percentage(value=rate))
        self._rules: Mapping[str, TaxRule] = MappingProxyType(rules)

    def rule_for(self, country_code: str) -> TaxRule:
        """
        Правило для страны.

        Raises:
            UnsupportedCountry: Страны нет в таблице
        """
        normalized = normalize_country_code(country_code)
        rule = self._rules.get(normalized)
        if rule is None:
            raise UnsupportedCountry(f"Unsupported country code: {country_code!r}")
        return rule

    def rate_for(self, country_code: str) -> Percentage:
        return self.rule_for(country_code).rate

    def supported_countries(self) -> tuple[str, ...]:
        return tuple(sorted(self._rules))
