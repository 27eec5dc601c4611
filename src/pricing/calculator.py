"""CartCalculator - расчёт подытога, скидки, налога и итога корзины.

Порядок шагов фиксирован:
1. Валидация (EmptyCart, InvalidQuantity, InvalidUnitPrice, CurrencyMismatch)
2. line_total = unit_price * quantity (точно)
3. subtotal = sum(line_total)
4. Скидка: resolve + apply, subtotal_after_discount = max(subtotal - discount, 0)
5. Ставка налога по стране
6. Налог:
   - included: net = floor(sad * 100 / (100 + rate)), vat = sad - net, total = sad
   - added: vat = ceil(sad * rate / 100), total = sad + vat
7. Сборка CartResult

Политика округления:
- процентная скидка: HALF_UP
- добавленный налог: UP
- извлечённый налог: остаток после floor базы, поэтому net + vat == sad
  точно (наивное округление извлечённого НДС вверх ломает это тождество)

Калькулятор stateless: политики read-only, конкурентные вызовы без
синхронизации, повторный вызов с тем же входом даёт тот же результат.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from src.core.domain.cart import (
    CartItem,
    CartRequest,
    CartResult,
    DiscountBreakdown,
    LineItemResult,
    TaxBreakdown,
)
from src.core.domain.money import DEFAULT_CURRENCY, Money
from src.core.domain.percentage import Percentage
from src.core.errors import (
    CurrencyMismatch,
    EmptyCart,
    InvalidQuantity,
    InvalidUnitPrice,
)
from src.core.math.rounding import RoundingMode, extract_inclusive_base
from src.pricing.discount_policy import (
    DiscountPolicy,
    DiscountRule,
    FixedDiscount,
    StaticDiscountPolicy,
)
from src.pricing.tax_policy import StaticTaxPolicy, TaxPolicy, normalize_country_code

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class CalculatorConfig:
    """Конфигурация калькулятора."""

    # Валюта корзины (единственная поддерживаемая)
    currency: str = DEFAULT_CURRENCY

    # Округление добавленного налога
    tax_rounding: RoundingMode = RoundingMode.UP


@dataclass(frozen=True)
class TaxComputation:
    """Промежуточный результат шага 6."""

    net_amount: Money
    tax_amount: Money
    total: Money


# =============================================================================
# CALCULATOR
# =============================================================================


class CartCalculator:
    """Оркестрация Money + Percentage + TaxPolicy + DiscountPolicy.

    Политики внедряются через конструктор; по умолчанию статические таблицы.
    """

    def __init__(
        self,
        tax_policy: TaxPolicy | None = None,
        discount_policy: DiscountPolicy | None = None,
        config: CalculatorConfig | None = None,
    ):
        self.tax_policy = tax_policy or StaticTaxPolicy()
        self.discount_policy = discount_policy or StaticDiscountPolicy()
        self.config = config or CalculatorConfig()

    def calculate_request(self, request: CartRequest) -> CartResult:
        """Расчёт по десериализованному запросу.

        Валидирует сырые позиции (шаг 1) и строит CartItem.

        Raises:
            EmptyCart, InvalidQuantity, InvalidUnitPrice, InvalidDiscountCode,
            UnsupportedCountry, InvalidAmount
        """
        currency = request.currency or self.config.currency
        if not request.items:
            raise EmptyCart("Cart must contain at least one item")

        # Сначала все количества, затем все цены
        for item in request.items:
            if item.quantity < 1:
                raise InvalidQuantity(
                    f"Item {item.sku!r}: quantity must be >= 1, got {item.quantity}"
                )
        for item in request.items:
            if item.unit_price < 0:
                raise InvalidUnitPrice(
                    f"Item {item.sku!r}: unit price cannot be negative, got {item.unit_price}"
                )

        items = [
            CartItem.create(
                sku=item.sku,
                name=item.name,
                quantity=item.quantity,
                unit_price_cents=item.unit_price,
                currency=currency,
            )
            for item in request.items
        ]

        return self.calculate(
            items,
            country_code=request.country_code,
            taxes_included=request.taxes_included,
            discount_code=request.discount_code,
            currency=currency,
        )

    def calculate(
        self,
        items: Sequence[CartItem],
        *,
        country_code: str,
        taxes_included: bool,
        discount_code: str | None = None,
        currency: str | None = None,
    ) -> CartResult:
        """Расчёт корзины.

        Args:
            items: Позиции (непустая последовательность, порядок сохраняется)
            country_code: Код страны для ставки налога
            taxes_included: True - цены включают налог (извлечение),
                False - налог добавляется сверху
            discount_code: Код скидки или None
            currency: Валюта корзины (None -> из конфигурации)

        Returns:
            CartResult

        Raises:
            EmptyCart: Нет позиций
            CurrencyMismatch: Валюта позиции отличается от валюты корзины
            InvalidDiscountCode: Код скидки не найден
            UnsupportedCountry: Нет ставки для страны
        """
        currency = currency or self.config.currency

        # 1. Валидация
        if not items:
            raise EmptyCart("Cart must contain at least one item")
        for item in items:
            if item.unit_price.currency != currency:
                raise CurrencyMismatch(
                    f"Item {item.sku!r} priced in {item.unit_price.currency}, "
                    f"cart currency is {currency}"
                )

        # 2-3. Line totals и подытог
        line_totals = [item.line_total for item in items]
        subtotal = Money.zero(currency)
        for line_total in line_totals:
            subtotal = subtotal.add(line_total)

        # 4. Скидка
        discount: DiscountBreakdown | None = None
        subtotal_after_discount = subtotal
        if discount_code is not None:
            rule = self.discount_policy.resolve(discount_code)
            discount_amount = self.discount_policy.apply(rule, subtotal)
            subtotal_after_discount = subtotal.subtract_clamped(discount_amount)
            discount = self._discount_breakdown(rule, discount_amount)

        # 5. Ставка налога
        rate = self.tax_policy.rate_for(country_code)

        # 6. Налог
        if taxes_included:
            tax = self._extract_included_tax(subtotal_after_discount, rate)
        else:
            tax = self._add_tax(subtotal_after_discount, rate)

        logger.debug(
            "cart computed: subtotal=%s discount=%s after_discount=%s rate=%s "
            "included=%s tax=%s total=%s",
            subtotal.amount_cents,
            discount.amount if discount else None,
            subtotal_after_discount.amount_cents,
            rate.value,
            taxes_included,
            tax.tax_amount.amount_cents,
            tax.total.amount_cents,
        )

        # 7. Сборка результата
        return CartResult(
            items=tuple(
                LineItemResult(
                    sku=item.sku,
                    name=item.name,
                    quantity=item.quantity,
                    unit_price=item.unit_price.amount_cents,
                    line_total=line_total.amount_cents,
                )
                for item, line_total in zip(items, line_totals)
            ),
            subtotal=subtotal.amount_cents,
            discount=discount,
            subtotal_after_discount=subtotal_after_discount.amount_cents,
            tax=TaxBreakdown(
                country_code=normalize_country_code(country_code),
                rate=rate.value,
                amount=tax.tax_amount.amount_cents,
                included=taxes_included,
                net_amount=tax.net_amount.amount_cents,
            ),
            total=tax.total.amount_cents,
            currency=currency,
        )

    # -------------------------------------------------------------------------
    # Налог
    # -------------------------------------------------------------------------

    def _extract_included_tax(self, gross: Money, rate: Percentage) -> TaxComputation:
        """Извлечение налога из суммы с налогом; налог = остаток."""
        net = Money(
            amount_cents=extract_inclusive_base(gross.amount_cents, rate.value),
            currency=gross.currency,
        )
        vat = gross.subtract(net)
        return TaxComputation(net_amount=net, tax_amount=vat, total=gross)

    def _add_tax(self, net: Money, rate: Percentage) -> TaxComputation:
        """Налог сверху: ceil(net * rate / 100)."""
        vat = rate.of(net, self.config.tax_rounding)
        return TaxComputation(net_amount=net, tax_amount=vat, total=net.add(vat))

    # -------------------------------------------------------------------------
    # Скидка
    # -------------------------------------------------------------------------

    @staticmethod
    def _discount_breakdown(rule: DiscountRule, amount: Money) -> DiscountBreakdown:
        if isinstance(rule, FixedDiscount):
            value = Decimal(rule.amount_cents)
        else:
            value = rule.rate.value
        return DiscountBreakdown(
            code=rule.code,
            type=rule.kind,
            value=value,
            amount=amount.amount_cents,
        )
