"""
Tests for JSON Schema Contract Validators and the service facade

Комплексное тестирование:
- Валидность самих схем
- Валидация правильных данных
- Детекция нарушений required полей и типов
- Success/failure конверты CartPricingService
- Соответствие ответов контракту cart_response
"""

import json

import pytest
from jsonschema import Draft202012Validator, ValidationError

from src.core.contracts import (
    CartRequestValidator,
    CartResponseValidator,
    ContractViolation,
    SchemaLoader,
    validate_cart_request,
    validate_cart_response,
)
from src.pricing import CartPricingService, calculate_cart


# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_request():
    """Валидный cart_request для тестирования."""
    return {
        "items": [
            {"sku": "TSHIRT-M", "name": "T-shirt", "quantity": 2, "unit_price": 2999},
            {"sku": "HOODIE-L", "name": "Hoodie", "quantity": 1, "unit_price": 4999},
        ],
        "discount_code": None,
        "country_code": "FR",
        "taxes_included": True,
    }


@pytest.fixture
def service():
    return CartPricingService()


# =============================================================================
# SCHEMAS
# =============================================================================


class TestSchemaLoader:
    """Загрузка и meta-валидация схем"""

    @pytest.mark.parametrize("schema_name", ["cart_request", "cart_response"])
    def test_schemas_are_valid(self, schema_name: str) -> None:
        schema = SchemaLoader().load_schema(schema_name)
        Draft202012Validator.check_schema(schema)

    def test_schema_cached(self) -> None:
        loader = SchemaLoader()
        assert loader.load_schema("cart_request") is loader.load_schema("cart_request")

    def test_missing_schema(self) -> None:
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("does_not_exist")

    def test_missing_directory(self, tmp_path) -> None:
        with pytest.raises(RuntimeError):
            SchemaLoader(tmp_path / "nope")

    def test_invalid_schema_file(self, tmp_path) -> None:
        (tmp_path / "broken.json").write_text(json.dumps({"type": 42}), encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON Schema"):
            SchemaLoader(tmp_path).load_schema("broken")


# =============================================================================
# CART REQUEST CONTRACT
# =============================================================================


class TestCartRequestContract:
    """Контракт cart_request"""

    def test_valid_request(self, valid_request) -> None:
        validate_cart_request(valid_request)

    def test_domain_bounds_left_to_calculator(self, valid_request) -> None:
        """Пустая корзина, quantity=0 и отрицательная цена проходят контракт"""
        valid_request["items"][0]["quantity"] = 0
        valid_request["items"][1]["unit_price"] = -1
        validate_cart_request(valid_request)
        validate_cart_request({**valid_request, "items": []})

    @pytest.mark.parametrize("field", ["items", "country_code", "taxes_included"])
    def test_missing_required(self, valid_request, field: str) -> None:
        del valid_request[field]
        with pytest.raises(ValidationError):
            validate_cart_request(valid_request)

    @pytest.mark.parametrize(
        "field, value",
        [("quantity", 1.5), ("quantity", "2"), ("unit_price", 29.99), ("unit_price", True)],
    )
    def test_item_type_violations(self, valid_request, field: str, value) -> None:
        valid_request["items"][0][field] = value
        assert not CartRequestValidator().is_valid(valid_request)

    def test_unknown_field_rejected(self, valid_request) -> None:
        valid_request["coupon"] = "SAVE10"
        assert not CartRequestValidator().is_valid(valid_request)

    def test_describe_errors(self, valid_request) -> None:
        valid_request["items"][0]["quantity"] = "two"
        message = CartRequestValidator().describe_errors(valid_request)
        assert message.startswith("items/0/quantity:")

    def test_describe_errors_empty_for_valid(self, valid_request) -> None:
        assert CartRequestValidator().describe_errors(valid_request) == ""

    def test_violations_empty_for_valid(self, valid_request) -> None:
        assert CartRequestValidator().violations(valid_request) == ()


class TestContractViolations:
    """Структурированные нарушения cart_request"""

    def test_missing_field_points_at_field(self, valid_request) -> None:
        del valid_request["country_code"]
        (violation,) = CartRequestValidator().violations(valid_request)

        assert violation == ContractViolation(
            path="country_code",
            keyword="required",
            message="'country_code' is a required property",
        )
        assert violation.item_index is None
        assert violation.to_dict() == {
            "path": "country_code",
            "keyword": "required",
            "message": "'country_code' is a required property",
        }

    def test_missing_item_field(self, valid_request) -> None:
        del valid_request["items"][1]["unit_price"]
        (violation,) = CartRequestValidator().violations(valid_request)

        assert violation.path == "items/1/unit_price"
        assert violation.item_index == 1

    def test_item_order_is_numeric(self) -> None:
        payload = {
            "items": [{"sku": "A", "quantity": 1, "unit_price": 1} for _ in range(11)],
            "country_code": "FR",
            "taxes_included": True,
        }
        payload["items"][10]["quantity"] = "x"
        payload["items"][2]["quantity"] = "y"

        violations = CartRequestValidator().violations(payload)

        assert [v.path for v in violations] == ["items/2/quantity", "items/10/quantity"]
        assert [v.item_index for v in violations] == [2, 10]
        assert all(v.keyword == "type" for v in violations)

    def test_stable_across_calls(self, valid_request) -> None:
        valid_request["items"][0]["quantity"] = 1.5
        del valid_request["taxes_included"]
        validator = CartRequestValidator()

        first = validator.violations(valid_request)
        assert first == validator.violations(valid_request)
        assert [v.path for v in first] == ["items/0/quantity", "taxes_included"]
        assert validator.describe_errors(valid_request) == "; ".join(str(v) for v in first)


# =============================================================================
# SERVICE FACADE
# =============================================================================


class TestCartPricingService:
    """Success/failure конверты"""

    def test_success_envelope(self, service: CartPricingService, valid_request) -> None:
        response = service.handle(valid_request)

        assert response["success"] is True
        assert response["currency"] == "EUR"
        cart = response["cart"]
        assert cart["subtotal"] == 10997
        assert cart["discount"] is None
        assert cart["subtotal_after_discount"] == 10997
        assert cart["tax"] == {"rate": 20.0, "amount": 1833, "included": True}
        assert cart["total"] == 10997
        assert cart["items"][0] == {
            "sku": "TSHIRT-M",
            "name": "T-shirt",
            "quantity": 2,
            "unit_price": 2999,
            "line_total": 5998,
        }
        validate_cart_response(response)

    def test_success_with_discount(self, service: CartPricingService, valid_request) -> None:
        valid_request["items"] = [{"sku": "A", "name": "A", "quantity": 1, "unit_price": 10000}]
        valid_request["discount_code"] = "SAVE10"
        response = service.handle(valid_request)

        assert response["cart"]["discount"] == {
            "code": "SAVE10",
            "type": "percentage",
            "value": 10,
            "amount": 1000,
        }
        assert response["cart"]["total"] == 9000
        validate_cart_response(response)

    def test_added_taxes(self, service: CartPricingService) -> None:
        response = service.handle(
            {
                "items": [{"sku": "A", "quantity": 1, "unit_price": 10000}],
                "country_code": "DE",
                "taxes_included": False,
            }
        )
        assert response["cart"]["tax"] == {"rate": 19.0, "amount": 1900, "included": False}
        assert response["cart"]["total"] == 11900
        validate_cart_response(response)

    @pytest.mark.parametrize(
        "patch, code",
        [
            ({"items": []}, "EMPTY_CART"),
            ({"items": [{"sku": "A", "quantity": 0, "unit_price": 100}]}, "INVALID_QUANTITY"),
            ({"items": [{"sku": "A", "quantity": -1, "unit_price": 100}]}, "INVALID_QUANTITY"),
            ({"items": [{"sku": "A", "quantity": 1, "unit_price": -100}]}, "INVALID_UNIT_PRICE"),
            ({"discount_code": "INVALID123"}, "INVALID_DISCOUNT_CODE"),
            ({"country_code": "JP"}, "UNSUPPORTED_COUNTRY"),
        ],
    )
    def test_domain_failures(
        self, service: CartPricingService, valid_request, patch: dict, code: str
    ) -> None:
        response = service.handle({**valid_request, **patch})

        assert response["success"] is False
        assert response["error"]["code"] == code
        assert response["error"]["message"]
        assert "cart" not in response
        validate_cart_response(response)

    def test_contract_failure(self, service: CartPricingService, valid_request) -> None:
        del valid_request["country_code"]
        response = service.handle(valid_request)

        assert response["success"] is False
        assert response["error"]["code"] == "INVALID_REQUEST"
        assert "country_code" in response["error"]["message"]
        validate_cart_response(response)

    @pytest.mark.parametrize("code, amount", [("FLAT500", 500), ("WELCOME20", 1000)])
    def test_currency_override_with_discount(
        self, service: CartPricingService, code: str, amount: int
    ) -> None:
        response = service.handle(
            {
                "items": [{"sku": "A", "quantity": 1, "unit_price": 100000}],
                "discount_code": code,
                "country_code": "US",
                "taxes_included": False,
                "currency": "USD",
            }
        )

        assert response["success"] is True
        assert response["currency"] == "USD"
        assert response["cart"]["discount"]["amount"] == amount
        assert response["cart"]["total"] == 100000 - amount
        validate_cart_response(response)

    def test_calculate_cart_idempotent(self, valid_request) -> None:
        valid_request["discount_code"] = "FLAT500"
        first = json.dumps(calculate_cart(valid_request), sort_keys=True)
        second = json.dumps(calculate_cart(valid_request), sort_keys=True)
        assert first == second

    def test_response_contract_rejects_negative_total(self) -> None:
        response = calculate_cart(
            {
                "items": [{"sku": "A", "quantity": 1, "unit_price": 100}],
                "country_code": "FR",
                "taxes_included": True,
            }
        )
        response["cart"]["total"] = -1
        assert not CartResponseValidator().is_valid(response)
