"""
JSON Schema Contract Validators

Валидация JSON данных на границе ядра согласно формальным JSON Schema
контрактам. Использует библиотеку jsonschema (Draft 2020-12).

Схемы (src/core/contracts/schema/):
- cart_request.json: вход расчёта корзины
- cart_response.json: success/failure конверт ответа

Контракт проверяет только форму данных (типы, обязательные поля).
Доменные границы (quantity >= 1, цена >= 0, непустая корзина) проверяет
калькулятор, чтобы вернуть точный код ошибки.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Tuple

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы лежат в каталоге schema/ рядом с этим модулем.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'cart_request')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если файл не является валидной JSON Schema
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Валидируем саму схему (meta-validation)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# VIOLATIONS
# =============================================================================


@dataclass(frozen=True)
class ContractViolation:
    """
    Нарушение контракта в стабильной форме.

    path - путь внутри payload через '/', '<root>' для корня. Для
    отсутствующего обязательного поля путь указывает на само поле
    (например, 'items/0/sku'), а не на объект-владелец.
    keyword - ключевое слово JSON Schema, на котором упала проверка.
    """

    path: str
    keyword: str
    message: str

    @property
    def item_index(self) -> int | None:
        """Индекс позиции корзины для нарушений внутри items/<n>/..."""
        parts = self.path.split("/")
        if len(parts) >= 2 and parts[0] == "items" and parts[1].isdigit():
            return int(parts[1])
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "keyword": self.keyword, "message": self.message}

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def _error_path(error: ValidationError) -> List[Any]:
    path = list(error.absolute_path)
    # jsonschema выдаёт отдельную ошибку на каждое отсутствующее поле
    if error.validator == "required" and isinstance(error.instance, dict):
        for name in error.validator_value:
            if name not in error.instance and repr(name) in error.message:
                path.append(name)
                break
    return path


def _path_sort_key(path: List[Any]) -> Tuple:
    # items/2 раньше items/10
    return tuple((0, p, "") if isinstance(p, int) else (1, 0, str(p)) for p in path)


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        """
        Итератор по всем ошибкам валидации.

        Yields:
            ValidationError объекты для каждой найденной ошибки
        """
        return self.validator.iter_errors(data)

    def violations(self, data: Dict[str, Any]) -> Tuple[ContractViolation, ...]:
        """
        Все нарушения контракта, пустой кортеж если данные валидны.

        Порядок детерминирован: по пути (индексы позиций численно),
        затем по keyword и сообщению.
        """
        found = []
        for error in self.iter_errors(data):
            path = _error_path(error)
            violation = ContractViolation(
                path="/".join(str(p) for p in path) or "<root>",
                keyword=str(error.validator),
                message=error.message,
            )
            found.append((_path_sort_key(path), violation.keyword, violation.message, violation))
        found.sort(key=lambda entry: entry[:3])
        return tuple(entry[3] for entry in found)

    def describe_errors(self, data: Dict[str, Any]) -> str:
        """Человекочитаемое описание нарушений: 'path: message; ...', '' если валидно."""
        return "; ".join(str(v) for v in self.violations(data))


class CartRequestValidator(ContractValidator):
    """Валидатор для cart_request контракта."""

    def __init__(self):
        super().__init__("cart_request")


class CartResponseValidator(ContractValidator):
    """Валидатор для cart_response контракта."""

    def __init__(self):
        super().__init__("cart_response")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_cart_request(data: Dict[str, Any]) -> None:
    """
    Валидация cart_request данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    CartRequestValidator().validate(data)


def validate_cart_response(data: Dict[str, Any]) -> None:
    """
    Валидация cart_response данных.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    CartResponseValidator().validate(data)
