"""
Contract Validators — проверка внешних payload по JSON Schema

Всё, что приходит в ядро извне в виде сырых dict, проверяется здесь до
построения доменных моделей:
- регистрации администратора (challenge_definition, quest_definition)
- события пула от биржи (liquidity_added, swap_executed)

Схемы лежат в пакете (schema/*.json) и устанавливаются вместе с ним.
Каждая схема компилируется в Draft202012Validator один раз за процесс;
события пула проверяются на горячем пути без повторной компиляции.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Final, Iterator, Optional

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# КОНТРАКТЫ
# =============================================================================

SCHEMA_DIR: Final[Path] = Path(__file__).parent / "schema"

CHALLENGE_DEFINITION: Final[str] = "challenge_definition"
QUEST_DEFINITION: Final[str] = "quest_definition"
LIQUIDITY_ADDED: Final[str] = "liquidity_added"
SWAP_EXECUTED: Final[str] = "swap_executed"

# event_type события пула → имя контракта
POOL_EVENT_CONTRACTS: Final[Dict[str, str]] = {
    "liquidity_added": LIQUIDITY_ADDED,
    "swap_executed": SWAP_EXECUTED,
}


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Чтение и мета-валидация файлов схем.

    Прочитанные схемы кэшируются по имени.
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self._schema_dir = schema_dir or SCHEMA_DIR
        if not self._schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")
        self._schemas: Dict[str, Dict[str, Any]] = {}

    @property
    def schema_dir(self) -> Path:
        return self._schema_dir

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Схема по имени (без расширения).

        Raises:
            FileNotFoundError: Файла схемы нет
            json.JSONDecodeError: Файл не JSON
            ValueError: Файл не является схемой Draft 2020-12
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        path = self._schema_dir / f"{schema_name}.json"
        if not path.is_file():
            raise FileNotFoundError(f"Schema not found: {path}")

        schema = json.loads(path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {path.name}: {e.message}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# VALIDATORS
# =============================================================================


class ContractValidator:
    """Скомпилированный валидатор одного контракта."""

    def __init__(self, schema_name: str, loader: Optional[SchemaLoader] = None):
        self.schema_name = schema_name
        self.schema = (loader or _SCHEMA_LOADER).load_schema(schema_name)
        self._validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: Первое найденное нарушение контракта
        """
        self._validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self._validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        """Все нарушения контракта."""
        return self._validator.iter_errors(data)


@lru_cache(maxsize=None)
def get_validator(schema_name: str) -> ContractValidator:
    """Валидатор контракта, один экземпляр на процесс."""
    return ContractValidator(schema_name)


def validate_contract(schema_name: str, data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: data не соответствует контракту
    """
    get_validator(schema_name).validate(data)


# =============================================================================
# ДОМЕННЫЕ ТОЧКИ ВХОДА
# =============================================================================


def validate_challenge_definition(data: Dict[str, Any]) -> None:
    validate_contract(CHALLENGE_DEFINITION, data)


def validate_quest_definition(data: Dict[str, Any]) -> None:
    validate_contract(QUEST_DEFINITION, data)


def validate_pool_event(payload: Dict[str, Any]) -> str:
    """
    Проверка сырого события пула по контракту его event_type.

    Returns:
        event_type проверенного события

    Raises:
        ValueError: Неизвестный event_type
        ValidationError: Событие не соответствует своему контракту
    """
    event_type = payload.get("event_type") if isinstance(payload, dict) else None
    schema_name = POOL_EVENT_CONTRACTS.get(event_type) if isinstance(event_type, str) else None
    if schema_name is None:
        raise ValueError(f"Unknown pool event type: {event_type!r}")

    validate_contract(schema_name, payload)
    return event_type


__all__ = [
    "SCHEMA_DIR",
    "CHALLENGE_DEFINITION",
    "QUEST_DEFINITION",
    "LIQUIDITY_ADDED",
    "SWAP_EXECUTED",
    "POOL_EVENT_CONTRACTS",
    "SchemaLoader",
    "ContractValidator",
    "ValidationError",
    "get_validator",
    "validate_contract",
    "validate_challenge_definition",
    "validate_quest_definition",
    "validate_pool_event",
]
