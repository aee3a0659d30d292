"""
Settings validator.

Checks a parsed ``LedgerSettings`` against the engine contracts'
``parameter_schema``, using basic type, enum and range checks from the
JSON Schema properties (no jsonschema dependency).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ledger_config.schema import LedgerSettings
from ledger_engines.contracts import ENGINE_CONTRACTS

_LOG_LEVELS = frozenset(logging.getLevelNamesMapping())


class ConfigValidationError(ValueError):
    """Settings failed validation; ``errors`` lists every problem found."""

    code: str = "CONFIG_VALIDATION_ERROR"

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(
            "Settings validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )


@dataclass(frozen=True)
class ValidationResult:
    errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_settings(settings: LedgerSettings) -> ValidationResult:
    errors: list[str] = []

    if not settings.database.url:
        errors.append("database.url must not be empty")
    if settings.database.pool_size < 1:
        errors.append(f"database.pool_size must be >= 1, got {settings.database.pool_size}")
    if settings.logging.level not in _LOG_LEVELS:
        errors.append(f"logging.level '{settings.logging.level}' is not a logging level")

    for engine_name, params in settings.engines.items():
        contract = ENGINE_CONTRACTS.get(engine_name)
        if contract is None:
            errors.append(f"Unknown engine '{engine_name}'")
            continue
        _validate_engine_params(engine_name, params, contract.parameter_schema, errors)

    return ValidationResult(errors=tuple(errors))


def _validate_engine_params(
    engine_name: str,
    params: dict[str, Any],
    schema: dict[str, Any],
    errors: list[str],
) -> None:
    properties = schema.get("properties", {})
    for param_name, value in params.items():
        if param_name not in properties:
            if schema.get("additionalProperties") is False:
                errors.append(f"Engine '{engine_name}' has unknown parameter '{param_name}'")
            continue
        _validate_param_value(engine_name, param_name, value, properties[param_name], errors)


def _validate_param_value(
    engine_name: str,
    param_name: str,
    value: Any,
    schema: dict[str, Any],
    errors: list[str],
) -> None:
    """Validate a single parameter value against its JSON Schema property."""
    expected_type = schema.get("type")
    if expected_type and not _check_json_type(value, expected_type):
        errors.append(
            f"Engine '{engine_name}' parameter '{param_name}' "
            f"has type {type(value).__name__}, expected {expected_type}"
        )
        return

    if "enum" in schema and value not in schema["enum"]:
        errors.append(
            f"Engine '{engine_name}' parameter '{param_name}' "
            f"value {value!r} not in allowed values: {schema['enum']}"
        )

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if "minimum" in schema and value < schema["minimum"]:
            errors.append(
                f"Engine '{engine_name}' parameter '{param_name}' "
                f"value {value} is below minimum {schema['minimum']}"
            )
        if "maximum" in schema and value > schema["maximum"]:
            errors.append(
                f"Engine '{engine_name}' parameter '{param_name}' "
                f"value {value} is above maximum {schema['maximum']}"
            )

    if isinstance(value, str):
        if "minLength" in schema and len(value) < schema["minLength"]:
            errors.append(
                f"Engine '{engine_name}' parameter '{param_name}' "
                f"is shorter than {schema['minLength']} characters"
            )
        if "maxLength" in schema and len(value) > schema["maxLength"]:
            errors.append(
                f"Engine '{engine_name}' parameter '{param_name}' "
                f"is longer than {schema['maxLength']} characters"
            )


def _check_json_type(value: Any, json_type: str) -> bool:
    """Check if a Python value matches a JSON Schema type."""
    if json_type == "string":
        return isinstance(value, str)
    if json_type == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if json_type == "integer":
        return isinstance(value, int) and not isinstance(value, bool)
    if json_type == "boolean":
        return isinstance(value, bool)
    if json_type == "array":
        return isinstance(value, (list, tuple))
    if json_type == "object":
        return isinstance(value, dict)
    return True
