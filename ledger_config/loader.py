"""
Settings Loader (``ledger_config.loader``).

Responsibility
--------------
Loads a YAML settings file and parses it into ``ledger_config.schema``
dataclasses.  Runtime callers go through ``ledger_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing ``name``/``version`` keys  -> ``KeyError`` propagates.
* Wrong section shape  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from ledger_config.schema import DatabaseSettings, LedgerSettings, LoggingSettings


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ValueError(f"Settings section '{key}' must be a mapping, got {type(value).__name__}")
    return value


def parse_database(data: dict[str, Any]) -> DatabaseSettings:
    defaults = DatabaseSettings()
    return DatabaseSettings(
        url=data.get("url", defaults.url),
        echo=data.get("echo", defaults.echo),
        pool_size=data.get("pool_size", defaults.pool_size),
        max_overflow=data.get("max_overflow", defaults.max_overflow),
    )


def parse_logging(data: dict[str, Any]) -> LoggingSettings:
    return LoggingSettings(level=str(data.get("level", LoggingSettings().level)).upper())


def parse_settings(data: dict[str, Any]) -> LedgerSettings:
    """
    Parse ``LedgerSettings`` from a dict.

    Raises:
        KeyError: if ``name`` or ``version`` is missing.
        ValueError: if a section is not a mapping.
    """
    engines = _section(data, "engines")
    for engine_name, params in engines.items():
        if params is not None and not isinstance(params, dict):
            raise ValueError(f"Parameters for engine '{engine_name}' must be a mapping")

    return LedgerSettings(
        name=data["name"],
        version=int(data["version"]),
        database=parse_database(_section(data, "database")),
        logging=parse_logging(_section(data, "logging")),
        engines={name: dict(params or {}) for name, params in engines.items()},
        checksum=compute_checksum(data),
    )


def load_settings(path: Path) -> LedgerSettings:
    """Load and parse a settings file (no validation)."""
    return parse_settings(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
