"""
ledger_config -- single public entrypoint for runtime settings.

Responsibility:
    ``get_active_config()`` is the only way services obtain settings.  It
    loads a YAML settings file, validates it against the engine contracts,
    and returns a frozen ``LedgerSettings``.

Architecture position:
    Configuration -- sits above ``ledger_kernel`` and ``ledger_engines``
    and below ``ledger_modules``.  The kernel MUST NEVER import from
    ``ledger_config``.

Failure modes:
    - ``FileNotFoundError`` -- settings file does not exist.
    - ``ConfigValidationError`` -- one or more validation errors.

Audit relevance:
    Every successful call emits a ``LEDGER_CONFIG_TRACE`` log entry with
    the settings name, version and checksum.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ledger_config.loader import load_settings
from ledger_config.schema import DatabaseSettings, LedgerSettings, LoggingSettings
from ledger_config.validator import ConfigValidationError, validate_settings

_logger = logging.getLogger("ledger.config")

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(path: Path | None = None) -> LedgerSettings:
    """Load, validate and return the active settings.

    Args:
        path: Settings file to load. Defaults to ledger_config/sets/default.yaml.

    Raises:
        FileNotFoundError: If the settings file does not exist.
        ConfigValidationError: If validation finds any error.
    """
    settings = load_settings(path or DEFAULT_SETTINGS_PATH)

    result = validate_settings(settings)
    if not result.is_valid:
        raise ConfigValidationError(list(result.errors))

    _logger.info(
        "LEDGER_CONFIG_TRACE",
        extra={
            "trace_type": "LEDGER_CONFIG_TRACE",
            "settings_name": settings.name,
            "settings_version": settings.version,
            "checksum": settings.checksum,
            "engines": sorted(settings.engines),
        },
    )
    return settings


__all__ = [
    "ConfigValidationError",
    "DatabaseSettings",
    "DEFAULT_SETTINGS_PATH",
    "LedgerSettings",
    "LoggingSettings",
    "get_active_config",
    "validate_settings",
]
