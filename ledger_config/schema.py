"""
LedgerSettings schema.

Frozen dataclasses parsed from a YAML settings file by the loader and
checked by the validator.  Engine parameters are kept as raw dicts here;
their shape is owned by ``ledger_engines.contracts``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class DatabaseSettings:
    """Connection settings handed to ``ledger_kernel.db.engine``."""

    url: str = "sqlite://"
    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 5


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


@dataclass(frozen=True)
class LedgerSettings:
    """
    Complete runtime settings.

    ``engines`` maps an engine name to the parameters supplied in the
    settings file; ``engine_parameters()`` merges them over the engine
    contract defaults.
    """

    name: str
    version: int
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    engines: dict[str, dict[str, Any]] = field(default_factory=dict)
    checksum: str = ""

    def engine_parameters(self, engine_name: str) -> dict[str, Any]:
        from ledger_engines.contracts import ENGINE_CONTRACTS

        params = dict(ENGINE_CONTRACTS[engine_name].defaults)
        params.update(self.engines.get(engine_name, {}))
        return params
