"""
Module: ledger_engines.contracts
Responsibility:
    The tunable knobs of the ledger engines.  Each EngineContract names an
    engine, versions it, and describes its settings-file parameters as a
    JSON Schema fragment plus defaults; ``ledger_config`` checks the
    ``engines:`` section of a settings file against these.

Architecture position:
    Engines -- pure calculation layer, zero I/O.

Invariants enforced:
    - Adding a new engine requires only a new EngineContract and its
      registration in ``ENGINE_CONTRACTS``.

Failure modes:
    - KeyError when looking up an unregistered engine name in
      ``ENGINE_CONTRACTS``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EngineContract:
    """Parameter declaration for one engine.

    Attributes:
        engine_name: Key used under ``engines:`` in settings files.
        engine_version: Version of the engine behaviour these parameters drive.
        parameter_schema: JSON Schema object describing accepted parameters.
        defaults: Values applied when a settings file omits a parameter.
        description: One-line summary shown in diagnostics.
    """

    engine_name: str
    engine_version: str
    parameter_schema: dict[str, Any]
    defaults: dict[str, Any]
    description: str = ""


# ---------------------------------------------------------------------------
# Amendment Ledger
# ---------------------------------------------------------------------------

AMENDMENT_LEDGER_CONTRACT = EngineContract(
    engine_name="amendment_ledger",
    engine_version="1.0",
    parameter_schema={
        "type": "object",
        "properties": {
            "amount_places": {
                "type": "integer",
                "minimum": 0,
                "maximum": 9,
                "description": "Decimal places used when rendering summary amounts",
            },
            "require_justification": {
                "type": "boolean",
                "description": "Reject amendments recorded without a justification",
            },
            "max_extension_days": {
                "type": "integer",
                "minimum": 1,
                "maximum": 36500,
                "description": "Longest single extension an amendment may carry",
            },
        },
        "additionalProperties": False,
    },
    defaults={
        "amount_places": 2,
        "require_justification": True,
        "max_extension_days": 36500,
    },
    description="Replays project amendments into effective value and end date.",
)


# ---------------------------------------------------------------------------
# Project Terms
# ---------------------------------------------------------------------------

PROJECT_TERMS_CONTRACT = EngineContract(
    engine_name="project_terms",
    engine_version="1.0",
    parameter_schema={
        "type": "object",
        "properties": {
            "currency": {
                "type": "string",
                "minLength": 3,
                "maxLength": 3,
                "description": "ISO 4217 code assigned to new projects",
            },
        },
        "additionalProperties": False,
    },
    defaults={"currency": "COP"},
    description="Validates project execution windows and funding splits.",
)


# ---------------------------------------------------------------------------
# Registry of all engine contracts
# ---------------------------------------------------------------------------

ENGINE_CONTRACTS: dict[str, EngineContract] = {
    contract.engine_name: contract
    for contract in (
        AMENDMENT_LEDGER_CONTRACT,
        PROJECT_TERMS_CONTRACT,
    )
}
