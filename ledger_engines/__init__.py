"""
Module: ledger_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for
    ``ledger_modules`` and ``ledger_config``.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ledger_kernel.domain and ledger_kernel.exceptions.
    MUST NOT import ledger_modules or ledger_config.

Invariants enforced:
    - Purity: engines NEVER read the clock, log, or touch storage.
      Timestamps and dates are passed in by the caller.
    - Decimal-only arithmetic for all monetary amounts.
    - Determinism: identical inputs always produce identical outputs.
"""

from ledger_engines.amendments import (
    KIND_ALIASES,
    MAX_EXTENSION_DAYS,
    Amendment,
    AmendmentKind,
    AmendmentTerms,
    LedgerSummary,
    projected_end_date,
    replay,
    summarize,
    validate_amendment,
)
from ledger_engines.contracts import ENGINE_CONTRACTS, EngineContract
from ledger_engines.project_terms import (
    FundingSplit,
    ProjectWindow,
    validate_funding,
    validate_project_window,
)

__all__ = [
    "Amendment",
    "AmendmentKind",
    "AmendmentTerms",
    "ENGINE_CONTRACTS",
    "EngineContract",
    "FundingSplit",
    "KIND_ALIASES",
    "MAX_EXTENSION_DAYS",
    "LedgerSummary",
    "ProjectWindow",
    "projected_end_date",
    "replay",
    "summarize",
    "validate_amendment",
    "validate_funding",
    "validate_project_window",
]
