"""Project Module Configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Self

from ledger_config.schema import LedgerSettings
from ledger_engines.amendments import MAX_EXTENSION_DAYS


@dataclass(frozen=True)
class ProjectConfig:
    """Configuration for the project module."""
    currency: str = "COP"
    amount_places: int = 2
    require_justification: bool = True
    max_extension_days: int = MAX_EXTENSION_DAYS

    @classmethod
    def from_settings(cls, settings: LedgerSettings) -> Self:
        ledger = settings.engine_parameters("amendment_ledger")
        terms = settings.engine_parameters("project_terms")
        return cls(
            currency=terms["currency"].upper(),
            amount_places=ledger["amount_places"],
            require_justification=ledger["require_justification"],
            max_extension_days=ledger["max_extension_days"],
        )
