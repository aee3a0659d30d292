"""
Project Domain Models (``ledger_modules.project.models``).

Responsibility
--------------
Frozen dataclass value objects for projects.  Amendments and ledger
summaries are engine types (``ledger_engines.amendments``) re-exported
here so callers import every project noun from one place.

Invariants enforced
-------------------
* All models are ``frozen=True`` (immutable after construction).
* All monetary fields use ``Decimal`` -- NEVER ``float``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from ledger_engines.amendments import Amendment, AmendmentKind, LedgerSummary


@dataclass(frozen=True)
class Project:
    """A funded project with an execution window."""
    id: UUID
    code: str
    name: str
    start_date: date
    end_date: date
    total_value: Decimal
    entity_contribution: Decimal = Decimal("0")
    university_contribution: Decimal = Decimal("0")
    currency: str = "COP"
    is_active: bool = True
    description: str | None = None


__all__ = [
    "Amendment",
    "AmendmentKind",
    "LedgerSummary",
    "Project",
]
