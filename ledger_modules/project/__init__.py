"""
Project Module (``ledger_modules.project``).

Responsibility
--------------
Projects, their append-only amendment ledgers, and the derived ledger
summary (effective value, effective end date, running totals).

Architecture position
---------------------
**Modules layer** -- DTOs, ORM models, repositories and the
``ProjectService`` facade.  Validation and reduction live in
``ledger_engines``.

Failure modes
-------------
* ``InvalidAmendmentError`` / ``InvalidWindowError`` /
  ``InvalidFundingError`` -- rejected input; nothing is persisted.
* ``ProjectNotFoundError`` / ``AmendmentNotFoundError`` -- unknown IDs.
* ``DuplicateProjectCodeError`` -- project code already registered.
"""

from ledger_modules.project.config import ProjectConfig
from ledger_modules.project.models import (
    Amendment,
    AmendmentKind,
    LedgerSummary,
    Project,
)
from ledger_modules.project.repository import (
    InMemoryProjectRepository,
    ProjectRepository,
    SqlAlchemyProjectRepository,
)
from ledger_modules.project.service import ProjectService

__all__ = [
    "Amendment",
    "AmendmentKind",
    "InMemoryProjectRepository",
    "LedgerSummary",
    "Project",
    "ProjectConfig",
    "ProjectRepository",
    "ProjectService",
    "SqlAlchemyProjectRepository",
]
