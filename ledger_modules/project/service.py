"""
Project Module Service (``ledger_modules.project.service``).

Responsibility
--------------
Project creation, amendment intake, and ledger read-back.  Validation and
reduction are delegated to ``ledger_engines``; persistence to a
``ProjectRepository``.

Architecture position
---------------------
**Modules layer** -- thin glue.  ``ProjectService`` is the sole public
entry point for project operations.

Invariants enforced
-------------------
* Each write method owns the transaction boundary (``commit`` on success,
  ``rollback`` on any exception, which is then re-raised).
* ``validate_amendment`` runs before an amendment is admitted; an invalid
  amendment never reaches the repository.
* Amendment ``created_at`` never precedes the previous amendment's
  timestamp for the same project.
* The ledger summary is recomputed on every read, never cached or stored.

Audit relevance
---------------
Structured log events at operation start and commit/rollback for every
write, carrying project and amendment IDs.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from ledger_config.schema import LedgerSettings
from ledger_engines.amendments import (
    Amendment,
    AmendmentKind,
    LedgerSummary,
    projected_end_date,
    replay,
    summarize,
    validate_amendment,
)
from ledger_engines.project_terms import validate_funding, validate_project_window
from ledger_kernel.domain.clock import Clock, SystemClock
from ledger_kernel.domain.values import format_amount, to_date
from ledger_kernel.exceptions import InvalidAmendmentError
from ledger_kernel.logging_config import LogContext, get_logger
from ledger_modules.project.config import ProjectConfig
from ledger_modules.project.models import Project
from ledger_modules.project.repository import (
    ProjectRepository,
    SqlAlchemyProjectRepository,
)

logger = get_logger("modules.project.service")

SYSTEM_ACTOR_ID = UUID("00000000-0000-0000-0000-000000000000")


class ProjectService:
    """
    Orchestrates project operations through the engines and a repository.

    Guarantees
    ----------
    * Clock is injectable for deterministic testing.
    * All monetary values are ``Decimal`` -- NEVER ``float``.

    Non-goals
    ---------
    * Does NOT format or localize values for display.
    * Does NOT authenticate or authorize actors.
    """

    def __init__(
        self,
        repository: ProjectRepository,
        clock: Clock | None = None,
        config: ProjectConfig | None = None,
    ):
        self._repository = repository
        self._clock = clock or SystemClock()
        self._config = config or ProjectConfig()

    @classmethod
    def for_session(
        cls,
        session: Session,
        settings: LedgerSettings | None = None,
        clock: Clock | None = None,
    ) -> "ProjectService":
        """Build a service over a SQLAlchemy session."""
        config = ProjectConfig.from_settings(settings) if settings else None
        return cls(SqlAlchemyProjectRepository(session), clock=clock, config=config)

    # =========================================================================
    # Projects
    # =========================================================================

    def create_project(
        self,
        code: str,
        name: str,
        start_date: date | str,
        end_date: date | str,
        total_value: Decimal | str | int,
        entity_contribution: Decimal | str | int = Decimal("0"),
        university_contribution: Decimal | str | int = Decimal("0"),
        description: str | None = None,
        actor_id: UUID | None = None,
    ) -> Project:
        """Validate window and funding, then register the project."""
        logger.info("project_create_started", extra={"project_code": code})
        try:
            window = validate_project_window(start_date, end_date)
            funding = validate_funding(
                total_value, entity_contribution, university_contribution
            )
            project = Project(
                id=uuid4(),
                code=code,
                name=name,
                start_date=window.start_date,
                end_date=window.end_date,
                total_value=funding.total_value,
                entity_contribution=funding.contribution_a,
                university_contribution=funding.contribution_b,
                currency=self._config.currency,
                description=description,
            )
            self._repository.add_project(project, actor_id or SYSTEM_ACTOR_ID)
            self._repository.commit()
        except Exception:
            self._repository.rollback()
            logger.warning(
                "project_create_rejected",
                extra={"project_code": code},
                exc_info=True,
            )
            raise

        logger.info(
            "project_created",
            extra={"project_id": str(project.id), "project_code": code},
        )
        return project

    def get_project(self, project_id: UUID) -> Project:
        return self._repository.get_project(project_id)

    def list_projects(self, active_only: bool = False) -> list[Project]:
        return self._repository.list_projects(active_only=active_only)

    # =========================================================================
    # Amendments
    # =========================================================================

    def record_amendment(
        self,
        project_id: UUID,
        kind: AmendmentKind | str,
        added_value: Any = None,
        extension_days: Any = None,
        justification: str = "",
        administrative_act: str | None = None,
        approval_date: date | str | None = None,
        actor_id: UUID | None = None,
    ) -> Amendment:
        """
        Validate and append an amendment to a project's ledger.

        Raises:
            ProjectNotFoundError: unknown project.
            InvalidAmendmentError: the amendment fails its kind's contract,
                lacks a required justification, or has a malformed
                approval date, or would push the effective value or end
                date out of range.
        """
        with LogContext.bind(project_id=str(project_id)):
            logger.info("amendment_record_started", extra={"kind": str(kind)})
            try:
                project = self._repository.get_project(project_id)
                terms = validate_amendment(
                    kind,
                    added_value,
                    extension_days,
                    max_extension_days=self._config.max_extension_days,
                )

                justification = (justification or "").strip()
                if self._config.require_justification and not justification:
                    raise InvalidAmendmentError(
                        terms.kind.value, "justification", justification,
                        "Justification is required",
                    )

                approved_on = None
                if approval_date:
                    try:
                        approved_on = to_date(approval_date)
                    except ValueError as e:
                        raise InvalidAmendmentError(
                            terms.kind.value, "approval_date", approval_date,
                            "Approval date must be an ISO calendar date",
                        ) from e

                created_at = self._clock.now_utc()
                existing = self._repository.list_amendments(project_id)
                if existing and existing[-1].created_at > created_at:
                    created_at = existing[-1].created_at

                amendment = Amendment(
                    id=uuid4(),
                    project_id=project_id,
                    kind=terms.kind,
                    sequence=self._repository.next_amendment_sequence(project_id),
                    created_at=created_at,
                    added_value=terms.added_value,
                    extension_days=terms.extension_days,
                    justification=justification,
                    administrative_act=administrative_act or None,
                    approval_date=approved_on,
                )
                # The ledger must still replay with the new entry appended.
                summarize(project.total_value, project.end_date, [*existing, amendment])
                self._repository.add_amendment(amendment, actor_id or SYSTEM_ACTOR_ID)
                self._repository.commit()
            except Exception:
                self._repository.rollback()
                logger.warning("amendment_rejected", exc_info=True)
                raise

            logger.info(
                "amendment_recorded",
                extra={
                    "amendment_id": str(amendment.id),
                    "kind": amendment.kind,
                    "sequence": amendment.sequence,
                    "added_value": amendment.added_value,
                    "extension_days": amendment.extension_days,
                },
            )
            return amendment

    def list_amendments(self, project_id: UUID) -> list[Amendment]:
        """Amendments of a project in insertion order."""
        return self._repository.list_amendments(project_id)

    def delete_amendment(self, amendment_id: UUID) -> Amendment:
        """Remove an amendment; its sequence number is not reused."""
        with LogContext.bind(amendment_id=str(amendment_id)):
            try:
                amendment = self._repository.delete_amendment(amendment_id)
                self._repository.commit()
            except Exception:
                self._repository.rollback()
                logger.warning("amendment_delete_failed", exc_info=True)
                raise
            logger.info(
                "amendment_deleted",
                extra={"project_id": str(amendment.project_id)},
            )
            return amendment

    # =========================================================================
    # Ledger read-back
    # =========================================================================

    def get_summary(self, project_id: UUID) -> LedgerSummary:
        """Current effective terms, replayed from the stored amendments."""
        project = self._repository.get_project(project_id)
        amendments = self._repository.list_amendments(project_id)
        return summarize(project.total_value, project.end_date, amendments)

    def get_history(self, project_id: UUID) -> tuple[LedgerSummary, ...]:
        """Opening terms followed by the effective terms after each amendment."""
        project = self._repository.get_project(project_id)
        amendments = self._repository.list_amendments(project_id)
        return replay(project.total_value, project.end_date, amendments)

    def preview_end_date(self, project_id: UUID, extension_days: Any) -> date:
        """End date a proposed extension would produce from the current one."""
        summary = self.get_summary(project_id)
        return projected_end_date(
            summary.current_end_date,
            extension_days,
            max_extension_days=self._config.max_extension_days,
        )

    def summary_payload(self, project_id: UUID) -> dict[str, Any]:
        """Wire form of the summary for presentation layers."""
        project = self._repository.get_project(project_id)
        summary = self.get_summary(project_id)
        places = self._config.amount_places
        payload = {
            "project_id": str(project.id),
            "project_code": project.code,
            "currency": project.currency,
            "original_value": format_amount(project.total_value, places),
            "original_end_date": project.end_date.isoformat(),
        }
        payload.update(summary.to_wire(places))
        return payload
