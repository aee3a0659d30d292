"""
SQLAlchemy ORM persistence models for the Project module.

Responsibility
--------------
Database-backed persistence for projects and their amendments.  The
ledger summary is derived on every read and is never stored.

Architecture position
---------------------
**Modules layer** -- ORM models consumed by ``SqlAlchemyProjectRepository``.
Inherits from ``TrackedBase`` (kernel db layer).

Invariants enforced
-------------------
* All monetary fields use ``Decimal`` (Numeric(38,9)) -- NEVER float.
* Enum fields stored as String(30) for readability and portability.
* ``(project_id, sequence)`` is unique: insertion order is authoritative.
* ``ProjectModel.amendment_seq`` only grows, so a deleted amendment's
  sequence is never handed out again.
* Amendment rows are append-only (UPDATE guard registered by
  ``ledger_modules._orm_registry``).
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_kernel.db.base import TrackedBase, as_utc

# ---------------------------------------------------------------------------
# ProjectModel
# ---------------------------------------------------------------------------


class ProjectModel(TrackedBase):
    """
    A funded project with an execution window.

    Maps to the ``Project`` DTO in ``ledger_modules.project.models``.

    Guarantees:
        - ``code`` is unique across all projects.
        - ``entity_contribution + university_contribution <= total_value``
          (checked by the service before insert).
    """

    __tablename__ = "project_projects"

    __table_args__ = (
        UniqueConstraint("code", name="uq_project_code"),
        Index("idx_project_active", "is_active"),
    )

    code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_value: Mapped[Decimal] = mapped_column(nullable=False)
    entity_contribution: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    university_contribution: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="COP")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    amendment_seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    amendments: Mapped[list["ProjectAmendmentModel"]] = relationship(
        "ProjectAmendmentModel",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectAmendmentModel.sequence",
    )

    def to_dto(self):
        from ledger_modules.project.models import Project

        return Project(
            id=self.id,
            code=self.code,
            name=self.name,
            start_date=self.start_date,
            end_date=self.end_date,
            total_value=self.total_value,
            entity_contribution=self.entity_contribution,
            university_contribution=self.university_contribution,
            currency=self.currency,
            is_active=self.is_active,
            description=self.description,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "ProjectModel":
        return cls(
            id=dto.id,
            code=dto.code,
            name=dto.name,
            description=dto.description,
            start_date=dto.start_date,
            end_date=dto.end_date,
            total_value=dto.total_value,
            entity_contribution=dto.entity_contribution,
            university_contribution=dto.university_contribution,
            currency=dto.currency,
            is_active=dto.is_active,
            amendment_seq=0,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<ProjectModel {self.code}>"


# ---------------------------------------------------------------------------
# ProjectAmendmentModel
# ---------------------------------------------------------------------------


class ProjectAmendmentModel(TrackedBase):
    """
    One recorded amendment of a project.

    Maps to the ``Amendment`` engine type.

    Guarantees:
        - ``kind`` is an ``AmendmentKind`` value.
        - ``added_value`` is set iff the kind adds value;
          ``extension_days`` is set iff the kind extends the term.
        - ``created_at`` is the intake timestamp, non-decreasing by
          ``sequence`` within a project.
    """

    __tablename__ = "project_amendments"

    __table_args__ = (
        UniqueConstraint("project_id", "sequence", name="uq_amendment_project_sequence"),
        Index("idx_amendment_project", "project_id"),
    )

    project_id: Mapped[UUID] = mapped_column(
        ForeignKey("project_projects.id"), nullable=False
    )
    kind: Mapped[str] = mapped_column(String(30), nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    added_value: Mapped[Decimal | None] = mapped_column(nullable=True)
    extension_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    justification: Mapped[str] = mapped_column(Text, nullable=False, default="")
    administrative_act: Mapped[str | None] = mapped_column(String(100), nullable=True)
    approval_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    project: Mapped["ProjectModel"] = relationship(
        "ProjectModel",
        back_populates="amendments",
    )

    def to_dto(self):
        from ledger_engines.amendments import Amendment

        return Amendment(
            id=self.id,
            project_id=self.project_id,
            kind=self.kind,
            sequence=self.sequence,
            created_at=as_utc(self.created_at),
            added_value=self.added_value,
            extension_days=self.extension_days,
            justification=self.justification,
            administrative_act=self.administrative_act,
            approval_date=self.approval_date,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "ProjectAmendmentModel":
        return cls(
            id=dto.id,
            project_id=dto.project_id,
            kind=dto.kind.value,
            sequence=dto.sequence,
            created_at=dto.created_at,
            added_value=dto.added_value,
            extension_days=dto.extension_days,
            justification=dto.justification,
            administrative_act=dto.administrative_act,
            approval_date=dto.approval_date,
            created_by_id=created_by_id,
        )

    def __repr__(self) -> str:
        return f"<ProjectAmendmentModel {self.kind} #{self.sequence}>"
