"""
Project Repositories (``ledger_modules.project.repository``).

Responsibility
--------------
The persistence boundary of the project module.  ``ProjectService``
depends only on the ``ProjectRepository`` interface; the project store is
an external collaborator, never local-only storage.

Implementations
---------------
* ``SqlAlchemyProjectRepository`` -- session-backed; flushes but never
  commits (the service owns the transaction boundary).
* ``InMemoryProjectRepository`` -- dict-backed, for tests and prototypes.

Invariants enforced
-------------------
* ``list_amendments`` returns amendments in insertion (sequence) order.
* ``next_amendment_sequence`` never returns the same value twice for a
  project, even after deletions.
* Project codes are unique.

Failure modes
-------------
* ``ProjectNotFoundError`` / ``AmendmentNotFoundError`` on unknown IDs.
* ``DuplicateProjectCodeError`` when registering an existing code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ledger_engines.amendments import Amendment
from ledger_kernel.exceptions import (
    AmendmentNotFoundError,
    DuplicateProjectCodeError,
    ProjectNotFoundError,
)
from ledger_modules._orm_registry import register_append_only_models
from ledger_modules.project.models import Project
from ledger_modules.project.orm import ProjectAmendmentModel, ProjectModel


class ProjectRepository(ABC):
    """Storage interface for projects and their amendment ledgers."""

    @abstractmethod
    def add_project(self, project: Project, actor_id: UUID) -> None: ...

    @abstractmethod
    def get_project(self, project_id: UUID) -> Project: ...

    @abstractmethod
    def get_project_by_code(self, code: str) -> Project: ...

    @abstractmethod
    def list_projects(self, active_only: bool = False) -> list[Project]: ...

    @abstractmethod
    def next_amendment_sequence(self, project_id: UUID) -> int: ...

    @abstractmethod
    def add_amendment(self, amendment: Amendment, actor_id: UUID) -> None: ...

    @abstractmethod
    def get_amendment(self, amendment_id: UUID) -> Amendment: ...

    @abstractmethod
    def list_amendments(self, project_id: UUID) -> list[Amendment]: ...

    @abstractmethod
    def delete_amendment(self, amendment_id: UUID) -> Amendment: ...

    @abstractmethod
    def commit(self) -> None: ...

    @abstractmethod
    def rollback(self) -> None: ...


class SqlAlchemyProjectRepository(ProjectRepository):
    """``ProjectRepository`` over a SQLAlchemy session."""

    def __init__(self, session: Session):
        register_append_only_models()
        self._session = session

    def _project_model(self, project_id: UUID) -> ProjectModel:
        model = self._session.get(ProjectModel, project_id)
        if model is None:
            raise ProjectNotFoundError(str(project_id))
        return model

    def _amendment_model(self, amendment_id: UUID) -> ProjectAmendmentModel:
        model = self._session.get(ProjectAmendmentModel, amendment_id)
        if model is None:
            raise AmendmentNotFoundError(str(amendment_id))
        return model

    def add_project(self, project: Project, actor_id: UUID) -> None:
        existing = self._session.scalar(
            select(ProjectModel.id).where(ProjectModel.code == project.code)
        )
        if existing is not None:
            raise DuplicateProjectCodeError(project.code)
        self._session.add(ProjectModel.from_dto(project, created_by_id=actor_id))
        self._session.flush()

    def get_project(self, project_id: UUID) -> Project:
        return self._project_model(project_id).to_dto()

    def get_project_by_code(self, code: str) -> Project:
        model = self._session.scalar(
            select(ProjectModel).where(ProjectModel.code == code)
        )
        if model is None:
            raise ProjectNotFoundError(code)
        return model.to_dto()

    def list_projects(self, active_only: bool = False) -> list[Project]:
        stmt = select(ProjectModel).order_by(ProjectModel.code)
        if active_only:
            stmt = stmt.where(ProjectModel.is_active.is_(True))
        return [m.to_dto() for m in self._session.scalars(stmt)]

    def next_amendment_sequence(self, project_id: UUID) -> int:
        model = self._session.get(ProjectModel, project_id, with_for_update=True)
        if model is None:
            raise ProjectNotFoundError(str(project_id))
        model.amendment_seq += 1
        self._session.flush()
        return model.amendment_seq

    def add_amendment(self, amendment: Amendment, actor_id: UUID) -> None:
        self._project_model(amendment.project_id)
        self._session.add(ProjectAmendmentModel.from_dto(amendment, created_by_id=actor_id))
        self._session.flush()

    def get_amendment(self, amendment_id: UUID) -> Amendment:
        return self._amendment_model(amendment_id).to_dto()

    def list_amendments(self, project_id: UUID) -> list[Amendment]:
        self._project_model(project_id)
        stmt = (
            select(ProjectAmendmentModel)
            .where(ProjectAmendmentModel.project_id == project_id)
            .order_by(ProjectAmendmentModel.sequence)
        )
        return [m.to_dto() for m in self._session.scalars(stmt)]

    def delete_amendment(self, amendment_id: UUID) -> Amendment:
        model = self._amendment_model(amendment_id)
        dto = model.to_dto()
        self._session.delete(model)
        self._session.flush()
        return dto

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        self._session.rollback()


class InMemoryProjectRepository(ProjectRepository):
    """
    Dict-backed ``ProjectRepository``.

    Writes apply immediately; ``commit`` and ``rollback`` are no-ops.
    """

    def __init__(self):
        self._projects: dict[UUID, Project] = {}
        self._sequences: dict[UUID, int] = {}
        self._amendments: dict[UUID, Amendment] = {}

    def add_project(self, project: Project, actor_id: UUID) -> None:
        if any(p.code == project.code for p in self._projects.values()):
            raise DuplicateProjectCodeError(project.code)
        self._projects[project.id] = project
        self._sequences[project.id] = 0

    def get_project(self, project_id: UUID) -> Project:
        try:
            return self._projects[project_id]
        except KeyError:
            raise ProjectNotFoundError(str(project_id)) from None

    def get_project_by_code(self, code: str) -> Project:
        for project in self._projects.values():
            if project.code == code:
                return project
        raise ProjectNotFoundError(code)

    def list_projects(self, active_only: bool = False) -> list[Project]:
        projects = sorted(self._projects.values(), key=lambda p: p.code)
        if active_only:
            projects = [p for p in projects if p.is_active]
        return projects

    def next_amendment_sequence(self, project_id: UUID) -> int:
        self.get_project(project_id)
        self._sequences[project_id] += 1
        return self._sequences[project_id]

    def add_amendment(self, amendment: Amendment, actor_id: UUID) -> None:
        self.get_project(amendment.project_id)
        self._amendments[amendment.id] = amendment

    def get_amendment(self, amendment_id: UUID) -> Amendment:
        try:
            return self._amendments[amendment_id]
        except KeyError:
            raise AmendmentNotFoundError(str(amendment_id)) from None

    def list_amendments(self, project_id: UUID) -> list[Amendment]:
        self.get_project(project_id)
        return sorted(
            (a for a in self._amendments.values() if a.project_id == project_id),
            key=lambda a: a.sequence,
        )

    def delete_amendment(self, amendment_id: UUID) -> Amendment:
        amendment = self.get_amendment(amendment_id)
        del self._amendments[amendment_id]
        return amendment

    def commit(self) -> None:
        pass

    def rollback(self) -> None:
        pass
