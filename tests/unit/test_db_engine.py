"""Tests for engine lifecycle and session scope."""

from datetime import date
from decimal import Decimal

import pytest

from ledger_kernel.db.engine import (
    get_engine,
    get_session,
    reset_engine,
    session_scope,
)
from ledger_modules.project import ProjectService
from ledger_modules.project.orm import ProjectModel


class TestEngineLifecycle:

    def test_accessors_fail_before_init(self):
        reset_engine()
        with pytest.raises(RuntimeError):
            get_engine()
        with pytest.raises(RuntimeError):
            get_session()

    def test_engine_initialized_for_sqlite(self, engine):
        assert get_engine() is engine
        assert engine.dialect.name == "sqlite"


class TestSessionScope:

    def test_commits_on_success(self, engine):
        with session_scope() as session:
            project = ProjectService.for_session(session).create_project(
                code="PRJ-SCOPE",
                name="Scoped",
                start_date="2025-01-01",
                end_date="2025-06-30",
                total_value="500",
            )

        with session_scope() as session:
            stored = ProjectService.for_session(session).get_project(project.id)
        assert stored.total_value == Decimal("500")

    def test_rolls_back_and_reraises(self, engine, test_actor_id):
        with pytest.raises(RuntimeError, match="abort"):
            with session_scope() as session:
                session.add(
                    ProjectModel(
                        code="PRJ-GONE",
                        name="Rolled back",
                        start_date=date(2025, 1, 1),
                        end_date=date(2025, 6, 30),
                        total_value=Decimal("500"),
                        created_by_id=test_actor_id,
                    )
                )
                session.flush()
                raise RuntimeError("abort")

        with session_scope() as session:
            assert ProjectService.for_session(session).list_projects() == []
