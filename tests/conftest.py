"""
Pytest fixtures for the amendment ledger test suite.

Provides:
- Structured logging configured once per session, with per-test capture
- In-memory SQLite sessions with every module table created
- Deterministic clocks and amendment factories
"""

import json
import logging
from datetime import datetime, timezone
from io import StringIO
from typing import Generator
from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from ledger_engines.amendments import Amendment, AmendmentKind
from ledger_kernel.db.engine import (
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from ledger_kernel.domain.clock import DeterministicClock
from ledger_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from ledger_modules._orm_registry import (
    create_all_tables,
    register_append_only_models,
)

TEST_ACTOR_ID = uuid4()


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture ledger logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, service):
            service.record_amendment(...)
            logs = captured_logs()
            assert any(r["message"] == "amendment_recorded" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("ledger")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database with all module tables."""
    eng = init_engine_from_url("sqlite://")
    create_all_tables()
    register_append_only_models()
    yield eng
    drop_tables()
    reset_engine()


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    sess = get_session()
    yield sess
    sess.rollback()
    sess.close()


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def test_actor_id():
    return TEST_ACTOR_ID


@pytest.fixture
def deterministic_clock():
    return DeterministicClock(datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def make_amendment():
    """
    Factory for engine-level amendments.

    Sequence numbers and timestamps increase with each call.
    """
    project_id = uuid4()
    counter = {"seq": 0}

    def _make(kind, added_value=None, extension_days=None, **overrides):
        counter["seq"] += 1
        fields = dict(
            id=uuid4(),
            project_id=project_id,
            kind=AmendmentKind.parse(kind),
            sequence=counter["seq"],
            created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
            added_value=added_value,
            extension_days=extension_days,
        )
        fields.update(overrides)
        return Amendment(**fields)

    return _make
