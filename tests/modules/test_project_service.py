"""
Tests for ProjectService.

Every scenario runs against both repository implementations: the
dict-backed ``InMemoryProjectRepository`` and the session-backed
``SqlAlchemyProjectRepository`` over in-memory SQLite.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from ledger_config import get_active_config
from ledger_engines.amendments import AmendmentKind
from ledger_kernel.domain.clock import SequentialClock
from ledger_kernel.exceptions import (
    AmendmentNotFoundError,
    DuplicateProjectCodeError,
    InvalidAmendmentError,
    InvalidFundingError,
    InvalidWindowError,
    ProjectNotFoundError,
)
from ledger_modules.project import (
    InMemoryProjectRepository,
    ProjectConfig,
    ProjectService,
    SqlAlchemyProjectRepository,
)


@pytest.fixture(params=["memory", "sqlalchemy"])
def repository(request):
    if request.param == "memory":
        return InMemoryProjectRepository()
    session = request.getfixturevalue("session")
    return SqlAlchemyProjectRepository(session)


@pytest.fixture
def service(repository, deterministic_clock):
    return ProjectService(repository, clock=deterministic_clock)


@pytest.fixture
def project(service, test_actor_id):
    return service.create_project(
        code="PRJ-001",
        name="Water treatment study",
        start_date="2024-01-01",
        end_date="2025-01-01",
        total_value="100000000",
        entity_contribution="60000000",
        university_contribution="40000000",
        actor_id=test_actor_id,
    )


def _record(service, project, kind, **kwargs):
    kwargs.setdefault("justification", "Scope change approved by committee")
    return service.record_amendment(project.id, kind, **kwargs)


class TestCreateProject:

    def test_created_with_parsed_terms(self, service, project):
        assert project.start_date == date(2024, 1, 1)
        assert project.end_date == date(2025, 1, 1)
        assert project.total_value == Decimal("100000000")
        assert project.currency == "COP"
        assert service.get_project(project.id) == project

    def test_invalid_window_rejected(self, service):
        with pytest.raises(InvalidWindowError):
            service.create_project(
                code="PRJ-BAD",
                name="Backwards",
                start_date="2025-06-01",
                end_date="2025-05-01",
                total_value="1000",
            )
        assert service.list_projects() == []

    def test_invalid_funding_rejected(self, service):
        with pytest.raises(InvalidFundingError):
            service.create_project(
                code="PRJ-BAD",
                name="Overfunded",
                start_date="2025-01-01",
                end_date="2025-12-31",
                total_value="1000",
                entity_contribution="600",
                university_contribution="401",
            )
        assert service.list_projects() == []

    def test_duplicate_code_rejected(self, service, project):
        with pytest.raises(DuplicateProjectCodeError) as exc_info:
            service.create_project(
                code=project.code,
                name="Clone",
                start_date="2025-01-01",
                end_date="2025-12-31",
                total_value="1000",
            )
        assert exc_info.value.project_code == "PRJ-001"
        assert len(service.list_projects()) == 1

    def test_list_projects_ordered_by_code(self, service, project):
        service.create_project(
            code="PRJ-000",
            name="Earlier code",
            start_date="2025-01-01",
            end_date="2025-12-31",
            total_value="1",
        )
        assert [p.code for p in service.list_projects()] == ["PRJ-000", "PRJ-001"]

    def test_unknown_project(self, service):
        with pytest.raises(ProjectNotFoundError):
            service.get_project(uuid4())


class TestRecordAmendment:

    def test_reference_scenario(self, service, project):
        _record(service, project, AmendmentKind.ADDITION, added_value="20000000")
        _record(service, project, AmendmentKind.EXTENSION, extension_days=30)
        _record(
            service, project, "ADDITION_AND_EXTENSION",
            added_value="5000000", extension_days=10,
        )

        summary = service.get_summary(project.id)

        assert summary.current_value == Decimal("125000000")
        assert summary.current_end_date == date(2025, 2, 10)
        assert summary.total_additions == Decimal("25000000")
        assert summary.total_extension_days == 40
        assert summary.amendment_count == 3

    def test_assigns_identity_fields(self, service, project, deterministic_clock):
        amendment = _record(service, project, "PRORROGA", extension_days="15")

        assert amendment.project_id == project.id
        assert amendment.kind is AmendmentKind.EXTENSION
        assert amendment.sequence == 1
        assert amendment.created_at == deterministic_clock.now_utc()
        assert amendment.added_value is None

    def test_keeps_administrative_metadata(self, service, project):
        amendment = _record(
            service, project, "ADDITION",
            added_value="10",
            administrative_act="RES-2025-014",
            approval_date="2025-03-04",
        )
        stored = service.list_amendments(project.id)[0]
        assert stored.administrative_act == "RES-2025-014"
        assert stored.approval_date == date(2025, 3, 4)
        assert stored.justification == amendment.justification

    def test_invalid_amendment_not_persisted(self, service, project):
        with pytest.raises(InvalidAmendmentError):
            _record(service, project, AmendmentKind.ADDITION, added_value="0")
        assert service.list_amendments(project.id) == []

    def test_unknown_kind_rejected(self, service, project):
        with pytest.raises(InvalidAmendmentError) as exc_info:
            _record(service, project, "SUSPENSION", added_value="10")
        assert exc_info.value.field == "kind"
        assert service.list_amendments(project.id) == []

    def test_justification_required(self, service, project):
        with pytest.raises(InvalidAmendmentError) as exc_info:
            _record(service, project, "ADDITION", added_value="10", justification="  ")
        assert exc_info.value.field == "justification"

    def test_justification_optional_when_configured(self, repository, project):
        service = ProjectService(
            repository, config=ProjectConfig(require_justification=False)
        )
        amendment = service.record_amendment(project.id, "ADDITION", added_value="10")
        assert amendment.justification == ""

    def test_malformed_approval_date_rejected(self, service, project):
        with pytest.raises(InvalidAmendmentError) as exc_info:
            _record(
                service, project, "ADDITION",
                added_value="10", approval_date="04/03/2025",
            )
        assert exc_info.value.field == "approval_date"

    def test_unknown_project(self, service):
        with pytest.raises(ProjectNotFoundError):
            service.record_amendment(
                uuid4(), "ADDITION", added_value="10", justification="x"
            )

    def test_insertion_order(self, service, project):
        first = _record(service, project, "ADDITION", added_value="1")
        second = _record(service, project, "EXTENSION", extension_days=1)
        third = _record(service, project, "ADDITION", added_value="2")

        listed = service.list_amendments(project.id)
        assert [a.id for a in listed] == [first.id, second.id, third.id]
        assert [a.sequence for a in listed] == [1, 2, 3]


class TestCreatedAtOrdering:

    def test_created_at_never_goes_backwards(self):
        later = datetime(2025, 3, 1, tzinfo=timezone.utc)
        earlier = datetime(2025, 2, 1, tzinfo=timezone.utc)
        repository = InMemoryProjectRepository()
        service = ProjectService(repository, clock=SequentialClock([later, earlier]))
        target = service.create_project(
            code="PRJ-CLK",
            name="Clock skew",
            start_date="2025-01-01",
            end_date="2025-12-31",
            total_value="1000",
        )

        first = _record(service, target, "ADDITION", added_value="1")
        second = _record(service, target, "ADDITION", added_value="1")

        assert first.created_at == later
        assert second.created_at == later


class TestDeleteAmendment:

    def test_delete_updates_summary(self, service, project):
        kept = _record(service, project, "ADDITION", added_value="100")
        dropped = _record(service, project, "EXTENSION", extension_days=30)

        deleted = service.delete_amendment(dropped.id)

        assert deleted.id == dropped.id
        assert [a.id for a in service.list_amendments(project.id)] == [kept.id]
        summary = service.get_summary(project.id)
        assert summary.current_end_date == project.end_date
        assert summary.amendment_count == 1

    def test_sequence_not_reused(self, service, project):
        _record(service, project, "ADDITION", added_value="1")
        second = _record(service, project, "ADDITION", added_value="1")
        service.delete_amendment(second.id)

        third = _record(service, project, "ADDITION", added_value="1")

        assert third.sequence == 3
        assert third.id != second.id

    def test_unknown_amendment(self, service):
        with pytest.raises(AmendmentNotFoundError):
            service.delete_amendment(uuid4())


class TestLedgerReadBack:

    def test_empty_ledger_summary(self, service, project):
        summary = service.get_summary(project.id)
        assert summary.current_value == project.total_value
        assert summary.current_end_date == project.end_date
        assert summary.amendment_count == 0

    def test_history(self, service, project):
        _record(service, project, "ADDITION", added_value="5")
        _record(service, project, "EXTENSION", extension_days=2)

        history = service.get_history(project.id)

        assert [s.amendment_count for s in history] == [0, 1, 2]
        assert history[-1] == service.get_summary(project.id)

    def test_preview_end_date(self, service, project):
        _record(service, project, "EXTENSION", extension_days=40)
        assert service.preview_end_date(project.id, 20) == date(2025, 3, 2)
        assert service.get_summary(project.id).total_extension_days == 40

    def test_preview_rejects_invalid_days(self, service, project):
        with pytest.raises(InvalidAmendmentError):
            service.preview_end_date(project.id, "-1")

    def test_summary_payload(self, service, project):
        _record(service, project, "ADICION_PRORROGA", added_value="25000000", extension_days=40)

        payload = service.summary_payload(project.id)

        assert payload == {
            "project_id": str(project.id),
            "project_code": "PRJ-001",
            "currency": "COP",
            "original_value": "100000000.00",
            "original_end_date": "2025-01-01",
            "current_value": "125000000.00",
            "current_end_date": "2025-02-10",
            "total_additions": "25000000.00",
            "total_extension_days": 40,
            "amendment_count": 1,
        }


class TestStoredPrecision:
    """Amounts and day counts the store cannot hold are refused at intake."""

    @staticmethod
    def _reload(request, repository):
        if isinstance(repository, SqlAlchemyProjectRepository):
            request.getfixturevalue("session").expire_all()

    @pytest.mark.parametrize("added_value", ["0.0000000001", "0.1234567891"])
    def test_excess_places_rejected(self, request, repository, service, project, added_value):
        with pytest.raises(InvalidAmendmentError) as exc_info:
            _record(service, project, "ADDITION", added_value=added_value)
        assert exc_info.value.field == "added_value"

        self._reload(request, repository)
        assert service.list_amendments(project.id) == []
        assert service.get_summary(project.id).current_value == Decimal("100000000")

    def test_nine_places_read_back_exactly(self, request, repository, service, project):
        _record(service, project, "ADDITION", added_value="0.123456789")

        self._reload(request, repository)
        stored = service.list_amendments(project.id)[0]
        assert stored.added_value == Decimal("0.123456789")
        summary = service.get_summary(project.id)
        assert summary.current_value == Decimal("100000000.123456789")

    def test_oversized_extension_rejected(self, request, repository, service, project):
        with pytest.raises(InvalidAmendmentError) as exc_info:
            _record(service, project, "EXTENSION", extension_days=10**7)
        assert exc_info.value.field == "extension_days"

        self._reload(request, repository)
        assert service.list_amendments(project.id) == []
        assert service.get_summary(project.id).current_end_date == date(2025, 1, 1)

    def test_configured_extension_cap(self, repository, project):
        service = ProjectService(repository, config=ProjectConfig(max_extension_days=90))
        with pytest.raises(InvalidAmendmentError):
            _record(service, project, "EXTENSION", extension_days=91)
        with pytest.raises(InvalidAmendmentError):
            service.preview_end_date(project.id, 91)
        assert service.preview_end_date(project.id, 90) == date(2025, 4, 1)

    def test_extension_past_calendar_not_persisted(self, request, repository, service):
        late = service.create_project(
            code="PRJ-LATE",
            name="Far future",
            start_date="9990-01-01",
            end_date="9990-01-01",
            total_value="1000",
        )
        _record(service, late, "EXTENSION", extension_days=3000)

        with pytest.raises(InvalidAmendmentError) as exc_info:
            _record(service, late, "EXTENSION", extension_days=36500)
        assert exc_info.value.reason == "Extended end date is out of range"

        self._reload(request, repository)
        assert len(service.list_amendments(late.id)) == 1
        assert service.get_summary(late.id).total_extension_days == 3000

    def test_unstorable_total_rejected(self, service):
        with pytest.raises(InvalidFundingError):
            service.create_project(
                code="PRJ-HUGE",
                name="Too large",
                start_date="2025-01-01",
                end_date="2025-12-31",
                total_value="1e29",
            )


class TestServiceLogging:

    def test_recorded_amendment_logged_with_context(self, service, project, captured_logs):
        amendment = _record(service, project, "ADDITION", added_value="10")

        records = [r for r in captured_logs() if r["message"] == "amendment_recorded"]
        assert len(records) == 1
        assert records[0]["project_id"] == str(project.id)
        assert records[0]["amendment_id"] == str(amendment.id)
        assert records[0]["kind"] == "ADDITION"

    def test_rejection_logged_with_error_code(self, service, project, captured_logs):
        with pytest.raises(InvalidAmendmentError):
            _record(service, project, "EXTENSION", extension_days=0)

        records = [r for r in captured_logs() if r["message"] == "amendment_rejected"]
        assert len(records) == 1
        assert records[0]["level"] == "WARNING"
        assert records[0]["exc_code"] == "INVALID_AMENDMENT"
        assert records[0]["exc_field"] == "extension_days"


class TestServiceFromSettings:

    def test_for_session_uses_settings(self, session, deterministic_clock):
        settings = get_active_config()
        service = ProjectService.for_session(
            session, settings=settings, clock=deterministic_clock
        )
        project = service.create_project(
            code="PRJ-CFG",
            name="Configured",
            start_date="2025-01-01",
            end_date="2025-12-31",
            total_value="1000",
        )
        assert project.currency == "COP"
        with pytest.raises(InvalidAmendmentError):
            service.record_amendment(project.id, "ADDITION", added_value="1")
