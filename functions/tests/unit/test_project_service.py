"""Unit tests for the project workflow service."""

import asyncio
from datetime import datetime, timezone

import pytest
from unittest.mock import AsyncMock, MagicMock

from google.api_core import exceptions as google_exceptions

from config.errors import ErrorCode, RenoQuoteError
from models.activity import ActivityAction
from models.project import FileMetadata, ProjectRecord
from services.contractor_directory import get_contractor
from services.local_project_store import LocalProjectStore
from services.project_service import ProjectService
from services.quote_simulation import QuoteSession


@pytest.fixture
def local_service(activity_sink, calculator):
    """ProjectService without a remote store."""
    return ProjectService(activity_sink=activity_sink, calculator=calculator)


@pytest.fixture
def remote_service(mock_firestore_service, activity_sink, calculator):
    """ProjectService backed by the mocked Firestore service."""
    return ProjectService(
        remote_store=mock_firestore_service,
        local_store=LocalProjectStore(),
        activity_sink=activity_sink,
        calculator=calculator,
    )


async def _finalized_quote(estimate, contractor_id="contractor-1"):
    session = QuoteSession(project_id="proj", estimate=estimate, delay_seconds=0)
    await session.request_quotes([contractor_id])
    await session.wait_for_quotes()
    return session.finalize_contractor(contractor_id)


class TestSubmitProject:
    """Project submission."""

    @pytest.mark.asyncio
    async def test_submit_to_remote(self, remote_service, activity_sink, deck_form):
        record = await remote_service.submit_project("deck-refresh", deck_form, user_id="user-1")

        assert record.id == "proj-123"
        assert record.status == "pending"
        assert record.estimate.total == 1275
        assert record.created_at is not None
        assert len(remote_service.local_store) == 0

        created = activity_sink.find(ActivityAction.PROJECT_CREATED)
        assert created[0].data == {"projectId": "proj-123", "templateId": "deck-refresh"}

    @pytest.mark.asyncio
    async def test_falls_back_to_local_store(self, remote_service, mock_firestore_service, deck_form):
        document = mock_firestore_service.db.collection.return_value.document.return_value
        document.set = AsyncMock(side_effect=google_exceptions.ServiceUnavailable("unavailable"))

        record = await remote_service.submit_project("deck-refresh", deck_form, user_id="user-1")

        assert record.id.startswith("local-")
        assert remote_service.local_store.owns(record.id)
        stored = await remote_service.get_project(record.id)
        assert stored.template_id == "deck-refresh"

    @pytest.mark.asyncio
    async def test_local_only(self, local_service, firepit_form):
        record = await local_service.submit_project("firepit", firepit_form)

        assert record.id.startswith("local-")
        assert record.estimate.total == 1725

    @pytest.mark.asyncio
    async def test_supplied_estimate_not_recalculated(self, local_service, activity_sink, deck_form, deck_estimate):
        before = len(activity_sink.find(ActivityAction.ESTIMATE_CALCULATED))

        record = await local_service.submit_project("deck-refresh", deck_form, estimate=deck_estimate)

        assert record.estimate == deck_estimate
        assert len(activity_sink.find(ActivityAction.ESTIMATE_CALCULATED)) == before

    @pytest.mark.asyncio
    async def test_file_fields_stored_as_metadata(self, local_service, deck_form):
        deck_form["images"] = [b"\x89PNG..."]
        files = [{"name": "deck.jpg", "size": 20480, "fieldId": "images"}]

        record = await local_service.submit_project("deck-refresh", deck_form, files=files)

        assert "images" not in record.form_data
        assert record.files == [FileMetadata(name="deck.jpg", size=20480, field_id="images")]

    @pytest.mark.asyncio
    async def test_unknown_template(self, local_service):
        with pytest.raises(RenoQuoteError) as exc_info:
            await local_service.submit_project("kitchen-remodel", {})

        assert exc_info.value.code == ErrorCode.TEMPLATE_NOT_FOUND


class TestProjectQueries:
    """Lookups across both stores."""

    @pytest.mark.asyncio
    async def test_get_missing_project(self, local_service):
        with pytest.raises(RenoQuoteError) as exc_info:
            await local_service.get_project("local-missing")

        assert exc_info.value.code == ErrorCode.PROJECT_NOT_FOUND

    @pytest.mark.asyncio
    async def test_list_projects_newest_first(self, local_service):
        store = local_service.local_store
        older = await store.create_project(ProjectRecord(
            template_id="deck-refresh", user_id="user-1", created_at=datetime(2026, 3, 1, tzinfo=timezone.utc)
        ))
        newer = await store.create_project(ProjectRecord(
            template_id="firepit", user_id="user-1", created_at=datetime(2026, 4, 1, tzinfo=timezone.utc)
        ))
        await store.create_project(ProjectRecord(template_id="firepit", user_id="user-2"))

        projects = await local_service.list_projects("user-1")

        assert [p.id for p in projects] == [newer, older]

    @pytest.mark.asyncio
    async def test_list_merges_remote_and_local(self, remote_service, mock_firestore_service):
        remote_doc = MagicMock()
        remote_doc.id = "proj-remote"
        remote_doc.to_dict.return_value = {
            "templateId": "firepit",
            "userId": "user-1",
            "createdAt": "2026-04-01T00:00:00+00:00",
        }
        query = mock_firestore_service.db.collection.return_value.where
        query.return_value.stream.return_value = iter([remote_doc])
        local_id = await remote_service.local_store.create_project(ProjectRecord(
            template_id="deck-refresh", user_id="user-1", created_at=datetime(2026, 3, 1, tzinfo=timezone.utc)
        ))

        projects = await remote_service.list_projects("user-1")

        assert [p.id for p in projects] == ["proj-remote", local_id]

    @pytest.mark.asyncio
    async def test_list_survives_remote_failure(self, remote_service, mock_firestore_service):
        query = mock_firestore_service.db.collection.return_value.where
        query.return_value.stream.side_effect = google_exceptions.ServiceUnavailable("unavailable")
        local_id = await remote_service.local_store.create_project(
            ProjectRecord(template_id="deck-refresh", user_id="user-1")
        )

        projects = await remote_service.list_projects("user-1")

        assert [p.id for p in projects] == [local_id]


class TestProjectTransitions:
    """Contractor selection and confirmation."""

    @pytest.mark.asyncio
    async def test_select_and_confirm(self, local_service, activity_sink, deck_form, deck_estimate):
        record = await local_service.submit_project("deck-refresh", deck_form, user_id="user-1")
        contractor = get_contractor("contractor-1")
        quote = await _finalized_quote(deck_estimate)

        selected = await local_service.select_contractor(record.id, contractor, quote)

        assert selected.status == "contractor-selected"
        assert selected.selected_contractor.id == "contractor-1"
        assert selected.final_quote.total == quote.total

        confirmed = await local_service.confirm_project(record.id)

        assert confirmed.status == "confirmed"
        assert confirmed.confirmed_at is not None
        event = activity_sink.find(ActivityAction.PROJECT_CONFIRMED)[0]
        assert event.data["contractorId"] == "contractor-1"
        assert event.user_id == "user-1"

    @pytest.mark.asyncio
    async def test_confirm_requires_contractor(self, local_service, deck_form):
        record = await local_service.submit_project("deck-refresh", deck_form)

        with pytest.raises(RenoQuoteError) as exc_info:
            await local_service.confirm_project(record.id)

        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR

    @pytest.mark.asyncio
    async def test_confirm_with_explicit_contractor(self, local_service, deck_form):
        record = await local_service.submit_project("deck-refresh", deck_form)

        confirmed = await local_service.confirm_project(record.id, get_contractor("contractor-3"))

        assert confirmed.selected_contractor.name == "David Chen"


class TestEstimatePreview:
    """Delayed, cancellable estimate previews."""

    @pytest.mark.asyncio
    async def test_preview(self, local_service, deck_form):
        estimate = await local_service.preview_estimate("req-1", "deck-refresh", deck_form, delay_seconds=0)

        assert estimate.total == 1275

    @pytest.mark.asyncio
    async def test_newer_preview_supersedes_older(self, local_service, deck_form, firepit_form):
        stale = local_service.preview_estimate("req-1", "deck-refresh", deck_form, delay_seconds=10)
        fresh = local_service.preview_estimate("req-1", "firepit", firepit_form, delay_seconds=0)

        estimate = await fresh
        with pytest.raises(asyncio.CancelledError):
            await stale

        assert estimate.template_id == "firepit"

    @pytest.mark.asyncio
    async def test_cancel_preview(self, local_service, deck_form):
        task = local_service.preview_estimate("req-1", "deck-refresh", deck_form, delay_seconds=10)

        assert local_service.cancel_preview("req-1") is True
        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_preview_failure_returns_zero(self, local_service, deck_form):
        def broken(*args, **kwargs):
            raise RuntimeError("pricing table unreadable")

        local_service.calculator.calculate = broken

        estimate = await local_service.preview_estimate("req-1", "deck-refresh", deck_form, delay_seconds=0)

        assert estimate.is_zero
