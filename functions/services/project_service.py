"""
Project workflow service for RenoQuote.

Orchestrates the customer-facing project lifecycle:
1. preview_estimate - delayed estimate for the form being filled in
2. submit_project - persist a `pending` project (remote, falling back to local)
3. select_contractor - record the finalized contractor and quote
4. confirm_project - mark the project `confirmed`

Remote store failures never lose a submission: the record is written to the
local store instead and a warning is logged.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

import structlog

from config.errors import ErrorCode, RenoQuoteError, StoreUnavailableError
from models.activity import ActivityAction
from models.contractor import Contractor
from models.estimate import Estimate
from models.project import FileMetadata, ProjectRecord, ProjectStatus
from models.quote import Quote
from services.activity_sink import ActivitySink, LoggingActivitySink
from services.estimate_calculator import EstimateCalculator
from services.local_project_store import LocalProjectStore
from services.template_registry import file_field_ids, registry
from utils.task_registry import KeyedTaskRegistry

logger = structlog.get_logger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class ProjectService:
    """Project submission and status transitions over the project stores."""

    def __init__(
        self,
        remote_store=None,
        local_store: Optional[LocalProjectStore] = None,
        activity_sink: Optional[ActivitySink] = None,
        calculator: Optional[EstimateCalculator] = None,
        tasks: Optional[KeyedTaskRegistry] = None,
    ):
        """Initialize ProjectService.

        Args:
            remote_store: FirestoreService (or compatible). None means local only.
            local_store: Fallback store.
            activity_sink: Destination for activity events.
            calculator: Estimate calculator; shares the activity sink by default.
            tasks: Registry for delayed estimate previews.
        """
        self.remote_store = remote_store
        self.local_store = local_store or LocalProjectStore()
        self.activity_sink = activity_sink or LoggingActivitySink()
        self.calculator = calculator or EstimateCalculator(activity_sink=self.activity_sink)
        self._tasks = tasks or KeyedTaskRegistry()

    # -------------------------------------------------------------------------
    # Estimate preview
    # -------------------------------------------------------------------------

    def preview_estimate(
        self,
        request_id: str,
        template_id: str,
        form_data: Dict[str, Any],
        user_id: Optional[str] = None,
        delay_seconds: Optional[float] = None,
    ) -> "asyncio.Task[Estimate]":
        """Schedule a delayed estimate keyed by request id.

        A newer preview for the same request id cancels the older one.
        """
        return self._tasks.schedule(
            request_id,
            self._preview(template_id, form_data, user_id, delay_seconds),
        )

    async def _preview(self, template_id: str, form_data: Dict[str, Any],
                       user_id: Optional[str], delay_seconds: Optional[float]) -> Estimate:
        try:
            return await self.calculator.calculate_delayed(template_id, form_data, user_id, delay_seconds)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("estimate_preview_failed", template_id=template_id)
            return Estimate.zero(template_id)

    def cancel_preview(self, request_id: str) -> bool:
        return self._tasks.cancel(request_id)

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    async def submit_project(
        self,
        template_id: str,
        form_data: Dict[str, Any],
        estimate: Optional[Estimate] = None,
        files: Optional[Iterable[Union[FileMetadata, Dict[str, Any]]]] = None,
        user_id: Optional[str] = None,
    ) -> ProjectRecord:
        """Persist a new `pending` project.

        File fields are stored as metadata only; their form values are
        dropped. The estimate is calculated when not supplied.
        """
        template = registry.get_template(template_id)
        file_fields = set(file_field_ids(template))
        stored_form = {k: v for k, v in (form_data or {}).items() if k not in file_fields}

        if estimate is None:
            estimate = self.calculator.calculate(template_id, form_data, user_id)

        now = datetime.now(timezone.utc)
        record = ProjectRecord(
            template_id=template_id,
            form_data=stored_form,
            files=[f if isinstance(f, FileMetadata) else FileMetadata.model_validate(f) for f in (files or [])],
            estimate=estimate,
            user_id=user_id,
            status=ProjectStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

        project_id = await self._create(record)
        record = record.model_copy(update={"id": project_id})

        self.activity_sink.emit(
            ActivityAction.PROJECT_CREATED,
            {"projectId": project_id, "templateId": template_id},
            user_id=user_id,
        )
        return record

    async def _create(self, record: ProjectRecord) -> str:
        if self.remote_store is not None:
            try:
                return await self.remote_store.create_project(record)
            except StoreUnavailableError as e:
                logger.warning("project_store_fallback", operation="create_project", error=e.message)
        return await self.local_store.create_project(record)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def _store_for(self, project_id: str):
        if self.remote_store is None or self.local_store.owns(project_id):
            return self.local_store
        return self.remote_store

    async def get_project(self, project_id: str) -> ProjectRecord:
        """Fetch a project from whichever store holds it.

        Raises:
            RenoQuoteError: PROJECT_NOT_FOUND if no store has it.
            StoreUnavailableError: If the remote store cannot be reached.
        """
        project = await self._store_for(project_id).get_project(project_id)
        if project is None:
            raise RenoQuoteError(
                code=ErrorCode.PROJECT_NOT_FOUND,
                message=f"Project '{project_id}' not found",
                details={"project_id": project_id},
            )
        return project

    async def list_projects(self, user_id: str) -> List[ProjectRecord]:
        """A user's projects from both stores, newest first. Never fails on store errors."""
        projects: List[ProjectRecord] = []
        if self.remote_store is not None:
            projects.extend(await self.remote_store.find_projects_by_user(user_id))
        projects.extend(await self.local_store.find_projects_by_user(user_id))
        return sorted(projects, key=lambda p: p.created_at or _EPOCH, reverse=True)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    async def select_contractor(self, project_id: str, contractor: Contractor, quote: Quote) -> ProjectRecord:
        """Record the finalized contractor and quote; status becomes `contractor-selected`."""
        await self._store_for(project_id).update_project(project_id, {
            "status": ProjectStatus.CONTRACTOR_SELECTED.value,
            "selectedContractor": contractor.model_dump(by_alias=True, mode="json"),
            "finalQuote": quote.to_dict(),
        })
        logger.info("project_contractor_selected", project_id=project_id, contractor_id=contractor.id)
        return await self.get_project(project_id)

    async def confirm_project(self, project_id: str, contractor: Optional[Contractor] = None) -> ProjectRecord:
        """Mark a project `confirmed`.

        Raises:
            RenoQuoteError: VALIDATION_ERROR if no contractor has been selected.
        """
        project = await self.get_project(project_id)
        selected = contractor or project.selected_contractor
        if selected is None:
            raise RenoQuoteError(
                code=ErrorCode.VALIDATION_ERROR,
                message="A contractor must be selected before the project can be confirmed",
                details={"project_id": project_id},
            )

        confirmed_at = datetime.now(timezone.utc)
        await self._store_for(project_id).update_project(project_id, {
            "status": ProjectStatus.CONFIRMED.value,
            "selectedContractor": selected.model_dump(by_alias=True, mode="json"),
            "confirmedAt": confirmed_at.isoformat(),
        })

        self.activity_sink.emit(
            ActivityAction.PROJECT_CONFIRMED,
            {"projectId": project_id, "contractorId": selected.id},
            user_id=project.user_id,
        )
        return await self.get_project(project_id)
