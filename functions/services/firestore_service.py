"""Firestore service for RenoQuote.

Remote project record store: CRUD over the /projects collection.

Transient Google API errors are retried with exponential backoff (tenacity);
anything still failing is raised as StoreUnavailableError so the caller can
fall back to local storage.
"""

from typing import Any, Callable, Dict, List, Optional
import inspect

import structlog
from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from config.errors import StoreUnavailableError
from config.settings import settings
from models.project import ProjectRecord

logger = structlog.get_logger(__name__)

# Errors worth retrying; everything else fails immediately
TRANSIENT_ERRORS = (
    google_exceptions.ServiceUnavailable,
    google_exceptions.DeadlineExceeded,
    google_exceptions.InternalServerError,
)


class FirestoreService:
    """Service for Firestore project operations.

    Note: Firebase Admin SDK for Python is synchronous. Methods are
    marked async for interface compatibility but operations are sync.
    """

    COLLECTION_PROJECTS = "projects"

    def __init__(
        self,
        db=None,
        max_attempts: Optional[int] = None,
        retry_wait_seconds: Optional[float] = None,
    ):
        """Initialize FirestoreService.

        Args:
            db: Optional Firestore client. If not provided, uses default.
            max_attempts: Attempts per operation (defaults to STORE_MAX_RETRIES).
            retry_wait_seconds: Backoff multiplier (defaults to STORE_RETRY_WAIT_SECONDS).
        """
        self._db = db
        self.max_attempts = max_attempts or settings.store_max_retries
        self.retry_wait_seconds = (
            settings.store_retry_wait_seconds if retry_wait_seconds is None else retry_wait_seconds
        )

    @property
    def db(self):
        """Get Firestore client (lazy initialization)."""
        if self._db is None:
            self._db = firestore.client()
        return self._db

    async def _maybe_await(self, result: Any) -> Any:
        """Await result if it is awaitable (supports AsyncMock in unit tests)."""
        if inspect.isawaitable(result):
            return await result
        return result

    async def _call(self, operation: str, fn: Callable[[], Any], **context) -> Any:
        """Run one store call with bounded retry on transient errors.

        Raises:
            StoreUnavailableError: If the call still fails.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.retry_wait_seconds, max=10),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        logger.warning(
                            "firestore_retry",
                            operation=operation,
                            attempt=attempt.retry_state.attempt_number,
                            **context,
                        )
                    return await self._maybe_await(fn())
        except Exception as e:
            logger.error("firestore_operation_failed", operation=operation, error=str(e), **context)
            raise StoreUnavailableError(
                operation=operation,
                message=f"Failed to {operation.replace('_', ' ')}: {str(e)}",
                details=context,
            )

    def _projects(self):
        return self.db.collection(self.COLLECTION_PROJECTS)

    async def create_project(self, record: ProjectRecord) -> str:
        """Create a project document.

        Args:
            record: Project to persist; its id is ignored.

        Returns:
            The generated document ID.

        Raises:
            StoreUnavailableError: If Firestore operation fails.
        """
        async def _create() -> str:
            doc_ref = self._projects().document()
            await self._maybe_await(doc_ref.set(record.to_firestore_dict()))
            return doc_ref.id

        project_id = await self._call("create_project", _create, user_id=record.user_id)
        logger.info("project_created", project_id=project_id, template_id=record.template_id)
        return project_id

    async def get_project(self, project_id: str) -> Optional[ProjectRecord]:
        """Fetch a project by ID.

        Returns:
            The project, or None if not found.

        Raises:
            StoreUnavailableError: If Firestore operation fails.
        """
        doc = await self._call(
            "get_project",
            lambda: self._projects().document(project_id).get(),
            project_id=project_id,
        )
        if not doc.exists:
            return None
        return ProjectRecord.model_validate({"id": doc.id, **(doc.to_dict() or {})})

    async def update_project(self, project_id: str, data: Dict[str, Any]) -> None:
        """Update fields of a project document.

        Args:
            project_id: The project document ID.
            data: camelCase fields to update.

        Raises:
            StoreUnavailableError: If Firestore operation fails.
        """
        update_data = {**data, "updatedAt": firestore.SERVER_TIMESTAMP}
        await self._call(
            "update_project",
            lambda: self._projects().document(project_id).update(update_data),
            project_id=project_id,
        )
        logger.info("project_updated", project_id=project_id, fields=list(data.keys()))

    async def find_projects_by_user(self, user_id: str) -> List[ProjectRecord]:
        """List a user's projects. Returns an empty list if the store is unreachable."""
        try:
            docs = await self._call(
                "find_projects_by_user",
                lambda: list(self._projects().where("userId", "==", user_id).stream()),
                user_id=user_id,
            )
        except StoreUnavailableError:
            return []

        projects: List[ProjectRecord] = []
        for doc in docs:
            try:
                projects.append(ProjectRecord.model_validate({"id": doc.id, **(doc.to_dict() or {})}))
            except ValueError as e:
                logger.warning("project_document_invalid", project_id=doc.id, error=str(e))
        return projects
