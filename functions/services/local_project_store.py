"""Local project store for RenoQuote.

In-process fallback used when the remote store is unreachable, and the
default store for local runs. Same interface as FirestoreService.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

import structlog

from config.errors import ErrorCode, RenoQuoteError
from models.project import ProjectRecord

logger = structlog.get_logger(__name__)

LOCAL_ID_PREFIX = "local-"


class LocalProjectStore:
    """Dict-backed project store; ids are prefixed with `local-`."""

    def __init__(self):
        self._projects: Dict[str, Dict[str, Any]] = {}

    async def create_project(self, record: ProjectRecord) -> str:
        project_id = f"{LOCAL_ID_PREFIX}{uuid4().hex[:16]}"
        self._projects[project_id] = record.to_firestore_dict()
        logger.info("project_created_locally", project_id=project_id, template_id=record.template_id)
        return project_id

    async def get_project(self, project_id: str) -> Optional[ProjectRecord]:
        data = self._projects.get(project_id)
        if data is None:
            return None
        return ProjectRecord.model_validate({"id": project_id, **data})

    async def update_project(self, project_id: str, data: Dict[str, Any]) -> None:
        """Merge camelCase fields into a stored project.

        Raises:
            RenoQuoteError: PROJECT_NOT_FOUND if the id is unknown.
        """
        if project_id not in self._projects:
            raise RenoQuoteError(
                code=ErrorCode.PROJECT_NOT_FOUND,
                message=f"Project '{project_id}' not found",
                details={"project_id": project_id},
            )
        self._projects[project_id].update(data)
        self._projects[project_id]["updatedAt"] = datetime.now(timezone.utc).isoformat()

    async def find_projects_by_user(self, user_id: str) -> List[ProjectRecord]:
        return [
            ProjectRecord.model_validate({"id": pid, **data})
            for pid, data in self._projects.items()
            if data.get("userId") == user_id
        ]

    def owns(self, project_id: str) -> bool:
        return project_id in self._projects

    def __len__(self) -> int:
        return len(self._projects)
