"""Activity sink for RenoQuote.

Append-only, fire-and-forget event log. Callers emit structured events and
never wait on or fail because of the sink; backends swallow their own errors
after logging a warning.

Backends:
- InMemoryActivitySink: bounded in-process list (tests, local runs)
- FirestoreActivitySink: /activity_logs collection
- LoggingActivitySink: structlog only
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import re

import structlog
from firebase_admin import firestore

from config.settings import settings
from models.activity import ActivityEvent

logger = structlog.get_logger(__name__)

REDACTED = "[REDACTED]"
BINARY_OMITTED = "[binary omitted]"

# Keys whose values must never reach the activity log
SENSITIVE_KEY_PATTERN = re.compile(r"password|passwd|phone|secret|token|api[_-]?key", re.IGNORECASE)


def redact_payload(value: Any, key: Optional[str] = None) -> Any:
    """Recursively redact sensitive keys and strip binary content."""
    if key is not None and SENSITIVE_KEY_PATTERN.search(key):
        return REDACTED
    if isinstance(value, (bytes, bytearray, memoryview)):
        return BINARY_OMITTED
    if isinstance(value, dict):
        return {k: redact_payload(v, str(k)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact_payload(v) for v in value]
    return value


def summarize_form_data(form_data: Dict[str, Any], file_fields: Optional[List[str]] = None) -> Dict[str, Any]:
    """Form data safe for logging: file arrays are replaced by their count."""
    file_fields = set(file_fields or []) | {"images"}
    summary: Dict[str, Any] = {}
    for key, value in (form_data or {}).items():
        if key in file_fields:
            summary[key] = len(value) if isinstance(value, (list, tuple)) else (1 if value else 0)
        else:
            summary[key] = value
    return redact_payload(summary)


class ActivitySink(ABC):
    """Destination for activity events."""

    def emit(
        self,
        action: str,
        payload: Optional[Dict[str, Any]] = None,
        user_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> Optional[ActivityEvent]:
        """Record an event. Never raises.

        Returns:
            The stored event, or None if the backend failed.
        """
        try:
            event = ActivityEvent(
                action=action,
                user_id=user_id or "anonymous",
                session_id=session_id,
                data=redact_payload(payload or {}),
            )
            self._store(event)
            return event
        except Exception as e:
            logger.warning("activity_emit_failed", action=action, error=str(e))
            return None

    @abstractmethod
    def _store(self, event: ActivityEvent) -> None:
        """Persist one event."""


class InMemoryActivitySink(ActivitySink):
    """Bounded in-memory log; oldest entries are dropped first."""

    def __init__(self, max_entries: Optional[int] = None):
        self.max_entries = max_entries or settings.activity_log_max_entries
        self.events: List[ActivityEvent] = []

    def _store(self, event: ActivityEvent) -> None:
        self.events.append(event)
        if len(self.events) > self.max_entries:
            del self.events[: len(self.events) - self.max_entries]

    def actions(self) -> List[str]:
        return [e.action for e in self.events]

    def find(self, action: str) -> List[ActivityEvent]:
        return [e for e in self.events if e.action == action]

    def for_user(self, user_id: str) -> List[ActivityEvent]:
        return [e for e in self.events if e.user_id == user_id]

    def action_breakdown(self) -> Dict[str, int]:
        """Count of events per action."""
        breakdown: Dict[str, int] = {}
        for event in self.events:
            breakdown[event.action] = breakdown.get(event.action, 0) + 1
        return breakdown


class LoggingActivitySink(ActivitySink):
    """Writes events to the structured log only."""

    def _store(self, event: ActivityEvent) -> None:
        logger.info(
            "activity_logged",
            action=event.action,
            user_id=event.user_id,
            event_id=event.id,
            data=event.data,
        )


class FirestoreActivitySink(ActivitySink):
    """Writes events to the activity_logs collection."""

    COLLECTION_ACTIVITY = "activity_logs"

    def __init__(self, db=None):
        self._db = db

    @property
    def db(self):
        """Get Firestore client (lazy initialization)."""
        if self._db is None:
            self._db = firestore.client()
        return self._db

    def _store(self, event: ActivityEvent) -> None:
        self.db.collection(self.COLLECTION_ACTIVITY).document(event.id).set(event.to_firestore_dict())
