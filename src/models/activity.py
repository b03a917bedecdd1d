"""
Activity Models for Finance Manager

Every mutation against the record store, and every failure to read or
write, becomes an ActivityEvent. Events are logged locally; the ones
that carry a ``user_message`` are also surfaced to the user as a Notice
(a toast in the UI).
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class ActivityEventType(str, Enum):
    """Types of events we record."""
    # Persistence
    RECORD_CREATED = "record_created"
    RECORD_UPDATED = "record_updated"
    RECORD_DELETED = "record_deleted"

    # Failures
    LOAD_FAILED = "load_failed"
    SAVE_FAILED = "save_failed"
    DELETE_FAILED = "delete_failed"
    RECORD_SKIPPED = "record_skipped"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notice(BaseModel):
    """A short message for the user."""
    level: NoticeLevel
    message: str = Field(..., min_length=1)


class ActivityEvent(BaseModel):
    """A single activity event."""

    # Identity
    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    # Classification
    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    # Context - which table/record is this about?
    table: Optional[str] = None
    record_id: Optional[int] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    # Shown to the user when set
    user_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dict for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "table": self.table,
            "record_id": self.record_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }

    def to_notice(self) -> Optional[Notice]:
        """The user-facing notice for this event, if it has one."""
        if not self.user_message:
            return None
        if self.severity == ActivitySeverity.ERROR:
            level = NoticeLevel.ERROR
        elif self.severity == ActivitySeverity.WARNING:
            level = NoticeLevel.WARNING
        elif self.event_type in (
            ActivityEventType.RECORD_CREATED,
            ActivityEventType.RECORD_UPDATED,
            ActivityEventType.RECORD_DELETED,
        ):
            level = NoticeLevel.SUCCESS
        else:
            level = NoticeLevel.INFO
        return Notice(level=level, message=self.user_message)


class ActivityEventBuilder:
    """Factory methods for the events services emit."""

    @staticmethod
    def record_created(table: str, record_id: Optional[int], label: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.RECORD_CREATED,
            table=table,
            record_id=record_id,
            description=f"Created {label} record",
            user_message=f"{label.capitalize()} created successfully",
        )

    @staticmethod
    def record_updated(table: str, record_id: int, label: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.RECORD_UPDATED,
            table=table,
            record_id=record_id,
            description=f"Updated {label} record",
            user_message=f"{label.capitalize()} updated successfully",
        )

    @staticmethod
    def record_deleted(table: str, record_id: int, label: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.RECORD_DELETED,
            table=table,
            record_id=record_id,
            description=f"Deleted {label} record",
            user_message=f"{label.capitalize()} deleted successfully",
        )

    @staticmethod
    def load_failed(
        table: str,
        label: str,
        error_message: str,
        record_id: Optional[int] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LOAD_FAILED,
            severity=ActivitySeverity.ERROR,
            table=table,
            record_id=record_id,
            description=f"Failed to load {label} records",
            error_message=error_message,
            user_message=f"Failed to load {label} data",
        )

    @staticmethod
    def save_failed(
        table: str,
        label: str,
        error_message: str,
        record_id: Optional[int] = None,
        field_errors: Optional[list[dict]] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SAVE_FAILED,
            severity=ActivitySeverity.ERROR,
            table=table,
            record_id=record_id,
            description=f"Failed to save {label} record",
            details={"field_errors": field_errors or []},
            error_message=error_message,
            user_message=error_message,
        )

    @staticmethod
    def delete_failed(
        table: str,
        label: str,
        record_id: int,
        error_message: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.DELETE_FAILED,
            severity=ActivitySeverity.ERROR,
            table=table,
            record_id=record_id,
            description=f"Failed to delete {label} record",
            error_message=error_message,
            user_message=f"Failed to delete {label}",
        )

    @staticmethod
    def record_skipped(table: str, record_id: Optional[int], reason: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.RECORD_SKIPPED,
            severity=ActivitySeverity.WARNING,
            table=table,
            record_id=record_id,
            description="Skipped malformed record",
            error_message=reason,
        )
