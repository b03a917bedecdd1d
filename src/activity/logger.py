"""
Activity Logger

Every mutation and every failed read or write is logged. This provides:
1. Traceability of what changed in the record store
2. Debugging capability
3. The success/error notices the user sees as toasts

The activity logger:
- Never raises (a logging failure must not break the main flow)
- Queues user-facing notices until the UI drains them
"""

import logging
from collections import deque
from typing import Optional

import structlog

from src.config import get_settings
from src.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
    Notice,
)


def configure_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Configure structlog (and the stdlib logging it renders through).

    Defaults come from AppSettings (LOG_LEVEL, LOG_JSON).
    """
    app_settings = get_settings().app
    level_name = (level or app_settings.log_level).upper()
    use_json = app_settings.log_json if json_logs is None else json_logs

    logging.basicConfig(format="%(message)s", level=level_name, force=True)

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class ActivityLogger:
    """
    Central activity logging service.

    Logs events to the structured local log and keeps the user-facing
    notices they carry for the UI to display.
    """

    def __init__(self, max_notices: int = 50):
        self._logger = structlog.get_logger("activity")
        self._notices: deque[Notice] = deque(maxlen=max_notices)
        self._load_failures = 0

    def log(self, event: ActivityEvent) -> Optional[Notice]:
        """
        Log an activity event.

        Returns the notice queued for the user, if the event has one.
        """
        log_dict = event.to_log_dict()
        if event.event_type == ActivityEventType.LOAD_FAILED:
            self._load_failures += 1

        if event.severity == ActivitySeverity.ERROR:
            self._logger.error("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.WARNING:
            self._logger.warning("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.DEBUG:
            self._logger.debug("activity_event", **log_dict)
        else:
            self._logger.info("activity_event", **log_dict)

        notice = event.to_notice()
        if notice:
            self._notices.append(notice)
        return notice

    def drain_notices(self) -> list[Notice]:
        """Return and forget all pending notices, oldest first."""
        notices = list(self._notices)
        self._notices.clear()
        return notices

    @property
    def pending_notices(self) -> int:
        return len(self._notices)

    @property
    def load_failures(self) -> int:
        """Failed reads so far. Pages compare it before and after loading."""
        return self._load_failures

    def log_created(self, table: str, record_id: Optional[int], label: str) -> None:
        self.log(ActivityEventBuilder.record_created(table, record_id, label))

    def log_updated(self, table: str, record_id: int, label: str) -> None:
        self.log(ActivityEventBuilder.record_updated(table, record_id, label))

    def log_deleted(self, table: str, record_id: int, label: str) -> None:
        self.log(ActivityEventBuilder.record_deleted(table, record_id, label))

    def log_load_failed(
        self,
        table: str,
        label: str,
        error_message: str,
        record_id: Optional[int] = None,
    ) -> None:
        self.log(ActivityEventBuilder.load_failed(table, label, error_message, record_id))

    def log_save_failed(
        self,
        table: str,
        label: str,
        error_message: str,
        record_id: Optional[int] = None,
        field_errors: Optional[list[dict]] = None,
    ) -> None:
        self.log(ActivityEventBuilder.save_failed(
            table, label, error_message, record_id, field_errors,
        ))

    def log_delete_failed(
        self,
        table: str,
        label: str,
        record_id: int,
        error_message: str,
    ) -> None:
        self.log(ActivityEventBuilder.delete_failed(table, label, record_id, error_message))

    def log_record_skipped(self, table: str, record_id: Optional[int], reason: str) -> None:
        self.log(ActivityEventBuilder.record_skipped(table, record_id, reason))
