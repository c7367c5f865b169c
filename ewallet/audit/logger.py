"""
Audit Logger

The audit logger:
- Writes every event through structlog
- Keeps a bounded, newest-last history of events in memory
- Never raises: a logging failure must not affect the store
"""

import logging
from collections import deque
from typing import Optional

import structlog

from ewallet.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: str = "INFO", json_output: bool = True) -> None:
    """
    Configure structlog and the stdlib root logger.

    Safe to call more than once; the last call wins.
    """
    logging.basicConfig(format="%(message)s", level=level, force=True)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
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


class AuditLogger:
    """
    Central audit logging service.

    Logs events to:
    1. Structured local log (for debugging)
    2. An in-memory history (for inspection and tests)
    """

    def __init__(self, history_size: int = 200):
        """
        Initialize audit logger.

        Args:
            history_size: How many events to retain. 0 keeps none.
        """
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("ewallet.audit")

    def log(self, event: AuditEvent) -> None:
        """Log an audit event."""
        self._history.append(event)
        log_dict = event.to_log_dict()

        try:
            if event.severity is AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity is AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity is AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            logging.getLogger(__name__).exception("audit logging failed")

    def recent_events(self, limit: Optional[int] = None) -> list[AuditEvent]:
        """Most recent events, newest first."""
        events = list(reversed(self._history))
        return events if limit is None else events[:limit]

    def log_command_applied(self, command: str, entity_id: Optional[str]) -> None:
        self.log(AuditEventBuilder.command_applied(command, entity_id))

    def log_command_rejected(
        self,
        command: str,
        entity_id: Optional[str],
        error_message: str,
    ) -> None:
        self.log(AuditEventBuilder.command_rejected(command, entity_id, error_message))

    def log_document_loaded(self, card_count: int, transaction_count: int) -> None:
        self.log(AuditEventBuilder.document_loaded(card_count, transaction_count))

    def log_document_seeded(self) -> None:
        self.log(AuditEventBuilder.document_seeded())

    def log_late_load_ignored(self, commands_applied: int) -> None:
        self.log(AuditEventBuilder.late_load_ignored(commands_applied))

    def log_document_saved(self, key: str) -> None:
        self.log(AuditEventBuilder.document_saved(key))

    def log_save_failed(self, key: str, error_message: Optional[str] = None) -> None:
        self.log(AuditEventBuilder.save_failed(key, error_message))

    def log_report_exported(self, card_id: str, title: str) -> None:
        self.log(AuditEventBuilder.report_exported(card_id, title))

    def log_export_failed(self, card_id: str, error_message: str) -> None:
        self.log(AuditEventBuilder.export_failed(card_id, error_message))
