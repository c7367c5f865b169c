"""
Audit Models for eWallet

Every state transition and every persistence attempt is recorded as an
AuditEvent. This provides:
1. Traceability of every command the store applied or rejected
2. Visibility into storage failures, which are never shown to the user
3. A record of which document the session started from

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # State transitions
    COMMAND_APPLIED = "command_applied"
    COMMAND_REJECTED = "command_rejected"

    # Bootstrap
    DOCUMENT_LOADED = "document_loaded"
    DOCUMENT_SEEDED = "document_seeded"
    LATE_LOAD_IGNORED = "late_load_ignored"

    # Persistence
    DOCUMENT_SAVED = "document_saved"
    SAVE_FAILED = "save_failed"

    # Sharing
    REPORT_EXPORTED = "report_exported"
    EXPORT_FAILED = "export_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context
    command: Optional[str] = Field(
        default=None,
        description="Name of the command involved, if any"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Card, transaction or category the event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "command": self.command,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.command_applied("AddCard", card_id)
        event = AuditEventBuilder.save_failed("disk full")
    """

    @staticmethod
    def command_applied(command: str, entity_id: Optional[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_APPLIED,
            severity=AuditSeverity.DEBUG,
            command=command,
            entity_id=entity_id,
            description=f"Applied {command}",
        )

    @staticmethod
    def command_rejected(
        command: str,
        entity_id: Optional[str],
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_REJECTED,
            severity=AuditSeverity.WARNING,
            command=command,
            entity_id=entity_id,
            description=f"Rejected {command}",
            error_message=error_message,
        )

    @staticmethod
    def document_loaded(
        card_count: int,
        transaction_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DOCUMENT_LOADED,
            description="Loaded stored document",
            details={
                "cards": card_count,
                "transactions": transaction_count,
            },
        )

    @staticmethod
    def document_seeded() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DOCUMENT_SEEDED,
            description="No usable stored document, starting from seed state",
        )

    @staticmethod
    def late_load_ignored(commands_applied: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LATE_LOAD_IGNORED,
            severity=AuditSeverity.WARNING,
            description="Stored document arrived after state was already changed",
            details={"commands_applied": commands_applied},
        )

    @staticmethod
    def document_saved(key: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DOCUMENT_SAVED,
            severity=AuditSeverity.DEBUG,
            description=f"Saved document under {key}",
        )

    @staticmethod
    def save_failed(key: str, error_message: Optional[str] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            description=f"Could not save document under {key}",
            error_message=error_message,
        )

    @staticmethod
    def report_exported(card_id: str, title: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_EXPORTED,
            entity_id=card_id,
            description=f"Shared report: {title}",
        )

    @staticmethod
    def export_failed(card_id: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_id=card_id,
            description="Failed to export card history",
            error_message=error_message,
        )
