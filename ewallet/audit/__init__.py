"""Audit logging package."""

from ewallet.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
