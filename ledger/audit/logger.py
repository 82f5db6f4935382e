"""
Audit Logger

DESIGN DECISION: Every account change, entry and store problem is logged.
This provides:
1. Traceability of what each session did
2. Debugging capability when the store degrades
3. A record of rejected input

The audit logger:
- Is synchronous; the ledger runs one operation at a time
- Never raises (logging must not break the main flow)
- Supports correlation IDs so one session's events can be grouped
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from ledger.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
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
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output through the standard library at ``level``.

    structlog renders each event to a JSON string; the stdlib handler
    only needs to print the message.
    """
    logging.basicConfig(format="%(message)s", level=level.upper())
    logging.getLogger().setLevel(level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Logs events to the structured local log.
    """

    def __init__(self, logger=None):
        """
        Initialize audit logger.

        Args:
            logger: structlog logger to write to. Defaults to this module's.
        """
        self._logger = logger or structlog.get_logger("ledger.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity.value == "error":
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # Logging must never take the ledger down with it
            return False

        return True

    def log_user_registered(self, username: str) -> None:
        """Log account creation."""
        self.log(AuditEventBuilder.user_registered(username))

    def log_registration_rejected(self, username: str, reason: str) -> None:
        """Log a rejected registration."""
        self.log(AuditEventBuilder.registration_rejected(username, reason))

    def log_login_succeeded(self, username: str, correlation_id: UUID) -> None:
        """Log a successful login."""
        self.log(AuditEventBuilder.login_succeeded(username, correlation_id))

    def log_login_failed(self, username: str) -> None:
        """Log a failed login."""
        self.log(AuditEventBuilder.login_failed(username))

    def log_logged_out(self, username: str, correlation_id: UUID) -> None:
        """Log a logout."""
        self.log(AuditEventBuilder.logged_out(username, correlation_id))

    def log_entry_added(
        self,
        kind: str,
        username: str,
        category: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an income, expense or recurring expense being recorded."""
        self.log(AuditEventBuilder.entry_added(
            kind=kind,
            username=username,
            category=category,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_entry_rejected(
        self,
        kind: str,
        username: Optional[str],
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an entry that failed validation."""
        self.log(AuditEventBuilder.entry_rejected(
            kind=kind,
            username=username,
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_budget_updated(
        self,
        username: str,
        monthly: str,
        yearly: str,
        correlation_id: UUID,
    ) -> None:
        """Log new budget targets."""
        self.log(AuditEventBuilder.budget_updated(
            username=username,
            monthly=monthly,
            yearly=yearly,
            correlation_id=correlation_id,
        ))

    def log_store_loaded(self, path: str, record_count: int, issues: list[str]) -> None:
        """Log a load, flagging it if anything had to be skipped."""
        if issues:
            self.log(AuditEventBuilder.store_degraded(path, issues))
        else:
            self.log(AuditEventBuilder.store_loaded(path, record_count))

    def log_store_saved(self, path: str, correlation_id: Optional[UUID] = None) -> None:
        """Log a successful save."""
        self.log(AuditEventBuilder.store_saved(path, correlation_id))

    def log_save_failed(
        self,
        path: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed save."""
        self.log(AuditEventBuilder.save_failed(path, error_message, correlation_id))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Sessions create one at login and tag every event with it.
    """
    return uuid4()
