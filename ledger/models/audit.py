"""
Audit Models for Personal Ledger

Every significant action in the ledger is logged for audit purposes.
This provides:
1. Traceability of account and entry changes
2. Debugging information when the store degrades
3. A record of rejected input

DESIGN DECISION: Audit events never carry passwords or stored
credentials, only usernames.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Accounts
    USER_REGISTERED = "user_registered"
    REGISTRATION_REJECTED = "registration_rejected"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    LOGGED_OUT = "logged_out"

    # Ledger entries
    INCOME_ADDED = "income_added"
    EXPENSE_ADDED = "expense_added"
    RECURRING_ADDED = "recurring_added"
    ENTRY_REJECTED = "entry_rejected"
    BUDGET_UPDATED = "budget_updated"

    # Persistence
    STORE_LOADED = "store_loaded"
    STORE_DEGRADED = "store_degraded"
    STORE_SAVED = "store_saved"
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.
    """

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What is this about? For ledger events the entity is a user.
    entity_type: Optional[str] = None
    entity_id: Optional[str] = Field(
        default=None,
        description="Username or store path the event relates to"
    )

    # Ties together everything done in one session
    correlation_id: Optional[UUID] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    is_user_action: bool = False

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.user_registered("alice")
        event = AuditEventBuilder.entry_added("expense", "alice", "Rent", "500", correlation_id)
    """

    @staticmethod
    def user_registered(username: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            entity_type="user",
            entity_id=username,
            description=f"User registered: {username}",
            is_user_action=True,
        )

    @staticmethod
    def registration_rejected(username: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REGISTRATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            entity_id=username or None,
            description="Registration rejected",
            error_message=reason,
            is_user_action=True,
        )

    @staticmethod
    def login_succeeded(username: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_SUCCEEDED,
            entity_type="user",
            entity_id=username,
            correlation_id=correlation_id,
            description=f"Login successful: {username}",
            is_user_action=True,
        )

    @staticmethod
    def login_failed(username: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            entity_id=username or None,
            description="Login failed: invalid credentials",
            is_user_action=True,
        )

    @staticmethod
    def logged_out(username: str, correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGGED_OUT,
            entity_type="user",
            entity_id=username,
            correlation_id=correlation_id,
            description=f"Logged out: {username}",
            is_user_action=True,
        )

    @staticmethod
    def entry_added(
        kind: str,
        username: str,
        category: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        event_type = {
            "income": AuditEventType.INCOME_ADDED,
            "expense": AuditEventType.EXPENSE_ADDED,
            "recurring": AuditEventType.RECURRING_ADDED,
        }[kind]
        return AuditEvent(
            event_type=event_type,
            entity_type="user",
            entity_id=username,
            correlation_id=correlation_id,
            description=f"{kind.capitalize()} added: {category} - {amount}",
            details={
                "category": category,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def entry_rejected(
        kind: str,
        username: Optional[str],
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            entity_id=username,
            correlation_id=correlation_id,
            description=f"{kind.capitalize()} rejected",
            error_message=reason,
            details={"kind": kind},
            is_user_action=True,
        )

    @staticmethod
    def budget_updated(
        username: str,
        monthly: str,
        yearly: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_UPDATED,
            entity_type="user",
            entity_id=username,
            correlation_id=correlation_id,
            description="Budget targets updated",
            details={
                "monthly_target": monthly,
                "yearly_target": yearly,
            },
            is_user_action=True,
        )

    @staticmethod
    def store_loaded(path: str, record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_LOADED,
            entity_type="store",
            entity_id=path,
            description=f"Store loaded with {record_count} records",
            details={"record_count": record_count},
        )

    @staticmethod
    def store_degraded(path: str, issues: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_DEGRADED,
            severity=AuditSeverity.WARNING,
            entity_type="store",
            entity_id=path,
            description=f"Store loaded with {len(issues)} problems",
            details={"issues": issues},
        )

    @staticmethod
    def store_saved(path: str, correlation_id: Optional[UUID] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORE_SAVED,
            severity=AuditSeverity.DEBUG,
            entity_type="store",
            entity_id=path,
            correlation_id=correlation_id,
            description="Store saved",
        )

    @staticmethod
    def save_failed(
        path: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="store",
            entity_id=path,
            correlation_id=correlation_id,
            description="Store could not be saved",
            error_message=error_message,
        )
