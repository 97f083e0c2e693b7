"""Audit logging for safety-relevant operations.

Every change to the safety record (issue reports, status changes,
prescription links) and every safety verdict is written to a dedicated
"audit" logger so it can be routed to an append-only store.
"""

import logging
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

# Separate audit logger for safety-critical events
audit_logger = logging.getLogger("audit")


class AuditAction(str, Enum):
    """Types of auditable actions."""

    # Safety record
    REPORT = "report"
    UPDATE = "update"
    LINK = "link"

    # Decisions
    EVALUATE = "evaluate"
    TRACK = "track"

    # Usage
    FULFILL = "fulfill"


class AuditEvent(BaseModel):
    """Audit event record."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    action: AuditAction = Field(..., description="Type of action performed")
    resource_type: str = Field(..., description="Type of resource affected")
    resource_id: str | None = Field(None, description="ID of specific resource")
    patient_id: str | None = Field(None, description="Patient ID if applicable")
    details: dict | None = Field(None, description="Additional context")
    success: bool = Field(True, description="Whether action succeeded")


def log_audit(
    action: AuditAction,
    resource_type: str,
    resource_id: str | None = None,
    patient_id: str | None = None,
    details: dict | None = None,
    success: bool = True,
) -> AuditEvent:
    """Log an audit event.

    Args:
        action: Type of action being audited
        resource_type: The type of resource affected
        resource_id: Specific resource identifier
        patient_id: Patient ID if this is patient data
        details: Additional context
        success: Whether the action succeeded

    Returns:
        The created AuditEvent
    """
    event = AuditEvent(
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        patient_id=patient_id,
        details=details,
        success=success,
    )

    log_level = logging.INFO if success else logging.WARNING
    audit_logger.log(
        log_level,
        f"AUDIT: {action.value} {resource_type}"
        f"{f'/{resource_id}' if resource_id else ''}"
        f"{f' patient={patient_id}' if patient_id else ''}"
        f" success={success}",
        extra={"audit_event": event.model_dump()},
    )

    return event


def log_safety_decision(
    prescription_id: str,
    patient_id: str,
    is_safe: bool,
    warning_count: int,
    related_issue_ids: list[str],
) -> AuditEvent:
    """Log the outcome of a prescription safety evaluation.

    An unsafe verdict is logged as a successful audit event; ``success``
    refers to the evaluation itself, not the verdict.
    """
    return log_audit(
        action=AuditAction.EVALUATE,
        resource_type="prescription",
        resource_id=prescription_id,
        patient_id=patient_id,
        details={
            "is_safe": is_safe,
            "warning_count": warning_count,
            "related_issue_ids": related_issue_ids,
        },
    )
