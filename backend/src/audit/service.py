"""Audit logging service for request lifecycle events.

This service provides a centralized interface for creating immutable audit log
entries. Every mutation of a request is recorded through it.

Audit Events:
- REQUEST_CREATED
- REQUEST_STATUS_CHANGED
- DOCUMENT_GENERATED
"""

from sqlalchemy.orm import Session
from uuid import UUID
from typing import Optional, Dict, Any

from models.audit_log import AuditLog

REQUEST_CREATED = "REQUEST_CREATED"
REQUEST_STATUS_CHANGED = "REQUEST_STATUS_CHANGED"
DOCUMENT_GENERATED = "DOCUMENT_GENERATED"


def log_audit_event(
    db: Session,
    action: str,
    actor_id: Optional[UUID] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[UUID] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Create an audit log entry.

    The entry joins the caller's transaction; it is committed together with
    the change it describes.

    Args:
        db: Database session
        action: Event action (e.g., "REQUEST_CREATED")
        actor_id: User who performed the action
        entity_type: Type of entity affected (e.g., "request")
        entity_id: ID of affected entity
        metadata: Additional context as JSON (e.g., {"from": "PROCESSING", "to": "COMPLETED"})

    Returns:
        AuditLog: The created audit log entry

    Example:
        log_audit_event(
            db=db,
            action=REQUEST_STATUS_CHANGED,
            actor_id=admin.id,
            entity_type="request",
            entity_id=request.id,
            metadata={"from": "PROCESSING", "to": "COMPLETED"},
        )
    """
    audit_entry = AuditLog(
        actor_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        metadata_json=metadata,
    )

    db.add(audit_entry)
    db.flush()  # Get ID without committing transaction

    return audit_entry
