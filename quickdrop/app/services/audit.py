"""
Audit logging service for state-changing domain operations.

Audit rows are written through the caller's Repository so they commit (or
roll back) together with the change they describe.
"""

import logging
from typing import Optional, Dict, Any, List
from quickdrop.app.db.repository import Repository
from quickdrop.app.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


class AuditAction:
    """Standardized audit action constants."""
    PARCEL_CREATED = "PARCEL_CREATED"
    PARCEL_DELETED = "PARCEL_DELETED"
    
    PAYMENT_RECORDED = "PAYMENT_RECORDED"
    
    RIDER_ASSIGNED = "RIDER_ASSIGNED"
    DELIVERY_STATUS_UPDATED = "DELIVERY_STATUS_UPDATED"
    
    RIDER_CASHED_OUT = "RIDER_CASHED_OUT"
    
    USER_CREATED = "USER_CREATED"
    ROLE_CHANGED = "ROLE_CHANGED"
    RIDER_APPLIED = "RIDER_APPLIED"
    RIDER_APPROVED = "RIDER_APPROVED"
    RIDER_DELETED = "RIDER_DELETED"


async def log_event(
    repo: Repository,
    action: str,
    actor_email: Optional[str] = None,
    target_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """
    Record a domain event in the audit log.
    
    Args:
        repo: Repository of the unit of work being audited
        action: Action being performed (use AuditAction constants)
        actor_email: Verified email of the caller, if any
        target_id: ID of the document acted upon
        metadata: Additional context as JSON
        
    Returns:
        Created AuditLog instance (not yet committed)
    """
    audit_log = AuditLog(
        actor_email=actor_email,
        action=action,
        target_id=target_id,
        meta_data=metadata,
    )
    logger.info("%s target=%s actor=%s", action, target_id, actor_email)
    return await repo.insert(audit_log)


async def get_audit_trail(
    repo: Repository,
    target_id: Optional[str] = None,
    action: Optional[str] = None,
) -> List[AuditLog]:
    """Audit entries, newest first, optionally filtered by target and action."""
    criteria = []
    if target_id:
        criteria.append(AuditLog.target_id == target_id)
    if action:
        criteria.append(AuditLog.action == action)
    return await repo.find(AuditLog, *criteria, order_by=[AuditLog.timestamp.desc(), AuditLog.id.desc()])
