from cms.extensions import db
from cms.models.audit_log import AuditLog
from typing import Optional

def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id,
    actor_id: Optional[int] = None,
    payload: dict | None = None
):
    """Adds an audit row to the current transaction."""
    log = AuditLog()

    log.actor_id = actor_id
    log.action = action
    log.entity_type = entity_type
    log.entity_id = str(entity_id)
    log.payload = payload or {}

    db.session.add(log)
