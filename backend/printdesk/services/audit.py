from __future__ import annotations
from typing import Any, Dict, Optional
from flask_jwt_extended import get_jwt_identity
from printdesk import get_db
from printdesk.models.audit import AuditLog


def current_actor() -> int:
    """Admin id from the request JWT, 0 when the call carries no identity (scheduler)."""
    try:
        ident = get_jwt_identity()
    except RuntimeError:
        # outside a verified JWT context
        return 0
    try:
        return int(ident) if ident is not None else 0
    except (TypeError, ValueError):
        return 0


def add_audit(action: str, entity: Optional[str] = None, entity_id: Optional[str] = None, meta: Optional[Dict[str, Any]] = None):
    """Persist an audit log entry within the current DB session.

    Parameters:
      action: short action code e.g. ORDER.STATUS.SET, ORDER.FILE.PURGE
      entity: optional entity name (Order)
      entity_id: optional primary key string
      meta: additional JSON-safe dictionary (will be shallow copied)
    """
    session = get_db()
    log = AuditLog(
        actor_user_id=current_actor(),
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        meta=dict(meta or {}),
    )
    session.add(log)
    # No commit here; caller's transaction boundary controls durability.
    return log
