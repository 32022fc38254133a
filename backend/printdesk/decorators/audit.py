from __future__ import annotations
"""Audit logging decorator to reduce repetitive add_audit() calls in route handlers.

Usage example:

@audit_log('ORDER.STATUS.SET', entity='Order', entity_id_key='id',
           diff_keys=['status'], pre_fetch=lambda a, kw: _prefetch_order(request.json),
           meta_keys=['status'])
def update_status(): ...

Parameters:
  action: required audit action code (e.g. ORDER.STATUS.SET)
  entity: optional entity label (Order)
  entity_id_key: key in the returned JSON object whose value becomes entity_id.
  entity_id_arg: name of the function argument / path parameter to use for entity_id (fallback if entity_id_key absent).
  meta_keys: list of keys to project from returned JSON into meta dict (shallow copy).
  meta_builder: callable returning a meta dict; receives (data, original_return_value, args, kwargs). If provided it overrides meta_keys.
  diff_keys / pre_fetch: snapshot taken before the call; changed keys land in meta['changes'].

Only successful calls are audited: an exception raised by the view propagates
untouched and nothing is written. A failure while writing the audit row is
logged and does not alter the response.
"""

from functools import wraps
from typing import Any, Callable, Iterable, Optional, Dict
import logging

from sqlalchemy.exc import SQLAlchemyError

from printdesk.services.audit import add_audit
from printdesk import get_db

logger = logging.getLogger(__name__)


def _extract_payload(rv: Any):
    """Return (data, original_rv) where data is the JSON-able dict for inspection."""
    if isinstance(rv, tuple) and rv:
        data = rv[0]
        return data, rv
    return rv, rv


def _diff(before: Dict[str, Any], after: Dict[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    changes = {}
    for k in keys:
        if k in before and k in after and before.get(k) != after.get(k):
            changes[k] = {'before': before.get(k), 'after': after.get(k)}
    return changes


def audit_log(
    action: str,
    *,
    entity: Optional[str] = None,
    entity_id_key: Optional[str] = None,
    entity_id_arg: Optional[str] = None,
    meta_keys: Optional[Iterable[str]] = None,
    meta_builder: Optional[Callable[[dict, Any, tuple, dict], dict]] = None,
    commit: bool = True,
    # Diff support
    diff_keys: Optional[Iterable[str]] = None,
    pre_fetch: Optional[Callable[[tuple, dict], Dict[str, Any]]] = None,
):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            before_snapshot = pre_fetch(args, kwargs) if (diff_keys and pre_fetch) else None
            rv = fn(*args, **kwargs)
            data, _ = _extract_payload(rv)
            if not isinstance(data, dict):
                data = {}
            entity_id = None
            if entity_id_key and entity_id_key in data:
                entity_id = data.get(entity_id_key)
            elif entity_id_arg and entity_id_arg in kwargs:
                entity_id = kwargs.get(entity_id_arg)
            if meta_builder:
                meta = meta_builder(data, rv, args, kwargs)
            elif meta_keys:
                meta = {k: data.get(k) for k in meta_keys if k in data}
            else:
                meta = {}
            if diff_keys and isinstance(before_snapshot, dict):
                changes = _diff(before_snapshot, data, diff_keys)
                if changes:
                    meta = dict(meta or {})
                    meta['changes'] = changes
            try:
                add_audit(action, entity, entity_id, meta)
                if commit:
                    get_db().commit()
            except SQLAlchemyError:
                get_db().rollback()
                logger.exception('Audit write failed for %s %s', action, entity_id)
            return rv
        return wrapper
    return outer
