from __future__ import annotations
from typing import Optional, Set
import hmac
from flask import request
from flask_jwt_extended import get_jwt, verify_jwt_in_request
from printdesk.errors import AuthorizationError


def current_permissions() -> Set[str]:
    claims = get_jwt()
    return set(claims.get('perms', []))


def has_permissions(*codes: str) -> bool:
    perms = current_permissions()
    return all(c in perms for c in codes)


def _presented_scheduler_token() -> Optional[str]:
    header = request.headers.get('X-Cleanup-Token')
    if header:
        return header.strip()
    auth = request.headers.get('Authorization', '')
    if auth.lower().startswith('bearer '):
        return auth[7:].strip()
    return None


def assert_scheduler_or_permission(expected_token: Optional[str], code: str):
    """Gate for scheduler-driven endpoints.

    Accept the shared token when one is configured, otherwise (or instead) an
    admin JWT carrying ``code``.
    """
    presented = _presented_scheduler_token()
    if expected_token and presented and hmac.compare_digest(presented, expected_token):
        return
    verify_jwt_in_request(optional=True)
    if not get_jwt():
        raise AuthorizationError('Cleanup token or admin token required', status=401)
    if not has_permissions(code):
        raise AuthorizationError('Missing permission')
