"""Test seeding utilities to reduce duplication.

These helpers centralize creation of admin accounts and orders directly
through the database / store, bypassing the HTTP layer where a test only
needs preconditions.
"""
from typing import Optional
from printdesk import get_db
from printdesk.models.admin import AdminUser


def ensure_admin(email: str, name: Optional[str] = None, password: str = 'pw', is_active: bool = True) -> AdminUser:
    session = get_db()
    u = session.query(AdminUser).filter_by(email=email).one_or_none()
    if not u:
        u = AdminUser(name=name or email.split('@')[0], email=email, password_hash='', is_active=is_active)
        u.set_password(password)
        session.add(u); session.commit(); session.refresh(u)
    return u


def order_fields(**overrides):
    """Valid creation fields as the store expects them (estimated_time precomputed)."""
    fields = {
        'customer_name': 'Alice',
        'contact': 'alice@example.com',
        'file_name': 'thesis.pdf',
        'color_mode': 'bw',
        'copies': 1,
        'estimated_time': 2,
    }
    fields.update(overrides)
    return fields


def create_order(store, **overrides):
    """Create an order through the store (non-idempotent). Returns the Order."""
    return store.create(order_fields(**overrides))


def create_order_with_file(store, objects, name: str = 'doc.pdf', data: bytes = b'%PDF-1.4 test', **overrides):
    """Store an object and create an order pointing at it."""
    path = objects.upload(name, data)
    return create_order(store, file_path=path, file_url=objects.public_url(path), file_name=name, **overrides)


__all__ = ['ensure_admin', 'order_fields', 'create_order', 'create_order_with_file']
