#!/usr/bin/env python
"""Idempotent creation of an admin account for the dashboard.

Usage:
    python backend/scripts/create_admin.py --email admin@example.com --password secret
    python backend/scripts/create_admin.py --email admin@example.com --password new --reset-password
    python backend/scripts/create_admin.py --email old@example.com --deactivate
    python backend/scripts/create_admin.py --email admin@example.com --password x --dry-run

Creates the tables when missing (fresh SQLite installs); use alembic for real databases.
"""
from __future__ import annotations
import os, sys, argparse
from sqlalchemy import select

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))

from printdesk import create_app, get_db  # type: ignore
from printdesk.models.admin import AdminUser, Base


def ensure_admin(session, email: str, password: str | None, name: str | None, reset_password: bool) -> str:
    user = session.execute(select(AdminUser).where(AdminUser.email==email)).scalar_one_or_none()
    if user is None:
        if not password:
            raise SystemExit('--password is required to create a new admin')
        user = AdminUser(name=name or email.split('@')[0], email=email, password_hash='', is_active=True)
        user.set_password(password)
        session.add(user)
        return 'created'
    changed = []
    if reset_password and password:
        user.set_password(password)
        changed.append('password')
    if not user.is_active:
        user.is_active = True
        changed.append('reactivated')
    if name and user.name != name:
        user.name = name
        changed.append('name')
    return f"updated ({', '.join(changed)})" if changed else 'unchanged'


def deactivate_admin(session, email: str) -> str:
    user = session.execute(select(AdminUser).where(AdminUser.email==email)).scalar_one_or_none()
    if user is None:
        return 'missing'
    user.is_active = False
    return 'deactivated'


def main(argv: list[str]) -> int:
    p = argparse.ArgumentParser(description='Create or update a PrintDesk admin account')
    p.add_argument('--email', required=True)
    p.add_argument('--password')
    p.add_argument('--name')
    p.add_argument('--reset-password', action='store_true', help='Overwrite the password of an existing account')
    p.add_argument('--deactivate', action='store_true', help='Disable the account instead of creating it')
    p.add_argument('--dry-run', action='store_true', help='Run logic then rollback (no DB changes)')
    args = p.parse_args(argv)

    app = create_app()
    with app.app_context():
        session = get_db()
        Base.metadata.create_all(bind=session.get_bind(), checkfirst=True)
        if args.deactivate:
            outcome = deactivate_admin(session, args.email)
        else:
            outcome = ensure_admin(session, args.email, args.password, args.name, args.reset_password)
        if args.dry_run:
            session.rollback()
            print(f"[dry-run] {args.email}: {outcome}")
        else:
            session.commit()
            print(f"{args.email}: {outcome}")
    return 0


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main(sys.argv[1:]))
