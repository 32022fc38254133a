from __future__ import annotations
"""Relational persistence for orders.

One row per order. Writes commit immediately and are then published on the
change notifier; reads return detached ORM rows (sessions are created with
``expire_on_commit=False``).
"""
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from printdesk.errors import NotFound, ValidationError
from printdesk.models.order import Order, new_order_id, utcnow
from printdesk.services.events import OrderEvents, ORDER_CREATED, ORDER_UPDATED
from printdesk.utils.sorting import apply_multi_sort
from printdesk.utils.timestamps import as_utc, iso_utc
from printdesk.utils.validation import require_fields, validate_status

REQUIRED_FIELDS = ('customer_name', 'contact', 'file_name', 'color_mode', 'copies', 'estimated_time')

CREATE_FIELDS = frozenset({
    'customer_name', 'contact', 'file_name', 'file_url', 'file_path',
    'payment_proof_url', 'payment_proof_path', 'color_mode', 'copies', 'pages',
    'paper_size', 'estimated_time', 'notes',
})

UPDATABLE_FIELDS = frozenset({
    'status',
    'file_expires_at', 'payment_proof_expires_at',
    'file_deleted', 'payment_proof_deleted',
    'file_url', 'file_path', 'payment_proof_url', 'payment_proof_path',
})

SORTABLE = {
    'created_at': Order.created_at,
    'updated_at': Order.updated_at,
    'status': Order.status,
    'customer_name': Order.customer_name,
}

ARTIFACT_KINDS = ('file', 'payment_proof')


def order_json(o: Order) -> Dict[str, Any]:
    return {
        'id': o.id,
        'customer_name': o.customer_name,
        'contact': o.contact,
        'file_name': o.file_name,
        'file_url': o.file_url,
        'file_path': o.file_path,
        'file_expires_at': iso_utc(o.file_expires_at),
        'file_deleted': bool(o.file_deleted),
        'payment_proof_url': o.payment_proof_url,
        'payment_proof_path': o.payment_proof_path,
        'payment_proof_expires_at': iso_utc(o.payment_proof_expires_at),
        'payment_proof_deleted': bool(o.payment_proof_deleted),
        'color_mode': o.color_mode,
        'copies': o.copies,
        'pages': o.pages,
        'paper_size': o.paper_size,
        'status': o.status,
        'estimated_time': o.estimated_time,
        'notes': o.notes,
        'created_at': iso_utc(o.created_at),
        'updated_at': iso_utc(o.updated_at),
    }


def artifact_columns(kind: str):
    """Return (url, path, expires_at, deleted) attribute names for an artifact kind."""
    if kind not in ARTIFACT_KINDS:
        raise ValidationError(f"artifact kind must be one of {', '.join(ARTIFACT_KINDS)}")
    return f'{kind}_url', f'{kind}_path', f'{kind}_expires_at', f'{kind}_deleted'


class SqlOrderStore:
    def __init__(self, session_factory: Callable[[], Any], events: Optional[OrderEvents] = None,
                 clock: Callable[[], datetime] = utcnow):
        self.session_factory = session_factory
        self.events = events or OrderEvents()
        self.clock = clock

    def _commit(self, session):
        try:
            session.commit()
        except SQLAlchemyError:
            session.rollback()
            raise

    def create(self, fields: Mapping[str, Any]) -> Order:
        require_fields(fields, REQUIRED_FIELDS)
        unknown = set(fields) - CREATE_FIELDS
        if unknown:
            raise ValidationError(f"unknown fields: {', '.join(sorted(unknown))}")
        session = self.session_factory()
        now = self.clock()
        order = Order(
            id=new_order_id(),
            status=Order.STATUS_PENDING,
            file_deleted=False,
            payment_proof_deleted=False,
            created_at=now,
            updated_at=now,
            **dict(fields),
        )
        session.add(order)
        self._commit(session)
        self.events.publish(ORDER_CREATED, order_json(order))
        return order

    def _load(self, session, order_id: str) -> Order:
        order = None
        if order_id:
            order = session.execute(select(Order).where(Order.id == str(order_id))).scalar_one_or_none()
        if not order:
            raise NotFound(f'Order {order_id} not found')
        return order

    def get(self, order_id: str) -> Order:
        return self._load(self.session_factory(), order_id)

    def list(self, sort: Optional[str] = None, status: Optional[str] = None) -> List[Order]:
        q = select(Order)
        if status:
            q = q.where(Order.status == validate_status(status, Order.ALL_STATUSES))
        q = apply_multi_sort(q, sort, SORTABLE, Order.id, default=Order.created_at.desc())
        return list(self.session_factory().execute(q).scalars().all())

    def find_expired(self, kind: str, now: datetime) -> List[Order]:
        _, _, expires_col, deleted_col = artifact_columns(kind)
        now = as_utc(now)
        expires = getattr(Order, expires_col)
        deleted = getattr(Order, deleted_col)
        q = select(Order).where(expires.is_not(None), expires < now, deleted == False)  # noqa: E712
        q = q.order_by(expires.asc(), Order.id.asc())
        return list(self.session_factory().execute(q).scalars().all())

    def update(self, order_id: str, changes: Mapping[str, Any]) -> Order:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"fields not updatable: {', '.join(sorted(unknown))}")
        session = self.session_factory()
        order = self._load(session, order_id)
        for key, value in changes.items():
            setattr(order, key, value)
        order.updated_at = self.clock()
        self._commit(session)
        self.events.publish(ORDER_UPDATED, order_json(order))
        return order


__all__ = ['SqlOrderStore', 'order_json', 'artifact_columns', 'ARTIFACT_KINDS', 'REQUIRED_FIELDS']
