from __future__ import annotations
"""Order operations exposed to the HTTP layer and the maintenance scripts.

``OrderService`` ties the store, the object store, the lifecycle policy and
the clock together; it is built once in ``create_app`` and kept in
``app.extensions['printdesk']``.
"""
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple
import logging

from printdesk.config.settings import Settings
from printdesk.errors import ValidationError
from printdesk.models.order import Order, utcnow
from printdesk.services import pricing
from printdesk.services.expiry import purge_artifact, sweep_expired, SweepReport
from printdesk.services.lifecycle import plan_transition, transition_request
from printdesk.services.queue import queue_snapshot, status_counts
from printdesk.services.uploads import store_upload
from printdesk.utils.timestamps import iso_utc
from printdesk.utils.validation import require_fields, validate_choice, positive_int, optional_text

logger = logging.getLogger(__name__)

TRACKING_FIELDS = ('id', 'customer_name', 'file_name', 'status', 'created_at', 'estimated_time')


def tracking_json(o: Order) -> Dict[str, Any]:
    return {
        'id': o.id,
        'customer_name': o.customer_name,
        'file_name': o.file_name,
        'status': o.status,
        'created_at': iso_utc(o.created_at),
        'estimated_time': o.estimated_time,
    }


class OrderService:
    def __init__(self, store, objects, settings: Settings, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.objects = objects
        self.settings = settings
        self.clock = clock

    # ---- creation ----
    def clean_creation(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        require_fields(data, ('customer_name', 'contact', 'file_name', 'color_mode', 'copies'))
        limits = self.settings.pricing
        color_mode = validate_choice(data.get('color_mode'), Order.COLOR_MODES, 'color_mode')
        copies = positive_int(data.get('copies'), 'copies', limits.max_copies)
        pages = positive_int(data.get('pages') if data.get('pages') is not None else 1, 'pages', limits.max_pages)
        paper_size = validate_choice(data.get('paper_size') or Order.PAPER_A4, Order.PAPER_SIZES, 'paper_size')
        fields = {
            'customer_name': optional_text(data.get('customer_name'), 'customer_name', 128),
            'contact': optional_text(data.get('contact'), 'contact', 128),
            'file_name': optional_text(data.get('file_name'), 'file_name', 255),
            'file_url': optional_text(data.get('file_url'), 'file_url'),
            'file_path': optional_text(data.get('file_path'), 'file_path', 512),
            'payment_proof_url': optional_text(data.get('payment_proof_url'), 'payment_proof_url'),
            'payment_proof_path': optional_text(data.get('payment_proof_path'), 'payment_proof_path', 512),
            'color_mode': color_mode,
            'copies': copies,
            'pages': pages,
            'paper_size': paper_size,
            'estimated_time': Order.estimate_minutes(copies, color_mode),
            'notes': optional_text(data.get('notes'), 'notes'),
        }
        if fields['notes'] is None:
            fields['notes'] = pricing.summary_note(pricing.quote(color_mode, pages, copies, limits))
        return fields

    def create_order(self, data: Mapping[str, Any]) -> Order:
        order = self.store.create(self.clean_creation(data))
        logger.info('Order %s created (%s x%d, %d min)', order.id, order.color_mode, order.copies, order.estimated_time)
        return order

    # ---- reads ----
    def get_order(self, order_id: str) -> Order:
        return self.store.get(order_id)

    def track_order(self, order_id: str) -> Dict[str, Any]:
        return tracking_json(self.store.get(order_id))

    def list_orders(self, sort: Optional[str] = None, status: Optional[str] = None) -> List[Order]:
        return self.store.list(sort=sort, status=status)

    def queue(self) -> Dict[str, int]:
        return queue_snapshot(self.store.list())

    def stats(self) -> Dict[str, Any]:
        orders = self.store.list()
        return {'by_status': status_counts(orders), 'queue': queue_snapshot(orders)}

    def quote(self, color_mode: Any, pages: Any, copies: Any) -> Dict[str, Any]:
        limits = self.settings.pricing
        return pricing.quote(
            validate_choice(color_mode, Order.COLOR_MODES, 'color_mode'),
            positive_int(pages if pages is not None else 1, 'pages', limits.max_pages),
            positive_int(copies if copies is not None else 1, 'copies', limits.max_copies),
            limits,
        )

    # ---- lifecycle ----
    def set_status(self, order_id: str, status: Any) -> Tuple[str, Order]:
        """Apply a status transition; returns (previous_status, updated_order)."""
        if not order_id:
            raise ValidationError('Missing id or status')
        request = transition_request(status)
        order = self.store.get(order_id)
        changes = plan_transition(order.status, request, self.clock(), self.settings.lifecycle)
        previous = order.status
        updated = self.store.update(order.id, changes)
        logger.info('Order %s status %s -> %s', updated.id, previous, updated.status)
        return previous, updated

    # ---- artifacts ----
    def upload(self, filename: str, mimetype: str, data: bytes, kind: str) -> Dict[str, str]:
        now_ms = int(self.clock().timestamp() * 1000)
        return store_upload(self.objects, filename, mimetype, data, kind, self.settings.uploads, now_ms)

    def purge(self, order_id: str, kind: str = 'file') -> Order:
        if not order_id:
            raise ValidationError('Missing id')
        return purge_artifact(self.store, self.objects, order_id, kind)

    def sweep(self, now: Optional[datetime] = None) -> SweepReport:
        return sweep_expired(self.store, self.objects, now or self.clock())


__all__ = ['OrderService', 'tracking_json', 'TRACKING_FIELDS']
