from __future__ import annotations
from flask import Blueprint, request, current_app
from printdesk.constants.permissions import ORDERS_READ, ORDERS_UPDATE
from printdesk.decorators.auth import require_permissions
from printdesk.decorators.audit import audit_log
from printdesk.errors import NotFound, ValidationError
from printdesk.services.orders import OrderService
from printdesk.services.order_store import order_json
from printdesk.utils.listing import make_cached_list_response, handle_conditional, latest_timestamp

orders_bp = Blueprint('orders', __name__)


def order_service() -> OrderService:
    return current_app.extensions['printdesk']


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('JSON object body required')
    return data


@orders_bp.get('/orders')
def get_orders():
    svc = order_service()
    order_id = request.args.get('id')
    if order_id:
        return order_json(svc.get_order(order_id))
    tracking_id = request.args.get('trackingId')
    if tracking_id:
        return svc.track_order(tracking_id)
    return _list_orders()


@require_permissions(ORDERS_READ)
def _list_orders():
    rows = order_service().list_orders(sort=request.args.get('sort'), status=request.args.get('status'))
    rows_json = [order_json(o) for o in rows]
    latest_ts = latest_timestamp(o.updated_at for o in rows)
    resp, etag = make_cached_list_response(rows_json, latest_ts)
    cond = handle_conditional(etag, latest_ts)
    if cond:
        return cond
    return resp


@orders_bp.post('/orders')
def create_order():
    order = order_service().create_order(_json_body())
    return order_json(order), 201


def _prefetch_order(data) -> dict:
    order_id = data.get('id') if isinstance(data, dict) else None
    if not order_id:
        return {}
    try:
        return {'status': order_service().get_order(order_id).status}
    except NotFound:
        return {}


@orders_bp.patch('/orders')
@require_permissions(ORDERS_UPDATE)
@audit_log('ORDER.STATUS.SET', entity='Order', entity_id_key='id', diff_keys=['status'],
           pre_fetch=lambda a, kw: _prefetch_order(request.get_json(silent=True)),
           meta_keys=['status', 'file_expires_at', 'payment_proof_expires_at'])
def update_status():
    data = _json_body()
    if not data.get('id') or not data.get('status'):
        raise ValidationError('Missing id or status')
    _, order = order_service().set_status(data['id'], data['status'])
    return order_json(order)


@orders_bp.get('/orders/stats')
@require_permissions(ORDERS_READ)
def order_stats():
    return order_service().stats()


@orders_bp.get('/queue')
def queue():
    return order_service().queue()


@orders_bp.get('/quote')
def quote():
    args = request.args
    return order_service().quote(args.get('color_mode'), args.get('pages'), args.get('copies'))
