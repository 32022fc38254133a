from __future__ import annotations
from flask import Blueprint, request, send_file
from printdesk.constants.permissions import FILES_PURGE, FILES_SWEEP
from printdesk.decorators.auth import require_permissions
from printdesk.decorators.audit import audit_log
from printdesk.errors import NotFound, StorageError, ValidationError
from printdesk.routes.orders import order_service, _json_body
from printdesk.services.order_store import order_json
from printdesk.services.policy import assert_scheduler_or_permission
from printdesk.services.uploads import KIND_DOCUMENT

files_bp = Blueprint('files', __name__)


@files_bp.post('/upload')
def upload():
    file = request.files.get('file')
    if file is None or not file.filename:
        raise ValidationError('No file provided')
    kind = request.form.get('kind') or KIND_DOCUMENT
    data = file.read()
    return order_service().upload(file.filename, file.mimetype, data, kind)


def _purge_kind(data: dict) -> str:
    return 'payment_proof' if data.get('type') == 'payment_proof' else 'file'


@files_bp.post('/delete-file')
@require_permissions(FILES_PURGE)
@audit_log('ORDER.ARTIFACT.PURGE', entity='Order', entity_id_key='id',
           meta_builder=lambda data, rv, a, kw: {'kind': _purge_kind(request.get_json(silent=True) or {})})
def delete_file():
    data = _json_body()
    if not data.get('id'):
        raise ValidationError('Missing id')
    order = order_service().purge(data['id'], _purge_kind(data))
    return {'deleted': True, 'id': order.id, 'order': order_json(order)}


@files_bp.post('/cleanup')
def cleanup():
    svc = order_service()
    assert_scheduler_or_permission(svc.settings.cleanup_token, FILES_SWEEP)
    return svc.sweep().to_json()


@files_bp.get('/files/<bucket>/<path:object_path>')
def serve_file(bucket: str, object_path: str):
    objects = order_service().objects
    if bucket != objects.bucket:
        raise NotFound('Unknown bucket')
    try:
        target = objects.open_path(object_path)
    except StorageError:
        raise NotFound('File not found')
    return send_file(target, download_name=object_path.rsplit('/', 1)[-1])
