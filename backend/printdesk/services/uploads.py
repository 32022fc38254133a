from __future__ import annotations
"""Upload acceptance: MIME allow-list, size cap, collision-free object name."""
from typing import Dict, Optional
import logging
import uuid

from printdesk.config.settings import UploadLimits
from printdesk.errors import ValidationError
from printdesk.services.storage import ObjectExists, unique_object_name

logger = logging.getLogger(__name__)

KIND_DOCUMENT = 'document'
KIND_PAYMENT_PROOF = 'payment_proof'

DOCUMENT_TYPES = (
    'application/pdf',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
)
PAYMENT_PROOF_TYPES = (
    'image/png',
    'image/jpeg',
    'image/webp',
    'application/pdf',
)


def rules_for(kind: str, limits: UploadLimits):
    if kind == KIND_DOCUMENT:
        return DOCUMENT_TYPES, limits.document_max_bytes, 'Only PDF, DOC, and DOCX are allowed.'
    if kind == KIND_PAYMENT_PROOF:
        return PAYMENT_PROOF_TYPES, limits.payment_proof_max_bytes, 'Only PNG, JPEG, WEBP, and PDF are allowed.'
    raise ValidationError(f'upload kind must be {KIND_DOCUMENT} or {KIND_PAYMENT_PROOF}')


def validate_upload(filename: Optional[str], mimetype: Optional[str], size: int, kind: str, limits: UploadLimits):
    allowed, max_bytes, hint = rules_for(kind, limits)
    if not filename:
        raise ValidationError('No file provided')
    if mimetype not in allowed:
        raise ValidationError(f'Invalid file type. {hint}')
    if size > max_bytes:
        raise ValidationError(f'File too large. Maximum size is {max_bytes // (1024 * 1024)}MB.')


def store_upload(objects, filename: str, mimetype: str, data: bytes, kind: str, limits: UploadLimits,
                 now_ms: Optional[int] = None) -> Dict[str, str]:
    validate_upload(filename, mimetype, len(data), kind, limits)
    name = unique_object_name(filename, now_ms)
    try:
        path = objects.upload(name, data)
    except ObjectExists:
        # Same name within the same millisecond
        logger.info('Object %s exists; retrying with a suffix', name)
        path = objects.upload(unique_object_name(filename, now_ms, uuid.uuid4().hex[:8]), data)
    return {
        'fileName': filename,
        'filePath': path,
        'fileUrl': objects.public_url(path),
    }
