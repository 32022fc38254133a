from __future__ import annotations
"""Deletion of expired or manually purged order artifacts.

Both paths delete the stored object first and only then flag the row, so an
interruption between the two steps leaves a row pointing at a missing
object, never a row claiming deletion while the object is still public.
An object that is already gone counts as deleted.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError

from printdesk.errors import StorageError, ValidationError
from printdesk.models.order import Order
from printdesk.services.order_store import ARTIFACT_KINDS, artifact_columns
from printdesk.services.storage import ObjectNotFound

logger = logging.getLogger(__name__)


def resolve_artifact_path(order: Order, kind: str, objects) -> Optional[str]:
    """Stored path first, else the path parsed out of the public URL."""
    url_col, path_col, _, _ = artifact_columns(kind)
    path = getattr(order, path_col)
    if path:
        return path
    return objects.path_from_url(getattr(order, url_col))


def deleted_changes(kind: str) -> Dict[str, object]:
    url_col, path_col, _, deleted_col = artifact_columns(kind)
    return {url_col: None, path_col: None, deleted_col: True}


def _remove_object(objects, path: str):
    try:
        objects.delete(path)
    except ObjectNotFound:
        logger.warning('Object %s already absent; flagging as deleted', path)


@dataclass
class SweepReport:
    deleted_files: List[str] = field(default_factory=list)
    deleted_payment_proofs: List[str] = field(default_factory=list)
    retired: List[Dict[str, str]] = field(default_factory=list)
    failed: List[Dict[str, str]] = field(default_factory=list)
    skipped: List[Dict[str, str]] = field(default_factory=list)

    def deleted_for(self, kind: str) -> List[str]:
        return self.deleted_files if kind == 'file' else self.deleted_payment_proofs

    def to_json(self):
        return {
            'deleted': list(self.deleted_files),
            'deleted_payment_proofs': list(self.deleted_payment_proofs),
            'retired': list(self.retired),
            'failed': list(self.failed),
            'skipped': list(self.skipped),
        }


def _holds_nothing(order: Order, kind: str) -> bool:
    url_col, path_col, _, _ = artifact_columns(kind)
    return not getattr(order, url_col) and not getattr(order, path_col)


def _flag_row(store, order: Order, kind: str, report: SweepReport) -> bool:
    try:
        store.update(order.id, deleted_changes(kind))
    except SQLAlchemyError as e:
        logger.error('Sweep could not flag %s of order %s as deleted: %s', kind, order.id, e)
        report.failed.append({'id': order.id, 'kind': kind, 'reason': 'row update failed'})
        return False
    return True


def sweep_expired(store, objects, now: datetime) -> SweepReport:
    """Delete every artifact whose expiry passed before now and flag its row.

    Rows that never held the artifact are flagged without touching storage
    (``retired``). Only a URL that cannot be mapped to an object path is
    reported as ``skipped``. One order's failure never aborts the sweep;
    rows that fail keep their state and are picked up again on the next run.
    """
    report = SweepReport()
    for kind in ARTIFACT_KINDS:
        for order in store.find_expired(kind, now):
            if _holds_nothing(order, kind):
                if _flag_row(store, order, kind, report):
                    report.retired.append({'id': order.id, 'kind': kind})
                continue
            path = resolve_artifact_path(order, kind, objects)
            if not path:
                report.skipped.append({'id': order.id, 'kind': kind, 'reason': 'unrecognised object URL'})
                continue
            try:
                _remove_object(objects, path)
            except StorageError as e:
                logger.error('Sweep could not remove %s %s for order %s: %s', kind, path, order.id, e)
                report.failed.append({'id': order.id, 'kind': kind, 'reason': str(e)})
                continue
            if _flag_row(store, order, kind, report):
                report.deleted_for(kind).append(order.id)
    logger.info(
        'Expiry sweep: %d files, %d payment proofs deleted; %d retired; %d failed; %d skipped',
        len(report.deleted_files), len(report.deleted_payment_proofs), len(report.retired),
        len(report.failed), len(report.skipped),
    )
    return report


def purge_artifact(store, objects, order_id: str, kind: str = 'file') -> Order:
    """Synchronously delete one artifact of one order.

    Raises NotFound for an unknown order, ValidationError when there is no
    object to delete, StorageError when the delete fails. The row is left
    untouched in every failure case.
    """
    artifact_columns(kind)
    order = store.get(order_id)
    path = resolve_artifact_path(order, kind, objects)
    if not path:
        raise ValidationError('No file to delete')
    _remove_object(objects, path)
    logger.info('Purged %s %s for order %s', kind, path, order.id)
    return store.update(order.id, deleted_changes(kind))


__all__ = ['SweepReport', 'sweep_expired', 'purge_artifact', 'resolve_artifact_path', 'deleted_changes']
