from datetime import timedelta
import pytest

from printdesk.errors import NotFound, StorageError, ValidationError
from printdesk.services.expiry import purge_artifact, resolve_artifact_path, sweep_expired
from tests.test_utils_seed import create_order, create_order_with_file


def _schedule(store, order, when, kind='file'):
    return store.update(order.id, {f'{kind}_expires_at': when})


def test_resolve_prefers_path_then_url(store, objects):
    with_path = create_order(store, file_path='1_a.pdf', file_url='/files/documents/ignored.pdf')
    url_only = create_order(store, file_url='http://cdn.example.com/files/documents/2_My%20File.pdf')
    nothing = create_order(store, file_url='http://cdn.example.com/elsewhere/3_b.pdf')
    assert resolve_artifact_path(with_path, 'file', objects) == '1_a.pdf'
    assert resolve_artifact_path(url_only, 'file', objects) == '2_My File.pdf'
    assert resolve_artifact_path(nothing, 'file', objects) is None


def test_sweep_deletes_due_objects_then_flags_rows(store, objects, clock):
    order = create_order_with_file(store, objects, 'due.pdf')
    later = create_order_with_file(store, objects, 'later.pdf')
    _schedule(store, order, clock.now - timedelta(minutes=1))
    _schedule(store, later, clock.now + timedelta(hours=1))

    report = sweep_expired(store, objects, clock.now)

    assert report.deleted_files == [order.id]
    assert report.failed == [] and report.skipped == []
    assert not objects.exists('due.pdf')
    assert objects.exists('later.pdf')
    row = store.get(order.id)
    assert row.file_deleted is True
    assert row.file_url is None and row.file_path is None


def test_sweep_is_idempotent(store, objects, clock):
    order = create_order_with_file(store, objects)
    _schedule(store, order, clock.now - timedelta(minutes=1))
    first = sweep_expired(store, objects, clock.now)
    second = sweep_expired(store, objects, clock.now)
    assert first.deleted_files == [order.id]
    assert second.to_json() == {'deleted': [], 'deleted_payment_proofs': [], 'retired': [], 'failed': [], 'skipped': []}


def test_sweep_handles_payment_proofs_independently(store, objects, clock):
    path = objects.upload('proof.png', b'png')
    order = create_order_with_file(store, objects, payment_proof_path=path)
    store.update(order.id, {
        'file_expires_at': clock.now + timedelta(hours=1),
        'payment_proof_expires_at': clock.now - timedelta(seconds=1),
    })
    report = sweep_expired(store, objects, clock.now)
    assert report.deleted_payment_proofs == [order.id]
    assert report.deleted_files == []
    row = store.get(order.id)
    assert row.payment_proof_deleted is True and row.payment_proof_path is None
    assert row.file_deleted is False and row.file_path == 'doc.pdf'


def test_sweep_continues_after_storage_failure(store, objects, clock, monkeypatch):
    broken = create_order_with_file(store, objects, 'broken.pdf')
    fine = create_order_with_file(store, objects, 'fine.pdf')
    _schedule(store, broken, clock.now - timedelta(minutes=2))
    _schedule(store, fine, clock.now - timedelta(minutes=1))
    real_delete = objects.delete

    def flaky_delete(path):
        if path == 'broken.pdf':
            raise StorageError('disk unavailable')
        return real_delete(path)
    monkeypatch.setattr(objects, 'delete', flaky_delete)

    report = sweep_expired(store, objects, clock.now)
    assert report.deleted_files == [fine.id]
    assert report.failed == [{'id': broken.id, 'kind': 'file', 'reason': 'disk unavailable'}]
    row = store.get(broken.id)
    assert row.file_deleted is False and row.file_path == 'broken.pdf'
    # Retried on the next run once storage recovers
    monkeypatch.setattr(objects, 'delete', real_delete)
    assert sweep_expired(store, objects, clock.now).deleted_files == [broken.id]


def test_sweep_treats_missing_object_as_deleted(store, objects, clock):
    order = create_order_with_file(store, objects, 'gone.pdf')
    objects.delete('gone.pdf')
    _schedule(store, order, clock.now - timedelta(minutes=1))
    report = sweep_expired(store, objects, clock.now)
    assert report.deleted_files == [order.id]
    assert store.get(order.id).file_deleted is True


def test_sweep_retires_rows_that_never_held_an_object(store, objects, clock):
    orders = [create_order_with_file(store, objects, f'doc{i}.pdf') for i in range(3)]
    for order in orders:
        store.update(order.id, {
            'file_expires_at': clock.now - timedelta(hours=2),
            'payment_proof_expires_at': clock.now - timedelta(minutes=1),
        })
    first = sweep_expired(store, objects, clock.now)
    assert sorted(first.deleted_files) == sorted(o.id for o in orders)
    assert sorted(r['id'] for r in first.retired) == sorted(o.id for o in orders)
    assert {r['kind'] for r in first.retired} == {'payment_proof'}
    assert first.skipped == [] and first.failed == []
    row = store.get(orders[0].id)
    assert row.payment_proof_deleted is True
    assert row.payment_proof_url is None and row.payment_proof_path is None
    # Nothing left to revisit on later runs
    assert store.find_expired('payment_proof', clock.now) == []
    second = sweep_expired(store, objects, clock.now + timedelta(days=1))
    assert second.skipped == [] and second.retired == []


def test_sweep_skips_unrecognised_url(store, objects, clock):
    order = create_order(store, file_url='https://elsewhere.example.com/uploads/1_a.pdf')
    _schedule(store, order, clock.now - timedelta(minutes=1))
    report = sweep_expired(store, objects, clock.now)
    assert report.deleted_files == [] and report.retired == []
    assert report.skipped == [{'id': order.id, 'kind': 'file', 'reason': 'unrecognised object URL'}]
    row = store.get(order.id)
    assert row.file_deleted is False
    assert row.file_url == 'https://elsewhere.example.com/uploads/1_a.pdf'


def test_purge_removes_object_and_flags_row(store, objects):
    order = create_order_with_file(store, objects, 'purge.pdf')
    updated = purge_artifact(store, objects, order.id)
    assert not objects.exists('purge.pdf')
    assert updated.file_deleted is True
    assert updated.file_url is None and updated.file_path is None
    assert updated.payment_proof_deleted is False


def test_purge_without_path_leaves_row_unchanged(store, objects):
    order = create_order(store)
    before = store.get(order.id).updated_at
    with pytest.raises(ValidationError) as exc:
        purge_artifact(store, objects, order.id)
    assert exc.value.detail == 'No file to delete'
    row = store.get(order.id)
    assert row.file_deleted is False
    assert row.updated_at == before


def test_purge_storage_failure_leaves_row_unchanged(store, objects, monkeypatch):
    order = create_order_with_file(store, objects, 'stuck.pdf')

    def failing_delete(path):
        raise StorageError('permission denied')
    monkeypatch.setattr(objects, 'delete', failing_delete)
    with pytest.raises(StorageError):
        purge_artifact(store, objects, order.id)
    row = store.get(order.id)
    assert row.file_deleted is False and row.file_path == 'stuck.pdf'


def test_purge_unknown_order_and_kind(store, objects):
    with pytest.raises(NotFound):
        purge_artifact(store, objects, 'missing')
    order = create_order_with_file(store, objects)
    with pytest.raises(ValidationError):
        purge_artifact(store, objects, order.id, 'receipt')
