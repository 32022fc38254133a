import json
from datetime import timedelta

from printdesk import get_db
from printdesk.models.admin import AdminUser
from tests.test_utils_seed import create_order_with_file


def test_ensure_admin_is_idempotent(app_instance):
    from scripts.create_admin import ensure_admin, deactivate_admin
    session = get_db()
    assert ensure_admin(session, 'ops@example.com', 'pw', None, False) == 'created'
    session.commit()
    assert ensure_admin(session, 'ops@example.com', 'other', None, False) == 'unchanged'
    assert session.query(AdminUser).filter_by(email='ops@example.com').one().verify_password('pw')
    assert ensure_admin(session, 'ops@example.com', 'other', 'Ops', True) == 'updated (password, name)'
    assert deactivate_admin(session, 'ops@example.com') == 'deactivated'
    assert deactivate_admin(session, 'nobody@example.com') == 'missing'
    assert ensure_admin(session, 'ops@example.com', None, None, False) == 'updated (reactivated)'


def test_sweep_script_reports_json(app_instance, store, objects, clock, monkeypatch, capsys):
    import scripts.sweep_expired as sweep_script
    order = create_order_with_file(store, objects, 'old.pdf')
    store.update(order.id, {'file_expires_at': clock.now - timedelta(minutes=1)})
    monkeypatch.setattr(sweep_script, 'create_app', lambda: app_instance)

    assert sweep_script.main(['--list', '--json']) == 0
    due = json.loads(capsys.readouterr().out)
    assert due == {'file': [order.id], 'payment_proof': []}
    assert objects.exists('old.pdf')

    assert sweep_script.main(['--json']) == 0
    report = json.loads(capsys.readouterr().out)
    assert report['deleted'] == [order.id]
    assert not objects.exists('old.pdf')
