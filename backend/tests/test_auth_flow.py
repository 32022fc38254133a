from printdesk.constants.permissions import ADMIN_PERMISSIONS, build_all_permission_codes
from tests.test_utils_seed import ensure_admin


def test_login_and_me(client):
    ensure_admin('admin@example.com', name='Desk Admin', password='s3cret')
    resp = client.post('/auth/login', json={'email': 'admin@example.com', 'password': 's3cret'})
    assert resp.status_code == 200
    token = resp.get_json()['access_token']
    me = client.get('/auth/me', headers={'Authorization': f'Bearer {token}'})
    assert me.status_code == 200
    body = me.get_json()
    assert body['email'] == 'admin@example.com'
    assert body['name'] == 'Desk Admin'
    assert sorted(body['perms']) == sorted(ADMIN_PERMISSIONS)
    # Login token grants admin routes
    assert client.get('/orders', headers={'Authorization': f'Bearer {token}'}).status_code == 200


def test_login_rejects_bad_credentials(client):
    ensure_admin('admin@example.com', password='s3cret')
    ensure_admin('former@example.com', password='pw', is_active=False)
    wrong = client.post('/auth/login', json={'email': 'admin@example.com', 'password': 'nope'})
    assert wrong.status_code == 401
    assert wrong.get_json()['error']['title'] == 'Unauthorized'
    assert client.post('/auth/login', json={'email': 'ghost@example.com', 'password': 'pw'}).status_code == 401
    assert client.post('/auth/login', json={'email': 'former@example.com', 'password': 'pw'}).status_code == 401
    assert client.post('/auth/login', json={'email': 'admin@example.com'}).status_code == 400


def test_me_requires_token(client):
    resp = client.get('/auth/me')
    assert resp.status_code == 401
    assert resp.get_json()['error']['kind'] == 'authorization'
    bad = client.get('/auth/me', headers={'Authorization': 'Bearer not-a-jwt'})
    assert bad.status_code == 401


def test_permission_codes_follow_service_action_pattern():
    codes = build_all_permission_codes()
    assert codes == ['ORDERS.READ', 'ORDERS.UPDATE', 'FILES.PURGE', 'FILES.SWEEP']
    assert all(code.count('.') == 1 for code in codes)
