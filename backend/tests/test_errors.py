from sqlalchemy.exc import OperationalError


def test_unknown_path_returns_error_json(client):
    resp = client.get('/non-existent-path')
    # Flask default 404 should be wrapped by error handler
    assert resp.status_code == 404
    body = resp.get_json()
    assert 'error' in body
    assert body['error']['status'] == 404
    assert body['error']['kind'] == 'http'
    assert 'detail' in body['error']


def test_method_not_allowed_shape(client):
    resp = client.delete('/orders')
    assert resp.status_code == 405
    assert resp.get_json()['error']['status'] == 405


def test_internal_error_shape(client, service, monkeypatch):
    def boom():
        raise RuntimeError('explode')
    monkeypatch.setattr(service, 'queue', boom)
    resp = client.get('/queue')
    assert resp.status_code == 500
    body = resp.get_json()
    assert body['error']['status'] == 500
    assert body['error']['title'] == 'Internal Server Error'
    assert body['error']['kind'] == 'internal'
    assert 'explode' not in body['error']['detail']


def test_database_unavailable_is_503(client, store, monkeypatch):
    def down(*a, **k):
        raise OperationalError('SELECT 1', {}, Exception('connection refused'))
    monkeypatch.setattr(store, 'list', down)
    resp = client.get('/queue')
    assert resp.status_code == 503
    assert resp.get_json()['error']['kind'] == 'unavailable'


def test_health(client):
    assert client.get('/healthz').get_json() == {'status': 'ok'}
