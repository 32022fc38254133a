import pytest

from printdesk.config.settings import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ('DELIVERED_FILE_TTL_HOURS', 'DELIVERED_PAYMENT_PROOF_TTL_HOURS', 'PAYMENT_PROOF_TTL_HOURS',
                'MAX_UPLOAD_MB', 'PRICE_BW', 'CLEANUP_TOKEN', 'STORAGE_PUBLIC_URL', 'LOG_LEVEL'):
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    s = Settings.from_env()
    assert s.lifecycle.file_ttl_hours == 1
    assert s.lifecycle.payment_proof_ttl_hours == 24
    assert s.uploads.document_max_bytes == 10 * 1024 * 1024
    assert s.uploads.payment_proof_max_bytes == 5 * 1024 * 1024
    assert s.pricing.price_bw == 500 and s.pricing.price_color == 750
    assert s.cleanup_token is None
    assert s.storage_public_url == '/files'


def test_environment_values(monkeypatch):
    monkeypatch.setenv('DELIVERED_FILE_TTL_HOURS', '2.5')
    monkeypatch.setenv('PRICE_BW', '400')
    monkeypatch.setenv('STORAGE_PUBLIC_URL', 'https://cdn.example.com/files/')
    monkeypatch.setenv('LOG_LEVEL', 'debug')
    s = Settings.from_env()
    assert s.lifecycle.file_ttl_hours == 2.5
    assert s.pricing.price_bw == 400
    assert s.storage_public_url == 'https://cdn.example.com/files'
    assert s.log_level == 'DEBUG'


def test_payment_proof_ttl_fallback_chain(monkeypatch):
    monkeypatch.setenv('PAYMENT_PROOF_TTL_HOURS', '12')
    assert Settings.from_env().lifecycle.payment_proof_ttl_hours == 12
    monkeypatch.setenv('DELIVERED_PAYMENT_PROOF_TTL_HOURS', '6')
    assert Settings.from_env().lifecycle.payment_proof_ttl_hours == 6


def test_overrides_win_over_environment(monkeypatch):
    monkeypatch.setenv('DELIVERED_FILE_TTL_HOURS', '5')
    s = Settings.from_env({'DELIVERED_FILE_TTL_HOURS': 0.25, 'CLEANUP_TOKEN': 'tok'})
    assert s.lifecycle.file_ttl_hours == 0.25
    assert s.cleanup_token == 'tok'


@pytest.mark.parametrize('value', ['abc', '-1'])
def test_invalid_numbers_fail_fast(monkeypatch, value):
    monkeypatch.setenv('MAX_UPLOAD_MB', value)
    with pytest.raises(ValueError):
        Settings.from_env()
