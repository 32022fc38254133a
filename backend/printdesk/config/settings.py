from __future__ import annotations
"""Runtime settings resolved once at startup.

Values come from the process environment (``.env`` is loaded by the app
factory) and may be overridden by the mapping handed to ``create_app``.
The resulting object is passed to the stores explicitly; nothing re-reads
the environment per request.
"""
from dataclasses import dataclass
from typing import Any, Mapping, Optional
import os

DEFAULT_FILE_TTL_HOURS = 1.0
DEFAULT_PAYMENT_PROOF_TTL_HOURS = 24.0


def _lookup(key: str, overrides: Mapping[str, Any]):
    if key in overrides and overrides[key] is not None:
        return overrides[key]
    raw = os.getenv(key)
    if raw is None or raw.strip() == '':
        return None
    return raw


def _number(key: str, overrides: Mapping[str, Any], default, cast=float):
    raw = _lookup(key, overrides)
    if raw is None:
        return default
    try:
        value = cast(raw)
    except (TypeError, ValueError):
        raise ValueError(f'{key} must be a number, got {raw!r}')
    if value < 0:
        raise ValueError(f'{key} must not be negative')
    return value


def _text(key: str, overrides: Mapping[str, Any], default: Optional[str]):
    raw = _lookup(key, overrides)
    return str(raw) if raw is not None else default


@dataclass(frozen=True)
class LifecyclePolicy:
    """Retention applied when an order reaches delivered/cancelled."""
    file_ttl_hours: float = DEFAULT_FILE_TTL_HOURS
    payment_proof_ttl_hours: float = DEFAULT_PAYMENT_PROOF_TTL_HOURS


@dataclass(frozen=True)
class UploadLimits:
    document_max_bytes: int = 10 * 1024 * 1024
    payment_proof_max_bytes: int = 5 * 1024 * 1024


@dataclass(frozen=True)
class Pricing:
    price_bw: int = 500
    price_color: int = 750
    max_copies: int = 20
    max_pages: int = 9999


@dataclass(frozen=True)
class Settings:
    database_url: str = 'sqlite:///dev.db'
    db_timeout_seconds: float = 5.0
    jwt_secret_key: str = 'dev-secret'
    storage_root: str = './storage'
    storage_bucket: str = 'documents'
    storage_public_url: str = '/files'
    cleanup_token: Optional[str] = None
    log_level: str = 'INFO'
    lifecycle: LifecyclePolicy = LifecyclePolicy()
    uploads: UploadLimits = UploadLimits()
    pricing: Pricing = Pricing()

    @classmethod
    def from_env(cls, overrides: Optional[Mapping[str, Any]] = None) -> 'Settings':
        o = dict(overrides or {})
        # Legacy PAYMENT_PROOF_TTL_HOURS still honoured when the delivered-specific key is absent
        proof_default = _number('PAYMENT_PROOF_TTL_HOURS', o, DEFAULT_PAYMENT_PROOF_TTL_HOURS)
        lifecycle = LifecyclePolicy(
            file_ttl_hours=_number('DELIVERED_FILE_TTL_HOURS', o, DEFAULT_FILE_TTL_HOURS),
            payment_proof_ttl_hours=_number('DELIVERED_PAYMENT_PROOF_TTL_HOURS', o, proof_default),
        )
        uploads = UploadLimits(
            document_max_bytes=int(_number('MAX_UPLOAD_MB', o, 10) * 1024 * 1024),
            payment_proof_max_bytes=int(_number('MAX_PAYMENT_PROOF_MB', o, 5) * 1024 * 1024),
        )
        pricing = Pricing(
            price_bw=_number('PRICE_BW', o, 500, int),
            price_color=_number('PRICE_COLOR', o, 750, int),
            max_copies=_number('MAX_COPIES', o, 20, int),
            max_pages=_number('MAX_PAGES', o, 9999, int),
        )
        return cls(
            database_url=_text('DATABASE_URL', o, 'sqlite:///dev.db'),
            db_timeout_seconds=_number('DB_TIMEOUT_SECONDS', o, 5.0),
            jwt_secret_key=_text('JWT_SECRET_KEY', o, 'dev-secret'),
            storage_root=_text('STORAGE_ROOT', o, './storage'),
            storage_bucket=_text('STORAGE_BUCKET', o, 'documents'),
            storage_public_url=_text('STORAGE_PUBLIC_URL', o, '/files').rstrip('/'),
            cleanup_token=_text('CLEANUP_TOKEN', o, None),
            log_level=_text('LOG_LEVEL', o, 'INFO').upper(),
            lifecycle=lifecycle,
            uploads=uploads,
            pricing=pricing,
        )


__all__ = ['Settings', 'LifecyclePolicy', 'UploadLimits', 'Pricing']
