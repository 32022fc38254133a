from __future__ import annotations
"""Object storage for uploaded documents and payment proofs.

``LocalObjectStore`` keeps objects under ``<root>/<bucket>/<path>`` and
exposes them at ``<public_url>/<bucket>/<path>``. Anything offering
``upload``/``delete``/``public_url``/``path_from_url`` can stand in for it.
"""
from pathlib import Path
from typing import Optional
from urllib.parse import quote, unquote, urlparse
import logging
import re
import time

from printdesk.errors import StorageError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r'[^a-zA-Z0-9.-]')


class ObjectNotFound(StorageError):
    """The object is already gone; callers may treat the delete as done."""


class ObjectExists(StorageError):
    """An object is already stored under that path; uploads never overwrite."""


def sanitize_filename(name: str) -> str:
    return _UNSAFE_CHARS.sub('_', name or '') or 'file'


def unique_object_name(original_name: str, now_ms: Optional[int] = None, salt: Optional[str] = None) -> str:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    if salt:
        stamp = f"{stamp}_{salt}"
    return f"{stamp}_{sanitize_filename(original_name)}"


class LocalObjectStore:
    def __init__(self, root: str, bucket: str = 'documents', public_url: str = '/files'):
        self.root = Path(root)
        self.bucket = bucket
        self.public_base = public_url.rstrip('/')
        self.bucket_dir = self.root / bucket

    def _resolve(self, path: str) -> Path:
        if not path:
            raise StorageError('empty object path')
        target = (self.bucket_dir / path).resolve()
        base = self.bucket_dir.resolve()
        if target != base and base not in target.parents:
            raise StorageError(f'object path escapes bucket: {path}')
        return target

    def upload(self, path: str, data: bytes) -> str:
        target = self._resolve(path)
        if target.exists():
            raise ObjectExists(f'object already exists: {path}')
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, 'xb') as fh:
                fh.write(data)
        except FileExistsError as e:
            raise ObjectExists(f'object already exists: {path}') from e
        except OSError as e:
            logger.error('Upload of %s failed: %s', path, e)
            raise StorageError(f'failed to store {path}') from e
        return path

    def delete(self, path: str):
        target = self._resolve(path)
        try:
            target.unlink()
        except FileNotFoundError as e:
            raise ObjectNotFound(f'object not found: {path}') from e
        except OSError as e:
            logger.error('Delete of %s failed: %s', path, e)
            raise StorageError(f'failed to remove {path}') from e

    def exists(self, path: str) -> bool:
        try:
            return self._resolve(path).is_file()
        except StorageError:
            return False

    def open_path(self, path: str) -> Path:
        target = self._resolve(path)
        if not target.is_file():
            raise StorageError(f'object not found: {path}')
        return target

    def public_url(self, path: str) -> str:
        return f"{self.public_base}/{self.bucket}/{quote(path)}"

    def path_from_url(self, url: Optional[str]) -> Optional[str]:
        """Recover an object path from a public URL (``.../<bucket>/<path>``)."""
        if not url:
            return None
        try:
            parsed = urlparse(url)
        except ValueError:
            return None
        match = re.search(rf'/{re.escape(self.bucket)}/(.+)$', parsed.path)
        if not match:
            return None
        return unquote(match.group(1))


__all__ = ['LocalObjectStore', 'ObjectNotFound', 'ObjectExists', 'sanitize_filename', 'unique_object_name']
