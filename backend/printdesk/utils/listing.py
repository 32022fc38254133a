from __future__ import annotations
from typing import Iterable, Optional, Tuple
from flask import request, make_response
import hashlib
import json
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime, format_datetime
from printdesk.utils.timestamps import as_utc, iso_utc


def canonicalize_timestamp(dt: datetime) -> datetime:
    """Return UTC tz-aware timestamp truncated to whole seconds (microseconds removed)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).replace(microsecond=0)

def latest_timestamp(values: Iterable[Optional[datetime]]) -> Optional[datetime]:
    # Full precision; only the Last-Modified header is cut to whole seconds
    stamps = [as_utc(v) for v in values if isinstance(v, datetime)]
    return max(stamps) if stamps else None

def compute_etag(rows: list) -> str:
    # Hash the serialized rows so any field change (not only ids) yields a new validator
    seed = json.dumps(rows, sort_keys=True, default=str, separators=(',', ':'))
    return hashlib.sha256(seed.encode()).hexdigest()[:32]

def build_list_payload(rows: list):
    return {
        'data': rows,
        'total': len(rows),
    }

def _http_date(dt: datetime) -> str:
    """Return RFC1123 HTTP-date string in GMT."""
    return format_datetime(canonicalize_timestamp(dt), usegmt=True)

def _set_validators(resp, etag_value: str, latest_ts: Optional[datetime]):
    resp.headers['ETag'] = etag_value
    if latest_ts:
        latest_c = canonicalize_timestamp(latest_ts)
        resp.headers['Last-Modified'] = _http_date(latest_c)
        # Full-precision ISO in a secondary header; sending it back as If-Modified-Since compares exactly
        resp.headers['X-Last-Modified-ISO'] = iso_utc(latest_ts)
    return resp

def make_cached_list_response(rows: list, latest_ts: Optional[datetime] = None) -> Tuple[object, str]:
    etag = compute_etag(rows)
    resp = make_response(build_list_payload(rows))
    return _set_validators(resp, etag, latest_ts), etag

def _parse_if_modified_since(header_val: str) -> Optional[datetime]:
    if not header_val:
        return None
    # Try ISO 8601 first
    try:
        dt = datetime.fromisoformat(header_val.replace('Z', '+00:00'))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
    except ValueError:
        pass
    # Then HTTP-date (RFC 1123)
    try:
        dt = parsedate_to_datetime(header_val)
    except (TypeError, ValueError, IndexError):
        return None
    if dt and dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt

def handle_conditional(etag_value: str, latest_ts: Optional[datetime]):
    """Evaluate conditional request headers.

    Precedence: If-None-Match over If-Modified-Since (per RFC 9110 semantics).
    Returns a 304 response object if conditions satisfied, else None.
    """
    inm = request.headers.get('If-None-Match')
    if inm:
        if inm.strip().strip('"') == etag_value:
            return _set_validators(make_response('', 304), etag_value, latest_ts)
        return None
    ims_raw = request.headers.get('If-Modified-Since')
    if ims_raw and latest_ts:
        ims_dt = _parse_if_modified_since(ims_raw)
        if ims_dt:
            # HTTP-dates lack sub-second precision: a write later in the same second is newer
            if as_utc(latest_ts) <= as_utc(ims_dt):
                return _set_validators(make_response('', 304), etag_value, latest_ts)
    return None
