"""
auth/signing.py -- Request authentication headers for the Synapse API.

Two modes:
  Session token: the cached token from auth/session.py is sent as-is in a
       sessionToken header. This is what every client call uses by default.

  HMAC signature: stateless. The signature covers username + URL path (with
       query string) + timestamp, keyed with the user's API key and using
       HMAC-SHA1. The digest is base64-encoded. The server recomputes it, so
       the timestamp format must match byte-for-byte: UTC, whole seconds,
       ".000Z" suffix.

Layer rule: stdlib only, no imports from core/. Callers pass credentials in
explicitly.
"""

import base64
import hashlib
import hmac
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlsplit

SESSION_TOKEN_HEADER = "sessionToken"


def session_headers(token: Optional[str]) -> dict[str, str]:
    """Headers for session-token authentication."""
    return {
        "Access-Control-Request-Headers": "sessiontoken",
        SESSION_TOKEN_HEADER: token or "",
    }


def signature_timestamp(now: Optional[datetime] = None) -> str:
    """Format now (default: current time) as the UTC timestamp the server signs."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def signed_url_path(url: str) -> str:
    """Return the path plus query string of url -- the part that gets signed."""
    parts = urlsplit(url)
    path = parts.path or "/"
    if parts.query:
        path = f"{path}?{parts.query}"
    return path


def compute_signature(username: str, url_path: str, timestamp: str, api_key: str) -> str:
    """Return base64(HMAC-SHA1(api_key, username + url_path + timestamp))."""
    digest = hmac.new(
        api_key.encode("utf-8"),
        f"{username}{url_path}{timestamp}".encode("utf-8"),
        hashlib.sha1,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def signature_headers(url: str, username: str, api_key: str, now: Optional[datetime] = None) -> dict[str, str]:
    """Headers for HMAC signature authentication of a request to url."""
    timestamp = signature_timestamp(now)
    return {
        "userId": username,
        "signatureTimestamp": timestamp,
        "signature": compute_signature(username, signed_url_path(url), timestamp, api_key),
    }
