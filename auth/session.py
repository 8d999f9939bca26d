"""
auth/session.py -- Session token state and the login call.

SessionState is an explicit object rather than a module-level global: one is
created per Transport and lives exactly as long as it. The token is filled
lazily by the first authenticated request and is never refreshed or
invalidated afterwards (no expiry handling).

Concurrency: the check-then-set in core/transport.py is unguarded. Two
threads making a first call at the same moment may both log in; the last
write wins and both tokens are valid, so the outcome is the same.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from core.errors import AuthError

logger = logging.getLogger("synapse.auth")

LOGIN_PATH = "auth/v1/login"


@dataclass
class SessionState:
    token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)


def login(
    http: requests.Session,
    api_url: str,
    username: str,
    password: str,
    timeout: Optional[float] = None,
) -> str:
    """POST credentials to /auth/v1/login and return the session token.

    Raises AuthError if credentials are missing, the call fails at the HTTP
    level, or the response carries no sessionToken.
    """
    if not username or not password:
        raise AuthError("SYNAPSE_USERNAME and SYNAPSE_PASSWORD must be set to log in.")

    url = f"{api_url}/{LOGIN_PATH}"
    try:
        resp = http.post(url, json={"username": username, "password": password}, timeout=timeout)
        resp.raise_for_status()
        payload = resp.json()
    except requests.RequestException as e:
        raise AuthError(f"Login failed for {username}: {e}") from e
    except ValueError as e:
        raise AuthError(f"Login response for {username} was not JSON") from e

    token = payload.get("sessionToken") if isinstance(payload, dict) else None
    if not token:
        raise AuthError(f"Login response for {username} contained no session token")

    logger.info("Logged in to %s as %s", api_url, username)
    return token
