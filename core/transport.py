"""
core/transport.py -- Authenticated HTTP calls to the Synapse REST API.

Every call returns an ApiResult. Network errors, non-2xx statuses and login
failures are logged and handed back as failed results -- nothing here raises
for a remote failure. Callers check result.ok.

One requests.Session per Transport for connection pooling, and one
SessionState holding the login token for the Transport's lifetime.
"""

import logging
from typing import Any, Optional
from urllib.parse import urlencode

import requests

from auth.session import SessionState, login
from auth.signing import session_headers, signature_headers
from core.config import Settings, get_settings
from core.errors import AuthError
from core.models import ApiResult, ErrorKind

logger = logging.getLogger("synapse.transport")


class Transport:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        session_state: Optional[SessionState] = None,
        http: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.session_state = session_state or SessionState()
        self._http = http or requests.Session()
        # These are known API hosts; 3 hops is generous.
        self._http.max_redirects = 3

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def ensure_session(self) -> str:
        """Return the cached session token, logging in first if there is none.

        Raises AuthError when the login fails.
        """
        if not self.session_state.is_authenticated:
            self.session_state.token = login(
                self._http,
                self.settings.api_url,
                self.settings.username,
                self.settings.password,
                timeout=self.settings.request_timeout,
            )
        return self.session_state.token

    def signed_headers(self, url: str, use_session_token: bool = True) -> dict[str, str]:
        """Return auth headers for url: session token, or an HMAC signature."""
        if use_session_token:
            return session_headers(self.session_state.token)
        return signature_headers(url, self.settings.username, self.settings.api_key)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def url_for(self, path: str, params: Optional[dict[str, Any]] = None) -> str:
        url = f"{self.settings.api_url}/{path.lstrip('/')}"
        if params:
            url = f"{url}?{urlencode(params)}"
        return url

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[dict[str, Any]] = None,
        use_session_token: bool = True,
    ) -> ApiResult:
        """Send one request and return its decoded JSON as an ApiResult.

        Session mode logs in first if needed. Signature mode does not touch
        the session, so it works without a password.
        """
        if use_session_token:
            try:
                self.ensure_session()
            except AuthError as e:
                logger.error("Cannot %s %s: %s", method, path, e)
                return ApiResult.failure(ErrorKind.AUTH, str(e))

        url = self.url_for(path, params)
        try:
            resp = self._http.request(
                method,
                url,
                headers=self.signed_headers(url, use_session_token),
                json=body,
                timeout=self.settings.request_timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            return ApiResult.failure(ErrorKind.TRANSPORT, str(e))

        payload = _decode(resp)
        if resp.status_code == 404:
            logger.warning("%s %s: not found", method, url)
            return ApiResult.failure(ErrorKind.NOT_FOUND, _reason(resp, payload), resp.status_code, payload)
        if not resp.ok:
            logger.warning("%s %s failed: %s %s", method, url, resp.status_code, _reason(resp, payload))
            return ApiResult.failure(ErrorKind.TRANSPORT, _reason(resp, payload), resp.status_code, payload)

        logger.debug("%s %s -> %s", method, url, resp.status_code)
        return ApiResult(data=payload)

    def get(self, path: str, params: Optional[dict[str, Any]] = None) -> ApiResult:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Any) -> ApiResult:
        return self.request("POST", path, body=body)

    def put(self, path: str, body: Any) -> ApiResult:
        return self.request("PUT", path, body=body)

    def delete(self, path: str) -> ApiResult:
        return self.request("DELETE", path)


def _decode(resp: requests.Response) -> Any:
    """Return the response body as JSON, raw text if it isn't JSON, or None if empty."""
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text


def _reason(resp: requests.Response, payload: Any) -> str:
    # Synapse error bodies look like {"reason": "..."}.
    if isinstance(payload, dict) and payload.get("reason"):
        return str(payload["reason"])
    return f"HTTP {resp.status_code} {resp.reason or ''}".strip()
