"""
REST client for the POS backend.

Wraps a ``requests.Session`` with the conventions every backend call shares:
bearer token, JSON envelope unwrapping and forced logout on 401/403.
"""

from __future__ import annotations

import json
import logging
from typing import Any, BinaryIO, Callable, Optional

import requests

from pos_admin.config import get_settings
from pos_admin.exceptions import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AuthenticationError,
    PermissionDeniedError,
)
from pos_admin.logging_config import PerformanceTracker

logger = logging.getLogger(__name__)

SERVICE_NAME = "pos-backend"

TokenProvider = Callable[[], Optional[str]]
UnauthorizedHandler = Callable[[int], None]


def unwrap_envelope(body: Any) -> Any:
    """
    Return the payload of a ``{success, statusCode, message, data, timestamp}``
    envelope, or the body itself when it is not enveloped.
    """
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        message = body.get("message")
        # NestJS validation errors send a list of messages
        if isinstance(message, list):
            return "; ".join(str(m) for m in message)
        if message:
            return str(message)
    return response.reason or f"HTTP {response.status_code}"


class ApiClient:
    """
    Thin request/response client: no caching, no retries.

    Args:
        base_url: Backend root URL (defaults to settings.api_url).
        token_provider: Returns the current bearer token or None.
        on_unauthorized: Called with the status code on 401/403, before the
            error is raised. Used by the UI to force a logout.
        is_login_page: Returns True while the login page is shown; the
            unauthorized handler is skipped there so a failed sign-in does
            not bounce the user.
        timeout: Per-request timeout in seconds.
        session: Injected ``requests.Session`` (tests pass a mock).
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token_provider: TokenProvider | None = None,
        on_unauthorized: UnauthorizedHandler | None = None,
        is_login_page: Callable[[], bool] | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.api_timeout_seconds
        self._token_provider = token_provider or (lambda: None)
        self._on_unauthorized = on_unauthorized
        self._is_login_page = is_login_page or (lambda: False)
        self._session = session or requests.Session()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self, *, json_body: bool) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if json_body:
            headers["Content-Type"] = "application/json"
        token = self._token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        files: dict[str, Any] | None = None,
    ) -> requests.Response:
        headers = self._headers(json_body=files is None)
        with PerformanceTracker("api_request", method=method, path=path) as tracker:
            try:
                response = self._session.request(
                    method,
                    self.url(path),
                    params=params,
                    json=json_body,
                    files=files,
                    headers=headers,
                    timeout=self.timeout,
                )
            except requests.Timeout as exc:
                raise APITimeoutError(SERVICE_NAME, timeout_seconds=self.timeout) from exc
            except requests.ConnectionError as exc:
                raise APIConnectionError(SERVICE_NAME, reason=str(exc)) from exc
            tracker.extra["status"] = response.status_code

        if response.status_code in (401, 403):
            self._handle_unauthorized(response)
        if not response.ok:
            raise APIError(
                _error_message(response),
                status_code=response.status_code,
                method=method,
                path=path,
            )
        return response

    def _handle_unauthorized(self, response: requests.Response) -> None:
        status = response.status_code
        message = _error_message(response)
        logger.warning("Backend rejected session token (%s) on %s", status, response.url)
        if self._on_unauthorized is not None and not self._is_login_page():
            self._on_unauthorized(status)
        if status == 403:
            raise PermissionDeniedError(message)
        raise AuthenticationError(message)

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            body = response.json()
        except (ValueError, json.JSONDecodeError):
            logger.warning("Non-JSON response body from %s", response.url)
            return None
        return unwrap_envelope(body)

    # -- verbs -------------------------------------------------------------

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self._decode(self._send("GET", path, params=params))

    def post(self, path: str, payload: Any = None) -> Any:
        return self._decode(self._send("POST", path, json_body=payload))

    def patch(self, path: str, payload: Any = None) -> Any:
        return self._decode(self._send("PATCH", path, json_body=payload))

    def delete(self, path: str) -> Any:
        return self._decode(self._send("DELETE", path))

    def upload(
        self,
        path: str,
        file: BinaryIO | bytes,
        *,
        filename: str = "upload",
        content_type: str | None = None,
    ) -> Any:
        """POST a multipart form with the file under the ``file`` field."""
        part: tuple = (filename, file, content_type) if content_type else (filename, file)
        return self._decode(self._send("POST", path, files={"file": part}))

    def download(self, path: str, params: dict[str, Any] | None = None) -> bytes:
        """GET raw bytes (PDF export)."""
        return self._send("GET", path, params=params).content
