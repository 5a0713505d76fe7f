from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from storefront.domain.errors import (
    ApiError,
    AuthenticationExpired,
    AuthorizationDenied,
    OperationFailed,
)

log = logging.getLogger("storefront.api")


def _server_message(response: requests.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        msg = data.get("message")
        if msg:
            return str(msg)
    return None


def classify_error(err: Exception) -> ApiError:
    """Map a transport/HTTP failure onto the 401 / 403 / other taxonomy."""
    if isinstance(err, ApiError):
        return err

    response = getattr(err, "response", None)
    status = response.status_code if response is not None else None
    server_message = _server_message(response) if response is not None else None

    if status == 401:
        return AuthenticationExpired("Unauthorized.", status=status, server_message=server_message)
    if status == 403:
        return AuthorizationDenied("Forbidden.", status=status, server_message=server_message)
    return OperationFailed(str(err), status=status, server_message=server_message)


class ApiClient:
    """JSON client for the backend gateway. Every request carries the session's bearer token."""

    def __init__(self, base_url: str, session, http: requests.Session | None = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.http = http or requests.Session()
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        token = self.session.update_token(30)
        if not token:
            raise AuthenticationExpired("No active session.", status=401)
        return {"Authorization": f"Bearer {token}"}

    def request(self, method: str, path: str, json: Any = None) -> Any:
        url = f"{self.base_url}{path}"
        headers = self._headers()
        try:
            r = self.http.request(method, url, headers=headers, json=json, timeout=self.timeout)
            log.debug("api_call method=%s path=%s status=%s", method, path, r.status_code)
            r.raise_for_status()
        except requests.RequestException as e:
            log.warning("api_call_failed method=%s path=%s error=%s", method, path, e)
            raise classify_error(e) from e

        if r.status_code == 204 or not r.content:
            return None
        try:
            return r.json()
        except ValueError as e:
            raise OperationFailed(f"Invalid JSON from {path}.", status=r.status_code) from e

    def get(self, path: str) -> Any:
        return self.request("GET", path)

    def post(self, path: str, body: Any) -> Any:
        return self.request("POST", path, json=body)

    def put(self, path: str, body: Any) -> Any:
        return self.request("PUT", path, json=body)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
