from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

import requests
from jose import JWTError, jwt

from storefront.config import ClientSettings
from storefront.domain.errors import AuthenticationError
from storefront.domain.models import Capabilities

log = logging.getLogger(__name__)

ADMIN_ROLE = "ADMIN"

PERMISSIONS: dict[str, set[str]] = {
    "create_product": {"admin"},
    "update_product": {"admin"},
    "delete_product": {"admin"},
    "list_all_orders": {"admin"},
    "place_order": {"admin", "client"},
    "export_orders": {"admin", "client"},
}


def parse_claims(token: Optional[str]) -> dict:
    """Decode the token payload without verifying it. The backend verifies."""
    if not token:
        return {}
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError as e:
        log.warning("token_unparsed error=%s", e)
        return {}
    return claims if isinstance(claims, dict) else {}


def capabilities_from_claims(claims: Optional[dict]) -> Capabilities:
    claims = claims or {}
    realm_access = claims.get("realm_access")
    roles: Any = realm_access.get("roles") if isinstance(realm_access, dict) else None
    if not isinstance(roles, (list, tuple, set, frozenset)):
        roles = ()
    role_set = frozenset(str(r) for r in roles)
    return Capabilities(
        username=claims.get("preferred_username"),
        roles=role_set,
        is_admin=ADMIN_ROLE in role_set,
    )


def can(capabilities: Capabilities, action: str) -> bool:
    allowed_roles = PERMISSIONS.get(action)
    if not allowed_roles:
        return False
    return capabilities.role_label.lower() in allowed_roles


AuthListener = Callable[[bool], None]


class KeycloakSession:
    """Password-grant session against a Keycloak realm.

    Holds the access/refresh tokens and notifies subscribers whenever the
    ``authenticated`` flag changes.
    """

    def __init__(self, settings: ClientSettings, http: requests.Session | None = None,
                 clock: Callable[[], float] = time.time):
        self.settings = settings
        self.http = http or requests.Session()
        self.clock = clock
        self.token: Optional[str] = None
        self.refresh_token: Optional[str] = None
        self.token_parsed: dict = {}
        self._listeners: list[AuthListener] = []
        self._authenticated = False

    @property
    def authenticated(self) -> bool:
        return self._authenticated

    @property
    def username(self) -> Optional[str]:
        return self.token_parsed.get("preferred_username")

    @property
    def capabilities(self) -> Capabilities:
        return capabilities_from_claims(self.token_parsed)

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_authenticated(self, value: bool) -> None:
        if value == self._authenticated:
            return
        self._authenticated = value
        for listener in list(self._listeners):
            listener(value)

    def _store_tokens(self, data: dict) -> None:
        access = data.get("access_token")
        if not access:
            raise AuthenticationError("Identity provider returned no access token.")
        self.token = str(access)
        self.refresh_token = data.get("refresh_token")
        self.token_parsed = parse_claims(self.token)

    def _token_request(self, form: dict) -> dict:
        payload = {"client_id": self.settings.client_id, **form}
        try:
            r = self.http.post(self.settings.token_url, data=payload, timeout=self.settings.http_timeout)
        except requests.RequestException as e:
            raise AuthenticationError(f"Identity provider unreachable: {e}") from e
        try:
            body = r.json()
        except ValueError:
            body = None
        if r.status_code != 200:
            detail = body.get("error_description") if isinstance(body, dict) else None
            raise AuthenticationError(f"Login rejected: {detail or r.reason}")
        if not isinstance(body, dict):
            raise AuthenticationError("Identity provider returned an unreadable token response.")
        return body

    def login(self, username: str, password: str) -> None:
        username_clean = username.strip()
        if not username_clean:
            raise AuthenticationError("Username is required.")
        if not password:
            raise AuthenticationError("Password is required.")

        data = self._token_request({
            "grant_type": "password",
            "username": username_clean,
            "password": password,
            "scope": "openid",
        })
        self._store_tokens(data)
        log.info("login_ok user=%s", self.username)
        self._set_authenticated(True)

    def _expires_in(self) -> float:
        exp = self.token_parsed.get("exp")
        if exp is None:
            return float("inf")
        return float(exp) - self.clock()

    def update_token(self, min_validity: int = 30) -> Optional[str]:
        """Return a token valid for at least ``min_validity`` seconds, refreshing if needed."""
        if not self._authenticated or not self.token:
            return None
        if self._expires_in() >= min_validity:
            return self.token
        if not self.refresh_token:
            return self.token

        try:
            data = self._token_request({"grant_type": "refresh_token", "refresh_token": self.refresh_token})
            self._store_tokens(data)
        except AuthenticationError as e:
            log.warning("token_refresh_failed error=%s", e)
            self._clear()
            return None
        log.info("token_refreshed user=%s", self.username)
        return self.token

    def _clear(self) -> None:
        self.token = None
        self.refresh_token = None
        self.token_parsed = {}
        self._set_authenticated(False)

    def logout(self) -> None:
        if self.refresh_token:
            try:
                self.http.post(
                    self.settings.logout_url,
                    data={"client_id": self.settings.client_id, "refresh_token": self.refresh_token},
                    timeout=self.settings.http_timeout,
                )
            except requests.RequestException as e:
                log.warning("logout_request_failed error=%s", e)
        log.info("logout user=%s", self.username)
        self._clear()
