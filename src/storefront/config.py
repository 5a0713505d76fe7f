from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os
import sys


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    logs_dir: Path


@dataclass(frozen=True)
class ClientSettings:
    api_url: str = "http://localhost:8085"
    keycloak_url: str = "http://localhost:8080"
    realm: str = "ecommerce"
    client_id: str = "react-client"
    http_timeout: float = 10.0

    @property
    def oidc_base(self) -> str:
        return f"{self.keycloak_url.rstrip('/')}/realms/{self.realm}/protocol/openid-connect"

    @property
    def token_url(self) -> str:
        return f"{self.oidc_base}/token"

    @property
    def logout_url(self) -> str:
        return f"{self.oidc_base}/logout"


def _windows_appdata() -> Path:
    return Path(os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming")))


def _mac_app_support() -> Path:
    return Path.home() / "Library" / "Application Support"


def get_app_paths(app_name: str = "StorefrontClient") -> AppPaths:
    if sys.platform.startswith("win"):
        base = _windows_appdata() / app_name
    elif sys.platform == "darwin":
        base = _mac_app_support() / app_name
    else:
        base = Path.home() / f".{app_name.lower()}"

    logs = base / "logs"

    base.mkdir(parents=True, exist_ok=True)
    logs.mkdir(parents=True, exist_ok=True)

    return AppPaths(base_dir=base, logs_dir=logs)


def get_settings(env: dict[str, str] | None = None) -> ClientSettings:
    source = os.environ if env is None else env
    defaults = ClientSettings()

    def pick(name: str, default: str) -> str:
        return (source.get(name) or "").strip() or default

    timeout = defaults.http_timeout
    raw_timeout = (source.get("STOREFRONT_HTTP_TIMEOUT") or "").strip()
    if raw_timeout:
        try:
            parsed = float(raw_timeout)
            if parsed > 0:
                timeout = parsed
        except ValueError:
            pass

    return ClientSettings(
        api_url=pick("STOREFRONT_API_URL", defaults.api_url).rstrip("/"),
        keycloak_url=pick("STOREFRONT_KEYCLOAK_URL", defaults.keycloak_url).rstrip("/"),
        realm=pick("STOREFRONT_REALM", defaults.realm),
        client_id=pick("STOREFRONT_CLIENT_ID", defaults.client_id),
        http_timeout=timeout,
    )
