import json
import sys
from concurrent.futures import Future
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import requests

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

API = "http://api.test"


def make_response(status: int = 200, body: Any = None, url: str = "", raw: bytes | None = None) -> requests.Response:
    r = requests.Response()
    r.status_code = status
    r.url = url
    r.reason = "OK" if status < 400 else "Error"
    if raw is not None:
        r._content = raw
    else:
        r._content = json.dumps(body).encode("utf-8") if body is not None else b""
    return r


@dataclass
class Call:
    method: str
    url: str
    headers: Optional[dict]
    json: Any = None
    data: Any = None


class FakeHttp:
    """Stands in for requests.Session: canned responses per (method, url), every call recorded."""

    def __init__(self):
        self.routes: dict[tuple[str, str], list] = {}
        self.calls: list[Call] = []

    def on(self, method: str, url: str, status: int = 200, body: Any = None, error: Exception | None = None,
           raw: bytes | None = None):
        self.routes.setdefault((method, url), []).append(error or make_response(status, body, url, raw=raw))
        return self

    def _respond(self, method: str, url: str):
        queue = self.routes.get((method, url))
        if not queue:
            return make_response(404, {"message": "no route"}, url)
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        return item

    def request(self, method, url, headers=None, json=None, timeout=None):
        self.calls.append(Call(method, url, headers, json=json))
        return self._respond(method, url)

    def post(self, url, data=None, timeout=None):
        self.calls.append(Call("POST", url, None, data=data))
        return self._respond("POST", url)

    def get(self, url, timeout=None):
        self.calls.append(Call("GET", url, None))
        return self._respond("GET", url)

    def paths(self) -> list[str]:
        return [f"{c.method} {c.url.replace(API, '')}" for c in self.calls]


class FakeSession:
    def __init__(self, roles=("CLIENT",), username: str = "alice", authenticated: bool = True):
        self.token = "token-123"
        self.token_parsed = {"preferred_username": username, "realm_access": {"roles": list(roles)}}
        self._authenticated = authenticated
        self._listeners = []
        self.logout_calls = 0

    @property
    def authenticated(self):
        return self._authenticated

    def subscribe(self, listener):
        self._listeners.append(listener)

    def _set(self, value: bool):
        if value == self._authenticated:
            return
        self._authenticated = value
        for listener in list(self._listeners):
            listener(value)

    def update_token(self, min_validity=30):
        return self.token if self._authenticated else None

    def login(self):
        self._set(True)

    def logout(self):
        self.logout_calls += 1
        self._set(False)


def answered(text: Optional[str]) -> Future:
    f: Future = Future()
    f.set_result(text)
    return f


def build_controller(http: FakeHttp, session: FakeSession, confirm: bool = True, notices: list | None = None):
    from storefront.application.controller import ViewSyncController
    from storefront.services.api_client import ApiClient
    from storefront.services.catalog_service import ProductCatalogService
    from storefront.services.export_service import OrderExportService
    from storefront.services.order_service import OrderLedgerService

    api = ApiClient(API, session, http=http)
    notices = notices if notices is not None else []
    return ViewSyncController(
        session,
        ProductCatalogService(api),
        OrderLedgerService(api),
        OrderExportService(),
        confirm=lambda _msg: confirm,
        notify=notices.append,
    )
