import pytest
import requests

from conftest import API, FakeHttp, FakeSession, answered, build_controller

from storefront.application.controller import UNAUTHORIZED_MESSAGE, format_error
from storefront.domain.errors import AuthorizationDenied, OperationFailed
from storefront.domain.models import Product

ROUTES = [
    ("GET", "/products"),
    ("GET", "/orders"),
    ("GET", "/orders/all"),
    ("POST", "/products"),
    ("PUT", "/products/3"),
    ("DELETE", "/products/3"),
    ("POST", "/orders"),
]


def _create(c):
    c.update_draft(name="x", price="1", quantity="1")
    c.create_product()


def _edit_and_update(c):
    c.start_edit(Product(id=3, name="W", price=1.0, quantity=1))
    c.update_product()


OPERATIONS = [
    pytest.param(lambda c: c.fetch_products(), "fetch products", id="fetch_products"),
    pytest.param(lambda c: c.fetch_orders(), "fetch orders", id="fetch_orders"),
    pytest.param(_create, "create product", id="create_product"),
    pytest.param(_edit_and_update, "update product", id="update_product"),
    pytest.param(lambda c: c.delete_product(3), "delete product", id="delete_product"),
    pytest.param(lambda c: c.place_order(3, 1.0, lambda _m, _d: answered("1")), "place order", id="place_order"),
]


def _failing_http(status: int) -> FakeHttp:
    http = FakeHttp()
    for method, path in ROUTES:
        http.on(method, f"{API}{path}", status=status)
    return http


@pytest.mark.parametrize("operation, action", OPERATIONS)
def test_401_sets_unauthorized_and_logs_out_once(operation, action):
    session = FakeSession(roles=("ADMIN",))
    c = build_controller(_failing_http(401), session)

    operation(c)

    assert c.error == UNAUTHORIZED_MESSAGE
    assert session.logout_calls == 1
    assert not session.authenticated


def test_initial_load_after_expired_token_logs_out_only_once():
    http = FakeHttp().on("GET", f"{API}/products", status=401).on("GET", f"{API}/orders", status=401)
    session = FakeSession()
    c = build_controller(http, session)

    c.load_initial()

    assert session.logout_calls == 1
    assert c.error == UNAUTHORIZED_MESSAGE
    # the second fetch never left the client: no token after logout
    assert http.paths() == ["GET /products"]


@pytest.mark.parametrize("operation, action", OPERATIONS)
def test_403_reports_forbidden_action_and_keeps_session(operation, action):
    session = FakeSession(roles=("ADMIN",))
    c = build_controller(_failing_http(403), session)

    operation(c)

    assert c.error == f"Forbidden. You do not have permission to {action}."
    assert session.authenticated
    assert session.logout_calls == 0


def test_generic_failure_falls_back_to_error_text():
    http = FakeHttp().on("GET", f"{API}/orders", error=requests.ConnectionError("connection refused"))
    c = build_controller(http, FakeSession())

    c.fetch_orders()

    assert c.error == "Failed to fetch orders. connection refused"


def test_logout_clears_local_lists_but_keeps_message():
    http = FakeHttp().on("GET", f"{API}/products", body=[{"id": 1, "name": "W", "price": 1, "quantity": 1}])
    http.on("GET", f"{API}/orders", status=401)
    session = FakeSession()
    c = build_controller(http, session)

    c.load_initial()

    assert c.products == []
    assert c.error == UNAUTHORIZED_MESSAGE


def test_format_error_variants():
    assert format_error(AuthorizationDenied("Forbidden.", status=403), "delete product") == \
        "Forbidden. You do not have permission to delete product."
    assert format_error(OperationFailed("boom", status=500, server_message="db down"), "fetch orders") == \
        "Failed to fetch orders. db down"
    assert format_error(ValueError("could not convert string to float: ''"), "create product") == \
        "Failed to create product. could not convert string to float: ''"
