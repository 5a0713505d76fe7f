from concurrent.futures import Future

import pytest

from conftest import API, FakeHttp, FakeSession, answered, build_controller

from storefront.application.controller import ORDER_PLACED_MESSAGE, parse_quantity

ORDER = {
    "id": 7,
    "userId": "alice",
    "date": "2024-05-01",
    "status": "PENDING",
    "amount": 19.98,
    "productItems": [{"productId": 1, "quantity": 2, "price": 9.99}],
}


def test_client_lists_own_orders_admin_lists_all():
    http = FakeHttp().on("GET", f"{API}/orders", body=[ORDER]).on("GET", f"{API}/orders/all", body=[ORDER])

    build_controller(http, FakeSession(roles=("CLIENT",))).fetch_orders()
    build_controller(http, FakeSession(roles=("CLIENT", "ADMIN"))).fetch_orders()

    assert http.paths() == ["GET /orders", "GET /orders/all"]


def test_orders_endpoint_follows_the_live_token():
    http = FakeHttp().on("GET", f"{API}/orders", body=[]).on("GET", f"{API}/orders/all", body=[])
    session = FakeSession(roles=("CLIENT",))
    c = build_controller(http, session)

    c.fetch_orders()
    session.token_parsed = {"realm_access": {"roles": ["ADMIN"]}}
    c.fetch_orders()

    assert http.paths() == ["GET /orders", "GET /orders/all"]


def test_place_order_posts_single_item_then_refetches_orders_and_products():
    http = FakeHttp()
    http.on("POST", f"{API}/orders", body=ORDER)
    http.on("GET", f"{API}/orders", body=[ORDER])
    http.on("GET", f"{API}/products", body=[{"id": 1, "name": "Widget", "price": 9.99, "quantity": 1}])
    notices = []
    c = build_controller(http, FakeSession(), notices=notices)

    outcome = c.place_order(1, 9.99, lambda _msg, _default: answered("2"))

    assert outcome.result() is True
    assert http.calls[0].json == {"productItems": [{"productId": 1, "quantity": 2, "price": 9.99}]}
    assert http.paths() == ["POST /orders", "GET /orders", "GET /products"]
    assert notices == [ORDER_PLACED_MESSAGE]
    assert c.orders[0].product_items[0].quantity == 2
    assert c.products[0].quantity == 1


@pytest.mark.parametrize("text", [None, "", "   ", "0", "-3", "abc", "0.5", "nan", "inf"])
def test_invalid_quantity_sends_nothing_and_changes_nothing(text):
    http = FakeHttp()
    c = build_controller(http, FakeSession())
    c.error = "previous"

    outcome = c.place_order(1, 9.99, lambda _msg, _default: answered(text))

    assert outcome.result() is False
    assert http.calls == []
    assert c.error == "previous"
    assert c.orders == []


def test_prompt_answer_can_arrive_later():
    http = FakeHttp().on("POST", f"{API}/orders", body=ORDER)
    c = build_controller(http, FakeSession())
    pending: Future = Future()

    outcome = c.place_order(1, 9.99, lambda _msg, _default: pending)
    assert not outcome.done()
    assert http.calls == []

    pending.set_result("3")

    assert outcome.result() is True
    assert http.calls[0].json["productItems"][0]["quantity"] == 3


def test_cancelled_prompt_aborts():
    http = FakeHttp()
    c = build_controller(http, FakeSession())
    pending: Future = Future()

    outcome = c.place_order(1, 9.99, lambda _msg, _default: pending)
    pending.cancel()

    assert outcome.result() is False
    assert http.calls == []


def test_rejected_order_reports_server_message_and_skips_refetch():
    http = FakeHttp().on("POST", f"{API}/orders", status=500, body={"message": "Insufficient stock for product 1"})
    notices = []
    c = build_controller(http, FakeSession(), notices=notices)

    assert c.place_order(1, 9.99, lambda _m, _d: answered("50")).result() is False

    assert c.error == "Failed to place order. Insufficient stock for product 1"
    assert notices == []
    assert http.paths() == ["POST /orders"]


def test_get_order_reads_single_order():
    http = FakeHttp().on("GET", f"{API}/orders/7", body=ORDER)
    c = build_controller(http, FakeSession())

    order = c.get_order(7)

    assert order.id == 7
    assert order.product_items[0].line_total == pytest.approx(19.98)


def test_parse_quantity_truncates_decimals_like_parse_int():
    assert parse_quantity("2") == 2
    assert parse_quantity(" 2.9 ") == 2
    assert parse_quantity("-1") is None
    assert parse_quantity("1e3") == 1
    assert parse_quantity("+3") == 3
    assert parse_quantity("1_000") is None
    assert parse_quantity(".5") is None
    assert parse_quantity("0.9") is None
    assert parse_quantity("nan") is None
    assert parse_quantity("inf") is None
    assert parse_quantity("abc") is None
