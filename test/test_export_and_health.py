from pathlib import Path

import pytest
import requests
from openpyxl import load_workbook

from conftest import API, FakeHttp, FakeSession, build_controller

from storefront.domain.errors import ValidationError
from storefront.domain.models import Order
from storefront.services.export_service import OrderExportService
from storefront.services.health_service import HealthService

ORDERS = [
    Order.from_json({
        "id": 1, "userId": "alice", "date": "2024-05-01", "status": "PENDING", "amount": 19.98,
        "productItems": [{"productId": 1, "quantity": 2, "price": 9.99}],
    }),
    Order.from_json({
        "id": 2, "userId": "bob", "date": "2024-05-02", "status": "CONFIRMED", "amount": 5.0,
        "productItems": [{"productId": 4, "quantity": 1, "price": 2.5}, {"productId": 5, "quantity": 1, "price": 2.5}],
    }),
]


def test_export_writes_orders_and_items_sheets(tmp_path: Path):
    path = tmp_path / "orders.xlsx"

    count = OrderExportService().export_orders_excel(str(path), ORDERS, include_user=True)

    assert count == 2
    wb = load_workbook(path)
    orders = wb["Orders"]
    assert [c.value for c in orders[1]] == ["Order ID", "User", "Date", "Status", "Amount", "Items"]
    assert [c.value for c in orders[3]] == [2, "bob", "2024-05-02", "CONFIRMED", 5.0, 2]
    items = wb["Items"]
    assert items.max_row == 4
    assert [c.value for c in items[2]] == [1, 1, 2, 9.99, pytest.approx(19.98)]


def test_export_for_client_has_no_user_column(tmp_path: Path):
    path = tmp_path / "mine.xlsx"

    OrderExportService().export_orders_excel(str(path), ORDERS[:1], include_user=False)

    header = [c.value for c in load_workbook(path)["Orders"][1]]
    assert "User" not in header


def test_export_rejects_empty_ledger(tmp_path: Path):
    with pytest.raises(ValidationError, match="No orders"):
        OrderExportService().export_orders_excel(str(tmp_path / "x.xlsx"), [], include_user=False)


def test_controller_export_uses_loaded_orders_without_request(tmp_path: Path):
    http = FakeHttp()
    c = build_controller(http, FakeSession())
    c.orders = list(ORDERS)

    assert c.export_orders(str(tmp_path / "ledger.xlsx")) == 2
    assert http.calls == []


def test_controller_export_failure_goes_to_banner(tmp_path: Path):
    c = build_controller(FakeHttp(), FakeSession())

    assert c.export_orders(str(tmp_path / "ledger.xlsx")) == 0
    assert c.error == "Failed to export orders. No orders to export."


def test_health_report_reads_gateway_dashboard():
    http = FakeHttp().on("GET", f"{API}/dashboard/health", body={
        "gateway": "UP",
        "overallStatus": "DEGRADED",
        "services": {"product-service": {"status": "UP", "healthy": True},
                     "order-service": {"status": "DOWN", "healthy": False}},
    })

    report = HealthService(API, http=http).check()

    assert report.overall_status == "DEGRADED"
    assert not report.healthy
    assert report.services == {"product-service": "UP", "order-service": "DOWN"}
    assert report.summary() == "Services: DEGRADED (order-service DOWN, product-service UP)"


def test_unreachable_gateway_is_error_status():
    http = FakeHttp().on("GET", f"{API}/dashboard/health", error=requests.ConnectionError("down"))

    report = HealthService(API, http=http).check()

    assert report.overall_status == "ERROR"
    assert report.summary() == "Services: ERROR"
