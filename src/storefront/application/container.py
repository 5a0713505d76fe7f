from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import requests

from storefront.application.controller import ViewSyncController
from storefront.config import ClientSettings
from storefront.services.api_client import ApiClient
from storefront.services.auth_service import KeycloakSession
from storefront.services.catalog_service import ProductCatalogService
from storefront.services.export_service import OrderExportService
from storefront.services.health_service import HealthService
from storefront.services.order_service import OrderLedgerService


@dataclass(frozen=True)
class AppContainer:
    settings: ClientSettings
    session: KeycloakSession
    api: ApiClient
    catalog: ProductCatalogService
    orders: OrderLedgerService
    export: OrderExportService
    health: HealthService
    controller: ViewSyncController


def build_container(
    settings: ClientSettings,
    http: requests.Session | None = None,
    confirm: Callable[[str], bool] | None = None,
    notify: Callable[[str], None] | None = None,
) -> AppContainer:
    http = http or requests.Session()

    session = KeycloakSession(settings, http=http)
    api = ApiClient(settings.api_url, session, http=http, timeout=settings.http_timeout)
    catalog = ProductCatalogService(api)
    orders = OrderLedgerService(api)
    export = OrderExportService()
    health = HealthService(settings.api_url, http=http, timeout=settings.http_timeout)
    controller = ViewSyncController(session, catalog, orders, export, confirm=confirm, notify=notify)

    return AppContainer(
        settings=settings,
        session=session,
        api=api,
        catalog=catalog,
        orders=orders,
        export=export,
        health=health,
        controller=controller,
    )
