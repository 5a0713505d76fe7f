from .api_client import ApiClient
from .auth_service import KeycloakSession
from .catalog_service import ProductCatalogService
from .order_service import OrderLedgerService
from .export_service import OrderExportService
from .health_service import HealthService

__all__ = [
    "ApiClient",
    "KeycloakSession",
    "ProductCatalogService",
    "OrderLedgerService",
    "OrderExportService",
    "HealthService",
]
