from .models import Capabilities, Order, Product, ProductDraft, ProductItem
from .errors import (
    ApiError,
    AppError,
    AuthenticationError,
    AuthenticationExpired,
    AuthorizationDenied,
    OperationFailed,
    ValidationError,
)

__all__ = [
    "Capabilities",
    "Order",
    "Product",
    "ProductDraft",
    "ProductItem",
    "ApiError",
    "AppError",
    "AuthenticationError",
    "AuthenticationExpired",
    "AuthorizationDenied",
    "OperationFailed",
    "ValidationError",
]
