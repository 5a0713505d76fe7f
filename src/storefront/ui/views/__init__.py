from .products_view import ProductsView
from .orders_view import OrdersView

__all__ = ["ProductsView", "OrdersView"]
