from __future__ import annotations

import logging

from storefront.domain.models import Capabilities, Order, ProductItem

log = logging.getLogger("storefront.orders")


class OrderLedgerService:
    def __init__(self, api):
        self.api = api

    def list_orders(self, capabilities: Capabilities) -> list[Order]:
        rows = self.api.get(capabilities.orders_path) or []
        return [Order.from_json(r) for r in rows]

    def get_order(self, order_id) -> Order:
        return Order.from_json(self.api.get(f"/orders/{order_id}") or {})

    def place_order(self, items: list[ProductItem]) -> None:
        """
        Body: {"productItems": [{productId, quantity, price}]}
        """
        self.api.post("/orders", {"productItems": [it.to_json() for it in items]})
        log.info("order_placed items=%s", ";".join(f"{it.product_id}x{it.quantity}" for it in items))
