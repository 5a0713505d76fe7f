from __future__ import annotations

import logging

from storefront.domain.models import Product, ProductDraft

log = logging.getLogger(__name__)


class ProductCatalogService:
    def __init__(self, api):
        self.api = api

    def list_products(self) -> list[Product]:
        rows = self.api.get("/products") or []
        return [Product.from_json(r) for r in rows]

    def create_product(self, draft: ProductDraft) -> None:
        payload = draft.to_payload()
        self.api.post("/products", payload)
        log.info("product_created name=%s", payload["name"])

    def update_product(self, product_id, draft: ProductDraft) -> None:
        self.api.put(f"/products/{product_id}", draft.to_payload())
        log.info("product_updated id=%s", product_id)

    def delete_product(self, product_id) -> None:
        self.api.delete(f"/products/{product_id}")
        log.info("product_deleted id=%s", product_id)
