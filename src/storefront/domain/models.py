from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional


def _float(value: Any) -> float:
    return float(value) if value is not None else 0.0


def _int(value: Any) -> int:
    return int(value) if value is not None else 0


@dataclass(frozen=True)
class Product:
    id: Any
    name: str
    price: float
    quantity: int
    description: Optional[str] = None

    @classmethod
    def from_json(cls, data: dict) -> "Product":
        return cls(
            id=data.get("id"),
            name=str(data.get("name") or ""),
            price=_float(data.get("price")),
            quantity=_int(data.get("quantity")),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class ProductItem:
    product_id: Any
    quantity: int
    price: float

    @classmethod
    def from_json(cls, data: dict) -> "ProductItem":
        return cls(
            product_id=data.get("productId"),
            quantity=_int(data.get("quantity")),
            price=_float(data.get("price")),
        )

    def to_json(self) -> dict:
        return {"productId": self.product_id, "quantity": self.quantity, "price": self.price}

    @property
    def line_total(self) -> float:
        return self.quantity * self.price


@dataclass(frozen=True)
class Order:
    id: Any
    user_id: Optional[str]
    date: Optional[str]
    status: Optional[str]
    amount: float
    product_items: tuple[ProductItem, ...] = ()

    @classmethod
    def from_json(cls, data: dict) -> "Order":
        items = data.get("productItems") or []
        return cls(
            id=data.get("id"),
            user_id=data.get("userId"),
            date=data.get("date"),
            status=data.get("status"),
            amount=_float(data.get("amount")),
            product_items=tuple(ProductItem.from_json(it) for it in items),
        )


@dataclass(frozen=True)
class ProductDraft:
    """Unsaved form input. Numeric fields stay text until submission."""

    name: str = ""
    description: str = ""
    price: str = ""
    quantity: str = ""

    @classmethod
    def from_product(cls, product: Product) -> "ProductDraft":
        return cls(
            name=product.name,
            description=product.description or "",
            price=str(product.price),
            quantity=str(product.quantity),
        )

    def to_payload(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "price": float(self.price),
            "quantity": int(float(self.quantity)),
        }


@dataclass(frozen=True)
class Capabilities:
    username: Optional[str]
    roles: frozenset[str] = field(default_factory=frozenset)
    is_admin: bool = False

    @property
    def role_label(self) -> str:
        return "ADMIN" if self.is_admin else "CLIENT"

    @property
    def orders_path(self) -> str:
        return "/orders/all" if self.is_admin else "/orders"
