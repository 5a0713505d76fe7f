from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.models import Order, Product

LOW_STOCK_THRESHOLD = 5
LOW_STOCK_MARK = "⚠️"


@dataclass(frozen=True)
class ProductCard:
    product_id: object
    name: str
    description: str
    price_label: str
    stock_label: str
    low_stock: bool
    order_enabled: bool


def money(value: float | None) -> str:
    return f"${float(value or 0.0):.2f}"


def is_low_stock(product: Product) -> bool:
    return product.quantity <= LOW_STOCK_THRESHOLD


def product_card(product: Product) -> ProductCard:
    low = is_low_stock(product)
    stock = f"Stock: {product.quantity}"
    if low:
        stock = f"{stock} {LOW_STOCK_MARK}"
    return ProductCard(
        product_id=product.id,
        name=product.name,
        description=product.description or "",
        price_label=money(product.price),
        stock_label=stock,
        low_stock=low,
        order_enabled=product.quantity > 0,
    )


ORDER_HEADS = {
    "id": "Order ID",
    "user": "User",
    "date": "Date",
    "status": "Status",
    "amount": "Amount",
    "items": "Items",
}


def order_columns(is_admin: bool) -> tuple[str, ...]:
    if is_admin:
        return ("id", "user", "date", "status", "amount", "items")
    return ("id", "date", "status", "amount", "items")


def order_row(order: Order, is_admin: bool) -> tuple[str, ...]:
    values = {
        "id": f"#{order.id}",
        "user": order.user_id or "",
        "date": order.date or "",
        "status": order.status or "",
        "amount": money(order.amount),
        "items": f"{len(order.product_items)} item(s)",
    }
    return tuple(values[c] for c in order_columns(is_admin))


def orders_title(is_admin: bool) -> str:
    return "📋 All Orders" if is_admin else "📋 My Orders"


def error_banner(message: str | None) -> str:
    return f"⚠️ {message}" if message else ""
