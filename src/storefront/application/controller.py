from __future__ import annotations

from concurrent.futures import Future
from dataclasses import replace
import logging
import re
from typing import Callable, Optional

from storefront.domain.errors import ApiError, AuthenticationExpired, AuthorizationDenied
from storefront.domain.models import Capabilities, Order, Product, ProductDraft, ProductItem
from storefront.services.api_client import classify_error
from storefront.services.auth_service import can, capabilities_from_claims

log = logging.getLogger("storefront.api")

UNAUTHORIZED_MESSAGE = "Unauthorized. Please log in again."
ORDER_PLACED_MESSAGE = "Order placed successfully!"
DELETE_CONFIRM_MESSAGE = "Are you sure you want to delete this product?"

QuantityPrompt = Callable[[str, str], "Future[Optional[str]]"]

_LEADING_INT_RE = re.compile(r"^[+-]?\d+")


def parse_quantity(text: Optional[str]) -> Optional[int]:
    """Prompted quantity as a positive int, or None when the order must be aborted."""
    if text is None:
        return None
    cleaned = text.strip()
    if not cleaned or "_" in cleaned:
        return None
    try:
        float(cleaned)
    except ValueError:
        return None
    # only the leading digits count: "2.9" -> 2, "1e3" -> 1
    match = _LEADING_INT_RE.match(cleaned)
    if match is None:
        return None
    qty = int(match.group())
    if qty <= 0:
        return None
    return qty


def format_error(err: Exception, action: str) -> str:
    if isinstance(err, AuthenticationExpired):
        return UNAUTHORIZED_MESSAGE
    if isinstance(err, AuthorizationDenied):
        return f"Forbidden. You do not have permission to {action}."
    if isinstance(err, ApiError):
        detail = err.server_message or str(err)
    else:
        detail = str(err)
    return f"Failed to {action}. {detail}"


class ViewSyncController:
    """
    Local view state for the products catalog and the orders ledger.

    Remote state is authoritative: every successful write is followed by a
    refetch, the local lists are only ever replaced as a whole.
    """

    def __init__(
        self,
        session,
        catalog_service,
        order_service,
        export_service=None,
        confirm: Callable[[str], bool] | None = None,
        notify: Callable[[str], None] | None = None,
    ):
        self.session = session
        self.catalog = catalog_service
        self.orders_service = order_service
        self.export = export_service
        self.confirm = confirm or (lambda _msg: False)
        self.notify = notify or (lambda _msg: None)

        self.products: list[Product] = []
        self.orders: list[Order] = []
        self.error: Optional[str] = None
        self.show_product_form = False
        self.editing_product: Optional[Product] = None
        self.draft = ProductDraft()
        self.busy = False

        self._listeners: list[Callable[[], None]] = []
        self.session.subscribe(self._on_auth_changed)

    # ---------- state ----------
    def subscribe(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener()

    @property
    def capabilities(self) -> Capabilities:
        # recomputed from the live token on every access
        return capabilities_from_claims(self.session.token_parsed)

    @property
    def is_admin(self) -> bool:
        return self.capabilities.is_admin

    def can(self, action: str) -> bool:
        return can(self.capabilities, action)

    @property
    def form_visible(self) -> bool:
        return self.is_admin and (self.show_product_form or self.editing_product is not None)

    # ---------- auth gate ----------
    def start(self) -> None:
        if self.session.authenticated:
            self.load_initial()

    def _on_auth_changed(self, authenticated: bool) -> None:
        if authenticated:
            self.load_initial()
            return
        self.products = []
        self.orders = []
        self.show_product_form = False
        self.editing_product = None
        self.draft = ProductDraft()
        self._emit()

    def load_initial(self) -> None:
        self.fetch_products()
        self.fetch_orders()

    def logout(self) -> None:
        self.session.logout()

    # ---------- errors ----------
    def handle_error(self, err: Exception, action: str) -> None:
        log.error("Error %s: %s", action, err, exc_info=err)
        if not isinstance(err, ApiError) and getattr(err, "response", None) is not None:
            err = classify_error(err)

        self.error = format_error(err, action)
        self._emit()
        if isinstance(err, AuthenticationExpired) and self.session.authenticated:
            self.session.logout()

    # ---------- products ----------
    def fetch_products(self) -> bool:
        try:
            products = self.catalog.list_products()
        except Exception as e:
            self.handle_error(e, "fetch products")
            return False
        self.products = products
        self.error = None
        self._emit()
        return True

    def update_draft(self, **fields: str) -> None:
        self.draft = replace(self.draft, **fields)

    def reset_draft(self) -> None:
        self.draft = ProductDraft()

    def toggle_product_form(self) -> None:
        if self.editing_product is not None:
            return
        self.show_product_form = not self.show_product_form
        self.reset_draft()
        self._emit()

    def start_edit(self, product: Product) -> None:
        self.editing_product = product
        self.draft = ProductDraft.from_product(product)
        self.show_product_form = False
        self._emit()

    def cancel_edit(self) -> None:
        self.editing_product = None
        self.show_product_form = False
        self.reset_draft()
        self._emit()

    def submit_product_form(self) -> bool:
        if self.editing_product is not None:
            return self.update_product()
        return self.create_product()

    def _write(self, action: str, call: Callable[[], None]) -> bool:
        if self.busy:
            log.info("write_ignored action=%s reason=in_flight", action)
            return False
        self.busy = True
        self._emit()
        try:
            call()
        except Exception as e:
            self.busy = False
            self.handle_error(e, action)
            return False
        finally:
            self.busy = False
        return True

    def create_product(self) -> bool:
        if not self._write("create product", lambda: self.catalog.create_product(self.draft)):
            return False
        self.show_product_form = False
        self.reset_draft()
        self.error = None
        self.fetch_products()
        return True

    def update_product(self) -> bool:
        target = self.editing_product
        if target is None:
            return False
        if not self._write("update product", lambda: self.catalog.update_product(target.id, self.draft)):
            return False
        self.editing_product = None
        self.reset_draft()
        self.error = None
        self.fetch_products()
        return True

    def delete_product(self, product_id) -> bool:
        if not self.confirm(DELETE_CONFIRM_MESSAGE):
            return False
        if not self._write("delete product", lambda: self.catalog.delete_product(product_id)):
            return False
        self.error = None
        self.fetch_products()
        return True

    # ---------- orders ----------
    def fetch_orders(self) -> bool:
        try:
            orders = self.orders_service.list_orders(self.capabilities)
        except Exception as e:
            self.handle_error(e, "fetch orders")
            return False
        self.orders = orders
        self.error = None
        self._emit()
        return True

    def get_order(self, order_id) -> Optional[Order]:
        try:
            return self.orders_service.get_order(order_id)
        except Exception as e:
            self.handle_error(e, "fetch order")
            return None

    def place_order(self, product_id, price: float, prompt: QuantityPrompt) -> "Future[bool]":
        """
        Ask for a quantity, then submit a single-item order.

        The returned future resolves to False when the prompt is dismissed or
        the entered quantity is missing, non-numeric or not positive; no
        request is sent in that case.
        """
        outcome: Future[bool] = Future()

        def on_answer(answer: Future) -> None:
            text = None if answer.cancelled() else answer.result()
            qty = parse_quantity(text)
            if qty is None:
                outcome.set_result(False)
                return
            outcome.set_result(self._submit_order(product_id, price, qty))

        prompt("Enter quantity:", "1").add_done_callback(on_answer)
        return outcome

    def _submit_order(self, product_id, price: float, qty: int) -> bool:
        item = ProductItem(product_id=product_id, quantity=qty, price=price)
        if not self._write("place order", lambda: self.orders_service.place_order([item])):
            return False
        self.notify(ORDER_PLACED_MESSAGE)
        self.error = None
        self.fetch_orders()
        # stock may have changed server-side
        self.fetch_products()
        return True

    def export_orders(self, path: str) -> int:
        if self.export is None:
            return 0
        try:
            count = self.export.export_orders_excel(path, self.orders, include_user=self.is_admin)
        except Exception as e:
            self.handle_error(e, "export orders")
            return 0
        self.error = None
        self._emit()
        return count
