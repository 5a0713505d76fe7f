from __future__ import annotations

import tkinter as tk
from tkinter import ttk, messagebox
import logging
import re
from typing import Optional

from storefront.domain.models import ProductDraft
from storefront.ui.presenters import product_card

log = logging.getLogger(__name__)

_DECIMAL_RE = re.compile(r"^\d*\.?\d{0,2}$")
_INTEGER_RE = re.compile(r"^\d*$")


def accepts_price(text: str) -> bool:
    """Keystroke filter for the price entry (non-negative, two decimals)."""
    return bool(_DECIMAL_RE.match(text))


def accepts_quantity(text: str) -> bool:
    return bool(_INTEGER_RE.match(text))


def form_constraint_error(draft: ProductDraft) -> Optional[str]:
    """Required-field check done by the form itself, before anything is submitted."""
    if not draft.name.strip():
        return "Product Name is required."
    if not draft.price.strip() or draft.price.strip() == ".":
        return "Price is required."
    if not draft.quantity.strip():
        return "Stock Quantity is required."
    return None


class ProductsView:
    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.controller = app.controller
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="Products")

        self._syncing = False
        self._form_target = None
        self._order_pending = False
        self.vars = {name: tk.StringVar() for name in ("name", "description", "price", "quantity")}
        for name, var in self.vars.items():
            var.trace_add("write", lambda *_a, field=name: self._on_field_changed(field))

        self._build()

    def _build(self):
        tab = self.frame

        head = ttk.Frame(tab)
        head.pack(fill="x", padx=10, pady=(10, 4))
        ttk.Label(head, text="📦 Products Catalog", style="Title.TLabel").pack(side="left")
        self.add_btn = ttk.Button(head, text="+ Add Product", command=self.on_toggle_form)

        self.form = ttk.LabelFrame(tab, text="➕ New Product")
        self.form.columnconfigure(1, weight=1)
        self.form.columnconfigure(3, weight=1)

        price_ok = (self.frame.register(accepts_price), "%P")
        qty_ok = (self.frame.register(accepts_quantity), "%P")

        self.e_name = self._entry(self.form, "Product Name *", 0, 0, self.vars["name"])
        self.e_desc = self._entry(self.form, "Description", 0, 2, self.vars["description"])
        self.e_price = self._entry(self.form, "Price *", 1, 0, self.vars["price"], validate=price_ok)
        self.e_qty = self._entry(self.form, "Stock Quantity *", 1, 2, self.vars["quantity"], validate=qty_ok)

        btns = ttk.Frame(self.form)
        btns.grid(row=2, column=0, columnspan=4, sticky="e", padx=8, pady=(6, 8))
        self.submit_btn = ttk.Button(btns, text="➕ Create", command=self.on_submit)
        self.submit_btn.pack(side="right")
        ttk.Button(btns, text="Cancel", command=self.controller.cancel_edit).pack(side="right", padx=(0, 6))

        for entry in (self.e_name, self.e_desc, self.e_price, self.e_qty):
            entry.bind("<Return>", self._on_enter_submit)

        wrap = ttk.Frame(tab)
        wrap.pack(fill="both", expand=True, padx=10, pady=(4, 10))
        self.canvas = tk.Canvas(wrap, highlightthickness=0)
        vsb = ttk.Scrollbar(wrap, orient="vertical", command=self.canvas.yview)
        self.canvas.configure(yscrollcommand=vsb.set)
        self.canvas.pack(side="left", fill="both", expand=True)
        vsb.pack(side="right", fill="y")

        self.cards = ttk.Frame(self.canvas)
        self.canvas.create_window((0, 0), window=self.cards, anchor="nw")
        self.cards.bind("<Configure>", lambda _e: self.canvas.configure(scrollregion=self.canvas.bbox("all")))

        self.form_anchor = wrap

    def _entry(self, parent, label, row, col, var, validate=None):
        ttk.Label(parent, text=label).grid(row=row, column=col, sticky="w", padx=8, pady=4)
        e = ttk.Entry(parent, textvariable=var, width=24)
        if validate is not None:
            e.configure(validate="key", validatecommand=validate)
        e.grid(row=row, column=col + 1, sticky="ew", padx=8, pady=4)
        return e

    # ---------- form ----------
    def _on_field_changed(self, field: str):
        if self._syncing:
            return
        self.controller.update_draft(**{field: self.vars[field].get()})

    def _sync_vars_from_draft(self):
        draft = self.controller.draft
        self._syncing = True
        try:
            for name, var in self.vars.items():
                value = getattr(draft, name)
                if var.get() != value:
                    var.set(value)
        finally:
            self._syncing = False

    def _on_enter_submit(self, _event=None):
        self.on_submit()
        return "break"

    def on_toggle_form(self):
        self.controller.toggle_product_form()

    def on_submit(self):
        problem = form_constraint_error(self.controller.draft)
        if problem:
            messagebox.showwarning("Product", problem, parent=self.frame)
            return
        editing = self.controller.editing_product is not None
        if self.controller.submit_product_form():
            self.app.toast("Product updated." if editing else "Product created.", kind="success")

    def on_delete(self, product_id):
        if self.controller.delete_product(product_id):
            self.app.toast("Product deleted.", kind="success")

    def on_order(self, product_id, price: float):
        # one quantity prompt at a time
        if self._order_pending:
            return
        self._order_pending = True
        outcome = self.controller.place_order(product_id, price, self.app.prompt_quantity)
        outcome.add_done_callback(self._on_order_settled)
        self.refresh()

    def _on_order_settled(self, _outcome):
        self._order_pending = False
        self.refresh()

    # ---------- render ----------
    def refresh(self):
        c = self.controller

        if c.can("create_product") and c.editing_product is None:
            self.add_btn.configure(text="✕ Cancel" if c.show_product_form else "+ Add Product")
            self.add_btn.pack(side="right")
        else:
            self.add_btn.pack_forget()

        if c.form_visible:
            editing = c.editing_product is not None
            self.form.configure(text="✏️ Edit Product" if editing else "➕ New Product")
            self.submit_btn.configure(
                text="💾 Update" if editing else "➕ Create",
                state="disabled" if c.busy else "normal",
            )
            self._sync_vars_from_draft()
            if not self.form.winfo_manager():
                self.form.pack(fill="x", padx=10, pady=4, before=self.form_anchor)
            target = c.editing_product.id if editing else None
            if target != self._form_target:
                self._form_target = target
                self.e_name.focus_set()
        else:
            self.form.pack_forget()
            self._form_target = None

        self._render_cards(c.can("update_product"), c.can("delete_product"))

    def _render_cards(self, can_edit: bool, can_delete: bool):
        for child in self.cards.winfo_children():
            child.destroy()

        products = self.controller.products
        if not products:
            ttk.Label(self.cards, text="No products available.").grid(row=0, column=0, padx=10, pady=20)
            return

        per_row = 3
        for i, p in enumerate(products):
            card = product_card(p)
            box = ttk.Frame(self.cards, relief="groove", padding=10)
            box.grid(row=i // per_row, column=i % per_row, sticky="nsew", padx=6, pady=6)

            ttk.Label(box, text=card.name, style="Title.TLabel").pack(anchor="w")
            if card.description:
                ttk.Label(box, text=card.description, wraplength=240).pack(anchor="w")
            ttk.Label(box, text=card.price_label, style="KPIValue.TLabel").pack(anchor="w", pady=(6, 0))
            ttk.Label(box, text=card.stock_label, style="LowStock.TLabel" if card.low_stock else "TLabel")\
                .pack(anchor="w")

            actions = ttk.Frame(box)
            actions.pack(fill="x", pady=(8, 0))
            order_btn = ttk.Button(actions, text="🛒 Order",
                                   command=lambda pid=p.id, price=p.price: self.on_order(pid, price))
            if not card.order_enabled or self.controller.busy or self._order_pending:
                order_btn.state(["disabled"])
            order_btn.pack(side="left")

            if can_edit:
                ttk.Button(actions, text="✏️", width=3, command=lambda prod=p: self.controller.start_edit(prod))\
                    .pack(side="left", padx=(6, 0))
            if can_delete:
                ttk.Button(actions, text="🗑️", width=3, command=lambda pid=p.id: self.on_delete(pid))\
                    .pack(side="left", padx=(6, 0))
