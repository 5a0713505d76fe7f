from __future__ import annotations

import tkinter as tk
from tkinter import ttk, filedialog
from datetime import date
import logging

from storefront.ui.presenters import ORDER_HEADS, money, order_columns, order_row, orders_title

log = logging.getLogger(__name__)


class OrdersView:
    def __init__(self, notebook: ttk.Notebook, app):
        self.app = app
        self.controller = app.controller
        self.frame = ttk.Frame(notebook)
        notebook.add(self.frame, text="Orders")

        self._row_ids: dict[str, object] = {}
        self._build()

    def _build(self):
        tab = self.frame

        head = ttk.Frame(tab)
        head.pack(fill="x", padx=10, pady=(10, 4))
        self.title = ttk.Label(head, text=orders_title(False), style="Title.TLabel")
        self.title.pack(side="left")
        ttk.Button(head, text="🔄 Refresh", command=self.controller.fetch_orders).pack(side="right")
        ttk.Button(head, text="Export to Excel", command=self.export_orders).pack(side="right", padx=(0, 6))

        box = ttk.LabelFrame(tab, text="Orders (double click to view details)")
        box.pack(fill="both", expand=True, padx=10, pady=(4, 10))

        self.tree = ttk.Treeview(box, columns=order_columns(False), show="headings", height=18)
        vsb = ttk.Scrollbar(box, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscrollcommand=vsb.set)
        self.tree.pack(side="left", fill="both", expand=True, padx=(10, 0), pady=10)
        vsb.pack(side="right", fill="y", pady=10)
        self.tree.bind("<Double-1>", self.open_order_details)

        self.empty = ttk.Label(box, text="No orders found.")

    def _configure_columns(self, is_admin: bool):
        cols = order_columns(is_admin)
        if tuple(self.tree["columns"]) == cols:
            return
        self.tree.configure(columns=cols)
        widths = {"id": 90, "user": 160, "date": 120, "status": 120, "amount": 110, "items": 90}
        for c in cols:
            self.tree.heading(c, text=ORDER_HEADS[c])
            self.tree.column(c, width=widths[c], anchor="w")

    def refresh(self):
        is_admin = self.controller.can("list_all_orders")
        self.title.configure(text=orders_title(is_admin))
        self._configure_columns(is_admin)

        for item in self.tree.get_children():
            self.tree.delete(item)
        self._row_ids = {}

        orders = self.controller.orders
        if not orders:
            self.empty.place(relx=0.5, rely=0.5, anchor="center")
            return
        self.empty.place_forget()

        for o in orders:
            iid = self.tree.insert("", "end", values=order_row(o, is_admin))
            self._row_ids[iid] = o.id

    def open_order_details(self, _evt=None):
        sel = self.tree.selection()
        if not sel:
            return
        order_id = self._row_ids.get(sel[0])
        if order_id is None:
            return

        order = self.controller.get_order(order_id)
        if order is None:
            return

        win = tk.Toplevel(self.app)
        win.title(f"Order Details #{order.id}")
        win.geometry("640x420")

        h = ttk.LabelFrame(win, text="Header")
        h.pack(fill="x", padx=10, pady=10)

        if self.controller.is_admin:
            ttk.Label(h, text=f"User: {order.user_id or ''}").pack(anchor="w", padx=10, pady=2)
        ttk.Label(h, text=f"Date: {order.date or ''} | Status: {order.status or ''}").pack(anchor="w", padx=10, pady=2)
        ttk.Label(h, text=f"Amount: {money(order.amount)}").pack(anchor="w", padx=10, pady=2)

        box = ttk.LabelFrame(win, text="Items")
        box.pack(fill="both", expand=True, padx=10, pady=(0, 10))

        cols = ("product", "qty", "unit", "line")
        tree = ttk.Treeview(box, columns=cols, show="headings", height=10)
        heads = {"product": "Product ID", "qty": "Qty", "unit": "Unit Price", "line": "Line Total"}
        widths = {"product": 120, "qty": 70, "unit": 120, "line": 120}
        for c in cols:
            tree.heading(c, text=heads[c])
            tree.column(c, width=widths[c], anchor="w")
        tree.pack(fill="both", expand=True, padx=10, pady=10)

        for it in order.product_items:
            tree.insert("", "end", values=(it.product_id, it.quantity, money(it.price), money(it.line_total)))

    def export_orders(self):
        if not self.controller.can("export_orders"):
            return
        if not self.controller.orders:
            self.app.toast("No orders to export.", kind="warn")
            return
        path = filedialog.asksaveasfilename(
            title="Save orders as",
            defaultextension=".xlsx",
            filetypes=[("Excel files", "*.xlsx")],
            initialfile=f"orders_{date.today().isoformat()}.xlsx",
        )
        if not path:
            return
        count = self.controller.export_orders(path)
        if count:
            self.app.toast(f"{count} order(s) exported.", kind="success")
