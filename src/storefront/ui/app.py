from __future__ import annotations

import tkinter as tk
from tkinter import ttk, messagebox
import logging

from storefront.ui.dialogs import LoginDialog, quantity_prompt
from storefront.ui.presenters import error_banner
from storefront.ui.views.orders_view import OrdersView
from storefront.ui.views.products_view import ProductsView

log = logging.getLogger(__name__)


class App(tk.Tk):
    def __init__(self, container, logs_dir: str):
        super().__init__()
        self.title("🛒 E-Commerce Microservices")
        self.geometry("1180x720")
        self.minsize(980, 600)

        self.container = container
        self.session = container.session
        self.controller = container.controller
        self.health = container.health
        self.logs_dir = logs_dir

        self.controller.confirm = self.ask_confirm
        self.controller.notify = self.show_info
        self.prompt_quantity = quantity_prompt(self)

        # UI state
        self.user_var = tk.StringVar(value="Redirecting to login...")
        self.role_var = tk.StringVar(value="")
        self.error_var = tk.StringVar(value="")
        self.status_var = tk.StringVar(value="")
        self.health_var = tk.StringVar(value="Services: unknown")
        self._toast_after_id = None
        self._login = None

        self._build_styles()
        self._build_topbar()

        self.error_label = ttk.Label(self, textvariable=self.error_var, style="Error.TLabel")

        main = ttk.Frame(self)
        main.pack(fill="both", expand=True, padx=12, pady=(0, 8))

        self.sidebar = ttk.Frame(main)
        self.sidebar.pack(side="left", fill="y", padx=(0, 10))

        self.content = ttk.Frame(main)
        self.content.pack(side="right", fill="both", expand=True)

        self.nb = ttk.Notebook(self.content, style="Side.TNotebook")
        self.nb.pack(fill="both", expand=True)

        # Views (tabs hidden)
        self.products_view = ProductsView(self.nb, self)
        self.orders_view = OrdersView(self.nb, self)

        self._build_sidebar()
        self._build_status_bar()

        self.controller.subscribe(self.render)
        self.session.subscribe(self._on_auth_changed)

        self.controller.start()
        self.render()
        self.check_health()
        self.after(100, self.show_login)

    def _build_styles(self):
        style = ttk.Style(self)
        style.layout("Side.TNotebook.Tab", [])
        style.configure("Side.TNotebook", tabmargins=0)

        try:
            style.configure("Big.TButton", padding=(14, 10))
            style.configure("Title.TLabel", font=("Segoe UI", 12, "bold"))
            style.configure("KPIValue.TLabel", font=("Segoe UI", 11, "bold"))
            style.configure("Badge.TLabel", font=("Segoe UI", 9, "bold"), foreground="#1d4ed8")
            style.configure("LowStock.TLabel", foreground="#d64545")
            style.configure("Error.TLabel", foreground="#b91c1c", background="#fee2e2", padding=(10, 6))
        except tk.TclError as e:
            log.exception("UI style setup failed: %s", e)

    def _build_topbar(self):
        top = ttk.Frame(self)
        top.pack(fill="x", padx=12, pady=10)

        ttk.Label(top, text="🛒 E-Commerce Microservices", style="Title.TLabel").pack(side="left")

        self.logout_btn = ttk.Button(top, text="Logout", command=self.controller.logout)
        self.logout_btn.pack(side="right")
        ttk.Label(top, textvariable=self.role_var, style="Badge.TLabel").pack(side="right", padx=10)
        ttk.Label(top, textvariable=self.user_var).pack(side="right")

        self.topbar = top

    def _build_sidebar(self):
        box = ttk.LabelFrame(self.sidebar, text="Quick Actions")
        box.pack(fill="x", pady=(0, 10))

        ttk.Button(
            box, text="📦 Products", style="Big.TButton",
            command=lambda: self.nb.select(self.products_view.frame)
        ).pack(fill="x", padx=10, pady=(10, 6))

        ttk.Button(
            box, text="📋 Orders", style="Big.TButton",
            command=lambda: self.nb.select(self.orders_view.frame)
        ).pack(fill="x", padx=10, pady=6)

        ttk.Button(box, text="🔄 Refresh", style="Big.TButton",
                   command=self.refresh_all).pack(fill="x", padx=10, pady=(6, 10))

    def _build_status_bar(self):
        bar = ttk.Frame(self)
        bar.pack(fill="x", padx=12, pady=(0, 10))
        ttk.Label(bar, textvariable=self.status_var).pack(side="left")
        ttk.Label(bar, text=f"Logs: {self.logs_dir}").pack(side="right")
        ttk.Label(bar, textvariable=self.health_var).pack(side="right", padx=12)

    def toast(self, msg: str, kind: str = "info", ms: int = 2500):
        prefix = {"info": "ℹ ", "success": "✅ ", "warn": "⚠ ", "error": "❌ "}.get(kind, "")
        self.status_var.set(prefix + msg)
        if self._toast_after_id is not None:
            self.after_cancel(self._toast_after_id)
        self._toast_after_id = self.after(ms, lambda: self.status_var.set(""))

    # ---------- collaborators for the controller ----------
    def ask_confirm(self, message: str) -> bool:
        return messagebox.askyesno("Confirm", message, parent=self)

    def show_info(self, message: str) -> None:
        messagebox.showinfo("OK", message, parent=self)

    # ---------- auth ----------
    def _on_auth_changed(self, authenticated: bool):
        if not authenticated:
            # let the current callback finish before opening a grabbed dialog
            self.after(0, self.show_login)
        self.render()

    def show_login(self):
        if self.session.authenticated:
            return
        if self._login is not None and self._login.win.winfo_exists():
            return
        self._login = LoginDialog(self, self.session, on_cancel=self.destroy)

    # ---------- health ----------
    def check_health(self):
        report = self.health.check()
        self.health_var.set(report.summary())

    # ---------- Refresh ----------
    def refresh_all(self):
        if not self.session.authenticated:
            return
        self.controller.load_initial()
        self.check_health()
        self.toast("Refreshed.", kind="info", ms=1200)

    def render(self):
        caps = self.controller.capabilities
        if self.session.authenticated:
            self.user_var.set(caps.username or "")
            self.role_var.set(caps.role_label)
            self.logout_btn.state(["!disabled"])
        else:
            self.user_var.set("Redirecting to login...")
            self.role_var.set("")
            self.logout_btn.state(["disabled"])

        banner = error_banner(self.controller.error)
        self.error_var.set(banner)
        if banner:
            self.error_label.pack(fill="x", padx=12, pady=(0, 8), after=self.topbar)
        else:
            self.error_label.pack_forget()

        self.products_view.refresh()
        self.orders_view.refresh()
