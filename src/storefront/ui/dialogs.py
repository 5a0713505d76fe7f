from __future__ import annotations

from concurrent.futures import Future
import tkinter as tk
from tkinter import ttk
from typing import Callable, Optional

from storefront.domain.errors import AuthenticationError


class QuantityDialog:
    """Non-modal quantity prompt. The answer arrives through a Future."""

    def __init__(self, parent: tk.Misc, message: str, default: str = ""):
        self.result: Future[Optional[str]] = Future()

        self.win = tk.Toplevel(parent)
        self.win.title("Order")
        self.win.resizable(False, False)
        self.win.transient(parent)
        self.win.protocol("WM_DELETE_WINDOW", self.cancel)

        ttk.Label(self.win, text=message).pack(anchor="w", padx=12, pady=(12, 4))
        self.value = tk.StringVar(value=default)
        entry = ttk.Entry(self.win, textvariable=self.value, width=18)
        entry.pack(fill="x", padx=12)
        entry.select_range(0, tk.END)
        entry.focus_set()

        btns = ttk.Frame(self.win)
        btns.pack(fill="x", padx=12, pady=12)
        ttk.Button(btns, text="OK", command=self.accept).pack(side="right")
        ttk.Button(btns, text="Cancel", command=self.cancel).pack(side="right", padx=(0, 6))

        self.win.bind("<Return>", lambda _e: self.accept())
        self.win.bind("<Escape>", lambda _e: self.cancel())

    def _close(self, answer: Optional[str]) -> None:
        if not self.result.done():
            self.result.set_result(answer)
        self.win.destroy()

    def accept(self) -> None:
        self._close(self.value.get())

    def cancel(self) -> None:
        self._close(None)


def quantity_prompt(parent: tk.Misc) -> Callable[[str, str], "Future[Optional[str]]"]:
    def prompt(message: str, default: str) -> "Future[Optional[str]]":
        return QuantityDialog(parent, message, default).result

    return prompt


class LoginDialog:
    def __init__(self, parent: tk.Tk, session, on_cancel: Callable[[], None]):
        self.session = session
        self.on_cancel = on_cancel

        self.win = tk.Toplevel(parent)
        self.win.title("Sign in")
        self.win.resizable(False, False)
        self.win.transient(parent)
        self.win.protocol("WM_DELETE_WINDOW", self.cancel)

        box = ttk.LabelFrame(self.win, text=f"Realm: {session.settings.realm}")
        box.pack(fill="both", expand=True, padx=12, pady=12)

        ttk.Label(box, text="Username").grid(row=0, column=0, sticky="w", padx=8, pady=4)
        self.username = ttk.Entry(box, width=28)
        self.username.grid(row=0, column=1, sticky="ew", padx=8, pady=4)

        ttk.Label(box, text="Password").grid(row=1, column=0, sticky="w", padx=8, pady=4)
        self.password = ttk.Entry(box, width=28, show="•")
        self.password.grid(row=1, column=1, sticky="ew", padx=8, pady=4)

        self.error_var = tk.StringVar(value="")
        ttk.Label(box, textvariable=self.error_var, foreground="#b91c1c").grid(
            row=2, column=0, columnspan=2, sticky="w", padx=8
        )

        btns = ttk.Frame(box)
        btns.grid(row=3, column=0, columnspan=2, sticky="e", padx=8, pady=(6, 8))
        ttk.Button(btns, text="Sign in", command=self.submit).pack(side="right")
        ttk.Button(btns, text="Quit", command=self.cancel).pack(side="right", padx=(0, 6))

        self.win.bind("<Return>", lambda _e: self.submit())
        self.username.focus_set()
        self.win.grab_set()

    def submit(self) -> None:
        try:
            self.session.login(self.username.get(), self.password.get())
        except AuthenticationError as e:
            self.error_var.set(str(e))
            self.password.delete(0, tk.END)
            return
        self.win.grab_release()
        self.win.destroy()

    def cancel(self) -> None:
        self.win.grab_release()
        self.win.destroy()
        self.on_cancel()
