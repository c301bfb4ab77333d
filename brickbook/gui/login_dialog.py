from __future__ import annotations

import logging
from typing import Any, Callable

import customtkinter as ctk

from brickbook.context import AppContext
from brickbook.db.gateway import StoreError
from brickbook.db.models import Session
from brickbook.gui.background import run_in_background
from brickbook.services.common import ServiceError
from brickbook.utils.validators import ValidationError

logger = logging.getLogger(__name__)

ERROR_COLOR = "#b91c1c"


def error_text(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return exc.message
    if isinstance(exc, (StoreError, ServiceError)):
        return str(exc)
    return "Unexpected error"


class LoginDialog(ctk.CTkToplevel):  # pragma: no cover - GUI glue
    """Sign-in window; the only form that shows error text to the user.

    On a local database without any account it first asks for the owner's
    email and password.
    """

    def __init__(self, master: Any, ctx: AppContext, on_signed_in: Callable[[Session], None]) -> None:
        super().__init__(master)
        self.ctx = ctx
        self.t = ctx.translator.t
        self.on_signed_in = on_signed_in
        self.title(self.t("auth.signIn"))
        self.geometry("420x320")
        self.resizable(False, False)
        self.protocol("WM_DELETE_WINDOW", master.destroy)

        self.mode = "setup" if ctx.auth.needs_setup() else "password"
        self._link_sent = False

        ctk.CTkLabel(self, text=self.t("brand.name"), font=("Arial", 18, "bold")).pack(pady=(16, 8))
        self.email = ctk.CTkEntry(self, placeholder_text=self.t("auth.email"), width=300)
        self.email.pack(pady=4)
        self.secret = ctk.CTkEntry(self, placeholder_text=self.t("auth.password"), show="*", width=300)
        self.secret.pack(pady=4)
        self.error = ctk.CTkLabel(self, text="", text_color=ERROR_COLOR, wraplength=340)
        self.error.pack(pady=4)
        self.submit_btn = ctk.CTkButton(self, text="", width=300, command=self._on_submit)
        self.submit_btn.pack(pady=4)
        self.switch_btn = ctk.CTkButton(self, text="", width=300, fg_color="transparent", command=self._toggle_mode)
        self.switch_btn.pack(pady=4)
        self._apply_mode()
        self.after(50, self.grab_set)

    def _apply_mode(self) -> None:
        self.error.configure(text="")
        self.secret.delete(0, "end")
        if self.mode == "setup":
            self.secret.configure(placeholder_text=self.t("auth.password"), show="*")
            self.submit_btn.configure(text=self.t("common.save"))
            self.switch_btn.pack_forget()
        elif self.mode == "password":
            self.secret.configure(placeholder_text=self.t("auth.password"), show="*")
            self.secret.pack(pady=4, before=self.error)
            self.submit_btn.configure(text=self.t("auth.signIn"))
            self.switch_btn.configure(text=self.t("auth.useMagicLink"))
        elif self._link_sent:
            self.secret.configure(placeholder_text=self.t("auth.linkCode"), show="")
            self.secret.pack(pady=4, before=self.error)
            self.submit_btn.configure(text=self.t("auth.signIn"))
            self.switch_btn.configure(text=self.t("auth.backToLogin"))
        else:
            self.secret.pack_forget()
            self.submit_btn.configure(text=self.t("auth.sendMagicLink"))
            self.switch_btn.configure(text=self.t("auth.usePassword"))

    def _toggle_mode(self) -> None:
        self.mode = "link" if self.mode == "password" else "password"
        self._link_sent = False
        self._apply_mode()

    def _on_submit(self) -> None:
        email, secret = self.email.get(), self.secret.get()
        auth = self.ctx.auth
        if self.mode == "setup":
            work: Callable[[], Any] = lambda: auth.create_first_user(email, secret)
        elif self.mode == "password":
            work = lambda: auth.sign_in(email, secret)
        elif self._link_sent:
            work = lambda: auth.verify_login_link(email, secret)
        else:
            work = lambda: auth.send_login_link(email)
        self.submit_btn.configure(state="disabled", text=self.t("auth.signingIn"))
        run_in_background(self, work, self._on_done, self._on_error)

    def _on_done(self, result: Any) -> None:
        self.submit_btn.configure(state="normal")
        if isinstance(result, Session):
            self.grab_release()
            self.destroy()
            self.on_signed_in(result)
            return
        # link requested
        self._link_sent = True
        self._apply_mode()
        self.error.configure(text=self.t("auth.magicLinkSent"), text_color="gray40")

    def _on_error(self, exc: Exception) -> None:
        logger.warning("Sign-in failed: %s", exc)
        self.submit_btn.configure(state="normal")
        self._apply_mode()
        self.error.configure(text=error_text(exc), text_color=ERROR_COLOR)
