from __future__ import annotations

import logging

import customtkinter as ctk

from brickbook.context import AppContext
from brickbook.db.models import Session
from brickbook.gui.background import run_in_background
from brickbook.gui.login_dialog import LoginDialog
from brickbook.gui.state import InteractionState
from brickbook.gui.views.brick_loads_view import BrickLoadsView
from brickbook.gui.views.calculator_view import CalculatorView
from brickbook.gui.views.reports_view import ReportsView
from brickbook.gui.views.workers_view import WorkersView

logger = logging.getLogger(__name__)


class MainApp(ctk.CTk):  # pragma: no cover - GUI glue
    def __init__(self, ctx: AppContext) -> None:
        super().__init__()
        self.ctx = ctx
        self.interaction = InteractionState()
        self.title(ctx.translator.t("brand.name"))
        self.geometry("1100x700")
        self.body: ctk.CTkFrame | None = None
        self.withdraw()
        run_in_background(self, ctx.store.current_session, self._on_session, lambda _e: self._show_login())

    def _on_session(self, session: Session | None) -> None:
        if session is None:
            self._show_login()
        else:
            self._on_signed_in(session)

    def _show_login(self) -> None:
        LoginDialog(self, self.ctx, self._on_signed_in)

    def _on_signed_in(self, session: Session) -> None:
        logger.info("Session for %s", session.user.email)
        self.deiconify()
        self._build()

    def _build(self) -> None:
        t = self.ctx.translator.t
        if self.body is not None:
            self.body.destroy()
        self.body = ctk.CTkFrame(self, fg_color="transparent")
        self.body.pack(fill="both", expand=True)

        top = ctk.CTkFrame(self.body)
        top.pack(fill="x")
        ctk.CTkLabel(top, text=t("brand.name"), font=("Arial", 18, "bold")).pack(side="left", padx=12, pady=8)
        ctk.CTkButton(top, text=t("auth.signOut"), width=100, command=self._sign_out).pack(side="right", padx=12)
        other = "English" if self.ctx.translator.language == "te" else "తెలుగు"
        ctk.CTkButton(top, text=other, width=100, command=self._toggle_language).pack(side="right")

        self.tabview = ctk.CTkTabview(self.body)
        self.tabview.pack(fill="both", expand=True)
        workers_tab = self.tabview.add(t("nav.workers"))
        loads_tab = self.tabview.add(t("nav.brickLoads"))
        calculator_tab = self.tabview.add(t("nav.calculator"))
        reports_tab = self.tabview.add(t("nav.reports"))

        self.workers_view = WorkersView(workers_tab, self.ctx, self.interaction)
        self.workers_view.pack(fill="both", expand=True)
        BrickLoadsView(loads_tab, self.ctx, self.interaction).pack(fill="both", expand=True)
        CalculatorView(calculator_tab, self.ctx, self.interaction, self._use_as_usage).pack(fill="both", expand=True)
        ReportsView(reports_tab, self.ctx, self.interaction).pack(fill="both", expand=True)

    def _use_as_usage(self, worker_id: str, amount: str) -> None:
        self.tabview.set(self.ctx.translator.t("nav.workers"))
        self.workers_view.open_usage_for(worker_id, amount)

    def _toggle_language(self) -> None:
        if not self.interaction.is_idle:
            return
        self.ctx.translator.toggle()
        self.title(self.ctx.translator.t("brand.name"))
        self._build()

    def _sign_out(self) -> None:
        run_in_background(self, self.ctx.auth.sign_out, lambda _r: self._signed_out(), lambda _e: self._signed_out())

    def _signed_out(self) -> None:
        if self.body is not None:
            self.body.destroy()
            self.body = None
        self.withdraw()
        self._show_login()


def run_app(ctx: AppContext) -> None:  # pragma: no cover - interactive
    ctk.set_appearance_mode("System")
    ctk.set_default_color_theme("blue")
    app = MainApp(ctx)
    app.mainloop()
