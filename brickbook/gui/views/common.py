from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

import customtkinter as ctk

from brickbook.context import AppContext
from brickbook.gui.background import run_in_background
from brickbook.gui.state import ConfirmingDelete, DeleteTarget, Interaction, InteractionState
from brickbook.reports.base import ReportContext
from brickbook.reports.report_factory import EXTENSIONS, ReportFactory
from brickbook.utils.text import format_rupees

logger = logging.getLogger(__name__)

POSITIVE_COLOR = "#15803d"
NEGATIVE_COLOR = "#b91c1c"
ZERO_COLOR = "gray50"


def balance_color(value: float) -> str:
    if value > 0:
        return POSITIVE_COLOR
    if value < 0:
        return NEGATIVE_COLOR
    return ZERO_COLOR


class BaseView(ctk.CTkFrame):  # pragma: no cover - GUI glue
    def __init__(self, master: Any, ctx: AppContext, interaction: InteractionState) -> None:
        super().__init__(master)
        self.ctx = ctx
        self.interaction = interaction
        self.t = ctx.translator.t
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)
        self.status = ctk.CTkLabel(self, text="", text_color=ZERO_COLOR)

    def _add_section_title(self, text: str) -> None:
        label = ctk.CTkLabel(self, text=text, font=("Arial", 16, "bold"))
        label.grid(row=0, column=0, sticky="w", padx=12, pady=(12, 6))

    def _load(self, work: Callable[[], Any], on_success: Callable[[Any], None]) -> None:
        """Fetch in the background; the list stays empty if the fetch fails."""
        self.status.configure(text=self.t("common.loading"))
        self.status.grid(row=3, column=0, sticky="w", padx=12)

        def done(result: Any) -> None:
            self.status.grid_remove()
            on_success(result)

        def failed(exc: Exception) -> None:
            logger.warning("Loading %s failed: %s", type(self).__name__, exc)
            self.status.grid_remove()

        run_in_background(self, work, done, failed)

    def _confirm_delete(self, target: DeleteTarget, message: str, on_confirm: Callable[[], None]) -> None:
        if not self.interaction.is_idle:
            return
        self.interaction.open(ConfirmingDelete(target))
        ConfirmDialog(self, self.interaction, self.t("common.confirmDelete"), message, self.t, on_confirm)

    def _export(self, name: str, report_type: str, build: Callable[[], tuple[Any, ReportContext]]) -> None:
        """Write a statement into the reports folder; ``build`` runs off the main loop."""
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        out = self.ctx.paths.reports_dir / f"{name}_{stamp}{EXTENSIONS[report_type]}"
        factory = ReportFactory(self.ctx.paths.templates_dir)

        def done(path: Any) -> None:
            self.status.configure(text=str(path))
            self.status.grid(row=3, column=0, sticky="w", padx=12)

        run_in_background(self, lambda: factory.generate(report_type, *build(), out), done)

    def _open(self, interaction: Interaction) -> bool:
        """Enter ``interaction`` unless another dialog is already open."""
        if not self.interaction.is_idle:
            return False
        self.interaction.open(interaction)
        return True


class FormDialog(ctk.CTkToplevel):  # pragma: no cover - GUI glue
    """Modal form; ``submit`` runs in the background and the dialog closes only on success.

    A failed submit is logged and leaves the form as it was.
    """

    def __init__(self, master: Any, title: str, interaction: InteractionState, t: Callable[[str], str]) -> None:
        super().__init__(master)
        self.title(title)
        self.resizable(False, False)
        self.interaction = interaction
        self.t = t
        self.body = ctk.CTkFrame(self, fg_color="transparent")
        self.body.pack(fill="both", expand=True, padx=16, pady=(16, 6))
        self.body.grid_columnconfigure(1, weight=1)
        self._row = 0

        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.pack(fill="x", padx=16, pady=(6, 16))
        self.save_btn = ctk.CTkButton(buttons, text=t("common.save"), command=self._on_save)
        self.save_btn.pack(side="right", padx=(6, 0))
        ctk.CTkButton(buttons, text=t("common.cancel"), fg_color="gray60", command=self._cancel).pack(side="right")
        self.protocol("WM_DELETE_WINDOW", self._cancel)
        self.after(50, self._grab)

    def _grab(self) -> None:
        self.grab_set()
        self.focus_force()

    def add_entry(self, label: str, value: str = "", placeholder: str = "") -> ctk.CTkEntry:
        ctk.CTkLabel(self.body, text=label).grid(row=self._row, column=0, sticky="w", padx=(0, 8), pady=4)
        entry = ctk.CTkEntry(self.body, placeholder_text=placeholder, width=220)
        if value:
            entry.insert(0, value)
        entry.grid(row=self._row, column=1, sticky="ew", pady=4)
        self._row += 1
        return entry

    def add_widget(self, label: str, widget: ctk.CTkBaseClass) -> None:
        ctk.CTkLabel(self.body, text=label).grid(row=self._row, column=0, sticky="w", padx=(0, 8), pady=4)
        widget.grid(row=self._row, column=1, sticky="w", pady=4)
        self._row += 1

    def submit(self) -> Callable[[], Any]:
        """Read the form on the main loop and return the store call to run."""
        raise NotImplementedError

    def on_saved(self, result: Any) -> None:
        pass

    def _on_save(self) -> None:
        if not self.interaction.start_request():
            return
        self.save_btn.configure(state="disabled", text=self.t("common.loading"))
        run_in_background(self, self.submit(), self._saved, self._failed)

    def _saved(self, result: Any) -> None:
        self.interaction.finish_request()
        self._close()
        self.on_saved(result)

    def _failed(self, exc: Exception) -> None:
        self.interaction.finish_request()
        logger.warning("%s not saved: %s", type(self).__name__, exc)
        if self.winfo_exists():
            self.save_btn.configure(state="normal", text=self.t("common.save"))

    def _cancel(self) -> None:
        if self.interaction.busy:
            return
        self._close()

    def _close(self) -> None:
        self.interaction.close()
        try:
            self.grab_release()
        finally:
            self.destroy()


class ConfirmDialog(ctk.CTkToplevel):  # pragma: no cover - GUI glue
    def __init__(
        self,
        master: Any,
        interaction: InteractionState,
        title: str,
        message: str,
        t: Callable[[str], str],
        on_confirm: Callable[[], None],
    ) -> None:
        super().__init__(master)
        self.title(title)
        self.resizable(False, False)
        self.interaction = interaction
        self._on_confirm = on_confirm
        ctk.CTkLabel(self, text=message, wraplength=320, justify="left").pack(padx=16, pady=(16, 12))
        buttons = ctk.CTkFrame(self, fg_color="transparent")
        buttons.pack(fill="x", padx=16, pady=(0, 16))
        ctk.CTkButton(buttons, text=t("common.delete"), fg_color=NEGATIVE_COLOR, command=self._confirm).pack(
            side="right", padx=(6, 0)
        )
        ctk.CTkButton(buttons, text=t("common.cancel"), fg_color="gray60", command=self._close).pack(side="right")
        self.protocol("WM_DELETE_WINDOW", self._close)
        self.after(50, self.grab_set)

    def _confirm(self) -> None:
        self._close()
        self._on_confirm()

    def _close(self) -> None:
        self.interaction.close()
        try:
            self.grab_release()
        finally:
            self.destroy()


def rupees_label(master: Any, value: float, **kwargs: Any) -> ctk.CTkLabel:  # pragma: no cover - GUI glue
    return ctk.CTkLabel(master, text=format_rupees(value), text_color=balance_color(value), **kwargs)
