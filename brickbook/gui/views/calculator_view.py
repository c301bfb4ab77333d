from __future__ import annotations

from typing import Any, Callable

import customtkinter as ctk

from brickbook.context import AppContext
from brickbook.db.models import Worker
from brickbook.gui.state import InteractionState
from brickbook.gui.views.common import BaseView
from brickbook.utils.calculator import Calculator

KEYS = (
    ("(", ")", "%", "÷"),
    ("7", "8", "9", "×"),
    ("4", "5", "6", "-"),
    ("1", "2", "3", "+"),
    ("0", ".", "⌫", "="),
)


class CalculatorView(BaseView):  # pragma: no cover - GUI glue
    def __init__(
        self,
        master: Any,
        ctx: AppContext,
        interaction: InteractionState,
        on_use_as_usage: Callable[[str, str], None],
    ) -> None:
        super().__init__(master, ctx, interaction)
        self.calc = Calculator()
        self.on_use_as_usage = on_use_as_usage
        self._workers: dict[str, str] = {}
        self._add_section_title(self.t("calculator.title"))

        self.display = ctk.CTkLabel(self, text="0", font=("Arial", 28, "bold"), anchor="e")
        self.display.grid(row=1, column=0, sticky="ew", padx=24, pady=(6, 12))

        pad = ctk.CTkFrame(self, fg_color="transparent")
        pad.grid(row=2, column=0, sticky="n", padx=12)
        ctk.CTkButton(pad, text=self.t("calculator.clear"), width=64, height=48, command=self._clear).grid(
            row=0, column=0, columnspan=4, sticky="ew", padx=3, pady=3
        )
        for r, row in enumerate(KEYS, start=1):
            for c, key in enumerate(row):
                ctk.CTkButton(pad, text=key, width=64, height=48, command=lambda k=key: self._press(k)).grid(
                    row=r, column=c, padx=3, pady=3
                )

        use = ctk.CTkFrame(self, fg_color="transparent")
        use.grid(row=4, column=0, sticky="n", pady=12)
        self.worker_var = ctk.StringVar(value="")
        self.worker_menu = ctk.CTkOptionMenu(use, values=[""], variable=self.worker_var)
        self.worker_menu.pack(side="left", padx=6)
        ctk.CTkButton(use, text=self.t("calculator.useAsUsage"), command=self._use).pack(side="left", padx=6)
        self.refresh()

    def refresh(self) -> None:
        self._load(self.ctx.workers.list_workers, self._on_workers)

    def _on_workers(self, workers: list[Worker]) -> None:
        self._workers = {f"{w.name} ({w.phone})": w.id for w in workers}
        labels = list(self._workers) or [""]
        self.worker_menu.configure(values=labels)
        self.worker_var.set(labels[0])

    def _press(self, key: str) -> None:
        if key == "=":
            self.calc.calculate()
        elif key == "⌫":
            self.calc.backspace()
        elif key in ("(", ")"):
            self.calc.press_paren(key)
        elif key in ("+", "-", "×", "÷", "%"):
            self.calc.press_operator(key)
        else:
            self.calc.press_digit(key)
        self.display.configure(text=self.calc.display)

    def _clear(self) -> None:
        self.calc.clear()
        self.display.configure(text=self.calc.display)

    def _use(self) -> None:
        worker_id = self._workers.get(self.worker_var.get())
        amount = self.calc.calculate()
        self.display.configure(text=self.calc.display)
        if worker_id and amount and amount != "Error":
            self.on_use_as_usage(worker_id, amount)
