"""Which modal the user is in.

Exactly one interaction is active at a time; every dialog opens through
:class:`InteractionState` and returns it to :data:`IDLE` when it closes.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional, Union

logger = logging.getLogger(__name__)

DeleteKind = Literal["worker", "work", "usage", "brick_load", "brick_log"]


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class AddingWorker:
    pass


@dataclass(frozen=True)
class AddingWork:
    worker_id: str


@dataclass(frozen=True)
class AddingUsage:
    worker_id: str
    amount: Optional[str] = None


@dataclass(frozen=True)
class AddingBrickLoad:
    pass


@dataclass(frozen=True)
class AddingBrickLog:
    load_id: str


@dataclass(frozen=True)
class AddingPayment:
    load_id: str


@dataclass(frozen=True)
class DeleteTarget:
    kind: DeleteKind
    record_id: str
    label: str = ""


@dataclass(frozen=True)
class ConfirmingDelete:
    target: DeleteTarget


Interaction = Union[
    Idle,
    AddingWorker,
    AddingWork,
    AddingUsage,
    AddingBrickLoad,
    AddingBrickLog,
    AddingPayment,
    ConfirmingDelete,
]

IDLE = Idle()

Listener = Callable[[Interaction], None]


class InteractionError(RuntimeError):
    """Raised when a dialog is opened while another one is still open."""


class InteractionState:
    def __init__(self) -> None:
        self.current: Interaction = IDLE
        self.busy = False
        self._listeners: list[Listener] = []

    @property
    def is_idle(self) -> bool:
        return isinstance(self.current, Idle)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _set(self, interaction: Interaction) -> None:
        self.current = interaction
        for listener in list(self._listeners):
            listener(interaction)

    def open(self, interaction: Interaction) -> None:
        if isinstance(interaction, Idle):
            self.close()
            return
        if not self.is_idle:
            raise InteractionError(f"{type(self.current).__name__} is still open")
        logger.debug("Opening %s", interaction)
        self._set(interaction)

    def close(self) -> None:
        self.busy = False
        self._set(IDLE)

    def start_request(self) -> bool:
        """Mark a store round-trip as running; False when one is already running."""
        if self.busy:
            return False
        self.busy = True
        return True

    def finish_request(self) -> None:
        self.busy = False
