from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Schedules(Protocol):
    def after(self, ms: int, func: Callable[[], Any]) -> Any:
        ...


def run_in_background(
    widget: Schedules,
    work: Callable[[], T],
    on_success: Callable[[T], None],
    on_error: Optional[Callable[[Exception], None]] = None,
) -> threading.Thread:
    """Run ``work`` on a daemon thread and hand its outcome to the Tk main loop.

    Widgets must only be touched from the main loop, so both callbacks go
    through ``widget.after(0, ...)``.
    """

    def worker() -> None:
        try:
            result = work()
        except Exception as exc:  # noqa: BLE001
            logger.exception("Background task failed: %s", exc)
            if on_error is not None:
                widget.after(0, lambda err=exc: on_error(err))
            return
        widget.after(0, lambda: on_success(result))

    thread = threading.Thread(target=worker, daemon=True)
    thread.start()
    return thread
