from __future__ import annotations

import pytest

from brickbook.gui.background import run_in_background
from brickbook.gui.state import (
    IDLE,
    AddingUsage,
    AddingWorker,
    ConfirmingDelete,
    DeleteTarget,
    InteractionError,
    InteractionState,
)


class FakeWidget:
    """Stands in for a Tk widget: runs scheduled callbacks right away."""

    def __init__(self):
        self.scheduled = []

    def after(self, ms, func):
        self.scheduled.append(ms)
        func()


def test_one_interaction_at_a_time():
    state = InteractionState()
    seen = []
    state.subscribe(seen.append)
    assert state.is_idle
    state.open(AddingWorker())
    with pytest.raises(InteractionError):
        state.open(AddingUsage("w1", "250"))
    state.close()
    state.open(AddingUsage("w1", "250"))
    assert state.current == AddingUsage("w1", "250")
    state.open(IDLE)
    assert state.is_idle
    assert seen == [AddingWorker(), IDLE, AddingUsage("w1", "250"), IDLE]


def test_confirming_delete_carries_target():
    state = InteractionState()
    target = DeleteTarget("usage", "u1")
    state.open(ConfirmingDelete(target))
    assert state.current.target.kind == "usage"


def test_request_guard():
    state = InteractionState()
    state.open(AddingWorker())
    assert state.start_request()
    assert not state.start_request()
    state.finish_request()
    assert state.start_request()
    state.close()
    assert not state.busy


def test_background_success():
    widget = FakeWidget()
    results = []
    run_in_background(widget, lambda: 42, results.append).join(timeout=5)
    assert results == [42]
    assert widget.scheduled == [0]


def test_background_error():
    widget = FakeWidget()
    errors, results = [], []

    def boom():
        raise ValueError("store down")

    run_in_background(widget, boom, results.append, errors.append).join(timeout=5)
    assert results == []
    assert isinstance(errors[0], ValueError)


def test_background_error_without_handler():
    widget = FakeWidget()
    run_in_background(widget, lambda: 1 / 0, lambda _r: None).join(timeout=5)
    assert widget.scheduled == []
