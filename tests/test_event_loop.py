import os

import pytest
from PySide6.QtCore import QTimer

from app.errors import InputReadFailure
from core.event_loop import GameLoop


@pytest.fixture()
def pipe():
    r, w = os.pipe()
    yield r, w
    for fd in (r, w):
        try:
            os.close(fd)
        except OSError:
            pass


def run_loop(dispatcher, termination, fd):
    # guard against a hung test
    guard = QTimer()
    guard.setSingleShot(True)
    guard.timeout.connect(termination.close)
    guard.start(5000)
    try:
        return GameLoop(dispatcher, termination, fd_in=fd).run()
    finally:
        guard.stop()


def test_round_then_ctrl_c(make_dispatcher, termination, screen, pipe):
    r, w = pipe
    d = make_dispatcher("cat", "dog")
    os.write(w, b"cxt\x03")
    assert run_loop(d, termination, r) is None
    out = screen.getvalue()
    assert "Type this: cat" in out
    assert "Accuracy: 66.7%" in out
    assert termination.is_closed
    assert d.round.target == "dog"


def test_closed_input_is_fatal(make_dispatcher, termination, pipe):
    r, w = pipe
    d = make_dispatcher("cat")
    os.write(w, b"ca")
    os.close(w)
    failure = run_loop(d, termination, r)
    assert isinstance(failure, InputReadFailure)
    assert termination.is_closed
    assert d.round.typed_text == "ca"


def test_external_termination_wakes_loop(make_dispatcher, termination, pipe):
    r, _ = pipe
    d = make_dispatcher("cat")
    QTimer.singleShot(50, termination.close)
    assert run_loop(d, termination, r) is None
    assert d.round.typed == []


def test_already_closed_returns_without_rendering(make_dispatcher, termination, screen, pipe):
    r, _ = pipe
    d = make_dispatcher("cat")
    termination.close()
    assert GameLoop(d, termination, fd_in=r).run() is None
    assert screen.getvalue() == ""
