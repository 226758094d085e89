import io

import pytest
from PySide6.QtCore import QCoreApplication

from core.shutdown import TerminationSignal
from core.terminal import DisplayGeometry
from services.dispatcher import InputDispatcher
from ui.renderer import Renderer


class FakeClock:
    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture(scope="session")
def qapp():
    return QCoreApplication.instance() or QCoreApplication([])


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def screen():
    return io.StringIO()


@pytest.fixture()
def renderer(screen):
    return Renderer(DisplayGeometry(columns=80, rows=24), screen)


@pytest.fixture()
def termination(qapp):
    return TerminationSignal()


@pytest.fixture()
def make_dispatcher(renderer, termination, clock):
    def factory(*phrases):
        queue = list(phrases) or ["cat"]

        def pick(rng=None, previous=None):
            return queue.pop(0) if len(queue) > 1 else queue[0]

        return InputDispatcher(renderer, termination, clock=clock, phrase_picker=pick)

    return factory
