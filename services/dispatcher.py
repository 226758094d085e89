# services/dispatcher.py
from __future__ import annotations
import enum
import logging
import random
import time
from typing import Callable, Optional

from app.errors import InputReadFailure
from app.phrases import choose_phrase
from app.state import RoundState, RoundStats
from core.shutdown import TerminationSignal
from ui.renderer import Renderer

log = logging.getLogger(__name__)

INTERRUPT_BYTE = 3    # Ctrl+C
DELETE_BYTE = 127     # DEL, what most terminals send for Backspace


class DispatchState(enum.Enum):
    RUNNING = "running"
    TERMINATING = "terminating"


class InputKind(enum.Enum):
    INTERRUPT = "interrupt"
    BACKSPACE = "backspace"
    PRINTABLE = "printable"


def classify(b: int) -> InputKind:
    if b == INTERRUPT_BYTE:
        return InputKind.INTERRUPT
    if b == DELETE_BYTE:
        return InputKind.BACKSPACE
    return InputKind.PRINTABLE


class InputDispatcher:
    """
    Owns the current round and turns one input byte at a time into
    round updates and screen changes.

    While a results screen is up, the next non-interrupt byte only
    dismisses it; the following round's clock starts from that key.
    """

    def __init__(
        self,
        renderer: Renderer,
        termination: TerminationSignal,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
        phrase_picker: Callable[..., str] = choose_phrase,
    ):
        self.renderer = renderer
        self.termination = termination
        self.rng = rng or random.Random()
        self.clock = clock
        self._pick = phrase_picker
        self._state = DispatchState.RUNNING
        self.results: Optional[RoundStats] = None
        self.failure: Optional[InputReadFailure] = None
        self.round = self._new_round()

    @property
    def state(self) -> DispatchState:
        if self.termination.is_closed:
            self._state = DispatchState.TERMINATING
        return self._state

    @property
    def running(self) -> bool:
        return self.state is DispatchState.RUNNING

    def _new_round(self, previous: Optional[str] = None) -> RoundState:
        target = self._pick(rng=self.rng, previous=previous)
        log.debug("new round: %r", target)
        return RoundState(target=target, clock=self.clock)

    def feed(self, b: int) -> DispatchState:
        if not self.running:
            return self._state

        kind = classify(b)
        if kind is InputKind.INTERRUPT:
            log.debug("interrupt byte received")
            self.termination.close()
            self._state = DispatchState.TERMINATING
            return self._state

        if self.results is not None:
            # results on screen: this key just moves on to the next round
            self.results = None
            self.round.restart_clock()
            return self._state

        if kind is InputKind.BACKSPACE:
            self.round.backspace()
        elif not self.round.is_complete:
            if self.round.append_char(chr(b)):
                self._finish_round()
        return self._state

    def fail(self, error: InputReadFailure) -> DispatchState:
        log.debug("input failure: %s", error)
        self.failure = error
        self.termination.close()
        self._state = DispatchState.TERMINATING
        return self._state

    def render(self):
        if self.results is None:
            self.renderer.render_round(
                self.round.target, self.round.typed_text, self.round.mistakes
            )

    def _finish_round(self):
        stats = self.round.compute_stats()
        log.debug("round done: %s", stats)
        self.renderer.render_results(stats)
        self.results = stats
        self.round = self._new_round(previous=self.round.target)
