from dataclasses import dataclass, field
from typing import Callable, List, Optional
import time

from app.calculation import accuracy_percent, words_per_minute


@dataclass(frozen=True)
class RoundStats:
    elapsed: float   # seconds
    accuracy: float  # percent
    wpm: float


@dataclass
class RoundState:
    """
    One phrase attempt.

    ``started_at`` is set from ``clock`` on creation, but the dispatcher
    calls ``restart_clock()`` when the previous round's results screen is
    dismissed, so for every round after the first it is the time of that
    key press rather than the creation time.
    """

    target: str
    typed: List[str] = field(default_factory=list)
    mistakes: int = 0
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    started_at: Optional[float] = None

    def __post_init__(self):
        if not self.target:
            raise ValueError("target phrase must not be empty")
        if self.started_at is None:
            self.started_at = self.clock()

    @property
    def typed_text(self) -> str:
        return "".join(self.typed)

    @property
    def is_complete(self) -> bool:
        return len(self.typed) == len(self.target)

    def restart_clock(self):
        self.started_at = self.clock()

    def append_char(self, ch: str) -> bool:
        """
        Place ``ch`` at the next position. A mismatch is counted once, at entry,
        and stays counted even if the character is later erased.
        Returns True when this append completed the round.
        """
        if self.is_complete:
            return False
        pos = len(self.typed)
        self.typed.append(ch)
        if ch != self.target[pos]:
            self.mistakes += 1
        return self.is_complete

    def backspace(self):
        if self.typed:
            self.typed.pop()

    def compute_stats(self) -> RoundStats:
        elapsed = max(0.0, self.clock() - self.started_at)
        return RoundStats(
            elapsed=elapsed,
            accuracy=accuracy_percent(len(self.target), self.mistakes),
            wpm=words_per_minute(len(self.target), elapsed),
        )
