# ui/renderer.py
from __future__ import annotations
import sys
from typing import List, Optional, TextIO

from app.state import RoundStats
from core.terminal import DisplayGeometry
from ui import ansi

TITLE = "=== Typing Game ==="
RESULTS_TITLE = "=== Results ==="
TARGET_LABEL = "Type this: "
INPUT_LABEL = "Your input: "
CONTINUE_PROMPT = "Press any key to continue, Ctrl+C to exit..."

TITLE_ROW = 1
TARGET_ROW = 3
INPUT_ROW = 5
MISTAKES_ROW = 7
USED_ROWS = 7


def center_padding(columns: int, text_len: int) -> int:
    return max(0, (columns - text_len) // 2)


class Renderer:
    """Draws the round screen and the results screen with raw escape codes."""

    def __init__(self, geometry: DisplayGeometry, stream: Optional[TextIO] = None):
        self.geometry = geometry
        self.stream = stream or sys.stdout

    def render_round(self, target: str, typed: str, mistakes: int):
        out = self._begin(hide_cursor=True)
        out.append(self._centered(TITLE, TITLE_ROW))
        out.append(self._centered(TARGET_LABEL + target, TARGET_ROW))
        input_line = INPUT_LABEL + typed
        out.append(self._centered(input_line, INPUT_ROW))
        out.append(self._centered(f"Mistakes: {mistakes}", MISTAKES_ROW))

        # caret sits right after the last typed character
        col = center_padding(self.geometry.columns, len(input_line)) + len(input_line) + 1
        out.append(ansi.move_to(INPUT_ROW, col))
        self._flush(out)

    def render_results(self, stats: RoundStats):
        out = self._begin()
        out.append(self._centered(RESULTS_TITLE, 1))
        out.append(self._centered(f"Time: {stats.elapsed:.2f} seconds", 3))
        out.append(self._centered(f"Accuracy: {stats.accuracy:.1f}%", 4))
        out.append(self._centered(f"Speed: {stats.wpm:.1f} WPM", 5))
        out.append(self._centered(CONTINUE_PROMPT, 7))
        self._flush(out)

    def _begin(self, hide_cursor: bool = False) -> List[str]:
        out = [ansi.HIDE_CURSOR] if hide_cursor else []
        out.append(ansi.HOME + ansi.CLEAR_SCREEN)
        for row in range(1, USED_ROWS + 1):
            out.append(ansi.move_to(row, 1) + ansi.CLEAR_LINE)
        return out

    def _centered(self, text: str, row: int) -> str:
        pad = center_padding(self.geometry.columns, len(text))
        return ansi.move_to(row, pad + 1) + text + ansi.CLEAR_LINE

    def _flush(self, out: List[str]):
        self.stream.write("".join(out))
        self.stream.flush()
