# core/terminal.py
from __future__ import annotations
import logging
import os
import sys
import termios
import tty
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, TextIO, Tuple

from app.errors import TerminalUnavailable
from ui import ansi

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DisplayGeometry:
    columns: int
    rows: int


class SessionHandle:
    """Proof that the terminal on ``fd`` is in raw mode. Released once."""

    def __init__(self, fd: int, saved_attrs: list):
        self.fd = fd
        self._saved_attrs = saved_attrs
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> bool:
        if self._released:
            return False
        self._released = True
        termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved_attrs)
        return True


class TerminalSession:
    def __init__(self, fd_in: Optional[int] = None, fd_out: Optional[int] = None,
                 stream: Optional[TextIO] = None):
        self.fd_in = sys.stdin.fileno() if fd_in is None else fd_in
        self.fd_out = sys.stdout.fileno() if fd_out is None else fd_out
        self.stream = stream or sys.stdout

    def open(self) -> Tuple[SessionHandle, DisplayGeometry]:
        if not os.isatty(self.fd_in):
            raise TerminalUnavailable("stdin is not a terminal")
        try:
            saved = termios.tcgetattr(self.fd_in)
            tty.setraw(self.fd_in, termios.TCSANOW)
        except termios.error as e:
            raise TerminalUnavailable(f"failed to set terminal to raw mode: {e}") from e
        handle = SessionHandle(self.fd_in, saved)

        try:
            size = os.get_terminal_size(self.fd_out)
        except OSError as e:
            # raw mode is already on; give it back before failing
            handle.release()
            raise TerminalUnavailable(f"failed to get terminal size: {e}") from e

        geometry = DisplayGeometry(columns=size.columns, rows=size.lines)
        log.debug("raw mode on fd %d, geometry %s", self.fd_in, geometry)
        return handle, geometry

    def close(self, handle: SessionHandle):
        """Restore the saved mode and leave a clean screen behind."""
        if handle.released:
            return
        try:
            self.stream.write(ansi.CLEAR_SCREEN + ansi.HOME + ansi.SHOW_CURSOR)
            self.stream.flush()
        finally:
            handle.release()
            self.stream.write("\n")
            self.stream.flush()
        log.debug("terminal mode restored on fd %d", handle.fd)


@contextmanager
def open_session(session: Optional[TerminalSession] = None) -> Iterator[Tuple[SessionHandle, DisplayGeometry]]:
    """Raw mode for the duration of the block, restored on every exit path."""
    session = session or TerminalSession()
    handle, geometry = session.open()
    try:
        yield handle, geometry
    finally:
        session.close(handle)
