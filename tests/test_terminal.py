import fcntl
import io
import os
import pty
import struct
import termios

import pytest

from app.errors import TerminalUnavailable
from core.terminal import DisplayGeometry, TerminalSession, open_session
from ui import ansi


@pytest.fixture()
def pty_pair():
    master, slave = pty.openpty()
    fcntl.ioctl(slave, termios.TIOCSWINSZ, struct.pack("HHHH", 24, 80, 0, 0))
    yield master, slave
    os.close(master)
    os.close(slave)


def test_open_enters_raw_mode_and_reads_size(pty_pair):
    _, slave = pty_pair
    before = termios.tcgetattr(slave)
    session = TerminalSession(fd_in=slave, fd_out=slave, stream=io.StringIO())
    handle, geometry = session.open()
    try:
        assert geometry == DisplayGeometry(columns=80, rows=24)
        lflag = termios.tcgetattr(slave)[3]
        assert not lflag & termios.ECHO
        assert not lflag & termios.ICANON
    finally:
        session.close(handle)
    assert termios.tcgetattr(slave) == before


def test_close_restores_screen_once(pty_pair):
    _, slave = pty_pair
    out = io.StringIO()
    session = TerminalSession(fd_in=slave, fd_out=slave, stream=out)
    handle, _ = session.open()
    session.close(handle)
    session.close(handle)
    text = out.getvalue()
    assert text == ansi.CLEAR_SCREEN + ansi.HOME + ansi.SHOW_CURSOR + "\n"
    assert handle.released


def test_context_manager_restores_on_error(pty_pair):
    _, slave = pty_pair
    before = termios.tcgetattr(slave)
    session = TerminalSession(fd_in=slave, fd_out=slave, stream=io.StringIO())
    with pytest.raises(RuntimeError):
        with open_session(session):
            raise RuntimeError("boom")
    assert termios.tcgetattr(slave) == before


def test_not_a_terminal():
    r, w = os.pipe()
    try:
        session = TerminalSession(fd_in=r, fd_out=w, stream=io.StringIO())
        with pytest.raises(TerminalUnavailable):
            session.open()
    finally:
        os.close(r)
        os.close(w)


def test_size_failure_releases_raw_mode(pty_pair):
    _, slave = pty_pair
    r, w = os.pipe()
    before = termios.tcgetattr(slave)
    try:
        session = TerminalSession(fd_in=slave, fd_out=w, stream=io.StringIO())
        with pytest.raises(TerminalUnavailable):
            session.open()
    finally:
        os.close(r)
        os.close(w)
    assert termios.tcgetattr(slave) == before
