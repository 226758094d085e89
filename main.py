# main.py
from __future__ import annotations
import sys
import logging
from typing import Optional, TextIO

from PySide6.QtCore import QCoreApplication

from app.errors import TerminalUnavailable
from core.event_loop import GameLoop
from core.shutdown import ShutdownCoordinator, TerminationSignal
from core.terminal import TerminalSession, open_session
from services.dispatcher import InputDispatcher
from ui.renderer import Renderer

log = logging.getLogger("typemaster")


def setup_logging(level: int = logging.WARNING) -> None:
    # stderr only: stdout belongs to the game screen
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Log any uncaught exceptions rather than silently dying
    def excepthook(exctype, value, tb):
        logging.critical("Unhandled exception", exc_info=(exctype, value, tb))
        sys.exit(1)

    sys.excepthook = excepthook


def run(session: Optional[TerminalSession] = None, stream: Optional[TextIO] = None) -> int:
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("Typemaster")

    termination = TerminationSignal()
    coordinator = ShutdownCoordinator(termination)
    session = session or TerminalSession(stream=stream)

    try:
        with open_session(session) as (handle, geometry):
            coordinator.start()
            try:
                renderer = Renderer(geometry, session.stream)
                dispatcher = InputDispatcher(renderer, termination)
                failure = GameLoop(dispatcher, termination, fd_in=handle.fd).run()
            finally:
                coordinator.stop()
    except TerminalUnavailable as e:
        log.error("Error initializing game: %s", e)
        return 1

    # reported only now, on a restored terminal
    if failure is not None:
        log.error("Error reading input: %s", failure)
        return 1
    return 0


def main() -> int:
    setup_logging()
    return run()


if __name__ == "__main__":
    sys.exit(main())
