# core/event_loop.py
from __future__ import annotations
import logging
import os
from typing import Optional

from PySide6.QtCore import QEventLoop, QObject, QSocketNotifier

from app.errors import InputReadFailure
from core.shutdown import TerminationSignal
from services.dispatcher import InputDispatcher

log = logging.getLogger(__name__)


class GameLoop(QObject):
    """
    Render, wait, dispatch, repeat.

    Waits on input readiness with a QSocketNotifier inside a local
    QEventLoop; the same loop also delivers the termination signal, so
    neither source is polled.
    """

    def __init__(self, dispatcher: InputDispatcher, termination: TerminationSignal,
                 fd_in: int, parent=None):
        super().__init__(parent)
        self.dispatcher = dispatcher
        self.termination = termination
        self.fd_in = fd_in
        self._loop: Optional[QEventLoop] = None
        self._notifier: Optional[QSocketNotifier] = None

    def run(self) -> Optional[InputReadFailure]:
        """Block until termination. Returns the read failure that ended it, if any."""
        if self.termination.is_closed:
            return self.dispatcher.failure

        self._loop = QEventLoop(self)
        self.termination.closed.connect(self._stop)
        self._notifier = QSocketNotifier(self.fd_in, QSocketNotifier.Type.Read, self)
        self._notifier.activated.connect(self._on_readable)
        try:
            self.dispatcher.render()
            if not self.termination.is_closed:
                self._loop.exec()
        finally:
            self._notifier.setEnabled(False)
            self._notifier.deleteLater()
            self._notifier = None
            self.termination.closed.disconnect(self._stop)
            self._loop = None
        return self.dispatcher.failure

    def _on_readable(self, *args):
        if not self.dispatcher.running:
            self._stop()
            return
        try:
            data = os.read(self.fd_in, 1)
        except OSError as e:
            self.dispatcher.fail(InputReadFailure(f"error reading input: {e}"))
            return
        if not data:
            self.dispatcher.fail(InputReadFailure("input stream closed"))
            return

        self.dispatcher.feed(data[0])
        if self.dispatcher.running:
            self.dispatcher.render()

    def _stop(self):
        if self._notifier is not None:
            self._notifier.setEnabled(False)
        if self._loop is not None:
            self._loop.quit()
