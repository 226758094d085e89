# core/shutdown.py
from __future__ import annotations
import logging
import signal
import socket
import threading
from typing import Dict, Iterable, Optional

from PySide6.QtCore import QObject, QSocketNotifier, Signal

log = logging.getLogger(__name__)

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class TerminationSignal(QObject):
    """One-shot shutdown flag shared by the key path and the OS-signal path."""

    closed = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._lock = threading.Lock()
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    def close(self) -> bool:
        """Close once. Returns False if someone else already closed it."""
        with self._lock:
            if self._closed:
                return False
            self._closed = True
        self.closed.emit()
        return True


class ShutdownCoordinator(QObject):
    """
    Turns SIGINT/SIGTERM into ``TerminationSignal.close()``.

    The Python-level handler only lets the signal through; the byte written
    to the wakeup socket wakes the Qt event loop, and the close happens from
    there, on the main thread, outside signal-handler context.
    """

    def __init__(self, termination: TerminationSignal,
                 signals: Iterable[int] = DEFAULT_SIGNALS, parent=None):
        super().__init__(parent)
        self.termination = termination
        self.signals = tuple(signals)
        self._old_handlers: Dict[int, object] = {}
        self._old_wakeup_fd: Optional[int] = None
        self._rsock: Optional[socket.socket] = None
        self._wsock: Optional[socket.socket] = None
        self._notifier: Optional[QSocketNotifier] = None

    @property
    def active(self) -> bool:
        return self._notifier is not None

    def start(self):
        if self.active:
            return
        self._rsock, self._wsock = socket.socketpair()
        self._rsock.setblocking(False)
        self._wsock.setblocking(False)
        self._old_wakeup_fd = signal.set_wakeup_fd(self._wsock.fileno())
        for sig in self.signals:
            self._old_handlers[sig] = signal.signal(sig, self._on_signal)

        self._notifier = QSocketNotifier(self._rsock.fileno(), QSocketNotifier.Type.Read, self)
        self._notifier.activated.connect(self._on_wakeup)
        log.debug("listening for signals %s", [signal.Signals(s).name for s in self.signals])

    def stop(self):
        if not self.active:
            return
        self._notifier.setEnabled(False)
        self._notifier.deleteLater()
        self._notifier = None

        for sig, handler in self._old_handlers.items():
            signal.signal(sig, handler)
        self._old_handlers.clear()
        signal.set_wakeup_fd(self._old_wakeup_fd if self._old_wakeup_fd is not None else -1)
        self._old_wakeup_fd = None

        self._rsock.close()
        self._wsock.close()
        self._rsock = self._wsock = None

    def _on_signal(self, signum, frame):
        # the wakeup fd carries the signal number to _on_wakeup
        pass

    def _on_wakeup(self, *args):
        try:
            data = self._rsock.recv(64)
        except (BlockingIOError, InterruptedError):
            return
        if not data:
            return
        for signum in data:
            try:
                name = signal.Signals(signum).name
            except ValueError:
                name = str(signum)
            log.info("received %s, shutting down", name)
        self.termination.close()
