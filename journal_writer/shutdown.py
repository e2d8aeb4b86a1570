"""Turns SIGTERM / SIGHUP into a cooperative stop flag.

The handler only stores a bool and takes no lock. Python runs it on the main
thread between bytecodes, where a single attribute store is atomic.
"""

import signal

from journal_writer.errors import StartupError

STOP_SIGNALS = (signal.SIGTERM, signal.SIGHUP)


class ShutdownFlag:
    def __init__(self):
        self._terminate = False

    def handle_signal(self, signum, _frame=None) -> None:
        if signum in STOP_SIGNALS:
            self._terminate = True

    def request(self) -> None:
        self._terminate = True

    def is_set(self) -> bool:
        return self._terminate


def install_signal_handlers(flag: ShutdownFlag) -> None:
    for sig in STOP_SIGNALS:
        try:
            signal.signal(sig, flag.handle_signal)
        except (OSError, ValueError) as e:
            raise StartupError(f"Failed to install handler for {sig.name}: {e}") from e
