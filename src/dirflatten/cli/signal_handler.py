"""Interrupt bookkeeping for the dirflatten CLI.

SIGPIPE and SIGINT are recorded rather than acted on immediately, so that the writer
can stop at a section boundary and the CLI can exit with the conventional status code.
"""

import atexit
import os
import signal
import sys
from threading import Event
from types import FrameType
from typing import Callable, Optional, Union

SIGPIPE_EXIT_CODE = 141
SIGINT_EXIT_CODE = 130

_Handler = Union[Callable[[int, Optional[FrameType]], object], int, None]


class SignalHandler:
    """Remembers which interrupting signals arrived during a run.

    Each signal is recorded on first delivery and the disposition that was in place
    before :func:`setup_signal_handling` is reinstalled, so a second Ctrl+C ends the
    process the usual way.

    Attributes:
        sigpipe_received: Event set once SIGPIPE has been delivered.
        sigint_received: Event set once SIGINT has been delivered.
        original_sigpipe_handler: SIGPIPE disposition found at construction.
        original_sigint_handler: SIGINT disposition found at construction.

    Example:
        >>> handler = SignalHandler()
        >>> handler.interrupted, handler.exit_code()
        (False, None)
    """

    def __init__(self) -> None:
        self.sigpipe_received = Event()
        self.sigint_received = Event()
        self.original_sigpipe_handler = signal.getsignal(signal.SIGPIPE)
        self.original_sigint_handler = signal.getsignal(signal.SIGINT)

    def handle_sigpipe(self, signum: int, frame: Optional[FrameType]) -> None:
        self._record(self.sigpipe_received, signal.SIGPIPE, self.original_sigpipe_handler)

    def handle_sigint(self, signum: int, frame: Optional[FrameType]) -> None:
        self._record(self.sigint_received, signal.SIGINT, self.original_sigint_handler)

    @staticmethod
    def _record(event: Event, signum: int, previous: _Handler) -> None:
        event.set()
        signal.signal(signum, previous)

    @property
    def interrupted(self) -> bool:
        """True once either signal has been received."""
        return self.sigpipe_received.is_set() or self.sigint_received.is_set()

    def exit_code(self) -> Optional[int]:
        """Exit status owed to a received signal, or None if the run was not interrupted.

        A broken pipe takes precedence over an interrupt.
        """
        if self.sigpipe_received.is_set():
            return SIGPIPE_EXIT_CODE
        if self.sigint_received.is_set():
            return SIGINT_EXIT_CODE
        return None


signal_handler = SignalHandler()


def setup_signal_handling() -> None:
    """Route SIGPIPE and SIGINT to the module's :data:`signal_handler`."""
    signal.signal(signal.SIGPIPE, signal_handler.handle_sigpipe)
    signal.signal(signal.SIGINT, signal_handler.handle_sigint)


def cleanup() -> None:
    """Point stdout at the null device after an interruption.

    The interpreter flushes stdout during shutdown; after a broken pipe that flush would
    fail a second time and print a spurious error.
    """
    if signal_handler.interrupted:
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())


atexit.register(cleanup)
