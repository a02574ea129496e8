"""Cooperative cancellation shared by the scanner and the executor."""

import threading

from .errors import OperationCancelled


class CancellationToken:
    """A flag that long-running stages check between units of work.

    Setting the flag never interrupts work already in flight.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled("Operation cancelled")
