"""Cooperative cancellation signal polled by the extractor."""

from __future__ import annotations

import threading


class CancellationToken:
    """Externally settable flag; extraction polls it, nothing is interrupted."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._timer: threading.Timer | None = None
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def cancel_after(self, seconds: float) -> None:
        """Arm a daemon timer that cancels the token after `seconds`."""

        if seconds <= 0:
            raise ValueError("Cancellation delay must be > 0")

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(seconds, self.cancel)
            timer.daemon = True
            self._timer = timer
            timer.start()

    def close(self) -> None:
        """Disarm a pending timer without cancelling the token."""

        with self._lock:
            timer = self._timer
            self._timer = None
        if timer is not None:
            timer.cancel()

    def __enter__(self) -> "CancellationToken":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
