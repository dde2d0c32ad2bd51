"""Discard superseded query responses.

Search calls are independent, so cancelling a stale query is just ignoring
its result. A caller issues a sequence number per keystroke-triggered call
and only applies the response whose number is still the latest.

    sequencer = RequestSequencer()
    seq = sequencer.next()
    results = library_search.search(text, records)
    results = sequencer.accept(seq, results)  # None if a newer query started
"""

from __future__ import annotations

import threading
from typing import TypeVar


T = TypeVar("T")


class RequestSequencer:
    """Thread-safe, strictly increasing request numbers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._latest = 0

    @property
    def latest(self) -> int:
        with self._lock:
            return self._latest

    def next(self) -> int:
        """Issue a new sequence number, superseding all earlier ones."""
        with self._lock:
            self._latest += 1
            return self._latest

    def is_current(self, seq: int) -> bool:
        with self._lock:
            return seq == self._latest

    def accept(self, seq: int, result: T) -> T | None:
        """Return ``result`` if ``seq`` is still current, otherwise ``None``."""
        return result if self.is_current(seq) else None
