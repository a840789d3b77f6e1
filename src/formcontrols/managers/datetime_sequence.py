"""Sequence counter for datetime controls.

Every datetime control claims one slot in a shared client-side options array.
The slot number comes from a DatetimeSequence: pass a fresh one per request
to keep rendering request-local, or rely on the process-wide default.
"""

import logging
import threading

logger = logging.getLogger(__name__)


class DatetimeSequence:
    """Thread-safe, monotonically increasing 0-based index source."""

    def __init__(self, start: int = 0):
        self._next = int(start)
        self._lock = threading.Lock()

    def next_index(self) -> int:
        """Return the next unused index and advance the counter."""
        with self._lock:
            index = self._next
            self._next += 1
        logger.debug(f"Assigned datetime sequence index {index}")
        return index

    def peek(self) -> int:
        """Return the index the next call to next_index() would hand out."""
        with self._lock:
            return self._next

    def reset(self) -> None:
        with self._lock:
            self._next = 0
        logger.debug("Reset datetime sequence")


# Global default sequence instance
_default_sequence: DatetimeSequence | None = None
_default_lock = threading.Lock()


def get_default_sequence() -> DatetimeSequence:
    """Get or create the process-wide default sequence.

    Returns:
        The global DatetimeSequence instance.
    """
    global _default_sequence
    with _default_lock:
        if _default_sequence is None:
            _default_sequence = DatetimeSequence()
        return _default_sequence
