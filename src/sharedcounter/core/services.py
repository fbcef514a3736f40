import threading
from typing import Optional

from .models import Counter


class CounterService:
    """Owns the canonical Counter. Every access goes through one lock."""

    def __init__(self, counter: Optional[Counter] = None):
        self.counter = counter if counter is not None else Counter.new()
        self._lock = threading.Lock()

    def next_value(self) -> Counter:
        """Return the current value, then advance the stored counter by one."""
        with self._lock:
            snapshot = self.counter.copy()
            self.counter.increment()
            return snapshot

    def set_value(self, number: int) -> None:
        with self._lock:
            self.counter.set(number)

    def peek(self) -> Counter:
        with self._lock:
            return self.counter.copy()
