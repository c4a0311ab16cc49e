"""Bounded, thread-safe FIFO of raw buffers received from a device."""

from __future__ import annotations

import threading
from collections import deque
from typing import Deque

MAX_MSG = 24


class EventQueue:
    """First-in first-out queue of buffers with a fixed capacity."""

    def __init__(self, capacity: int = MAX_MSG) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._items: Deque[bytes] = deque()
        self._lock = threading.Lock()

    def push_back(self, buffer: bytes) -> bool:
        """Append a copy of the buffer; when the queue is full it is dropped and False returned."""
        data = bytes(buffer)
        with self._lock:
            if len(self._items) >= self.capacity:
                return False
            self._items.append(data)
            return True

    def pop_front(self) -> bytes:
        """Remove and return the oldest buffer; raise IndexError if the queue is empty."""
        with self._lock:
            if not self._items:
                raise IndexError("pop from an empty event queue")
            return self._items.popleft()

    def front(self) -> bytes:
        """Return the oldest buffer without removing it; raise IndexError if empty."""
        with self._lock:
            if not self._items:
                raise IndexError("front of an empty event queue")
            return self._items[0]

    def is_empty(self) -> bool:
        with self._lock:
            return not self._items

    def is_full(self) -> bool:
        with self._lock:
            return len(self._items) >= self.capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def clear(self) -> None:
        """Drop every queued buffer."""
        with self._lock:
            self._items.clear()