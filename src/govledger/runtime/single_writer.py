from __future__ import annotations

import threading
from types import TracebackType
from typing import Optional, Type


class SingleWriterLock:
    """
    Serializes access to one in-memory ledger.
    Re-entrant, so a holder may call back into the ledger while batching.
    """

    def __init__(self, name: str = "ledger"):
        self.name = name
        self._lock = threading.RLock()

    def acquire(self) -> None:
        self._lock.acquire()

    def release(self) -> None:
        self._lock.release()

    def __enter__(self) -> "SingleWriterLock":
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.release()
