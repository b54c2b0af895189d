"""Single-slot holder for the latest snapshot."""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from .models import Snapshot


class ReadWriteLock:
    """Many concurrent readers or one writer; waiting writers go first."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writing = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writing or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writing or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writing = True
        try:
            yield
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()


class SnapshotStore:
    """Holds exactly one current :class:`Snapshot`.

    Until the first write, readers get the zero-valued snapshot.
    """

    def __init__(self, initial: Optional[Snapshot] = None) -> None:
        self._lock = ReadWriteLock()
        self._snapshot = initial if initial is not None else Snapshot.empty()

    def read(self) -> Snapshot:
        with self._lock.read_locked():
            return self._snapshot

    def write(self, snapshot: Snapshot) -> None:
        with self._lock.write_locked():
            self._snapshot = snapshot
