"""Read access to the latest snapshot and the objects that produce it."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .assembler import SnapshotAssembler
from .config import Settings, get_settings
from .models import Snapshot
from .probes import HostProbes
from .rates import RateTracker
from .scheduler import StatsScheduler
from .store import SnapshotStore

logger = logging.getLogger(__name__)


class SnapshotQuery:
    """Side-effect-free reads of the current snapshot."""

    def __init__(self, store: SnapshotStore) -> None:
        self._store = store

    def get_latest(self) -> Snapshot:
        return self._store.read()

    def get_latest_payload(self) -> Dict[str, Any]:
        return self.get_latest().to_dict()


class StatsRuntime:
    """Owns the store, rate tracker, assembler and scheduler for one process."""

    def __init__(self, settings: Optional[Settings] = None, probes: Any = None) -> None:
        self.settings = settings or get_settings()
        self.store = SnapshotStore()
        self.tracker = RateTracker()
        self.probes = probes if probes is not None else HostProbes.from_settings(self.settings)
        self.assembler = SnapshotAssembler(self.probes, self.tracker, self.store)
        self.scheduler = StatsScheduler(self.assembler, interval=self.settings.interval)
        self.query = SnapshotQuery(self.store)

    def start(self) -> None:
        logger.info("Starting stats collection every %.1fs", self.settings.interval)
        self.scheduler.start()

    def stop(self) -> None:
        self.scheduler.stop()
