"""Network throughput derived from cumulative byte counters."""
from __future__ import annotations

from typing import Optional, Tuple

MIN_ELAPSED_SECONDS = 0.1
BYTES_PER_MB = 1024 * 1024


class RateTracker:
    """Remembers the previous counters and turns deltas into MB/s.

    Only the collector thread touches a tracker, so it carries no lock.
    """

    def __init__(self) -> None:
        self.previous_rx_bytes = 0
        self.previous_tx_bytes = 0
        self.previous_sample_time: Optional[float] = None

    def reset(self) -> None:
        self.previous_rx_bytes = 0
        self.previous_tx_bytes = 0
        self.previous_sample_time = None

    def compute_rate(self, current_rx: int, current_tx: int, now: float) -> Tuple[float, float]:
        """Return ``(rx_rate, tx_rate)`` in MB/s and remember this sample.

        The first sample always yields zero rates. Counter resets produce
        negative rates, which are returned as is.
        """
        if self.previous_sample_time is None:
            rx_rate = tx_rate = 0.0
        else:
            elapsed = max(now - self.previous_sample_time, MIN_ELAPSED_SECONDS)
            rx_rate = (current_rx - self.previous_rx_bytes) / elapsed / BYTES_PER_MB
            tx_rate = (current_tx - self.previous_tx_bytes) / elapsed / BYTES_PER_MB

        self.previous_rx_bytes = current_rx
        self.previous_tx_bytes = current_tx
        self.previous_sample_time = now
        return rx_rate, tx_rate
