"""Command-line poller that watches a running stats service."""
from __future__ import annotations

import argparse
import json
import logging
import os
import time
from typing import Any, Dict, List, Optional

import requests

from .config import get_settings


def fetch_stats(url: str) -> Dict[str, Any]:
    response = requests.get(url, timeout=10)
    response.raise_for_status()
    return response.json()


def summarize(stats: Dict[str, Any]) -> str:
    return (
        "cpu={cpu:.1f}% ram={ram:.1f}% disk={disk:.1f}% temp={temp:.1f}C "
        "rx={rx:.2f}MB/s tx={tx:.2f}MB/s updated={updated}"
    ).format(
        cpu=float(stats.get("cpu_usage_percent", 0.0)),
        ram=float(stats.get("ram_usage_percent", 0.0)),
        disk=float(stats.get("disk_usage_percent", 0.0)),
        temp=float(stats.get("cpu_temp_celsius", 0.0)),
        rx=float(stats.get("net_rx_speed", 0.0)),
        tx=float(stats.get("net_tx_speed", 0.0)),
        updated=stats.get("last_updated") or "never",
    )


def poll_once(url: str) -> Optional[Dict[str, Any]]:
    """Fetch one snapshot and log its summary; ``None`` when the fetch failed."""
    try:
        stats = fetch_stats(url)
    except (requests.RequestException, ValueError) as exc:
        logging.error("Failed to fetch stats from %s: %s", url, exc)
        return None
    logging.info("%s", summarize(stats))
    return stats


def run_watcher(url: str, interval: float) -> None:
    logging.info("Watching %s every %.1fs", url, interval)
    while True:
        start_time = time.time()
        if poll_once(url) is None:
            logging.warning("Fetch failed; will retry on next interval")
        elapsed = time.time() - start_time
        time.sleep(max(0.0, interval - elapsed))


def main(argv: Optional[List[str]] = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Poll a running pistats service.")
    parser.add_argument("--url", default=settings.watch_url, help="stats endpoint to poll")
    parser.add_argument("--interval", type=float, default=settings.watch_interval, help="seconds between polls")
    parser.add_argument("--once", action="store_true", help="print one payload as JSON and exit")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=os.getenv("PISTATS_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(message)s",
    )

    if args.once:
        stats = poll_once(args.url)
        if stats is None:
            return 1
        print(json.dumps(stats, indent=2, sort_keys=True))
        return 0

    run_watcher(args.url, args.interval)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
