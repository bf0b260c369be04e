"""
Run the periodic dashboard refresher from CLI against a remote summary URL.
"""

from __future__ import annotations

import argparse
import json
import logging
import time

from app.config import get_dashboard_refresh_settings, get_external_http_settings
from app.connectors.summary_connector import HMISSummaryConnector
from app.scheduler.dashboard_refresh import DashboardRefresher, DashboardSnapshot
from app.services.dashboard_service import DashboardService

logger = logging.getLogger("run_dashboard_refresh")


def _log_snapshot(snapshot: DashboardSnapshot) -> None:
    counts = {name: len(entries) for name, entries in snapshot.dashboards.items()}
    logger.info(
        "Snapshot refreshed_at=%s rows=%d months_per_domain=%s",
        snapshot.refreshed_at.isoformat(),
        snapshot.row_count,
        json.dumps(counts, sort_keys=True),
    )


def main() -> int:
    settings = get_dashboard_refresh_settings()
    parser = argparse.ArgumentParser(description="Periodically refresh HMIS dashboards.")
    parser.add_argument(
        "--url",
        dest="url",
        default=settings.summary_url,
        help="Summary endpoint, e.g. http://localhost:5000/api/hmis/summary. "
        "Defaults to HMIS_SUMMARY_URL.",
    )
    parser.add_argument(
        "--interval",
        dest="interval",
        type=int,
        default=settings.interval_seconds,
        help="Refresh interval in seconds. Defaults to DASHBOARD_REFRESH_SECONDS.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Refresh once, print the dashboards as JSON and exit.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if not args.url:
        parser.error("--url is required when HMIS_SUMMARY_URL is not set.")

    connector = HMISSummaryConnector(url=args.url, http_settings=get_external_http_settings())
    service = DashboardService(fetch_rows=connector.fetch_rows)
    refresher = DashboardRefresher(
        connector.fetch_rows,
        service,
        args.interval,
        on_refresh=_log_snapshot,
    )

    if args.once:
        snapshot = refresher.refresh_once()
        connector.close()
        if snapshot is None:
            return 1
        print(json.dumps(snapshot.dashboards, indent=2))
        return 0

    refresher.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Interrupted; stopping refresher")
    finally:
        refresher.stop()
        connector.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
