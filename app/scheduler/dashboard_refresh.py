"""
app/scheduler/dashboard_refresh.py

APScheduler-based periodic refresh of the dashboard snapshot.

Lifecycle
----------
``start()`` registers one interval job that fires immediately and then
every ``interval_seconds``. ``stop()`` shuts the scheduler down and may be
called any number of times. The refresher is wired into FastAPI via the
``lifespan`` context in main.py and into the standalone
``scripts/run_dashboard_refresh.py`` loop.

Failure policy
--------------
A failed fetch is logged at WARNING and the previous snapshot is kept.
Concurrent refreshes are not coordinated: whichever finishes last wins.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

from apscheduler.schedulers.background import BackgroundScheduler

from app.domain.hmis_record import RawRow
from app.services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)

JOB_ID = "dashboard_refresh"


@dataclass(frozen=True)
class DashboardSnapshot:
    """
    One successful refresh: every domain's ordered summary.
    """

    dashboards: dict[str, list[dict[str, Any]]]
    refreshed_at: datetime
    row_count: int


def build_scheduler() -> BackgroundScheduler:
    """
    Return a configured but *not yet started* ``BackgroundScheduler``.
    """

    return BackgroundScheduler(timezone="UTC")


class DashboardRefresher:
    """
    Keeps the latest dashboard snapshot current on a fixed interval.
    """

    def __init__(
        self,
        fetch_rows: Callable[[], Iterable[RawRow]],
        dashboard_service: DashboardService,
        interval_seconds: int = 30,
        *,
        scheduler: BackgroundScheduler | None = None,
        on_refresh: Callable[[DashboardSnapshot], None] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._fetch_rows = fetch_rows
        self._dashboard_service = dashboard_service
        self._interval_seconds = max(1, int(interval_seconds))
        self._scheduler = scheduler or build_scheduler()
        self._on_refresh = on_refresh
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))
        self._snapshot: DashboardSnapshot | None = None
        self._lock = threading.Lock()

    @property
    def interval_seconds(self) -> int:
        return self._interval_seconds

    @property
    def snapshot(self) -> DashboardSnapshot | None:
        return self._snapshot

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def refresh_once(self) -> DashboardSnapshot | None:
        """
        Fetch, recompute and publish one snapshot.

        Returns the snapshot now in effect; on fetch failure that is the
        previous one (possibly ``None``).
        """

        try:
            rows = list(self._fetch_rows())
        except Exception as exc:  # noqa: BLE001
            logger.warning("Dashboard refresh fetch failed; keeping previous snapshot: %s", exc)
            return self._snapshot

        snapshot = DashboardSnapshot(
            dashboards=self._dashboard_service.compute(rows),
            refreshed_at=self._clock(),
            row_count=len(rows),
        )
        with self._lock:
            self._snapshot = snapshot
        logger.info("Dashboard snapshot refreshed rows=%d", snapshot.row_count)

        if self._on_refresh is not None:
            self._on_refresh(snapshot)
        return snapshot

    def start(self) -> None:
        if self._scheduler.running:
            return
        self._scheduler.add_job(
            self.refresh_once,
            trigger="interval",
            seconds=self._interval_seconds,
            id=JOB_ID,
            name="Dashboard snapshot refresh",
            next_run_time=datetime.now(tz=timezone.utc),
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self._scheduler.start()
        logger.info("Dashboard refresher started interval_seconds=%d", self._interval_seconds)

    def stop(self, wait: bool = True) -> None:
        if not self._scheduler.running:
            return
        self._scheduler.shutdown(wait=wait)
        logger.info("Dashboard refresher stopped")
