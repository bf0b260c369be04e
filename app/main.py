from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable, Iterable
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import AppSettings, collect_settings_problems, get_app_settings
from app.connectors.summary_connector import HMISSummaryConnector
from app.domain.hmis_record import RawRow
from app.repositories.hmis_csv_repository import HMISCSVRepository
from app.scheduler.dashboard_refresh import DashboardRefresher
from app.services.dashboard_service import DashboardService
from app.services.hmis_store_service import HMISStoreService
from app.services.report_service import ReportService

logger = logging.getLogger(__name__)


def _validate_settings(settings: AppSettings) -> None:
    """
    Validate configuration at startup.

    Raises RuntimeError listing every invalid setting so the operator can
    fix all problems in one restart cycle.
    """

    errors = collect_settings_problems(settings)
    if errors:
        raise RuntimeError(
            "Startup validation failed — invalid configuration:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging(level: str) -> None:
    """
    Configure root logging once for the API process.
    """

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _refresh_source(settings: AppSettings, repository: HMISCSVRepository) -> Callable[[], Iterable[RawRow]]:
    """
    Rows for the periodic refresher: remote summary when configured, local store otherwise.
    """

    if settings.refresh.summary_url:
        connector = HMISSummaryConnector(url=settings.refresh.summary_url, http_settings=settings.http)
        return connector.fetch_rows
    return repository.read_rows


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Create the CSV store if missing and run the dashboard refresher while serving."""
    settings: AppSettings = application.state.settings
    store_service: HMISStoreService = application.state.store_service

    store_service.repository.ensure_exists()
    logger.info("CSV store ready at %s", store_service.repository.path)

    refresher: DashboardRefresher | None = None
    if settings.refresh.enabled:
        refresher = DashboardRefresher(
            _refresh_source(settings, store_service.repository),
            application.state.dashboard_service,
            settings.refresh.interval_seconds,
        )
        refresher.start()
    application.state.refresher = refresher
    try:
        yield
    finally:
        if refresher is not None:
            refresher.stop()


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    settings = settings or get_app_settings()
    _validate_settings(settings)
    _configure_logging(settings.log_level)

    application = FastAPI(
        title="HMIS Reporting API",
        version="1.0.0",
        lifespan=_lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    repository = HMISCSVRepository(settings.store.csv_path)
    application.state.settings = settings
    application.state.store_service = HMISStoreService(
        repository=repository,
        settings=settings.ingestion,
    )
    application.state.dashboard_service = DashboardService(fetch_rows=repository.read_rows)
    application.state.report_service = ReportService(fetch_rows=repository.read_rows)
    application.state.refresher = None

    from app.api.routers import dashboard_router, hmis_router, report_router

    application.include_router(hmis_router)
    application.include_router(dashboard_router)
    application.include_router(report_router)

    @application.get("/health")
    def healthcheck() -> dict[str, object]:
        refresher: DashboardRefresher | None = application.state.refresher
        snapshot = refresher.snapshot if refresher is not None else None
        return {
            "status": "ok",
            "store_exists": repository.exists(),
            "refresher_running": bool(refresher and refresher.running),
            "last_refresh": snapshot.refreshed_at.isoformat() if snapshot else None,
        }

    return application


app = create_app()
