"""
app/api/routers/dashboard_router.py

Per-domain dashboard endpoints.

``/departments`` and ``/live`` are declared before ``/{domain}`` so they
are not captured as domain names.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_dashboard_service, get_refresher
from app.repositories.hmis_csv_repository import HMISStoreError
from app.scheduler.dashboard_refresh import DashboardRefresher
from app.schemas.dashboard import LiveDashboardsResponse, SummaryEntry
from app.services.dashboard_service import DashboardService, UnknownDomainError

router = APIRouter(prefix="/api/dashboards", tags=["dashboards"])


def _store_failure(exc: HMISStoreError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Failed to read summary",
    )


@router.get("", response_model=dict[str, list[SummaryEntry]])
def list_dashboards(
    dashboard_service: DashboardService = Depends(get_dashboard_service),
) -> dict[str, list[SummaryEntry]]:
    try:
        return dashboard_service.all_domains()
    except HMISStoreError as exc:
        raise _store_failure(exc) from exc


@router.get("/departments", response_model=list[SummaryEntry])
def department_breakdown(
    dashboard_service: DashboardService = Depends(get_dashboard_service),
) -> list[SummaryEntry]:
    """
    All-time actual/expected revenue, patients and profitability per department.
    """

    try:
        return dashboard_service.departments()
    except HMISStoreError as exc:
        raise _store_failure(exc) from exc


@router.get("/live", response_model=LiveDashboardsResponse)
def live_dashboards(
    refresher: DashboardRefresher | None = Depends(get_refresher),
) -> LiveDashboardsResponse:
    snapshot = refresher.snapshot if refresher is not None else None
    if snapshot is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Dashboard snapshot not available yet.",
        )
    return LiveDashboardsResponse(
        refreshed_at=snapshot.refreshed_at,
        row_count=snapshot.row_count,
        dashboards=snapshot.dashboards,
    )


@router.get("/{domain}", response_model=list[SummaryEntry])
def domain_dashboard(
    domain: str,
    dashboard_service: DashboardService = Depends(get_dashboard_service),
) -> list[SummaryEntry]:
    try:
        return dashboard_service.domain(domain)
    except UnknownDomainError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except HMISStoreError as exc:
        raise _store_failure(exc) from exc
