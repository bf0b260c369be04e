"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation and service lookup.

Services are built once per application in ``create_app`` and kept on
``app.state``; routers resolve them through these functions so tests can
swap them with ``dependency_overrides``.
"""

from __future__ import annotations

from fastapi import File, HTTPException, Request, UploadFile, status

from app.scheduler.dashboard_refresh import DashboardRefresher
from app.services.dashboard_service import DashboardService
from app.services.hmis_store_service import HMISStoreService
from app.services.report_service import ReportService

CSV_CONTENT_TYPES = {
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
}


def get_csv_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is a CSV by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    is_csv_filename = filename.endswith(".csv")
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    if not is_csv_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed.",
        )

    return file


def get_store_service(request: Request) -> HMISStoreService:
    return request.app.state.store_service


def get_dashboard_service(request: Request) -> DashboardService:
    return request.app.state.dashboard_service


def get_report_service(request: Request) -> ReportService:
    return request.app.state.report_service


def get_refresher(request: Request) -> DashboardRefresher | None:
    return getattr(request.app.state, "refresher", None)
