"""
app/api/routers/report_router.py

Periodic report endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies import get_report_service
from app.domain.reporting import ReportConfigError, ReportType, SubCategory
from app.repositories.hmis_csv_repository import HMISStoreError
from app.schemas.report import HMISReportResponse
from app.services.report_service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("", response_model=HMISReportResponse)
def generate_report(
    report_type: str = Query(default=ReportType.MONTHLY, alias="reportType"),
    month: str = Query(default="January"),
    year: str = Query(default="2025"),
    sub_category: str = Query(default=SubCategory.EXPECTED, alias="subCategory"),
    report_service: ReportService = Depends(get_report_service),
) -> HMISReportResponse:
    """
    Build the ten-section report for one period and Expected/Actual toggle.
    """

    try:
        report = report_service.generate(
            report_type=report_type,
            month=month,
            year=year,
            sub_category=sub_category,
        )
    except ReportConfigError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except HMISStoreError as exc:
        logger.error("Report generation failed reading store: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read summary",
        ) from exc

    return HMISReportResponse.from_domain(report)
