"""
app/schemas package marker.
"""

from app.schemas.dashboard import LiveDashboardsResponse, SummaryEntry
from app.schemas.hmis import (
    CatalogCategoryResponse,
    CSVIngestionSummaryResponse,
    CSVValidationErrorResponse,
    HMISCatalogResponse,
    HMISSaveResponse,
)
from app.schemas.report import HMISReportResponse, ReportSectionResponse

__all__ = [
    "CatalogCategoryResponse",
    "CSVIngestionSummaryResponse",
    "CSVValidationErrorResponse",
    "HMISCatalogResponse",
    "HMISReportResponse",
    "HMISSaveResponse",
    "LiveDashboardsResponse",
    "ReportSectionResponse",
    "SummaryEntry",
]
