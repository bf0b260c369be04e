"""
app/services package marker.
"""

from app.services.aggregation_service import DomainAggregator
from app.services.dashboard_service import DashboardService, UnknownDomainError
from app.services.hmis_store_service import CSVHeaderValidationError, HMISStoreService
from app.services.report_grouper import CrossDomainGrouper
from app.services.report_service import ReportService

__all__ = [
    "CrossDomainGrouper",
    "CSVHeaderValidationError",
    "DashboardService",
    "DomainAggregator",
    "HMISStoreService",
    "ReportService",
    "UnknownDomainError",
]
