"""
app/domain package marker.
"""

from app.domain.hmis_record import (
    DomainSummaryEntry,
    HMISRecordInput,
    IngestionSummary,
    NormalizedRecord,
    RowValidationError,
)
from app.domain.reporting import HMISReport, ReportPeriod, ReportSection, SectionInsight

__all__ = [
    "DomainSummaryEntry",
    "HMISRecordInput",
    "HMISReport",
    "IngestionSummary",
    "NormalizedRecord",
    "ReportPeriod",
    "ReportSection",
    "RowValidationError",
    "SectionInsight",
]
