"""
app/schemas/report.py

Response schemas for the report endpoint.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.domain.months import month_by_number
from app.domain.reporting import HMISReport, ReportPeriod


class ChartPointResponse(BaseModel):
    label: str
    value: float


class ReportSectionResponse(BaseModel):
    title: str
    chart_group: list[ChartPointResponse] = Field(default_factory=list)
    observations: list[str] = Field(default_factory=list)
    actions: list[str] = Field(default_factory=list)


class ReportPeriodResponse(BaseModel):
    report_type: str
    sub_category: str
    month: str | None = None
    year: int | None = None
    label: str

    @classmethod
    def from_domain(cls, period: ReportPeriod) -> "ReportPeriodResponse":
        info = month_by_number(period.month) if period.month is not None else None
        return cls(
            report_type=period.mode,
            sub_category=period.sub_category,
            month=info.name if info else None,
            year=period.year,
            label=period.describe(),
        )


class HMISReportResponse(BaseModel):
    """
    API response model for one generated report.
    """

    period: ReportPeriodResponse
    generated_at: datetime
    sections: list[ReportSectionResponse]
    summary: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, report: HMISReport) -> "HMISReportResponse":
        return cls(
            period=ReportPeriodResponse.from_domain(report.period),
            generated_at=report.generated_at,
            sections=[
                ReportSectionResponse(
                    title=section.title,
                    chart_group=[
                        ChartPointResponse(label=point.label, value=point.value)
                        for point in section.chart_group
                    ],
                    observations=list(section.observations),
                    actions=list(section.actions),
                )
                for section in report.sections
            ],
            summary=list(report.summary),
        )
