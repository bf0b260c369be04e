"""
app/domain/reporting.py

Domain models for the periodic hospital report.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Final

from app.domain.months import MONTH_NAMES, month_by_number, month_number_from_name


class SectionTitle:
    REVENUE_VS_EXPENSE = "Revenue vs Expense"
    LAB_VS_RADIOLOGY = "Lab vs Radiology"
    ADMISSIONS_VS_DISCHARGES = "Admissions vs Discharges"
    ISSUED_VS_EXPIRED = "Issued vs Expired"
    JOINEE_VS_RESIGNATION = "Joinee vs Resignation"
    REPAIR_VS_PURCHASE = "Repair vs Purchase"
    IPD_VS_OPD = "IPD vs OPD"
    DEPARTMENTAL_REVENUE = "Departmental Revenue"
    PROFITABILITY = "Profitability"
    PATIENT_VOLUME = "Patient Volume"


class ReportType:
    MONTHLY = "monthly"
    OVERALL = "overall"


class SubCategory:
    EXPECTED = "Expected"
    ACTUAL = "Actual"


class ReportConfigError(ValueError):
    """
    Raised when a reporting period configuration is invalid.
    """


@dataclass(frozen=True)
class SectionSpec:
    """
    How one report section selects and groups records.

    Paired sections group by metric stem and carry ``metrics`` as
    ``(stem, display label)`` pairs. Categorical sections group by category
    for records whose stem equals ``target_metric``.
    """

    title: str
    metrics: tuple[tuple[str, str], ...] = ()
    target_metric: str | None = None
    general_only: bool = False

    @property
    def is_categorical(self) -> bool:
        return self.target_metric is not None


SECTION_SPECS: Final[tuple[SectionSpec, ...]] = (
    SectionSpec(
        SectionTitle.REVENUE_VS_EXPENSE,
        metrics=(("revenue", "Revenue"), ("expense", "Expense")),
        general_only=True,
    ),
    SectionSpec(
        SectionTitle.LAB_VS_RADIOLOGY,
        metrics=(("lab tests", "Lab Tests"), ("radiology tests", "Radiology Tests")),
    ),
    SectionSpec(
        SectionTitle.ADMISSIONS_VS_DISCHARGES,
        metrics=(("admissions", "Admissions"), ("discharges", "Discharges")),
    ),
    SectionSpec(
        SectionTitle.ISSUED_VS_EXPIRED,
        metrics=(("issued", "Issued"), ("expired", "Expired")),
    ),
    SectionSpec(
        SectionTitle.JOINEE_VS_RESIGNATION,
        metrics=(("joinees", "Joinees"), ("resignations", "Resignations")),
    ),
    SectionSpec(
        SectionTitle.REPAIR_VS_PURCHASE,
        metrics=(("repair cost", "Repair Cost"), ("purchase cost", "Purchase Cost")),
    ),
    SectionSpec(
        SectionTitle.IPD_VS_OPD,
        metrics=(("ipd score", "IPD Score"), ("opd score", "OPD Score")),
    ),
    SectionSpec(SectionTitle.DEPARTMENTAL_REVENUE, target_metric="revenue"),
    SectionSpec(SectionTitle.PROFITABILITY, target_metric="profitability"),
    SectionSpec(SectionTitle.PATIENT_VOLUME, target_metric="patients"),
)

SECTION_TITLES: Final[tuple[str, ...]] = tuple(spec.title for spec in SECTION_SPECS)


@dataclass(frozen=True)
class ReportPeriod:
    """
    Reporting period plus the Expected/Actual toggle.

    ``month`` and ``year`` are ``None`` in overall mode.
    """

    mode: str
    sub_category: str
    month: int | None = None
    year: int | None = None

    @classmethod
    def from_options(
        cls,
        *,
        report_type: str = ReportType.MONTHLY,
        month: str = "January",
        year: int | str = 2025,
        sub_category: str = SubCategory.EXPECTED,
    ) -> "ReportPeriod":
        """
        Build a period from the selector options, validating each one.
        """

        mode = (report_type or "").strip().lower()
        if mode not in {ReportType.MONTHLY, ReportType.OVERALL}:
            raise ReportConfigError(
                f"Unsupported reportType '{report_type}'. Allowed values: monthly, overall."
            )

        toggle = (sub_category or "").strip().capitalize()
        if toggle not in {SubCategory.EXPECTED, SubCategory.ACTUAL}:
            raise ReportConfigError(
                f"Unsupported subCategory '{sub_category}'. Allowed values: Expected, Actual."
            )

        if mode == ReportType.OVERALL:
            return cls(mode=mode, sub_category=toggle)

        month_number = month_number_from_name(month or "")
        if month_number is None:
            raise ReportConfigError(
                f"Unsupported month '{month}'. Allowed values: {', '.join(MONTH_NAMES)}."
            )
        try:
            year_number = int(str(year).strip())
        except ValueError as exc:
            raise ReportConfigError(f"Invalid year '{year}': expected an integer.") from exc

        return cls(mode=mode, sub_category=toggle, month=month_number, year=year_number)

    @property
    def wants_expected(self) -> bool:
        return self.sub_category == SubCategory.EXPECTED

    def describe(self) -> str:
        if self.mode == ReportType.OVERALL or self.month is None:
            return f"Overall ({self.sub_category})"
        info = month_by_number(self.month)
        return f"{info.name if info else self.month} {self.year} ({self.sub_category})"


@dataclass(frozen=True)
class ChartPoint:
    label: str
    value: float


ChartGroup = tuple[ChartPoint, ...]


@dataclass(frozen=True)
class SectionInsight:
    """
    Narrative output for one report section.
    """

    observations: list[str] = field(default_factory=list)
    actions: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ReportSection:
    title: str
    chart_group: ChartGroup
    observations: list[str]
    actions: list[str]


@dataclass(frozen=True)
class HMISReport:
    """
    Fully assembled report, ready for rendering or export.
    """

    period: ReportPeriod
    sections: list[ReportSection]
    summary: list[str]
    generated_at: datetime
