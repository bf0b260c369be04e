from __future__ import annotations

import pytest

from app.domain.reporting import ChartPoint, ReportConfigError, ReportPeriod, SectionTitle
from app.mappers.record_normalizer import RecordNormalizer
from app.services.report_grouper import CrossDomainGrouper


def _row(month, year, category, sub_category, metric, value) -> dict[str, object]:
    return {
        "Month": month,
        "Year": year,
        "Category": category,
        "SubCategory": sub_category,
        "Metric": metric,
        "Value": value,
    }


ROWS = [
    _row("01", "2025", "General", "Expected", "Revenue", "500"),
    _row("01", "2025", "General", "Expected", "Expense", "800"),
    _row("01", "2025", "General", "Actual", "Revenue", "450"),
    _row("02", "2025", "General", "Expected", "Revenue", "600"),
    _row("01", "2025", "Cardiology", "Expected", "Revenue", "300"),
    _row("01", "2025", "Cardiology", "Expected", "Profitability", "-20"),
    _row("01", "2025", "Surgery", "Expected", "Profitability", "-30"),
    _row("01", "2025", "Surgery", "Expected", "Patients", "1200"),
    _row("01", "2025", "Pharmacy", "Expected", "Issued", "1000"),
    _row("01", "2025", "Pharmacy", "Expected", "Expired", "150"),
]


@pytest.fixture()
def records():
    return RecordNormalizer().normalize_all(ROWS)


@pytest.fixture()
def grouper() -> CrossDomainGrouper:
    return CrossDomainGrouper()


def _monthly(month: str = "January", sub_category: str = "Expected") -> ReportPeriod:
    return ReportPeriod.from_options(month=month, year=2025, sub_category=sub_category)


class TestPairedSections:
    def test_revenue_vs_expense_general_only(self, grouper, records) -> None:
        groups = grouper.group(records, _monthly())
        assert groups[SectionTitle.REVENUE_VS_EXPENSE] == (
            ChartPoint("Revenue", 500.0),
            ChartPoint("Expense", 800.0),
        )

    def test_actual_toggle(self, grouper, records) -> None:
        groups = grouper.group(records, _monthly(sub_category="Actual"))
        assert groups[SectionTitle.REVENUE_VS_EXPENSE] == (ChartPoint("Revenue", 450.0),)
        assert groups[SectionTitle.ISSUED_VS_EXPIRED] == ()

    def test_issued_vs_expired(self, grouper, records) -> None:
        groups = grouper.group(records, _monthly())
        assert groups[SectionTitle.ISSUED_VS_EXPIRED] == (
            ChartPoint("Issued", 1000.0),
            ChartPoint("Expired", 150.0),
        )

    def test_every_section_present(self, grouper, records) -> None:
        groups = grouper.group(records, _monthly())
        assert len(groups) == 10
        assert groups[SectionTitle.LAB_VS_RADIOLOGY] == ()


class TestCategoricalSections:
    def test_profitability_by_department(self, grouper, records) -> None:
        groups = grouper.group(records, _monthly())
        assert groups[SectionTitle.PROFITABILITY] == (
            ChartPoint("Cardiology", -20.0),
            ChartPoint("Surgery", -30.0),
        )

    def test_departmental_revenue_excludes_general(self, grouper, records) -> None:
        groups = grouper.group(records, _monthly())
        assert groups[SectionTitle.DEPARTMENTAL_REVENUE] == (ChartPoint("Cardiology", 300.0),)


class TestPeriods:
    def test_other_month_is_filtered_out(self, grouper, records) -> None:
        groups = grouper.group(records, _monthly(month="February"))
        assert groups[SectionTitle.REVENUE_VS_EXPENSE] == (ChartPoint("Revenue", 600.0),)

    def test_overall_unions_periods(self, grouper, records) -> None:
        period = ReportPeriod.from_options(report_type="overall")
        groups = grouper.group(records, period)
        assert groups[SectionTitle.REVENUE_VS_EXPENSE][0] == ChartPoint("Revenue", 1100.0)

    @pytest.mark.parametrize(
        "options",
        [
            {"report_type": "weekly"},
            {"month": "Smarch"},
            {"year": "twenty"},
            {"sub_category": "Forecast"},
        ],
    )
    def test_invalid_options_raise(self, options: dict) -> None:
        with pytest.raises(ReportConfigError):
            ReportPeriod.from_options(**options)

    def test_options_are_case_tolerant(self) -> None:
        period = ReportPeriod.from_options(report_type="MONTHLY", month="mar", sub_category="actual")
        assert (period.month, period.year, period.sub_category) == (3, 2025, "Actual")
        assert period.describe() == "March 2025 (Actual)"
