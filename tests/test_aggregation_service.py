"""
tests/test_aggregation_service.py

Pytest unit tests for DomainAggregator.

Coverage
--------
- Finance scenario: actual and expected revenue for one month
- Category filter tolerance (case, whitespace, carriage return)
- Additive accumulation and order independence
- Unmatched metric stems ignored
- Departmental allow-list and zero-filled breakdown
"""

from __future__ import annotations

import random

import pytest

from app.domain.dashboards import DEPARTMENTAL, DEPARTMENTS, FINANCE, PHARMACY
from app.mappers.record_normalizer import RecordNormalizer
from app.services.aggregation_service import DomainAggregator


@pytest.fixture()
def aggregator() -> DomainAggregator:
    return DomainAggregator()


def _records(rows: list[dict[str, object]]):
    return RecordNormalizer().normalize_all(rows)


def _row(month, year, category, sub_category, metric, value) -> dict[str, object]:
    return {
        "month": month,
        "year": year,
        "category": category,
        "subCategory": sub_category,
        "metric": metric,
        "value": value,
    }


class TestFinance:
    def test_actual_and_expected_revenue(self, aggregator: DomainAggregator) -> None:
        records = _records(
            [
                _row(1, 2025, "General", "Actual", "Revenue", "100"),
                _row(1, 2025, "General", "Expected", "Revenue", "150"),
            ]
        )
        summary = aggregator.aggregate(records, FINANCE)

        assert list(summary) == ["Jan-25"]
        entry = summary["Jan-25"]
        assert entry.fields["Revenue"] == 100.0
        assert entry.fields["ExpectedRevenue"] == 150.0
        assert entry.fields["Expenses"] == 0.0
        assert entry.fields["ExpectedExpense"] == 0.0

    def test_to_dict_shape(self, aggregator: DomainAggregator) -> None:
        records = _records([_row(2, 2025, "General", "Actual", "Expense", "40")])
        [entry] = aggregator.summarize(records, FINANCE)
        assert entry.to_dict() == {
            "month": "Feb-25",
            "Expenses": 40.0,
            "Revenue": 0.0,
            "ExpectedExpense": 0.0,
            "ExpectedRevenue": 0.0,
        }

    def test_repeated_rows_accumulate(self, aggregator: DomainAggregator) -> None:
        records = _records(
            [_row(3, 2025, "General", "Actual", "Revenue", value) for value in ("10", "20", "-5")]
        )
        assert aggregator.aggregate(records, FINANCE)["Mar-25"].fields["Revenue"] == 25.0

    def test_metric_prefix_routes_to_expected_bucket(self, aggregator: DomainAggregator) -> None:
        records = _records([_row(1, 2025, "General", "", "Expected Expense", "70")])
        assert aggregator.aggregate(records, FINANCE)["Jan-25"].fields["ExpectedExpense"] == 70.0


class TestFiltering:
    def test_polluted_category_matches_domain(self, aggregator: DomainAggregator) -> None:
        records = _records([_row(4, 2025, "  PHARMACY\r", "Actual", "Issued", "12")])
        assert aggregator.aggregate(records, PHARMACY)["Apr-25"].fields["Issued"] == 12.0

    def test_other_categories_are_excluded(self, aggregator: DomainAggregator) -> None:
        records = _records([_row(4, 2025, "Maintenance", "Actual", "Issued", "12")])
        assert aggregator.aggregate(records, PHARMACY) == {}

    def test_unmatched_stem_creates_zeroed_entry(self, aggregator: DomainAggregator) -> None:
        records = _records([_row(5, 2025, "Pharmacy", "Actual", "Returned", "9")])
        summary = aggregator.aggregate(records, PHARMACY)
        assert set(summary["May-25"].fields.values()) == {0.0}


class TestIdempotence:
    def test_order_independent(self, aggregator: DomainAggregator) -> None:
        rows = [
            _row(month, 2024 + (month % 2), "General", sub, metric, str(month * 10))
            for month in range(1, 13)
            for sub in ("Actual", "Expected")
            for metric in ("Revenue", "Expense")
        ]
        shuffled = list(rows)
        random.Random(7).shuffle(shuffled)

        first = aggregator.aggregate(_records(rows), FINANCE)
        second = aggregator.aggregate(_records(shuffled), FINANCE)
        assert {k: v.fields for k, v in first.items()} == {k: v.fields for k, v in second.items()}

    def test_summaries_are_chronological(self, aggregator: DomainAggregator) -> None:
        records = _records(
            [
                _row(1, 2025, "General", "Actual", "Revenue", "1"),
                _row(12, 2024, "General", "Actual", "Revenue", "1"),
            ]
        )
        assert [entry.label for entry in aggregator.summarize(records, FINANCE)] == ["Dec-24", "Jan-25"]


class TestDepartments:
    def test_allow_list_drops_unknown_departments(self, aggregator: DomainAggregator) -> None:
        records = _records(
            [
                _row(1, 2025, "Cardiology", "Actual", "Revenue", "500"),
                _row(1, 2025, "Astrology", "Actual", "Revenue", "999"),
            ]
        )
        summary = aggregator.aggregate(records, DEPARTMENTAL)
        assert summary["Jan-25"].fields["Revenue"] == 500.0

    def test_breakdown_lists_every_department_in_order(self, aggregator: DomainAggregator) -> None:
        records = _records(
            [
                _row(1, 2025, "ENT", "Expected", "Patients", "30"),
                _row(2, 2025, "ent", "Actual", "Profitability", "-5"),
            ]
        )
        breakdown = aggregator.summarize_departments(records)

        assert [item["department"] for item in breakdown] == list(DEPARTMENTS)
        ent = breakdown[-1]
        assert ent["ExpectedPatients"] == 30.0
        assert ent["Profitability"] == -5.0
        assert breakdown[0]["Revenue"] == 0.0

    def test_summarize_all_covers_every_domain(self, aggregator: DomainAggregator) -> None:
        result = aggregator.summarize_all(_records([_row(1, 2025, "General", "Actual", "Revenue", "1")]))
        assert set(result) == {
            "finance",
            "hr",
            "pharmacy",
            "diagnostics",
            "maintenance",
            "admissions",
            "feedback",
            "departmental",
        }
        assert result["hr"] == []
