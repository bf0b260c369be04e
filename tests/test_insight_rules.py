"""
tests/test_insight_rules.py

Pytest unit tests for the per-section insight rules and the orchestrator.

All tests are pure Python: chart groups are built by hand.

Coverage
--------
- Revenue vs Expense deficit with and without negative profitability
- Issued vs Expired over and within threshold, issued = 0 guard
- Two-tier escalation for the operational and workforce sections
- Total-based narratives for the categorical sections
- Empty-group short-circuit and unknown titles
- Determinism across repeated calls
"""

from __future__ import annotations

import pytest

from app.domain.reporting import SECTION_TITLES, ChartGroup, ChartPoint, SectionTitle
from insights.base import (
    NO_DATA_ACTION,
    NO_DATA_OBSERVATION,
    SectionTotals,
    format_currency,
    format_number,
)
from insights.orchestrator import InsightOrchestrator


def group(**values: float) -> ChartGroup:
    return tuple(ChartPoint(label.replace("_", " "), value) for label, value in values.items())


def points(*pairs: tuple[str, float]) -> ChartGroup:
    return tuple(ChartPoint(label, value) for label, value in pairs)


@pytest.fixture()
def orchestrator() -> InsightOrchestrator:
    return InsightOrchestrator()


def analyze(orchestrator: InsightOrchestrator, title: str, groups: dict[str, ChartGroup]):
    return orchestrator.analyze(title, groups.get(title, ()), SectionTotals(groups))


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


class TestFormatting:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(300, "300"), (1234.5, "1,234.5"), (1000000, "1,000,000"), (-50, "-50"), (0.001, "0")],
    )
    def test_format_number(self, value: float, expected: str) -> None:
        assert format_number(value) == expected

    def test_format_currency(self) -> None:
        assert format_currency(300) == "₹300"


# ---------------------------------------------------------------------------
# Orchestrator contract
# ---------------------------------------------------------------------------


class TestOrchestrator:
    def test_every_section_has_rules(self, orchestrator: InsightOrchestrator) -> None:
        assert set(orchestrator.supported_titles()) == set(SECTION_TITLES)

    @pytest.mark.parametrize("title", SECTION_TITLES)
    def test_empty_group_short_circuits(self, orchestrator: InsightOrchestrator, title: str) -> None:
        insight = orchestrator.analyze(title, (), SectionTotals({}))
        assert insight.observations == [NO_DATA_OBSERVATION]
        assert insight.actions == [NO_DATA_ACTION]

    def test_unknown_title_raises(self, orchestrator: InsightOrchestrator) -> None:
        with pytest.raises(ValueError):
            orchestrator.analyze("Bed Occupancy", group(Beds=1), SectionTotals({}))

    def test_deterministic(self, orchestrator: InsightOrchestrator) -> None:
        groups = {SectionTitle.REVENUE_VS_EXPENSE: group(Revenue=500, Expense=800)}
        first = analyze(orchestrator, SectionTitle.REVENUE_VS_EXPENSE, groups)
        second = analyze(orchestrator, SectionTitle.REVENUE_VS_EXPENSE, groups)
        assert first == second


# ---------------------------------------------------------------------------
# Finance
# ---------------------------------------------------------------------------


class TestRevenueVsExpense:
    def test_deficit_cites_profitability(self, orchestrator: InsightOrchestrator) -> None:
        groups = {
            SectionTitle.REVENUE_VS_EXPENSE: group(Revenue=500, Expense=800),
            SectionTitle.PROFITABILITY: points(("Cardiology", -20), ("Surgery", -30)),
        }
        insight = analyze(orchestrator, SectionTitle.REVENUE_VS_EXPENSE, groups)

        assert insight.observations[0] == "Observation: Expenses exceed revenue by ₹300."
        assert "profitability" in insight.observations[1].lower()
        assert insight.actions[0].startswith("Hospital running at a deficit of ₹300")
        assert any("Negative profitability" in action for action in insight.actions)

    def test_deficit_without_negative_profitability(self, orchestrator: InsightOrchestrator) -> None:
        groups = {SectionTitle.REVENUE_VS_EXPENSE: group(Revenue=500, Expense=800)}
        insight = analyze(orchestrator, SectionTitle.REVENUE_VS_EXPENSE, groups)
        assert insight.observations[0] == "Observation: Expenses exceed revenue by ₹300."
        assert "profitability" not in insight.observations[1].lower()

    def test_surplus(self, orchestrator: InsightOrchestrator) -> None:
        groups = {SectionTitle.REVENUE_VS_EXPENSE: group(Revenue=900, Expense=800)}
        insight = analyze(orchestrator, SectionTitle.REVENUE_VS_EXPENSE, groups)
        assert insight.observations[0] == "Observation: Revenue exceeds expenses by ₹100."
        assert len(insight.actions) == 1

    def test_deficit_actions_pull_sibling_sections(self, orchestrator: InsightOrchestrator) -> None:
        groups = {
            SectionTitle.REVENUE_VS_EXPENSE: group(Revenue=100, Expense=200),
            SectionTitle.LAB_VS_RADIOLOGY: points(("Lab Tests", 50), ("Radiology Tests", 10)),
            SectionTitle.ISSUED_VS_EXPIRED: group(Issued=100, Expired=20),
            SectionTitle.REPAIR_VS_PURCHASE: points(("Repair Cost", 70), ("Purchase Cost", 10)),
        }
        actions = analyze(orchestrator, SectionTitle.REVENUE_VS_EXPENSE, groups).actions
        assert any(action.startswith("Radiology test volume (10)") for action in actions)
        assert any(action.startswith("Expired inventory (20)") for action in actions)
        assert any(action.startswith("Repair cost (₹70)") for action in actions)
        assert actions[-1].startswith("Coordinate between finance")


class TestCategoricalSections:
    def test_profitability_system_wide(self, orchestrator: InsightOrchestrator) -> None:
        groups = {
            SectionTitle.PROFITABILITY: points(("Cardiology", -50)),
            SectionTitle.REVENUE_VS_EXPENSE: group(Revenue=100, Expense=300),
        }
        insight = analyze(orchestrator, SectionTitle.PROFITABILITY, groups)
        assert insight.observations[0] == "Observation: Overall profitability is ₹-50."
        assert "System-wide" in insight.observations[1]

    def test_profitability_positive(self, orchestrator: InsightOrchestrator) -> None:
        groups = {SectionTitle.PROFITABILITY: points(("Cardiology", 40), ("ENT", 10))}
        insight = analyze(orchestrator, SectionTitle.PROFITABILITY, groups)
        assert insight.observations[0] == "Observation: Overall profitability is ₹50."
        assert "optimize low-margin" in insight.observations[1]

    def test_departmental_revenue_total(self, orchestrator: InsightOrchestrator) -> None:
        groups = {SectionTitle.DEPARTMENTAL_REVENUE: points(("Cardiology", 1200), ("ENT", 300))}
        insight = analyze(orchestrator, SectionTitle.DEPARTMENTAL_REVENUE, groups)
        assert insight.observations[0] == "Observation: Total departmental revenue is ₹1,500."
        assert insight.actions[0] == "Total departmental revenue: ₹1,500"

    def test_patient_volume_with_net_staff_loss(self, orchestrator: InsightOrchestrator) -> None:
        groups = {
            SectionTitle.PATIENT_VOLUME: points(("Cardiology", 1500), ("Surgery", 800)),
            SectionTitle.JOINEE_VS_RESIGNATION: group(Joinees=2, Resignations=5),
        }
        insight = analyze(orchestrator, SectionTitle.PATIENT_VOLUME, groups)
        assert insight.observations[0] == "Observation: Patient volume is 2,300."
        assert "under strain" in insight.observations[1]
        assert insight.actions[1].startswith("High patient load with net staff loss")

    def test_patient_volume_without_staff_loss(self, orchestrator: InsightOrchestrator) -> None:
        groups = {
            SectionTitle.PATIENT_VOLUME: points(("Cardiology", 2500)),
            SectionTitle.JOINEE_VS_RESIGNATION: group(Joinees=5, Resignations=5),
        }
        insight = analyze(orchestrator, SectionTitle.PATIENT_VOLUME, groups)
        assert "Monitor volume" in insight.observations[1]


# ---------------------------------------------------------------------------
# Pharmacy
# ---------------------------------------------------------------------------


class TestIssuedVsExpired:
    def test_over_threshold(self, orchestrator: InsightOrchestrator) -> None:
        groups = {SectionTitle.ISSUED_VS_EXPIRED: group(Issued=1000, Expired=150)}
        insight = analyze(orchestrator, SectionTitle.ISSUED_VS_EXPIRED, groups)
        assert insight.observations[0] == "Observation: Expired stock is more than 10% of issued."
        assert insight.actions[0].startswith("Expired stock (15.0%) exceeds acceptable threshold")

    def test_exactly_ten_percent_is_within_limits(self, orchestrator: InsightOrchestrator) -> None:
        groups = {SectionTitle.ISSUED_VS_EXPIRED: group(Issued=1000, Expired=100)}
        insight = analyze(orchestrator, SectionTitle.ISSUED_VS_EXPIRED, groups)
        assert insight.observations[0] == "Observation: Expired stock is within acceptable limits."
        assert insight.actions[0] == (
            "Expired stock within limits (10.0%) — maintain current inventory practices."
        )

    def test_nothing_issued_never_divides(self, orchestrator: InsightOrchestrator) -> None:
        groups = {SectionTitle.ISSUED_VS_EXPIRED: group(Expired=5)}
        insight = analyze(orchestrator, SectionTitle.ISSUED_VS_EXPIRED, groups)
        text = " ".join(insight.observations + insight.actions)
        assert "inf" not in text.lower()
        assert "nan" not in text.lower()
        assert "(n/a)" in insight.actions[0]

    @pytest.mark.parametrize(
        ("title", "chart_group"),
        [
            (SectionTitle.ISSUED_VS_EXPIRED, group(Issued=0, Expired=0)),
            (SectionTitle.REVENUE_VS_EXPENSE, group(Revenue=0, Expense=0)),
            (SectionTitle.IPD_VS_OPD, points(("IPD Score", 0), ("OPD Score", 0))),
            (SectionTitle.PATIENT_VOLUME, points(("Cardiology", 0))),
        ],
    )
    def test_zero_values_read_as_no_data(
        self, orchestrator: InsightOrchestrator, title: str, chart_group: ChartGroup
    ) -> None:
        insight = analyze(orchestrator, title, {title: chart_group})
        assert insight.observations == [NO_DATA_OBSERVATION]
        assert insight.actions == [NO_DATA_ACTION]


# ---------------------------------------------------------------------------
# Operations and workforce
# ---------------------------------------------------------------------------


class TestTwoTierRules:
    def test_admissions_escalate_on_high_ipd(self, orchestrator: InsightOrchestrator) -> None:
        groups = {
            SectionTitle.ADMISSIONS_VS_DISCHARGES: group(Admissions=120, Discharges=100),
            SectionTitle.IPD_VS_OPD: points(("IPD Score", 1200), ("OPD Score", 300)),
        }
        insight = analyze(orchestrator, SectionTitle.ADMISSIONS_VS_DISCHARGES, groups)
        assert insight.observations[0] == "Observation: Admissions exceed discharges by 20."
        assert "longer patient stays" in insight.observations[1]
        assert any(action.startswith("High IPD score (1,200)") for action in insight.actions)

    def test_admissions_plain_backlog(self, orchestrator: InsightOrchestrator) -> None:
        groups = {SectionTitle.ADMISSIONS_VS_DISCHARGES: group(Admissions=120, Discharges=100)}
        insight = analyze(orchestrator, SectionTitle.ADMISSIONS_VS_DISCHARGES, groups)
        assert "outpacing discharge capacity" in insight.observations[1]

    def test_discharges_exceed(self, orchestrator: InsightOrchestrator) -> None:
        groups = {SectionTitle.ADMISSIONS_VS_DISCHARGES: group(Admissions=80, Discharges=100)}
        insight = analyze(orchestrator, SectionTitle.ADMISSIONS_VS_DISCHARGES, groups)
        assert insight.observations[0] == "Observation: Discharges exceed admissions by 20."

    def test_radiology_overuse_with_losses(self, orchestrator: InsightOrchestrator) -> None:
        groups = {
            SectionTitle.LAB_VS_RADIOLOGY: points(("Lab Tests", 10), ("Radiology Tests", 40)),
            SectionTitle.PROFITABILITY: points(("Cardiology", -1)),
        }
        insight = analyze(orchestrator, SectionTitle.LAB_VS_RADIOLOGY, groups)
        assert insight.observations[0] == "Observation: Radiology tests exceed lab tests."

    def test_lab_dominates(self, orchestrator: InsightOrchestrator) -> None:
        groups = {
            SectionTitle.LAB_VS_RADIOLOGY: points(("Lab Tests", 40), ("Radiology Tests", 10)),
            SectionTitle.REVENUE_VS_EXPENSE: group(Expense=5),
        }
        insight = analyze(orchestrator, SectionTitle.LAB_VS_RADIOLOGY, groups)
        assert insight.observations[0] == "Observation: Lab tests are higher than radiology."
        assert insight.actions[-1] == "Coordinate with finance to analyze test yield vs cost impact."

    def test_repairs_dominate(self, orchestrator: InsightOrchestrator) -> None:
        groups = {SectionTitle.REPAIR_VS_PURCHASE: points(("Repair Cost", 90), ("Purchase Cost", 10))}
        insight = analyze(orchestrator, SectionTitle.REPAIR_VS_PURCHASE, groups)
        assert insight.observations == [
            "Observation: Repairs dominate.",
            "RCA: Indicates aging equipment or deferred replacements.",
        ]

    def test_ipd_under_high_volume(self, orchestrator: InsightOrchestrator) -> None:
        groups = {
            SectionTitle.IPD_VS_OPD: points(("IPD Score", 900), ("OPD Score", 300)),
            SectionTitle.PATIENT_VOLUME: points(("Surgery", 2500)),
        }
        insight = analyze(orchestrator, SectionTitle.IPD_VS_OPD, groups)
        assert insight.observations[0] == "Observation: IPD dominates under high patient volume."

    def test_opd_dominates(self, orchestrator: InsightOrchestrator) -> None:
        groups = {SectionTitle.IPD_VS_OPD: points(("IPD Score", 100), ("OPD Score", 300))}
        insight = analyze(orchestrator, SectionTitle.IPD_VS_OPD, groups)
        assert insight.observations[0] == "Observation: OPD dominates."
        assert insight.actions[0].startswith("OPD footfall (300)")

    def test_tie_is_balanced_in_actions_too(self, orchestrator: InsightOrchestrator) -> None:
        groups = {SectionTitle.IPD_VS_OPD: points(("IPD Score", 250), ("OPD Score", 250))}
        insight = analyze(orchestrator, SectionTitle.IPD_VS_OPD, groups)
        assert insight.observations[0] == "Observation: IPD and OPD are balanced."
        assert insight.actions[0].startswith("IPD and OPD scores are level (250)")
        assert "higher" not in insight.actions[0]

    def test_burnout(self, orchestrator: InsightOrchestrator) -> None:
        groups = {
            SectionTitle.JOINEE_VS_RESIGNATION: group(Joinees=3, Resignations=8),
            SectionTitle.PATIENT_VOLUME: points(("Surgery", 1500)),
        }
        insight = analyze(orchestrator, SectionTitle.JOINEE_VS_RESIGNATION, groups)
        assert insight.observations[0] == (
            "Observation: Resignations exceed joinees under high patient load."
        )
        assert not any("High patient volume" in action for action in insight.actions)

    def test_plain_attrition(self, orchestrator: InsightOrchestrator) -> None:
        groups = {SectionTitle.JOINEE_VS_RESIGNATION: group(Joinees=3, Resignations=8)}
        insight = analyze(orchestrator, SectionTitle.JOINEE_VS_RESIGNATION, groups)
        assert insight.observations[0] == "Observation: Resignations exceed joinees."

    def test_healthy_retention(self, orchestrator: InsightOrchestrator) -> None:
        groups = {SectionTitle.JOINEE_VS_RESIGNATION: group(Joinees=9, Resignations=2)}
        insight = analyze(orchestrator, SectionTitle.JOINEE_VS_RESIGNATION, groups)
        assert insight.observations[0] == "Observation: More joinees than resignations."
        assert len(insight.actions) == 1
