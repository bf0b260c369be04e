"""
insights/orchestrator.py

Routes observation/action generation to the rule set registered for
each report section title.
"""

from __future__ import annotations

from app.domain.reporting import ChartGroup, SectionInsight
from insights.base import (
    NO_DATA_ACTION,
    NO_DATA_OBSERVATION,
    BaseSectionRules,
    SectionTotals,
    has_data,
)
from insights.finance_rules import (
    DepartmentalRevenueRules,
    ProfitabilityRules,
    RevenueExpenseRules,
)
from insights.operations_rules import (
    AdmissionsDischargesRules,
    IpdOpdRules,
    LabRadiologyRules,
    RepairPurchaseRules,
)
from insights.pharmacy_rules import IssuedExpiredRules
from insights.workforce_rules import JoineeResignationRules, PatientVolumeRules


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_RULES: dict[str, BaseSectionRules] = {
    rules.title: rules
    for rules in (
        RevenueExpenseRules(),
        LabRadiologyRules(),
        AdmissionsDischargesRules(),
        IssuedExpiredRules(),
        JoineeResignationRules(),
        RepairPurchaseRules(),
        IpdOpdRules(),
        DepartmentalRevenueRules(),
        ProfitabilityRules(),
        PatientVolumeRules(),
    )
}


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class InsightOrchestrator:
    """
    Produces a :class:`SectionInsight` for one section of one report.

    Rule sets are instantiated once at import time and reused; they are
    stateless.
    """

    @staticmethod
    def supported_titles() -> tuple[str, ...]:
        return tuple(_RULES)

    def analyze(self, title: str, group: ChartGroup, totals: SectionTotals) -> SectionInsight:
        """
        Run the section's rules against its chart group.

        An empty or all-zero group short-circuits to the no-data narrative
        without touching any threshold logic.

        Raises
        ------
        ValueError
            If *title* has no registered rule set.
        """
        rules = _RULES.get(title)
        if rules is None:
            supported = ", ".join(f'"{key}"' for key in _RULES)
            raise ValueError(f"Unsupported section '{title}'. Supported values: {supported}.")

        if not has_data(group):
            return SectionInsight(observations=[NO_DATA_OBSERVATION], actions=[NO_DATA_ACTION])

        return SectionInsight(
            observations=rules.observe(group, totals),
            actions=rules.recommend(group, totals),
        )
