"""
insights/workforce_rules.py

Staffing and load rules: Joinee vs Resignation and Patient Volume.
"""

from __future__ import annotations

from typing import List

from app.domain.reporting import ChartGroup, SectionTitle
from insights.base import (
    BURNOUT_PATIENT_VOLUME,
    HIGH_PATIENT_VOLUME,
    BaseSectionRules,
    SectionTotals,
    format_number,
    total_of,
    value_of,
)


def net_staff_loss(totals: SectionTotals) -> float:
    """
    Resignations minus joinees; positive means the workforce shrank.
    """

    return totals.value(SectionTitle.JOINEE_VS_RESIGNATION, "Resignations") - totals.value(
        SectionTitle.JOINEE_VS_RESIGNATION, "Joinees"
    )


class JoineeResignationRules(BaseSectionRules):
    """
    Rules evaluated (in order)
    --------------------------
    1. Resignations > Joinees and patient volume > 1000 – burnout.
    2. Resignations > Joinees                           – plain attrition.
    3. Otherwise                                        – healthy retention.
    """

    title = SectionTitle.JOINEE_VS_RESIGNATION

    def observe(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        joinees = value_of(group, "Joinees")
        resignations = value_of(group, "Resignations")
        patient_load = totals.total(SectionTitle.PATIENT_VOLUME)
        if resignations > joinees and patient_load > BURNOUT_PATIENT_VOLUME:
            return [
                "Observation: Resignations exceed joinees under high patient load.",
                "RCA: Possible staff burnout or inadequate HR planning.",
            ]
        if resignations > joinees:
            return [
                "Observation: Resignations exceed joinees.",
                "RCA: Likely causes include dissatisfaction, lack of engagement, or poor work "
                "culture.",
            ]
        return [
            "Observation: More joinees than resignations.",
            "RCA: Effective recruitment and retention practices are in place.",
        ]

    def recommend(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        joinees = value_of(group, "Joinees")
        resignations = value_of(group, "Resignations")
        patients = totals.total(SectionTitle.PATIENT_VOLUME)

        actions: List[str] = []
        if resignations > joinees:
            actions.append(
                f"Resignations ({format_number(resignations)}) exceed joinees "
                f"({format_number(joinees)}) — review exit feedback and staff morale."
            )
            if patients > HIGH_PATIENT_VOLUME:
                actions.append(
                    f"High patient volume ({format_number(patients)}) may be contributing to "
                    "burnout."
                )
        actions.append(
            "HR, Admin, and Department Heads must jointly plan staffing aligned to load and "
            "retention."
        )
        return actions


class PatientVolumeRules(BaseSectionRules):
    """
    Total patients across departments, escalated under net staff loss.
    """

    title = SectionTitle.PATIENT_VOLUME

    def _strained(self, group: ChartGroup, totals: SectionTotals) -> bool:
        return total_of(group) > HIGH_PATIENT_VOLUME and net_staff_loss(totals) > 0

    def observe(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        return [
            f"Observation: Patient volume is {format_number(total_of(group))}.",
            "RCA: Staff may be under strain — review HR allocations."
            if self._strained(group, totals)
            else "RCA: Monitor volume to optimize scheduling and resource allocation.",
        ]

    def recommend(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        return [
            f"Total patient volume: {format_number(total_of(group))}",
            "High patient load with net staff loss — adjust manpower planning immediately."
            if self._strained(group, totals)
            else "Use footfall trends to fine-tune appointment scheduling and staff allocation.",
        ]
