"""
insights/operations_rules.py

Deterministic rules for the operational report sections:
Lab vs Radiology, Admissions vs Discharges, Repair vs Purchase and IPD vs OPD.

Each rule set follows the same two tiers: a primary comparison inside the
section's own chart group, escalated to a cross-domain narrative when a
sibling section crosses its threshold.
"""

from __future__ import annotations

from typing import List

from app.domain.reporting import ChartGroup, SectionTitle
from insights.base import (
    HIGH_PATIENT_VOLUME,
    IPD_ESCALATION_SCORE,
    IPD_HIGH_SCORE,
    BaseSectionRules,
    SectionTotals,
    format_currency,
    format_number,
    value_of,
)


class LabRadiologyRules(BaseSectionRules):
    """
    Rules evaluated (in order)
    --------------------------
    1. Radiology > Lab while departmental profitability is negative – imaging overuse.
    2. Otherwise – whichever test family leads, read as ordering patterns.
    """

    title = SectionTitle.LAB_VS_RADIOLOGY

    def observe(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        lab = value_of(group, "Lab Tests")
        radiology = value_of(group, "Radiology Tests")
        if radiology > lab and totals.total(SectionTitle.PROFITABILITY) < 0:
            return [
                "Observation: Radiology tests exceed lab tests.",
                "RCA: Potential overuse of imaging without cost-effective results.",
            ]
        return [
            "Observation: Lab tests are higher than radiology."
            if lab > radiology
            else "Observation: Radiology tests are higher than lab.",
            "RCA: Reflects service focus or physician ordering patterns.",
        ]

    def recommend(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        lab = value_of(group, "Lab Tests")
        radiology = value_of(group, "Radiology Tests")

        actions: List[str] = []
        if radiology > lab and totals.total(SectionTitle.PROFITABILITY) < 0:
            actions.append(
                f"Radiology volume ({format_number(radiology)}) exceeds Lab "
                f"({format_number(lab)}) with low profitability — review diagnostic cost "
                "efficiency."
            )
        elif lab > radiology:
            actions.append(
                f"Lab volume ({format_number(lab)}) dominates — evaluate whether imaging is "
                "underutilized."
            )
        actions.append("Balance diagnostic spend based on clinical need and ROI across departments.")
        if totals.value(SectionTitle.REVENUE_VS_EXPENSE, "Expense") > 0:
            actions.append("Coordinate with finance to analyze test yield vs cost impact.")
        return actions


class AdmissionsDischargesRules(BaseSectionRules):
    """
    Rules evaluated (in order)
    --------------------------
    1. Admissions > Discharges and IPD score > 500 – longer stays.
    2. Admissions > Discharges                      – inflow outpacing discharges.
    3. Discharges > Admissions                      – backlog clearing.
    4. Otherwise                                    – balanced.
    """

    title = SectionTitle.ADMISSIONS_VS_DISCHARGES

    def observe(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        admissions = value_of(group, "Admissions")
        discharges = value_of(group, "Discharges")
        ipd_score = totals.value(SectionTitle.IPD_VS_OPD, "IPD Score")
        if admissions > discharges:
            gap = format_number(admissions - discharges)
            if ipd_score > IPD_ESCALATION_SCORE:
                return [
                    f"Observation: Admissions exceed discharges by {gap}.",
                    "RCA: Indicates longer patient stays possibly due to critical cases or "
                    "discharge delays.",
                ]
            return [
                f"Observation: Admissions exceed discharges by {gap}.",
                "RCA: Patient inflow is outpacing discharge capacity.",
            ]
        if discharges > admissions:
            return [
                f"Observation: Discharges exceed admissions by "
                f"{format_number(discharges - admissions)}.",
                "RCA: Might be backlog clearing, seasonal variation, or reduced admission rates.",
            ]
        return [
            "Observation: Admissions and discharges are balanced.",
            "RCA: Reflects efficient patient flow and care transitions.",
        ]

    def recommend(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        admissions = value_of(group, "Admissions")
        discharges = value_of(group, "Discharges")
        ipd_score = totals.value(SectionTitle.IPD_VS_OPD, "IPD Score")

        actions: List[str] = []
        if admissions > discharges:
            actions.append(
                f"Admissions ({format_number(admissions)}) exceed discharges "
                f"({format_number(discharges)}) — review discharge planning and bed turnover."
            )
            if ipd_score > IPD_HIGH_SCORE:
                actions.append(
                    f"High IPD score ({format_number(ipd_score)}) — verify if prolonged stays "
                    "are delaying discharges."
                )
        elif discharges > admissions:
            actions.append(
                f"Discharges ({format_number(discharges)}) exceed admissions "
                f"({format_number(admissions)}) — may indicate seasonal clearance or reduced "
                "new admissions."
            )
        actions.append("Collaborate with OPD teams, diagnostics, and HR to improve patient flow.")
        return actions


class RepairPurchaseRules(BaseSectionRules):
    """
    Repairs vs purchases; repair-heavy spend is escalated when departments
    are also running at a loss.
    """

    title = SectionTitle.REPAIR_VS_PURCHASE

    def observe(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        repair = value_of(group, "Repair Cost")
        purchase = value_of(group, "Purchase Cost")
        if repair > purchase and totals.total(SectionTitle.PROFITABILITY) < 0:
            return [
                "Observation: Repairs dominate.",
                "RCA: Aging equipment and downtime are likely weighing on profitability.",
            ]
        if repair > purchase:
            return [
                "Observation: Repairs dominate.",
                "RCA: Indicates aging equipment or deferred replacements.",
            ]
        return [
            "Observation: Purchases dominate.",
            "RCA: Investment in new infrastructure or capital upgrades.",
        ]

    def recommend(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        repair = value_of(group, "Repair Cost")
        purchase = value_of(group, "Purchase Cost")

        actions: List[str] = []
        if repair > purchase:
            actions.append(
                f"Repair cost ({format_currency(repair)}) exceeded purchase "
                f"({format_currency(purchase)}) — assess if older assets need replacement."
            )
            if totals.total(SectionTitle.PROFITABILITY) < 0:
                actions.append(
                    "Low profitability may be due to recurring equipment downtimes — check "
                    "asset performance logs."
                )
        else:
            actions.append(
                "Equipment maintenance within reasonable limits — continue preventive checks."
            )
        actions.append(
            "Finance and Maintenance teams should jointly evaluate lifecycle cost of critical "
            "equipment."
        )
        return actions


class IpdOpdRules(BaseSectionRules):
    """
    Inpatient vs outpatient feedback scores; inpatient dominance under
    high patient volume points at resource load.
    """

    title = SectionTitle.IPD_VS_OPD

    def observe(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        ipd = value_of(group, "IPD Score")
        opd = value_of(group, "OPD Score")
        if ipd > opd and totals.total(SectionTitle.PATIENT_VOLUME) > HIGH_PATIENT_VOLUME:
            return [
                "Observation: IPD dominates under high patient volume.",
                "RCA: Inpatient load is straining beds and clinical staff.",
            ]
        if ipd > opd:
            return [
                "Observation: IPD dominates.",
                "RCA: Indicates complex inpatient care or longer stays.",
            ]
        if opd > ipd:
            return [
                "Observation: OPD dominates.",
                "RCA: Strong outpatient care possibly reducing admissions.",
            ]
        return [
            "Observation: IPD and OPD are balanced.",
            "RCA: Care is evenly split between inpatient and outpatient services.",
        ]

    def recommend(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        ipd = value_of(group, "IPD Score")
        opd = value_of(group, "OPD Score")
        if ipd > opd:
            first = (
                f"IPD score ({format_number(ipd)}) exceeds OPD ({format_number(opd)}) — review bed "
                "utilization, referral rates, and resource load."
            )
        elif opd > ipd:
            first = (
                f"OPD footfall ({format_number(opd)}) is higher than IPD ({format_number(ipd)}) "
                "— opportunity to strengthen preventive care."
            )
        else:
            first = (
                f"IPD and OPD scores are level ({format_number(ipd)}) — keep inpatient and "
                "outpatient capacity planning in step."
            )
        return [
            first,
            "Coordinate between OPD physicians and inpatient teams for seamless transitions.",
        ]
