"""
insights/finance_rules.py

Deterministic rules for the finance-facing report sections:
Revenue vs Expense, Departmental Revenue and Profitability.
"""

from __future__ import annotations

from typing import List

from app.domain.reporting import ChartGroup, SectionTitle
from insights.base import (
    EXPIRY_RATIO_THRESHOLD,
    BaseSectionRules,
    SectionTotals,
    format_currency,
    format_number,
    total_of,
    value_of,
)


class RevenueExpenseRules(BaseSectionRules):
    """
    Surplus/deficit narrative for the hospital-wide (general) ledger.

    Rules evaluated (in order)
    --------------------------
    1. Deficit with negative departmental profitability – escalated RCA.
    2. Deficit                                          – plain cost RCA.
    3. Otherwise                                        – surplus.
    """

    title = SectionTitle.REVENUE_VS_EXPENSE

    def observe(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        revenue = value_of(group, "Revenue")
        expense = value_of(group, "Expense")
        profitability = totals.total(SectionTitle.PROFITABILITY)
        if revenue < expense and profitability < 0:
            return [
                f"Observation: Expenses exceed revenue by {format_currency(expense - revenue)}.",
                "RCA: Likely due to negative profitability from underperforming departments "
                "or rising fixed costs.",
            ]
        if revenue < expense:
            return [
                f"Observation: Expenses exceed revenue by {format_currency(expense - revenue)}.",
                "RCA: Operating costs are growing faster than billed revenue.",
            ]
        return [
            f"Observation: Revenue exceeds expenses by {format_currency(revenue - expense)}.",
            "RCA: Indicates sound financial control and operational efficiency.",
        ]

    def recommend(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        revenue = value_of(group, "Revenue")
        expense = value_of(group, "Expense")
        if revenue >= expense:
            return [
                "Revenue exceeds expense — maintain discipline and audit for further "
                "optimization potential."
            ]

        lab = totals.value(SectionTitle.LAB_VS_RADIOLOGY, "Lab Tests")
        radiology = totals.value(SectionTitle.LAB_VS_RADIOLOGY, "Radiology Tests")
        admissions = totals.value(SectionTitle.ADMISSIONS_VS_DISCHARGES, "Admissions")
        discharges = totals.value(SectionTitle.ADMISSIONS_VS_DISCHARGES, "Discharges")
        issued = totals.value(SectionTitle.ISSUED_VS_EXPIRED, "Issued")
        expired = totals.value(SectionTitle.ISSUED_VS_EXPIRED, "Expired")
        repair = totals.value(SectionTitle.REPAIR_VS_PURCHASE, "Repair Cost")
        purchase = totals.value(SectionTitle.REPAIR_VS_PURCHASE, "Purchase Cost")
        profitability = totals.total(SectionTitle.PROFITABILITY)

        actions = [
            f"Hospital running at a deficit of {format_currency(expense - revenue)} — "
            "initiate cross-departmental cost review."
        ]
        if radiology < lab:
            actions.append(
                f"Radiology test volume ({format_number(radiology)}) is lower than Lab "
                f"({format_number(lab)}) — check clinician referral patterns and equipment "
                "utilization."
            )
        if admissions < discharges:
            actions.append(
                f"Admissions ({format_number(admissions)}) were lower than discharges "
                f"({format_number(discharges)}) — assess referral efficiency and patient inflow."
            )
        if expired > issued * EXPIRY_RATIO_THRESHOLD:
            actions.append(
                f"Expired inventory ({format_number(expired)}) exceeded 10% of issued "
                f"({format_number(issued)}) — improve pharmacy rotation and forecasting."
            )
        if repair > purchase:
            actions.append(
                f"Repair cost ({format_currency(repair)}) exceeded purchase cost "
                f"({format_currency(purchase)}) — evaluate high-maintenance assets."
            )
        if profitability < 0:
            actions.append(
                "Negative profitability across departments — audit revenue leakages and cost "
                "inefficiencies."
            )
        actions.append(
            "Coordinate between finance, maintenance, diagnostics, and HR to optimize "
            "expenditure and performance."
        )
        return actions


class DepartmentalRevenueRules(BaseSectionRules):
    """
    Total-based narrative over per-department revenue.
    """

    title = SectionTitle.DEPARTMENTAL_REVENUE

    def observe(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        return [
            f"Observation: Total departmental revenue is {format_currency(total_of(group))}.",
            "RCA: Evaluate departments with below-average contribution.",
        ]

    def recommend(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        return [
            f"Total departmental revenue: {format_currency(total_of(group))}",
            "Support underperforming units with marketing, resources, or diagnostic alignment.",
        ]


class ProfitabilityRules(BaseSectionRules):
    """
    Total profitability, escalated when the general ledger is also in deficit.
    """

    title = SectionTitle.PROFITABILITY

    @staticmethod
    def _net_revenue(totals: SectionTotals) -> float:
        return totals.value(SectionTitle.REVENUE_VS_EXPENSE, "Revenue") - totals.value(
            SectionTitle.REVENUE_VS_EXPENSE, "Expense"
        )

    def observe(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        total = total_of(group)
        system_wide = total < 0 and self._net_revenue(totals) < 0
        return [
            f"Observation: Overall profitability is {format_currency(total)}.",
            "RCA: System-wide financial inefficiencies — urgent review required."
            if system_wide
            else "RCA: Profit varies by department, optimize low-margin areas.",
        ]

    def recommend(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        total = total_of(group)
        system_wide = total < 0 and self._net_revenue(totals) < 0
        return [
            f"Total profitability: {format_currency(total)}",
            "Both revenue and profit are negative — urgent inter-departmental performance "
            "review needed."
            if system_wide
            else "Maintain focus on improving margins via service mix and efficiency.",
        ]
