"""
insights/pharmacy_rules.py

Issued vs Expired stock rules.
"""

from __future__ import annotations

from typing import List

from app.domain.reporting import ChartGroup, SectionTitle
from insights.base import (
    EXPIRY_RATIO_THRESHOLD,
    BaseSectionRules,
    SectionTotals,
    value_of,
)


def expiry_ratio(issued: float, expired: float) -> float | None:
    """
    Expired share of issued stock, or ``None`` when nothing was issued.
    """

    if issued <= 0:
        return None
    return expired / issued


def _percent(ratio: float | None) -> str:
    return "n/a" if ratio is None else f"{ratio * 100:.1f}%"


class IssuedExpiredRules(BaseSectionRules):
    """
    Rules evaluated (in order)
    --------------------------
    1. Expired > 10% of issued – over-threshold wastage.
    2. Otherwise               – within limits.

    Expired stock with nothing issued counts as over threshold.
    """

    title = SectionTitle.ISSUED_VS_EXPIRED

    @staticmethod
    def _over_threshold(issued: float, expired: float) -> bool:
        return expired > issued * EXPIRY_RATIO_THRESHOLD

    def observe(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        issued = value_of(group, "Issued")
        expired = value_of(group, "Expired")
        if self._over_threshold(issued, expired):
            return [
                "Observation: Expired stock is more than 10% of issued.",
                "RCA: Poor inventory rotation or excess ordering leading to wastage.",
            ]
        return [
            "Observation: Expired stock is within acceptable limits.",
            "RCA: Inventory is managed well with timely usage.",
        ]

    def recommend(self, group: ChartGroup, totals: SectionTotals) -> List[str]:
        issued = value_of(group, "Issued")
        expired = value_of(group, "Expired")
        percent = _percent(expiry_ratio(issued, expired))

        if self._over_threshold(issued, expired):
            first = (
                f"Expired stock ({percent}) exceeds acceptable threshold — enforce FEFO and "
                "adjust purchase cycles."
            )
        else:
            first = f"Expired stock within limits ({percent}) — maintain current inventory practices."
        return [
            first,
            "Link pharmacy alerts with clinical departments to avoid overstocking or "
            "underutilization.",
        ]
