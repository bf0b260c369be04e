"""
insights/base.py

Abstract base class and shared helpers for report-section rule sets.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Final, Mapping

from app.domain.reporting import ChartGroup

# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

EXPIRY_RATIO_THRESHOLD: Final[float] = 0.10
"""Expired stock above this share of issued stock is over threshold."""

IPD_ESCALATION_SCORE: Final[float] = 500.0
"""IPD score above which an admissions backlog is read as longer stays."""

IPD_HIGH_SCORE: Final[float] = 1000.0
"""IPD score above which prolonged stays are flagged in actions."""

BURNOUT_PATIENT_VOLUME: Final[float] = 1000.0
"""Patient volume above which net attrition is read as burnout."""

HIGH_PATIENT_VOLUME: Final[float] = 2000.0
"""Patient volume considered high load for staffing actions."""

NO_DATA_OBSERVATION: Final[str] = "Observation: No data available."
NO_DATA_ACTION: Final[str] = "No dynamic recommendations available."


def format_number(value: float) -> str:
    """
    Group thousands and drop trailing zero decimals: 1234.50 -> "1,234.5".
    """

    text = f"{value:,.2f}".rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text


def format_currency(value: float) -> str:
    return f"₹{format_number(value)}"


def value_of(group: ChartGroup, label: str) -> float:
    for point in group:
        if point.label == label:
            return point.value
    return 0.0


def total_of(group: ChartGroup) -> float:
    return sum(point.value for point in group)


def has_data(group: ChartGroup) -> bool:
    """
    False for an empty group or one whose values are all zero.
    """

    return any(point.value for point in group)


class SectionTotals:
    """
    Read-only accessor over every section's chart group for one report.

    Rules use it for cross-section lookups instead of reading an untyped
    mapping; unknown sections and labels read as 0.
    """

    def __init__(self, groups: Mapping[str, ChartGroup]) -> None:
        self._groups = dict(groups)

    def group(self, title: str) -> ChartGroup:
        return self._groups.get(title, ())

    def total(self, title: str) -> float:
        return total_of(self.group(title))

    def value(self, title: str, label: str) -> float:
        return value_of(self.group(title), label)


class BaseSectionRules(ABC):
    """
    Contract for one report section's observation and action rules.

    Implementations receive the section's own chart group plus a
    :class:`SectionTotals` accessor for the sibling sections. Both methods
    are pure: no I/O, no logging, no side effects. The orchestrator only
    calls them with a group that has at least one non-zero value.
    """

    title: str

    @abstractmethod
    def observe(self, group: ChartGroup, totals: SectionTotals) -> list[str]:
        """
        Return observation lines (``"Observation: ..."`` followed by ``"RCA: ..."``).
        """

    @abstractmethod
    def recommend(self, group: ChartGroup, totals: SectionTotals) -> list[str]:
        """
        Return recommended action lines.
        """
