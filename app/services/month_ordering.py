"""
app/services/month_ordering.py

Calendar ordering of ``"{Abbrev}-{YY}"`` month labels.

Order is reconstructed from the label alone: ``month_index + year * 12``,
with unknown months (``"UNK"``) at index -1 so they lead their year.
The label itself breaks any remaining tie, which keeps the order total.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from app.domain.hmis_record import DomainSummaryEntry
from app.domain.months import month_index


def month_sort_key(label: str) -> tuple[int, str]:
    abbrev, _, year_text = label.rpartition("-")
    if not abbrev:
        abbrev, year_text = year_text, ""
    try:
        year = int(year_text)
    except ValueError:
        year = 0
    return month_index(abbrev) + year * 12, label


def sort_labels(labels: Iterable[str]) -> list[str]:
    return sorted(labels, key=month_sort_key)


def sort_chronologically(summary: Mapping[str, DomainSummaryEntry]) -> list[DomainSummaryEntry]:
    """
    Order a label-keyed summary mapping by calendar month and year.
    """

    return [summary[label] for label in sort_labels(summary)]
