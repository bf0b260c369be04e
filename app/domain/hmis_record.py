"""
app/domain/hmis_record.py

Domain models for HMIS metric rows, from submission to aggregation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from app.domain.months import month_label

RawRow = Mapping[str, Any]
"""Untyped row as persisted or fetched; never mutated."""

STORE_HEADERS: tuple[str, ...] = ("Month", "Year", "Category", "SubCategory", "Metric", "Value")


@dataclass(frozen=True)
class HMISRecordInput:
    """
    Write-side record, already normalised for persistence.
    """

    month: str
    year: str
    category: str
    sub_category: str
    metric: str
    value: str

    def as_row(self) -> tuple[str, str, str, str, str, str]:
        return (self.month, self.year, self.category, self.sub_category, self.metric, self.value)


@dataclass(frozen=True)
class NormalizedRecord:
    """
    Typed, comparison-ready view of one raw row.

    ``category``, ``sub_category`` and ``metric`` are lowercased and trimmed;
    ``metric`` has any ``actual``/``expected`` prefix removed. The ``*_label``
    fields keep the trimmed original casing for display only.
    """

    month: int | str
    year: int
    category: str
    sub_category: str
    metric: str
    value: float
    is_actual: bool
    is_expected: bool
    category_label: str = ""
    metric_label: str = ""

    @property
    def label(self) -> str:
        return month_label(self.month, self.year)

    @property
    def bucket(self) -> str:
        return "expected" if self.is_expected else "actual"


@dataclass
class DomainSummaryEntry:
    """
    Per-month accumulator for one domain.
    """

    label: str
    fields: dict[str, float]

    def add(self, field_name: str, value: float) -> None:
        self.fields[field_name] = self.fields.get(field_name, 0.0) + value

    def to_dict(self) -> dict[str, Any]:
        return {"month": self.label, **self.fields}


@dataclass(frozen=True)
class RowValidationError:
    """
    One CSV row validation error detail.
    """

    row_number: int
    message: str
    column: str | None = None
    value: str | None = None


@dataclass(frozen=True)
class IngestionSummary:
    """
    End-of-run upload summary.
    """

    rows_processed: int
    rows_failed: int
    validation_errors: list[RowValidationError] = field(default_factory=list)
