"""
app/services/aggregation_service.py

Per-domain monthly aggregation of normalised HMIS records.

Translates NormalizedRecord rows into one DomainSummaryEntry per month
label for a given DomainDescriptor. Dashboards consume the ordered output
directly.

Aggregation rules
-----------------
- A record is included only when its normalised category belongs to the
  descriptor (exact match after lowercasing/trimming).
- An entry is created, with every field at 0, on the first included record
  for its label.
- The record's bucket (expected when either the sub-category or the metric
  prefix says so, actual otherwise) and metric stem pick the field.
  Unmatched stems are ignored.
- Accumulation is plain summation, so input order never matters.

No I/O lives here. Fetching rows belongs to the repository/connector layer.
"""

from __future__ import annotations

import logging
from typing import Iterable

from app.domain.dashboards import DEPARTMENTS, DEPARTMENTAL, DOMAINS, DomainDescriptor
from app.domain.hmis_record import DomainSummaryEntry, NormalizedRecord
from app.services.month_ordering import sort_chronologically

logger = logging.getLogger(__name__)


class DomainAggregator:
    """
    Folds normalised records into per-month summaries for one domain at a time.

    Stateless; a single instance can be shared across requests.
    """

    def aggregate(
        self,
        records: Iterable[NormalizedRecord],
        descriptor: DomainDescriptor,
    ) -> dict[str, DomainSummaryEntry]:
        """
        Return an unordered mapping of month label to summary entry.
        """

        summary: dict[str, DomainSummaryEntry] = {}
        matched = 0
        for record in records:
            if not descriptor.includes(record.category):
                continue

            label = record.label
            entry = summary.get(label)
            if entry is None:
                entry = DomainSummaryEntry(
                    label=label,
                    fields={name: 0.0 for name in descriptor.field_names},
                )
                summary[label] = entry

            field_name = descriptor.field_for(record.metric, expected=record.is_expected)
            if field_name is None:
                continue
            entry.add(field_name, record.value)
            matched += 1

        logger.debug(
            "aggregate domain=%s labels=%d matched_records=%d",
            descriptor.name,
            len(summary),
            matched,
        )
        return summary

    def summarize(
        self,
        records: Iterable[NormalizedRecord],
        descriptor: DomainDescriptor,
    ) -> list[DomainSummaryEntry]:
        """
        Aggregate and return entries in calendar order.
        """

        return sort_chronologically(self.aggregate(records, descriptor))

    def summarize_all(self, records: Iterable[NormalizedRecord]) -> dict[str, list[DomainSummaryEntry]]:
        """
        Summarise every registered domain over the same record snapshot.
        """

        snapshot = list(records)
        return {name: self.summarize(snapshot, descriptor) for name, descriptor in DOMAINS.items()}

    def summarize_departments(self, records: Iterable[NormalizedRecord]) -> list[dict[str, object]]:
        """
        All-time per-department totals, actual and expected, in display order.

        Every allow-listed department appears, zero-filled when it has no data.
        """

        totals: dict[str, dict[str, float]] = {
            department.lower(): {name: 0.0 for name in DEPARTMENTAL.field_names}
            for department in DEPARTMENTS
        }
        for record in records:
            bucket = totals.get(record.category)
            if bucket is None:
                continue
            field_name = DEPARTMENTAL.field_for(record.metric, expected=record.is_expected)
            if field_name is not None:
                bucket[field_name] += record.value

        return [
            {"department": department, **totals[department.lower()]}
            for department in DEPARTMENTS
        ]
