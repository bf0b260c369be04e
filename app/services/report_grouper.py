"""
app/services/report_grouper.py

Groups normalised records into per-section chart groups for one reporting
period and one Expected/Actual toggle.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from app.domain.dashboards import GENERAL_CATEGORY
from app.domain.hmis_record import NormalizedRecord
from app.domain.reporting import (
    SECTION_SPECS,
    ChartGroup,
    ChartPoint,
    ReportPeriod,
    ReportType,
    SectionSpec,
)

logger = logging.getLogger(__name__)


def in_period(record: NormalizedRecord, period: ReportPeriod) -> bool:
    if period.mode == ReportType.OVERALL:
        return True
    return record.month == period.month and record.year == period.year


class CrossDomainGrouper:
    """
    Builds ``{section title: ChartGroup}`` for every report section.
    """

    def __init__(self, specs: Sequence[SectionSpec] = SECTION_SPECS) -> None:
        self._specs = tuple(specs)

    def group(
        self,
        records: Iterable[NormalizedRecord],
        period: ReportPeriod,
    ) -> dict[str, ChartGroup]:
        selected = [
            record
            for record in records
            if in_period(record, period) and record.is_expected == period.wants_expected
        ]
        logger.debug(
            "group period=%s selected=%d",
            period.describe(),
            len(selected),
        )
        return {spec.title: self.group_section(selected, spec) for spec in self._specs}

    def group_section(self, records: Iterable[NormalizedRecord], spec: SectionSpec) -> ChartGroup:
        """
        Group already period/toggle-filtered records for one section.
        """

        if spec.is_categorical:
            return self._by_category(records, spec)
        return self._by_metric(records, spec)

    @staticmethod
    def _by_metric(records: Iterable[NormalizedRecord], spec: SectionSpec) -> ChartGroup:
        stems = {stem for stem, _ in spec.metrics}
        totals: dict[str, float] = {}
        for record in records:
            if spec.general_only and record.category != GENERAL_CATEGORY:
                continue
            if record.metric not in stems:
                continue
            totals[record.metric] = totals.get(record.metric, 0.0) + record.value

        return tuple(
            ChartPoint(label=label, value=totals[stem])
            for stem, label in spec.metrics
            if stem in totals
        )

    @staticmethod
    def _by_category(records: Iterable[NormalizedRecord], spec: SectionSpec) -> ChartGroup:
        totals: dict[str, float] = {}
        labels: dict[str, str] = {}
        for record in records:
            if record.category == GENERAL_CATEGORY or record.metric != spec.target_metric:
                continue
            labels.setdefault(record.category, record.category_label or record.category)
            totals[record.category] = totals.get(record.category, 0.0) + record.value

        return tuple(ChartPoint(label=labels[key], value=value) for key, value in totals.items())
