"""
app/services/report_service.py

Assembles the periodic hospital report.

Pipeline per request
--------------------
    1. RecordNormalizer.normalize_all()  – raw rows to typed records
    2. CrossDomainGrouper.group()        – period + toggle filter, one chart group per section
    3. InsightOrchestrator.analyze()     – observations and actions per section
    4. summary                           – first observation of every section with non-zero data

Sections always come out in the fixed SECTION_SPECS order, including
sections with no data (empty chart group, no-data narrative).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Mapping

from app.domain.hmis_record import RawRow
from app.domain.reporting import (
    SECTION_TITLES,
    ChartGroup,
    HMISReport,
    ReportPeriod,
    ReportSection,
)
from app.mappers.record_normalizer import RecordNormalizer
from app.services.report_grouper import CrossDomainGrouper
from insights.base import SectionTotals, has_data
from insights.orchestrator import InsightOrchestrator

logger = logging.getLogger(__name__)


class ReportService:
    """
    Produces an :class:`HMISReport` from raw rows and a reporting period.
    """

    def __init__(
        self,
        *,
        fetch_rows: Callable[[], Iterable[RawRow]],
        normalizer: RecordNormalizer | None = None,
        grouper: CrossDomainGrouper | None = None,
        orchestrator: InsightOrchestrator | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._fetch_rows = fetch_rows
        self._normalizer = normalizer or RecordNormalizer()
        self._grouper = grouper or CrossDomainGrouper()
        self._orchestrator = orchestrator or InsightOrchestrator()
        self._clock = clock or (lambda: datetime.now(tz=timezone.utc))

    def generate(
        self,
        *,
        report_type: str,
        month: str,
        year: int | str,
        sub_category: str,
    ) -> HMISReport:
        """
        Validate selector options and build the report.

        Raises ``ReportConfigError`` for invalid options.
        """

        period = ReportPeriod.from_options(
            report_type=report_type,
            month=month,
            year=year,
            sub_category=sub_category,
        )
        return self.build(period)

    def build(self, period: ReportPeriod, rows: Iterable[RawRow] | None = None) -> HMISReport:
        records = self._normalizer.normalize_all(self._fetch_rows() if rows is None else rows)
        return self.assemble(self._grouper.group(records, period), period)

    def assemble(self, groups: Mapping[str, ChartGroup], period: ReportPeriod) -> HMISReport:
        totals = SectionTotals(groups)
        sections: list[ReportSection] = []
        summary: list[str] = []
        for title in SECTION_TITLES:
            group = groups.get(title, ())
            insight = self._orchestrator.analyze(title, group, totals)
            sections.append(
                ReportSection(
                    title=title,
                    chart_group=group,
                    observations=insight.observations,
                    actions=insight.actions,
                )
            )
            if has_data(group) and insight.observations:
                summary.append(insight.observations[0])

        logger.info(
            "Report generated period=%s sections_with_data=%d",
            period.describe(),
            len(summary),
        )
        return HMISReport(
            period=period,
            sections=sections,
            summary=summary,
            generated_at=self._clock(),
        )
