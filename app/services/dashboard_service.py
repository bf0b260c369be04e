"""
app/services/dashboard_service.py

Per-domain dashboards over the current row snapshot.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from app.domain.dashboards import DOMAINS, get_domain
from app.domain.hmis_record import RawRow
from app.mappers.record_normalizer import RecordNormalizer
from app.services.aggregation_service import DomainAggregator

logger = logging.getLogger(__name__)

RowSource = Callable[[], Iterable[RawRow]]


class UnknownDomainError(LookupError):
    """
    Raised when a dashboard domain name is not registered.
    """


class DashboardService:
    """
    Normalises raw rows and aggregates them per domain.

    ``fetch_rows`` is called once per request-level operation; nothing is
    cached between calls.
    """

    def __init__(
        self,
        *,
        fetch_rows: RowSource,
        normalizer: RecordNormalizer | None = None,
        aggregator: DomainAggregator | None = None,
    ) -> None:
        self._fetch_rows = fetch_rows
        self._normalizer = normalizer or RecordNormalizer()
        self._aggregator = aggregator or DomainAggregator()

    @staticmethod
    def domain_names() -> tuple[str, ...]:
        return tuple(DOMAINS)

    def compute(self, rows: Iterable[RawRow]) -> dict[str, list[dict[str, Any]]]:
        """
        Every domain's ordered summary for an explicit row snapshot.
        """

        records = self._normalizer.normalize_all(rows)
        return {
            name: [entry.to_dict() for entry in entries]
            for name, entries in self._aggregator.summarize_all(records).items()
        }

    def all_domains(self) -> dict[str, list[dict[str, Any]]]:
        return self.compute(self._fetch_rows())

    def domain(self, name: str) -> list[dict[str, Any]]:
        descriptor = get_domain(name)
        if descriptor is None:
            raise UnknownDomainError(
                f"Unknown dashboard '{name}'. Supported values: {', '.join(DOMAINS)}."
            )
        records = self._normalizer.normalize_all(self._fetch_rows())
        return [entry.to_dict() for entry in self._aggregator.summarize(records, descriptor)]

    def departments(self) -> list[dict[str, Any]]:
        records = self._normalizer.normalize_all(self._fetch_rows())
        return self._aggregator.summarize_departments(records)
