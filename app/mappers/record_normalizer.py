"""
app/mappers/record_normalizer.py

Converts raw persisted rows into typed, comparison-ready records.

Raw rows come from a flat CSV written by several producers, so key casing
is inconsistent and keys or values may carry whitespace or a trailing
carriage return. Field lookup uses an explicit, ordered alias list per
field; the first alias with a non-empty value wins.

Policy
------
- month, category and metric are mandatory; a row missing any of them is
  rejected (``normalize`` returns ``None``).
- value never fails: unparseable or non-finite input becomes ``0.0``.
- year never fails: unparseable input becomes ``0``.
- expected/actual is the OR of the sub-category and a metric prefix.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Mapping, Sequence

from app.domain.hmis_record import NormalizedRecord, RawRow
from app.domain.months import month_number_from_name

logger = logging.getLogger(__name__)

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "month": ("month",),
    "year": ("year",),
    "category": ("category", "department"),
    "sub_category": ("subcategory", "sub_category", "sub category"),
    "metric": ("metric", "metric_name", "metric name"),
    "value": ("value", "metric_value", "amount"),
}

REQUIRED_FIELDS: tuple[str, ...] = ("month", "category", "metric")

_ACTUAL = "actual"
_EXPECTED = "expected"


def clean_text(value: Any) -> str:
    """
    Strip carriage returns and surrounding whitespace from any scalar.
    """

    if value is None:
        return ""
    return str(value).replace("\r", "").strip()


def clean_key(key: Any) -> str:
    return clean_text(key).lower()


def metric_stem(metric: str) -> str:
    """
    Lowercase a metric name and drop a leading ``actual ``/``expected ``.
    """

    lowered = clean_text(metric).lower()
    for prefix in (f"{_ACTUAL} ", f"{_EXPECTED} "):
        if lowered.startswith(prefix):
            return lowered[len(prefix):].strip()
    return lowered


def parse_value(raw: Any) -> float:
    """
    Parse a metric value; failures and non-finite results yield ``0.0``.
    """

    if isinstance(raw, bool):
        return float(raw)
    if isinstance(raw, (int, float)):
        try:
            number = float(raw)
        except OverflowError:
            logger.debug("Metric value out of float range %r; using 0", raw)
            return 0.0
    else:
        text = clean_text(raw).replace(",", "")
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            logger.debug("Unparseable metric value %r; using 0", raw)
            return 0.0
    return number if math.isfinite(number) else 0.0


def parse_month(raw: Any) -> int | str:
    """
    Resolve a month to 1-12 from a number or a month name.

    Fractional, out-of-range or unrecognised input is returned as cleaned
    text, which labels as ``"UNK"`` downstream.
    """

    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    text = clean_text(raw)
    try:
        number = int(text)
    except ValueError:
        by_name = month_number_from_name(text)
        return by_name if by_name is not None else text
    return number if 1 <= number <= 12 else text


def parse_year(raw: Any) -> int:
    text = clean_text(raw)
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        logger.debug("Unparseable year %r; using 0", raw)
        return 0


class RecordNormalizer:
    """
    Normalises raw rows field by field using ordered key aliases.
    """

    def __init__(self, *, aliases: Mapping[str, Sequence[str]] | None = None) -> None:
        self._aliases: dict[str, tuple[str, ...]] = {
            field_name: tuple(clean_key(alias) for alias in values)
            for field_name, values in (aliases or FIELD_ALIASES).items()
        }

    def lookup(self, row: RawRow, field_name: str) -> Any:
        """
        Return the first non-empty value among the field's aliases.
        """

        cleaned_keys = [(clean_key(key), key) for key in row.keys()]
        for alias in self._aliases.get(field_name, ()):
            for cleaned, original in cleaned_keys:
                if cleaned != alias:
                    continue
                candidate = row[original]
                if clean_text(candidate):
                    return candidate
        return None

    def normalize(self, row: RawRow) -> NormalizedRecord | None:
        """
        Convert one raw row, or return ``None`` when a mandatory field is absent.
        """

        if not isinstance(row, Mapping):
            logger.debug("Rejected non-mapping row %r", row)
            return None

        values = {field_name: self.lookup(row, field_name) for field_name in self._aliases}
        missing = [name for name in REQUIRED_FIELDS if not clean_text(values.get(name))]
        if missing:
            logger.debug("Rejected row missing %s: %r", ", ".join(missing), dict(row))
            return None

        category_label = clean_text(values["category"])
        sub_category = clean_text(values.get("sub_category")).lower()
        metric_label = clean_text(values["metric"])
        metric_lower = metric_label.lower()

        return NormalizedRecord(
            month=parse_month(values["month"]),
            year=parse_year(values.get("year")),
            category=category_label.lower(),
            sub_category=sub_category,
            metric=metric_stem(metric_label),
            value=parse_value(values.get("value")),
            is_actual=sub_category == _ACTUAL or metric_lower.startswith(_ACTUAL),
            is_expected=sub_category == _EXPECTED or metric_lower.startswith(_EXPECTED),
            category_label=category_label,
            metric_label=metric_label,
        )

    def normalize_all(self, rows: Iterable[RawRow]) -> list[NormalizedRecord]:
        records: list[NormalizedRecord] = []
        rejected = 0
        for row in rows:
            record = self.normalize(row)
            if record is None:
                rejected += 1
                continue
            records.append(record)
        if rejected:
            logger.debug("Normalised %d rows, rejected %d", len(records), rejected)
        return records
