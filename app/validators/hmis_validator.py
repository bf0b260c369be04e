"""
app/validators/hmis_validator.py

Write-side validation and normalisation for HMIS submissions.

Two entry points share the same cell normalisation:

- ``validate_batch`` for JSON submissions: all-or-nothing, the first
  missing key rejects the whole batch.
- ``validate_upload_row`` for CSV uploads: row-by-row, invalid rows are
  reported and skipped.

Before persistence the role-based sub-category is mapped
(``Staff`` -> ``Actual``, ``Stakeholder`` -> ``Expected``) and month names
become two-digit numbers. Unknown month strings are stored as given.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Sequence

from app.domain.dashboards import ROLE_SUBCATEGORIES
from app.domain.hmis_record import HMISRecordInput, RowValidationError
from app.domain.months import month_number_from_name

SUBMISSION_FIELDS: tuple[str, ...] = ("month", "year", "category", "subCategory", "metric", "value")

_MONTH_CELLS: frozenset[str] = frozenset(f"{number:02d}" for number in range(1, 13))


class HMISPayloadError(ValueError):
    """
    Raised when a JSON submission cannot be accepted.
    """


def to_cell(value: Any) -> str:
    """
    Render a JSON scalar the way it is written to the store.
    """

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_month(value: Any) -> str:
    """
    ``"March"``/``"mar"``/``3``/``"3"`` -> ``"03"``; anything else unchanged.
    """

    text = to_cell(value)
    stripped = text.strip()
    if stripped.isdigit():
        number = int(stripped)
        return f"{number:02d}" if 1 <= number <= 12 else text
    by_name = month_number_from_name(stripped)
    return f"{by_name:02d}" if by_name is not None else text


def map_role(sub_category: Any) -> str:
    text = to_cell(sub_category)
    return ROLE_SUBCATEGORIES.get(text.strip(), text)


class HMISRecordValidator:
    """
    Validates submissions and produces store-ready ``HMISRecordInput`` rows.
    """

    def build_record(self, record: Mapping[str, Any]) -> HMISRecordInput:
        return HMISRecordInput(
            month=normalize_month(record.get("month")),
            year=to_cell(record.get("year")),
            category=to_cell(record.get("category")),
            sub_category=map_role(record.get("subCategory")),
            metric=to_cell(record.get("metric")),
            value=to_cell(record.get("value")),
        )

    def validate_batch(self, payload: Any) -> list[HMISRecordInput]:
        """
        Validate a whole JSON submission or raise ``HMISPayloadError``.
        """

        if not isinstance(payload, list) or not payload:
            raise HMISPayloadError("Expected non-empty array in request body")

        for record in payload:
            if not isinstance(record, Mapping):
                raise HMISPayloadError("Expected non-empty array in request body")
            for key in SUBMISSION_FIELDS:
                if key not in record:
                    raise HMISPayloadError(f"Missing field '{key}' in one of the records")

        return [self.build_record(record) for record in payload]

    # ------------------------------------------------------------------
    # Upload rows
    # ------------------------------------------------------------------

    def is_completely_empty_row(self, row: Mapping[str, Any]) -> bool:
        return all(self._is_blank(value) for value in row.values())

    def validate_upload_row(
        self,
        *,
        row: Mapping[str, str | None],
        row_number: int,
    ) -> tuple[HMISRecordInput | None, list[RowValidationError]]:
        """
        Validate one upload row already keyed by submission field name.
        """

        errors: list[RowValidationError] = []
        for column in ("month", "year", "category", "metric", "value"):
            if self._is_blank(row.get(column)):
                errors.append(
                    RowValidationError(
                        row_number=row_number,
                        column=column,
                        message="Required value is missing.",
                        value=self._stringify_value(row.get(column)),
                    )
                )

        month = row.get("month")
        if not self._is_blank(month) and normalize_month(str(month).strip()) not in _MONTH_CELLS:
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column="month",
                    message="Month must be a month name or a number from 1 to 12.",
                    value=self._stringify_value(month),
                )
            )

        year = row.get("year")
        if not self._is_blank(year) and not str(year).strip().isdigit():
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column="year",
                    message="Year must be a whole number.",
                    value=self._stringify_value(year),
                )
            )

        value = row.get("value")
        if not self._is_blank(value) and not self._is_number(str(value)):
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    column="value",
                    message="Value must be numeric.",
                    value=self._stringify_value(value),
                )
            )

        if errors:
            return None, errors

        cleaned = {key: str(item).strip() for key, item in row.items() if item is not None}
        return self.build_record(cleaned), []

    @staticmethod
    def _is_number(text: str) -> bool:
        try:
            return math.isfinite(float(text.strip().replace(",", "")))
        except ValueError:
            return False

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        if isinstance(value, (list, tuple)):
            return all(str(item).strip() == "" for item in value)
        return str(value).strip() == ""

    @staticmethod
    def _stringify_value(value: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, Sequence) and not isinstance(value, str):
            return ",".join(str(item) for item in value)
        return str(value)
