"""
app/services/hmis_store_service.py

Service layer for the HMIS CSV store: JSON submissions, CSV uploads,
raw summary reads and the form catalogue.

Write-side normalisation (role mapping, month numbering) lives in
HMISRecordValidator; this module only orchestrates validation and
persistence.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import Any, BinaryIO

from app.config import CSVIngestionSettings
from app.domain.dashboards import DEPARTMENTS, FORM_CATALOG, ROLE_SUBCATEGORIES
from app.domain.hmis_record import HMISRecordInput, IngestionSummary, RowValidationError
from app.mappers.record_normalizer import FIELD_ALIASES, clean_key
from app.repositories.hmis_csv_repository import HMISCSVRepository
from app.validators.hmis_validator import HMISRecordValidator

logger = logging.getLogger(__name__)

# Normaliser field name -> submission key.
_UPLOAD_FIELDS: dict[str, str] = {
    "month": "month",
    "year": "year",
    "category": "category",
    "sub_category": "subCategory",
    "metric": "metric",
    "value": "value",
}
_REQUIRED_UPLOAD_FIELDS: tuple[str, ...] = ("month", "year", "category", "metric", "value")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class CSVHeaderValidationError(ValueError):
    """
    Raised when CSV shape/header validation fails.
    """


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class HMISStoreService:
    """
    Coordinates validation and persistence against one CSV store.
    """

    def __init__(
        self,
        *,
        repository: HMISCSVRepository,
        settings: CSVIngestionSettings | None = None,
        validator: HMISRecordValidator | None = None,
    ) -> None:
        settings = settings or CSVIngestionSettings()
        self._repository = repository
        self._batch_size = max(1, settings.batch_size)
        self._max_validation_errors = max(1, settings.max_validation_errors)
        self._log_validation_errors = settings.log_validation_errors
        self._validator = validator or HMISRecordValidator()

    @property
    def repository(self) -> HMISCSVRepository:
        return self._repository

    def submit(self, payload: Any) -> int:
        """
        Validate and append a JSON submission. Nothing is written on error.
        """

        records = self._validator.validate_batch(payload)
        written = self._repository.append_records(records)
        logger.info("HMIS submission stored rows=%d", written)
        return written

    def read_summary(self) -> list[dict[str, str | None]]:
        return self._repository.read_rows()

    def export_path(self) -> Path | None:
        """
        Path of the store for download, or ``None`` when it does not exist.
        """

        return self._repository.path if self._repository.exists() else None

    @staticmethod
    def catalog() -> dict[str, Any]:
        return {
            "categories": [
                {"category": category, "metrics": list(metrics)}
                for category, metrics in FORM_CATALOG.items()
            ],
            "roles": dict(ROLE_SUBCATEGORIES),
            "departments": list(DEPARTMENTS),
        }

    # ------------------------------------------------------------------
    # CSV upload
    # ------------------------------------------------------------------

    def ingest_csv(self, raw_file: BinaryIO) -> IngestionSummary:
        """
        Stream an uploaded CSV, skip invalid rows, and append valid rows in batches.
        """

        raw_file.seek(0)
        text_stream: io.TextIOWrapper | None = None

        rows_processed = 0
        rows_failed = 0
        captured_errors: list[RowValidationError] = []
        batch: list[HMISRecordInput] = []

        try:
            text_stream = io.TextIOWrapper(raw_file, encoding="utf-8-sig", newline="")
            reader = csv.DictReader(text_stream)
            headers = reader.fieldnames or []
            if not headers:
                raise CSVHeaderValidationError("CSV header row is missing.")
            columns = self._resolve_columns(headers)

            for row_number, raw_row in enumerate(reader, start=2):
                raw_row.pop(None, None)
                if self._validator.is_completely_empty_row(raw_row):
                    rows_failed += 1
                    self._record_error(
                        captured_errors,
                        RowValidationError(
                            row_number=row_number,
                            message="Completely empty rows are not allowed.",
                        ),
                    )
                    continue

                mapped = {key: raw_row.get(header) for key, header in columns.items()}
                record, row_errors = self._validator.validate_upload_row(
                    row=mapped,
                    row_number=row_number,
                )
                if row_errors or record is None:
                    rows_failed += 1
                    for error in row_errors:
                        self._record_error(captured_errors, error)
                    continue

                batch.append(record)
                if len(batch) >= self._batch_size:
                    rows_processed += self._repository.append_records(batch)
                    batch.clear()

            if batch:
                rows_processed += self._repository.append_records(batch)

        except UnicodeDecodeError as exc:
            raise CSVHeaderValidationError("CSV must be UTF-8 encoded.") from exc
        except csv.Error as exc:
            raise CSVHeaderValidationError(f"Invalid CSV format: {exc}") from exc
        finally:
            if text_stream is not None:
                try:
                    text_stream.detach()
                except ValueError:
                    pass

        logger.info(
            "CSV upload complete rows_processed=%d rows_failed=%d",
            rows_processed,
            rows_failed,
        )
        return IngestionSummary(
            rows_processed=rows_processed,
            rows_failed=rows_failed,
            validation_errors=captured_errors,
        )

    @staticmethod
    def _resolve_columns(headers: list[str]) -> dict[str, str]:
        """
        Map submission keys to the upload's own header names.

        Matching is case and whitespace insensitive and follows the same
        alias order as the read-side normaliser.
        """

        by_key: dict[str, str] = {}
        for header in headers:
            by_key.setdefault(clean_key(header), header)

        columns: dict[str, str] = {}
        for field_name, submission_key in _UPLOAD_FIELDS.items():
            for alias in FIELD_ALIASES[field_name]:
                header = by_key.get(clean_key(alias))
                if header is not None:
                    columns[submission_key] = header
                    break

        missing = [name for name in _REQUIRED_UPLOAD_FIELDS if name not in columns]
        if missing:
            raise CSVHeaderValidationError(
                f"CSV is missing required column(s): {', '.join(missing)}."
            )
        return columns

    def _record_error(
        self,
        captured_errors: list[RowValidationError],
        error: RowValidationError,
    ) -> None:
        if self._log_validation_errors:
            logger.debug(
                "CSV validation error row=%s column=%s message=%s value=%r",
                error.row_number,
                error.column,
                error.message,
                error.value,
            )

        if len(captured_errors) < self._max_validation_errors:
            captured_errors.append(error)
