"""
app/repositories/hmis_csv_repository.py

Persistence layer for the append-only HMIS CSV store.

The file starts with the ``Month,Year,Category,SubCategory,Metric,Value``
header and only ever grows. Appends are serialised through a process-wide
lock per path; readers see whole rows only because each batch is written
in a single ``write`` call.
"""

from __future__ import annotations

import csv
import io
import logging
import threading
from collections.abc import Sequence
from pathlib import Path

from app.domain.hmis_record import STORE_HEADERS, HMISRecordInput

logger = logging.getLogger(__name__)

_LOCKS: dict[Path, threading.Lock] = {}
_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _LOCKS_GUARD:
        return _LOCKS.setdefault(path, threading.Lock())


class HMISStoreError(RuntimeError):
    """
    Raised when the CSV store cannot be read or written.
    """


def encode_rows(rows: Sequence[Sequence[str]]) -> str:
    """
    Render rows as CSV text: quotes doubled, fields with a comma, quote or
    newline wrapped in quotes, one ``\\n`` per row.
    """

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


class HMISCSVRepository:
    """
    Repository over one CSV store file.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._lock = _lock_for(self._path.resolve())

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def ensure_exists(self) -> bool:
        """
        Create the store with its header row when missing.

        Returns ``True`` when the file was created by this call.
        """

        with self._lock:
            return self._ensure_exists_locked()

    def _ensure_exists_locked(self) -> bool:
        if self._path.exists():
            return False
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("w", encoding="utf-8", newline="") as handle:
                handle.write(encode_rows([STORE_HEADERS]))
        except OSError as exc:
            logger.error("Failed to create CSV store path=%s error=%s", self._path, exc)
            raise HMISStoreError(f"Failed to create CSV store at {self._path}.") from exc
        logger.info("Created CSV store with headers path=%s", self._path)
        return True

    def append_records(self, records: Sequence[HMISRecordInput]) -> int:
        """
        Append already-normalised records in one write. Returns rows written.
        """

        if not records:
            return 0

        payload = encode_rows([record.as_row() for record in records])
        with self._lock:
            self._ensure_exists_locked()
            try:
                with self._path.open("a", encoding="utf-8", newline="") as handle:
                    handle.write(payload)
            except OSError as exc:
                logger.error("Failed to append to CSV store path=%s error=%s", self._path, exc)
                raise HMISStoreError("Failed to save data to CSV") from exc

        logger.info("Appended rows to CSV store path=%s count=%d", self._path, len(records))
        return len(records)

    def read_rows(self) -> list[dict[str, str | None]]:
        """
        Return every data row keyed by the persisted header.

        An absent store reads as empty. Cells beyond the header are dropped;
        missing trailing cells read as ``None``.
        """

        if not self._path.exists():
            return []
        try:
            with self._path.open("r", encoding="utf-8-sig", newline="") as handle:
                reader = csv.DictReader(handle)
                rows = []
                for row in reader:
                    row.pop(None, None)
                    if any(value not in (None, "") for value in row.values()):
                        rows.append(row)
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            logger.error("Failed to read CSV store path=%s error=%s", self._path, exc)
            raise HMISStoreError("Failed to read summary") from exc

        logger.debug("Read CSV store path=%s rows=%d", self._path, len(rows))
        return rows
