"""
app/domain/months.py

Shared calendar table: month number <-> abbreviation <-> full name.

Every component that needs month names or month ordering references this
module instead of keeping its own copy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class MonthInfo:
    """
    One row of the calendar table.
    """

    number: int
    abbrev: str
    name: str


MONTHS: Final[tuple[MonthInfo, ...]] = (
    MonthInfo(1, "Jan", "January"),
    MonthInfo(2, "Feb", "February"),
    MonthInfo(3, "Mar", "March"),
    MonthInfo(4, "Apr", "April"),
    MonthInfo(5, "May", "May"),
    MonthInfo(6, "Jun", "June"),
    MonthInfo(7, "Jul", "July"),
    MonthInfo(8, "Aug", "August"),
    MonthInfo(9, "Sep", "September"),
    MonthInfo(10, "Oct", "October"),
    MonthInfo(11, "Nov", "November"),
    MonthInfo(12, "Dec", "December"),
)

UNKNOWN_MONTH: Final[str] = "UNK"

MONTH_ABBREVIATIONS: Final[tuple[str, ...]] = tuple(month.abbrev for month in MONTHS)
MONTH_NAMES: Final[tuple[str, ...]] = tuple(month.name for month in MONTHS)

_BY_NUMBER: Final[dict[int, MonthInfo]] = {month.number: month for month in MONTHS}
_BY_TEXT: Final[dict[str, MonthInfo]] = {
    **{month.name.lower(): month for month in MONTHS},
    **{month.abbrev.lower(): month for month in MONTHS},
}


def month_by_number(number: int) -> MonthInfo | None:
    return _BY_NUMBER.get(number)


def month_number_from_name(name: str) -> int | None:
    """
    Resolve a full or three-letter month name (any case) to 1-12.
    """

    info = _BY_TEXT.get(name.strip().lower())
    return info.number if info else None


def month_index(abbrev: str) -> int:
    """
    Zero-based calendar position of an abbreviation; -1 when unknown.
    """

    try:
        return MONTH_ABBREVIATIONS.index(abbrev)
    except ValueError:
        return -1


def month_label(month: int | str | None, year: int) -> str:
    """
    Build the ``"{Abbrev}-{YY}"`` grouping key for a month/year pair.

    Anything that is not an integer 1-12 becomes ``"UNK"``.
    """

    info = month_by_number(month) if isinstance(month, int) else None
    abbrev = info.abbrev if info else UNKNOWN_MONTH
    return f"{abbrev}-{abs(year) % 100:02d}"
