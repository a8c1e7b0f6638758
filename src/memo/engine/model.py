# src/memo/engine/model.py

"""
Core domain models.

This module defines the in-memory representations of records and of the
store location, along with status encoding and default ordering rules.

No filesystem access should happen here.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional


# ---------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------

class Status(str, Enum):
    """
    Record status, stored as a single character.

    INVALID stands for any token written by hand that is not one of
    U/D/P. It is never written back on its own (see Record.status_token).
    """

    UNDONE = "U"
    DONE = "D"
    POSTPONED = "P"
    INVALID = "?"

    @classmethod
    def from_token(cls, token: str) -> "Status":
        """Map a stored token to a Status; unknown tokens become INVALID."""
        for status in (cls.UNDONE, cls.DONE, cls.POSTPONED):
            if token == status.value:
                return status
        return cls.INVALID

    @classmethod
    def sort_key(cls, status: "Status") -> int:
        """
        Return numeric rank for status ordering.

        undone > postponed > done > invalid
        """
        order = {
            cls.UNDONE: 0,
            cls.POSTPONED: 1,
            cls.DONE: 2,
            cls.INVALID: 3,
        }
        return order[status]


# ---------------------------------------------------------------------
# Record
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Record:
    """
    One line of the store.

    Notes:
    - record_id is unique within the store but not necessarily contiguous.
    - date is kept as text so hand-edited, non-padded or broken dates
      survive a rewrite; use parse.parse_date() for calendar values.
    - raw_status keeps the original token of an INVALID status.
    """

    record_id: int
    status: Status
    date: str
    content: str

    raw_status: Optional[str] = field(default=None, compare=False, repr=False)

    def validate(self) -> None:
        """
        Validate invariants independent of the store file.
        """
        if self.record_id < 1:
            raise ValueError("record_id must be a positive integer")

        if not self.content.strip():
            raise ValueError("content must be a non-empty string")

        if "\n" in self.content or "\r" in self.content:
            raise ValueError("content must be a single line")

    @property
    def status_token(self) -> str:
        if self.status is Status.INVALID and self.raw_status is not None:
            return self.raw_status
        return self.status.value

    @property
    def is_done(self) -> bool:
        return self.status is Status.DONE

    @property
    def is_postponed(self) -> bool:
        return self.status is Status.POSTPONED


# ---------------------------------------------------------------------
# Store location
# ---------------------------------------------------------------------

TMP_SUFFIX = ".tmp"


@dataclass(frozen=True, slots=True)
class StoreFile:
    """
    Location of the record file and of its rewrite sibling.
    """

    path: str
    tmp_path: str

    def __post_init__(self) -> None:
        if not self.path or not self.path.strip():
            raise ValueError("path must be a non-empty string")

        if self.tmp_path == self.path:
            raise ValueError("tmp_path must differ from path")

    @classmethod
    def at(cls, path: str) -> "StoreFile":
        """Build a StoreFile whose temp file sits next to `path`."""
        return cls(path=str(path), tmp_path=str(path) + TMP_SUFFIX)


# ---------------------------------------------------------------------
# Ordering helpers
# ---------------------------------------------------------------------

# Dates that cannot be read numerically sort after every real date.
_UNREADABLE_DATE = (10000, 0, 0)


def date_key(text: str) -> tuple[int, int, int]:
    """
    Numeric (year, month, day) sort key for a stored date string.

    Comparison is numeric so that "2014-1-2" orders before "2014-01-10".
    """
    parts = text.strip().split("-")
    if len(parts) != 3:
        return _UNREADABLE_DATE

    try:
        year, month, day = (int(p) for p in parts)
    except ValueError:
        return _UNREADABLE_DATE

    return year, month, day


def sort_records(records: Iterable[Record]) -> list[Record]:
    """
    Ordering for a status overview:

    1. Status priority (undone > postponed > done > invalid)
    2. date (older first)
    3. record_id (stable tie-breaker)
    """
    return sorted(
        records,
        key=lambda r: (
            Status.sort_key(r.status),
            date_key(r.date),
            r.record_id,
        ),
    )
