# src/memo/engine/errors.py

"""
Error kinds raised by the note-store engine.

Codec-level errors (MalformedRecord, InvalidDate) carry the offending
value so callers can report it; store-level errors wrap the path.
"""

from dataclasses import dataclass


class MemoError(Exception):
    """Base class for all engine errors."""


# ---------------------------------------------------------------------
# Store-level
# ---------------------------------------------------------------------

class StoreNotFound(MemoError):
    """The store file (or its temp sibling's directory) does not exist."""


class StoreIOError(MemoError):
    """Read, write or rename failure on the store."""


class EmptyStore(MemoError):
    """
    The store exists but holds no records.

    Read operations treat this as "nothing to show", not as a failure.
    """


class InvalidPattern(MemoError):
    """A regular expression failed to compile."""


# ---------------------------------------------------------------------
# Codec-level
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class MalformedRecord(MemoError):
    """
    Raised when a line cannot be split into id, status, date and content.
    """

    line: str
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.line!r}"


@dataclass(frozen=True, slots=True)
class InvalidDate(MemoError):
    """
    Raised when a date string is not a valid YYYY-MM-DD calendar date.
    """

    value: str
    message: str

    def __str__(self) -> str:
        return f"Invalid date '{self.value}': {self.message}"
