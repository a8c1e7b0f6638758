# src/memo/engine/parse.py

"""
Record codec.

Parses one store line into a Record and serializes a Record back into
one line. Line layout:

    <id>\\t<status>\\t<date>\\t<content>

The content field is the remainder of the line and may itself contain
tabs. Neither function deals with the trailing newline beyond ignoring
it on input.
"""

from datetime import date
from typing import Final

from .errors import InvalidDate, MalformedRecord
from .model import Record, Status


# ---------------------------------------------------------------------
# Layout constants
# ---------------------------------------------------------------------

FIELD_SEP: Final[str] = "\t"
FIELD_COUNT: Final[int] = 4

# Undecodable bytes survive a read/rewrite cycle as surrogate escapes.
STORE_ENCODING: Final[str] = "utf-8"
STORE_ERRORS: Final[str] = "surrogateescape"


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def parse_record(line: str) -> Record:
    """
    Parse a single store line into a Record.

    Unknown status tokens are tolerated (Status.INVALID); everything
    else that does not fit the layout raises MalformedRecord.
    """
    raw = line.rstrip("\r\n")

    if not is_decodable(raw):
        raise MalformedRecord(raw, "Line is not valid UTF-8")

    parts = raw.split(FIELD_SEP, FIELD_COUNT - 1)

    if len(parts) < FIELD_COUNT:
        raise MalformedRecord(raw, f"Expected {FIELD_COUNT} tab-separated fields, got {len(parts)}")

    id_s, status_s, date_s, content = parts

    try:
        record_id = int(id_s.strip())
    except ValueError as e:
        raise MalformedRecord(raw, f"Record id '{id_s}' is not an integer") from e

    if record_id < 1:
        raise MalformedRecord(raw, f"Record id must be positive, got {record_id}")

    status = Status.from_token(status_s)

    return Record(
        record_id=record_id,
        status=status,
        date=date_s,
        content=content,
        raw_status=status_s if status is Status.INVALID else None,
    )


def serialize_record(record: Record) -> str:
    """
    Render a Record as one store line (without trailing newline).
    """
    return FIELD_SEP.join(
        [
            str(record.record_id),
            record.status_token,
            record.date,
            record.content,
        ]
    )


# ---------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------

def clean_content(text: str) -> str:
    """
    Remove embedded newlines so the one-line-per-record layout holds.
    """
    return text.replace("\r", "").replace("\n", "").strip()


def parse_date(text: str) -> date:
    """
    Parse a YYYY-MM-DD date.

    Parts are read numerically, so non-padded values ("2014-1-2") are
    accepted; month range and day count (leap years included) are checked.
    """
    s = (text or "").strip()
    parts = s.split("-")
    if len(parts) != 3:
        raise InvalidDate(s, "expected YYYY-MM-DD")

    try:
        year, month, day = (int(p) for p in parts)
    except ValueError as e:
        raise InvalidDate(s, "year, month and day must be numbers") from e

    if year < 1:
        raise InvalidDate(s, "year must be positive")

    if not 1 <= month <= 12:
        raise InvalidDate(s, f"month {month} is out of range")

    try:
        return date(year, month, day)
    except ValueError as e:
        raise InvalidDate(s, str(e)) from e


def is_date(text: str) -> bool:
    """Return True if `text` is a valid calendar date."""
    try:
        parse_date(text)
    except InvalidDate:
        return False
    return True


def format_date(value: date) -> str:
    return value.isoformat()


def is_decodable(text: str) -> bool:
    """Return False if `text` carries surrogate escapes of undecodable bytes."""
    return not any("\udc80" <= ch <= "\udcff" for ch in text)
