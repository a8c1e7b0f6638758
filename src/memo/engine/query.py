# src/memo/engine/query.py

"""
Read-only views over the store.

Every query re-reads the store file, so results always reflect what is
on disk. A store without records raises EmptyStore, which callers turn
into a "no notes" message.

Postponed records are included unless `include_postponed=False`; the
command layer decides whether a listing hides them.
"""

import re
from collections import deque
from collections.abc import Iterable, Iterator
from typing import Optional

from .errors import EmptyStore, InvalidPattern
from .model import Record, StoreFile, date_key
from .parse import serialize_record
from .scan import iter_records


# ---------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------

def _records(store: StoreFile, include_postponed: bool) -> Iterator[Record]:
    """
    Yield records in file order; raise EmptyStore if there are none.
    """
    seen = False
    for record in iter_records(store):
        seen = True
        if not include_postponed and record.is_postponed:
            continue
        yield record

    if not seen:
        raise EmptyStore(f"No notes in {store.path}")


def _filter(records: Iterable[Record], match) -> list[Record]:
    return [r for r in records if match(serialize_record(r))]


# ---------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------

def all_records(store: StoreFile, *, include_postponed: bool = True) -> list[Record]:
    """Return every record in file order."""
    return list(_records(store, include_postponed))


def get_record(store: StoreFile, record_id: int) -> Optional[Record]:
    """Return the first record with `record_id`, or None."""
    for record in iter_records(store):
        if record.record_id == record_id:
            return record
    return None


def latest(store: StoreFile, n: int, *, include_postponed: bool = True) -> list[Record]:
    """
    Return the last `n` records in file order (oldest first).

    A negative `n`, or one at least as large as the record count, returns
    every record.
    """
    records = _records(store, include_postponed)
    if n < 0:
        return list(records)
    return list(deque(records, maxlen=n))


# ---------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------

def search(store: StoreFile, term: str, *, include_postponed: bool = True) -> list[Record]:
    """
    Case-insensitive substring search.

    `term` is split on whitespace; a record matches if any token occurs
    in its serialized line. A blank term matches nothing.
    """
    tokens = [t.casefold() for t in term.split()]
    records = _records(store, include_postponed)

    if not tokens:
        # Still drain the scan so an empty store is reported.
        for _ in records:
            pass
        return []

    def match(line: str) -> bool:
        folded = line.casefold()
        return any(t in folded for t in tokens)

    return _filter(records, match)


def search_regex(store: StoreFile, pattern: str, *, include_postponed: bool = True) -> list[Record]:
    """
    Case-insensitive regular expression search over serialized lines.

    The pattern is compiled before the store is opened.
    """
    try:
        rx = re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise InvalidPattern(f"Invalid pattern '{pattern}': {e}") from e

    return _filter(_records(store, include_postponed), lambda line: rx.search(line) is not None)


# ---------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------

def group_by_date(
    store: StoreFile,
    *,
    include_postponed: bool = True,
) -> list[tuple[str, list[Record]]]:
    """
    Group records by date, dates ascending.

    Dates are compared numerically (year, month, day); dates that cannot
    be read sort last. Within a group, records keep file order.
    """
    groups: dict[str, list[Record]] = {}
    for record in _records(store, include_postponed):
        groups.setdefault(record.date, []).append(record)

    ordered = sorted(groups, key=date_key)
    return [(d, groups[d]) for d in ordered]
