# src/memo/engine/scan.py

"""
Store file scanning utilities.

This module is responsible for:
- counting records in the store,
- yielding raw lines and parsed records in file order (oldest first).

It performs *no writes*, except for ensure_store(), which the command
layer calls once to create an empty store up front.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from .errors import EmptyStore, MalformedRecord, StoreIOError, StoreNotFound
from .model import Record, StoreFile
from .parse import STORE_ENCODING, STORE_ERRORS, parse_record

logger = logging.getLogger("memo.scan")


# ---------------------------------------------------------------------
# Raw lines
# ---------------------------------------------------------------------

def iter_lines(store: StoreFile) -> Iterator[str]:
    """
    Yield raw store lines in file order.

    Lines are split on "\\n" only and only that character is removed, so a
    CRLF line keeps its "\\r" and a lone "\\r" stays inside its line. Bytes
    that are not UTF-8 are kept as surrogate escapes; parse_record() rejects
    such lines and rewrite() writes them back unchanged.

    The sequence is lazy and single-pass; call again to restart. The file
    handle is closed when the generator is exhausted, closed or garbage
    collected, and on read errors.
    """
    try:
        f = open(store.path, "r", encoding=STORE_ENCODING, errors=STORE_ERRORS, newline="\n")
    except FileNotFoundError as e:
        raise StoreNotFound(f"Store not found: {store.path}") from e
    except OSError as e:
        raise StoreIOError(f"Cannot open store {store.path}: {e}") from e

    with f:
        try:
            for raw in f:
                yield raw[:-1] if raw.endswith("\n") else raw
        except OSError as e:
            raise StoreIOError(f"Cannot read store {store.path}: {e}") from e


def line_count(store: StoreFile, *, allow_empty: bool = False) -> int:
    """
    Return the number of records in the store.

    Blank and malformed lines are not counted.

    An empty store raises EmptyStore unless `allow_empty` is set.
    """
    count = sum(1 for _ in iter_records(store))

    if count == 0 and not allow_empty:
        raise EmptyStore(f"No notes in {store.path}")

    return count


# ---------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------

def iter_records(store: StoreFile) -> Iterator[Record]:
    """
    Yield parsed records in file order.

    Blank lines are ignored; malformed lines are logged and skipped so one
    damaged line never blocks access to the rest of the store.
    """
    for lineno, line in enumerate(iter_lines(store), start=1):
        if not line.strip():
            continue

        try:
            yield parse_record(line)
        except MalformedRecord as e:
            logger.warning("%s:%d: skipping line: %s", store.path, lineno, e)


# ---------------------------------------------------------------------
# Initialisation
# ---------------------------------------------------------------------

def ensure_store(store: StoreFile) -> Path:
    """
    Ensure the store file exists, creating an empty one if needed.
    """
    path = Path(store.path)
    if path.is_file():
        return path

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(exist_ok=True)
    except OSError as e:
        raise StoreIOError(f"Cannot create store {path}: {e}") from e

    logger.info("created empty store at %s", path)
    return path
