# src/memo/engine/ops.py

"""
Store-level write operations.

This module contains:
- the atomic rewriter every in-place mutation goes through,
- id allocation and renumbering (reorganize),
- record creation (append), deletion and field replacement.

Status transitions live in actions.py; they are built on rewrite().
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Optional

from .errors import MalformedRecord, StoreIOError, StoreNotFound
from .model import Record, Status, StoreFile
from .parse import (
    STORE_ENCODING,
    STORE_ERRORS,
    clean_content,
    format_date,
    is_decodable,
    parse_date,
    parse_record,
    serialize_record,
)
from .scan import iter_lines, iter_records

logger = logging.getLogger("memo.ops")

LineTransform = Callable[[str], Optional[str]]
RecordTransform = Callable[[Record], Optional[Record]]


# ---------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------

def _today() -> date:
    """Return today's date (isolated for testability)."""
    return date.today()


def _require_content(content: str) -> str:
    text = clean_content(content)
    if not text:
        raise ValueError("content must be a non-empty string")
    if not is_decodable(text):
        raise ValueError("content is not valid UTF-8")
    return text


def _remove_quietly(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("could not remove temp file %s: %s", path, e)


# ---------------------------------------------------------------------
# Atomic rewrite
# ---------------------------------------------------------------------

def rewrite(store: StoreFile, transform: LineTransform) -> None:
    """
    Rewrite the whole store through `transform` and swap it in atomically.

    For every input line (trailing "\\n" removed) `transform` returns the line to
    write, or None to drop it. The replacement is written to
    `store.tmp_path`, fsynced and renamed over the original in a single
    os.replace(). If anything fails before the rename, the temp file is
    removed and the original store is left untouched.
    """
    if not os.path.isfile(store.path):
        raise StoreNotFound(f"Store not found: {store.path}")

    try:
        with open(store.tmp_path, "w", encoding=STORE_ENCODING, errors=STORE_ERRORS, newline="") as out:
            for line in iter_lines(store):
                new_line = transform(line)
                if new_line is None:
                    continue
                out.write(new_line + "\n")
            out.flush()
            os.fsync(out.fileno())

        os.replace(store.tmp_path, store.path)
    except OSError as e:
        _remove_quietly(store.tmp_path)
        raise StoreIOError(f"Cannot rewrite store {store.path}: {e}") from e
    except BaseException:
        _remove_quietly(store.tmp_path)
        raise

    logger.debug("rewrote %s", store.path)


def map_records(fn: RecordTransform) -> LineTransform:
    """
    Lift a Record-level transform to a line-level one.

    Lines that do not parse, and records that `fn` returns unchanged, are
    passed through byte-for-byte. Returning None drops the record.
    """

    def transform(line: str) -> Optional[str]:
        if not line.strip():
            return line

        try:
            record = parse_record(line)
        except MalformedRecord:
            return line

        new = fn(record)
        if new is None:
            return None
        if new == record and new.status_token == record.status_token:
            return line
        # A CRLF line keeps its terminator when rewritten.
        return serialize_record(new) + ("\r" if line.endswith("\r") else "")

    return transform


def rewrite_records(store: StoreFile, fn: RecordTransform) -> int:
    """
    Rewrite the store record by record; return how many records changed
    or were dropped.
    """
    changed = 0

    def counting(record: Record) -> Optional[Record]:
        nonlocal changed
        new = fn(record)
        if new != record:
            changed += 1
        return new

    rewrite(store, map_records(counting))
    return changed


# ---------------------------------------------------------------------
# Id allocation
# ---------------------------------------------------------------------

def next_id(store: StoreFile) -> int:
    """
    Return the id for the next record: last record's id + 1, or 1.

    Append-only growth keeps the last record the highest. If a manual
    edit broke that, the highest id wins so ids never collide.
    """
    last = 0
    highest = 0

    for record in iter_records(store):
        last = record.record_id
        highest = max(highest, last)

    if last != highest:
        logger.warning(
            "last record id %d is not the highest id %d in %s; allocating from the highest",
            last,
            highest,
            store.path,
        )

    return highest + 1


def reorganize(store: StoreFile) -> int:
    """
    Renumber records 1..N in file order; return N.

    Breaks any external reference to previous ids, so it only ever runs
    when asked for explicitly.
    """
    counter = 0

    def renumber(record: Record) -> Record:
        nonlocal counter
        counter += 1
        return replace(record, record_id=counter)

    rewrite(store, map_records(renumber))
    logger.info("reorganized %s: %d records", store.path, counter)
    return counter


# ---------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------

def add_record(store: StoreFile, content: str, *, when: Optional[str] = None) -> Record:
    """
    Append a new Undone record and return it.

    `when` is an optional explicit YYYY-MM-DD date; today is used otherwise.
    """
    text = _require_content(content)

    day = parse_date(when) if when is not None else _today()

    path = Path(store.path)
    if not path.is_file():
        raise StoreNotFound(f"Store not found: {store.path}")

    record = Record(
        record_id=next_id(store),
        status=Status.UNDONE,
        date=format_date(day),
        content=text,
    )
    record.validate()

    try:
        needs_newline = _missing_trailing_newline(path)
        with open(path, "a", encoding=STORE_ENCODING, errors=STORE_ERRORS, newline="") as f:
            if needs_newline:
                f.write("\n")
            f.write(serialize_record(record) + "\n")
    except OSError as e:
        raise StoreIOError(f"Cannot append to store {path}: {e}") from e

    logger.debug("added record %d to %s", record.record_id, path)
    return record


def _missing_trailing_newline(path: Path) -> bool:
    size = path.stat().st_size
    if size == 0:
        return False

    with open(path, "rb") as f:
        f.seek(size - 1)
        return f.read(1) != b"\n"


# ---------------------------------------------------------------------
# Deletion / replacement
# ---------------------------------------------------------------------

def delete_record(store: StoreFile, record_id: int) -> bool:
    """
    Drop the record with `record_id`. Return True if a record was removed.
    """
    removed = rewrite_records(
        store,
        lambda r: None if r.record_id == record_id else r,
    )
    return removed > 0


def delete_all(store: StoreFile) -> bool:
    """
    Remove the whole store file. Return True if a file was removed.

    Confirmation is the caller's business.
    """
    try:
        os.remove(store.path)
    except FileNotFoundError:
        return False
    except OSError as e:
        raise StoreIOError(f"Cannot delete store {store.path}: {e}") from e

    _remove_quietly(store.tmp_path)
    logger.info("deleted store %s", store.path)
    return True


def replace_content(store: StoreFile, record_id: int, content: str) -> bool:
    """
    Replace the content of one record. Return True if it changed.
    """
    text = _require_content(content)

    changed = rewrite_records(
        store,
        lambda r: replace(r, content=text) if r.record_id == record_id else r,
    )
    return changed > 0


def replace_date(store: StoreFile, record_id: int, when: str) -> bool:
    """
    Replace the date of one record. Return True if it changed.
    """
    day = format_date(parse_date(when))

    changed = rewrite_records(
        store,
        lambda r: replace(r, date=day) if r.record_id == record_id else r,
    )
    return changed > 0
