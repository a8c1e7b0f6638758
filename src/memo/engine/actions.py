# src/memo/engine/actions.py

"""
Status mutation actions.

This module contains all status-changing operations on the store:
single-record transitions and the bulk variants (mark all done, delete
done, auto-mark-done by date).

Design principles:
- Every change goes through ops.rewrite(); nothing is edited in place.
- Records a transition does not touch are written back byte-for-byte.
- Unknown ids are not an error: the rewrite succeeds and reports False.
"""

import logging
from dataclasses import replace
from datetime import date
from enum import Enum
from typing import Optional

from .model import Record, Status, StoreFile, date_key
from .ops import delete_record, rewrite_records

logger = logging.getLogger("memo.actions")


# ---------------------------------------------------------------------
# Transition table
# ---------------------------------------------------------------------

class StatusOp(str, Enum):
    SET_DONE = "done"
    SET_UNDONE = "undone"
    POSTPONE = "postpone"


_TRANSITIONS: dict[tuple[Status, StatusOp], Status] = {
    (Status.UNDONE, StatusOp.SET_DONE): Status.DONE,
    (Status.UNDONE, StatusOp.SET_UNDONE): Status.UNDONE,
    (Status.UNDONE, StatusOp.POSTPONE): Status.POSTPONED,
    (Status.DONE, StatusOp.SET_DONE): Status.DONE,
    (Status.DONE, StatusOp.SET_UNDONE): Status.UNDONE,
    (Status.DONE, StatusOp.POSTPONE): Status.DONE,
    (Status.POSTPONED, StatusOp.SET_DONE): Status.DONE,
    (Status.POSTPONED, StatusOp.SET_UNDONE): Status.UNDONE,
    (Status.POSTPONED, StatusOp.POSTPONE): Status.POSTPONED,
    # A hand-edited, unknown status can be repaired but not postponed.
    (Status.INVALID, StatusOp.SET_DONE): Status.DONE,
    (Status.INVALID, StatusOp.SET_UNDONE): Status.UNDONE,
    (Status.INVALID, StatusOp.POSTPONE): Status.INVALID,
}


def transition(status: Status, op: StatusOp) -> Status:
    """
    Return the status reached by applying `op` to `status`.
    """
    return _TRANSITIONS[(status, op)]


def _apply(record: Record, op: StatusOp) -> Record:
    new_status = transition(record.status, op)
    if new_status is record.status:
        return record
    return replace(record, status=new_status)


# ---------------------------------------------------------------------
# Public actions
# ---------------------------------------------------------------------

def mark_status(store: StoreFile, record_id: int, op: StatusOp) -> bool:
    """
    Apply `op` to the record with `record_id`.

    Returns True if the record's status changed. Illegal transitions
    (postponing a done record, for example) leave the file unchanged.
    """
    changed = rewrite_records(
        store,
        lambda r: _apply(r, op) if r.record_id == record_id else r,
    )

    if not changed:
        logger.debug("mark %s on id %d: nothing changed", op.value, record_id)

    return changed > 0


def mark_all_done(store: StoreFile) -> int:
    """
    Force every record to Done. Returns how many records changed.
    """
    return rewrite_records(
        store,
        lambda r: r if r.is_done else replace(r, status=Status.DONE),
    )


def delete_done(store: StoreFile) -> int:
    """
    Drop every Done record. Returns how many records were removed.
    """
    return rewrite_records(store, lambda r: None if r.is_done else r)


def delete_by_id(store: StoreFile, record_id: int) -> bool:
    """
    Drop exactly the matching record (a filter, not a status edit).
    """
    return delete_record(store, record_id)


def auto_mark_done(store: StoreFile, cutoff: Optional[date]) -> int:
    """
    Mark as Done every record dated strictly before `cutoff`.

    Records with unreadable dates are left alone. Returns how many
    records changed; a None cutoff does nothing.
    """
    if cutoff is None:
        return 0

    limit = (cutoff.year, cutoff.month, cutoff.day)

    def older(record: Record) -> Record:
        if date_key(record.date) < limit:
            return _apply(record, StatusOp.SET_DONE)
        return record

    changed = rewrite_records(store, older)
    if changed:
        logger.info("auto-marked %d records done (older than %s)", changed, cutoff.isoformat())

    return changed
