# src/memo/engine/validate.py

"""
Store validation rules.

This module checks the store file against the record layout and the
conventions the engine relies on.

Responsibilities:
- per-line structure (4 fields, positive integer id),
- status tokens and calendar dates,
- id uniqueness and the append-order rule used by id allocation.

It does NOT modify the store.
"""

from dataclasses import dataclass
from typing import Sequence

from .errors import MalformedRecord
from .model import Status, StoreFile
from .parse import is_date, parse_record
from .scan import iter_lines


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class ValidationError(Exception):
    """
    Fatal validation error used for command flow control.

    Raised when a command must immediately abort (e.g. missing or
    unusable user input).
    """


# ---------------------------------------------------------------------
# Result objects
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """
    A single validation problem.

    `code` is a stable identifier suitable for tests and future filtering.
    `lineno` is 1-based; 0 means the issue concerns the whole store.
    """

    code: str
    message: str
    lineno: int = 0


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """
    Aggregated validation result for a store file.
    """

    path: str
    records: int
    issues: Sequence[ValidationIssue]

    @property
    def ok(self) -> bool:
        return not self.issues


# ---------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------

def validate_store(store: StoreFile) -> ValidationResult:
    """
    Validate every line of the store.

    Unlike the scanner, nothing is skipped silently: each malformed line
    becomes an issue.
    """
    issues: list[ValidationIssue] = []
    first_line: dict[int, int] = {}
    records = 0
    last_id = 0
    highest = 0

    for lineno, line in enumerate(iter_lines(store), start=1):
        if not line.strip():
            issues.append(
                ValidationIssue(
                    code="blank_line",
                    message="Blank line",
                    lineno=lineno,
                )
            )
            continue

        try:
            record = parse_record(line)
        except MalformedRecord as e:
            issues.append(
                ValidationIssue(
                    code="malformed",
                    message=e.message,
                    lineno=lineno,
                )
            )
            continue

        records += 1

        if record.status is Status.INVALID:
            issues.append(
                ValidationIssue(
                    code="status_invalid",
                    message=f"Unknown status '{record.status_token}' (allowed: U, D, P)",
                    lineno=lineno,
                )
            )

        if not is_date(record.date):
            issues.append(
                ValidationIssue(
                    code="date_invalid",
                    message=f"Invalid date '{record.date}' (expected YYYY-MM-DD)",
                    lineno=lineno,
                )
            )

        if not record.content.strip():
            issues.append(
                ValidationIssue(
                    code="content_empty",
                    message="Empty content",
                    lineno=lineno,
                )
            )

        if record.record_id in first_line:
            issues.append(
                ValidationIssue(
                    code="id_duplicate",
                    message=(
                        f"Id {record.record_id} already used on line "
                        f"{first_line[record.record_id]}"
                    ),
                    lineno=lineno,
                )
            )
        else:
            first_line[record.record_id] = lineno

        last_id = record.record_id
        highest = max(highest, last_id)

    # Id allocation reads the last record; it must carry the highest id.
    if last_id != highest:
        issues.append(
            ValidationIssue(
                code="id_order",
                message=(
                    f"Last record id {last_id} is lower than the highest id {highest} "
                    "(run 'memo reorganize' to renumber)"
                ),
            )
        )

    return ValidationResult(path=store.path, records=records, issues=tuple(issues))
