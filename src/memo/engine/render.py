# src/memo/engine/render.py

"""
Rendering helpers for CLI output.

This module is responsible for:
- record lines (list / search / latest),
- the date-grouped view (dates),
- a single-record detail view (show),
- CSV and HTML export of records already loaded by the query layer.

It is presentation-only: it never reads or writes the store.
"""

from __future__ import annotations

import csv
import html
import io
import sys
from typing import Iterable, Sequence

from .model import Record, Status


# ---------------------------------------------------------------------
# ANSI / terminal helpers
# ---------------------------------------------------------------------

_RESET = "\033[0m"
_DIM = "\033[90m"
_BOLD = "\033[1m"

_COLOR = {
    Status.UNDONE: "\033[33m",     # yellow
    Status.DONE: "\033[32m",       # green
    Status.POSTPONED: "\033[34m",  # blue
    Status.INVALID: "\033[31m",    # red
}

_LABEL = {
    Status.UNDONE: "undone",
    Status.DONE: "done",
    Status.POSTPONED: "postponed",
    Status.INVALID: "invalid",
}


def _supports_color() -> bool:
    """Return True if stdout is a TTY."""
    return sys.stdout.isatty()


def _paint(s: str, code: str, color: bool) -> str:
    if color and code and _supports_color():
        return f"{code}{s}{_RESET}"
    return s


# ---------------------------------------------------------------------
# Record lines
# ---------------------------------------------------------------------

def format_record(record: Record, *, color: bool = True, show_date: bool = True) -> str:
    """
    Format one record as a display line:

      <id>  <status>  <date>  <content>

    The date column is omitted when `show_date` is False (grouped view).
    """
    rid = _paint(f"{record.record_id:>4}", _DIM, color)
    status = _paint(record.status_token, _COLOR.get(record.status, ""), color)

    cols = [rid, status]
    if show_date:
        cols.append(record.date)
    cols.append(record.content)

    return "  ".join(cols)


def render_records(records: Iterable[Record], *, color: bool = True) -> int:
    """Print records one per line; return how many were printed."""
    count = 0
    for record in records:
        print(format_record(record, color=color))
        count += 1
    return count


def render_groups(groups: Sequence[tuple[str, Sequence[Record]]], *, color: bool = True) -> None:
    """
    Print the date-grouped view: a header per date, then its records
    without the date column.
    """
    for i, (day, records) in enumerate(groups):
        if i:
            print()
        print(_paint(day, _BOLD, color))
        for record in records:
            print("  " + format_record(record, color=color, show_date=False))


def render_record_detail(record: Record, *, color: bool = True) -> None:
    """
    Print a single record as labelled fields.
    """
    status = _paint(_LABEL[record.status], _COLOR.get(record.status, ""), color)
    if record.status is Status.INVALID:
        status = f"{status} ({record.status_token})"

    print(f"id:      {record.record_id}")
    print(f"status:  {status}")
    print(f"date:    {record.date}")
    print(f"content: {record.content}")


# ---------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------

EXPORT_COLUMNS = ("id", "status", "date", "content")


def export_csv(records: Iterable[Record]) -> str:
    """
    Return records as CSV text with a header row.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for record in records:
        writer.writerow([record.record_id, record.status_token, record.date, record.content])
    return buf.getvalue()


def export_html(records: Iterable[Record], *, title: str = "memo") -> str:
    """
    Return records as a standalone HTML page with one table row each.
    """
    rows: list[str] = []
    for record in records:
        cells = "".join(
            f"<td>{html.escape(str(v))}</td>"
            for v in (record.record_id, _LABEL[record.status], record.date, record.content)
        )
        rows.append(f'    <tr class="{_LABEL[record.status]}">{cells}</tr>')

    head = "".join(f"<th>{c}</th>" for c in EXPORT_COLUMNS)
    body = "\n".join(rows)

    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '  <meta charset="utf-8">\n'
        f"  <title>{html.escape(title)}</title>\n"
        "</head>\n"
        "<body>\n"
        "  <table>\n"
        f"    <tr>{head}</tr>\n"
        + (body + "\n" if body else "")
        + "  </table>\n"
        "</body>\n"
        "</html>\n"
    )
