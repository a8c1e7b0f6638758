# src/memo/cli.py

"""
Command-line interface for memo.

This module:
- defines argument parsing and subcommands,
- resolves configuration once and hands the store to engine modules,
- keeps user interaction (prompts, messages) here.

KISS rule: keep commands small and predictable.
"""

import argparse
import logging
from datetime import date
from pathlib import Path

from memo.config import ConfigError, MemoConfig, load_config
from memo.engine.actions import StatusOp, auto_mark_done, delete_by_id, delete_done, mark_all_done, mark_status
from memo.engine.errors import EmptyStore, MemoError
from memo.engine.model import sort_records
from memo.engine.ops import add_record, delete_all, reorganize, replace_content, replace_date
from memo.engine.query import all_records, get_record, group_by_date, latest, search, search_regex
from memo.engine.render import (
    export_csv,
    export_html,
    render_groups,
    render_record_detail,
    render_records,
)
from memo.engine.scan import ensure_store
from memo.engine.validate import ValidationError, validate_store

logger = logging.getLogger("memo.cli")


# ---------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------

def _add_all_flag(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "-a",
        "--all",
        dest="include_postponed",
        action="store_true",
        help="Include postponed notes",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="memo")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # ------------------------------------------------------------------
    # Read-only commands
    # ------------------------------------------------------------------

    p_list = sub.add_parser("list", help="List notes in file order")
    _add_all_flag(p_list)
    p_list.add_argument(
        "--by-status",
        action="store_true",
        help="Order by status, then date",
    )
    p_list.set_defaults(func=cmd_list)

    p_search = sub.add_parser(
        "search",
        help="Search notes (case-insensitive, any word matches)",
    )
    p_search.add_argument("term", nargs="+", help="Search words")
    _add_all_flag(p_search)
    p_search.set_defaults(func=cmd_search)

    p_regex = sub.add_parser(
        "regex",
        help="Search notes with a regular expression (case-insensitive)",
    )
    p_regex.add_argument("pattern", help="Regular expression")
    _add_all_flag(p_regex)
    p_regex.set_defaults(func=cmd_regex)

    p_latest = sub.add_parser("latest", help="Show the latest N notes")
    p_latest.add_argument(
        "count",
        type=int,
        help="Number of notes (negative shows all)",
    )
    _add_all_flag(p_latest)
    p_latest.set_defaults(func=cmd_latest)

    p_dates = sub.add_parser("dates", help="Show notes grouped by date")
    _add_all_flag(p_dates)
    p_dates.set_defaults(func=cmd_dates)

    p_show = sub.add_parser("show", help="Show a single note")
    p_show.add_argument("id", type=int, help="Note id")
    p_show.set_defaults(func=cmd_show)

    p_export = sub.add_parser("export", help="Export notes as CSV or HTML")
    p_export.add_argument("format", choices=["csv", "html"], help="Output format")
    p_export.add_argument(
        "-o",
        "--output",
        type=str,
        default="",
        help="Write to this file instead of stdout",
    )
    _add_all_flag(p_export)
    p_export.set_defaults(func=cmd_export)

    p_validate = sub.add_parser("validate", help="Check the note file for problems")
    p_validate.set_defaults(func=cmd_validate)

    p_path = sub.add_parser("path", help="Print the note file path")
    p_path.set_defaults(func=cmd_path)

    # ------------------------------------------------------------------
    # Create command
    # ------------------------------------------------------------------

    p_add = sub.add_parser("add", help="Add a note")
    p_add.add_argument("content", nargs="+", help="Note text")
    p_add.add_argument(
        "--date",
        type=str,
        default=None,
        help="Date as YYYY-MM-DD (default: today)",
    )
    p_add.set_defaults(func=cmd_add)

    # ------------------------------------------------------------------
    # Write commands
    # ------------------------------------------------------------------

    for name, op, text in (
        ("done", StatusOp.SET_DONE, "Mark notes as done"),
        ("undone", StatusOp.SET_UNDONE, "Mark notes as not done"),
        ("postpone", StatusOp.POSTPONE, "Postpone notes (only undone notes)"),
    ):
        p = sub.add_parser(name, help=text)
        p.add_argument("ids", nargs="+", type=int, help="Note ids")
        p.set_defaults(func=cmd_mark, op=op)

    p_delete = sub.add_parser("delete", help="Delete notes by id")
    p_delete.add_argument("ids", nargs="+", type=int, help="Note ids")
    p_delete.set_defaults(func=cmd_delete)

    p_delete_done = sub.add_parser("delete-done", help="Delete all done notes")
    p_delete_done.set_defaults(func=cmd_delete_done)

    p_delete_all = sub.add_parser("delete-all", help="Delete the whole note file")
    p_delete_all.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help="Do not ask for confirmation",
    )
    p_delete_all.set_defaults(func=cmd_delete_all)

    p_mark_all = sub.add_parser("mark-all-done", help="Mark every note as done")
    p_mark_all.set_defaults(func=cmd_mark_all_done)

    p_reorganize = sub.add_parser(
        "reorganize",
        help="Renumber ids 1..N in file order (changes existing ids)",
    )
    p_reorganize.set_defaults(func=cmd_reorganize)

    p_replace = sub.add_parser("replace", help="Replace the content or date of a note")
    p_replace.add_argument("id", type=int, help="Note id")
    p_replace.add_argument("value", nargs="+", help="New content (or date with --date)")
    p_replace.add_argument(
        "--date",
        action="store_true",
        help="Treat VALUE as a YYYY-MM-DD date",
    )
    p_replace.set_defaults(func=cmd_replace)

    return parser


# ---------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------

def _color(args: argparse.Namespace) -> bool:
    return bool(args.config.color) and not bool(args.no_color)


def cmd_list(args: argparse.Namespace) -> int:
    records = all_records(args.config.store, include_postponed=args.include_postponed)
    if args.by_status:
        records = sort_records(records)

    render_records(records, color=_color(args))
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    term = " ".join(args.term)
    found = search(args.config.store, term, include_postponed=args.include_postponed)
    if not found:
        print(f"No notes matching: {term}")
        return 0

    render_records(found, color=_color(args))
    return 0


def cmd_regex(args: argparse.Namespace) -> int:
    found = search_regex(args.config.store, args.pattern, include_postponed=args.include_postponed)
    if not found:
        print(f"No notes matching: {args.pattern}")
        return 0

    render_records(found, color=_color(args))
    return 0


def cmd_latest(args: argparse.Namespace) -> int:
    records = latest(args.config.store, args.count, include_postponed=args.include_postponed)
    render_records(records, color=_color(args))
    return 0


def cmd_dates(args: argparse.Namespace) -> int:
    groups = group_by_date(args.config.store, include_postponed=args.include_postponed)
    render_groups(groups, color=_color(args))
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    record = get_record(args.config.store, args.id)
    if record is None:
        print(f"Note not found: {args.id}")
        return 1

    render_record_detail(record, color=_color(args))
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    records = all_records(args.config.store, include_postponed=args.include_postponed)

    if args.format == "csv":
        text = export_csv(records)
    else:
        text = export_html(records)

    if not args.output:
        print(text, end="")
        return 0

    out = Path(args.output)
    try:
        out.write_text(text, encoding="utf-8")
    except OSError as e:
        print(f"Error: cannot write {out}: {e}")
        return 1

    print(out.resolve())
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    res = validate_store(args.config.store)
    if res.ok:
        print(f"{res.path}: {res.records} notes, no problems")
        return 0

    print(f"{res.path}")
    for issue in res.issues:
        where = f"line {issue.lineno}: " if issue.lineno else ""
        print(f"  - {issue.code}: {where}{issue.message}")
    return 1


def cmd_path(args: argparse.Namespace) -> int:
    print(args.config.store.path)
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    content = " ".join(args.content)

    try:
        record = add_record(args.config.store, content, when=args.date)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    print(record.record_id)
    return 0


def cmd_mark(args: argparse.Namespace) -> int:
    # Unknown ids and disallowed transitions are no-ops, not errors.
    for record_id in args.ids:
        if not mark_status(args.config.store, record_id, args.op):
            logger.warning(
                "note %d: unchanged by '%s' (unknown id or transition not allowed)",
                record_id,
                args.op.value,
            )

    return 0


def cmd_delete(args: argparse.Namespace) -> int:
    rc = 0
    for record_id in args.ids:
        if not delete_by_id(args.config.store, record_id):
            print(f"Note not found: {record_id}")
            rc = 1
    return rc


def cmd_delete_done(args: argparse.Namespace) -> int:
    n = delete_done(args.config.store)
    print(f"Deleted {n} done notes")
    return 0


def cmd_delete_all(args: argparse.Namespace) -> int:
    config: MemoConfig = args.config

    if config.confirm_before_delete_all() and not args.yes:
        try:
            ans = input(f"Delete all notes in {config.store.path}? [y/N] ").strip().lower()
        except EOFError as e:
            raise ValidationError("Aborted (no notes deleted)") from e

        if ans not in {"y", "yes"}:
            raise ValidationError("Aborted (no notes deleted)")

    delete_all(config.store)
    return 0


def cmd_mark_all_done(args: argparse.Namespace) -> int:
    n = mark_all_done(args.config.store)
    print(f"Marked {n} notes as done")
    return 0


def cmd_reorganize(args: argparse.Namespace) -> int:
    n = reorganize(args.config.store)
    print(f"Renumbered {n} notes")
    return 0


def cmd_replace(args: argparse.Namespace) -> int:
    store = args.config.store
    value = " ".join(args.value)

    if get_record(store, args.id) is None:
        print(f"Note not found: {args.id}")
        return 1

    try:
        if args.date:
            replace_date(store, args.id, value)
        else:
            replace_content(store, args.id, value)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    return 0


# ---------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------

def _prepare_store(args: argparse.Namespace) -> None:
    """
    Create the store if missing and apply the auto-mark-done cutoff.
    """
    config: MemoConfig = args.config
    ensure_store(config.store)

    cutoff = config.auto_mark_done_cutoff(date.today())
    if cutoff is not None:
        auto_mark_done(config.store, cutoff)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 2

    try:
        args.config = load_config()
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    try:
        if func is not cmd_path:
            _prepare_store(args)
        return func(args)
    except EmptyStore:
        print("No notes.")
        return 0
    except (MemoError, ValidationError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
