import csv
import io

import pytest

from memo.engine.model import Record, Status
from memo.engine.render import (
    export_csv,
    export_html,
    format_record,
    render_groups,
    render_record_detail,
    render_records,
)

RECORDS = [
    Record(record_id=1, status=Status.UNDONE, date="2014-11-01", content="buy milk"),
    Record(record_id=2, status=Status.DONE, date="2014-11-02", content='say "hi", <b>loud</b>'),
]


def test_format_record_plain() -> None:
    assert format_record(RECORDS[0], color=False) == "   1  U  2014-11-01  buy milk"
    assert format_record(RECORDS[0], color=False, show_date=False) == "   1  U  buy milk"


def test_render_records(capsys: pytest.CaptureFixture[str]) -> None:
    assert render_records(RECORDS, color=False) == 2
    out = capsys.readouterr().out.splitlines()
    assert out[0].endswith("buy milk")
    assert len(out) == 2


def test_render_groups_omits_date_per_record(capsys: pytest.CaptureFixture[str]) -> None:
    render_groups([("2014-11-01", RECORDS[:1]), ("2014-11-02", RECORDS[1:])], color=False)

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "2014-11-01"
    assert lines[1] == "     1  U  buy milk"
    assert lines[2] == ""
    assert lines[3] == "2014-11-02"


def test_render_record_detail(capsys: pytest.CaptureFixture[str]) -> None:
    render_record_detail(Record(record_id=5, status=Status.INVALID, date="x", content="c", raw_status="Z"), color=False)

    out = capsys.readouterr().out
    assert "status:  invalid (Z)" in out
    assert "id:      5" in out


def test_export_csv() -> None:
    rows = list(csv.reader(io.StringIO(export_csv(RECORDS))))

    assert rows[0] == ["id", "status", "date", "content"]
    assert rows[2] == ["2", "D", "2014-11-02", 'say "hi", <b>loud</b>']


def test_export_html_escapes() -> None:
    text = export_html(RECORDS)

    assert "<td>buy milk</td>" in text
    assert "&lt;b&gt;loud&lt;/b&gt;" in text
    assert '<tr class="done">' in text
    assert text.startswith("<!DOCTYPE html>")
