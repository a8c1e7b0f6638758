from datetime import date

import pytest

from memo.engine.errors import InvalidDate, MalformedRecord
from memo.engine.model import Record, Status
from memo.engine.parse import clean_content, is_date, parse_date, parse_record, serialize_record


def test_parse_record_fields() -> None:
    r = parse_record("12\tD\t2014-11-02\tbuy milk\n")

    assert r.record_id == 12
    assert r.status is Status.DONE
    assert r.date == "2014-11-02"
    assert r.content == "buy milk"


@pytest.mark.parametrize(
    "record",
    [
        Record(record_id=1, status=Status.UNDONE, date="2014-11-01", content="buy milk"),
        Record(record_id=7, status=Status.POSTPONED, date="2020-02-29", content="call mum"),
        Record(record_id=42, status=Status.DONE, date="1999-12-31", content="tab\tinside content"),
    ],
)
def test_round_trip(record: Record) -> None:
    assert parse_record(serialize_record(record)) == record


def test_serialize_has_no_trailing_newline() -> None:
    r = Record(record_id=3, status=Status.UNDONE, date="2014-11-01", content="x")
    assert serialize_record(r) == "3\tU\t2014-11-01\tx"


def test_unknown_status_is_tolerated_and_preserved() -> None:
    r = parse_record("5\tX\t2014-11-01\thand edited")

    assert r.status is Status.INVALID
    assert r.status_token == "X"
    assert serialize_record(r) == "5\tX\t2014-11-01\thand edited"


@pytest.mark.parametrize(
    "line",
    [
        "",
        "1\tU\t2014-11-01",
        "just some text",
        "abc\tU\t2014-11-01\tcontent",
        "0\tU\t2014-11-01\tcontent",
    ],
)
def test_malformed_lines(line: str) -> None:
    with pytest.raises(MalformedRecord):
        parse_record(line)


def test_parse_date_accepts_non_padded() -> None:
    assert parse_date("2014-1-2") == date(2014, 1, 2)


@pytest.mark.parametrize("value", ["2014-02-29", "2014-13-01", "2014-04-31", "14/11/2014", "", "2014-xx-01"])
def test_parse_date_rejects(value: str) -> None:
    with pytest.raises(InvalidDate):
        parse_date(value)


def test_leap_day() -> None:
    assert is_date("2016-02-29")
    assert not is_date("1900-02-29")
    assert is_date("2000-02-29")


def test_clean_content_strips_newlines() -> None:
    assert clean_content("  buy\nmilk\r\n ") == "buymilk"
