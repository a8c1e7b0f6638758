from pathlib import Path

import pytest

from memo.engine.errors import EmptyStore, InvalidPattern
from memo.engine.model import StoreFile
from memo.engine.query import all_records, get_record, group_by_date, latest, search, search_regex

LINES = (
    "1\tU\t2014-11-02\tRemember to buy milk",
    "2\tD\t2014-11-01\tcall the plumber",
    "3\tP\t2014-11-02\twrite report",
    "4\tU\t2014-11-03\tbuy stamps",
)


def _ids(records) -> list[int]:
    return [r.record_id for r in records]


def test_search_is_case_insensitive_token_or(write_store) -> None:
    store = write_store(*LINES)

    assert _ids(search(store, "Buy MILK")) == [1, 4]
    assert _ids(search(store, "MILK")) == [1]
    assert _ids(search(store, "plumber report")) == [2, 3]


def test_search_matches_whole_line(write_store) -> None:
    store = write_store(*LINES)
    assert _ids(search(store, "2014-11-03")) == [4]


def test_search_postponed_filter(write_store) -> None:
    store = write_store(*LINES)

    assert _ids(search(store, "report")) == [3]
    assert search(store, "report", include_postponed=False) == []


def test_search_blank_term(write_store) -> None:
    store = write_store(*LINES)
    assert search(store, "   ") == []


def test_queries_on_empty_store(store: StoreFile) -> None:
    with pytest.raises(EmptyStore):
        search(store, "milk")
    with pytest.raises(EmptyStore):
        latest(store, 3)
    with pytest.raises(EmptyStore):
        group_by_date(store)


def test_regex(write_store) -> None:
    store = write_store(*LINES)
    assert _ids(search_regex(store, r"^\d+\tU\t.*BUY")) == [1, 4]


def test_invalid_regex_fails_before_io(tmp_path: Path) -> None:
    store = StoreFile.at(str(tmp_path / "does-not-exist"))

    with pytest.raises(InvalidPattern):
        search_regex(store, "([unclosed")


@pytest.mark.parametrize("n", [-1, 4, 10])
def test_latest_all(write_store, n: int) -> None:
    store = write_store(*LINES)
    assert _ids(latest(store, n)) == [1, 2, 3, 4]


def test_latest_window_keeps_file_order(write_store) -> None:
    store = write_store(*LINES)

    assert _ids(latest(store, 2)) == [3, 4]
    assert latest(store, 0) == []


def test_group_by_date_sorts_dates(write_store) -> None:
    store = write_store(
        "1\tU\t2014-11-02\ta",
        "2\tU\t2014-11-01\tb",
        "3\tU\t2014-11-02\tc",
    )

    groups = group_by_date(store)

    assert [d for d, _ in groups] == ["2014-11-01", "2014-11-02"]
    assert [_ids(rs) for _, rs in groups] == [[2], [1, 3]]


def test_group_by_date_numeric_order(write_store) -> None:
    store = write_store(
        "1\tU\t2014-1-10\ta",
        "2\tU\tsomeday\tb",
        "3\tU\t2014-1-9\tc",
        "4\tU\t2013-12-31\td",
    )

    assert [d for d, _ in group_by_date(store)] == ["2013-12-31", "2014-1-9", "2014-1-10", "someday"]


def test_all_records_and_get(write_store) -> None:
    store = write_store(*LINES)

    assert _ids(all_records(store)) == [1, 2, 3, 4]
    assert _ids(all_records(store, include_postponed=False)) == [1, 2, 4]
    assert get_record(store, 2).content == "call the plumber"
    assert get_record(store, 99) is None
