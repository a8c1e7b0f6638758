from pathlib import Path

from memo.engine.model import StoreFile
from memo.engine.validate import validate_store


def _codes(result) -> list[str]:
    return [i.code for i in result.issues]


def test_clean_store(write_store) -> None:
    store = write_store("1\tU\t2014-11-01\ta", "2\tD\t2014-11-02\tb")

    res = validate_store(store)

    assert res.ok
    assert res.records == 2


def test_reports_every_problem(write_store) -> None:
    store = write_store(
        "1\tU\t2014-11-01\ta",
        "not a record",
        "2\tQ\t2014-02-30\tb",
        "1\tD\t2014-11-02\tduplicate",
    )

    res = validate_store(store)

    assert not res.ok
    assert _codes(res) == ["malformed", "status_invalid", "date_invalid", "id_duplicate", "id_order"]
    assert [i.lineno for i in res.issues] == [2, 3, 3, 4, 0]


def test_blank_line(store: StoreFile) -> None:
    Path(store.path).write_text("1\tU\t2014-11-01\ta\n\n2\tU\t2014-11-01\tb\n")

    assert _codes(validate_store(store)) == ["blank_line"]
