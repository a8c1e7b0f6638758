from datetime import date
from pathlib import Path

import pytest

from memo.config import ConfigError, load_config


def test_defaults(tmp_path: Path) -> None:
    cfg = load_config(env={}, home=tmp_path)

    assert cfg.store_path == str(tmp_path / ".memo")
    assert cfg.store.tmp_path == str(tmp_path / ".memo.tmp")
    assert cfg.confirm_before_delete_all() is True
    assert cfg.auto_mark_done_cutoff(date(2014, 11, 5)) is None
    assert cfg.source == ""


def test_config_file_values(tmp_path: Path) -> None:
    (tmp_path / ".memorc").write_text(
        "memo_path: ~/notes/memo.txt\n"
        "confirm_delete_all: false\n"
        "mark_done_after_days: 7\n"
        "color: false\n",
        encoding="utf-8",
    )

    cfg = load_config(env={}, home=tmp_path)

    assert cfg.store_path == str(tmp_path / "notes" / "memo.txt")
    assert cfg.confirm_delete_all is False
    assert cfg.color is False
    assert cfg.auto_mark_done_cutoff(date(2014, 11, 8)) == date(2014, 11, 1)
    assert cfg.source == str(tmp_path / ".memorc")


def test_env_path_wins(tmp_path: Path) -> None:
    (tmp_path / ".memorc").write_text("memo_path: /from/config\n", encoding="utf-8")
    target = tmp_path / "env.memo"

    cfg = load_config(env={"MEMO_PATH": str(target)}, home=tmp_path)

    assert cfg.store_path == str(target)


def test_env_config_location(tmp_path: Path) -> None:
    other = tmp_path / "elsewhere.yml"
    other.write_text("memo_path: /srv/memo\n", encoding="utf-8")

    cfg = load_config(env={"MEMO_CONFIG": str(other)}, home=tmp_path)

    assert cfg.store_path == "/srv/memo"


@pytest.mark.parametrize(
    "text",
    [
        "memo_path: [1, 2\n",
        "- just\n- a list\n",
        "confirm_delete_all: maybe\n",
        "mark_done_after_days: soon\n",
        "mark_done_after_days: -3\n",
        "memo_path: 12\n",
    ],
)
def test_invalid_config(tmp_path: Path, text: str) -> None:
    (tmp_path / ".memorc").write_text(text, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(env={}, home=tmp_path)
