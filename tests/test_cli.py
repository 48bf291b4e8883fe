from __future__ import annotations

import pytest

from diaria.cli import DEFAULT_SAMPLE_DAYS, main, sample_days, show_status
from diaria.config import BaseConfig
from diaria.db import create_app_engine, create_session_factory


def test_unknown_command_prints_usage(capsys):
    assert main(["frobnicate"], config=BaseConfig()) == 0

    assert "usage:" in capsys.readouterr().out


def test_missing_command_prints_usage(capsys):
    assert main([], config=BaseConfig()) == 0

    assert "scrape" in capsys.readouterr().out


def test_sample_then_status(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'diaria.db'}"

    assert main(["sample", "7", "--database-url", url], config=BaseConfig()) == 0
    capsys.readouterr()
    assert main(["status", "--database-url", url], config=BaseConfig()) == 0

    out = capsys.readouterr().out
    assert "Total records: 21" in out
    assert "Latest results:" in out
    assert out.count(" 9pm: ") + out.count(" 3pm: ") + out.count(" 11am: ") == 5


def test_unreachable_database_exits_with_error(tmp_path):
    url = f"sqlite:///{tmp_path / 'missing' / 'nested' / 'diaria.db'}"

    assert main(["status", "--database-url", url], config=BaseConfig()) == 1


def test_status_on_empty_store():
    factory = create_session_factory(create_app_engine("sqlite://"))
    lines: list[str] = []

    show_status(factory, echo=lines.append)

    assert lines[0] == "Total records: 0"
    assert "Hot numbers (30 days):" not in lines


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("30", 30), (None, DEFAULT_SAMPLE_DAYS), ("abc", 180), ("0", 180), ("-4", 180)],
)
def test_sample_days_falls_back_to_default(raw, expected):
    assert sample_days(raw) == expected


def test_sample_with_unparseable_days_still_runs(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'diaria.db'}"

    assert main(["sample", "abc", "--database-url", url], config=BaseConfig()) == 0
    capsys.readouterr()
    main(["status", "--database-url", url], config=BaseConfig())

    assert f"Total records: {DEFAULT_SAMPLE_DAYS * 3}" in capsys.readouterr().out
