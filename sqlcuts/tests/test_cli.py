import os

import pytest

from sqlcuts.cli import EXIT_FAILURE, EXIT_NEEDS_VALUE, EXIT_OK, main
from sqlcuts.utils.exceptions import ConfigError


def test_query_prints_rows(db_path, capsys):
    assert main(["query", db_path, "SELECT a, b, c FROM t", "--separator", "|", "--null-value", "∅"]) == EXIT_OK
    assert capsys.readouterr().out == "1|hi|∅\n"


def test_query_quoted(db_path, capsys):
    assert main(["query", db_path, "SELECT b FROM t", "--quote"]) == EXIT_OK
    assert capsys.readouterr().out == '"hi"\n'


def test_query_failure_goes_to_stderr(db_path, capsys):
    assert main(["query", db_path, "SELECT * FROM nothere"]) == EXIT_FAILURE
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "no such table: nothere" in captured.err


def test_query_empty_separator_needs_value(db_path, capsys):
    assert main(["query", db_path, "SELECT 1", "--separator", ""]) == EXIT_NEEDS_VALUE
    assert "column_separator" in capsys.readouterr().err


def test_update_defaults_directory_to_parent(db_path, capsys, read_db):
    assert main(["update", db_path, "DELETE FROM t"]) == EXIT_OK
    assert capsys.readouterr().out == "OK\n"
    assert read_db(db_path, "SELECT COUNT(*) FROM t") == [(0,)]


def test_update_wrong_directory(db_path, tmp_path, capsys):
    assert main(["update", db_path, "DELETE FROM t", "--directory", str(tmp_path)]) == EXIT_FAILURE
    assert "Parent folder" in capsys.readouterr().err


def test_config_option_is_read(db_path, tmp_path, capsys):
    cfg = tmp_path / "settings.yaml"
    cfg.write_text("journal_mode: delete\nlog_level: warning\n", encoding="utf-8")
    assert main(["--config", str(cfg), "update", db_path, "DELETE FROM t"]) == EXIT_OK

    bad = tmp_path / "bad.yaml"
    bad.write_text("journal_mode: wal\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        main(["--config", str(bad), "query", db_path, "SELECT 1"])


def test_config_option_does_not_leak_into_environment(db_path, tmp_path):
    before = os.environ.get("SQLCUTS_CONFIG")
    cfg = tmp_path / "settings.yaml"
    cfg.write_text("log_level: warning\n", encoding="utf-8")
    assert main(["--config", str(cfg), "query", db_path, "SELECT 1"]) == EXIT_OK
    assert os.environ.get("SQLCUTS_CONFIG") == before
