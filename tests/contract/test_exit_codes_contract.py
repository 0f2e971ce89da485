from __future__ import annotations

from pathlib import Path

from src.cli import main as cli_main
from src.cli.__main__ import EXIT_FATAL, EXIT_SUCCESS

"""Exit code contract: 0 when the dataset loaded, 1 for anything fatal."""


def test_exit_code_values():
    assert EXIT_SUCCESS == 0
    assert EXIT_FATAL == 1


def test_exit_code_success(write_config, write_csv, sample_rows):
    write_csv(sample_rows)
    assert cli_main([]) == 0


def test_exit_code_invalid_config(write_config: Path, capsys):
    write_config.write_text("unexpected_key: 1\n", encoding="utf-8")
    code = cli_main([])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_unreadable_source(write_config):
    assert cli_main(["./data/does-not-exist.csv"]) == 1


def test_exit_code_empty_dataset(write_config, write_csv, sample_rows, capsys):
    write_csv([sample_rows[1]])
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "status=failed" in out
