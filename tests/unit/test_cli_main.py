from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from src.cli import main as cli_main


def test_cli_success_from_config_source(write_config, write_csv, sample_rows, capsys):
    write_csv(sample_rows)
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 0
    assert "INFO Loading catalogue from: ./data/catalogue.csv" in out
    assert "KPI products=2" in out
    assert (
        "SUMMARY source=./data/catalogue.csv status=success rows=3 blank_rows=1 records=2 issues=0"
        in out
    )


def test_cli_positional_source_overrides_config(write_config, write_csv, sample_rows, capsys):
    path = write_csv(sample_rows, name="other.csv")
    code = cli_main([str(path)])
    out = capsys.readouterr().out
    assert code == 0
    assert f"SUMMARY source={path} status=success" in out


def test_cli_without_config_or_source(temp_workdir: Path, capsys):
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR no csv source given" in out


def test_cli_explicit_missing_config(temp_workdir: Path, capsys):
    code = cli_main(["--config", "config/missing.yml", "x.csv"])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR config: config file not found" in out


def test_cli_missing_csv_writes_diagnostics(write_config, temp_workdir: Path, capsys):
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR load failed source=./data/catalogue.csv" in out
    assert "status=failed" in out
    logs = list((temp_workdir / "logs").glob("diagnostics-*.log"))
    assert len(logs) == 1
    record = json.loads(logs[0].read_text(encoding="utf-8").splitlines()[0])
    assert record["error_type"] == "LOAD_FAILURE"
    assert record["row"] == -1


def test_cli_env_file_source(temp_workdir: Path, write_csv, sample_rows, monkeypatch, capsys):
    # 後始末で CATALOGUE_SOURCE を消せるよう monkeypatch に記録させる
    monkeypatch.setenv("CATALOGUE_SOURCE", "placeholder")
    monkeypatch.delenv("CATALOGUE_SOURCE")
    path = write_csv(sample_rows)
    (temp_workdir / ".env").write_text(f"CATALOGUE_SOURCE={path}\n", encoding="utf-8")
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 0
    assert f"SUMMARY source={path} status=success" in out


def test_cli_debug_mode(write_config, write_csv, sample_rows, capsys):
    write_csv(sample_rows)
    code = cli_main(["--debug"])
    out = capsys.readouterr().out
    assert code == 0
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG normalized rows=3 blank=1 records=2 issues=0" in out


def test_cli_inspect_data(write_config, write_csv, sample_rows, capsys):
    write_csv(sample_rows)
    code = cli_main(["--inspect-data"])
    out = capsys.readouterr().out
    assert code == 0
    assert "SOURCE: ./data/catalogue.csv" in out
    assert "sku" in out and "'Product SKU'" in out
    assert "MAK-001" in out
    assert "SUMMARY" not in out


def test_cli_inspect_data_missing_file(write_config, capsys):
    code = cli_main(["--inspect-data"])
    assert code == 1
    assert "inspect: csv not found" in capsys.readouterr().out


def test_cli_export(write_config, write_csv, sample_rows, temp_workdir: Path, capsys):
    write_csv(sample_rows)
    target = temp_workdir / "out" / "records.csv"
    code = cli_main(["--export", str(target)])
    assert code == 0
    df = pd.read_csv(target)
    assert list(df["sku"]) == ["MAK-001", "DEW-002"]
    assert "revenue" in df.columns
    assert "exported 2 records" in capsys.readouterr().out


def test_cli_coercion_issues_are_not_fatal(write_config, write_csv, sample_rows, temp_workdir: Path, capsys):
    sample_rows[0]["Cost Price ex VAT"] = "tbc"
    write_csv(sample_rows)
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 0
    assert "issues=1" in out
    assert "diagnostics written to" in out
    logs = list((temp_workdir / "logs").glob("diagnostics-*.log"))
    record = json.loads(logs[0].read_text(encoding="utf-8").strip())
    assert record["error_type"] == "COERCION_FAILURE"
    assert record["field"] == "cost_ex_vat"


def test_cli_inspect_data_uses_config_aliases(write_config, write_csv, capsys):
    write_csv([{"Item Code": "ALIAS-1", "Brand": "Bosch"}])
    code = cli_main(["--inspect-data"])
    out = capsys.readouterr().out
    assert code == 0
    assert "<- 'Item Code'" in out
    assert "ALIAS-1" in out
