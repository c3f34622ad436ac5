from __future__ import annotations
import json
from pathlib import Path

from startup_intake.cli import main as cli_main
from startup_intake.logging.init import reset_logging

"""Integration: --preview prints headers, sample rows and suggested mapping without writing outputs."""


def test_preview_output(temp_workdir: Path, write_config: Path, write_csv, capsys):
    reset_logging()
    rows = "\n".join(f"Startup {i},Fintech,{i}" for i in range(1, 6))
    write_csv("deals.csv", "Company,Industry,Board Notes\n" + rows + "\n")

    code = cli_main(["--preview"])
    out = capsys.readouterr().out

    assert code == 0
    assert "FILE: deals.csv" in out
    assert "headers=['Company', 'Industry', 'Board Notes'] rows=5" in out
    sample_line = next(line for line in out.splitlines() if "sample_rows=" in line)
    sample = json.loads(sample_line.split("sample_rows=", 1)[1])
    assert len(sample) == 3
    mapping_line = next(line for line in out.splitlines() if "mapping=" in line and "unmapped" not in line)
    assert json.loads(mapping_line.split("mapping=", 1)[1]) == {"name": "Company", "sector": "Industry"}
    assert "unmapped=['Board Notes']" in out
    assert 'custom_types= {"Board Notes": "number"}' in out
    assert not (temp_workdir / "out").exists()


def test_preview_reports_empty_file(temp_workdir: Path, write_config: Path, write_csv, capsys):
    reset_logging()
    write_csv("empty.csv", "")
    assert cli_main(["--preview"]) == 0
    assert "error=CSV input is empty" in capsys.readouterr().out


def test_debug_flag(temp_workdir: Path, write_config: Path, write_csv, sample_csv_text, capsys):
    reset_logging()
    write_csv("deals.csv", sample_csv_text)
    assert cli_main(["--debug"]) == 0
    assert "DEBUG debug mode enabled" in capsys.readouterr().out
