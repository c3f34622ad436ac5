from __future__ import annotations
import json
import re
from pathlib import Path

from startup_intake.cli import main as cli_main
from startup_intake.logging.init import reset_logging

"""Integration: one unreadable file does not stop the others (exit code 2)."""


def test_partial_failure(temp_workdir: Path, write_config: Path, write_csv, sample_csv_text, capsys):
    reset_logging()
    write_csv("a_good.csv", sample_csv_text)
    write_csv("b_empty.csv", "\n\n")
    (temp_workdir / "data" / "c_binary.csv").write_bytes(b"\xff\xfe\x00bad")

    code = cli_main([])
    out = capsys.readouterr().out

    assert code == 2
    m = re.search(r"SUMMARY files=(\d+)/\d+ success=(\d+) failed=(\d+) records=(\d+)", out)
    assert m is not None, out
    assert m.groups() == ("3", "1", "2", "2")

    assert (temp_workdir / "out" / "a_good.records.jsonl").exists()
    assert not (temp_workdir / "out" / "b_empty.records.jsonl").exists()

    logs = list((temp_workdir / "logs").glob("skips-*.log"))
    assert len(logs) == 1
    entries = [json.loads(x) for x in logs[0].read_text(encoding="utf-8").splitlines()]
    assert {e["file"] for e in entries} == {"b_empty.csv", "c_binary.csv"}
    assert all(e["row"] == -1 for e in entries)


def test_bad_mapping_in_config_is_fatal(temp_workdir: Path, write_csv, sample_csv_text, capsys):
    reset_logging()
    (temp_workdir / "config" / "ingest.yml").write_text(
        "source_directory: ./data\noutput_directory: ./out\ncolumn_mapping:\n  nickname: Company\n",
        encoding="utf-8",
    )
    write_csv("deals.csv", sample_csv_text)
    assert cli_main([]) == 1
    assert "ERROR config: invalid column mapping" in capsys.readouterr().out


def test_unwritable_output_fails_only_that_file(temp_workdir: Path, write_config: Path, write_csv, sample_csv_text, capsys):
    reset_logging()
    write_csv("a.csv", sample_csv_text)
    write_csv("b.csv", sample_csv_text)
    # 出力先にディレクトリがあると a の書き込みだけ失敗する
    (temp_workdir / "out" / "a.records.jsonl").mkdir(parents=True)

    code = cli_main([])
    out = capsys.readouterr().out

    assert code == 2
    assert "SUMMARY files=2/2 success=1 failed=1 records=2" in out
    assert "ERROR a.csv:" in out
    assert (temp_workdir / "out" / "b.records.jsonl").is_file()

    logs = list((temp_workdir / "logs").glob("skips-*.log"))
    assert len(logs) == 1
    entries = [json.loads(x) for x in logs[0].read_text(encoding="utf-8").splitlines()]
    assert [(e["file"], e["row"]) for e in entries] == [("a.csv", -1)]
