from __future__ import annotations
import json
from pathlib import Path

from startup_intake.config.loader import load_config
from startup_intake.logging.skip_log import SkipLogBuffer
from startup_intake.services.batch_runner import process_all

"""Skip log JSON Lines 契約テスト

Keys: timestamp, file, row, reason, missing_fields (fixed set, no extras)
"""

EXPECTED_KEYS = {"timestamp", "file", "row", "reason", "missing_fields"}


def _read_lines(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line]


def test_row_and_file_level_entries(temp_workdir: Path, write_config: Path, write_csv):
    write_csv("deals.csv", "Company,Sector\nAcme,AI\nNoSector,\n")
    write_csv("empty.csv", "")
    buf = SkipLogBuffer(logs_dir=temp_workdir / "logs")

    process_all(load_config(write_config), skip_log=buf)

    logs = sorted((temp_workdir / "logs").glob("skips-*.log"))
    assert len(logs) == 1
    entries = _read_lines(logs[0])
    assert len(entries) == 2
    assert all(set(e) == EXPECTED_KEYS for e in entries)

    by_file = {e["file"]: e for e in entries}
    # row はヘッダを除いた 1 始まりのデータ行番号
    assert by_file["deals.csv"]["row"] == 2
    assert by_file["deals.csv"]["missing_fields"] == ["sector"]
    assert by_file["empty.csv"]["row"] == -1
    assert by_file["empty.csv"]["missing_fields"] == []


def test_no_log_file_when_nothing_skipped(temp_workdir: Path, write_config: Path, write_csv, sample_csv_text):
    write_csv("deals.csv", sample_csv_text)
    process_all(load_config(write_config), skip_log=SkipLogBuffer(logs_dir=temp_workdir / "logs"))
    assert list((temp_workdir / "logs").glob("skips-*.log")) == []
