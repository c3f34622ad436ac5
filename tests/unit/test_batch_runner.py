from __future__ import annotations
from pathlib import Path
from unittest.mock import patch

import pytest

from startup_intake.config.loader import load_config
from startup_intake.logging.skip_log import SkipLogBuffer
from startup_intake.services import batch_runner
from startup_intake.services.batch_runner import ProcessingError, process_all, scan_csv_files


def test_scan_csv_files_sorted_and_filtered(temp_workdir: Path, write_csv):
    write_csv("b.csv", "x")
    write_csv("a.CSV", "x")
    write_csv("notes.txt", "x")
    (temp_workdir / "data" / "dir.csv").mkdir()
    assert [p.name for p in scan_csv_files(temp_workdir / "data")] == ["a.CSV", "b.csv"]


def test_scan_missing_directory(temp_workdir: Path):
    with pytest.raises(ProcessingError):
        scan_csv_files(temp_workdir / "nope")


def test_read_error_is_isolated_per_file(temp_workdir: Path, write_config: Path, write_csv, sample_csv_text):
    write_csv("a.csv", sample_csv_text)
    write_csv("b.csv", sample_csv_text)
    real_ingest = batch_runner._ingest_file

    def flaky_ingest(file_path: Path, config):
        if file_path.name == "a.csv":
            raise PermissionError(13, "Permission denied", str(file_path))
        return real_ingest(file_path, config)

    buf = SkipLogBuffer(logs_dir=temp_workdir / "logs")
    with patch("startup_intake.services.batch_runner._ingest_file", side_effect=flaky_ingest):
        result = process_all(load_config(write_config), skip_log=buf)

    assert (result.success_files, result.failed_files) == (1, 1)
    assert result.total_records == 2
    failed = [s for s in result.file_stats if s.status == "failed"]
    assert [s.file_name for s in failed] == ["a.csv"]
    assert "Permission denied" in failed[0].error
    assert (temp_workdir / "out" / "b.records.jsonl").exists()
    assert len(list((temp_workdir / "logs").glob("skips-*.log"))) == 1


def test_flat_csv_written_when_configured(temp_workdir: Path, write_csv, sample_csv_text):
    cfg = temp_workdir / "config" / "ingest.yml"
    cfg.write_text("source_directory: ./data\noutput_directory: ./out\nflat_csv: true\n", encoding="utf-8")
    write_csv("deals.csv", sample_csv_text)
    result = process_all(load_config(cfg), skip_log=SkipLogBuffer(logs_dir=temp_workdir / "logs"))
    assert result.failed_files == 0
    assert (temp_workdir / "out" / "deals.records.flat.csv").exists()
