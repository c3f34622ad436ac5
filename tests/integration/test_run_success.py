from __future__ import annotations
import csv
import json
import os
from pathlib import Path

from startup_intake.cli import main as cli_main
from startup_intake.logging.init import reset_logging

"""Integration: CLI ingests a directory of CSV exports end to end."""


def test_run_success_writes_outputs(temp_workdir: Path, write_config: Path, write_csv, sample_csv_text, capsys):
    reset_logging()
    write_csv("deals.csv", sample_csv_text)

    code = cli_main([])
    out = capsys.readouterr().out

    assert code == 0
    assert "INFO deals.csv: parsed 2 of 2 rows" in out
    out_dir = temp_workdir / "out"
    records = [json.loads(x) for x in (out_dir / "deals.records.jsonl").read_text(encoding="utf-8").splitlines()]
    assert [r["id"] for r in records] == ["startup-deals-1", "startup-deals-2"]
    assert records[0]["company"]["founders"].startswith("Jane Doe")

    founders = [json.loads(x) for x in (out_dir / "deals.founders.jsonl").read_text(encoding="utf-8").splitlines()]
    assert [f["name"] for f in founders] == ["Jane Doe", "John Smith", "Amara Okafor", "Tom Berg"]
    assert founders[0]["company_id"] == "startup-deals-1"
    assert founders[0]["background"] == "Ex-Google PM"

    with (out_dir / "deals.export.csv").open(encoding="utf-8", newline="") as f:
        rows = list(csv.DictReader(f))
    assert [r["Name"] for r in rows] == ["Acme Robotics", "Beta Health"]
    assert rows[1]["Score"] == "71.5"


def test_end_to_end_scenario_with_skip(temp_workdir: Path, write_config: Path, write_csv, capsys):
    reset_logging()
    write_csv(
        "pipeline.csv",
        "Company,Sector,Score\nAcme,Robotics,82\nNo Sector Co,,60\n",
    )

    code = cli_main([])
    out = capsys.readouterr().out

    assert code == 0
    assert "WARN skipping row 2: missing required field(s): sector" in out
    assert "SUMMARY files=1/1 success=1 failed=0 records=1 skipped_rows=1 missing_scores=0" in out
    skip_logs = list((temp_workdir / "logs").glob("skips-*.log"))
    assert len(skip_logs) == 1


def test_capture_unmapped_and_custom_prefix(temp_workdir: Path, write_csv, capsys):
    reset_logging()
    (temp_workdir / "config" / "ingest.yml").write_text(
        "source_directory: ./data\noutput_directory: ./out\n"
        "id_prefix: q3\ncapture_unmapped: true\nexport_csv: false\n",
        encoding="utf-8",
    )
    write_csv("batch.csv", "Company,Sector,Fund Size\nAcme,AI,20M\n")

    assert cli_main([]) == 0
    capsys.readouterr()

    out_dir = temp_workdir / "out"
    record = json.loads((out_dir / "batch.records.jsonl").read_text(encoding="utf-8").splitlines()[0])
    assert record["id"] == "q3-batch-1"
    assert record["custom_data"] == {"fund_size": "20M"}
    assert not (out_dir / "batch.export.csv").exists()


def test_config_path_from_env_file(temp_workdir: Path, write_csv, sample_csv_text, capsys):
    reset_logging()
    alt = temp_workdir / "alt.yml"
    alt.write_text("source_directory: ./data\noutput_directory: ./alt-out\n", encoding="utf-8")
    (temp_workdir / ".env").write_text(f"INTAKE_CONFIG={alt}\n", encoding="utf-8")
    write_csv("deals.csv", sample_csv_text)

    try:
        assert cli_main([]) == 0
    finally:
        # load_dotenv が os.environ に書き込むので後続テストへ漏らさない
        os.environ.pop("INTAKE_CONFIG", None)
    capsys.readouterr()
    assert (temp_workdir / "alt-out" / "deals.records.jsonl").exists()
