# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path
import pytest


SAMPLE_CSV = """Company,Industry,Stage,Country,Score,Founders,Website,Description
Acme Robotics,Robotics,Seed,USA,82,"Jane Doe: Ex-Google PM; John Smith: Stanford MBA",https://acme.example.com,"Warehouse robots, for everyone"
Beta Health,Healthtech,Series A,UK,71.5,"Amara Okafor, Tom Berg",https://beta.example.com,Clinical triage
"""


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("INTAKE_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./out
id_prefix: startup
preview_sample_size: 3
capture_unmapped: false
export_csv: true
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "ingest.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sample_csv_text() -> str:
    return SAMPLE_CSV


@pytest.fixture()
def write_csv(temp_workdir: Path):
    def _write(name: str, text: str) -> Path:
        f = temp_workdir / "data" / name
        f.write_text(text, encoding="utf-8")
        return f
    return _write
