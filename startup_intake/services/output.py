from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.founder import FounderEntity
from ..models.record import NormalizedRecord
from .serializer import serialize_records

"""Output writers used by the batch runner.

The pure pipeline never touches files; these helpers persist its results:
- ``<stem>.records.jsonl`` / ``<stem>.founders.jsonl``: one JSON object per
  line, each with its own key set (absent leaves stay absent)
- ``<stem>.export.csv``: the fixed-schema CSV export
- ``<stem>.records.flat.csv`` (optional): every record flattened by pandas
  into dotted columns (``company.website``, ``custom_data.fund_size`` ...)
"""

__all__ = [
    "records_frame",
    "write_jsonl",
    "write_flat_csv",
    "write_run_outputs",
]


def records_frame(records: Sequence[NormalizedRecord]) -> pd.DataFrame:
    """Flatten records into a DataFrame (nested groups become dotted columns)."""
    if not records:
        return pd.DataFrame()
    return pd.json_normalize([r.as_dict() for r in records], sep=".")


def write_jsonl(rows: Sequence[dict[str, Any]], path: Path) -> Path:
    # 行ごとに dumps: DataFrame 経由だと欠損キーが null で埋まり float 精度も落ちる
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False) + "\n")
    return path


def write_flat_csv(records: Sequence[NormalizedRecord], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    records_frame(records).to_csv(path, index=False, lineterminator="\n")
    return path


def write_run_outputs(
    stem: str,
    output_dir: Path,
    records: Sequence[NormalizedRecord],
    founders: Sequence[FounderEntity],
    *,
    export_csv: bool = True,
    flat_csv: bool = False,
) -> list[Path]:
    """Write the JSON Lines files plus the optional CSV outputs.

    The CSV export and the flat CSV are only written when there is at least
    one record.

    Raises:
        OSError: output directory or file cannot be written
    """
    written = [
        write_jsonl([r.as_dict() for r in records], output_dir / f"{stem}.records.jsonl"),
        write_jsonl([f.as_dict() for f in founders], output_dir / f"{stem}.founders.jsonl"),
    ]
    if export_csv and records:
        export_path = output_dir / f"{stem}.export.csv"
        export_path.write_text(serialize_records(records) + "\n", encoding="utf-8")
        written.append(export_path)
    if flat_csv and records:
        written.append(write_flat_csv(records, output_dir / f"{stem}.records.flat.csv"))
    return written
