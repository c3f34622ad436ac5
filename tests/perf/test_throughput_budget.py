from __future__ import annotations

import time

import pytest

from scripts.gen_perf_dataset import generate_startup_data
from startup_intake.services.pipeline import ingest_text

"""Performance test: ingestion throughput on a synthetic deal-flow export.

Budget: >= 1000 rows/sec through tokenize -> map -> build -> founders for a
20k row CSV (kept small so the suite stays fast in CI).
"""

ROWS = 20_000
MIN_ROWS_PER_SEC = 1_000


@pytest.mark.perf
def test_ingest_throughput_budget():
    df = generate_startup_data(ROWS, seed=7, missing_sector_ratio=0.02, bad_score_ratio=0.05)
    text = df.to_csv(index=False, lineterminator="\n")

    start = time.perf_counter()
    result = ingest_text(text)
    elapsed = time.perf_counter() - start

    diag = result.diagnostics
    expected_skipped = int((df["Industry"] == "").sum())
    kept = df[df["Industry"] != ""]
    expected_missing = int((kept["Score"] == "n/a").sum())

    assert diag.total_rows == ROWS
    assert diag.skipped == expected_skipped
    assert diag.parsed == ROWS - expected_skipped
    assert diag.missing_scores == expected_missing
    assert len(result.founders) >= diag.parsed

    throughput = ROWS / elapsed if elapsed > 0 else float("inf")
    print(f"\nIngested {ROWS:,} rows in {elapsed:.2f}s ({throughput:,.0f} rows/sec)")
    assert throughput >= MIN_ROWS_PER_SEC, f"throughput {throughput:.0f} rows/sec below budget"


@pytest.mark.perf
def test_generated_dataset_is_reproducible():
    a = generate_startup_data(500, seed=3)
    b = generate_startup_data(500, seed=3)
    assert a.equals(b)
