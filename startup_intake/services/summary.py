from __future__ import annotations

from ..models.processing_result import IngestRunResult

"""SUMMARY line rendering for the batch runner.

Format:
SUMMARY files={total}/{total} success={success} failed={failed} records={records}
skipped_rows={skipped} missing_scores={missing} founders={founders}
elapsed_sec={elapsed} throughput_rps={throughput}
"""

__all__ = [
    "format_number",
    "render_summary_line",
]


def format_number(value: float) -> str:
    """Integral values without a fractional part, tiny values without exponent.

    >>> format_number(2.0), format_number(0), format_number(0.0025), format_number(1.5)
    ('2', '0', '0.0025', '1.5')
    """
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(value)


def render_summary_line(result: IngestRunResult) -> str:
    total = result.total_files
    return (
        f"SUMMARY files={total}/{total} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"records={result.total_records} "
        f"skipped_rows={result.skipped_rows} "
        f"missing_scores={result.missing_scores} "
        f"founders={result.total_founders} "
        f"elapsed_sec={format_number(result.elapsed_seconds)} "
        f"throughput_rps={format_number(result.throughput_rows_per_sec)}"
    )
