from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import IngestConfig
from ..logging.skip_log import FILE_LEVEL_ROW, SkipLogBuffer, SkipRecord
from ..models.processing_result import FileStat, IngestRunResult
from ..parsing.reader import IngestError
from .column_mapper import MappingError
from .output import write_run_outputs
from .pipeline import IngestResult, ingest_text
from .progress import ProgressTracker

"""Batch runner: ingest every CSV file of a directory.

Each file is ingested independently. A file that cannot be ingested at all
(empty, header only, bad explicit mapping, undecodable, unreadable, or its
outputs cannot be written) is counted as failed and recorded in the skip log
with row=-1; the run continues with the next file. Outputs already written
for a file whose later output failed are left in place. Rows skipped inside
a successful file are recorded individually.
"""

__all__ = [
    "ProcessingError",
    "scan_csv_files",
    "process_all",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error that prevents the run from starting."""


def scan_csv_files(directory: Path) -> list[Path]:
    """Sorted ``*.csv`` files directly under ``directory`` (non-recursive).

    Raises:
        ProcessingError: directory missing, not a directory, or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ".csv")
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def _id_prefix(config: IngestConfig, file_path: Path) -> str:
    # ファイル間で id が衝突しないよう stem を付与
    return f"{config.id_prefix}-{file_path.stem}"


def _ingest_file(file_path: Path, config: IngestConfig) -> IngestResult:
    text = file_path.read_text(encoding="utf-8-sig")
    return ingest_text(
        text,
        config.column_mapping,
        id_prefix=_id_prefix(config, file_path),
        capture_unmapped=config.capture_unmapped,
    )


def _failed_stat(file_path: Path, file_start: datetime, error: Exception, skip_log: SkipLogBuffer) -> FileStat:
    logger.error(f"{file_path.name}: {error}")
    skip_log.append(SkipRecord.create(file_path.name, FILE_LEVEL_ROW, str(error)))
    return FileStat(
        file_name=file_path.name,
        status="failed",
        records=0,
        skipped_rows=0,
        missing_scores=0,
        founders=0,
        elapsed_seconds=(datetime.now(UTC) - file_start).total_seconds(),
        error=str(error),
    )


def process_all(config: IngestConfig, skip_log: SkipLogBuffer | None = None) -> IngestRunResult:
    """Ingest all CSV files in ``config.source_directory``.

    A file that cannot be read, ingested or written is counted as failed and
    the run moves on to the next file.

    Raises:
        ProcessingError: the source directory cannot be scanned
    """
    start_time = datetime.now(UTC)
    skip_log = skip_log if skip_log is not None else SkipLogBuffer()
    file_paths = scan_csv_files(Path(config.source_directory))
    output_dir = Path(config.output_directory)

    file_stats: list[FileStat] = []
    success_count = failed_count = 0
    total_records = total_skipped = total_missing = total_founders = 0

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            file_start = datetime.now(UTC)
            try:
                result = _ingest_file(file_path, config)
                write_run_outputs(
                    file_path.stem,
                    output_dir,
                    result.records,
                    result.founders,
                    export_csv=config.export_csv,
                    flat_csv=config.flat_csv,
                )
            except (IngestError, MappingError, UnicodeDecodeError, OSError) as e:
                failed_count += 1
                file_stats.append(_failed_stat(file_path, file_start, e, skip_log))
                progress.finish_file(failed=True)
                continue

            diag = result.diagnostics
            # 出力まで成功したファイルの行スキップのみ記録
            for skip in diag.skip_reasons:
                skip_log.append(
                    SkipRecord.create(file_path.name, skip.row, skip.reason, list(skip.missing_fields))
                )
            logger.info(f"{file_path.name}: {diag.describe()}")

            success_count += 1
            total_records += diag.parsed
            total_skipped += diag.skipped
            total_missing += diag.missing_scores
            total_founders += len(result.founders)
            file_stats.append(
                FileStat(
                    file_name=file_path.name,
                    status="success",
                    records=diag.parsed,
                    skipped_rows=diag.skipped,
                    missing_scores=diag.missing_scores,
                    founders=len(result.founders),
                    elapsed_seconds=(datetime.now(UTC) - file_start).total_seconds(),
                )
            )
            progress.finish_file(records=diag.parsed, skipped=diag.skipped)

    try:
        skip_log.flush()
    except OSError as e:
        # スキップログ書き込み失敗で実行全体は失敗させない
        logger.warning(f"failed to write skip log: {e}")

    end_time = datetime.now(UTC)
    elapsed = (end_time - start_time).total_seconds()
    throughput = total_records / elapsed if elapsed > 0 else 0.0
    return IngestRunResult(
        success_files=success_count,
        failed_files=failed_count,
        total_records=total_records,
        skipped_rows=total_skipped,
        missing_scores=total_missing,
        total_founders=total_founders,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed,
        throughput_rows_per_sec=throughput,
        file_stats=file_stats,
    )
