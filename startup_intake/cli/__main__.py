from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import ConfigError, IngestConfig, config_path_from_env, load_config
from ..logging.init import get_logger, log_summary, setup_logging
from ..parsing.reader import IngestError, preview_csv, tokenize
from ..services.batch_runner import ProcessingError, process_all, scan_csv_files
from ..services.column_mapper import resolve_mapping, unmapped_headers
from ..services.founder_roster import parse_founder_roster, suggest_founder_mapping
from ..services.output import write_jsonl
from ..services.record_builder import infer_field_type
from ..services.summary import render_summary_line

"""CLI entrypoint: ``python -m startup_intake.cli``.

Flow:
- Load ``.env`` (so INTAKE_CONFIG and friends can be set there)
- Load + validate the YAML config
- ``--preview``: print headers, sample rows and the suggested mapping per file
- ``--roster PATH``: import a founder roster CSV to ``<stem>.roster.jsonl``
- otherwise ingest every CSV in ``source_directory`` and print one SUMMARY line

Exit codes: 0 all files ingested, 2 at least one file failed, 1 fatal.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load ``.env`` via python-dotenv; missing file is not an error."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Startup CSV intake: CSV exports -> normalized records")
    p.add_argument("--config", type=Path, default=None, help="Path to ingest.yml (default: $INTAKE_CONFIG or config/ingest.yml)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--preview", action="store_true", help="Print headers, sample rows and suggested mapping, then exit")
    p.add_argument("--roster", type=Path, default=None, help="Import a founder roster CSV into output_directory, then exit")
    return p.parse_args(argv)


def _preview(cfg: IngestConfig) -> int:
    try:
        files = scan_csv_files(Path(cfg.source_directory))
    except ProcessingError as e:
        print(f"preview: {e}")
        return EXIT_FATAL
    if not files:
        print("preview: no .csv files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            pv = preview_csv(f.read_text(encoding="utf-8-sig"), sample_size=cfg.preview_sample_size)
        except (IngestError, UnicodeDecodeError) as e:
            print(f"  error={e}")
            continue
        mapping = resolve_mapping(pv.headers, cfg.column_mapping)
        print(f"  headers={pv.headers} rows={pv.row_count}")
        print("  sample_rows=", json.dumps(pv.sample_rows, ensure_ascii=False))
        print("  mapping=", json.dumps(dict(mapping), ensure_ascii=False, sort_keys=True))
        unmapped = unmapped_headers(pv.headers, mapping)
        print(f"  unmapped={unmapped}")
        if unmapped and pv.sample_rows:
            # 未マッピング列は先頭サンプル行の値から型を推定
            first = dict(zip(pv.headers, pv.sample_rows[0]))
            types = {h: infer_field_type(first.get(h)) for h in unmapped}
            print("  custom_types=", json.dumps(types, ensure_ascii=False))
    return EXIT_SUCCESS_ALL


def _import_roster(cfg: IngestConfig, roster_path: Path) -> int:
    logger = get_logger()
    try:
        text = roster_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"roster: {e}")
        return EXIT_FATAL
    rows = tokenize(text)
    mapping = suggest_founder_mapping(rows[0]) if rows else {}
    if "name" not in mapping:
        logger.error(f"roster: no founder name column in {roster_path.name}")
        return EXIT_FATAL
    founders = parse_founder_roster(text, mapping)
    out_path = Path(cfg.output_directory) / f"{roster_path.stem}.roster.jsonl"
    try:
        write_jsonl([f.as_dict() for f in founders], out_path)
    except OSError as e:
        logger.error(f"roster: {e}")
        return EXIT_FATAL
    logger.info(f"roster {roster_path.name}: {len(founders)} founders of {len(rows) - 1} rows -> {out_path}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # [] を渡されたときに sys.argv (pytest の引数) を読まないよう None のみ判定
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        for h in logger.handlers:
            h.setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))
    config_path = args.config or config_path_from_env()
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.preview:
        return _preview(cfg)
    if args.roster is not None:
        return _import_roster(cfg, args.roster)

    logger.info(f"Ingesting CSV files from: {directory}")
    try:
        result = process_all(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    # log_summary が "SUMMARY " を付けるので先頭ラベルを除去
    summary_line = render_summary_line(result)
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
