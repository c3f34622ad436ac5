from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..services.column_mapper import MappingError, validate_mapping

"""Config loader for the batch CSV runner.

Responsibilities:
- Load YAML config (default ``config/ingest.yml``; ``INTAKE_CONFIG`` env var
  or the CLI ``--config`` flag override the path)
- Validate against ``config_schema.json`` (additional keys rejected)
- Validate the explicit column mapping, if one is configured
- Apply defaults
"""

__all__ = [
    "ConfigError",
    "IngestConfig",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "config_path_from_env",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/ingest.yml")
CONFIG_ENV_VAR = "INTAKE_CONFIG"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class IngestConfig:
    source_directory: str
    output_directory: str
    column_mapping: dict[str, str] | None = None  # None -> heuristic mapping per file
    id_prefix: str = "startup"
    preview_sample_size: int = 3
    capture_unmapped: bool = False
    export_csv: bool = True
    flat_csv: bool = False  # pandas json_normalize view, <stem>.records.flat.csv


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def config_path_from_env(default: Path = DEFAULT_CONFIG_PATH) -> Path:
    value = os.getenv(CONFIG_ENV_VAR)
    return Path(value) if value else default


def load_config(path: Path) -> IngestConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config validation failed: top-level value must be a mapping")

    _validate_config_schema(data)

    mapping = data.get("column_mapping")
    if mapping is not None:
        try:
            validate_mapping(mapping)
        except MappingError as e:
            raise ConfigError(str(e)) from e

    return IngestConfig(
        source_directory=data["source_directory"],
        output_directory=data["output_directory"],
        column_mapping=dict(mapping) if mapping is not None else None,
        id_prefix=data.get("id_prefix", "startup"),
        preview_sample_size=data.get("preview_sample_size", 3),
        capture_unmapped=data.get("capture_unmapped", False),
        export_csv=data.get("export_csv", True),
        flat_csv=data.get("flat_csv", False),
    )
