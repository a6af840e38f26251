from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from booking_import.models.config_models import ImportConfig, StoreConfig

"""Config loader.

Responsibilities:
- Load YAML config/import.yml
- Validate against config_schema.json (unknown keys rejected)
- Apply defaults for optional keys
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/import.yml")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing or invalid, or the config data fails
            validation (missing required keys, wrong types, unknown keys).
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


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    store_raw = data.get("store") or {}
    store = StoreConfig(
        backend=store_raw.get("backend", "memory"),
        bookings_table=store_raw.get("bookings_table", "bookings"),
        vehicles_table=store_raw.get("vehicles_table", "vehicles"),
        host=store_raw.get("host"),
        port=store_raw.get("port"),
        user=store_raw.get("user"),
        password=store_raw.get("password"),
        database=store_raw.get("database"),
        dsn=store_raw.get("dsn"),
    )
    return ImportConfig(
        output_directory=data["output_directory"],
        error_log_directory=data.get("error_log_directory", "./logs"),
        actor=data.get("actor", "bulk_upload"),
        commit_concurrency=data.get("commit_concurrency", 1),
        strict_headers=data.get("strict_headers", True),
        store=store,
    )
