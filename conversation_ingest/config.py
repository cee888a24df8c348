# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Configuration loading and validation.

This module handles reading `ingest.yaml`, validating its keys, and
normalizing paths so that actions can rely on a typed config object. The
file is optional: without it every setting has a default.

Environment variables:
    - `CONVERSATION_INGEST_DATABASE`: overrides the configured database path
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from conversation_ingest.models import SUPPORTED_FORMATS


DATABASE_ENV = "CONVERSATION_INGEST_DATABASE"
DEFAULT_DATABASE = "conversations.duckdb"
DEFAULT_PREVIEW_TURNS = 5


@dataclass(frozen=True)
class IngestConfig:
    """
    Parsed configuration for the ingest tool.

    Attributes:
        config_path:
            Path to the YAML file used, or None if defaults are in effect.
        database:
            DuckDB database file conversations are stored in.
        preview_turns:
            Number of turns shown by `preview`.
        default_titles:
            Per-format title overrides used when neither the caller nor the
            input provides a title.
    """

    config_path: Path | None
    database: Path
    preview_turns: int = DEFAULT_PREVIEW_TURNS
    default_titles: dict[str, str] = field(default_factory=dict)


class ConfigError(RuntimeError):
    """
    Raised when the YAML configuration or an input file is missing, invalid,
    or cannot be parsed.
    """

    pass


def find_config_path(cli_path: str | None) -> Path:
    """
    Determine which YAML config file to use.

    Args:
        cli_path:
            Optional config path provided on the command line.

    Returns:
        The resolved Path object (not necessarily existing).
    """

    if cli_path:
        return Path(cli_path)

    return Path.cwd() / "ingest.yaml"


def _parse_titles(value: Any) -> dict[str, str]:
    """
    Parse the optional `titles` mapping (format tag -> default title).

    Raises:
        ConfigError:
            If the section is not a mapping, names an unknown format, or has
            an empty title.
    """

    if value is None:
        return {}

    if not isinstance(value, dict):
        raise ConfigError("'titles' must be a mapping if provided")

    titles: dict[str, str] = {}
    for fmt, title in value.items():
        if fmt not in SUPPORTED_FORMATS:
            raise ConfigError(
                f"titles: unknown format '{fmt}' (supported: {', '.join(SUPPORTED_FORMATS)})"
            )
        if not isinstance(title, str) or not title.strip():
            raise ConfigError(f"titles.{fmt} must be a non-empty string")
        titles[fmt] = title.strip()

    return titles


def load_config(path: Path, *, required: bool = False) -> IngestConfig:
    """
    Load and validate an `ingest.yaml` configuration file.

    Args:
        path:
            Path to the YAML config file.
        required:
            If True, a missing file is an error. Otherwise defaults are used.

    Returns:
        A validated IngestConfig instance.

    Raises:
        ConfigError:
            If the file is required but missing, unreadable, cannot be parsed
            as YAML, or contains invalid values.
    """

    raw: dict[str, Any] = {}
    config_path: Path | None = None
    base_dir = Path.cwd()

    if path.exists():
        if not path.is_file():
            raise ConfigError(f"Config path is not a file: {path}")

        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        except Exception as exc:  # noqa: BLE001
            raise ConfigError(f"Failed to read YAML config: {path}: {exc}") from exc

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError("Config YAML must contain a mapping at the top level")

        raw = loaded
        config_path = path.resolve()
        base_dir = path.parent.resolve()
    elif required:
        raise ConfigError(
            f"Config file not found: {path}. "
            "Use the 'template' command to create one or omit --config to use defaults."
        )

    database = os.environ.get(DATABASE_ENV) or raw.get("database", DEFAULT_DATABASE)
    if not isinstance(database, str) or not database.strip():
        raise ConfigError("'database' must be a non-empty string")

    preview_turns = raw.get("preview_turns", DEFAULT_PREVIEW_TURNS)
    if not isinstance(preview_turns, int) or isinstance(preview_turns, bool):
        raise ConfigError("'preview_turns' must be an integer")
    if preview_turns <= 0:
        raise ConfigError("'preview_turns' must be > 0")

    # Interpret the database path relative to the config file location.
    database_path = Path(database.strip())
    if not database_path.is_absolute():
        database_path = (base_dir / database_path).resolve()

    return IngestConfig(
        config_path=config_path,
        database=database_path,
        preview_turns=preview_turns,
        default_titles=_parse_titles(raw.get("titles")),
    )
