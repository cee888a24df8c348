# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Starter `ingest.yaml`.

The `template` subcommand writes a commented config listing every setting
(database location, preview length, per-format default titles) with its
default value.
"""

import argparse
from dataclasses import dataclass
from pathlib import Path

from conversation_ingest.config import ConfigError, IngestConfig


@dataclass(frozen=True)
class TemplateAction:
    """
    `template` subcommand.

    Runs without a config; the file it writes is optional anyway, since every
    setting has a built-in default.
    """

    name: str = "template"
    help: str = "Write a template ingest.yaml config"
    requires_config: bool = False

    _TEMPLATE_YAML: str = "\n".join(
        [
            "# DuckDB database file for stored conversations.",
            "# Relative paths are resolved against this file's directory.",
            "# The CONVERSATION_INGEST_DATABASE environment variable overrides it.",
            "database: ./conversations.duckdb",
            "",
            "# Number of turns shown by the 'preview' command",
            "preview_turns: 5",
            "",
            "# Titles used when neither --title nor the input provides one (optional)",
            "# titles:",
            "#   json-transcript: Untitled Transcript",
            "#   chat-log: Untitled Chat",
            "#   whatsapp: WhatsApp Chat",
            "#   srt: Subtitle Transcript",
            "",
        ]
    )

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "path",
            nargs="?",
            default="ingest.yaml",
            help="Destination path for the template (default: ./ingest.yaml)",
        )
        parser.add_argument(
            "-f",
            "--force",
            action="store_true",
            help="Replace the file if it already exists",
        )

    def run(self, args: argparse.Namespace, config: IngestConfig | None) -> None:
        """
        Write the template to `args.path`.

        Raises:
            ConfigError:
                If the file already exists and `--force` was not given.
        """

        _ = config
        dest = Path(args.path)
        self._write_template(dest, force=bool(args.force))
        print(f"Wrote template config to: {dest}")

    def _write_template(self, dest: Path, *, force: bool) -> None:
        if dest.exists() and not force:
            raise ConfigError(f"Refusing to overwrite existing file: {dest} (use --force)")

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(self._TEMPLATE_YAML, encoding="utf-8")
