# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Preview action.

The `preview` subcommand parses a conversation file and shows how it would be
stored (format, title, turn count and the first few turns) without writing
anything to the database.
"""

import argparse
import json
from dataclasses import dataclass

from conversation_ingest.actions.base import add_input_arguments
from conversation_ingest.config import IngestConfig
from conversation_ingest.ingest import Preview, preview_input
from conversation_ingest.input_io import read_input, unwrap_payload


@dataclass(frozen=True)
class PreviewAction:
    """
    `preview` subcommand.

    Parses the input and prints a summary. No side effects.
    """

    name: str = "preview"
    help: str = "Parse a conversation file without storing it"
    requires_config: bool = True

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """
        Register CLI arguments for the `preview` subcommand.

        Args:
            parser:
                Subparser for this command.

        Returns:
            None
        """

        add_input_arguments(parser)
        parser.add_argument(
            "--limit",
            type=int,
            default=None,
            help="Number of turns to show (default: preview_turns from the config, 5)",
        )
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the preview as JSON",
        )

    def run(self, args: argparse.Namespace, config: IngestConfig | None) -> None:
        """
        Execute the preview.

        Args:
            args:
                Parsed args for the subcommand.
            config:
                Loaded configuration.

        Returns:
            None

        Raises:
            ParserError:
                If the input cannot be parsed.
        """

        if config is None:
            raise RuntimeError("PreviewAction requires a config, but none was provided")

        payload = unwrap_payload(read_input(args.input))
        limit = args.limit if args.limit is not None else config.preview_turns

        preview = preview_input(
            payload.data,
            format=args.format or payload.format,
            title=args.title or payload.title,
            limit=max(limit, 0),
            default_titles=config.default_titles,
        )

        if bool(args.json):
            print(json.dumps(preview.to_dict(), ensure_ascii=False, indent=2))
        else:
            print(self._render(preview))

    def _render(self, preview: Preview) -> str:
        """Format a preview for the terminal."""

        lines = [
            f"Format: {preview.format}",
            f"Title: {preview.title}",
            f"Turns: {preview.turn_count}",
        ]
        for turn in preview.turns:
            start = "--:--:--" if turn.start_ms is None else _format_ms(turn.start_ms)
            text = turn.text.replace("\n", " / ")
            lines.append(f"  [{turn.turn_index}] {start} {turn.speaker}: {text}")

        remaining = preview.turn_count - len(preview.turns)
        if remaining > 0:
            lines.append(f"  ... {remaining} more turn(s)")

        return "\n".join(lines)


def _format_ms(value: int) -> str:
    """Format milliseconds as `H:MM:SS`. Large absolute values are left as-is."""

    if value < 0 or value >= 100 * 3_600_000:
        return str(value)

    seconds = value // 1000
    return f"{seconds // 3600}:{seconds // 60 % 60:02d}:{seconds % 60:02d}"
