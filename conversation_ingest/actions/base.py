from __future__ import annotations

"""
Shared action interface.

Actions implement a small protocol so the CLI can dynamically register arguments
and dispatch execution based on the selected subcommand.
"""

import argparse
from typing import Protocol

from conversation_ingest.config import IngestConfig
from conversation_ingest.models import SUPPORTED_FORMATS


class Action(Protocol):
    """
    Interface for a CLI action (subcommand).

    Implementations are expected to:
    - Provide a `name` used as the subcommand.
    - Provide a short `help` string for `--help`.
    - Declare whether they need the (possibly defaulted) configuration.
    """

    name: str
    help: str
    requires_config: bool

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """
        Register action-specific CLI arguments.

        Args:
            parser:
                The subparser dedicated to this action.

        Returns:
            None
        """

    def run(self, args: argparse.Namespace, config: IngestConfig | None) -> None:
        """
        Execute the action.

        Args:
            args:
                Parsed arguments for this subcommand.
            config:
                Loaded configuration, if `requires_config` is True.

        Returns:
            None
        """


def add_input_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the input file plus `--format`/`--title` overrides."""

    parser.add_argument(
        "input",
        help="Conversation file (.json, .yaml, .srt, .txt) or '-' for stdin",
    )
    parser.add_argument(
        "--format",
        choices=SUPPORTED_FORMATS,
        help="Skip format detection and use this format",
    )
    parser.add_argument(
        "--title",
        help="Conversation title (overrides any title found in the input)",
    )
