from __future__ import annotations

"""
Format detection action.

The `detect` subcommand prints which input format would be used for a file,
without parsing or storing anything.
"""

import argparse
from dataclasses import dataclass

from conversation_ingest.config import IngestConfig
from conversation_ingest.input_io import read_input, unwrap_payload
from conversation_ingest.parsers.registry import detect_format


@dataclass(frozen=True)
class DetectAction:
    """
    `detect` subcommand.

    Prints the detected format tag (`unknown` if nothing matches).
    """

    name: str = "detect"
    help: str = "Print the detected input format"
    requires_config: bool = False

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument(
            "input",
            help="Conversation file (.json, .yaml, .srt, .txt) or '-' for stdin",
        )

    def run(self, args: argparse.Namespace, config: IngestConfig | None) -> None:
        _ = config
        payload = unwrap_payload(read_input(args.input))
        print(payload.format or detect_format(payload.data))
