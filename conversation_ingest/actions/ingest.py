# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""
Ingest action.

The `ingest` subcommand parses a conversation file and stores the
conversation and its turns in the configured DuckDB database.
"""

import argparse
from dataclasses import dataclass

from conversation_ingest.actions.base import add_input_arguments
from conversation_ingest.config import IngestConfig
from conversation_ingest.ingest import ingest
from conversation_ingest.input_io import read_input, unwrap_payload
from conversation_ingest.store import DuckDBConversationStore


@dataclass(frozen=True)
class IngestAction:
    """
    `ingest` subcommand.

    Stores one conversation per invocation.
    """

    name: str = "ingest"
    help: str = "Parse a conversation file and store it"
    requires_config: bool = True

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        add_input_arguments(parser)

    def run(self, args: argparse.Namespace, config: IngestConfig | None) -> None:
        """
        Execute the ingest.

        Args:
            args:
                Parsed args for the subcommand.
            config:
                Loaded configuration.

        Returns:
            None

        Raises:
            ParserError:
                If the input cannot be parsed. Nothing is stored in that case.
        """

        if config is None:
            raise RuntimeError("IngestAction requires a config, but none was provided")

        payload = unwrap_payload(read_input(args.input))

        with DuckDBConversationStore(config.database) as store:
            receipt = ingest(
                payload.data,
                store,
                format=args.format or payload.format,
                title=args.title or payload.title,
                default_titles=config.default_titles,
            )

        print(
            f"Ingested {receipt.format} conversation {receipt.conversation_id} "
            f"with {receipt.turn_count} turn(s) into: {config.database}"
        )
