from __future__ import annotations

"""
Show action.

The `show` subcommand prints a stored conversation with all of its turns.
"""

import argparse
import json
from dataclasses import asdict, dataclass

import yaml

from conversation_ingest.config import ConfigError, IngestConfig
from conversation_ingest.store import DuckDBConversationStore


@dataclass(frozen=True)
class ShowAction:
    """
    `show` subcommand.

    Prints one stored conversation as YAML (default) or JSON.
    """

    name: str = "show"
    help: str = "Print a stored conversation"
    requires_config: bool = True

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("conversation_id", help="Id printed by the ingest command")
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print JSON instead of YAML",
        )

    def run(self, args: argparse.Namespace, config: IngestConfig | None) -> None:
        """
        Print the conversation.

        Raises:
            ConfigError:
                If the database does not exist or has no such conversation.
        """

        if config is None:
            raise RuntimeError("ShowAction requires a config, but none was provided")

        if not config.database.exists():
            raise ConfigError(f"Database not found: {config.database}")

        with DuckDBConversationStore(config.database) as store:
            conversation = store.get_conversation(args.conversation_id)

        if conversation is None:
            raise ConfigError(f"No conversation with id: {args.conversation_id}")

        record = asdict(conversation)
        record["turns"] = [asdict(t) for t in conversation.turns]
        if record.get("created_at") is not None:
            record["created_at"] = record["created_at"].isoformat()

        if bool(args.json):
            print(json.dumps(record, ensure_ascii=False, indent=2))
        else:
            print(yaml.safe_dump(record, sort_keys=False, allow_unicode=True), end="")
