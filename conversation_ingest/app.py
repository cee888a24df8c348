from __future__ import annotations

"""
Command line front end for conversation ingest.

Each subcommand (`template`, `detect`, `preview`, `ingest`, `show`) is an action
object; this module wires them into argparse, loads the config for the actions
that need it, and turns config and parse failures into exit codes.
"""

import argparse
import sys
from dotenv import load_dotenv

from conversation_ingest.actions.detect import DetectAction
from conversation_ingest.actions.ingest import IngestAction
from conversation_ingest.actions.preview import PreviewAction
from conversation_ingest.actions.show import ShowAction
from conversation_ingest.actions.template import TemplateAction
from conversation_ingest.config import ConfigError, find_config_path, load_config
from conversation_ingest.logging_setup import configure_logging
from conversation_ingest.parsers.base import ParserError


def _action_repository():
	"""
	List the available subcommands.

	Returns:
		Action instances keyed by subcommand name, in `--help` order.
	"""
	actions = [
		TemplateAction(),
		DetectAction(),
		PreviewAction(),
		IngestAction(),
		ShowAction(),
	]
	return {a.name: a for a in actions}


def build_parser() -> argparse.ArgumentParser:
	"""
	Build the argument parser with one subparser per action.

	Actions that read the configuration also get the shared `--config` option.

	Returns:
		The configured ArgumentParser instance.
	"""
	parser = argparse.ArgumentParser(
		prog="conversation-ingest",
		description=(
			"Normalize meeting transcripts, chat exports, WhatsApp exports and SRT subtitles "
			"into speaker-attributed conversation turns."
		),
	)
	parser.add_argument(
		"--verbose",
		"-v",
		action="store_true",
		help="Enable debug logging",
	)

	actions = _action_repository()

	config_parent = argparse.ArgumentParser(add_help=False)
	config_parent.add_argument(
		"--config",
		"-c",
		help=(
			"Path to ingest.yaml. If omitted, ./ingest.yaml is used when present, "
			"otherwise built-in defaults."
		),
	)

	subparsers = parser.add_subparsers(dest="action", metavar="COMMAND", required=True)

	for name, action in actions.items():
		parents = [config_parent] if action.requires_config else []
		sub = subparsers.add_parser(name, help=action.help, parents=parents)
		action.add_arguments(sub)
		sub.set_defaults(_action_name=name)

	return parser


def main(argv: list[str] | None = None) -> int:
	"""
	Parse the command line and run the selected action.

	Args:
		argv:
			Arguments after the program name. Defaults to `sys.argv[1:]`.

	Returns:
		`0` on success, `2` for a bad config, input file or destination, `4`
		when the input is not a recognizable conversation.
	"""
	load_dotenv()

	parser = build_parser()
	args = parser.parse_args(argv)
	configure_logging(verbose=bool(args.verbose))

	try:
		actions = _action_repository()
		action_name = getattr(args, "_action_name", None)
		if not action_name or action_name not in actions:
			parser.error("Unknown or missing command")
			return 2

		action = actions[action_name]

		config = None
		if action.requires_config:
			cli_config = getattr(args, "config", None)
			config = load_config(find_config_path(cli_config), required=bool(cli_config))

		action.run(args, config)
		return 0
	except ConfigError as exc:
		print(f"error: {exc}", file=sys.stderr)
		return 2
	except ParserError as exc:
		print(f"{exc.kind} error: {exc}", file=sys.stderr)
		return 4


if __name__ == "__main__":
	raise SystemExit(main())
