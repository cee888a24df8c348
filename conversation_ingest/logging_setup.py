# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Centralized logging configuration for the CLI.

Library modules only call `logging.getLogger(__name__)`; handlers are set up
here once, when the CLI starts.

Environment variables:
    - `CONVERSATION_INGEST_LOG_LEVEL`: root log level (default: `WARNING`)
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler


LOG_LEVEL_ENV = "CONVERSATION_INGEST_LOG_LEVEL"
DEFAULT_LEVEL_NAME = "WARNING"

console = Console(stderr=True)


def _resolve_level(verbose: bool) -> int:
    if verbose:
        return logging.DEBUG

    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LEVEL_NAME).upper()
    return getattr(logging, level_name, logging.WARNING)


def configure_logging(*, verbose: bool = False) -> None:
    """Install a single Rich handler on the root logger.

    Args:
        verbose:
            Force debug output regardless of the environment.
    """

    root_logger = logging.getLogger()

    handler = next(
        (h for h in root_logger.handlers if getattr(h, "_conversation_ingest", False)),
        None,
    )
    if handler is None:
        handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._conversation_ingest = True  # type: ignore[attr-defined]
        root_logger.addHandler(handler)

    root_logger.setLevel(_resolve_level(verbose))
    logging.captureWarnings(True)
