# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Ingest orchestration.

Two call modes share the same parse logic:

- preview: parse only, return a summary with the first few turns
- commit: parse, then persist the conversation and its turns in one
  transaction

`parse_input()` never raises. Detection and shape problems as well as
crashes inside a parser are returned as typed errors in the `ParseResult`.
"""

import logging
from dataclasses import dataclass
from typing import Any

from conversation_ingest.config import DEFAULT_PREVIEW_TURNS
from conversation_ingest.models import FORMAT_UNKNOWN, NormalizedConversation, NormalizedTurn
from conversation_ingest.parsers.base import ParseFailureError, ParserError
from conversation_ingest.parsers.registry import detect_format, get_parser
from conversation_ingest.store import ConversationStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseResult:
    """
    Outcome of `parse_input()`.

    Attributes:
        format:
            Format tag that was used (explicit or detected).
        conversation:
            The parsed conversation on success.
        error:
            The typed failure otherwise.
    """

    format: str
    conversation: NormalizedConversation | None = None
    error: ParserError | None = None

    @property
    def ok(self) -> bool:
        return self.conversation is not None

    def unwrap(self) -> NormalizedConversation:
        """Return the conversation or raise the stored error."""

        if self.conversation is None:
            raise self.error or ParseFailureError("Parse error", format=self.format)
        return self.conversation


@dataclass(frozen=True)
class Preview:
    format: str
    title: str
    source: str
    turn_count: int
    turns: tuple[NormalizedTurn, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": self.format,
            "preview": {
                "title": self.title,
                "source": self.source,
                "turn_count": self.turn_count,
                "turns": [t.to_dict() for t in self.turns],
            },
        }


@dataclass(frozen=True)
class IngestReceipt:
    conversation_id: str
    turn_count: int
    format: str


def parse_input(
    raw: Any,
    *,
    format: str | None = None,
    title: str | None = None,
    default_titles: dict[str, str] | None = None,
) -> ParseResult:
    """
    Parse raw input into a normalized conversation.

    Args:
        raw:
            Structured value (decoded JSON/YAML) or text.
        format:
            Optional explicit format tag. Skips detection but not the shape
            check of the selected parser.
        title:
            Optional title with precedence over any title in the input.
        default_titles:
            Optional per-format fallback titles (from the config file).

    Returns:
        A ParseResult holding either the conversation or the error.
    """

    resolved = format or detect_format(raw)

    try:
        parser = get_parser(resolved)
    except ParserError as exc:
        logger.debug("Format detection failed: %s", exc.message)
        return ParseResult(format=FORMAT_UNKNOWN, error=exc)

    try:
        source = parser.validate(raw)
        conversation = parser.parse(
            source,
            title=title or None,
            default_title=(default_titles or {}).get(resolved),
        )
    except ParserError as exc:
        logger.debug("Shape check failed for %s: %s", resolved, exc.message)
        return ParseResult(format=resolved, error=exc)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Parser for %s failed", resolved)
        return ParseResult(
            format=resolved,
            error=ParseFailureError(str(exc) or "Parse error", format=resolved),
        )

    logger.debug("Parsed %d turn(s) as %s", len(conversation.turns), resolved)
    return ParseResult(format=resolved, conversation=conversation)


def preview_input(
    raw: Any,
    *,
    format: str | None = None,
    title: str | None = None,
    limit: int = DEFAULT_PREVIEW_TURNS,
    default_titles: dict[str, str] | None = None,
) -> Preview:
    """
    Parse without persisting and summarize the result.

    Raises:
        ParserError:
            If the input cannot be parsed.
    """

    result = parse_input(raw, format=format, title=title, default_titles=default_titles)
    conversation = result.unwrap()

    return Preview(
        format=result.format,
        title=conversation.title,
        source=conversation.source,
        turn_count=len(conversation.turns),
        turns=conversation.turns[:limit],
    )


def ingest(
    raw: Any,
    store: ConversationStore,
    *,
    format: str | None = None,
    title: str | None = None,
    default_titles: dict[str, str] | None = None,
) -> IngestReceipt:
    """
    Parse raw input and persist it.

    The conversation record and its turns are written inside one store
    transaction; if inserting the turns fails the conversation is rolled back
    as well.

    Args:
        raw:
            Structured value or text.
        store:
            Persistence collaborator.
        format:
            Optional explicit format tag.
        title:
            Optional title override.
        default_titles:
            Optional per-format fallback titles.

    Returns:
        Generated conversation id, number of stored turns and the format.

    Raises:
        ParserError:
            If the input cannot be parsed. Nothing is written in that case.
        Exception:
            Whatever the store raises; the transaction is rolled back.
    """

    result = parse_input(raw, format=format, title=title, default_titles=default_titles)
    conversation = result.unwrap()

    with store.transaction():
        record = store.create_conversation(
            conversation.title, conversation.source, conversation.metadata
        )
        if conversation.turns:
            store.insert_turns(record.id, conversation.turns)

    logger.info(
        "Ingested %s conversation %s with %d turn(s)",
        result.format,
        record.id,
        len(conversation.turns),
    )
    return IngestReceipt(
        conversation_id=record.id,
        turn_count=len(conversation.turns),
        format=result.format,
    )
