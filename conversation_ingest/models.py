# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Canonical conversation records.

Every parser converges on the same representation: a conversation with an
ordered tuple of speaker-attributed turns. Optional timing fields use `None`
for "could not be resolved", which is deliberately distinct from `0`.
"""

from dataclasses import dataclass, field
from typing import Any


FORMAT_JSON_TRANSCRIPT = "json-transcript"
FORMAT_CHAT_LOG = "chat-log"
FORMAT_WHATSAPP = "whatsapp"
FORMAT_SRT = "srt"
FORMAT_UNKNOWN = "unknown"

SUPPORTED_FORMATS: tuple[str, ...] = (
    FORMAT_JSON_TRANSCRIPT,
    FORMAT_CHAT_LOG,
    FORMAT_WHATSAPP,
    FORMAT_SRT,
)

UNKNOWN_SPEAKER = "Unknown"


@dataclass(frozen=True)
class NormalizedTurn:
    """
    One attributed utterance.

    Attributes:
        speaker:
            Display name, `"Unknown"` when the source does not attribute it.
        text:
            Utterance text, never empty after trimming.
        turn_index:
            Zero-based position in the final emission order.
        start_ms:
            Elapsed milliseconds, or None if the source timestamp could not
            be resolved.
        end_ms:
            End boundary in milliseconds, only for formats that express one.
        metadata:
            Format-specific provenance (original date strings, cue index).
    """

    speaker: str
    text: str
    turn_index: int
    start_ms: int | None = None
    end_ms: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "speaker": self.speaker,
            "text": self.text,
            "start_ms": self.start_ms,
            "end_ms": self.end_ms,
            "turn_index": self.turn_index,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class NormalizedConversation:
    """
    Result of parsing one input document.

    Attributes:
        title:
            Caller title, else a title embedded in the input, else the
            format's default title.
        source:
            Format tag of the parser that produced the conversation.
        turns:
            Turns in conversational order (`turns[i].turn_index == i`).
        metadata:
            Format-scoped extras, e.g. the channel of a chat log.
    """

    title: str
    source: str
    turns: tuple[NormalizedTurn, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "source": self.source,
            "metadata": dict(self.metadata),
            "turns": [t.to_dict() for t in self.turns],
        }


def number_turns(turns: list[NormalizedTurn]) -> tuple[NormalizedTurn, ...]:
    """Drop turns with blank text and assign contiguous turn indexes."""

    out: list[NormalizedTurn] = []
    for turn in turns:
        text = turn.text.strip()
        if not text:
            continue
        out.append(
            NormalizedTurn(
                speaker=turn.speaker.strip() or UNKNOWN_SPEAKER,
                text=text,
                turn_index=len(out),
                start_ms=turn.start_ms,
                end_ms=turn.end_ms,
                metadata=turn.metadata,
            )
        )
    return tuple(out)
