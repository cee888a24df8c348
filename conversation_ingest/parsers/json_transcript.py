# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""JSON meeting transcript parser.

Expected shape:

    {"title": "...", "entries": [{"speaker": "...", "timestamp": "00:01:05",
                                  "start": 65000, "end": 68000, "text": "..."}]}

Timestamps are passed through as the source expresses them. Unlike chat logs
and WhatsApp exports there is no rebasing to the first turn: an ISO
`timestamp` therefore ends up as an absolute epoch value.
"""

import math
from dataclasses import dataclass
from typing import Any

from conversation_ingest.models import (
    FORMAT_JSON_TRANSCRIPT,
    UNKNOWN_SPEAKER,
    NormalizedConversation,
    NormalizedTurn,
    number_turns,
)
from conversation_ingest.parsers.base import ShapeMismatchError
from conversation_ingest.timestamps import parse_clock_ms, parse_iso_ms


@dataclass(frozen=True)
class JsonTranscriptInput:
    title: str | None
    entries: list[dict[str, Any]]


def _as_ms(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return int(round(value))


def _text_value(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def parse_timestamp_ms(timestamp: Any) -> int | None:
    """Resolve an entry timestamp: ISO-8601 first, then `HH:MM:SS`/`MM:SS`/`SS`.

    Bare numbers are seconds.
    """

    if isinstance(timestamp, (int, float)) and not isinstance(timestamp, bool):
        return parse_clock_ms(str(timestamp))

    iso = parse_iso_ms(timestamp)
    if iso is not None:
        return iso
    return parse_clock_ms(timestamp)


class JsonTranscriptParser:
    """Parse `{entries: [...]}` transcripts from meeting recording tools."""

    format = FORMAT_JSON_TRANSCRIPT
    default_title = "Untitled Transcript"

    def detects(self, raw: Any) -> bool:
        if not isinstance(raw, dict):
            return False

        entries = raw.get("entries")
        if not isinstance(entries, list):
            return False

        return all(
            isinstance(entry, dict)
            and "text" in entry
            and ("speaker" in entry or "timestamp" in entry)
            for entry in entries[:3]
        )

    def validate(self, raw: Any) -> JsonTranscriptInput:
        if not self.detects(raw):
            raise ShapeMismatchError(
                f"Data does not match {self.format} format", format=self.format
            )

        title = raw.get("title")
        return JsonTranscriptInput(
            title=title if isinstance(title, str) else None,
            entries=[e for e in raw["entries"] if isinstance(e, dict)],
        )

    def parse(
        self, source: JsonTranscriptInput, title: str | None = None, default_title: str | None = None
    ) -> NormalizedConversation:
        turns: list[NormalizedTurn] = []

        for entry in source.entries:
            start_ms = _as_ms(entry.get("start"))
            if start_ms is None:
                start_ms = parse_timestamp_ms(entry.get("timestamp"))

            turns.append(
                NormalizedTurn(
                    speaker=_text_value(entry.get("speaker")) or UNKNOWN_SPEAKER,
                    text=_text_value(entry.get("text")),
                    turn_index=len(turns),
                    start_ms=start_ms,
                    end_ms=_as_ms(entry.get("end")),
                )
            )

        return NormalizedConversation(
            title=title or source.title or default_title or self.default_title,
            source=self.format,
            turns=number_turns(turns),
        )
