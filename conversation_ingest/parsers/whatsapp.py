# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""WhatsApp text export parser.

Supported header lines:

- `1/29/24, 2:30 PM - Alice: Hello everyone`      (US, 12h clock)
- `29/01/2024, 14:30 - Alice: Hello everyone`     (EU, 24h clock)
- `[29/01/2024, 14:30:00] Alice: Hello everyone`  (bracketed)

Rules:
- A header line starts a new message.
- Lines that are not headers continue the current message (multi-line
  messages) and are joined with line breaks.
- Lines before the first header (export preamble) are ignored.

Timestamps are rebased to the first message, which starts at `0` when its
date resolves.
"""

import dataclasses
import re
from dataclasses import dataclass
from typing import Any, TypeAlias

from conversation_ingest.models import (
    FORMAT_WHATSAPP,
    NormalizedConversation,
    NormalizedTurn,
    number_turns,
)
from conversation_ingest.parsers.base import ShapeMismatchError
from conversation_ingest.timestamps import parse_day_month_ms, relative_ms


# Checked in order, first match wins. Groups: date, time, speaker, text.
LINE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        r"^(\d{1,2}/\d{1,2}/\d{2,4}),?\s+(\d{1,2}:\d{2}(?::\d{2})?\s*(?:AM|PM)?)\s*[-–]\s*([^:]+):\s*(.+)$",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(\d{1,2}/\d{1,2}/\d{2,4}),?\s+(\d{1,2}:\d{2}(?::\d{2})?)\s*[-–]\s*([^:]+):\s*(.+)$",
        re.IGNORECASE,
    ),
    re.compile(
        r"^\[(\d{1,2}/\d{1,2}/\d{2,4}),?\s+(\d{1,2}:\d{2}(?::\d{2})?(?:\s*[AP]M)?)\]\s*([^:]+):\s*(.+)$",
        re.IGNORECASE,
    ),
)

# Direction marks WhatsApp inserts around names and dates.
_INVISIBLE_MARKS = re.compile(r"[\u200e\u200f\u202a-\u202e]")
_LINE_BREAK_RE = re.compile(r"\r?\n")

DETECTION_SAMPLE_LINES = 10
DETECTION_MIN_RATIO = 0.3


@dataclass(frozen=True)
class HeaderLine:
    date: str
    time: str
    speaker: str
    text: str


@dataclass(frozen=True)
class Idle:
    """No message is being collected yet."""


@dataclass(frozen=True)
class Accumulating:
    """A header was seen; `lines` holds its text and any continuation lines."""

    header: HeaderLine
    lines: tuple[str, ...]


LineState: TypeAlias = Idle | Accumulating


def split_lines(text: str) -> list[str]:
    """Split an export into non-blank lines with direction marks removed."""

    lines = (_INVISIBLE_MARKS.sub("", line) for line in _LINE_BREAK_RE.split(text))
    return [line for line in lines if line.strip()]


def match_header(line: str) -> HeaderLine | None:
    for pattern in LINE_PATTERNS:
        match = pattern.match(line)
        if match:
            date, time, speaker, text = match.groups()
            return HeaderLine(
                date=date, time=time.strip(), speaker=speaker.strip(), text=text.strip()
            )
    return None


def step(state: LineState, line: str) -> tuple[LineState, Accumulating | None]:
    """Advance the line state machine by one line.

    Returns:
        The next state and, if a message was completed by this line, the
        flushed message.
    """

    header = match_header(line)

    if header is not None:
        flushed = state if isinstance(state, Accumulating) else None
        return Accumulating(header=header, lines=(header.text,)), flushed

    if isinstance(state, Accumulating):
        return Accumulating(header=state.header, lines=state.lines + (line,)), None

    # Preamble/noise before the first message.
    return state, None


def collect_messages(lines: list[str]) -> list[Accumulating]:
    messages: list[Accumulating] = []
    state: LineState = Idle()

    for line in lines:
        state, flushed = step(state, line)
        if flushed is not None:
            messages.append(flushed)

    if isinstance(state, Accumulating):
        messages.append(state)

    return messages


class WhatsAppTextParser:
    """Parse WhatsApp "Export chat" text files."""

    format = FORMAT_WHATSAPP
    default_title = "WhatsApp Chat"

    def detects(self, raw: Any) -> bool:
        if not isinstance(raw, str):
            return False

        lines = split_lines(raw)
        if len(lines) < 2:
            return False

        sample = lines[:DETECTION_SAMPLE_LINES]
        matches = sum(1 for line in sample if match_header(line) is not None)
        return matches / len(sample) >= DETECTION_MIN_RATIO

    def validate(self, raw: Any) -> str:
        if not isinstance(raw, str):
            raise ShapeMismatchError(
                "WhatsApp format requires plain text input", format=self.format
            )
        return raw

    def parse(
        self, source: str, title: str | None = None, default_title: str | None = None
    ) -> NormalizedConversation:
        turns = number_turns(
            [
                NormalizedTurn(
                    speaker=message.header.speaker,
                    text="\n".join(message.lines),
                    turn_index=0,
                    start_ms=parse_day_month_ms(message.header.date, message.header.time),
                    metadata={
                        "original_date": message.header.date,
                        "original_time": message.header.time,
                    },
                )
                for message in collect_messages(split_lines(source))
            ]
        )

        if turns and turns[0].start_ms is not None:
            baseline = turns[0].start_ms
            turns = tuple(
                dataclasses.replace(t, start_ms=relative_ms(t.start_ms, baseline)) for t in turns
            )

        return NormalizedConversation(
            title=title or default_title or self.default_title,
            source=self.format,
            turns=turns,
        )
