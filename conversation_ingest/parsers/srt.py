# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""SRT (SubRip) subtitle parser.

A subtitle file is a sequence of cues separated by blank lines:

    1
    00:00:05,000 --> 00:00:08,000
    Alice: Hello everyone

    2
    00:00:09,000 --> 00:00:12,000
    [Bob] Hi Alice

Cue times are kept as absolute positions in the media; they are not rebased.
"""

import re
from dataclasses import dataclass
from typing import Any

from conversation_ingest.models import (
    FORMAT_SRT,
    UNKNOWN_SPEAKER,
    NormalizedConversation,
    NormalizedTurn,
    number_turns,
)
from conversation_ingest.parsers.base import ShapeMismatchError
from conversation_ingest.timestamps import parse_cue_ms


_CUE_RANGE_RE = re.compile(
    r"(\d{1,2}:\d{2}:\d{2}[,.]\d{3})\s*-->\s*(\d{1,2}:\d{2}:\d{2}[,.]\d{3})"
)
_BLOCK_SEPARATOR_RE = re.compile(r"\n\s*\n")
_LINE_BREAK_RE = re.compile(r"\r?\n")
_CUE_INDEX_RE = re.compile(r"^\d+$")

# `Name: text`, `[Name] text`, `(Name) text`. Bodies may span several lines.
SPEAKER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^([A-Za-z][A-Za-z0-9\s]{0,20}):\s*(.+)$", re.DOTALL),
    re.compile(r"^\[([^\]]+)\]\s*(.+)$", re.DOTALL),
    re.compile(r"^\(([^)]+)\)\s*(.+)$", re.DOTALL),
)


@dataclass(frozen=True)
class SrtCue:
    index: int
    start_ms: int
    end_ms: int
    text: str


def _non_blank_lines(text: str) -> list[str]:
    return [line for line in _LINE_BREAK_RE.split(text) if line.strip()]


def extract_speaker(body: str) -> tuple[str, str]:
    """Split a cue body into `(speaker, text)`."""

    for pattern in SPEAKER_PATTERNS:
        match = pattern.match(body)
        if match:
            return match.group(1).strip(), match.group(2).strip()
    return UNKNOWN_SPEAKER, body


def parse_cues(text: str) -> list[SrtCue]:
    """Split SRT text into cues, skipping blocks that are not valid cues."""

    cues: list[SrtCue] = []

    for block in _BLOCK_SEPARATOR_RE.split(text):
        lines = _non_blank_lines(block)
        if len(lines) < 3:
            continue

        try:
            index = int(lines[0].strip())
        except ValueError:
            continue

        time_match = _CUE_RANGE_RE.search(lines[1])
        if not time_match:
            continue

        cues.append(
            SrtCue(
                index=index,
                start_ms=parse_cue_ms(time_match.group(1)),
                end_ms=parse_cue_ms(time_match.group(2)),
                text="\n".join(lines[2:]).strip(),
            )
        )

    return cues


class SrtParser:
    """Parse SubRip subtitle files, one turn per cue."""

    format = FORMAT_SRT
    default_title = "Subtitle Transcript"

    def detects(self, raw: Any) -> bool:
        if not isinstance(raw, str):
            return False

        lines = _non_blank_lines(raw.lstrip("\ufeff"))
        if len(lines) < 3:
            return False

        return bool(_CUE_INDEX_RE.match(lines[0].strip())) and bool(
            _CUE_RANGE_RE.search(lines[1])
        )

    def validate(self, raw: Any) -> str:
        if not isinstance(raw, str):
            raise ShapeMismatchError("SRT format requires plain text input", format=self.format)
        return raw.lstrip("\ufeff")

    def parse(
        self, source: str, title: str | None = None, default_title: str | None = None
    ) -> NormalizedConversation:
        turns: list[NormalizedTurn] = []

        for cue in parse_cues(source):
            speaker, content = extract_speaker(cue.text)
            turns.append(
                NormalizedTurn(
                    speaker=speaker,
                    text=content,
                    turn_index=len(turns),
                    start_ms=cue.start_ms,
                    end_ms=cue.end_ms,
                    metadata={"srt_index": cue.index},
                )
            )

        return NormalizedConversation(
            title=title or default_title or self.default_title,
            source=self.format,
            turns=number_turns(turns),
        )
