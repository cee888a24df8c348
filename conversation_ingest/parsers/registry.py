# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Conversation parser registry and format detection."""

from typing import Any

from conversation_ingest.models import FORMAT_UNKNOWN, SUPPORTED_FORMATS
from conversation_ingest.parsers.base import ConversationParser, DetectionError
from conversation_ingest.parsers.chat_log import ChatLogParser
from conversation_ingest.parsers.json_transcript import JsonTranscriptParser
from conversation_ingest.parsers.srt import SrtParser
from conversation_ingest.parsers.whatsapp import WhatsAppTextParser


# Detection order. The first parser whose signature matches wins; there is no
# scoring across formats. Structured formats come first, then SRT before
# WhatsApp because subtitle text can contain chat-like lines.
_PARSERS: list[ConversationParser] = [
    JsonTranscriptParser(),
    ChatLogParser(),
    SrtParser(),
    WhatsAppTextParser(),
]


def detect_format(raw: Any) -> str:
    """Infer the format of unlabeled input.

    Args:
        raw:
            Structured value (mapping/list tree) or text.

    Returns:
        The format tag of the first matching parser, or `"unknown"`.
    """

    for parser in _PARSERS:
        if parser.detects(raw):
            return parser.format

    return FORMAT_UNKNOWN


def get_parser(format: str) -> ConversationParser:
    """Return the parser registered for a format tag.

    Raises:
        DetectionError:
            If the tag is `"unknown"` or not supported.
    """

    for parser in _PARSERS:
        if parser.format == format:
            return parser

    supported = ", ".join(SUPPORTED_FORMATS)
    raise DetectionError(
        f"Unknown format. Supported: {supported}",
        format=FORMAT_UNKNOWN,
        attempted=tuple(p.format for p in _PARSERS),
    )
