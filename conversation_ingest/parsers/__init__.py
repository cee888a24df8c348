"""Conversation parsing.

Each supported input format has a parser that turns one raw payload into a
`NormalizedConversation`:

- `json-transcript`: `{entries: [...]}` meeting transcripts
- `chat-log`: `{messages: [...]}` chat platform exports
- `whatsapp`: WhatsApp text exports
- `srt`: SubRip subtitle files

Format detection probes the parsers in a fixed order (see `registry`).
"""

from conversation_ingest.parsers.base import (
    ConversationParser,
    DetectionError,
    ParseFailureError,
    ParserError,
    ShapeMismatchError,
)
from conversation_ingest.parsers.registry import detect_format, get_parser

__all__ = [
    "ConversationParser",
    "DetectionError",
    "ParseFailureError",
    "ParserError",
    "ShapeMismatchError",
    "detect_format",
    "get_parser",
]
