# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Chat platform export parser (Slack-style and similar JSON logs).

Expected shape:

    {"title": "...", "channel": "...", "messages": [{"user": "...",
     "ts": "1706540400.000100", "text": "..."}]}

Field names vary between platforms, so each field is resolved from a list of
aliases:

- speaker: `user`, `username`, `author`, `sender`
- text: `text`, `message`, `content`
- time: `ts` (Unix seconds or ms), `timestamp` (ISO-8601), `date` + `time`

Messages are ordered by time and rebased so that the earliest message starts
at `0`.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from conversation_ingest.models import (
    FORMAT_CHAT_LOG,
    UNKNOWN_SPEAKER,
    NormalizedConversation,
    NormalizedTurn,
    number_turns,
)
from conversation_ingest.parsers.base import ShapeMismatchError
from conversation_ingest.timestamps import (
    parse_datetime_ms,
    parse_iso_ms,
    parse_unix_ms,
    relative_ms,
)


SPEAKER_KEYS = ("user", "username", "author", "sender")
TEXT_KEYS = ("text", "message", "content")
TIME_KEYS = ("ts", "timestamp", "date")


@dataclass(frozen=True)
class ChatLogInput:
    title: str | None
    channel: str | None
    messages: list[dict[str, Any]]


def _first_value(message: dict[str, Any], keys: tuple[str, ...]) -> str:
    for key in keys:
        value = message.get(key)
        if value is None or value == "":
            continue
        return value if isinstance(value, str) else str(value)
    return ""


def extract_speaker(message: dict[str, Any]) -> str:
    return _first_value(message, SPEAKER_KEYS) or UNKNOWN_SPEAKER


def extract_text(message: dict[str, Any]) -> str:
    return _first_value(message, TEXT_KEYS)


def resolve_timestamp_ms(message: dict[str, Any]) -> int | None:
    """Resolve the absolute time of a message in epoch milliseconds.

    Precedence: numeric `ts`, ISO `timestamp`, then `date` optionally combined
    with `time`. A `ts` of `0` counts as absent. Returns None if nothing
    resolves.
    """

    if message.get("ts") not in (None, "", 0):
        ts = parse_unix_ms(message["ts"])
        if ts is not None:
            return ts

    iso = parse_iso_ms(message.get("timestamp"))
    if iso is not None:
        return iso

    day = message.get("date")
    if isinstance(day, datetime):
        return parse_datetime_ms(day)
    if isinstance(day, date):
        day = day.isoformat()
    if isinstance(day, str) and day.strip():
        time = message.get("time")
        combined = f"{day} {time}" if isinstance(time, str) and time.strip() else day
        return parse_datetime_ms(combined)

    return None


def order_by_time(
    items: list[tuple[int | None, dict[str, Any]]],
) -> list[tuple[int | None, dict[str, Any]]]:
    """Order messages by resolved time.

    Messages with an unresolved time stay in their input position. The
    remaining positions are filled with the timed messages in ascending
    order, ties keeping their input order.
    """

    timed = sorted((item for item in items if item[0] is not None), key=lambda item: item[0])
    slots = iter(timed)
    return [item if item[0] is None else next(slots) for item in items]


class ChatLogParser:
    """Parse `{messages: [...]}` chat exports."""

    format = FORMAT_CHAT_LOG
    default_title = "Untitled Chat"

    def detects(self, raw: Any) -> bool:
        if not isinstance(raw, dict):
            return False

        messages = raw.get("messages")
        if not isinstance(messages, list):
            return False

        def _looks_like_message(msg: Any) -> bool:
            if not isinstance(msg, dict):
                return False
            has_text = any(k in msg for k in TEXT_KEYS)
            has_user = any(k in msg for k in SPEAKER_KEYS)
            has_time = any(k in msg for k in TIME_KEYS)
            return has_text or (has_user and has_time)

        return all(_looks_like_message(m) for m in messages[:3])

    def validate(self, raw: Any) -> ChatLogInput:
        if not self.detects(raw):
            raise ShapeMismatchError(
                f"Data does not match {self.format} format", format=self.format
            )

        title = raw.get("title")
        channel = raw.get("channel")
        return ChatLogInput(
            title=title if isinstance(title, str) else None,
            channel=channel if isinstance(channel, str) else None,
            messages=[m for m in raw["messages"] if isinstance(m, dict)],
        )

    def parse(
        self, source: ChatLogInput, title: str | None = None, default_title: str | None = None
    ) -> NormalizedConversation:
        ordered = order_by_time([(resolve_timestamp_ms(m), m) for m in source.messages])

        resolved = [ts for ts, _ in ordered if ts is not None]
        baseline = min(resolved) if resolved else 0

        turns = [
            NormalizedTurn(
                speaker=extract_speaker(message),
                text=extract_text(message),
                turn_index=0,
                start_ms=relative_ms(ts, baseline),
            )
            for ts, message in ordered
        ]

        return NormalizedConversation(
            title=title or source.title or source.channel or default_title or self.default_title,
            source=self.format,
            turns=number_turns(turns),
            metadata={"channel": source.channel},
        )
