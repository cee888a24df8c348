"""Tests for the WhatsApp text export parser."""

from __future__ import annotations

from typing import Any

import pytest

from conversation_ingest.parsers.base import ShapeMismatchError
from conversation_ingest.parsers.whatsapp import (
    Accumulating,
    Idle,
    WhatsAppTextParser,
    collect_messages,
    match_header,
    split_lines,
    step,
)


def _parse(raw: Any, **kwargs: Any):
    parser = WhatsAppTextParser()
    return parser.parse(parser.validate(raw), **kwargs)


def test_us_export_is_rebased_to_first_message(whatsapp_text: str) -> None:
    conversation = _parse(whatsapp_text)

    assert conversation.source == "whatsapp"
    assert conversation.title == "WhatsApp Chat"
    assert [t.speaker for t in conversation.turns] == ["Alice", "Bob"]
    assert [t.text for t in conversation.turns] == ["Hello everyone", "Hi Alice!"]
    assert [t.start_ms for t in conversation.turns] == [0, 60_000]
    assert conversation.turns[0].metadata == {
        "original_date": "1/29/24",
        "original_time": "2:30 PM",
    }


def test_multi_line_messages_are_joined() -> None:
    text = (
        "1/29/24, 2:30 PM - Alice: Line one\n"
        "line two\n"
        "line three\n"
        "1/29/24, 2:31 PM - Bob: ok\n"
    )

    turns = _parse(text).turns

    assert len(turns) == 2
    assert turns[0].text == "Line one\nline two\nline three"


def test_preamble_before_first_header_is_ignored() -> None:
    text = (
        "Messages and calls are end-to-end encrypted.\n"
        "1/29/24, 2:30 PM - Alice: Hello\n"
        "1/29/24, 2:31 PM - Bob: Hi\n"
    )

    turns = _parse(text).turns

    assert [t.speaker for t in turns] == ["Alice", "Bob"]


def test_eu_export() -> None:
    text = "29/01/2024, 14:30 - Alice: Hallo\n29/01/2024, 14:32 - Bob: Hi\n"

    assert [t.start_ms for t in _parse(text).turns] == [0, 120_000]


def test_bracketed_export() -> None:
    text = "[29/01/2024, 14:30:00] Alice: Hallo\n[29/01/2024, 14:30:45] Bob: Hi\n"

    turns = _parse(text).turns

    assert [t.speaker for t in turns] == ["Alice", "Bob"]
    assert [t.start_ms for t in turns] == [0, 45_000]


def test_direction_marks_are_stripped() -> None:
    text = "\u200e1/29/24, 2:30 PM - \u200eAlice: hi\n1/29/24, 2:31 PM - Bob: yo\n"

    turns = _parse(text).turns

    assert [t.speaker for t in turns] == ["Alice", "Bob"]


def test_unresolved_first_date_disables_rebasing() -> None:
    text = "13/13/24, 10:00 - Alice: hi\n1/29/24, 2:31 PM - Bob: yo\n"

    turns = _parse(text).turns

    assert turns[0].start_ms is None
    assert turns[1].start_ms == 1_706_538_660_000


def test_blank_message_is_dropped_before_rebasing() -> None:
    text = "1/29/24, 2:30 PM - Alice:   \n1/29/24, 2:31 PM - Bob: Hi\n"

    turns = _parse(text).turns

    assert [(t.speaker, t.turn_index, t.start_ms) for t in turns] == [("Bob", 0, 0)]


def test_title_precedence(whatsapp_text: str) -> None:
    assert _parse(whatsapp_text, title="Family").title == "Family"
    assert _parse(whatsapp_text, default_title="Chat Export").title == "Chat Export"


def test_header_and_state_machine() -> None:
    header = match_header("1/29/24, 2:30 PM - Alice: Hello")
    assert header is not None
    assert (header.date, header.time, header.speaker, header.text) == (
        "1/29/24",
        "2:30 PM",
        "Alice",
        "Hello",
    )
    assert match_header("just some words") is None

    state, flushed = step(Idle(), "noise")
    assert state == Idle() and flushed is None

    state, flushed = step(state, "1/29/24, 2:30 PM - Alice: Hello")
    assert isinstance(state, Accumulating) and flushed is None

    state, flushed = step(state, "more")
    assert state.lines == ("Hello", "more")

    _, flushed = step(state, "1/29/24, 2:31 PM - Bob: Hi")
    assert flushed is not None and flushed.header.speaker == "Alice"


def test_collect_messages_flushes_last_message() -> None:
    messages = collect_messages(split_lines("1/29/24, 2:30 PM - Alice: a\r\n\r\nb\r\n"))

    assert len(messages) == 1
    assert messages[0].lines == ("a", "b")


@pytest.mark.parametrize(
    ("headers", "expected"),
    [
        (3, True),
        (2, False),
    ],
)
def test_detection_uses_header_ratio(headers: int, expected: bool) -> None:
    lines = ["1/29/24, 2:30 PM - Alice: hi"] * headers + ["chatter"] * (10 - headers)
    # Lines beyond the sample window do not count.
    lines += ["1/29/24, 2:30 PM - Alice: hi"] * 10

    assert WhatsAppTextParser().detects("\n".join(lines)) is expected


def test_detection_needs_two_lines() -> None:
    parser = WhatsAppTextParser()

    assert not parser.detects("1/29/24, 2:30 PM - Alice: hi")
    assert not parser.detects({"messages": []})


def test_validate_requires_text() -> None:
    with pytest.raises(ShapeMismatchError):
        WhatsAppTextParser().validate({"messages": []})
