"""Tests for the SRT subtitle parser."""

from __future__ import annotations

from typing import Any

import pytest

from conversation_ingest.parsers.base import ShapeMismatchError
from conversation_ingest.parsers.srt import SrtParser, extract_speaker, parse_cues


def _parse(raw: Any, **kwargs: Any):
    parser = SrtParser()
    return parser.parse(parser.validate(raw), **kwargs)


def test_cues_become_turns(srt_text: str) -> None:
    conversation = _parse(srt_text)

    assert conversation.source == "srt"
    assert conversation.title == "Subtitle Transcript"

    first, second = conversation.turns
    assert (first.speaker, first.text) == ("Alice", "Hello everyone")
    assert (first.start_ms, first.end_ms) == (5_000, 8_000)
    assert first.metadata == {"srt_index": 1}
    assert (second.speaker, second.text, second.turn_index) == ("Bob", "Hi Alice", 1)


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        ("Alice: Hello", ("Alice", "Hello")),
        ("[Bob] Hi", ("Bob", "Hi")),
        ("(Carol) Hey", ("Carol", "Hey")),
        ("No speaker here", ("Unknown", "No speaker here")),
        ("Alice: Hello\nworld", ("Alice", "Hello\nworld")),
    ],
)
def test_extract_speaker(body: str, expected: tuple[str, str]) -> None:
    assert extract_speaker(body) == expected


def test_invalid_blocks_are_skipped() -> None:
    text = (
        "x\n00:00:01,000 --> 00:00:02,000\nbad index\n\n"
        "2\nnot a time line\nbad time\n\n"
        "3\n00:00:03,000 --> 00:00:04,000\n\n"
        "4\n00:00:05.000 --> 00:00:06.500\nAlice: kept\n"
    )

    cues = parse_cues(text)

    assert [(c.index, c.start_ms, c.end_ms, c.text) for c in cues] == [
        (4, 5_000, 6_500, "Alice: kept")
    ]


def test_crlf_and_bom() -> None:
    text = "\ufeff1\r\n00:00:05,000 --> 00:00:08,000\r\nAlice: Hi\r\n\r\n2\r\n00:00:09,000 --> 00:00:10,000\r\nBob: Yo\r\n"

    assert SrtParser().detects(text)

    turns = _parse(text).turns
    assert [(t.speaker, t.text) for t in turns] == [("Alice", "Hi"), ("Bob", "Yo")]


def test_cue_times_are_not_rebased() -> None:
    text = "1\n01:00:00,000 --> 01:00:02,000\nHello\n"

    assert _parse(text).turns[0].start_ms == 3_600_000


def test_title_precedence(srt_text: str) -> None:
    assert _parse(srt_text, title="Episode 1").title == "Episode 1"
    assert _parse(srt_text, default_title="Subtitles").title == "Subtitles"


def test_detects() -> None:
    parser = SrtParser()

    assert parser.detects("1\n00:00:01,000 --> 00:00:02,000\nHi\n")
    assert not parser.detects("1\n00:00:01,000 --> 00:00:02,000\n")
    assert not parser.detects("hello\nworld\nagain\n")
    assert not parser.detects({"entries": []})


def test_validate_requires_text() -> None:
    with pytest.raises(ShapeMismatchError):
        SrtParser().validate(["1", "00:00:01,000 --> 00:00:02,000"])
