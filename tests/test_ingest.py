"""Tests for ingest orchestration: parse, preview and commit."""

from __future__ import annotations

from typing import Any

import pytest

from conversation_ingest.ingest import ingest, parse_input, preview_input
from conversation_ingest.parsers.base import (
    DetectionError,
    ParseFailureError,
    ShapeMismatchError,
)
from conversation_ingest.parsers.json_transcript import JsonTranscriptParser


def _chat(count: int) -> dict[str, Any]:
    return {"messages": [{"user": f"u{i}", "ts": i, "text": f"m{i}"} for i in range(count)]}


def test_parse_input_detects_format(json_transcript: dict[str, Any]) -> None:
    result = parse_input(json_transcript)

    assert result.ok
    assert result.format == "json-transcript"
    assert result.error is None
    assert len(result.unwrap().turns) == 2


def test_parse_input_reports_unknown_format() -> None:
    result = parse_input({"entries": [{"text": "hi"}]})

    assert not result.ok
    assert result.format == "unknown"
    assert isinstance(result.error, DetectionError)
    assert "Supported: json-transcript, chat-log, whatsapp, srt" in result.error.message

    with pytest.raises(DetectionError):
        result.unwrap()


def test_explicit_format_still_checks_shape(slack_log: dict[str, Any]) -> None:
    result = parse_input(slack_log, format="json-transcript")

    assert result.format == "json-transcript"
    assert isinstance(result.error, ShapeMismatchError)
    assert result.error.kind == "shape"


def test_explicit_text_format_rejects_structured_data(slack_log: dict[str, Any]) -> None:
    result = parse_input(slack_log, format="whatsapp")

    assert isinstance(result.error, ShapeMismatchError)


def test_explicit_format_skips_detection(whatsapp_text: str) -> None:
    result = parse_input(whatsapp_text, format="srt")

    assert result.ok
    assert result.unwrap().source == "srt"
    assert result.unwrap().turns == ()


def test_parser_crash_becomes_parse_failure(
    monkeypatch: pytest.MonkeyPatch, json_transcript: dict[str, Any]
) -> None:
    def _boom(self, source, title=None, default_title=None):
        raise RuntimeError("boom")

    monkeypatch.setattr(JsonTranscriptParser, "parse", _boom)

    result = parse_input(json_transcript)

    assert result.format == "json-transcript"
    assert isinstance(result.error, ParseFailureError)
    assert result.error.message == "boom"
    assert str(result.error) == "[json-transcript] boom"


def test_parse_input_is_deterministic(slack_log: dict[str, Any], whatsapp_text: str) -> None:
    assert parse_input(slack_log).conversation == parse_input(slack_log).conversation
    assert parse_input(whatsapp_text).conversation == parse_input(whatsapp_text).conversation


def test_titles(json_transcript: dict[str, Any]) -> None:
    defaults = {"json-transcript": "Meeting"}

    assert parse_input(json_transcript, default_titles=defaults).unwrap().title == "Meeting"
    assert (
        parse_input(json_transcript, title="Standup", default_titles=defaults).unwrap().title
        == "Standup"
    )
    assert parse_input(json_transcript, title="").unwrap().title == "Untitled Transcript"


def test_preview_limits_turns() -> None:
    preview = preview_input(_chat(7))

    assert preview.format == "chat-log"
    assert preview.turn_count == 7
    assert [t.turn_index for t in preview.turns] == [0, 1, 2, 3, 4]

    assert len(preview_input(_chat(7), limit=2).turns) == 2

    data = preview_input(_chat(3)).to_dict()
    assert data["format"] == "chat-log"
    assert data["preview"]["turn_count"] == 3
    assert data["preview"]["turns"][0]["speaker"] == "u0"


def test_preview_raises_for_unparseable_input() -> None:
    with pytest.raises(DetectionError):
        preview_input("no conversation here")


def test_ingest_persists_conversation_and_turns(store, slack_log: dict[str, Any]) -> None:
    receipt = ingest(slack_log, store, title="Launch")

    assert receipt.format == "chat-log"
    assert receipt.turn_count == 2

    stored = store.get_conversation(receipt.conversation_id)
    assert stored is not None
    assert stored.title == "Launch"
    assert stored.source == "chat-log"
    assert stored.metadata == {"channel": "#general"}
    assert [(t.turn_index, t.speaker, t.start_ms) for t in stored.turns] == [
        (0, "bob", 0),
        (1, "alice", 60_000),
    ]


def test_ingest_keeps_turn_metadata(store, srt_text: str) -> None:
    receipt = ingest(srt_text, store)

    stored = store.get_conversation(receipt.conversation_id)
    assert stored.turns[0].metadata == {"srt_index": 1}
    assert stored.turns[0].end_ms == 8_000


def test_ingest_stores_empty_conversation(store) -> None:
    receipt = ingest({"entries": []}, store)

    assert receipt.turn_count == 0
    assert store.get_conversation(receipt.conversation_id).turns == ()


def test_ingest_writes_nothing_on_parse_error(store, slack_log: dict[str, Any]) -> None:
    with pytest.raises(ShapeMismatchError):
        ingest(slack_log, store, format="srt")

    assert store.count_conversations() == 0


def test_ingest_rolls_back_when_turn_insert_fails(
    monkeypatch: pytest.MonkeyPatch, store, slack_log: dict[str, Any]
) -> None:
    def _fail(conversation_id, turns):
        raise RuntimeError("disk full")

    monkeypatch.setattr(store, "insert_turns", _fail)

    with pytest.raises(RuntimeError, match="disk full"):
        ingest(slack_log, store)

    assert store.count_conversations() == 0


def test_get_conversation_returns_none_for_unknown_id(store) -> None:
    assert store.get_conversation("does-not-exist") is None
