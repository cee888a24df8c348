"""Tests for reading and unwrapping raw payloads."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from conversation_ingest.config import ConfigError
from conversation_ingest.input_io import Payload, read_input, unwrap_payload


def test_unwrap_request_body() -> None:
    body = {"title": "Standup", "format": "srt", "data": "1\n00:00:01,000 --> 00:00:02,000\nHi"}

    assert unwrap_payload(body) == Payload(data=body["data"], title="Standup", format="srt")


def test_unwrap_ignores_unsupported_format() -> None:
    payload = unwrap_payload({"format": "vtt", "data": "text"})

    assert payload.format is None
    assert payload.title is None


def test_unwrap_plain_body_keeps_root_title() -> None:
    body = {"title": "Weekly", "entries": []}

    assert unwrap_payload(body) == Payload(data=body, title="Weekly")


def test_unwrap_text() -> None:
    assert unwrap_payload("some text") == Payload(data="some text")


def test_read_json_and_yaml_files(tmp_path: Path) -> None:
    json_path = tmp_path / "chat.json"
    json_path.write_text(json.dumps({"messages": []}), encoding="utf-8")
    yaml_path = tmp_path / "transcript.yml"
    yaml_path.write_text("entries:\n  - speaker: A\n    text: hi\n", encoding="utf-8")

    assert read_input(json_path) == {"messages": []}
    assert read_input(yaml_path) == {"entries": [{"speaker": "A", "text": "hi"}]}


def test_read_text_file_with_bom(tmp_path: Path) -> None:
    path = tmp_path / "movie.srt"
    path.write_text("\ufeff1\n00:00:01,000 --> 00:00:02,000\nHi\n", encoding="utf-8")

    assert read_input(path) == "1\n00:00:01,000 --> 00:00:02,000\nHi\n"


def test_read_text_file_that_contains_json(tmp_path: Path) -> None:
    path = tmp_path / "export.txt"
    path.write_text('{"entries": []}\n', encoding="utf-8")

    assert read_input(path) == {"entries": []}


def test_read_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("1/29/24, 2:30 PM - Alice: hi\n"))

    assert read_input("-") == "1/29/24, 2:30 PM - Alice: hi\n"


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Input file not found"):
        read_input(tmp_path / "nope.json")


def test_invalid_json_file(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to decode input file"):
        read_input(path)
