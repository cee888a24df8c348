from __future__ import annotations

from typing import Any

import pytest

from conversation_ingest.config import DATABASE_ENV
from conversation_ingest.store import DuckDBConversationStore


@pytest.fixture(autouse=True)
def _no_database_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(DATABASE_ENV, raising=False)


@pytest.fixture
def store():
    with DuckDBConversationStore(":memory:") as db:
        yield db


@pytest.fixture
def json_transcript() -> dict[str, Any]:
    return {
        "entries": [
            {"speaker": "Alice", "timestamp": "00:00:05", "text": "Hello everyone"},
            {"speaker": "Bob", "timestamp": "00:00:12", "text": "Hi Alice"},
        ]
    }


@pytest.fixture
def slack_log() -> dict[str, Any]:
    return {
        "channel": "#general",
        "messages": [
            {"user": "alice", "ts": "1706540460.000200", "text": "Second"},
            {"user": "bob", "ts": "1706540400.000100", "text": "First"},
        ],
    }


@pytest.fixture
def whatsapp_text() -> str:
    return "1/29/24, 2:30 PM - Alice: Hello everyone\n1/29/24, 2:31 PM - Bob: Hi Alice!\n"


@pytest.fixture
def srt_text() -> str:
    return (
        "1\n"
        "00:00:05,000 --> 00:00:08,000\n"
        "Alice: Hello everyone\n"
        "\n"
        "2\n"
        "00:00:09,000 --> 00:00:12,000\n"
        "[Bob] Hi Alice\n"
    )
