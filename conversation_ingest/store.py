# Conversation Ingest
# © 2026 Dennis Schulmeister-Zimolong <dennis@wpvs.de>
#
# This source code is licensed under the BSD 3-Clause License found in the
# LICENSE file in the root directory of this source tree.

from __future__ import annotations

"""Conversation persistence.

The ingest pipeline only needs a sink with two write operations (create a
conversation, insert its turns) plus a transaction boundary so that both
writes succeed or fail together. `DuckDBConversationStore` implements that
sink on a local DuckDB database file.
"""

import json
import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, Protocol, Sequence

import duckdb

from conversation_ingest.models import NormalizedTurn


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredTurn:
    id: str
    conversation_id: str
    speaker: str
    text: str
    turn_index: int
    start_ms: int | None = None
    end_ms: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StoredConversation:
    id: str
    title: str
    source: str | None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    turns: tuple[StoredTurn, ...] = ()


class ConversationStore(Protocol):
    """Persistence collaborator used by `ingest()`."""

    def transaction(self) -> Any:
        """Context manager wrapping several writes into one atomic unit."""

        raise NotImplementedError

    def create_conversation(
        self, title: str, source: str | None, metadata: dict[str, Any]
    ) -> StoredConversation:
        """Insert a conversation record and return it with its generated id."""

        raise NotImplementedError

    def insert_turns(
        self, conversation_id: str, turns: Sequence[NormalizedTurn]
    ) -> list[StoredTurn]:
        """Insert all turns of a conversation in one batch."""

        raise NotImplementedError

    def get_conversation(self, conversation_id: str) -> StoredConversation | None:
        """Return a stored conversation with its turns, or None."""

        raise NotImplementedError


_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS conversations (
        id VARCHAR PRIMARY KEY,
        title VARCHAR NOT NULL,
        source VARCHAR,
        metadata JSON,
        created_at TIMESTAMP NOT NULL DEFAULT current_timestamp,
        updated_at TIMESTAMP NOT NULL DEFAULT current_timestamp
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS turns (
        id VARCHAR PRIMARY KEY,
        conversation_id VARCHAR NOT NULL REFERENCES conversations (id),
        speaker VARCHAR NOT NULL,
        text VARCHAR NOT NULL,
        start_ms BIGINT,
        end_ms BIGINT,
        turn_index INTEGER NOT NULL,
        metadata JSON,
        created_at TIMESTAMP NOT NULL DEFAULT current_timestamp
    )
    """,
)


def _load_json(value: Any) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    loaded = json.loads(value)
    return loaded if isinstance(loaded, dict) else {}


class DuckDBConversationStore:
    """DuckDB-backed conversation storage.

    Args:
        path:
            Database file, or `":memory:"` for a throwaway database.
    """

    def __init__(self, path: str | Path = ":memory:") -> None:
        if str(path) != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        self.conn = duckdb.connect(str(path))
        self.initialize()

    def initialize(self) -> None:
        """Create the tables if they don't exist."""

        for statement in _SCHEMA:
            self.conn.execute(statement)

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> DuckDBConversationStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        self.conn.execute("BEGIN TRANSACTION")
        try:
            yield
        except Exception:
            logger.exception("Transaction failed during conversation persistence, rolling back")
            self.conn.execute("ROLLBACK")
            raise
        self.conn.execute("COMMIT")

    def create_conversation(
        self, title: str, source: str | None, metadata: dict[str, Any]
    ) -> StoredConversation:
        conversation_id = str(uuid.uuid4())
        self.conn.execute(
            "INSERT INTO conversations (id, title, source, metadata) VALUES (?, ?, ?, ?)",
            [conversation_id, title, source, json.dumps(metadata or {})],
        )
        logger.debug("Created conversation %s (%s)", conversation_id, source)
        return StoredConversation(
            id=conversation_id,
            title=title,
            source=source,
            metadata=dict(metadata or {}),
        )

    def insert_turns(
        self, conversation_id: str, turns: Sequence[NormalizedTurn]
    ) -> list[StoredTurn]:
        stored = [
            StoredTurn(
                id=str(uuid.uuid4()),
                conversation_id=conversation_id,
                speaker=turn.speaker,
                text=turn.text,
                turn_index=turn.turn_index,
                start_ms=turn.start_ms,
                end_ms=turn.end_ms,
                metadata=dict(turn.metadata),
            )
            for turn in turns
        ]
        if not stored:
            return []

        self.conn.executemany(
            "INSERT INTO turns (id, conversation_id, speaker, text, start_ms, end_ms, turn_index, metadata) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            [
                [
                    t.id,
                    t.conversation_id,
                    t.speaker,
                    t.text,
                    t.start_ms,
                    t.end_ms,
                    t.turn_index,
                    json.dumps(t.metadata),
                ]
                for t in stored
            ],
        )
        logger.debug("Inserted %d turn(s) into conversation %s", len(stored), conversation_id)
        return stored

    def get_conversation(self, conversation_id: str) -> StoredConversation | None:
        row = self.conn.execute(
            "SELECT id, title, source, metadata, created_at FROM conversations WHERE id = ?",
            [conversation_id],
        ).fetchone()
        if row is None:
            return None

        turn_rows = self.conn.execute(
            "SELECT id, conversation_id, speaker, text, turn_index, start_ms, end_ms, metadata "
            "FROM turns WHERE conversation_id = ? ORDER BY turn_index",
            [conversation_id],
        ).fetchall()

        return StoredConversation(
            id=row[0],
            title=row[1],
            source=row[2],
            metadata=_load_json(row[3]),
            created_at=row[4],
            turns=tuple(
                StoredTurn(
                    id=t[0],
                    conversation_id=t[1],
                    speaker=t[2],
                    text=t[3],
                    turn_index=t[4],
                    start_ms=t[5],
                    end_ms=t[6],
                    metadata=_load_json(t[7]),
                )
                for t in turn_rows
            ),
        )

    def count_conversations(self) -> int:
        row = self.conn.execute("SELECT count(*) FROM conversations").fetchone()
        return int(row[0]) if row else 0
