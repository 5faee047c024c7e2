"""SQLite storage for debates, messages and votes"""

import logging
import os
import sqlite3
import threading
from datetime import datetime
from typing import Optional

from .config import DEFAULT_DB_PATH
from .exceptions import ConflictError, InvalidStateError
from .types import Debate, DebateStatus, Message, Vote

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS debates (
    debate_id   TEXT PRIMARY KEY,
    topic       TEXT NOT NULL,
    status      TEXT NOT NULL DEFAULT 'ongoing',
    total_turns INTEGER NOT NULL,
    personas    TEXT NOT NULL,
    created_at  TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS messages (
    message_id  TEXT PRIMARY KEY,
    debate_id   TEXT NOT NULL REFERENCES debates(debate_id) ON DELETE CASCADE,
    persona     TEXT NOT NULL,
    content     TEXT NOT NULL,
    turn_number INTEGER NOT NULL,
    created_at  TEXT NOT NULL,
    UNIQUE (debate_id, turn_number)
);

CREATE TABLE IF NOT EXISTS votes (
    vote_id    TEXT PRIMARY KEY,
    debate_id  TEXT NOT NULL REFERENCES debates(debate_id) ON DELETE CASCADE,
    persona    TEXT NOT NULL,
    voter      TEXT NOT NULL,
    created_at TEXT NOT NULL,
    UNIQUE (debate_id, voter)
);
"""


class DebateStore:
    """Durable store for debate records

    A single connection is shared by every caller. All access goes through
    ``self._lock`` so reads and writes for a debate are serialized.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path
        self._lock = threading.RLock()
        self._conn = sqlite3.connect(db_path, check_same_thread=False, isolation_level=None)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._conn.executescript(SCHEMA)
        logger.info(f"Debate store initialized at {db_path}")

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # Debates

    def create_debate(self, topic: str, total_turns: int, personas: list[str]) -> Debate:
        """Insert a new ongoing debate"""
        debate = Debate(topic=topic, total_turns=total_turns, personas=list(personas))
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO debates (debate_id, topic, status, total_turns, personas, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    debate.debate_id,
                    debate.topic,
                    debate.status.value,
                    debate.total_turns,
                    ",".join(debate.personas),
                    debate.created_at.isoformat(),
                ),
            )
        return debate

    def get_debate(self, debate_id: str) -> Optional[Debate]:
        """Get a debate by ID

        Returns:
            Debate if found, None otherwise
        """
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM debates WHERE debate_id = ?", (debate_id,)
            ).fetchone()
        if row is None:
            return None
        return Debate(
            debate_id=row["debate_id"],
            topic=row["topic"],
            status=DebateStatus(row["status"]),
            total_turns=row["total_turns"],
            personas=row["personas"].split(","),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    # Messages

    def list_messages(self, debate_id: str) -> list[Message]:
        """All messages of a debate in turn order"""
        with self._lock:
            rows = self._conn.execute(
                "SELECT * FROM messages WHERE debate_id = ? ORDER BY turn_number",
                (debate_id,),
            ).fetchall()
        return [
            Message(
                message_id=row["message_id"],
                debate_id=row["debate_id"],
                persona=row["persona"],
                content=row["content"],
                turn_number=row["turn_number"],
                created_at=datetime.fromisoformat(row["created_at"]),
            )
            for row in rows
        ]

    def count_messages(self, debate_id: str) -> int:
        with self._lock:
            row = self._conn.execute(
                "SELECT COUNT(*) FROM messages WHERE debate_id = ?", (debate_id,)
            ).fetchone()
        return row[0]

    def append_message(
        self,
        debate_id: str,
        persona: str,
        content: str,
        turn_number: int,
        complete: bool = False,
    ) -> Message:
        """Persist the next message, closing the debate if it was the last turn

        The message insert and the status change commit together or not at all.

        Raises:
            InvalidStateError: If the debate is missing or no longer ongoing
            ConflictError: If ``turn_number`` is not the next turn
        """
        message = Message(
            debate_id=debate_id,
            persona=persona,
            content=content,
            turn_number=turn_number,
        )
        with self._lock:
            self._conn.execute("BEGIN IMMEDIATE")
            try:
                row = self._conn.execute(
                    "SELECT status FROM debates WHERE debate_id = ?", (debate_id,)
                ).fetchone()
                if row is None or row["status"] != DebateStatus.ONGOING.value:
                    raise InvalidStateError("このディベートはすでに終了しています。")

                count = self._conn.execute(
                    "SELECT COUNT(*) FROM messages WHERE debate_id = ?", (debate_id,)
                ).fetchone()[0]
                if turn_number != count + 1:
                    raise ConflictError("このターンはすでに保存されています。")

                self._conn.execute(
                    """
                    INSERT INTO messages (message_id, debate_id, persona, content, turn_number, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        message.message_id,
                        debate_id,
                        persona,
                        content,
                        turn_number,
                        message.created_at.isoformat(),
                    ),
                )
                if complete:
                    self._conn.execute(
                        "UPDATE debates SET status = ? WHERE debate_id = ? AND status = ?",
                        (DebateStatus.COMPLETED.value, debate_id, DebateStatus.ONGOING.value),
                    )
            except sqlite3.IntegrityError as e:
                self._conn.execute("ROLLBACK")
                raise ConflictError("このターンはすでに保存されています。") from e
            except BaseException:
                self._conn.execute("ROLLBACK")
                raise
            self._conn.execute("COMMIT")
        return message

    # Votes

    def add_vote(self, debate_id: str, persona: str, voter: str) -> Vote:
        """Insert a vote

        Raises:
            ConflictError: If this voter already voted on the debate
        """
        vote = Vote(debate_id=debate_id, persona=persona, voter=voter)
        with self._lock:
            try:
                self._conn.execute(
                    """
                    INSERT INTO votes (vote_id, debate_id, persona, voter, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (vote.vote_id, debate_id, persona, voter, vote.created_at.isoformat()),
                )
            except sqlite3.IntegrityError as e:
                raise ConflictError("すでに投票済みです。") from e
        return vote

    def count_votes(self, debate_id: str) -> dict[str, int]:
        """Votes per persona key; personas without votes are absent"""
        with self._lock:
            rows = self._conn.execute(
                "SELECT persona, COUNT(*) AS n FROM votes WHERE debate_id = ? GROUP BY persona",
                (debate_id,),
            ).fetchall()
        return {row["persona"]: row["n"] for row in rows}


_store: Optional[DebateStore] = None
_store_lock = threading.Lock()


def get_store() -> DebateStore:
    """Get the process-wide store, creating it on first use

    Reads the database path from DEBATE_DB_PATH.
    """
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = DebateStore(os.getenv("DEBATE_DB_PATH", DEFAULT_DB_PATH))
    return _store


def close_store() -> None:
    """Close the process-wide store; the next get_store() opens a fresh one"""
    global _store
    with _store_lock:
        if _store is not None:
            _store.close()
            _store = None
