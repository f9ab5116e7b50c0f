"""
storage.py

SQLite history of finished games and solver sessions.

Two parent tables (games, solver_sessions) each own their guesses through a
foreign key with ON DELETE CASCADE. Game feedback is stored as a JSON list
of tile names; timestamps as ISO-8601 UTC strings.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from wordle_engine.records import (
    GameGuessRecord,
    GameOutcome,
    GameRecord,
    SolverGuessRecord,
    SolverOutcome,
    SolverSessionRecord,
    names_to_tiles,
    tiles_to_names,
)

log = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS games (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp TEXT NOT NULL,
    target_word TEXT NOT NULL,
    outcome TEXT NOT NULL CHECK (outcome IN ('won', 'lost', 'abandoned')),
    guesses_count INTEGER NOT NULL,
    created_at TEXT DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS game_guesses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    game_id INTEGER NOT NULL,
    guess_number INTEGER NOT NULL,
    word TEXT NOT NULL,
    feedback TEXT NOT NULL,
    FOREIGN KEY (game_id) REFERENCES games(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS solver_sessions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp TEXT NOT NULL,
    outcome TEXT NOT NULL CHECK (outcome IN ('completed', 'abandoned')),
    guesses_count INTEGER NOT NULL,
    created_at TEXT DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS solver_guesses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id INTEGER NOT NULL,
    guess_number INTEGER NOT NULL,
    word TEXT NOT NULL,
    pool_size_before INTEGER NOT NULL,
    pool_size_after INTEGER NOT NULL,
    entropy REAL NOT NULL,
    optimal_word TEXT NOT NULL,
    optimal_entropy REAL NOT NULL,
    deviation_score REAL NOT NULL,
    FOREIGN KEY (session_id) REFERENCES solver_sessions(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_games_timestamp ON games(timestamp DESC);
CREATE INDEX IF NOT EXISTS idx_games_outcome ON games(outcome);
CREATE INDEX IF NOT EXISTS idx_solver_sessions_timestamp ON solver_sessions(timestamp DESC);
CREATE INDEX IF NOT EXISTS idx_game_guesses_game_id ON game_guesses(game_id);
CREATE INDEX IF NOT EXISTS idx_solver_guesses_session_id ON solver_guesses(session_id);
"""


def _parse_timestamp(raw: str) -> datetime:
    try:
        ts = datetime.fromisoformat(raw)
    except ValueError:
        log.warning("unreadable timestamp %r, using now", raw)
        return datetime.now(timezone.utc)
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


class HistoryStore:
    """Use as a context manager, or call close() when done."""

    def __init__(self, path: Union[str, Path] = ":memory:") -> None:
        self.path = str(path)
        self.conn = sqlite3.connect(self.path)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON;")
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "HistoryStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ---------- games ----------

    def save_game(self, record: GameRecord) -> int:
        with self.conn:
            cur = self.conn.execute(
                "INSERT INTO games (timestamp, target_word, outcome, guesses_count) VALUES (?, ?, ?, ?)",
                (record.timestamp.isoformat(), record.target_word, record.outcome.value, record.guesses_count),
            )
            game_id = cur.lastrowid
            self.conn.executemany(
                "INSERT INTO game_guesses (game_id, guess_number, word, feedback) VALUES (?, ?, ?, ?)",
                [
                    (game_id, g.guess_number, g.word, json.dumps(tiles_to_names(g.pattern)))
                    for g in record.guesses
                ],
            )
        log.info("saved game %d (%s)", game_id, record.outcome.value)
        return game_id

    def load_game(self, game_id: int) -> Optional[GameRecord]:
        row = self.conn.execute("SELECT * FROM games WHERE id = ?", (game_id,)).fetchone()
        if row is None:
            return None
        guesses = self.conn.execute(
            "SELECT guess_number, word, feedback FROM game_guesses WHERE game_id = ? ORDER BY guess_number ASC",
            (game_id,),
        ).fetchall()
        return GameRecord(
            target_word=row["target_word"],
            outcome=GameOutcome(row["outcome"]),
            guesses=tuple(
                GameGuessRecord(g["guess_number"], g["word"], names_to_tiles(json.loads(g["feedback"])))
                for g in guesses
            ),
            timestamp=_parse_timestamp(row["timestamp"]),
            id=row["id"],
        )

    def list_games(self) -> List[GameRecord]:
        """All games, most recent first."""
        ids = [r["id"] for r in self.conn.execute("SELECT id FROM games ORDER BY timestamp DESC, id DESC")]
        return [self.load_game(i) for i in ids]

    def delete_game(self, game_id: int) -> bool:
        with self.conn:
            cur = self.conn.execute("DELETE FROM games WHERE id = ?", (game_id,))
        return cur.rowcount > 0

    # ---------- solver sessions ----------

    def save_solver_session(self, record: SolverSessionRecord) -> int:
        with self.conn:
            cur = self.conn.execute(
                "INSERT INTO solver_sessions (timestamp, outcome, guesses_count) VALUES (?, ?, ?)",
                (record.timestamp.isoformat(), record.outcome.value, record.guesses_count),
            )
            session_id = cur.lastrowid
            self.conn.executemany(
                """
                INSERT INTO solver_guesses (
                    session_id, guess_number, word, pool_size_before, pool_size_after,
                    entropy, optimal_word, optimal_entropy, deviation_score
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        session_id, g.guess_number, g.word, g.pool_size_before, g.pool_size_after,
                        g.entropy, g.optimal_word, g.optimal_entropy, g.deviation_score,
                    )
                    for g in record.guesses
                ],
            )
        log.info("saved solver session %d (%s)", session_id, record.outcome.value)
        return session_id

    def load_solver_session(self, session_id: int) -> Optional[SolverSessionRecord]:
        row = self.conn.execute("SELECT * FROM solver_sessions WHERE id = ?", (session_id,)).fetchone()
        if row is None:
            return None
        guesses = self.conn.execute(
            """
            SELECT guess_number, word, pool_size_before, pool_size_after,
                   entropy, optimal_word, optimal_entropy, deviation_score
            FROM solver_guesses
            WHERE session_id = ?
            ORDER BY guess_number ASC
            """,
            (session_id,),
        ).fetchall()
        return SolverSessionRecord(
            outcome=SolverOutcome(row["outcome"]),
            guesses=tuple(SolverGuessRecord(**dict(g)) for g in guesses),
            timestamp=_parse_timestamp(row["timestamp"]),
            id=row["id"],
        )

    def list_solver_sessions(self) -> List[SolverSessionRecord]:
        """All solver sessions, most recent first."""
        ids = [
            r["id"]
            for r in self.conn.execute("SELECT id FROM solver_sessions ORDER BY timestamp DESC, id DESC")
        ]
        return [self.load_solver_session(i) for i in ids]

    def delete_solver_session(self, session_id: int) -> bool:
        with self.conn:
            cur = self.conn.execute("DELETE FROM solver_sessions WHERE id = ?", (session_id,))
        return cur.rowcount > 0
