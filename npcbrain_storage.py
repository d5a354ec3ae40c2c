"""
Storage and filesystem helpers for NPC Brain.
"""
import logging
import sqlite3
from pathlib import Path
from typing import Optional, Union

import npcbrain_config as cfg

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS npc_memory_short (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    timestamp INTEGER NOT NULL,
    owner_id TEXT NOT NULL,
    entity_seen TEXT,
    phrase_heard TEXT,
    action_observed TEXT,
    decay_score REAL NOT NULL DEFAULT 1.0,
    scene_id TEXT
);
CREATE INDEX IF NOT EXISTS idx_short_owner_ts ON npc_memory_short (owner_id, timestamp);

CREATE TABLE IF NOT EXISTS npc_memory_mid (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    owner_id TEXT NOT NULL,
    entity TEXT NOT NULL,
    correlation_weight REAL NOT NULL DEFAULT 0,
    last_seen INTEGER NOT NULL,
    context_tag TEXT,
    UNIQUE (owner_id, entity)
);

CREATE TABLE IF NOT EXISTS npc_memory_long (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    owner_id TEXT NOT NULL,
    concept TEXT NOT NULL,
    association_network TEXT,
    reinforcement_score REAL NOT NULL DEFAULT 0,
    UNIQUE (owner_id, concept)
);

CREATE TABLE IF NOT EXISTS proto_vocabulary (
    word TEXT PRIMARY KEY,
    prefix TEXT,
    root TEXT NOT NULL,
    suffix TEXT,
    semantic_tag TEXT,
    reinforcement_score REAL NOT NULL DEFAULT 0.5,
    first_created INTEGER,
    last_used INTEGER,
    created_by TEXT
);
CREATE INDEX IF NOT EXISTS idx_proto_tag ON proto_vocabulary (semantic_tag);

CREATE TABLE IF NOT EXISTS proto_usage (
    word TEXT NOT NULL,
    owner_id TEXT NOT NULL,
    last_used INTEGER NOT NULL,
    UNIQUE (word, owner_id)
);

CREATE TABLE IF NOT EXISTS prefixes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    prefix TEXT NOT NULL UNIQUE,
    functional_tag TEXT
);

CREATE TABLE IF NOT EXISTS root_words (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    phonetic_seed TEXT NOT NULL UNIQUE,
    semantic_vector_tag TEXT,
    usage_frequency INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS suffixes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    suffix TEXT NOT NULL UNIQUE,
    functional_tag TEXT
);
"""


def ensure_brain() -> Path:
    path = Path.cwd() / cfg.BRAIN_DIR
    if not path.exists():
        path.mkdir(parents=True, exist_ok=True)
    return path


def get_brain_path() -> Optional[Path]:
    cwd = Path.cwd()
    for part in [cwd] + list(cwd.parents):
        possible = part / cfg.BRAIN_DIR
        if possible.exists():
            return possible
    return None


def run_schema(conn: sqlite3.Connection):
    conn.executescript(SCHEMA)
    conn.commit()


def connect(db_path: Union[str, Path] = ":memory:") -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    run_schema(conn)
    logger.debug("Brain store ready at %s", db_path)
    return conn


def clear_session_memory(conn: sqlite3.Connection):
    """
    Session reset: drop short and mid memory. Long memory and the proto
    vocabulary persist.
    """
    conn.execute("DELETE FROM npc_memory_short")
    conn.execute("DELETE FROM npc_memory_mid")
    conn.commit()
    logger.info("Session memory cleared")


def open_brain(brain_path: Optional[Path] = None, clear_session: bool = False) -> sqlite3.Connection:
    path = brain_path or ensure_brain()
    conn = connect(path / cfg.DB_FILE)
    if clear_session:
        clear_session_memory(conn)
    return conn


def close_brain(conn: sqlite3.Connection):
    conn.close()
    logger.debug("Brain store closed")


def count_rows(conn: sqlite3.Connection, table: str) -> int:
    return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
