"""
Per-owner short/mid/long memory CRUD and decay mechanics.

Short memory expires by absolute age. Mid memory accumulates weight on
repeat sightings and loses 5% per sweep once stale. Long memory is only ever
reinforced.
"""
import logging
import sqlite3
from typing import Any, List, Optional

import npcbrain_config as cfg
from npcbrain_models import LongMemoryRow, MidMemoryRow, ShortMemoryRow
from npcbrain_utils import clamp01, normalize_key, now_ms, to_json

logger = logging.getLogger(__name__)

SHORT_COLUMNS = "id, timestamp, owner_id, entity_seen, phrase_heard, action_observed, decay_score, scene_id"


# --- Short memory ---

def insert_short(
    conn: sqlite3.Connection,
    owner_id: str,
    entity_seen: Optional[str] = None,
    phrase_heard: Optional[str] = None,
    action_observed: Optional[str] = None,
    scene_id: Optional[str] = None,
    timestamp: Optional[int] = None,
) -> int:
    ts = timestamp if timestamp is not None else now_ms()
    cur = conn.execute(
        """
        INSERT INTO npc_memory_short
            (timestamp, owner_id, entity_seen, phrase_heard, action_observed, decay_score, scene_id)
        VALUES (?, ?, ?, ?, ?, 1.0, ?)
        """,
        (ts, owner_id, entity_seen or None, phrase_heard or None, action_observed or None, scene_id),
    )
    conn.commit()
    return cur.lastrowid


def get_short(conn: sqlite3.Connection, owner_id: str, limit: int = 50) -> List[ShortMemoryRow]:
    rows = conn.execute(
        f"SELECT {SHORT_COLUMNS} FROM npc_memory_short WHERE owner_id = ? ORDER BY timestamp DESC, id DESC LIMIT ?",
        (owner_id, limit),
    ).fetchall()
    return [ShortMemoryRow.from_row(r) for r in rows]


def decay_short(conn: sqlite3.Connection, now: Optional[int] = None) -> int:
    """Delete every short row older than the max age. Returns rows removed."""
    now = now if now is not None else now_ms()
    cutoff = now - cfg.SHORT_MAX_AGE_MS
    cur = conn.execute("DELETE FROM npc_memory_short WHERE timestamp < ?", (cutoff,))
    conn.commit()
    if cur.rowcount:
        logger.debug("Expired %d short memories", cur.rowcount)
    return cur.rowcount


# --- Mid memory ---

def upsert_mid(
    conn: sqlite3.Connection,
    owner_id: str,
    entity: str,
    context_tag: Optional[str] = None,
    delta: float = cfg.DEFAULT_MID_DELTA,
    now: Optional[int] = None,
) -> float:
    now = now if now is not None else now_ms()
    key = normalize_key(entity)
    tag = normalize_key(context_tag) or None
    existing = conn.execute(
        "SELECT id, correlation_weight FROM npc_memory_mid WHERE owner_id = ? AND entity = ?",
        (owner_id, key),
    ).fetchone()
    if existing:
        weight = clamp01(existing["correlation_weight"] + delta)
        conn.execute(
            "UPDATE npc_memory_mid SET correlation_weight = ?, last_seen = ?, context_tag = ? WHERE id = ?",
            (weight, now, tag, existing["id"]),
        )
    else:
        weight = clamp01(delta)
        conn.execute(
            """
            INSERT INTO npc_memory_mid (owner_id, entity, correlation_weight, last_seen, context_tag)
            VALUES (?, ?, ?, ?, ?)
            """,
            (owner_id, key, weight, now, tag),
        )
    conn.commit()
    return weight


def get_mid(conn: sqlite3.Connection, owner_id: str, limit: int = 100) -> List[MidMemoryRow]:
    rows = conn.execute(
        """
        SELECT id, owner_id, entity, correlation_weight, last_seen, context_tag
        FROM npc_memory_mid WHERE owner_id = ?
        ORDER BY correlation_weight DESC, last_seen DESC LIMIT ?
        """,
        (owner_id, limit),
    ).fetchall()
    return [MidMemoryRow.from_row(r) for r in rows]


def decay_mid(conn: sqlite3.Connection, now: Optional[int] = None) -> int:
    """Shrink stale mid rows by the decay rate; delete those below the floor. Returns rows deleted."""
    now = now if now is not None else now_ms()
    stale_before = now - cfg.MID_MAX_AGE_MS
    rows = conn.execute(
        "SELECT id, correlation_weight FROM npc_memory_mid WHERE last_seen < ?",
        (stale_before,),
    ).fetchall()
    deleted = 0
    for row in rows:
        weight = row["correlation_weight"] * (1 - cfg.MID_DECAY_RATE)
        if weight < cfg.MID_WEIGHT_FLOOR:
            conn.execute("DELETE FROM npc_memory_mid WHERE id = ?", (row["id"],))
            deleted += 1
        else:
            conn.execute("UPDATE npc_memory_mid SET correlation_weight = ? WHERE id = ?", (weight, row["id"]))
    conn.commit()
    if rows:
        logger.debug("Decayed %d stale mid memories (%d forgotten)", len(rows), deleted)
    return deleted


# --- Long memory (survives a session reset) ---

def get_long(conn: sqlite3.Connection, owner_id: str, limit: int = 50) -> List[LongMemoryRow]:
    rows = conn.execute(
        """
        SELECT id, owner_id, concept, association_network, reinforcement_score
        FROM npc_memory_long WHERE owner_id = ?
        ORDER BY reinforcement_score DESC, id ASC LIMIT ?
        """,
        (owner_id, limit),
    ).fetchall()
    return [LongMemoryRow.from_row(r) for r in rows]


def reinforce_long(
    conn: sqlite3.Connection,
    owner_id: str,
    concept: str,
    association: Any = None,
    delta: float = cfg.DEFAULT_LONG_DELTA,
) -> float:
    key = normalize_key(concept)
    existing = conn.execute(
        "SELECT id, reinforcement_score FROM npc_memory_long WHERE owner_id = ? AND concept = ?",
        (owner_id, key),
    ).fetchone()
    if existing:
        score = clamp01(existing["reinforcement_score"] + delta)
        conn.execute(
            "UPDATE npc_memory_long SET reinforcement_score = ?, association_network = ? WHERE id = ?",
            (score, to_json(association), existing["id"]),
        )
    else:
        score = clamp01(delta)
        conn.execute(
            """
            INSERT INTO npc_memory_long (owner_id, concept, association_network, reinforcement_score)
            VALUES (?, ?, ?, ?)
            """,
            (owner_id, key, to_json(association), score),
        )
    conn.commit()
    return score
