"""
Social memory: owners read what others have said through the shared short
memory table, which is how vocabulary and phrasing drift into a dialect.
"""
import sqlite3
from dataclasses import dataclass
from typing import List, Optional

import npcbrain_config as cfg
from npcbrain_memory import insert_short
from npcbrain_utils import truncate


@dataclass
class HeardPhrase:
    owner_id: str
    phrase: str
    timestamp: int


def record_phrase(
    conn: sqlite3.Connection,
    owner_id: str,
    phrase: str,
    scene_id: Optional[str] = None,
    now: Optional[int] = None,
) -> Optional[int]:
    if not phrase or len(phrase) < cfg.MIN_WORD_LEN:
        return None
    return insert_short(
        conn,
        owner_id,
        phrase_heard=truncate(phrase, cfg.PHRASE_MAX_LEN),
        scene_id=scene_id,
        timestamp=now,
    )


def get_phrases_from_others(
    conn: sqlite3.Connection,
    owner_id: str,
    limit: int = 50,
    scene_id: Optional[str] = None,
) -> List[HeardPhrase]:
    sql = """
        SELECT owner_id, phrase_heard, timestamp FROM npc_memory_short
        WHERE phrase_heard IS NOT NULL AND phrase_heard != '' AND owner_id != ?
    """
    params: list = [owner_id]
    if scene_id is not None:
        sql += " AND scene_id = ?"
        params.append(scene_id)
    sql += " ORDER BY timestamp DESC, id DESC LIMIT ?"
    params.append(limit)
    rows = conn.execute(sql, params).fetchall()
    return [HeardPhrase(r["owner_id"], r["phrase_heard"], r["timestamp"]) for r in rows]


def compute_social_overlap(
    conn: sqlite3.Connection,
    owner_id: str,
    candidate_words: List[str],
    scene_id: Optional[str] = None,
) -> float:
    """
    Share of candidate words that others have been saying, scaled by the
    social multiplier and capped at 1.
    """
    if not candidate_words:
        return 0.0
    others = get_phrases_from_others(conn, owner_id, cfg.PHRASE_OVERLAP_WINDOW, scene_id=scene_id)
    if not others:
        return 0.0
    phrase_text = " ".join(o.phrase for o in others).lower()
    matches = sum(1 for w in candidate_words if w.lower() in phrase_text)
    return min(1.0, (matches / len(candidate_words)) * cfg.SOCIAL_MULTIPLIER)


def get_repeated_patterns(conn: sqlite3.Connection, limit: int = cfg.REPEATED_PATTERN_LIMIT) -> List[str]:
    rows = conn.execute(
        """
        SELECT phrase_heard FROM npc_memory_short
        WHERE phrase_heard IS NOT NULL AND phrase_heard != '' AND length(phrase_heard) >= 3
        GROUP BY phrase_heard HAVING COUNT(DISTINCT owner_id) >= 2
        ORDER BY COUNT(*) DESC, MAX(timestamp) DESC LIMIT ?
        """,
        (limit,),
    ).fetchall()
    return [r["phrase_heard"] for r in rows]
