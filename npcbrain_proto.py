"""
Proto-language generator: prefix + root + suffix words under pronounceability
constraints, persisted globally and reinforced on reuse.
"""
import logging
import random
import sqlite3
from typing import List, Optional

import npcbrain_config as cfg
from npcbrain_models import ProtoWord
from npcbrain_storage import count_rows
from npcbrain_utils import clamp01, normalize_key, now_ms

logger = logging.getLogger(__name__)

PROTO_COLUMNS = "word, prefix, root, suffix, semantic_tag, reinforcement_score, first_created, last_used, created_by"


def is_vowel(c: str) -> bool:
    return c in cfg.VOWELS


def is_consonant(c: str) -> bool:
    return c in cfg.CONSONANTS


def is_pronounceable(word: str) -> bool:
    """
    No doubled consonant, no run of three consonants, at least one vowel, and
    one vowel per four letters once the word reaches four letters.
    """
    if not word or len(word) < cfg.PROTO_MIN_LEN or len(word) > cfg.PROTO_MAX_LEN:
        return False
    w = word.lower()
    consonant_run = 0
    vowel_count = 0
    last = ""
    for c in w:
        if c == last and is_consonant(c):
            return False
        if is_consonant(c):
            consonant_run += 1
            if consonant_run >= 3:
                return False
        elif is_vowel(c):
            consonant_run = 0
            vowel_count += 1
        last = c
    if vowel_count == 0:
        return False
    if len(w) >= 4 and vowel_count < len(w) // 4:
        return False
    return True


def ensure_seeded(conn: sqlite3.Connection) -> bool:
    """Seed the phonetic fragment tables once. Returns True when rows were written."""
    if count_rows(conn, "root_words") > 0:
        return False
    conn.executemany(
        "INSERT OR IGNORE INTO root_words (phonetic_seed, semantic_vector_tag, usage_frequency) VALUES (?, ?, 0)",
        [(r, cfg.SEED_TAG) for r in cfg.DEFAULT_ROOTS],
    )
    conn.executemany(
        "INSERT OR IGNORE INTO prefixes (prefix, functional_tag) VALUES (?, ?)",
        [(p, cfg.SEED_TAG) for p in cfg.DEFAULT_PREFIXES],
    )
    conn.executemany(
        "INSERT OR IGNORE INTO suffixes (suffix, functional_tag) VALUES (?, ?)",
        [(s, cfg.SEED_TAG) for s in cfg.DEFAULT_SUFFIXES],
    )
    conn.commit()
    logger.info("Seeded proto vocabulary fragments")
    return True


def _draw(conn: sqlite3.Connection, sql: str, rng: random.Random) -> List[str]:
    values = [r[0] for r in conn.execute(sql).fetchall()]
    return rng.sample(values, min(cfg.PROTO_DRAW, len(values)))


def word_exists(conn: sqlite3.Connection, word: str) -> bool:
    return conn.execute("SELECT 1 FROM proto_vocabulary WHERE word = ?", (word,)).fetchone() is not None


def get_word(conn: sqlite3.Connection, word: str) -> Optional[ProtoWord]:
    row = conn.execute(f"SELECT {PROTO_COLUMNS} FROM proto_vocabulary WHERE word = ?", (word,)).fetchone()
    return ProtoWord.from_row(row) if row else None


def generate_word(
    conn: sqlite3.Connection,
    owner_id: Optional[str] = None,
    semantic_tag: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> Optional[ProtoWord]:
    """
    Try a bounded number of fragment combinations and persist the first new,
    pronounceable word. Returns None when every attempt fails.
    """
    ensure_seeded(conn)
    rng = rng or random.Random()
    tag = normalize_key(semantic_tag) or None

    prefixes = _draw(conn, "SELECT prefix FROM prefixes ORDER BY id", rng)
    roots = _draw(conn, "SELECT phonetic_seed FROM root_words ORDER BY id", rng)
    suffixes = _draw(conn, "SELECT suffix FROM suffixes ORDER BY id", rng)

    now = now_ms()
    for i in range(cfg.PROTO_ATTEMPTS):
        prefix = prefixes[i % len(prefixes)] if prefixes else ""
        root = roots[(i // 3) % len(roots)] if roots else "nex"
        suffix = suffixes[i % len(suffixes)] if suffixes else ""
        word = (prefix + root + suffix).lower()
        if not is_pronounceable(word) or word_exists(conn, word):
            continue

        conn.execute(
            f"INSERT INTO proto_vocabulary ({PROTO_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (word, prefix or None, root, suffix or None, tag, cfg.PROTO_BASE_SCORE, now, now, owner_id),
        )
        conn.execute("UPDATE root_words SET usage_frequency = usage_frequency + 1 WHERE phonetic_seed = ?", (root,))
        conn.commit()
        logger.debug("Coined proto word %s (tag=%s, owner=%s)", word, tag, owner_id)
        return ProtoWord(
            word=word,
            root=root,
            prefix=prefix or None,
            suffix=suffix or None,
            semantic_tag=tag,
            reinforcement_score=cfg.PROTO_BASE_SCORE,
            created_by=owner_id,
            first_created=now,
            last_used=now,
        )
    logger.debug("Proto word search exhausted after %d attempts", cfg.PROTO_ATTEMPTS)
    return None


def get_or_create(
    conn: sqlite3.Connection,
    owner_id: str,
    semantic_tag: str,
    rng: Optional[random.Random] = None,
) -> Optional[ProtoWord]:
    ensure_seeded(conn)
    row = conn.execute(
        f"""
        SELECT {PROTO_COLUMNS} FROM proto_vocabulary WHERE semantic_tag = ?
        ORDER BY reinforcement_score DESC, last_used DESC LIMIT 1
        """,
        (normalize_key(semantic_tag),),
    ).fetchone()
    if row:
        return ProtoWord.from_row(row)
    return generate_word(conn, owner_id=owner_id, semantic_tag=semantic_tag, rng=rng)


def reinforce(
    conn: sqlite3.Connection,
    word: str,
    delta: float = cfg.DEFAULT_PROTO_DELTA,
    owner_id: Optional[str] = None,
    now: Optional[int] = None,
) -> Optional[float]:
    row = conn.execute("SELECT reinforcement_score FROM proto_vocabulary WHERE word = ?", (word,)).fetchone()
    if not row:
        return None
    now = now if now is not None else now_ms()
    score = clamp01(row["reinforcement_score"] + delta)
    conn.execute(
        "UPDATE proto_vocabulary SET reinforcement_score = ?, last_used = ? WHERE word = ?",
        (score, now, word),
    )
    if owner_id:
        conn.execute(
            """
            INSERT INTO proto_usage (word, owner_id, last_used) VALUES (?, ?, ?)
            ON CONFLICT (word, owner_id) DO UPDATE SET last_used = excluded.last_used
            """,
            (word, owner_id, now),
        )
    conn.commit()
    return score


def get_top(conn: sqlite3.Connection, owner_id: Optional[str] = None, limit: int = 10) -> List[ProtoWord]:
    if owner_id:
        rows = conn.execute(
            f"""
            SELECT {PROTO_COLUMNS} FROM proto_vocabulary
            WHERE created_by = ? OR word IN (SELECT word FROM proto_usage WHERE owner_id = ?)
            ORDER BY reinforcement_score DESC, last_used DESC LIMIT ?
            """,
            (owner_id, owner_id, limit),
        ).fetchall()
    else:
        rows = conn.execute(
            f"SELECT {PROTO_COLUMNS} FROM proto_vocabulary ORDER BY reinforcement_score DESC, last_used DESC LIMIT ?",
            (limit,),
        ).fetchall()
    return [ProtoWord.from_row(r) for r in rows]
