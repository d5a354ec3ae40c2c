"""
Scoring and ranking of memory into word clusters.

score = 0.35 * frequency + 0.25 * recency + 0.25 * context + 0.15 * social
"""
import sqlite3
from typing import Iterable, List, Optional

import npcbrain_config as cfg
from npcbrain_environment import environment_match
from npcbrain_memory import get_long, get_mid, get_short
from npcbrain_models import ClusterSource, CorrelationCluster, EnvironmentContext
from npcbrain_utils import now_ms, split_words


def recency_score(now: int, then: int) -> float:
    age = now - then
    if age <= 0:
        return 1.0
    return 1 / (1 + age / cfg.RECENCY_HALFLIFE_MS)


def combine_score(frequency: float, recency: float, context: float, social: float) -> float:
    return (
        cfg.FREQUENCY_WEIGHT * frequency
        + cfg.RECENCY_WEIGHT * recency
        + cfg.CONTEXT_WEIGHT * context
        + cfg.SOCIAL_WEIGHT * social
    )


def rank_clusters(clusters: List[CorrelationCluster]) -> List[CorrelationCluster]:
    # sorted() is stable, so equal scores keep insertion order
    return sorted(clusters, key=lambda c: c.score, reverse=True)


def get_correlation_clusters(
    conn: sqlite3.Connection,
    owner_id: str,
    environment: Optional[EnvironmentContext] = None,
    social_overlap: float = 0.0,
    now: Optional[int] = None,
) -> List[CorrelationCluster]:
    now = now if now is not None else now_ms()

    clusters: List[CorrelationCluster] = []
    seen = set()

    for row in get_short(conn, owner_id, cfg.SHORT_SCAN_LIMIT):
        recency = recency_score(now, row.timestamp)
        freq = min(1.0, row.decay_score * 0.5)
        ctx = environment_match(row.entity_seen, environment)
        for raw in (row.phrase_heard, row.entity_seen, row.action_observed):
            if not raw or len(raw) < cfg.MIN_WORD_LEN:
                continue
            words = split_words(raw)
            if not words:
                continue
            key = "_".join(words)
            if key in seen:
                continue
            seen.add(key)
            clusters.append(CorrelationCluster(words, combine_score(freq, recency, ctx, social_overlap), ClusterSource.SHORT))

    for row in get_mid(conn, owner_id, cfg.MID_SCAN_LIMIT):
        word = row.entity.lower().strip()
        if len(word) < cfg.MIN_WORD_LEN or word in seen:
            continue
        seen.add(word)
        score = combine_score(
            row.correlation_weight,
            recency_score(now, row.last_seen),
            environment_match(row.context_tag, environment),
            social_overlap,
        )
        clusters.append(CorrelationCluster([word], score, ClusterSource.MID))

    for row in get_long(conn, owner_id, cfg.LONG_SCAN_LIMIT):
        word = row.concept.lower().strip()
        if len(word) < cfg.MIN_WORD_LEN or word in seen:
            continue
        seen.add(word)
        score = combine_score(row.reinforcement_score, cfg.LONG_RECENCY, cfg.CONTEXT_NEUTRAL, social_overlap)
        clusters.append(CorrelationCluster([word], score, ClusterSource.LONG))

    return rank_clusters(clusters)


def merge_external_words(
    words: Iterable[str],
    existing_clusters: List[CorrelationCluster],
) -> List[CorrelationCluster]:
    """
    Fold words from the word-association provider into ranked clusters.
    """
    seen = {w for c in existing_clusters for w in c.words}
    external: List[CorrelationCluster] = []
    for word in words:
        if len(external) >= cfg.EXTERNAL_WORD_LIMIT:
            break
        if not word or len(word) < cfg.MIN_WORD_LEN or word in seen:
            continue
        seen.add(word)
        external.append(CorrelationCluster([word], cfg.EXTERNAL_BASE_SCORE, ClusterSource.EXTERNAL))
    return rank_clusters(list(existing_clusters) + external)
