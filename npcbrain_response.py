"""
Response construction: memory lookup -> correlation ranking -> optional
proto-word -> tone -> phrase assembly.

Social overlap depends on knowing candidate words, so ranking runs as two
explicit stages: discover (no social signal) then refine (real overlap).
"""
import logging
import random
import sqlite3
from typing import Callable, List, Optional

import npcbrain_config as cfg
from npcbrain_correlation import get_correlation_clusters, merge_external_words
from npcbrain_environment import build_context
from npcbrain_models import CorrelationCluster, EnvironmentContext, Response
from npcbrain_proto import get_top, reinforce
from npcbrain_social import compute_social_overlap
from npcbrain_tone import compute_bias, select_tone, tone_modifier

logger = logging.getLogger(__name__)

AssociationProvider = Callable[[str], List[str]]


def discover(
    conn: sqlite3.Connection,
    owner_id: str,
    environment: EnvironmentContext,
    now: Optional[int] = None,
) -> List[str]:
    """Provisional candidate words, scored without any social signal."""
    clusters = get_correlation_clusters(conn, owner_id, environment, social_overlap=0.0, now=now)
    if clusters:
        return list(clusters[0].words)
    return list(cfg.FALLBACK_WORDS)


def refine(
    conn: sqlite3.Connection,
    owner_id: str,
    environment: EnvironmentContext,
    social_overlap: float,
    topic_words: List[str],
    association_provider: Optional[AssociationProvider] = None,
    now: Optional[int] = None,
) -> List[CorrelationCluster]:
    clusters = get_correlation_clusters(conn, owner_id, environment, social_overlap=social_overlap, now=now)
    if association_provider is not None:
        clusters = merge_external_words(association_provider(" ".join(topic_words)), clusters)
    return clusters


def format_utterance(modifier: str, phrase: str) -> str:
    parts = []
    if modifier and modifier != cfg.NEUTRAL_MODIFIER:
        parts.append(modifier)
    if phrase:
        parts.append(phrase)
    out = ", ".join(parts).strip()
    if not out:
        out = " ".join(cfg.FALLBACK_WORDS)
    out = out[0].upper() + out[1:]
    if not out.endswith(cfg.TERMINAL_PUNCTUATION):
        out += "."
    return out


def assemble_response(
    conn: sqlite3.Connection,
    owner_id: str,
    environment: Optional[EnvironmentContext] = None,
    player_frequency: float = 0,
    allow_proto: bool = False,
    rng: Optional[random.Random] = None,
    association_provider: Optional[AssociationProvider] = None,
    scene_id: Optional[str] = None,
    now: Optional[int] = None,
) -> Response:
    env = environment or build_context()
    rng = rng or random.Random()

    provisional = discover(conn, owner_id, env, now=now)
    overlap = compute_social_overlap(conn, owner_id, provisional, scene_id=scene_id)
    clusters = refine(conn, owner_id, env, overlap, provisional, association_provider, now=now)
    words = list(clusters[0].words) if clusters else provisional

    phrase = " ".join(words[: cfg.PHRASE_WORD_LIMIT])
    proto_word = None
    if allow_proto and rng.random() < cfg.PROTO_INJECTION_CHANCE:
        # fall back to the shared vocabulary when this owner has none of its own
        protos = get_top(conn, owner_id=owner_id, limit=cfg.PROTO_CANDIDATES) or get_top(conn, limit=cfg.PROTO_CANDIDATES)
        if protos:
            proto_word = protos[0].word
            phrase = f"{phrase} {proto_word}" if phrase else proto_word
            reinforce(conn, proto_word, owner_id=owner_id, now=now)

    bias = compute_bias(player_frequency, env.entity_density, overlap)
    tone = select_tone(bias.bias)
    text = format_utterance(tone_modifier(tone), phrase)
    logger.debug("Response for %s: %r (tone=%s, overlap=%.2f)", owner_id, text, tone.value, overlap)
    return Response(
        text=text,
        tone=tone,
        bias=bias,
        social_overlap=overlap,
        words=words,
        proto_word=proto_word,
    )


def construct_response(
    conn: sqlite3.Connection,
    owner_id: str,
    environment: Optional[EnvironmentContext] = None,
    player_frequency: float = 0,
    allow_proto: bool = False,
    rng: Optional[random.Random] = None,
    association_provider: Optional[AssociationProvider] = None,
    scene_id: Optional[str] = None,
    now: Optional[int] = None,
) -> str:
    """What would this owner say right now. Never empty."""
    return assemble_response(
        conn,
        owner_id,
        environment=environment,
        player_frequency=player_frequency,
        allow_proto=allow_proto,
        rng=rng,
        association_provider=association_provider,
        scene_id=scene_id,
        now=now,
    ).text
