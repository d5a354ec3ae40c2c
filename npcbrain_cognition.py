"""
Cognitive loop: perceive -> (maybe) speak -> decay, driven one tick at a time
by a host scheduler every few seconds per owner.

Speaking and decay run on independent cadences: the speak roll is random per
tick, short decay runs every 3rd tick and mid decay every 5th.
"""
import logging
import random
import sqlite3
from typing import Dict, List, Optional, Protocol

import npcbrain_config as cfg
from npcbrain_environment import build_context
from npcbrain_memory import decay_mid, decay_short, insert_short
from npcbrain_models import EnvironmentContext, PerceptionPayload
from npcbrain_response import construct_response
from npcbrain_social import record_phrase

logger = logging.getLogger(__name__)


class Speaker(Protocol):
    def publish(self, owner_id: str, text: str) -> None:
        ...


class PrintEmitter:
    """Emitter that writes speech to stdout."""

    def publish(self, owner_id: str, text: str) -> None:
        print(f"[{owner_id}] {text}")


def apply_perception(conn: sqlite3.Connection, payload: PerceptionPayload) -> int:
    return insert_short(
        conn,
        payload.owner_id,
        entity_seen=payload.entity_seen,
        phrase_heard=payload.phrase_heard,
        action_observed=payload.action_observed,
        scene_id=payload.scene_id,
        timestamp=payload.timestamp,
    )


def tick(
    conn: sqlite3.Connection,
    owner_id: str,
    emitter: Optional[Speaker],
    environment: Optional[EnvironmentContext] = None,
    tick_index: int = 0,
    rng: Optional[random.Random] = None,
    now: Optional[int] = None,
) -> Optional[str]:
    rng = rng or random.Random()
    env = environment or build_context()
    spoken = None

    if emitter is not None and rng.random() < cfg.SPEAK_CHANCE_PER_TICK:
        phrase = construct_response(conn, owner_id, environment=env, allow_proto=True, rng=rng, now=now)
        if phrase and phrase != ".":
            emitter.publish(owner_id, phrase)
            record_phrase(conn, owner_id, phrase, scene_id=env.scene_id, now=now)
            spoken = phrase
            logger.info("%s said: %s", owner_id, phrase)

    if tick_index % cfg.DECAY_SHORT_EVERY_TICKS == 0:
        decay_short(conn, now=now)
    if tick_index % cfg.DECAY_MID_EVERY_TICKS == 0:
        decay_mid(conn, now=now)
    return spoken


def tick_all(
    conn: sqlite3.Connection,
    owner_ids: List[str],
    emitter: Optional[Speaker],
    environment: Optional[EnvironmentContext] = None,
    tick_index: int = 0,
    rng: Optional[random.Random] = None,
    now: Optional[int] = None,
) -> Dict[str, str]:
    """Tick every owner in order against one environment snapshot, staggering tick indices."""
    rng = rng or random.Random()
    env = environment or build_context()
    spoken: Dict[str, str] = {}
    for i, owner_id in enumerate(owner_ids):
        text = tick(conn, owner_id, emitter, environment=env, tick_index=tick_index + i, rng=rng, now=now)
        if text:
            spoken[owner_id] = text
    return spoken
