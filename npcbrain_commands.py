"""
Command handlers for the npcb CLI.
"""
import argparse
import random
import sys
import time
from contextlib import contextmanager

from npcbrain_cognition import PrintEmitter, apply_perception, tick_all
from npcbrain_correlation import get_correlation_clusters
from npcbrain_environment import build_context, context_tags
from npcbrain_memory import decay_mid, decay_short, reinforce_long, upsert_mid
from npcbrain_models import MemoryTier, PerceptionPayload, ProtoWord
from npcbrain_proto import ensure_seeded, get_or_create, get_top
from npcbrain_response import assemble_response
from npcbrain_social import get_repeated_patterns
from npcbrain_storage import (
    clear_session_memory,
    close_brain,
    count_rows,
    ensure_brain,
    get_brain_path,
    open_brain,
)
from npcbrain_utils import normalize_ids

STATUS_TABLES = [
    ("short memories", "npc_memory_short"),
    ("mid memories", "npc_memory_mid"),
    ("long memories", "npc_memory_long"),
    ("proto words", "proto_vocabulary"),
]


@contextmanager
def brain_session():
    brain_path = get_brain_path()
    if not brain_path:
        print("Error: Brain not found. Run 'npcb init'.")
        sys.exit(1)
    conn = open_brain(brain_path)
    try:
        yield conn
    finally:
        close_brain(conn)


def unit_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not a number")
    if not 0.0 <= parsed <= 1.0:
        raise argparse.ArgumentTypeError(f"{value} must be between 0 and 1")
    return parsed


def environment_from_args(args):
    return build_context(
        time_phase=getattr(args, "time_phase", None),
        entity_density=getattr(args, "density", None),
        scene_id=getattr(args, "scene", None),
    )


def display_word(word: ProtoWord):
    parts = "-".join(p for p in [word.prefix, word.root, word.suffix] if p)
    tag = word.semantic_tag or "untagged"
    print(f"{word.word:<16} {word.reinforcement_score:.2f}  [{parts}] tag: {tag}")


def cmd_init(args):
    brain_path = ensure_brain()
    conn = open_brain(brain_path, clear_session=args.clear_session)
    try:
        seeded = ensure_seeded(conn)
    finally:
        close_brain(conn)
    print(f"NPC Brain initialized at {brain_path}")
    if seeded:
        print("Proto vocabulary fragments seeded.")
    if args.clear_session:
        print("Session memory cleared (long memory and vocabulary kept).")


def cmd_status(args):
    with brain_session() as conn:
        print("--- BRAIN STATUS ---")
        for label, table in STATUS_TABLES:
            print(f"{label}: {count_rows(conn, table)}")


def cmd_perceive(args):
    if not (args.entity or args.phrase or args.action):
        print("Error: Provide at least one of --entity, --phrase or --action.")
        sys.exit(1)
    payload = PerceptionPayload(
        owner_id=args.owner,
        entity_seen=args.entity,
        phrase_heard=args.phrase,
        action_observed=args.action,
        scene_id=args.scene,
    )
    with brain_session() as conn:
        apply_perception(conn, payload)
    print(f"Perception stored for {args.owner}.")


def cmd_notice(args):
    env = environment_from_args(args)
    tag = args.tag or " ".join(context_tags(env))
    with brain_session() as conn:
        weight = upsert_mid(conn, args.owner, args.entity, context_tag=tag, delta=args.delta)
    print(f"{args.owner} noticed '{args.entity.lower()}' (weight {weight:.2f}, tag: {tag}).")


def cmd_learn(args):
    association = normalize_ids(args.assoc) or None
    with brain_session() as conn:
        score = reinforce_long(conn, args.owner, args.concept, association=association, delta=args.delta)
    print(f"{args.owner} reinforced '{args.concept.lower()}' (score {score:.2f}).")


def cmd_recall(args):
    env = environment_from_args(args)
    with brain_session() as conn:
        clusters = get_correlation_clusters(conn, args.owner, env)
    print(f"--- CORRELATIONS FOR: '{args.owner}' ---")
    if not clusters:
        print("No memories found.")
        return
    for c in clusters[: args.limit]:
        print(f"[{c.source.value.upper():<5} | {c.score:.3f}] {' '.join(c.words)}")


def cmd_say(args):
    env = environment_from_args(args)
    rng = random.Random(args.seed)
    with brain_session() as conn:
        if args.input:
            apply_perception(conn, PerceptionPayload(owner_id=args.owner, phrase_heard=args.input, scene_id=args.scene))
        response = assemble_response(
            conn,
            args.owner,
            environment=env,
            player_frequency=args.player_frequency,
            allow_proto=args.proto,
            scene_id=env.scene_id if args.local else None,
            rng=rng,
        )
    print(response.text)
    if args.explain:
        print(f"tone: {response.tone.value} (bias {response.bias.bias:.2f}), social overlap: {response.social_overlap:.2f}")
        if response.proto_word:
            print(f"proto word: {response.proto_word}")


def cmd_tick(args):
    owners = normalize_ids(args.owners)
    if not owners:
        print("Error: Provide at least one owner id.")
        sys.exit(1)
    env = environment_from_args(args)
    rng = random.Random(args.seed)
    emitter = PrintEmitter()
    with brain_session() as conn:
        for n in range(args.ticks):
            tick_all(conn, owners, emitter, environment=env, tick_index=args.start + n, rng=rng)
            if args.interval and n < args.ticks - 1:
                time.sleep(args.interval)


def cmd_coin(args):
    rng = random.Random(args.seed)
    with brain_session() as conn:
        word = get_or_create(conn, args.owner, args.tag, rng=rng)
    if not word:
        print("No new word could be formed; try again.")
        return
    display_word(word)


def cmd_vocab(args):
    with brain_session() as conn:
        words = get_top(conn, owner_id=args.owner, limit=args.limit)
    if not words:
        print("No proto words yet.")
        return
    print("--- PROTO VOCABULARY ---")
    for w in words:
        display_word(w)


def cmd_patterns(args):
    with brain_session() as conn:
        patterns = get_repeated_patterns(conn)
    if not patterns:
        print("No shared phrases yet.")
        return
    print("--- SHARED PHRASES ---")
    for p in patterns:
        print(p)


def cmd_decay(args):
    tier = MemoryTier(args.tier) if args.tier != "all" else None
    with brain_session() as conn:
        if tier in (None, MemoryTier.SHORT):
            print(f"Expired {decay_short(conn)} short memories.")
        if tier in (None, MemoryTier.MID):
            print(f"Forgot {decay_mid(conn)} mid memories.")


def cmd_reset(args):
    with brain_session() as conn:
        clear_session_memory(conn)
    print("Session memory cleared (long memory and vocabulary kept).")
