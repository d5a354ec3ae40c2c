#!/usr/bin/env python3
import argparse
import logging

from npcbrain_commands import (
    cmd_coin,
    cmd_decay,
    cmd_init,
    cmd_learn,
    cmd_notice,
    cmd_patterns,
    cmd_perceive,
    cmd_recall,
    cmd_reset,
    cmd_say,
    cmd_status,
    cmd_tick,
    cmd_vocab,
    unit_float,
)
from npcbrain_models import MemoryTier

COMMANDS = {
    "init": cmd_init,
    "status": cmd_status,
    "perceive": cmd_perceive,
    "notice": cmd_notice,
    "learn": cmd_learn,
    "recall": cmd_recall,
    "say": cmd_say,
    "tick": cmd_tick,
    "coin": cmd_coin,
    "vocab": cmd_vocab,
    "patterns": cmd_patterns,
    "decay": cmd_decay,
    "reset": cmd_reset,
}


def add_environment_args(parser):
    parser.add_argument("--time-phase", type=unit_float, help="Time of day, 0 (dawn) to 1 (late night)")
    parser.add_argument("--density", type=float, help="Nearby entity count")
    parser.add_argument("--scene", help="Scene id")


def build_parser():
    parser = argparse.ArgumentParser(description="NPC Brain: memory-driven speech for non-player characters")
    parser.add_argument("--verbose", action="store_true", help="Log debug output")
    subparsers = parser.add_subparsers(dest="command")

    init = subparsers.add_parser("init")
    init.add_argument("--clear-session", action="store_true", help="Drop short and mid memory")

    subparsers.add_parser("status")

    per = subparsers.add_parser("perceive")
    per.add_argument("owner")
    per.add_argument("--entity", help="Entity seen")
    per.add_argument("--phrase", help="Phrase heard")
    per.add_argument("--action", help="Action observed")
    per.add_argument("--scene", help="Scene id")

    notice = subparsers.add_parser("notice")
    notice.add_argument("owner")
    notice.add_argument("entity")
    notice.add_argument("--tag", help="Context tag (defaults to the current time/density tags)")
    notice.add_argument("--delta", type=float, default=0.1, help="Weight increment")
    add_environment_args(notice)

    learn = subparsers.add_parser("learn")
    learn.add_argument("owner")
    learn.add_argument("concept")
    learn.add_argument("--assoc", help="Comma separated associated concepts")
    learn.add_argument("--delta", type=float, default=0.1, help="Reinforcement increment")

    rec = subparsers.add_parser("recall")
    rec.add_argument("owner")
    rec.add_argument("--limit", type=int, default=10, help="Clusters to show")
    add_environment_args(rec)

    say = subparsers.add_parser("say")
    say.add_argument("owner")
    say.add_argument("--input", help="Phrase the owner hears before answering")
    say.add_argument("--player-frequency", type=float, default=0, help="Interactions with this player so far")
    say.add_argument("--proto", action="store_true", help="Allow proto-word injection")
    say.add_argument("--seed", type=int, help="Random seed")
    say.add_argument("--explain", action="store_true", help="Show tone and overlap")
    say.add_argument("--local", action="store_true", help="Only hear NPCs speaking in --scene")
    add_environment_args(say)

    tick = subparsers.add_parser("tick")
    tick.add_argument("owners", help="Comma separated owner ids")
    tick.add_argument("--ticks", type=int, default=1, help="Number of ticks to run")
    tick.add_argument("--start", type=int, default=0, help="Starting tick index")
    tick.add_argument("--interval", type=float, default=0, help="Seconds between ticks")
    tick.add_argument("--seed", type=int, help="Random seed")
    add_environment_args(tick)

    coin = subparsers.add_parser("coin")
    coin.add_argument("owner")
    coin.add_argument("--tag", default="default", help="Semantic tag")
    coin.add_argument("--seed", type=int, help="Random seed")

    vocab = subparsers.add_parser("vocab")
    vocab.add_argument("--owner", help="Only words this owner created or used")
    vocab.add_argument("--limit", type=int, default=10)

    subparsers.add_parser("patterns")

    decay = subparsers.add_parser("decay")
    decay.add_argument("--tier", choices=[MemoryTier.SHORT.value, MemoryTier.MID.value, "all"], default="all")

    subparsers.add_parser("reset")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return
    handler(args)


if __name__ == "__main__":
    main()
