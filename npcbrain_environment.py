"""
Environment adapter: turns raw world signals into the context consumed by scoring.
"""
from typing import List, Optional, Tuple

import npcbrain_config as cfg
from npcbrain_models import EnvironmentContext


def build_context(
    time_phase: Optional[float] = None,
    entity_density: Optional[float] = None,
    scene_id: Optional[str] = None,
    recent_player_actions: Optional[List[str]] = None,
) -> EnvironmentContext:
    return EnvironmentContext(
        time_phase=cfg.DEFAULT_TIME_PHASE if time_phase is None else time_phase,
        entity_density=cfg.DEFAULT_DENSITY if entity_density is None else entity_density,
        scene_id=scene_id or cfg.DEFAULT_SCENE,
        recent_player_actions=list(recent_player_actions or []),
    )


def time_phase_tag(phase: float) -> str:
    if phase < 0.25:
        return "morning"
    if phase < 0.5:
        return "day"
    if phase < 0.75:
        return "twilight"
    return "night"


def density_tag(density: float) -> str:
    if density <= 1:
        return "quiet"
    if density <= 5:
        return "moderate"
    return "busy"


def context_tags(env: EnvironmentContext) -> Tuple[str, str]:
    return time_phase_tag(env.time_phase), density_tag(env.entity_density)


def environment_match(context_tag: Optional[str], env: Optional[EnvironmentContext]) -> float:
    """Substring heuristic between a stored tag and the live environment."""
    if env is None or not context_tag:
        return cfg.CONTEXT_NEUTRAL
    tag = context_tag.lower()
    if "day" in tag and env.time_phase < 0.5:
        return cfg.CONTEXT_MATCH
    if "night" in tag and env.time_phase >= 0.5:
        return cfg.CONTEXT_MATCH
    if "busy" in tag and env.entity_density > 5:
        return cfg.CONTEXT_MATCH
    if "quiet" in tag and env.entity_density <= 2:
        return cfg.CONTEXT_MATCH
    return cfg.CONTEXT_NEUTRAL
