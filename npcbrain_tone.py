"""
Tone model: player familiarity, crowding and social pressure folded into one
bias, then bucketed into a tone category.
"""
import npcbrain_config as cfg
from npcbrain_models import ToneBias, ToneCategory
from npcbrain_utils import clamp01


def compute_bias(player_frequency: float = 0, environment_density: float = 0, social_pressure: float = 0) -> ToneBias:
    player = clamp01(player_frequency / cfg.PLAYER_FREQ_SCALE) * cfg.PLAYER_FREQ_WEIGHT
    env = clamp01(environment_density / cfg.ENV_DENSITY_SCALE) * cfg.ENV_DENSITY_WEIGHT
    social = clamp01(social_pressure) * cfg.SOCIAL_PRESSURE_WEIGHT
    return ToneBias(
        bias=clamp01(player + env + social),
        breakdown={"player": player, "env": env, "social": social},
    )


def select_tone(bias: float) -> ToneCategory:
    # strict less-than: a boundary value lands in the next bucket
    for upper, tone in cfg.TONE_THRESHOLDS:
        if bias < upper:
            return ToneCategory(tone)
    return ToneCategory(cfg.TONE_CEILING)


def tone_modifier(tone: ToneCategory) -> str:
    key = tone.value if isinstance(tone, ToneCategory) else str(tone)
    return cfg.TONE_MODIFIERS.get(key, cfg.NEUTRAL_MODIFIER)
