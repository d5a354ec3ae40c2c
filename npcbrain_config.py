"""
Configuration and constants for NPC Brain.
"""

BRAIN_DIR = ".npcbrain"
DB_FILE = "brain.db"

# Memory decay
SHORT_MAX_AGE_MS = 120_000
MID_MAX_AGE_MS = 600_000
MID_DECAY_RATE = 0.05
MID_WEIGHT_FLOOR = 0.05
DEFAULT_MID_DELTA = 0.1
DEFAULT_LONG_DELTA = 0.1

# Read windows per tier
SHORT_SCAN_LIMIT = 80
MID_SCAN_LIMIT = 80
LONG_SCAN_LIMIT = 50

# Correlation scoring
FREQUENCY_WEIGHT = 0.35
RECENCY_WEIGHT = 0.25
CONTEXT_WEIGHT = 0.25
SOCIAL_WEIGHT = 0.15
RECENCY_HALFLIFE_MS = 60_000
LONG_RECENCY = 0.7
CONTEXT_MATCH = 0.9
CONTEXT_NEUTRAL = 0.5
MIN_WORD_LEN = 2
EXTERNAL_WORD_LIMIT = 15
EXTERNAL_BASE_SCORE = 0.4

# Social layer
SOCIAL_MULTIPLIER = 1.3
PHRASE_OVERLAP_WINDOW = 20
PHRASE_MAX_LEN = 200
REPEATED_PATTERN_LIMIT = 30

# Proto-language
VOWELS = "aeiou"
CONSONANTS = "bcdfghjklmnpqrstvwxyz"
PROTO_MIN_LEN = 2
PROTO_MAX_LEN = 20
PROTO_DRAW = 5
PROTO_ATTEMPTS = 15
PROTO_BASE_SCORE = 0.5
DEFAULT_PROTO_DELTA = 0.05
DEFAULT_PREFIXES = ["re", "un", "de", "pre", "pro", "syn", "cy", "neo", "ex", "in"]
DEFAULT_SUFFIXES = ["ex", "or", "ion", "ive", "ent", "ant", "oid", "ite", "ine", "ar"]
DEFAULT_ROOTS = [
    "tek", "mod", "flux", "core", "vec", "nex", "volt", "synth", "data", "code",
    "run", "net", "link", "node", "grid", "cell", "byte", "bit", "logic", "path",
]
SEED_TAG = "default"

# Tone model
PLAYER_FREQ_WEIGHT = 0.4
ENV_DENSITY_WEIGHT = 0.3
SOCIAL_PRESSURE_WEIGHT = 0.3
PLAYER_FREQ_SCALE = 10
ENV_DENSITY_SCALE = 20
TONE_THRESHOLDS = [
    (0.20, "cautious"),
    (0.35, "transactional"),
    (0.60, "curious"),
    (0.85, "familiar"),
]
TONE_CEILING = "territorial"
TONE_MODIFIERS = {
    "cautious": "carefully",
    "curious": "wondering",
    "transactional": "matter-of-fact",
    "familiar": "easy",
    "territorial": "firm",
}
NEUTRAL_MODIFIER = "neutral"

# Response assembly
FALLBACK_WORDS = ["wares", "trade"]
PHRASE_WORD_LIMIT = 3
PROTO_INJECTION_CHANCE = 0.15
PROTO_CANDIDATES = 3
TERMINAL_PUNCTUATION = (".", "!", "?")

# Environment defaults
DEFAULT_TIME_PHASE = 0.5
DEFAULT_DENSITY = 0
DEFAULT_SCENE = "default"

# Cognitive loop
SPEAK_CHANCE_PER_TICK = 0.2
DECAY_SHORT_EVERY_TICKS = 3
DECAY_MID_EVERY_TICKS = 5
