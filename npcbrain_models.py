"""
Data model for NPC Brain rows and the ephemeral values passed between layers.
"""
import sqlite3
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import npcbrain_config as cfg
from npcbrain_utils import clamp01, from_json


class MemoryTier(str, Enum):
    SHORT = "short"
    MID = "mid"
    LONG = "long"


class ClusterSource(str, Enum):
    SHORT = "short"
    MID = "mid"
    LONG = "long"
    EXTERNAL = "external"


class ToneCategory(str, Enum):
    CAUTIOUS = "cautious"
    CURIOUS = "curious"
    TRANSACTIONAL = "transactional"
    FAMILIAR = "familiar"
    TERRITORIAL = "territorial"


@dataclass
class ShortMemoryRow:
    id: int
    timestamp: int
    owner_id: str
    entity_seen: Optional[str] = None
    phrase_heard: Optional[str] = None
    action_observed: Optional[str] = None
    decay_score: float = 1.0
    scene_id: Optional[str] = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "ShortMemoryRow":
        return cls(
            id=row["id"],
            timestamp=row["timestamp"],
            owner_id=row["owner_id"],
            entity_seen=row["entity_seen"],
            phrase_heard=row["phrase_heard"],
            action_observed=row["action_observed"],
            decay_score=row["decay_score"] if row["decay_score"] is not None else 1.0,
            scene_id=row["scene_id"],
        )


@dataclass
class MidMemoryRow:
    id: int
    owner_id: str
    entity: str
    correlation_weight: float
    last_seen: int
    context_tag: Optional[str] = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "MidMemoryRow":
        return cls(
            id=row["id"],
            owner_id=row["owner_id"],
            entity=row["entity"],
            correlation_weight=clamp01(row["correlation_weight"]),
            last_seen=row["last_seen"],
            context_tag=row["context_tag"],
        )


@dataclass
class LongMemoryRow:
    id: int
    owner_id: str
    concept: str
    association_network: Any = None
    reinforcement_score: float = 0.0

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "LongMemoryRow":
        return cls(
            id=row["id"],
            owner_id=row["owner_id"],
            concept=row["concept"],
            association_network=from_json(row["association_network"]),
            reinforcement_score=clamp01(row["reinforcement_score"]),
        )


@dataclass
class ProtoWord:
    word: str
    root: str
    prefix: Optional[str] = None
    suffix: Optional[str] = None
    semantic_tag: Optional[str] = None
    reinforcement_score: float = 0.5
    created_by: Optional[str] = None
    first_created: Optional[int] = None
    last_used: Optional[int] = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "ProtoWord":
        return cls(
            word=row["word"],
            root=row["root"],
            prefix=row["prefix"],
            suffix=row["suffix"],
            semantic_tag=row["semantic_tag"],
            reinforcement_score=clamp01(row["reinforcement_score"]),
            created_by=row["created_by"],
            first_created=row["first_created"],
            last_used=row["last_used"],
        )


@dataclass
class CorrelationCluster:
    words: List[str]
    score: float
    source: ClusterSource

    @property
    def key(self) -> str:
        return "_".join(self.words)


@dataclass
class EnvironmentContext:
    time_phase: float = cfg.DEFAULT_TIME_PHASE
    entity_density: float = cfg.DEFAULT_DENSITY
    scene_id: str = cfg.DEFAULT_SCENE
    recent_player_actions: List[str] = field(default_factory=list)


@dataclass
class ToneBias:
    bias: float
    breakdown: Dict[str, float] = field(default_factory=dict)


@dataclass
class PerceptionPayload:
    owner_id: str
    action_observed: Optional[str] = None
    entity_seen: Optional[str] = None
    phrase_heard: Optional[str] = None
    scene_id: Optional[str] = None
    timestamp: Optional[int] = None


@dataclass
class Response:
    text: str
    tone: ToneCategory
    bias: ToneBias
    social_overlap: float
    words: List[str] = field(default_factory=list)
    proto_word: Optional[str] = None
