"""
Shared utility helpers.
"""
import json
import time
from typing import Any, List, Optional

import npcbrain_config as cfg


def now_ms() -> int:
    return int(time.time() * 1000)


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def normalize_key(value: Optional[str]) -> str:
    if not value:
        return ""
    return value.strip().lower()


def split_words(text: Optional[str], min_len: int = cfg.MIN_WORD_LEN) -> List[str]:
    if not text:
        return []
    return [w for w in text.lower().split() if len(w) >= min_len]


def truncate(text: str, limit: int) -> str:
    return text[:limit]


def to_json(data: Any) -> Optional[str]:
    if data is None:
        return None
    return json.dumps(data, ensure_ascii=True)


def from_json(raw: Optional[str]) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def normalize_ids(ids: Optional[str]) -> List[str]:
    if not ids:
        return []
    seen = []
    for i in ids.split(","):
        val = i.strip()
        if not val:
            continue
        if val not in seen:
            seen.append(val)
    return seen
