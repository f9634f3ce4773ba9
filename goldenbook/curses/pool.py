"""Configured curse pool: loading from JSON and weighted selection."""
from __future__ import annotations
import json
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence
from goldenbook.core.errors import ConfigLoadError
from goldenbook.core.logging import logger
from goldenbook.core.paths import CURSE_POOL
from .models import Curse, combine_rule, FLAG

@dataclass
class CursePool:
    curses: List[Curse]

    def __post_init__(self):
        if not self.curses:
            raise ValueError("Curse pool must contain at least one curse")
        ids = [c.id for c in self.curses]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate curse ids in pool: {ids}")

    def by_id(self, curse_id: str) -> Optional[Curse]:
        for c in self.curses:
            if c.id == curse_id:
                return c
        return None

    def ids(self) -> List[str]:
        return [c.id for c in self.curses]

    def draw(self, rng: random.Random) -> Curse:
        """Weighted pick; equal weights make it uniform. One RNG draw."""
        total_weight = sum(c.weight for c in self.curses)
        pick = rng.randint(1, total_weight)
        running = 0
        for c in self.curses:
            running += c.weight
            if pick <= running:
                return c
        return self.curses[-1]


def _flag_value(name: str, value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValueError(f"modifier {name} needs true/false, got {value!r}")


def curse_from_dict(data: Dict) -> Curse:
    if not isinstance(data, dict):
        raise ValueError(f"curse entry must be an object, got {data!r}")
    curse_id = data.get("id")
    if not isinstance(curse_id, str) or not curse_id:
        raise ValueError(f"curse id must be a non-empty string, got {curse_id!r}")
    effects_raw = data.get("effects", {})
    if isinstance(effects_raw, dict):
        items = list(effects_raw.items())
    else:
        items = [tuple(pair) for pair in effects_raw]
    effects = []
    for name, value in items:
        if combine_rule(name) == FLAG:
            value = _flag_value(name, value)
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"modifier {name} needs a number, got {value!r}")
        else:
            value = float(value)
        effects.append((str(name), value))
    duration = data.get("duration")
    if duration is not None and float(duration) <= 0:
        raise ValueError(f"curse {data.get('id')} duration must be positive")
    weight = int(data.get("weight", 1))
    if weight < 1:
        raise ValueError(f"curse {data.get('id')} weight must be >= 1")
    return Curse(
        id=curse_id,
        name=data.get("name") or curse_id.replace("_", " ").title(),
        effects=tuple(effects),
        duration=float(duration) if duration is not None else None,
        description=data.get("description", ""),
        weight=weight,
    )


def load_curse_pool(path: Path | str | None = None, *, only: Sequence[str] | None = None) -> CursePool:
    """Load the pool from JSON (defaults to the packaged curses file).

    ``only`` restricts the pool to the listed curse ids.
    """
    path = Path(path) if path else CURSE_POOL
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        curses = [curse_from_dict(entry) for entry in data["curses"]]
        if only:
            wanted = set(only)
            curses = [c for c in curses if c.id in wanted]
        pool = CursePool(curses)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        raise ConfigLoadError(str(path), str(e)) from e
    logger.debug("CursePoolLoaded", path=str(path), curses=len(pool.curses))
    return pool

__all__ = ["CursePool", "curse_from_dict", "load_curse_pool"]
