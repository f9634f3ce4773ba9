"""Per-world table of named modifiers contributed by curses and overrides.

Writers (the scheduler, admin overrides) go through ``apply``/``revert`` under a
lock and publish a fresh immutable ``ModifierSnapshot``. Readers call
``snapshot()`` and never block: they hold either the pre- or the post-write
snapshot, never a partially applied batch.

Every entry remembers the source that contributed it, so reverting one source
removes exactly its contributions and nothing else.
"""
from __future__ import annotations
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Tuple
from goldenbook.core.logging import logger
from .models import ADD, FLAG, MULTIPLY, NEUTRAL, combine_rule

OVERRIDE_PREFIX = "override:"

Entries = Dict[str, Dict[str, float]]


def _combine(name: str, contributions: Iterable[float]):
    rule = combine_rule(name)
    if rule == FLAG:
        return any(bool(v) for v in contributions)
    if rule == ADD:
        total = 0.0
        for v in contributions:
            total += float(v)
        return total
    product = 1.0
    for v in contributions:
        product *= float(v)
    return product


@dataclass(frozen=True)
class ModifierSnapshot:
    """Immutable view of the registry at one point in time."""
    entries: Mapping[str, Mapping[str, float]] = field(default_factory=lambda: MappingProxyType({}))
    version: int = 0

    def value(self, name: str):
        contributions = self.entries.get(name)
        if not contributions:
            return NEUTRAL[combine_rule(name)]
        return _combine(name, contributions.values())

    def multiplier(self, name: str) -> float:
        return float(self.value(name))

    def bonus(self, name: str) -> float:
        return float(self.value(name))

    def flag(self, name: str) -> bool:
        return bool(self.value(name))

    def sources(self) -> Tuple[str, ...]:
        seen: Dict[str, None] = {}
        for contributions in self.entries.values():
            for src in contributions:
                seen.setdefault(src, None)
        return tuple(seen)

    def is_empty(self) -> bool:
        return not self.entries

    def as_dict(self) -> Entries:
        return {name: dict(c) for name, c in self.entries.items()}


def _freeze(entries: Entries, version: int) -> ModifierSnapshot:
    frozen = {name: MappingProxyType(dict(c)) for name, c in entries.items()}
    return ModifierSnapshot(entries=MappingProxyType(frozen), version=version)


class ModifierRegistry:
    def __init__(self):
        self._lock = threading.Lock()
        self._snapshot = ModifierSnapshot()

    def snapshot(self) -> ModifierSnapshot:
        return self._snapshot

    def entries(self) -> Entries:
        return self._snapshot.as_dict()

    def sources(self) -> Tuple[str, ...]:
        return self._snapshot.sources()

    def contributes(self, source: str) -> bool:
        return source in self._snapshot.sources()

    def apply(self, source: str, effects: Iterable[Tuple[str, float]]) -> ModifierSnapshot:
        """Merge ``effects`` for ``source`` as one batch and publish it."""
        batch = list(effects)
        with self._lock:
            current = self._snapshot.as_dict()
            for contributions in current.values():
                if source in contributions:
                    raise ValueError(f"Source {source} already applied")
            for name, value in batch:
                if name in current and source in current[name]:
                    raise ValueError(f"Duplicate modifier {name} in batch for {source}")
                current.setdefault(name, {})[source] = value
            self._snapshot = _freeze(current, self._snapshot.version + 1)
            snap = self._snapshot
        logger.debug("ModifiersApplied", source=source, count=len(batch), version=snap.version)
        return snap

    def revert(self, source: str) -> Tuple[Tuple[str, float], ...]:
        """Remove exactly the entries ``source`` contributed; returns them."""
        with self._lock:
            current = self._snapshot.as_dict()
            removed = []
            for name in list(current):
                contributions = current[name]
                if source in contributions:
                    removed.append((name, contributions.pop(source)))
                    if not contributions:
                        del current[name]
            if not removed:
                logger.warn("RevertUnknownSource", source=source)
                return ()
            self._snapshot = _freeze(current, self._snapshot.version + 1)
            version = self._snapshot.version
        logger.debug("ModifiersReverted", source=source, count=len(removed), version=version)
        return tuple(removed)

    # --- Manual overrides (admin / test harness) ---
    def apply_override(self, name: str, value: float) -> ModifierSnapshot:
        source = OVERRIDE_PREFIX + name
        with self._lock:
            current = self._snapshot.as_dict()
            current.setdefault(name, {})[source] = value
            self._snapshot = _freeze(current, self._snapshot.version + 1)
            snap = self._snapshot
        logger.info("OverrideApplied", modifier=name, value=value, version=snap.version)
        return snap

    def clear_override(self, name: str) -> bool:
        return bool(self.revert(OVERRIDE_PREFIX + name))

__all__ = ["ModifierRegistry", "ModifierSnapshot", "OVERRIDE_PREFIX", "MULTIPLY", "ADD", "FLAG"]
