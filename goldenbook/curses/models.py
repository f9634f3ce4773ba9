"""Curse definitions and the modifier vocabulary they write into the registry."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

class Modifier:
    WILD_STAT_MULTIPLIER = "wild_stat_multiplier"
    PLAYER_OUTPUT_MULTIPLIER = "player_output_multiplier"
    CRIT_CHANCE_BONUS = "crit_chance_bonus"
    CAPTURE_RATE_MULTIPLIER = "capture_rate_multiplier"
    CAPTURE_DISABLED = "capture_disabled"

# How contributions from several sources combine per key.
MULTIPLY = "multiply"
ADD = "add"
FLAG = "flag"

COMBINE_RULES: Dict[str, str] = {
    Modifier.WILD_STAT_MULTIPLIER: MULTIPLY,
    Modifier.PLAYER_OUTPUT_MULTIPLIER: MULTIPLY,
    Modifier.CRIT_CHANCE_BONUS: ADD,
    Modifier.CAPTURE_RATE_MULTIPLIER: MULTIPLY,
    Modifier.CAPTURE_DISABLED: FLAG,
}

NEUTRAL = {MULTIPLY: 1.0, ADD: 0.0, FLAG: False}


def combine_rule(name: str) -> str:
    return COMBINE_RULES.get(name, MULTIPLY)


EffectSet = Tuple[Tuple[str, float], ...]


@dataclass(frozen=True)
class Curse:
    id: str
    name: str
    effects: EffectSet = field(default_factory=tuple)
    duration: Optional[float] = None  # None -> configured curse duration
    description: str = ""
    weight: int = 1

    def effect_map(self) -> Dict[str, float]:
        return dict(self.effects)

    def disables_capture(self) -> bool:
        return bool(self.effect_map().get(Modifier.CAPTURE_DISABLED, False))

__all__ = ["Curse", "Modifier", "EffectSet", "combine_rule", "MULTIPLY", "ADD", "FLAG", "NEUTRAL"]
