"""Shared fixtures for the rules tests: scripted RNG and stock combatants."""
from __future__ import annotations
from typing import Iterable, List

from goldenbook.battle.models import BookTier, CaptureTarget, Combatant, Side
from goldenbook.curses.models import Curse, Modifier
from goldenbook.curses.pool import CursePool


class ScriptedRng:
    """Stands in for random.Random: replays fixed ``random()`` values and counts draws."""

    def __init__(self, values: Iterable[float] = ()):
        self.values: List[float] = list(values)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if not self.values:
            raise AssertionError("ScriptedRng ran out of values")
        return self.values.pop(0)

    def randint(self, a: int, b: int) -> int:
        v = self.random()
        return a + int(v * (b - a + 1))


def player(**kw) -> Combatant:
    base = dict(id="player", name="Player", types=("normal",), max_health=50, attack=10, defense=4,
                side=Side.PLAYER, crit_chance=0.0)
    base.update(kw)
    return Combatant(**base)


def wild(**kw) -> Combatant:
    base = dict(id="mon", name="Mon", types=("fire",), max_health=100, attack=8, defense=5,
                side=Side.WILD, crit_chance=0.0)
    base.update(kw)
    return Combatant(**base)


def target(**kw) -> CaptureTarget:
    base = dict(id="target", name="Target", types=("water",), max_health=100, attack=5, defense=5,
                health=0, size=3, required_book_tier=BookTier.STARTER, base_capture_rate=0.3)
    base.update(kw)
    return CaptureTarget(**base)


POWERFUL = Curse("powerful_mons", "Powerful Mons", ((Modifier.WILD_STAT_MULTIPLIER, 1.5),))
WEAKENED = Curse("weakened_player", "Weakened Player", ((Modifier.PLAYER_OUTPUT_MULTIPLIER, 0.5),))
NO_CAPTURE = Curse("no_capture", "No Capture", ((Modifier.CAPTURE_DISABLED, True),))
FRENZY = Curse("wild_frenzy", "Wild Frenzy",
               ((Modifier.CRIT_CHANCE_BONUS, 0.15), (Modifier.WILD_STAT_MULTIPLIER, 1.2)), duration=4)


def pool_of(*curses: Curse) -> CursePool:
    return CursePool(list(curses))
