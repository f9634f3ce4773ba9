"""Punch resolution: damage, critical hits and the defender's counter.

``resolve`` is a pure function of its inputs. It reads the combatants, the move,
a ModifierSnapshot taken by the caller and an injected ``random.Random``; it never
mutates the combatants. The caller applies ``damage`` to the defender and any
counter to the attacker.

RNG consumption is fixed so replays line up: one draw for the critical hit,
then, only if the defender survives, one draw per counter branch evaluated
(vaporize first, counter-punch second).
"""
from __future__ import annotations
import math
import random
from dataclasses import dataclass
from typing import Optional, Union
from goldenbook.core.errors import check_invariant
from goldenbook.core.logging import logger
from goldenbook.curses.models import Modifier
from goldenbook.curses.registry import ModifierSnapshot
from .models import Combatant, Move, Side
from .type_chart import effectiveness

CRIT_MULTIPLIER = 2.0

@dataclass(frozen=True)
class CounterPunch:
    damage: int

@dataclass(frozen=True)
class Vaporize:
    """The defender erased the attacking player outright."""

Counter = Union[CounterPunch, Vaporize]

@dataclass(frozen=True)
class CombatResult:
    damage: int
    was_critical: bool
    defender_defeated: bool
    counter: Optional[Counter] = None
    effectiveness: float = 1.0

def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))

def effective_attack(c: Combatant, mods: ModifierSnapshot) -> float:
    if c.side == Side.WILD:
        return c.attack * mods.multiplier(Modifier.WILD_STAT_MULTIPLIER)
    return c.attack * mods.multiplier(Modifier.PLAYER_OUTPUT_MULTIPLIER)

def effective_defense(c: Combatant, mods: ModifierSnapshot) -> float:
    if c.side == Side.WILD:
        return c.defense * mods.multiplier(Modifier.WILD_STAT_MULTIPLIER)
    return c.defense

def crit_chance(c: Combatant, mods: ModifierSnapshot) -> float:
    return max(0.0, min(1.0, c.crit_chance + mods.bonus(Modifier.CRIT_CHANCE_BONUS)))

def calculate_damage(power: float, atk: float, dfn: float, type_mult: float, crit: bool = False) -> int:
    if not check_invariant(dfn > 0, "positive-defense", f"effective defense {dfn}"):
        dfn = 1.0
    raw = power * atk / dfn * type_mult * (CRIT_MULTIPLIER if crit else 1.0)
    return max(1, round_half_up(raw))

def _counter(attacker: Combatant, defender: Combatant, mods: ModifierSnapshot, rng: random.Random) -> Optional[Counter]:
    if defender.can_vaporize and rng.random() < defender.vaporize_chance:
        return Vaporize()
    if defender.can_counter_punch and rng.random() < defender.counter_chance:
        mult = effectiveness(defender.types[0], attacker.types)
        dmg = calculate_damage(defender.counter_power, effective_attack(defender, mods),
                               effective_defense(attacker, mods), mult)
        return CounterPunch(dmg)
    return None

def resolve(attacker: Combatant, defender: Combatant, move: Move, mods: ModifierSnapshot, rng: random.Random) -> CombatResult:
    type_mult = effectiveness(move.type, defender.types)
    crit = rng.random() < crit_chance(attacker, mods)
    dmg = calculate_damage(move.base_power, effective_attack(attacker, mods),
                           effective_defense(defender, mods), type_mult, crit)
    if not check_invariant(dmg >= 1, "damage-floor", f"damage {dmg}"):
        dmg = 1
    remaining = (defender.health or 0) - dmg
    defeated = remaining <= 0
    counter: Optional[Counter] = None
    if not defeated and (defender.can_counter_punch or defender.can_vaporize):
        counter = _counter(attacker, defender, mods, rng)
    logger.debug("PunchResolved", attacker=attacker.id, defender=defender.id, damage=dmg,
                 crit=crit, type=type_mult, counter=type(counter).__name__ if counter else None)
    return CombatResult(damage=dmg, was_critical=crit, defender_defeated=defeated,
                        counter=counter, effectiveness=type_mult)

def apply_damage(target: Combatant, amount: int) -> int:
    """Subtract ``amount`` from ``target`` clamped at zero; returns new health."""
    if not check_invariant(amount >= 0, "non-negative-damage", f"{target.id} took {amount}"):
        amount = 0
    old = int(target.health or 0)
    target.health = max(0, old - int(amount))
    return target.health

__all__ = [
    "resolve", "apply_damage", "calculate_damage", "effective_attack", "effective_defense",
    "crit_chance", "round_half_up", "CombatResult", "CounterPunch", "Vaporize", "CRIT_MULTIPLIER",
]
