"""One shared game world: its clock, curse cycle and player-action handling.

Each world owns an independent ModifierRegistry, CurseCycleScheduler and RNG;
nothing is shared between worlds. Player actions are resolved against a registry
snapshot taken at the start of the action, then the results are applied here
(health changes, book storage) before being handed to listeners.
"""
from __future__ import annotations
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Union
from goldenbook.battle.capture import CaptureOutcome, attempt_book_capture, attempt_capture
from goldenbook.battle.combat import CombatResult, CounterPunch, Vaporize, apply_damage, resolve
from goldenbook.battle.models import Book, BookTier, CaptureTarget, Combatant, punch_move
from goldenbook.core.logging import logger
from goldenbook.curses.pool import CursePool, load_curse_pool
from goldenbook.curses.registry import ModifierRegistry
from goldenbook.curses.scheduler import CurseCycleScheduler, CurseStateChangeEvent, CycleState
from goldenbook.system.settings import Settings

@dataclass
class PunchAction:
    attacker: Combatant
    defender: Combatant
    force: float = 1.0
    direction: tuple[float, float] = (0.0, 0.0)  # screen-space swipe, for animation only

@dataclass
class CaptureAction:
    target: CaptureTarget
    book: Book

@dataclass
class BookCaptureAction:
    book: Book
    other: Book

PlayerAction = Union[PunchAction, CaptureAction, BookCaptureAction]
Outcome = Union[CombatResult, CaptureOutcome]

@dataclass
class ActionRecord:
    action: PlayerAction
    outcome: Outcome
    curse: Optional[str] = None
    log: List[str] = field(default_factory=list)

class GameWorld:
    def __init__(self, settings: Settings, rng: Optional[random.Random] = None,
                 pool: Optional[CursePool] = None, world_id: str = "world"):
        self.settings = settings
        self.world_id = world_id
        self.log = logger.bind(world=world_id)
        self.rng = rng or random.Random(settings.data.rng_seed)
        self.registry = ModifierRegistry()
        self.pool = pool or load_curse_pool(settings.data.curse_pool_path,
                                            only=settings.data.enabled_curses or None)
        # The scheduler gets its own stream so curse draws don't shift combat rolls.
        self.scheduler = CurseCycleScheduler(
            self.registry, self.pool, random.Random(self.rng.getrandbits(64)),
            rest_duration=settings.data.rest_duration,
            curse_duration=settings.data.curse_duration,
            warning_duration=settings.data.warning_duration,
        )
        self.history: List[ActionRecord] = []
        self._result_listeners: List[Callable[[ActionRecord], None]] = []

    # --- Clock / curse cycle ---
    def tick(self, delta: float) -> CycleState:
        return self.scheduler.tick(delta)

    def on_curse_change(self, fn: Callable[[CurseStateChangeEvent], None]):
        self.scheduler.subscribe(fn)

    def on_result(self, fn: Callable[[ActionRecord], None]):
        self._result_listeners.append(fn)

    def close(self):
        self.scheduler.shutdown()

    # --- Books ---
    def new_book(self, book_id: str, tier: BookTier | str, owner: Optional[str] = None, **kw) -> Book:
        tier = BookTier.parse(tier)
        bonus = self.settings.data.book_capture_bonus.get(tier.name)
        if bonus is not None and "capture_bonus" not in kw:
            kw["capture_bonus"] = bonus
        return Book(id=book_id, tier=tier, owner=owner, **kw)

    # --- Player actions ---
    def handle(self, action: PlayerAction) -> ActionRecord:
        if isinstance(action, PunchAction):
            record = self._punch(action)
        elif isinstance(action, CaptureAction):
            record = self._capture(action)
        elif isinstance(action, BookCaptureAction):
            record = ActionRecord(action, attempt_book_capture(action.book, action.other))
        else:
            raise TypeError(f"Unsupported action {type(action).__name__}")
        self.history.append(record)
        for fn in self._result_listeners:
            fn(record)
        return record

    def _current_curse_id(self) -> Optional[str]:
        curse = self.scheduler.active_curse
        return curse.id if curse else None

    def _punch(self, action: PunchAction) -> ActionRecord:
        snap = self.registry.snapshot()
        attacker, defender = action.attacker, action.defender
        move = punch_move(action.force, attacker.types[0])
        result = resolve(attacker, defender, move, snap, self.rng)
        record = ActionRecord(action, result, curse=self._current_curse_id())
        apply_damage(defender, result.damage)
        crit_txt = " Critical hit!" if result.was_critical else ""
        record.log.append(f"{attacker.name} punched {defender.name} for {result.damage}.{crit_txt}")
        if result.defender_defeated:
            record.log.append(f"{defender.name} was defeated!")
        if isinstance(result.counter, Vaporize):
            apply_damage(attacker, attacker.health or 0)
            record.log.append(f"{defender.name} vaporized {attacker.name}!")
        elif isinstance(result.counter, CounterPunch):
            apply_damage(attacker, result.counter.damage)
            record.log.append(f"{defender.name} countered for {result.counter.damage}!")
        self.log.info("Punch", attacker=attacker.id, defender=defender.id, damage=result.damage,
                      defender_hp=defender.health, attacker_hp=attacker.health)
        return record

    def _capture(self, action: CaptureAction) -> ActionRecord:
        snap = self.registry.snapshot()
        outcome = attempt_capture(action.target, action.book, snap, self.rng)
        record = ActionRecord(action, outcome, curse=self._current_curse_id())
        if outcome.captured:
            action.book.store(action.target)
            record.log.append(f"{action.target.name} was sealed into the book!")
        elif outcome.was_rolled:
            record.log.append(f"{action.target.name} broke free!")
        else:
            record.log.append(f"Capture not possible: {outcome.reason.value}")
        self.log.info("Capture", target=action.target.id, book=action.book.id, status=outcome.status,
                      probability=outcome.probability)
        return record

__all__ = ["GameWorld", "PunchAction", "CaptureAction", "BookCaptureAction", "ActionRecord", "PlayerAction"]
