"""Timed curse cycle: Rest -> Warning -> Active -> Rest, forever.

The scheduler runs on a logical clock. Callers feed it ``tick(delta)`` from a
single timeline (one clock per world); it is the only writer of the world's
ModifierRegistry. Natural expiry and manual overrides share the same
``_activate``/``_deactivate`` transitions so no modifier can be stranded.

Timing drift: remaining time is clamped at zero. When a phase runs out the
transition happens inside that tick and any surplus elapsed time is dropped, so
a late tick advances at most one phase.
"""
from __future__ import annotations
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional
from goldenbook.core.errors import GoldenBookError, check_invariant
from goldenbook.core.logging import logger
from .models import Curse
from .pool import CursePool
from .registry import ModifierRegistry

DEFAULT_WARNING_DURATION = 2.0

class CyclePhase(str, Enum):
    REST = "rest"
    WARNING = "warning"
    ACTIVE = "active"

@dataclass
class CycleState:
    phase: CyclePhase
    remaining: float
    curse: Optional[Curse] = None

@dataclass(frozen=True)
class CurseStateChangeEvent:
    phase: CyclePhase
    curse: Optional[Curse]
    remaining: float

Listener = Callable[[CurseStateChangeEvent], None]

class SchedulerShutdownError(GoldenBookError):
    pass

class CurseCycleScheduler:
    def __init__(self, registry: ModifierRegistry, pool: CursePool, rng: random.Random, *,
                 rest_duration: float, curse_duration: float,
                 warning_duration: float = DEFAULT_WARNING_DURATION):
        for label, value in (("rest_duration", rest_duration), ("curse_duration", curse_duration),
                             ("warning_duration", warning_duration)):
            if value <= 0:
                raise ValueError(f"{label} must be positive, got {value}")
        self.registry = registry
        self.pool = pool
        self.rng = rng
        self.rest_duration = float(rest_duration)
        self.curse_duration = float(curse_duration)
        self.warning_duration = float(warning_duration)
        self.state = CycleState(CyclePhase.REST, self.rest_duration)
        self.elapsed = 0.0
        self.cycles_completed = 0
        self._terminated = False
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------
    def subscribe(self, fn: Listener):
        self._listeners.append(fn)

    def unsubscribe(self, fn: Listener):
        if fn in self._listeners:
            self._listeners.remove(fn)

    @property
    def phase(self) -> CyclePhase:
        return self.state.phase

    @property
    def active_curse(self) -> Optional[Curse]:
        return self.state.curse if self.state.phase == CyclePhase.ACTIVE else None

    @property
    def terminated(self) -> bool:
        return self._terminated

    def _emit(self):
        event = CurseStateChangeEvent(self.state.phase, self.state.curse, self.state.remaining)
        for fn in list(self._listeners):
            fn(event)

    def _enter(self, phase: CyclePhase, remaining: float, curse: Optional[Curse]):
        self.state = CycleState(phase, remaining, curse)
        logger.info("CursePhase", phase=phase.value, curse=curse.id if curse else None, remaining=remaining)
        self._emit()

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------
    def tick(self, delta: float) -> CycleState:
        if self._terminated:
            logger.warn("TickAfterShutdown", delta=delta)
            return self.state
        if delta < 0:
            logger.warn("NegativeTickIgnored", delta=delta)
            delta = 0.0
        self.elapsed += delta
        self.state.remaining = max(0.0, self.state.remaining - delta)
        if self.state.remaining == 0.0:
            self._expire()
        return self.state

    def run_for(self, total: float, step: float = 1.0) -> List[CycleState]:
        """Drive the clock in fixed steps; returns the state after each tick."""
        if step <= 0:
            raise ValueError("step must be positive")
        states: List[CycleState] = []
        t = 0.0
        while t < total and not self._terminated:
            delta = min(step, total - t)
            s = self.tick(delta)
            states.append(CycleState(s.phase, s.remaining, s.curse))
            t += delta
        return states

    def _expire(self):
        phase = self.state.phase
        if phase == CyclePhase.REST:
            curse = self.pool.draw(self.rng)
            self._enter(CyclePhase.WARNING, self.warning_duration, curse)
        elif phase == CyclePhase.WARNING:
            assert self.state.curse is not None
            self._activate(self.state.curse)
        else:
            self._deactivate()

    # ------------------------------------------------------------------
    # Transitions (shared by natural expiry and manual override)
    # ------------------------------------------------------------------
    def _activate(self, curse: Curse):
        self.registry.apply(curse.id, curse.effects)
        duration = curse.duration if curse.duration is not None else self.curse_duration
        self._enter(CyclePhase.ACTIVE, duration, curse)

    def _deactivate(self):
        curse = self.state.curse
        assert curse is not None and self.state.phase == CyclePhase.ACTIVE
        self.registry.revert(curse.id)
        check_invariant(not self.registry.contributes(curse.id), "registry-reverted",
                        f"entries of {curse.id} remain after revert", curse=curse.id)
        self.cycles_completed += 1
        self._enter(CyclePhase.REST, self.rest_duration, None)

    # ------------------------------------------------------------------
    # Manual control (admin / test harness)
    # ------------------------------------------------------------------
    def force_curse(self, curse: Curse | str | None = None) -> Curse:
        """Activate ``curse`` now (drawn from the pool when None).

        An already active curse is ended first through the normal revert.
        """
        self._require_running()
        if isinstance(curse, str):
            found = self.pool.by_id(curse)
            if found is None:
                raise KeyError(f"Unknown curse {curse}")
            curse = found
        if self.state.phase == CyclePhase.ACTIVE:
            self._deactivate()
        if curse is None:
            curse = self.state.curse if self.state.phase == CyclePhase.WARNING else self.pool.draw(self.rng)
        assert curse is not None
        self._activate(curse)
        return curse

    def end_curse(self) -> bool:
        """Cancel the active curse early; False if none was active."""
        self._require_running()
        if self.state.phase != CyclePhase.ACTIVE:
            return False
        self._deactivate()
        return True

    def shutdown(self):
        if self._terminated:
            return
        if self.state.phase == CyclePhase.ACTIVE:
            self._deactivate()
        self._terminated = True
        logger.info("CurseSchedulerShutdown", cycles=self.cycles_completed)

    def _require_running(self):
        if self._terminated:
            raise SchedulerShutdownError("Curse scheduler has been shut down")

__all__ = [
    "CurseCycleScheduler", "CyclePhase", "CycleState", "CurseStateChangeEvent",
    "SchedulerShutdownError", "DEFAULT_WARNING_DURATION",
]
