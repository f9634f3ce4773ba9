"""
Curse cycle: the timed global modifiers and the registry they write into.
"""
from .models import Curse, Modifier
from .registry import ModifierRegistry, ModifierSnapshot
from .scheduler import CurseCycleScheduler, CyclePhase, CycleState, CurseStateChangeEvent

__all__ = [
    "Curse", "Modifier", "ModifierRegistry", "ModifierSnapshot",
    "CurseCycleScheduler", "CyclePhase", "CycleState", "CurseStateChangeEvent",
]
