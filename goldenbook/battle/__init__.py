"""
Battle rules package.
Modules:
- models.py (Combatant, CaptureTarget, Move, Book)
- type_chart.py (attack/defense type multipliers)
- combat.py (punch resolution, crits, counters)
- capture.py (capture preconditions and probability)
"""
from .combat import resolve, CombatResult, CounterPunch, Vaporize
from .capture import attempt_capture, CaptureOutcome, CaptureStatus, RejectReason
__all__ = [
    "resolve", "CombatResult", "CounterPunch", "Vaporize",
    "attempt_capture", "CaptureOutcome", "CaptureStatus", "RejectReason",
]
