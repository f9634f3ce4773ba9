"""Attack/defense type multipliers.

The chart is a full square matrix in ``MON_TYPES`` order: row = attacking
type, column = defending type. Dual-typed defenders multiply both lookups.
Unknown types are a caller precondition violation (KeyError).
"""
from __future__ import annotations
from typing import Dict, Sequence, Tuple
from goldenbook.core.types import MON_TYPES

_MATRIX: Tuple[Tuple[float, ...], ...] = (
    #  nrm  fir  wtr  plt  ele  ert  air  ice  shd  lgt
    (1.0, 1.0, 1.0, 1.0, 1.0, 0.5, 1.0, 1.0, 0.0, 1.0),  # normal
    (1.0, 0.5, 0.5, 2.0, 1.0, 0.5, 1.0, 2.0, 1.0, 1.0),  # fire
    (1.0, 2.0, 0.5, 0.5, 1.0, 2.0, 1.0, 1.0, 1.0, 1.0),  # water
    (1.0, 0.5, 2.0, 0.5, 1.0, 2.0, 0.5, 1.0, 1.0, 1.0),  # plant
    (1.0, 1.0, 2.0, 0.5, 0.5, 0.0, 2.0, 1.0, 1.0, 1.0),  # electric
    (1.0, 2.0, 1.0, 0.5, 2.0, 1.0, 0.0, 1.0, 1.0, 1.0),  # earth
    (1.0, 1.0, 1.0, 2.0, 0.5, 1.0, 1.0, 0.5, 1.0, 1.0),  # air
    (1.0, 0.5, 0.5, 2.0, 1.0, 2.0, 2.0, 0.5, 1.0, 1.0),  # ice
    (0.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 0.5, 2.0),  # shadow
    (1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 2.0, 0.5),  # light
)

_INDEX: Dict[str, int] = {t: i for i, t in enumerate(MON_TYPES)}

assert len(_MATRIX) == len(MON_TYPES) and all(len(row) == len(MON_TYPES) for row in _MATRIX)


def single_effectiveness(attack_type: str, defend_type: str) -> float:
    return _MATRIX[_INDEX[attack_type.lower()]][_INDEX[defend_type.lower()]]


def effectiveness(attack_type: str, defender_types: Sequence[str]) -> float:
    mult = 1.0
    for t in defender_types:
        mult *= single_effectiveness(attack_type, t)
    return mult


def matchup_label(multiplier: float) -> str:
    if multiplier == 0:
        return "no effect"
    if multiplier > 1:
        return "super effective"
    if multiplier < 1:
        return "not very effective"
    return "effective"

__all__ = ["effectiveness", "single_effectiveness", "matchup_label"]
