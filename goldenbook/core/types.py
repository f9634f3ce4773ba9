"""Global Mon type metadata: the fixed type enumeration, colours & abbreviations.

Provides:
  MON_TYPES: the ordered type enumeration (matrix order for the type chart)
  TYPE_COLORS: mapping type -> rich colour name
  TYPE_ABBREVIATIONS: mapping type -> 3-letter abbreviation (upper)
  helpers producing rich markup for the developer console.
"""
from __future__ import annotations
from typing import Dict, Tuple

MON_TYPES: Tuple[str, ...] = (
    "normal",
    "fire",
    "water",
    "plant",
    "electric",
    "earth",
    "air",
    "ice",
    "shadow",
    "light",
)

TYPE_COLORS: Dict[str, str] = {
    "normal": "grey70",
    "fire": "orange_red1",
    "water": "dodger_blue1",
    "plant": "green3",
    "electric": "gold1",
    "earth": "tan",
    "air": "light_sky_blue1",
    "ice": "pale_turquoise1",
    "shadow": "medium_purple4",
    "light": "light_goldenrod1",
}

TYPE_ABBREVIATIONS: Dict[str, str] = {
    "normal": "NRM",
    "fire": "FIR",
    "water": "WTR",
    "plant": "PLT",
    "electric": "ELE",
    "earth": "ERT",
    "air": "AIR",
    "ice": "ICE",
    "shadow": "SHD",
    "light": "LGT",
}

def is_known_type(type_name: str) -> bool:
    return type_name.lower() in TYPE_ABBREVIATIONS

def type_abbreviation(type_name: str) -> str:
    return TYPE_ABBREVIATIONS.get(type_name.lower(), type_name[:3].upper())

def type_markup(type_name: str, text: str | None = None) -> str:
    color = TYPE_COLORS.get(type_name.lower())
    label = text if text is not None else type_abbreviation(type_name)
    if not color:
        return label
    return f"[{color}]{label}[/{color}]"

def format_types(types: Tuple[str, ...]) -> str:
    return '/'.join(type_markup(t) for t in types)

__all__ = [
    'MON_TYPES','TYPE_COLORS','TYPE_ABBREVIATIONS',
    'is_known_type','type_abbreviation','type_markup','format_types'
]
