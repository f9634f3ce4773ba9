from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List, Optional, Tuple
from goldenbook.core.types import is_known_type

DEFAULT_CRIT_CHANCE = 1 / 16
PUNCH_BASE_POWER = 10.0

class Side(str, Enum):
    PLAYER = "player"
    WILD = "wild"

class BookTier(IntEnum):
    STARTER = 1
    STANDARD = 2
    ADVANCED = 3
    MASTER = 4

    @classmethod
    def parse(cls, value: "BookTier | str | int") -> "BookTier":
        if isinstance(value, BookTier):
            return value
        if isinstance(value, str):
            return cls[value.strip().upper()]
        return cls(int(value))

DEFAULT_BOOK_BONUS: Dict[BookTier, float] = {
    BookTier.STARTER: 1.0,
    BookTier.STANDARD: 1.25,
    BookTier.ADVANCED: 1.5,
    BookTier.MASTER: 2.0,
}

DEFAULT_BOOK_CAPACITY: Dict[BookTier, int] = {
    BookTier.STARTER: 10,
    BookTier.STANDARD: 25,
    BookTier.ADVANCED: 50,
    BookTier.MASTER: 100,
}

@dataclass
class Move:
    name: str
    type: str
    base_power: float

@dataclass
class Combatant:
    id: str
    name: str
    types: Tuple[str, ...]
    max_health: int
    attack: float
    defense: float
    speed: float = 0
    health: Optional[int] = None  # defaults to max_health
    side: Side = Side.WILD
    crit_chance: float = DEFAULT_CRIT_CHANCE
    can_counter_punch: bool = False
    can_vaporize: bool = False
    counter_chance: float = 0.0
    vaporize_chance: float = 0.0
    counter_power: float = 0.0

    def __post_init__(self):
        self.types = tuple(t.lower() for t in self.types)
        if not 1 <= len(self.types) <= 2:
            raise ValueError(f"{self.id}: a combatant has one or two types, got {self.types}")
        unknown = [t for t in self.types if not is_known_type(t)]
        if unknown:
            raise ValueError(f"{self.id}: unknown types {unknown}")
        if self.max_health <= 0:
            raise ValueError(f"{self.id}: max_health must be positive")
        if self.health is None:
            self.health = self.max_health
        self.health = max(0, min(int(self.health), self.max_health))

    def is_defeated(self) -> bool:
        return (self.health or 0) <= 0

    @property
    def health_ratio(self) -> float:
        return (self.health or 0) / self.max_health

@dataclass
class CaptureTarget(Combatant):
    size: int = 1
    required_book_tier: BookTier = BookTier.STARTER
    base_capture_rate: float = 0.5

    def __post_init__(self):
        super().__post_init__()
        self.required_book_tier = BookTier.parse(self.required_book_tier)
        if self.size <= 0:
            raise ValueError(f"{self.id}: size must be positive")
        if not 0.0 <= self.base_capture_rate <= 1.0:
            raise ValueError(f"{self.id}: base_capture_rate must be within [0, 1]")

@dataclass
class StoredMon:
    id: str
    name: str
    size: int

@dataclass
class Book:
    """Golden Book: capture-and-storage container.

    ``can_capture_books`` only holds for a Master tier book whose owner has
    unlocked it; there is no separate Master book type.
    """
    id: str
    tier: BookTier
    max_capacity: Optional[int] = None
    capture_bonus: Optional[float] = None
    owner: Optional[str] = None
    book_capture_unlocked: bool = False
    contents: List[StoredMon] = field(default_factory=list)

    def __post_init__(self):
        self.tier = BookTier.parse(self.tier)
        if self.max_capacity is None:
            self.max_capacity = DEFAULT_BOOK_CAPACITY[self.tier]
        if self.capture_bonus is None:
            self.capture_bonus = DEFAULT_BOOK_BONUS[self.tier]

    @property
    def occupied(self) -> int:
        return sum(m.size for m in self.contents)

    @property
    def free_capacity(self) -> int:
        return (self.max_capacity or 0) - self.occupied

    @property
    def can_capture_books(self) -> bool:
        return self.tier == BookTier.MASTER and self.owner is not None and self.book_capture_unlocked

    def store(self, target: CaptureTarget) -> StoredMon:
        if target.size > self.free_capacity:
            raise ValueError(f"{target.id} does not fit in book {self.id}")
        mon = StoredMon(id=target.id, name=target.name, size=target.size)
        self.contents.append(mon)
        return mon

def punch_move(force: float, type_name: str = "normal") -> Move:
    """Turn a punch gesture's normalized force (0..1) into a move.

    Force is clamped; a feather-light tap still carries half the base power.
    """
    f = max(0.0, min(1.0, float(force)))
    return Move(name="punch", type=type_name, base_power=PUNCH_BASE_POWER * (0.5 + f))

__all__ = [
    "Side", "BookTier", "Move", "Combatant", "CaptureTarget", "StoredMon", "Book",
    "punch_move", "DEFAULT_BOOK_BONUS", "DEFAULT_BOOK_CAPACITY", "DEFAULT_CRIT_CHANCE",
]
