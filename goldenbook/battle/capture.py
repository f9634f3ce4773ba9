"""Capture mechanics: precondition gates, probability and the roll."""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import random
from typing import Optional
from goldenbook.core.errors import check_invariant
from goldenbook.core.logging import logger
from goldenbook.curses.models import Modifier
from goldenbook.curses.registry import ModifierSnapshot
from .models import Book, CaptureTarget

class CaptureStatus(str, Enum):
    REJECTED = "rejected"
    CAPTURED = "captured"
    BROKE_FREE = "broke_free"

class RejectReason(str, Enum):
    NOT_DEFEATED = "not_defeated"
    BOOK_TOO_WEAK = "book_too_weak"
    DOES_NOT_FIT = "does_not_fit"
    BOOK_CAPTURE_NOT_PERMITTED = "book_capture_not_permitted"

@dataclass(frozen=True)
class CaptureOutcome:
    status: CaptureStatus
    reason: Optional[RejectReason] = None
    probability: Optional[float] = None  # None when never rolled

    @classmethod
    def rejected(cls, reason: RejectReason) -> "CaptureOutcome":
        return cls(CaptureStatus.REJECTED, reason=reason)

    @property
    def captured(self) -> bool:
        return self.status == CaptureStatus.CAPTURED

    @property
    def was_rolled(self) -> bool:
        return self.status != CaptureStatus.REJECTED


def check_preconditions(target: CaptureTarget, book: Book) -> Optional[RejectReason]:
    if (target.health or 0) != 0:
        return RejectReason.NOT_DEFEATED
    if book.tier < target.required_book_tier:
        return RejectReason.BOOK_TOO_WEAK
    if target.size > book.free_capacity:
        return RejectReason.DOES_NOT_FIT
    return None


def capture_probability(target: CaptureTarget, book: Book, mods: ModifierSnapshot) -> float:
    if mods.flag(Modifier.CAPTURE_DISABLED):
        return 0.0
    health_term = 1.0 - (target.health or 0) / target.max_health
    p = (target.base_capture_rate * book.capture_bonus * health_term
         * mods.multiplier(Modifier.CAPTURE_RATE_MULTIPLIER))
    return max(0.0, min(1.0, p))


def attempt_capture(target: CaptureTarget, book: Book, mods: ModifierSnapshot, rng: random.Random) -> CaptureOutcome:
    reason = check_preconditions(target, book)
    if reason is not None:
        logger.debug("CaptureRejected", target=target.id, book=book.id, reason=reason.value)
        return CaptureOutcome.rejected(reason)
    p = capture_probability(target, book, mods)
    if not check_invariant(0.0 <= p <= 1.0, "probability-range", f"capture probability {p}"):
        p = max(0.0, min(1.0, p))
    roll = rng.random()
    status = CaptureStatus.CAPTURED if roll < p else CaptureStatus.BROKE_FREE
    logger.debug("CaptureRolled", target=target.id, book=book.id, probability=round(p, 4), status=status.value)
    return CaptureOutcome(status, probability=p)


def attempt_book_capture(master: Book, other: Book) -> CaptureOutcome:
    """A Master book with book capture unlocked absorbs another book's Mons.

    Deterministic: no roll, so the outcome carries probability 1.0 on success.
    """
    if not master.can_capture_books or other is master:
        return CaptureOutcome.rejected(RejectReason.BOOK_CAPTURE_NOT_PERMITTED)
    if other.occupied > master.free_capacity:
        return CaptureOutcome.rejected(RejectReason.DOES_NOT_FIT)
    master.contents.extend(other.contents)
    moved = len(other.contents)
    other.contents = []
    logger.info("BookCaptured", master=master.id, other=other.id, mons=moved)
    return CaptureOutcome(CaptureStatus.CAPTURED, probability=1.0)

__all__ = [
    "attempt_capture", "attempt_book_capture", "capture_probability", "check_preconditions",
    "CaptureOutcome", "CaptureStatus", "RejectReason",
]
