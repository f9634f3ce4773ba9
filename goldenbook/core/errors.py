"""
Error classes and the invariant guard shared by the resolvers and the scheduler.

Invariant breaches are programming bugs. In strict mode (debug builds, tests)
they raise; otherwise they are logged and the caller clamps the value.
"""
from __future__ import annotations
from typing import Any
from goldenbook.core.logging import logger

class GoldenBookError(Exception):
    """Base for internal errors."""

class ConfigLoadError(GoldenBookError):
    def __init__(self, path: str, detail: str):
        super().__init__(f"Failed loading '{path}': {detail}")
        self.path = path
        self.detail = detail

class InvariantViolation(GoldenBookError):
    def __init__(self, name: str, detail: str):
        super().__init__(f"Invariant '{name}' violated: {detail}")
        self.name = name
        self.detail = detail

_strict = False

def set_strict(enabled: bool):
    global _strict
    _strict = bool(enabled)

def is_strict() -> bool:
    return _strict

def check_invariant(ok: bool, name: str, detail: str, **extra: Any) -> bool:
    """Return ``ok``; on failure raise in strict mode or log at ERROR.

    Callers use the return value to decide whether to clamp.
    """
    if ok:
        return True
    if _strict:
        raise InvariantViolation(name, detail)
    logger.error("InvariantViolated", invariant=name, detail=detail, **extra)
    return False
