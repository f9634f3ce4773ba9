"""
Structured console logging for the rules core.

Every line is ``<utc time> [LEVEL] Event key=value ...`` coloured per level
through colorama. ``bind`` returns a view of the logger that prefixes fixed
context (for example the world id) to every line it writes.
"""
from __future__ import annotations
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Literal, TextIO, Optional

from colorama import Fore, Style, init as colorama_init

colorama_init()

Level = Literal["DEBUG","INFO","WARN","ERROR"]

LEVELS: Dict[str, int] = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}
LEVEL_COLORS = {
    "DEBUG": Fore.CYAN,
    "INFO": Fore.GREEN,
    "WARN": Fore.YELLOW,
    "ERROR": Fore.RED + Style.BRIGHT,
}

def render_value(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)

def render_fields(fields: Dict[str, Any]) -> str:
    return " ".join(f"{k}={render_value(v)}" for k, v in fields.items())


class Logger:
    def __init__(self, level: Level = "INFO", stream: Optional[TextIO] = None):
        self.threshold = LEVELS[level]
        self.stream = stream

    def set_level(self, level: Level):
        self.threshold = LEVELS.get(level, LEVELS["INFO"])

    def set_stream(self, stream: Optional[TextIO]):
        """Redirect output; None writes to the current ``sys.stdout``."""
        self.stream = stream

    def enabled(self, lvl: Level) -> bool:
        return LEVELS[lvl] >= self.threshold

    def bind(self, **context: Any) -> "BoundLogger":
        return BoundLogger(self, context)

    def log(self, lvl: Level, event: str, **fields: Any):
        if not self.enabled(lvl):
            return
        ts = datetime.now(timezone.utc).isoformat(timespec="seconds")
        line = f"{ts} [{lvl}] {event}"
        if fields:
            line += " " + render_fields(fields)
        out = self.stream or sys.stdout
        out.write(f"{LEVEL_COLORS[lvl]}{line}{Style.RESET_ALL}\n")

    def debug(self, event: str, **kw): self.log("DEBUG", event, **kw)
    def info(self, event: str, **kw): self.log("INFO", event, **kw)
    def warn(self, event: str, **kw): self.log("WARN", event, **kw)
    def error(self, event: str, **kw): self.log("ERROR", event, **kw)


class BoundLogger:
    """Same interface as Logger; context fields come first on each line."""

    def __init__(self, parent: Logger, context: Dict[str, Any]):
        self.parent = parent
        self.context = dict(context)

    def bind(self, **context: Any) -> "BoundLogger":
        return BoundLogger(self.parent, {**self.context, **context})

    def log(self, lvl: Level, event: str, **fields: Any):
        self.parent.log(lvl, event, **{**self.context, **fields})

    def debug(self, event: str, **kw): self.log("DEBUG", event, **kw)
    def info(self, event: str, **kw): self.log("INFO", event, **kw)
    def warn(self, event: str, **kw): self.log("WARN", event, **kw)
    def error(self, event: str, **kw): self.log("ERROR", event, **kw)


logger = Logger("INFO")
