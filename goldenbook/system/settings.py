from __future__ import annotations
import json, os
from dataclasses import dataclass, asdict, field, fields
from pathlib import Path
from typing import Callable, Dict, List, Optional
from goldenbook.core.errors import set_strict
from goldenbook.core.logging import logger

SETTINGS_FILENAME = ".goldenbook_settings.json"
SEED_ENV = "GOLDENBOOK_RNG_SEED"

@dataclass
class SettingsData:
    rest_duration: float = 30.0      # seconds of calm between curses
    warning_duration: float = 2.0    # pre-activation notice
    curse_duration: float = 20.0     # default active time; a curse may override
    log_level: str = "INFO"          # DEBUG / INFO / WARN / ERROR
    strict_invariants: bool = False  # raise on invariant breaches instead of log+clamp
    rng_seed: Optional[int] = None
    curse_pool_path: Optional[str] = None  # None -> packaged curses.json
    enabled_curses: List[str] = field(default_factory=list)  # empty -> whole pool
    book_capture_bonus: Dict[str, float] = field(default_factory=dict)  # tier name -> bonus

    def normalize(self):
        defaults = SettingsData()
        for name in ("rest_duration", "warning_duration", "curse_duration"):
            try:
                value = float(getattr(self, name))
            except (TypeError, ValueError):
                value = -1.0
            if value <= 0:
                logger.warn("SettingInvalidUsingDefault", setting=name, value=getattr(self, name))
                value = getattr(defaults, name)
            setattr(self, name, value)
        if not isinstance(self.log_level, str) or self.log_level not in {"DEBUG","INFO","WARN","ERROR"}:
            self.log_level = "INFO"
        if not isinstance(self.enabled_curses, list) or not all(isinstance(c, str) for c in self.enabled_curses):
            logger.warn("SettingInvalidUsingDefault", setting="enabled_curses", value=self.enabled_curses)
            self.enabled_curses = []
        if self.curse_pool_path is not None and not isinstance(self.curse_pool_path, str):
            self.curse_pool_path = None
        if not isinstance(self.book_capture_bonus, dict):
            logger.warn("SettingInvalidUsingDefault", setting="book_capture_bonus", value=self.book_capture_bonus)
            self.book_capture_bonus = {}
        self.strict_invariants = bool(self.strict_invariants)
        if self.rng_seed is not None:
            try:
                self.rng_seed = int(self.rng_seed)
            except (TypeError, ValueError):
                self.rng_seed = None
        self.book_capture_bonus = {str(k).upper(): float(v) for k, v in self.book_capture_bonus.items()
                                   if isinstance(v, (int, float)) and not isinstance(v, bool) and v > 0}

class Settings:
    def __init__(self, data: SettingsData, path: Path):
        self.data = data
        self.path = path
        self._listeners: List[Callable[[SettingsData], None]] = []

    @classmethod
    def defaults(cls, path: Path | None = None) -> "Settings":
        data = SettingsData()
        data.normalize()
        return cls(data, path or cls._resolve_path())

    @classmethod
    def _resolve_path(cls) -> Path:
        home = Path(os.path.expanduser("~"))
        if home.is_dir() and os.access(home, os.W_OK):
            return home / SETTINGS_FILENAME
        return Path.cwd() / SETTINGS_FILENAME

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        path = path or cls._resolve_path()
        data = SettingsData()
        seed = os.environ.get(SEED_ENV)
        try:
            if path.exists():
                raw = json.loads(path.read_text(encoding="utf-8"))
                # Backfill missing fields (migration safe)
                field_names = {f.name for f in fields(SettingsData)}
                data = SettingsData(**{k: v for k, v in raw.items() if k in field_names})
                logger.debug("SettingsLoaded", path=str(path))
            if seed:
                data.rng_seed = seed  # normalized below
            data.normalize()
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warn("SettingsParseFailedUsingDefaults", path=str(path), error=str(e))
            data = SettingsData(rng_seed=seed or None)
            data.normalize()
        return cls(data, path)

    def save(self):
        try:
            self.path.write_text(json.dumps(asdict(self.data), indent=2), encoding="utf-8")
            logger.debug("SettingsSaved", path=str(self.path))
        except OSError as e:
            logger.error("SettingsSaveFailed", path=str(self.path), error=str(e))

    def apply_runtime(self):
        """Push log level and invariant strictness into the process."""
        logger.set_level(self.data.log_level)  # type: ignore[arg-type]
        set_strict(self.data.strict_invariants)

    def on_change(self, fn: Callable[[SettingsData], None]):
        self._listeners.append(fn)

    def update(self, **changes):
        for k, v in changes.items():
            if not hasattr(self.data, k):
                raise AttributeError(f"Unknown setting {k}")
            setattr(self.data, k, v)
        self.data.normalize()
        self.apply_runtime()
        self._notify()

    def _notify(self):
        for fn in self._listeners:
            fn(self.data)
