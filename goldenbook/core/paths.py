"""
Centralized path helpers for packaged data files.
"""
from __future__ import annotations
from pathlib import Path

# This file lives at goldenbook/core/paths.py
PACKAGE = Path(__file__).resolve().parents[1]
DATA = PACKAGE / "data"
CURSE_POOL = DATA / "curses.json"
