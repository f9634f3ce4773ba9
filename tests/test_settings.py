import json
import pytest

from goldenbook.core import errors
from goldenbook.core.logging import logger
from goldenbook.system.settings import SEED_ENV, Settings, SettingsData


def test_defaults_when_file_missing(tmp_path, monkeypatch):
    monkeypatch.delenv(SEED_ENV, raising=False)
    s = Settings.load(tmp_path / "settings.json")
    assert s.data.rest_duration == 30.0
    assert s.data.warning_duration == 2.0
    assert s.data.rng_seed is None


def test_load_file_and_ignore_unknown_keys(tmp_path, monkeypatch):
    monkeypatch.delenv(SEED_ENV, raising=False)
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"rest_duration": 12, "curse_duration": 8, "rng_seed": "77",
                                "book_capture_bonus": {"starter": 1.1}, "retired_option": True}))
    s = Settings.load(path)
    assert s.data.rest_duration == 12.0
    assert s.data.curse_duration == 8.0
    assert s.data.rng_seed == 77
    assert s.data.book_capture_bonus == {"STARTER": 1.1}


def test_invalid_values_fall_back(tmp_path, monkeypatch):
    monkeypatch.delenv(SEED_ENV, raising=False)
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"rest_duration": -3, "warning_duration": "soon", "log_level": "LOUD"}))
    s = Settings.load(path)
    assert s.data.rest_duration == 30.0
    assert s.data.warning_duration == 2.0
    assert s.data.log_level == "INFO"


def test_corrupt_file_uses_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv(SEED_ENV, raising=False)
    path = tmp_path / "settings.json"
    path.write_text("{oops")
    assert Settings.load(path).data == Settings.defaults(path).data


def test_seed_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv(SEED_ENV, "1234")
    assert Settings.load(tmp_path / "settings.json").data.rng_seed == 1234


def test_save_roundtrip(tmp_path, monkeypatch):
    monkeypatch.delenv(SEED_ENV, raising=False)
    path = tmp_path / "settings.json"
    s = Settings(SettingsData(rest_duration=9.0, enabled_curses=["no_capture"]), path)
    s.save()
    loaded = Settings.load(path)
    assert loaded.data.rest_duration == 9.0
    assert loaded.data.enabled_curses == ["no_capture"]


def test_update_applies_runtime_and_notifies(tmp_path, monkeypatch):
    monkeypatch.setattr(errors, "_strict", False)
    threshold = logger.threshold
    s = Settings.defaults(tmp_path / "settings.json")
    seen = []
    s.on_change(seen.append)
    try:
        s.update(strict_invariants=True, log_level="WARN")
        assert errors.is_strict()
        assert logger.threshold == 30
        assert seen == [s.data]
    finally:
        errors.set_strict(False)
        logger.threshold = threshold


@pytest.mark.parametrize("payload", [
    [],
    {"book_capture_bonus": [1, 2]},
    {"log_level": ["DEBUG"]},
    {"enabled_curses": "no_capture"},
    {"enabled_curses": [1, 2]},
])
def test_wrong_shapes_fall_back_to_defaults(tmp_path, monkeypatch, payload):
    monkeypatch.delenv(SEED_ENV, raising=False)
    path = tmp_path / "settings.json"
    path.write_text(json.dumps(payload))
    assert Settings.load(path).data == Settings.defaults(path).data


def test_corrupt_file_keeps_environment_seed(tmp_path, monkeypatch):
    monkeypatch.setenv(SEED_ENV, "55")
    path = tmp_path / "settings.json"
    path.write_text("[]")
    assert Settings.load(path).data.rng_seed == 55
