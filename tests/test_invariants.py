import pytest

from goldenbook.core import errors
from goldenbook.core.errors import InvariantViolation, check_invariant


def test_passing_check_returns_true(monkeypatch):
    monkeypatch.setattr(errors, "_strict", True)
    assert check_invariant(True, "fine", "nothing wrong")


def test_strict_mode_raises(monkeypatch):
    monkeypatch.setattr(errors, "_strict", True)
    with pytest.raises(InvariantViolation) as exc:
        check_invariant(False, "probability-range", "p=1.4")
    assert exc.value.name == "probability-range"


def test_lenient_mode_logs_and_returns_false(monkeypatch, capsys):
    monkeypatch.setattr(errors, "_strict", False)
    assert check_invariant(False, "damage-floor", "damage 0", target="mon") is False
    out = capsys.readouterr().out
    assert "[ERROR] InvariantViolated" in out
    assert "invariant=damage-floor" in out
    assert "target=mon" in out


def test_strict_negative_damage_is_fatal(monkeypatch):
    from goldenbook.battle.combat import apply_damage
    from tests.helpers import wild
    monkeypatch.setattr(errors, "_strict", True)
    with pytest.raises(InvariantViolation):
        apply_damage(wild(), -5)
