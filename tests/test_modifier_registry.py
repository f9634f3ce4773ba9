import threading

import pytest

from goldenbook.curses.models import Modifier
from goldenbook.curses.registry import ModifierRegistry, OVERRIDE_PREFIX
from tests.helpers import FRENZY, NO_CAPTURE, POWERFUL


def test_apply_then_revert_restores_previous_state():
    reg = ModifierRegistry()
    reg.apply_override(Modifier.CAPTURE_RATE_MULTIPLIER, 0.8)
    before = reg.entries()
    reg.apply(FRENZY.id, FRENZY.effects)
    assert reg.entries() != before
    removed = reg.revert(FRENZY.id)
    assert dict(removed) == FRENZY.effect_map()
    assert reg.entries() == before


def test_neutral_values_when_empty():
    snap = ModifierRegistry().snapshot()
    assert snap.is_empty()
    assert snap.multiplier(Modifier.WILD_STAT_MULTIPLIER) == 1.0
    assert snap.bonus(Modifier.CRIT_CHANCE_BONUS) == 0.0
    assert snap.flag(Modifier.CAPTURE_DISABLED) is False


def test_stacking_rules_per_key():
    reg = ModifierRegistry()
    reg.apply(POWERFUL.id, POWERFUL.effects)
    reg.apply(FRENZY.id, FRENZY.effects)
    reg.apply("extra", [(Modifier.CRIT_CHANCE_BONUS, 0.05), (Modifier.CAPTURE_DISABLED, False)])
    snap = reg.snapshot()
    assert snap.multiplier(Modifier.WILD_STAT_MULTIPLIER) == pytest.approx(1.8)
    assert snap.bonus(Modifier.CRIT_CHANCE_BONUS) == pytest.approx(0.2)
    assert snap.flag(Modifier.CAPTURE_DISABLED) is False
    reg.apply(NO_CAPTURE.id, NO_CAPTURE.effects)
    assert reg.snapshot().flag(Modifier.CAPTURE_DISABLED) is True


def test_revert_only_touches_its_own_source():
    reg = ModifierRegistry()
    reg.apply(POWERFUL.id, POWERFUL.effects)
    reg.apply(FRENZY.id, FRENZY.effects)
    reg.revert(FRENZY.id)
    snap = reg.snapshot()
    assert snap.multiplier(Modifier.WILD_STAT_MULTIPLIER) == 1.5
    assert snap.bonus(Modifier.CRIT_CHANCE_BONUS) == 0.0
    assert snap.sources() == (POWERFUL.id,)


def test_manual_override_survives_curse_revert():
    reg = ModifierRegistry()
    reg.apply(POWERFUL.id, POWERFUL.effects)
    reg.apply_override(Modifier.WILD_STAT_MULTIPLIER, 2.0)
    reg.revert(POWERFUL.id)
    assert reg.snapshot().multiplier(Modifier.WILD_STAT_MULTIPLIER) == 2.0
    assert reg.sources() == (OVERRIDE_PREFIX + Modifier.WILD_STAT_MULTIPLIER,)


def test_override_replaces_and_clears():
    reg = ModifierRegistry()
    reg.apply_override(Modifier.PLAYER_OUTPUT_MULTIPLIER, 0.5)
    reg.apply_override(Modifier.PLAYER_OUTPUT_MULTIPLIER, 0.25)
    assert reg.snapshot().multiplier(Modifier.PLAYER_OUTPUT_MULTIPLIER) == 0.25
    assert reg.clear_override(Modifier.PLAYER_OUTPUT_MULTIPLIER)
    assert reg.entries() == {}
    assert not reg.clear_override(Modifier.PLAYER_OUTPUT_MULTIPLIER)


def test_snapshots_are_immutable_and_stable():
    reg = ModifierRegistry()
    old = reg.snapshot()
    reg.apply(POWERFUL.id, POWERFUL.effects)
    assert old.is_empty()
    new = reg.snapshot()
    assert new.version == old.version + 1
    with pytest.raises(TypeError):
        new.entries["x"] = {}  # type: ignore[index]
    with pytest.raises(TypeError):
        new.entries[Modifier.WILD_STAT_MULTIPLIER]["other"] = 3.0  # type: ignore[index]


def test_double_apply_is_rejected():
    reg = ModifierRegistry()
    reg.apply(POWERFUL.id, POWERFUL.effects)
    with pytest.raises(ValueError):
        reg.apply(POWERFUL.id, POWERFUL.effects)


def test_revert_unknown_source_is_noop():
    reg = ModifierRegistry()
    reg.apply(POWERFUL.id, POWERFUL.effects)
    version = reg.snapshot().version
    assert reg.revert("missing") == ()
    assert reg.snapshot().version == version


def test_readers_never_see_half_applied_batch():
    reg = ModifierRegistry()
    seen_partial = []
    stop = threading.Event()

    def reader():
        while not stop.is_set():
            snap = reg.snapshot()
            keys = set(snap.entries)
            if keys and keys != {Modifier.CRIT_CHANCE_BONUS, Modifier.WILD_STAT_MULTIPLIER}:
                seen_partial.append(keys)

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for _ in range(300):
        reg.apply(FRENZY.id, FRENZY.effects)
        reg.revert(FRENZY.id)
    stop.set()
    for t in threads:
        t.join()
    assert seen_partial == []
    assert reg.entries() == {}
