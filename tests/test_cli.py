import random

from goldenbook.cli import DevSession, describe_state, simulate, status_panel, timeline_table
from goldenbook.curses.scheduler import CyclePhase
from goldenbook.system.settings import Settings, SettingsData
from goldenbook.world import GameWorld


def make_session(tmp_path, **data):
    base = dict(rest_duration=4.0, curse_duration=3.0)
    base.update(data)
    settings = Settings(SettingsData(**base), tmp_path / "settings.json")
    return DevSession(GameWorld(settings, rng=random.Random(9)))


def test_tick_and_state_commands(tmp_path):
    s = make_session(tmp_path)
    assert s.execute("/tick 1") == "phase=rest remaining=3"
    assert s.execute("/state") == "phase=rest remaining=3 modifiers=(none)"


def test_curse_commands(tmp_path):
    s = make_session(tmp_path)
    assert s.execute("/curse powerful_mons") == "Forced curse Powerful Mons."
    assert "wild_stat_multiplier:1.5" in s.execute("/state")
    assert s.execute("/end") == "Curse ended."
    assert s.execute("/end") == "No active curse."
    assert s.world.registry.entries() == {}


def test_run_command_records_events(tmp_path):
    s = make_session(tmp_path, enabled_curses=["weakened_player"])
    out = s.execute("/run 6")
    assert out.startswith("Ran 6 ticks.")
    assert [e.phase for e in s.events] == [CyclePhase.WARNING, CyclePhase.ACTIVE]


def test_punch_until_defeated_then_capture(tmp_path):
    s = make_session(tmp_path)
    s.wild.can_counter_punch = False
    s.wild.can_vaporize = False
    s.wild.types = ("fire",)
    for _ in range(20):
        if s.wild.is_defeated():
            break
        s.execute("/punch 1")
    assert s.wild.is_defeated()
    assert "already defeated" in s.execute("/punch")
    out = s.execute("/capture")
    assert out.endswith("sealed into the book!") or out.endswith("broke free!")


def test_capture_before_defeat_is_rejected(tmp_path):
    s = make_session(tmp_path)
    assert s.execute("/capture") == "Capture not possible: not_defeated"


def test_spawn_quit_and_unknown(tmp_path):
    s = make_session(tmp_path)
    s.player.health = 1
    assert "appeared" in s.execute("/spawn")
    assert s.player.health == s.player.max_health
    assert s.execute("") == ""
    assert s.execute("/dance") == "Unknown dev cmd"
    assert s.execute("/quit") is None


def test_rendering_helpers(tmp_path):
    s = make_session(tmp_path)
    assert status_panel(s).title == "Golden Book"
    states = s.world.scheduler.run_for(8)
    table = timeline_table(states, 1.0)
    assert table.row_count == 8
    assert describe_state(states[-1]).startswith("phase=")


def test_simulate_prints_timeline(tmp_path):
    settings = Settings(SettingsData(rest_duration=2.0, curse_duration=2.0, rng_seed=3), tmp_path / "s.json")
    states = simulate(10, 1.0, settings=settings)
    assert len(states) == 10
    assert {st.phase for st in states} >= {CyclePhase.WARNING, CyclePhase.ACTIVE}
