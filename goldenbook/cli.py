"""Developer console: drive one world's clock and actions by hand.

Commands (prompt ``:``):
  /tick N          advance the clock by N seconds
  /run N [STEP]    advance N seconds in STEP sized ticks, printing the timeline
  /curse [ID]      force a curse (random from the pool when omitted)
  /end             end the active curse early
  /state           show phase, curse and modifiers
  /punch [FORCE]   punch the wild Mon (force 0..1)
  /capture         try to seal the wild Mon into the book
  /spawn           spawn a fresh wild Mon and heal the player
  /quit            leave
"""
from __future__ import annotations
import random
from typing import List, Optional
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.box import ROUNDED
from goldenbook.battle.models import BookTier, CaptureTarget, Combatant, Side
from goldenbook.core.logging import logger
from goldenbook.core.types import format_types
from goldenbook.curses.scheduler import CurseStateChangeEvent, CycleState, CyclePhase
from goldenbook.system.settings import Settings
from goldenbook.world import CaptureAction, GameWorld, PunchAction

console = Console()

PHASE_STYLE = {
    CyclePhase.REST: "green",
    CyclePhase.WARNING: "yellow",
    CyclePhase.ACTIVE: "bold red",
}

def demo_player() -> Combatant:
    return Combatant(id="player", name="You", types=("normal",), max_health=60, attack=12, defense=8,
                     speed=10, side=Side.PLAYER, crit_chance=0.1)

def demo_wild(rng: random.Random) -> CaptureTarget:
    mon_type = rng.choice(["fire", "water", "plant", "electric", "shadow"])
    return CaptureTarget(id=f"wild-{rng.randint(100, 999)}", name=f"Wild {mon_type.title()}ling",
                         types=(mon_type,), max_health=40, attack=9, defense=7, speed=8,
                         side=Side.WILD, can_counter_punch=True, counter_chance=0.3, counter_power=6,
                         can_vaporize=mon_type == "shadow", vaporize_chance=0.05,
                         size=3, required_book_tier=BookTier.STARTER, base_capture_rate=0.45)

class DevSession:
    def __init__(self, world: GameWorld):
        self.world = world
        self.player = demo_player()
        self.wild = demo_wild(world.rng)
        self.book = world.new_book("book-1", BookTier.STANDARD, owner="player")
        self.events: List[CurseStateChangeEvent] = []
        world.on_curse_change(self.events.append)

    def execute(self, cmd: str) -> Optional[str]:
        """Run one command; returns text for the console, None on quit."""
        parts = cmd.strip().split()
        if not parts:
            return ""
        name, args = parts[0], parts[1:]
        if name in ("/quit", "/exit", "/q"):
            return None
        if name == "/tick":
            delta = float(args[0]) if args else 1.0
            state = self.world.tick(delta)
            return describe_state(state)
        if name == "/run":
            total = float(args[0]) if args else 10.0
            step = float(args[1]) if len(args) > 1 else 1.0
            states = self.world.scheduler.run_for(total, step)
            return f"Ran {len(states)} ticks. {describe_state(self.world.scheduler.state)}"
        if name == "/curse":
            curse = self.world.scheduler.force_curse(args[0] if args else None)
            return f"Forced curse {curse.name}."
        if name == "/end":
            ended = self.world.scheduler.end_curse()
            return "Curse ended." if ended else "No active curse."
        if name == "/state":
            return describe_state(self.world.scheduler.state) + " " + describe_modifiers(self.world)
        if name == "/punch":
            force = float(args[0]) if args else 1.0
            if self.player.is_defeated():
                return "You are out of the fight. /spawn to reset."
            if self.wild.is_defeated():
                return f"{self.wild.name} is already defeated. Try /capture."
            record = self.world.handle(PunchAction(self.player, self.wild, force=force))
            return " ".join(record.log)
        if name == "/capture":
            record = self.world.handle(CaptureAction(self.wild, self.book))
            return " ".join(record.log)
        if name == "/spawn":
            self.wild = demo_wild(self.world.rng)
            self.player.health = self.player.max_health
            return f"{self.wild.name} ({self.wild.types[0]}) appeared!"
        return "Unknown dev cmd"

    def render(self):
        console.print(status_panel(self))

def describe_state(state: CycleState) -> str:
    curse = f" curse={state.curse.id}" if state.curse else ""
    return f"phase={state.phase.value} remaining={state.remaining:g}{curse}"

def describe_modifiers(world: GameWorld) -> str:
    entries = world.registry.entries()
    if not entries:
        return "modifiers=(none)"
    snap = world.registry.snapshot()
    return "modifiers=" + ",".join(f"{k}:{snap.value(k)}" for k in sorted(entries))

def status_panel(session: DevSession) -> Panel:
    world = session.world
    state = world.scheduler.state
    style = PHASE_STYLE[state.phase]
    table = Table(box=ROUNDED, show_header=False, expand=False)
    table.add_column("k", style="bright_white")
    table.add_column("v")
    table.add_row("Phase", f"[{style}]{state.phase.value.upper()}[/{style}] ({state.remaining:g}s left)")
    table.add_row("Curse", state.curse.name if state.curse else "-")
    table.add_row("Modifiers", describe_modifiers(world).split("=", 1)[1])
    for c in (session.player, session.wild):
        table.add_row(c.name, f"{format_types(c.types)} HP {c.health}/{c.max_health}")
    table.add_row("Book", f"{session.book.tier.name} {session.book.occupied}/{session.book.max_capacity}")
    return Panel(table, title="Golden Book", border_style="bright_white")

def timeline_table(states: List[CycleState], step: float) -> Table:
    table = Table(title="Curse cycle", box=ROUNDED)
    table.add_column("t", justify="right")
    table.add_column("Phase")
    table.add_column("Remaining", justify="right")
    table.add_column("Curse")
    t = 0.0
    for s in states:
        t += step
        style = PHASE_STYLE[s.phase]
        table.add_row(f"{t:g}", f"[{style}]{s.phase.value}[/{style}]", f"{s.remaining:g}",
                      s.curse.name if s.curse else "")
    return table

def simulate(seconds: float, step: float = 1.0, settings: Optional[Settings] = None) -> List[CycleState]:
    settings = settings or Settings.load()
    settings.apply_runtime()
    world = GameWorld(settings)
    states = world.scheduler.run_for(seconds, step)
    console.print(timeline_table(states, step))
    world.close()
    return states

def run():
    settings = Settings.load()
    settings.apply_runtime()
    world = GameWorld(settings)
    session = DevSession(world)
    logger.info("DevConsoleStarted", seed=settings.data.rng_seed, curses=len(world.pool.curses))
    console.print(Panel(__doc__.strip(), title="Dev console", border_style="bright_white"))
    while True:
        session.render()
        cmd = console.input(":")
        try:
            out = session.execute(cmd)
        except (KeyError, ValueError) as e:
            out = f"Error: {e}"
        if out is None:
            break
        if out:
            console.print(out)
    world.close()

if __name__ == "__main__":
    run()
