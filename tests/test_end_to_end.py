"""End-to-end runs of the Hivemind against sandbox worlds."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.helpers.colony_arena import ColonyArena
from hivemind.config import HivemindConfig
from hivemind.core.enums import DirectiveKind, Role
from hivemind.engine.snapshot import Snapshot
from hivemind.engine.world_loop import WorldLoop
from hivemind.sandbox.scenarios import ENEMY, HOME, OUTPOST, build_demo_world
from hivemind.utils.event_log import EventLog


def _demo_loop(**overrides):
    config = HivemindConfig(**{"siege_wishlist": 0, "max_ticks": 100, **overrides})
    events = EventLog()
    loop = WorldLoop(config, build_demo_world(config), events=events)
    return loop, events


# ---------------------------------------------------------------------------
# Outpost defence
# ---------------------------------------------------------------------------

class TestOutpostDefence:
    def test_one_guard_flag_on_first_hostile(self):
        arena = ColonyArena()
        arena.add_outpost(OUTPOST)
        first = arena.add_hostile((10, 10), room=OUTPOST)
        arena.add_hostile((12, 11), room=OUTPOST)
        arena.add_hostile((14, 9), room=OUTPOST)

        arena.run_ticks(1)

        flags = arena.flags_of(DirectiveKind.GUARD, OUTPOST)
        assert len(flags) == 1
        assert flags[0].pos == first.pos

    def test_no_duplicate_on_later_ticks(self):
        arena = ColonyArena()
        arena.add_outpost(OUTPOST)
        arena.add_hostile((10, 10), room=OUTPOST)

        arena.run_ticks(5)

        assert len(arena.flags_of(DirectiveKind.GUARD, OUTPOST)) == 1
        assert len(arena.events_of("directive.placed")) == 1
        assert len(arena.hivemind.directives) == 1

    def test_guard_flag_cleared_after_hostiles_leave(self):
        arena = ColonyArena(guard_safe_ticks=3)
        arena.add_outpost(OUTPOST)
        hostile = arena.add_hostile((10, 10), room=OUTPOST)
        arena.run_ticks(1)
        hostile.hits = 0

        arena.run_ticks(6)

        assert arena.flags_of(DirectiveKind.GUARD, OUTPOST) == []
        assert len(arena.events_of("directive.removed")) == 1


# ---------------------------------------------------------------------------
# Demo world
# ---------------------------------------------------------------------------

class TestDemoWorld:
    def test_demo_runs_without_faults_and_spawns_a_guard(self):
        loop, events = _demo_loop()
        for _ in range(12):
            assert loop.tick_once()

        assert events.by_category("fault") == []
        guard_flags = [f for f in loop.world.flags() if f.pos.room_name == OUTPOST and f.name.startswith("guard:")]
        assert len(guard_flags) == 1
        guard_ref = f"{guard_flags[0].name}>guard"
        guards = {
            name: memory for name, memory in loop.world.memory["creeps"].items()
            if memory.get("role") == Role.GUARD
        }
        assert len(guards) == 1
        assert next(iter(guards.values()))["overlord"] == guard_ref

    def test_snapshot_reflects_colony(self):
        loop, _ = _demo_loop()
        for _ in range(3):
            loop.tick_once()

        snapshot = Snapshot.from_loop(loop)

        assert snapshot.tick == 3
        colony = snapshot.colonies[HOME]
        assert colony.outposts == (OUTPOST,)
        assert "siege:demo" in colony.directives
        assert "targetSiege:demo" in colony.directives
        assert {o.ref for o in colony.overlords} >= {f"{HOME}>fortify", "siege:demo>siege"}
        priorities = [o.priority for o in colony.overlords]
        assert priorities == sorted(priorities)
        worker = next(c for c in snapshot.creeps if c.name == "worker-0")
        assert worker.overlord == f"{HOME}>fortify"
        assert {h.room for h in snapshot.hostiles} == {OUTPOST}
        assert {f.kind for f in snapshot.flags} >= {"siege", "targetSiege", "guard"}

    def test_worker_tops_up_damaged_ramparts(self):
        loop, _ = _demo_loop()
        room = loop.world.room(HOME)
        before = sum(r.hits for r in room.barriers)
        for _ in range(10):
            loop.tick_once()
        assert sum(r.hits for r in room.barriers) > before

    def test_same_seed_same_flags(self):
        names = []
        for _ in range(2):
            loop, _ = _demo_loop(seed=7)
            for _ in range(4):
                loop.tick_once()
            names.append(sorted(f.name for f in loop.world.flags()))
        assert names[0] == names[1]

    def test_run_stops_at_max_ticks(self):
        loop, _ = _demo_loop(max_ticks=5)
        loop.run()
        assert loop.world.time == 5
        assert not loop.tick_once()

    def test_siege_directive_survives_while_tower_stands(self):
        loop, events = _demo_loop()
        for _ in range(5):
            loop.tick_once()
        assert loop.world.flag("siege:demo") is not None
        assert loop.world.room(ENEMY).hostile_structures
        assert events.by_category("fault") == []
