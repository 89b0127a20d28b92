"""Tests for creep setups, the spawn queue and the colony-level overlords that feed it."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.helpers.colony_arena import ColonyArena
from hivemind.core.enums import BodyPart, DirectiveKind, Role, StructureType
from hivemind.engine.spawn_queue import SpawnQueue, SpawnRequest
from hivemind.overlords.priorities import OverlordPriority
from hivemind.overlords.setups import (
    DEFENDER_SETUP,
    GUARD_SETUP,
    WORKER_SETUP,
    body_cost,
    sieger_setup,
)
from hivemind.tasks import TaskFortify


def _request(ref, priority, setup=GUARD_SETUP, colony="W1N1"):
    return SpawnRequest(setup=setup, overlord_ref=ref, priority=priority, colony=colony)


# ---------------------------------------------------------------------------
# Setups
# ---------------------------------------------------------------------------

class TestCreepSetup:
    def test_pattern_repeats_up_to_size_limit(self):
        parts = GUARD_SETUP.generate_body(1500)
        assert parts == [BodyPart.ATTACK, BodyPart.MOVE] * 3 + [BodyPart.HEAL, BodyPart.MOVE]
        assert body_cost(parts) == 690

    def test_energy_limits_repeats(self):
        assert GUARD_SETUP.generate_body(430) == [BodyPart.ATTACK, BodyPart.MOVE, BodyPart.HEAL, BodyPart.MOVE]

    def test_unaffordable_setup_is_empty(self):
        assert GUARD_SETUP.generate_body(400) == []
        assert WORKER_SETUP.generate_body(199) == []

    def test_size_limits(self):
        assert len(WORKER_SETUP.generate_body(10_000)) == 15
        assert len(DEFENDER_SETUP.generate_body(10_000)) == 20

    def test_sieger_heal_suffix_is_optional(self):
        assert sieger_setup(heal=True).generate_body(450)[-2:] == [BodyPart.HEAL, BodyPart.MOVE]
        assert BodyPart.HEAL not in sieger_setup(heal=False).generate_body(10_000)


# ---------------------------------------------------------------------------
# Queue
# ---------------------------------------------------------------------------

class TestSpawnQueue:
    def test_lowest_priority_value_first(self):
        queue = SpawnQueue()
        queue.request(_request("a>guard", 300))
        queue.request(_request("b>guard", 0))
        queue.request(_request("c>guard", 202))
        assert [r.overlord_ref for r in queue.pending()] == ["b>guard", "c>guard", "a>guard"]

    def test_one_request_per_overlord_and_role(self):
        queue = SpawnQueue()
        queue.request(_request("a>guard", 300))
        queue.request(_request("a>guard", 1))
        queue.request(_request("a>guard", 300, setup=WORKER_SETUP))
        assert len(queue) == 2
        assert queue.pending()[0].priority == 300

    def test_pop_next(self):
        queue = SpawnQueue()
        assert queue.pop_next() is None
        queue.request(_request("a>guard", 5))
        queue.request(_request("b>guard", 1))
        assert queue.pop_next().overlord_ref == "b>guard"
        assert len(queue) == 1
        queue.clear()
        assert len(queue) == 0


# ---------------------------------------------------------------------------
# Serving requests
# ---------------------------------------------------------------------------

class TestSpawnServing:
    def test_world_spawn_binds_and_charges(self):
        arena = ColonyArena()
        name = arena.world.spawn(_request("guard:x>guard", 202))

        assert name is not None and name.startswith("guard-")
        assert arena.world.room(arena.home).energy_available == 1500 - 690
        memory = arena.creep_memory(name)
        assert memory == {"role": Role.GUARD, "colony": arena.home, "overlord": "guard:x>guard"}
        assert arena.world.handle(name).state.pos.is_near_to(arena.spawn)

    def test_world_spawn_without_energy(self):
        arena = ColonyArena(energy=200)
        assert arena.world.spawn(_request("guard:x>guard", 202)) is None
        assert arena.world.room(arena.home).energy_available == 200

    def test_loop_spawns_highest_priority_request(self):
        arena = ColonyArena(spawn_interval=1)
        arena.add_outpost("W2N1")
        arena.place(DirectiveKind.GUARD, (25, 25), room="W2N1")

        arena.run_ticks(1)

        spawned = {n: m for n, m in arena.world.memory["creeps"].items() if m.get("role") == Role.GUARD}
        assert len(spawned) == 1
        (memory,) = spawned.values()
        assert memory["overlord"] == "guard:test>guard"

    def test_spawned_creep_is_owned_next_tick(self):
        arena = ColonyArena(spawn_interval=1)
        arena.add_outpost("W2N1")
        arena.place(DirectiveKind.GUARD, (25, 25), room="W2N1")
        arena.run_ticks(1)
        arena.build()
        guards = arena.directive("guard:test").overlords["guard"].guards
        assert len(guards) == 1


# ---------------------------------------------------------------------------
# Colony-level overlords
# ---------------------------------------------------------------------------

class TestFortifyOverlord:
    def test_worker_fortifies_weakest_barrier(self):
        arena = ColonyArena()
        weak = arena.add_structure(StructureType.RAMPART, (30, 30), hits=500, hits_max=300_000)
        strong = arena.add_structure(StructureType.WALL, (32, 30), hits=1000, hits_max=300_000, owner=None)
        arena.add_creep("w1", (31, 31), carry_energy=50)

        arena.tick()

        assert weak.hits == 600
        assert strong.hits == 1000
        zerg = arena.zerg("w1")
        assert isinstance(zerg.task, TaskFortify)
        assert arena.hivemind.registry.owner_ref("w1") == f"{arena.home}>fortify"

    def test_empty_worker_stays_idle(self):
        arena = ColonyArena()
        wall = arena.add_structure(StructureType.WALL, (30, 30), hits=500, hits_max=300_000, owner=None)
        arena.add_creep("w1", (31, 31))
        arena.tick()
        assert wall.hits == 500
        assert arena.zerg("w1").task is None

    def test_barriers_at_target_are_left_alone(self):
        arena = ColonyArena(fortify_hits_target=1000)
        wall = arena.add_structure(StructureType.WALL, (30, 30), hits=1000, hits_max=300_000, owner=None)
        arena.add_creep("w1", (31, 31), carry_energy=50)
        arena.tick()
        assert wall.hits == 1000
        assert arena.zerg("w1").task is None

    def test_fortify_priority(self):
        arena = ColonyArena()
        colony = arena.build()
        assert colony.overlords["fortify"].priority == OverlordPriority.FORTIFY
        assert colony.overlords["fortify"].ref == f"{arena.home}>fortify"


class TestDismantleOverlord:
    def test_dismantler_takes_the_flagged_structure_apart(self):
        arena = ColonyArena()
        wall = arena.add_structure(StructureType.WALL, (30, 30), owner=None)
        arena.place(DirectiveKind.DISMANTLE, (30, 30))
        arena.add_creep(
            "d1", (29, 31), (BodyPart.WORK, BodyPart.WORK, BodyPart.MOVE),
            role=Role.DISMANTLER, overlord="dismantle:test>dismantle",
        )

        arena.tick()

        assert wall.hits == 1000 - 2 * 50
        assert arena.zerg("d1").task.target is wall


class TestBootstrapOverlord:
    def test_crash_leads_to_top_priority_requests(self):
        arena = ColonyArena(energy=200)
        arena.tick()
        assert len(arena.flags_of(DirectiveKind.BOOTSTRAP)) == 1

        arena.tick()

        pending = arena.colony.spawn_queue.pending()
        assert {r.role for r in pending if r.priority == OverlordPriority.BOOTSTRAP} == {Role.MINER, Role.FILLER}
        assert pending[0].priority == OverlordPriority.BOOTSTRAP

    def test_crashed_colony_recovers_and_drops_bootstrap(self):
        # No worker request competes with the bootstrap for the remaining energy.
        arena = ColonyArena(energy=300, spawn_interval=1, fortifier_wishlist=0)

        events = arena.run_ticks(100)

        roles = {c.role for c in arena.colony.creeps}
        assert {Role.MINER, Role.FILLER} <= roles
        assert arena.flags_of(DirectiveKind.BOOTSTRAP) == []
        placed = [e for e in events if e.category == "directive.placed" and e.message.startswith("bootstrap ")]
        removed = [e for e in events if e.category == "directive.removed" and e.message.startswith("bootstrap ")]
        assert len(placed) == 1
        assert len(removed) == 1
