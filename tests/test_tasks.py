"""Tests for the task chain: validity, parent fallback, persistence, execution."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from tests.helpers.colony_arena import ColonyArena
from hivemind.core.enums import BodyPart, ResultCode, Role, StructureType, TaskKind
from hivemind.core.memory import TaskProto
from hivemind.core.zerg import Zerg
from hivemind.tasks import TaskDismantle, TaskFortify, TaskGoTo, Tasks


def _walls(arena, count, hits=1000):
    return [
        arena.add_structure(StructureType.WALL, (30 + i, 30), hits=hits, hits_max=300_000, owner=None)
        for i in range(count)
    ]


def _dismantler(arena, name="d1", at=(29, 31)):
    arena.add_creep(name, at, (BodyPart.WORK, BodyPart.WORK, BodyPart.MOVE), role=Role.DISMANTLER)


# ---------------------------------------------------------------------------
# Kind-specific validity
# ---------------------------------------------------------------------------

class TestTaskValidity:
    def test_dismantle_needs_work_parts_and_integrity(self):
        arena = ColonyArena()
        _dismantler(arena)
        arena.add_creep("carrier", (10, 10), (BodyPart.CARRY, BodyPart.MOVE))
        (wall,) = _walls(arena, 1)
        arena.build()

        task = Tasks.dismantle(wall)
        arena.zerg("d1").set_task(task)
        assert task.is_valid_task() and task.is_valid_target()

        no_work = Tasks.dismantle(wall)
        arena.zerg("carrier").set_task(no_work)
        assert not no_work.is_valid_task()

        wall.hits = 0
        assert not task.is_valid_target()

    def test_fortify_needs_energy_and_a_target_below_max(self):
        arena = ColonyArena()
        arena.add_creep("w1", (31, 31), carry_energy=50)
        arena.add_creep("empty", (32, 31))
        (wall,) = _walls(arena, 1)
        arena.build()

        task = Tasks.fortify(wall)
        arena.zerg("w1").set_task(task)
        assert task.is_valid_task() and task.is_valid_target()

        empty = Tasks.fortify(wall)
        arena.zerg("empty").set_task(empty)
        assert not empty.is_valid_task()

        # Undamaged-but-not-max still counts
        wall.hits = wall.hits_max - 1
        assert task.is_valid_target()
        wall.hits = wall.hits_max
        assert not task.is_valid_target()

    def test_fortify_works_off_road(self):
        arena = ColonyArena()
        (wall,) = _walls(arena, 1)
        assert Tasks.fortify(wall).settings.work_off_road

    def test_go_to_valid_until_in_range(self):
        arena = ColonyArena()
        arena.add_creep("w1", (10, 10))
        arena.build()
        far = Tasks.go_to(arena.pos(20, 10))
        arena.zerg("w1").set_task(far)
        assert far.is_valid_target()
        assert far.is_valid_task()

        near = Tasks.go_to(arena.pos(11, 10))
        arena.zerg("w1").set_task(near)
        assert not near.is_valid_task()
        assert near.is_valid_target()

    def test_task_needs_target_or_position(self):
        with pytest.raises(ValueError):
            TaskDismantle(None)

    def test_unbound_task_does_not_hold(self):
        arena = ColonyArena()
        (wall,) = _walls(arena, 1)
        assert Tasks.dismantle(wall).unwind().task is None


# ---------------------------------------------------------------------------
# Parent fallback
# ---------------------------------------------------------------------------

class TestTaskChain:
    def test_chain_links_parents_in_order(self):
        arena = ColonyArena()
        a, b, c = _walls(arena, 3)
        head = Tasks.chain(Tasks.dismantle(a), Tasks.dismantle(b), Tasks.dismantle(c))
        assert [t.target_ref for t in head.chain] == [a.ref, b.ref, c.ref]

    def test_unwind_falls_back_to_first_valid_ancestor(self):
        arena = ColonyArena()
        _dismantler(arena)
        a, b, c = _walls(arena, 3)
        arena.build()
        zerg = arena.zerg("d1")
        t_a, t_b, t_c = Tasks.dismantle(a), Tasks.dismantle(b), Tasks.dismantle(c)
        zerg.set_task(Tasks.chain(t_a, t_b, t_c))

        a.hits = 0
        b.hits = 0
        result = t_a.unwind()

        assert result.task is t_c
        assert result.popped == 2
        assert result.fell_back
        assert zerg.task is t_c
        assert zerg.memory.task.target_ref == c.ref
        for finished in (t_a, t_b):
            assert finished.creep is None
            assert finished.parent is None

    def test_exhausted_chain_leaves_creep_idle(self):
        arena = ColonyArena()
        _dismantler(arena)
        walls = _walls(arena, 4)
        arena.build()
        zerg = arena.zerg("d1")
        tasks = [Tasks.dismantle(w) for w in walls]
        zerg.set_task(Tasks.chain(*tasks))
        for w in walls:
            w.hits = 0

        result = tasks[0].unwind()

        assert result.task is None
        assert result.popped == 4
        assert zerg.task is None
        assert zerg.is_idle
        assert "task" not in arena.creep_memory("d1")

    @pytest.mark.parametrize("depth", [1, 2, 5, 8])
    def test_repeated_invalidation_converges_within_depth(self, depth):
        arena = ColonyArena()
        _dismantler(arena)
        walls = _walls(arena, depth)
        arena.build()
        zerg = arena.zerg("d1")
        zerg.set_task(Tasks.chain(*[Tasks.dismantle(w) for w in walls]))

        steps = 0
        while zerg.task is not None:
            head = zerg.task
            walls[steps].hits = 0
            result = head.unwind()
            steps += 1
            assert result.popped == 1
            # The creep only ever references the surviving task, never a finished one
            assert zerg.task is result.task
            assert head.creep is None
        assert steps == depth

    def test_is_valid_reports_any_surviving_task(self):
        arena = ColonyArena()
        _dismantler(arena)
        a, b = _walls(arena, 2)
        arena.build()
        zerg = arena.zerg("d1")
        head = Tasks.chain(Tasks.dismantle(a), Tasks.dismantle(b))
        zerg.set_task(head)
        a.hits = 0
        assert head.is_valid()
        assert zerg.task is not head
        assert zerg.task.target_ref == b.ref

    def test_targets_index_follows_the_chain(self):
        arena = ColonyArena()
        _dismantler(arena)
        a, b = _walls(arena, 2)
        arena.build()
        registry = arena.hivemind.registry
        zerg = arena.zerg("d1")
        head = Tasks.chain(Tasks.dismantle(a), Tasks.dismantle(b))
        zerg.set_task(head)
        assert registry.targeting(a.ref) == {"d1"}
        a.hits = 0
        head.unwind()
        assert registry.targeting(a.ref) == set()
        assert registry.targeting(b.ref) == {"d1"}

    def test_fork_pushes_new_head(self):
        arena = ColonyArena()
        _dismantler(arena)
        (wall,) = _walls(arena, 1)
        arena.build()
        zerg = arena.zerg("d1")
        base = Tasks.dismantle(wall)
        zerg.set_task(base)
        detour = base.fork(Tasks.go_to(arena.pos(10, 10)))
        assert zerg.task is detour
        assert detour.parent is base
        assert detour.creep is zerg


# ---------------------------------------------------------------------------
# Persistence across the tick boundary
# ---------------------------------------------------------------------------

class TestTaskPersistence:
    def test_chain_round_trips_through_memory(self):
        arena = ColonyArena()
        _dismantler(arena)
        a, b = _walls(arena, 2)
        arena.build()
        arena.zerg("d1").set_task(Tasks.chain(Tasks.dismantle(a), Tasks.go_to(arena.pos(5, 5)), Tasks.dismantle(b)))

        arena.build()
        rebuilt = arena.zerg("d1").task
        assert [t.kind for t in rebuilt.chain] == [TaskKind.DISMANTLE, TaskKind.GO_TO, TaskKind.DISMANTLE]
        assert rebuilt.target is a
        assert rebuilt.chain[2].target is b
        assert rebuilt.chain[1].target_pos == arena.pos(5, 5)
        assert all(t.creep is arena.zerg("d1") for t in rebuilt.chain)

    def test_vanished_target_keeps_ref_and_invalidates(self):
        arena = ColonyArena()
        _dismantler(arena)
        (wall,) = _walls(arena, 1)
        arena.build()
        arena.zerg("d1").set_task(Tasks.dismantle(wall))

        wall.hits = 0
        arena.world.advance()   # sweeps the dead wall
        arena.build()
        zerg = arena.zerg("d1")
        task = zerg.task
        assert task.target is None
        assert task.target_ref == wall.ref
        assert task.target_pos == wall.pos
        assert zerg.is_idle

    def test_proto_is_nested_innermost_last(self):
        arena = ColonyArena()
        a, b = _walls(arena, 2)
        proto = Tasks.chain(Tasks.dismantle(a), Tasks.fortify(b)).proto
        assert isinstance(proto, TaskProto)
        assert proto.kind == TaskKind.DISMANTLE
        assert proto.parent.kind == TaskKind.FORTIFY
        assert proto.parent.parent is None
        assert proto.parent.settings.work_off_road

    def test_rebuild_from_proto_without_zerg(self):
        arena = ColonyArena()
        (wall,) = _walls(arena, 1)
        task = Tasks.from_proto(Tasks.fortify(wall).proto, arena.world)
        assert isinstance(task, TaskFortify)
        assert task.target is wall


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

class TestTaskRun:
    def test_in_range_task_works(self):
        arena = ColonyArena()
        _dismantler(arena, at=(29, 31))
        (wall,) = _walls(arena, 1)
        arena.build()
        zerg = arena.zerg("d1")
        zerg.set_task(Tasks.dismantle(wall))
        assert zerg.run() == ResultCode.OK
        assert wall.hits == 1000 - 2 * 50

    def test_out_of_range_task_moves(self):
        arena = ColonyArena()
        handle = arena.add_creep("d1", (10, 30), (BodyPart.WORK, BodyPart.MOVE), role=Role.DISMANTLER)
        (wall,) = _walls(arena, 1)
        arena.build()
        zerg = arena.zerg("d1")
        zerg.set_task(Tasks.dismantle(wall))
        zerg.run()
        assert wall.hits == 1000
        assert handle.state.pos.get_range_to(wall) == 19

    def test_idle_creep_runs_nothing(self):
        arena = ColonyArena()
        arena.add_creep("w1", (10, 10))
        arena.build()
        assert arena.zerg("w1").run() is None

    def test_fortify_spends_energy(self):
        arena = ColonyArena()
        handle = arena.add_creep("w1", (30, 31), carry_energy=50)
        (wall,) = _walls(arena, 1)
        arena.build()
        zerg = arena.zerg("w1")
        zerg.set_task(Tasks.fortify(wall))
        assert zerg.run() == ResultCode.OK
        assert wall.hits == 1100
        assert handle.state.carry_energy == 49

    def test_one_shot_task_finishes_after_success(self):
        arena = ColonyArena()
        _dismantler(arena)
        a, b = _walls(arena, 2)
        arena.build()
        zerg = arena.zerg("d1")
        head = Tasks.dismantle(a)
        head.settings.one_shot = True
        zerg.set_task(Tasks.chain(head, Tasks.go_to(arena.pos(10, 10))))
        zerg.run()
        assert isinstance(zerg.task, TaskGoTo)


def test_zerg_task_slot_is_lazy():
    arena = ColonyArena()
    arena.add_creep("w1", (10, 10))
    arena.build()
    zerg = arena.zerg("w1")
    assert isinstance(zerg, Zerg)
    assert zerg.task is None
