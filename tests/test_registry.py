"""Tests for the assignment registry: single ownership, reassignment, target index."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.helpers.colony_arena import ColonyArena
from hivemind.core.enums import Role
from hivemind.overlords.base import Overlord


class IdleOverlord(Overlord):
    """Overlord that does nothing; used as a reassignment destination."""

    def init(self) -> None:
        pass

    def run(self) -> None:
        pass


def _arena_with_units():
    arena = ColonyArena()
    for i in range(3):
        arena.add_creep(f"w{i}", (10 + i, 10), role=Role.WORKER)
    colony = arena.build()
    a = IdleOverlord(colony, "a", 10)
    b = IdleOverlord(colony, "b", 20)
    return arena, a, b


# ---------------------------------------------------------------------------
# Reassignment
# ---------------------------------------------------------------------------

class TestReassign:
    def test_assign_unowned_creep(self):
        arena, a, _ = _arena_with_units()
        registry = arena.hivemind.registry
        zerg = arena.zerg("w0")
        result = registry.reassign(zerg, None, a.ref)
        assert result.ok
        assert result.previous is None and result.current == a.ref
        assert a.creeps(Role.WORKER) == [zerg]
        assert zerg.overlord is a
        assert arena.creep_memory("w0")["overlord"] == a.ref

    def test_move_between_units_removes_then_inserts(self):
        arena, a, b = _arena_with_units()
        registry = arena.hivemind.registry
        zerg = arena.zerg("w0")
        registry.reassign(zerg, None, a.ref)
        result = registry.reassign(zerg, a.ref, b.ref)
        assert result.ok and result.previous == a.ref and result.current == b.ref
        assert a.creeps(Role.WORKER) == []
        assert b.creeps(Role.WORKER) == [zerg]

    def test_stale_source_is_rejected(self):
        arena, a, b = _arena_with_units()
        registry = arena.hivemind.registry
        zerg = arena.zerg("w0")
        registry.reassign(zerg, None, a.ref)
        result = registry.reassign(zerg, b.ref, None)
        assert not result.ok
        assert result.reason == "stale source assignment"
        assert registry.owner_ref("w0") == a.ref

    def test_unknown_destination_is_rejected(self):
        arena, _, _ = _arena_with_units()
        registry = arena.hivemind.registry
        result = registry.reassign(arena.zerg("w0"), None, "nowhere>guard")
        assert not result.ok
        assert registry.owner_ref("w0") is None

    def test_release_clears_persisted_owner(self):
        arena, a, _ = _arena_with_units()
        registry = arena.hivemind.registry
        zerg = arena.zerg("w0")
        registry.reassign(zerg, None, a.ref)
        assert registry.reassign(zerg, a.ref, None).ok
        assert registry.owner_ref("w0") is None
        assert "overlord" not in arena.creep_memory("w0")

    def test_single_membership_after_any_sequence(self):
        arena, a, b = _arena_with_units()
        registry = arena.hivemind.registry
        fortify = arena.colony.overlords["fortify"]
        refs = [a.ref, b.ref, None, fortify.ref, b.ref, a.ref, None, a.ref]
        for name in ("w0", "w1", "w2"):
            zerg = arena.zerg(name)
            for i, target in enumerate(refs):
                # Every other step passes a stale source; those must change nothing.
                source = registry.owner_ref(name) if i % 2 == 0 else "stale>ref"
                registry.reassign(zerg, source, target)
                owner = registry.owner_ref(name)
                memberships = registry.memberships(name)
                if owner is None:
                    assert memberships == []
                else:
                    assert memberships == [(owner, Role.WORKER)]

    def test_assign_reads_current_owner(self):
        arena, a, b = _arena_with_units()
        registry = arena.hivemind.registry
        zerg = arena.zerg("w1")
        registry.assign(zerg, a)
        assert registry.assign(zerg, b).previous == a.ref
        assert registry.owner_ref("w1") == b.ref


# ---------------------------------------------------------------------------
# Tick lifecycle
# ---------------------------------------------------------------------------

class TestRegistryLifecycle:
    def test_load_rebuilds_buckets_from_memory(self):
        arena = ColonyArena()
        arena.add_creep("w0", (10, 10), overlord="W1N1>fortify")
        arena.build()
        fortify = arena.colony.overlords["fortify"]
        assert [z.name for z in fortify.creeps(Role.WORKER)] == ["w0"]

    def test_orphans_are_released_on_build(self):
        arena = ColonyArena()
        arena.add_creep("w0", (10, 10), overlord="guard:gone>guard")
        arena.build()
        registry = arena.hivemind.registry
        assert registry.owner_ref("w0") is None
        assert "overlord" not in arena.creep_memory("w0")

    def test_unregister_overlord_releases_its_creeps(self):
        arena, a, _ = _arena_with_units()
        registry = arena.hivemind.registry
        for name in ("w0", "w1"):
            registry.reassign(arena.zerg(name), None, a.ref)
        released = registry.unregister_overlord(a.ref)
        assert sorted(released) == ["w0", "w1"]
        assert registry.overlord(a.ref) is None
        assert registry.snapshot().get(a.ref) is None

    def test_snapshot_counts_per_role(self):
        arena, a, _ = _arena_with_units()
        registry = arena.hivemind.registry
        for name in ("w0", "w1"):
            registry.reassign(arena.zerg(name), None, a.ref)
        assert registry.snapshot()[a.ref] == {Role.WORKER: 2}


# ---------------------------------------------------------------------------
# Target index
# ---------------------------------------------------------------------------

class TestTargetIndex:
    def test_register_and_unregister(self):
        arena, _, _ = _arena_with_units()
        registry = arena.hivemind.registry
        registry.register_target("wall-1", "w0")
        registry.register_target("wall-1", "w1")
        assert registry.targeting("wall-1") == {"w0", "w1"}
        registry.unregister_target("wall-1", "w0")
        registry.unregister_target("wall-1", "w1")
        assert registry.targeting("wall-1") == set()

    def test_unregister_unknown_target_is_harmless(self):
        arena, _, _ = _arena_with_units()
        arena.hivemind.registry.unregister_target("nothing", "w0")
