"""Tests for guard, guard-swarm and defender overlords."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tests.helpers.colony_arena import HOME, ColonyArena
from hivemind.core.enums import BodyPart, DirectiveKind, Role
from hivemind.core.models import body
from hivemind.overlords.guard import hostile_pressure

OUTPOST = "W2N1"
GUARD_REF = "guard:test>guard"


def _guard_arena(guard_at=(20, 20), guard_room=OUTPOST, **guard_kwargs):
    arena = ColonyArena()
    arena.add_outpost(OUTPOST)
    arena.place(DirectiveKind.GUARD, (25, 25), room=OUTPOST)
    arena.add_guard("g1", guard_at, room=guard_room, overlord=GUARD_REF, **guard_kwargs)
    return arena


def _overlord(arena):
    return arena.directive("guard:test").overlords["guard"]


# ---------------------------------------------------------------------------
# Target selection
# ---------------------------------------------------------------------------

class TestGuardTargeting:
    def test_flagged_structure_beats_closer_hostile(self):
        arena = _guard_arena()
        arena.add_hostile((21, 21), room=OUTPOST)
        tower = arena.add_hostile_structure((40, 40), OUTPOST)
        arena.place(DirectiveKind.TARGET_SIEGE, (40, 40), room=OUTPOST)
        arena.build()
        assert _overlord(arena).find_attack_target(arena.zerg("g1")) is tower

    def test_hostiles_on_the_edge_are_skipped(self):
        arena = _guard_arena()
        arena.add_hostile((0, 20), room=OUTPOST)
        inside = arena.add_hostile((40, 20), room=OUTPOST)
        arena.build()
        assert _overlord(arena).find_attack_target(arena.zerg("g1")) is inside

    def test_structures_when_only_edge_hostiles_remain(self):
        arena = _guard_arena()
        arena.add_hostile((0, 20), room=OUTPOST)
        tower = arena.add_hostile_structure((40, 40), OUTPOST)
        arena.build()
        assert _overlord(arena).find_attack_target(arena.zerg("g1")) is tower

    def test_closest_hostile_wins(self):
        arena = _guard_arena()
        near = arena.add_hostile((23, 20), room=OUTPOST)
        arena.add_hostile((35, 20), room=OUTPOST)
        arena.build()
        assert _overlord(arena).find_attack_target(arena.zerg("g1")) is near

    def test_empty_room_has_no_target(self):
        arena = _guard_arena()
        arena.build()
        assert _overlord(arena).find_attack_target(arena.zerg("g1")) is None


# ---------------------------------------------------------------------------
# Per-tick behaviour
# ---------------------------------------------------------------------------

class TestGuardActions:
    def test_guard_outside_the_room_travels_there(self):
        arena = _guard_arena(guard_at=(30, 30), guard_room=HOME)
        arena.build()
        _overlord(arena).run()
        assert arena.world.handle("g1").state.pos.room_name == OUTPOST

    def test_adjacent_hostile_is_attacked(self):
        arena = _guard_arena()
        hostile = arena.add_hostile((21, 20), room=OUTPOST)
        arena.build()
        _overlord(arena).run()
        assert hostile.hits == 200 - 2 * 30

    def test_distant_hostile_is_chased(self):
        arena = _guard_arena()
        hostile = arena.add_hostile((30, 20), room=OUTPOST)
        arena.build()
        _overlord(arena).run()
        handle = arena.world.handle("g1")
        assert handle.state.pos.get_range_to(hostile) == 9
        assert hostile.hits == 200

    def test_attacking_guard_does_not_self_heal(self):
        arena = _guard_arena(hits=500)
        arena.add_hostile((21, 20), room=OUTPOST)
        arena.build()
        _overlord(arena).run()
        assert arena.world.handle("g1").state.hits == 500

    def test_idle_damaged_guard_heals_itself_as_medic(self):
        arena = _guard_arena(hits=550)
        arena.build()
        _overlord(arena).run()
        assert arena.world.handle("g1").state.hits == 550 + 12

    def test_idle_guard_heals_hurt_ally(self):
        arena = _guard_arena()
        ally = arena.add_creep("w1", (21, 20), room=OUTPOST, hits=200)
        arena.build()
        _overlord(arena).run()
        assert ally.state.hits == 212


# ---------------------------------------------------------------------------
# Demand
# ---------------------------------------------------------------------------

class TestGuardDemand:
    def test_guard_wishlist(self):
        arena = ColonyArena(guard_wishlist=2)
        arena.add_outpost(OUTPOST)
        arena.place(DirectiveKind.GUARD, (25, 25), room=OUTPOST)
        arena.add_guard("g1", (20, 20), room=OUTPOST, overlord=GUARD_REF)
        arena.build()
        overlord = _overlord(arena)

        overlord.init()

        assert overlord.creep_usage_report[Role.GUARD] == (1, 2)
        (request,) = [r for r in arena.colony.spawn_queue.pending() if r.role == Role.GUARD]
        assert request.overlord_ref == GUARD_REF
        assert request.priority == overlord.priority

    def test_satisfied_wishlist_requests_nothing(self):
        arena = _guard_arena()
        arena.build()
        _overlord(arena).init()
        assert [r for r in arena.colony.spawn_queue.pending() if r.role == Role.GUARD] == []

    def test_guard_adopts_idle_colony_guards(self):
        arena = ColonyArena()
        arena.add_outpost(OUTPOST)
        arena.place(DirectiveKind.GUARD, (25, 25), room=OUTPOST)
        arena.add_guard("stray", (10, 10))
        arena.build()
        _overlord(arena).init()
        assert arena.hivemind.registry.owner_ref("stray") == GUARD_REF
        assert arena.creep_memory("stray")["overlord"] == GUARD_REF

    def test_adoption_can_be_switched_off(self):
        arena = ColonyArena(guard_reassign_idle=False)
        arena.add_outpost(OUTPOST)
        arena.place(DirectiveKind.GUARD, (25, 25), room=OUTPOST)
        arena.add_guard("stray", (10, 10))
        arena.build()
        _overlord(arena).init()
        assert arena.hivemind.registry.owner_ref("stray") is None

    def test_swarm_uses_amount_and_never_adopts(self):
        arena = ColonyArena()
        arena.add_outpost(OUTPOST)
        arena.place(DirectiveKind.GUARD_SWARM, (25, 25), room=OUTPOST, amount=3)
        arena.add_guard("stray", (10, 10))
        arena.build()
        overlord = arena.directive("guard_swarm:test").overlords["guard"]

        overlord.init()

        assert overlord.desired_count() == 3
        assert overlord.creep_usage_report[Role.GUARD] == (0, 3)
        assert arena.hivemind.registry.owner_ref("stray") is None

    def test_dying_guard_is_replaced_early(self):
        arena = _guard_arena(ticks_to_live=20)
        arena.build()
        overlord = _overlord(arena)
        overlord.init()
        assert overlord.creep_usage_report[Role.GUARD] == (0, 1)
        assert len(arena.colony.spawn_queue) >= 1


class TestDefender:
    def _defender(self, arena):
        arena.place(DirectiveKind.INVASION_DEFENSE, (25, 25))
        arena.build()
        return arena.directive("invasion_defense:test").overlords["defender"]

    def test_size_follows_pressure(self):
        arena = ColonyArena()
        for x in range(30, 34):
            arena.add_hostile((x, 30))
        defender = self._defender(arena)
        assert defender.desired_count() == 2
        defender.init()
        assert defender.creep_usage_report[Role.DEFENDER] == (0, 2)

    def test_boosted_hostiles_weigh_double(self):
        arena = ColonyArena()
        arena.add_hostile((30, 30), parts=body(BodyPart.ATTACK, BodyPart.MOVE, boost="UH"))
        arena.add_hostile((31, 30))
        arena.add_hostile((32, 30))
        assert self._defender(arena).desired_count() == 2

    def test_at_least_one_defender(self):
        arena = ColonyArena()
        assert self._defender(arena).desired_count() == 1


def test_hostile_pressure_counts_boosts():
    arena = ColonyArena()
    plain = arena.add_hostile((10, 10))
    boosted = arena.add_hostile((11, 10), parts=body(BodyPart.ATTACK, boost="XUH2O"))
    assert hostile_pressure([plain, boosted], 2) == 3
    assert hostile_pressure([], 2) == 0
