"""Guard overlords: hold a room against hostile creeps and structures."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from hivemind.core.enums import Role
from hivemind.directives.targeting import DirectiveTargetSiege
from hivemind.overlords.combat import CombatOverlord
from hivemind.overlords.priorities import OverlordPriority
from hivemind.overlords.setups import DEFENDER_SETUP, GUARD_SETUP

if TYPE_CHECKING:
    from hivemind.core.models import Creep, Structure
    from hivemind.core.zerg import Zerg
    from hivemind.directives.base import Directive
    from hivemind.overlords.setups import CreepSetup

logger = logging.getLogger(__name__)


class GuardOverlord(CombatOverlord):
    """Sends guards to the directive's room and fights whatever is there."""

    role: str = Role.GUARD
    setup: CreepSetup = GUARD_SETUP

    def __init__(self, directive: Directive, priority: int = OverlordPriority.GUARD, name: str = "guard") -> None:
        super().__init__(directive, name, priority)
        self.directive = directive

    @property
    def guards(self) -> list[Zerg]:
        return self.creeps(self.role)

    def desired_count(self) -> int:
        return self.config.guard_wishlist

    def find_attack_target(self, guard: Zerg) -> Creep | Structure | None:
        """Flagged siege targets, then hostiles off the room edge, then hostile structures."""
        room = guard.room
        if room is None:
            return None
        targeted = DirectiveTargetSiege.targets_in(room.flags, self.world)
        if targeted:
            return guard.pos.find_closest_by_range(targeted)
        if room.hostiles:
            inside = [h for h in room.hostiles if h.pos.range_to_edge > 0]
            target = guard.pos.find_closest_by_range(inside)
            if target is not None:
                return target
        if room.hostile_structures:
            return guard.pos.find_closest_by_range(room.hostile_structures)
        return None

    def combat_actions(self, guard: Zerg, target: Creep | Structure) -> None:
        self.attack_and_chase(guard, target)
        self.heal_self_if_possible(guard)

    def handle_guard(self, guard: Zerg) -> None:
        if not guard.in_same_room_as(self.pos):
            guard.travel_to(self.pos)
            return
        target = self.find_attack_target(guard)
        if target is not None:
            self.combat_actions(guard, target)
        else:
            self.medic_actions(guard)

    def init(self) -> None:
        if self.config.guard_reassign_idle:
            self.reassign_idle_creeps(self.role)
        self.wishlist(self.desired_count(), self.setup)

    def run(self) -> None:
        for guard in self.guards:
            self.handle_guard(guard)


class GuardSwarmOverlord(GuardOverlord):
    """Guards in numbers set by the directive's ``amount``; never adopts strays."""

    def desired_count(self) -> int:
        amount = self.directive.memory.amount
        return amount if amount is not None else self.config.guard_wishlist

    def init(self) -> None:
        self.wishlist(self.desired_count(), self.setup)


class DefenderOverlord(GuardOverlord):
    """Colony-room defence sized by hostile pressure."""

    role = Role.DEFENDER
    setup = DEFENDER_SETUP

    def __init__(self, directive: Directive, priority: int = OverlordPriority.INVASION_DEFENSE) -> None:
        super().__init__(directive, priority, name="defender")

    def desired_count(self) -> int:
        room = self.room
        if room is None:
            return 1
        pressure = hostile_pressure(room.hostiles, self.config.boosted_hostile_weight)
        return max(1, math.ceil(pressure / self.config.invasion_pressure_threshold))

    def init(self) -> None:
        self.wishlist(self.desired_count(), self.setup)


def hostile_pressure(hostiles: list[Creep], boosted_weight: int) -> int:
    """Hostile count where boosted creeps weigh *boosted_weight*."""
    return sum(boosted_weight if h.boosts else 1 for h in hostiles)
