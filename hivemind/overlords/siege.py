"""Siege overlord: dismantle structures in a hostile room, retreating to heal.

The per-creep state is never stored. Each tick ``decide`` recomputes it from
room membership, health ratio and whether a recovery waypoint exists, so a
sieger that takes sudden damage corrects course on the very next tick.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from hivemind.core.enums import BodyPart, Capability, ResultCode, Role
from hivemind.core.memory import TaskOptions
from hivemind.directives.targeting import DirectiveTargetSiege
from hivemind.overlords.combat import CombatOverlord
from hivemind.overlords.priorities import OverlordPriority
from hivemind.overlords.setups import sieger_setup
from hivemind.tasks import Tasks

if TYPE_CHECKING:
    from hivemind.core.models import RoomPosition, Structure
    from hivemind.core.zerg import Zerg
    from hivemind.directives.combat import DirectiveSiege

logger = logging.getLogger(__name__)


class SiegeAction(Enum):
    APPROACH_WAYPOINT = "approach_waypoint"
    ENGAGE = "engage"
    RETREAT = "retreat"
    ADVANCE = "advance"
    HEAL_FIRST = "heal_first"


class SiegeOverlord(CombatOverlord):

    def __init__(self, directive: DirectiveSiege, priority: int = OverlordPriority.SIEGE) -> None:
        super().__init__(directive, "siege", priority)
        self.recovery_waypoint: RoomPosition | None = directive.recovery_waypoint
        self.retreat_hits_percent = self.config.siege_retreat_hits_percent
        self.advance_hits_percent = self.config.siege_advance_hits_percent

    @property
    def siegers(self) -> list[Zerg]:
        return self.creeps(Role.SIEGER)

    @property
    def fallback_point(self) -> RoomPosition:
        """Where to heal up: the waypoint, or the colony when none is set."""
        return self.recovery_waypoint or self.colony.pos

    def decide(self, sieger: Zerg) -> SiegeAction:
        room_name = sieger.pos.room_name
        waypoint = self.recovery_waypoint
        if waypoint is not None and room_name != self.pos.room_name and room_name != waypoint.room_name:
            return SiegeAction.APPROACH_WAYPOINT
        if room_name == self.pos.room_name:
            if sieger.hits >= self.retreat_hits_percent * sieger.hits_max:
                return SiegeAction.ENGAGE
            return SiegeAction.RETREAT
        if sieger.hits >= self.advance_hits_percent * sieger.hits_max:
            return SiegeAction.ADVANCE
        return SiegeAction.HEAL_FIRST

    def find_siege_target(self, sieger: Zerg) -> Structure | None:
        room = self.room
        if room is None:
            return None
        targeted = DirectiveTargetSiege.targets_in(room.flags, self.world)
        if targeted:
            return sieger.pos.find_closest_by_range(targeted)
        return sieger.pos.find_closest_by_range(room.hostile_structures)

    def siege_actions(self, sieger: Zerg, target: Structure) -> None:
        dismantled = False
        if sieger.pos.is_near_to(target):
            dismantled = sieger.dismantle(target) == ResultCode.OK
        else:
            sieger.travel_to(target, self.move_opts.model_copy(update={"allow_hostile": True}))

        if (
            not dismantled
            and sieger.get_active_bodyparts(BodyPart.HEAL) > 0
            and sieger.hits < sieger.hits_max
            and sieger.can_execute(Capability.HEAL)
        ):
            sieger.heal(sieger)

    def retreat_actions(self, sieger: Zerg, waypoint: RoomPosition) -> None:
        """Fall back to *waypoint*, healing on the way."""
        if sieger.get_active_bodyparts(BodyPart.HEAL) > 0:
            sieger.heal(sieger)
        sieger.travel_to(waypoint, self.move_opts)

    def handle_sieger(self, sieger: Zerg) -> SiegeAction:
        action = self.decide(sieger)
        match action:
            case SiegeAction.APPROACH_WAYPOINT:
                assert self.recovery_waypoint is not None
                sieger.set_task(Tasks.go_to(self.recovery_waypoint, TaskOptions(move_options=self.move_opts)))
            case SiegeAction.ENGAGE:
                target = self.find_siege_target(sieger)
                if target is not None:
                    sieger.say("JOY!!!")
                    self.siege_actions(sieger, target)
                else:
                    sieger.say("NO JOY")
            case SiegeAction.RETREAT:
                self.retreat_actions(sieger, self.fallback_point)
            case SiegeAction.ADVANCE:
                sieger.say("charge")
                sieger.travel_to(self.pos, self.move_opts.model_copy(update={"range": 50}))
            case SiegeAction.HEAL_FIRST:
                self.retreat_actions(sieger, self.fallback_point)
                sieger.say("healme")
        return action

    def init(self) -> None:
        self.wishlist(self.config.siege_wishlist, sieger_setup(heal=False))

    def run(self) -> None:
        for sieger in self.siegers:
            if sieger.is_idle:
                self.handle_sieger(sieger)
            else:
                sieger.run()
