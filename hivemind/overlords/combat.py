"""Shared combat behaviour for guard, defender and siege overlords."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hivemind.core.enums import BodyPart, Capability, ResultCode
from hivemind.core.memory import MoveOptions
from hivemind.overlords.base import Overlord

if TYPE_CHECKING:
    from hivemind.core.models import Creep, Structure
    from hivemind.core.zerg import Zerg


class CombatOverlord(Overlord):
    """Overlord with attack, chase and heal helpers."""

    @property
    def move_opts(self) -> MoveOptions:
        return MoveOptions(ignore_creeps=False)

    def attack_and_chase(self, zerg: Zerg, target: Creep | Structure) -> ResultCode:
        """Attack *target* if in reach, otherwise close the distance."""
        result = ResultCode.ERR_NO_BODYPART
        if zerg.get_active_bodyparts(BodyPart.ATTACK) > 0:
            if zerg.pos.is_near_to(target):
                result = zerg.attack(target)
            else:
                result = zerg.travel_to(target, self.move_opts)
        if zerg.get_active_bodyparts(BodyPart.RANGED_ATTACK) > 0 and zerg.can_execute(Capability.RANGED_ATTACK):
            if zerg.pos.in_range_to(target, self.config.ranged_range):
                result = zerg.ranged_attack(target)
            elif not zerg.action_log.did(Capability.MOVE):
                result = zerg.travel_to(target, self.move_opts.model_copy(update={"range": self.config.ranged_range}))
        return result

    def heal_self_if_possible(self, zerg: Zerg) -> ResultCode | None:
        """Self-heal unless it would displace an action already taken this tick."""
        if zerg.hits >= zerg.hits_max or zerg.get_active_bodyparts(BodyPart.HEAL) == 0:
            return None
        if not zerg.can_execute(Capability.HEAL):
            return None
        return zerg.heal(zerg)

    def medic_actions(self, zerg: Zerg) -> ResultCode | None:
        """Heal the closest damaged ally in the room, or step off the road."""
        room = zerg.room
        damaged = [c for c in room.creeps if c.hits < c.hits_max] if room is not None else []
        target = zerg.pos.find_closest_by_range(damaged)
        if target is None:
            return zerg.park()
        if zerg.get_active_bodyparts(BodyPart.HEAL) == 0:
            return None
        if not zerg.pos.is_near_to(target):
            zerg.travel_to(target, self.move_opts)
        if zerg.pos.in_range_to(target, self.config.ranged_range):
            return zerg.heal(target)
        return None
