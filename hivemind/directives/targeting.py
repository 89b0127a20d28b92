"""Directives that mark a single structure."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from hivemind.core.enums import DirectiveKind, StructureType
from hivemind.directives.base import Directive
from hivemind.overlords.dismantle import DismantleOverlord

if TYPE_CHECKING:
    from hivemind.core.interfaces import WorldQuery
    from hivemind.core.models import Flag, RoomPosition, Structure
    from hivemind.engine.colony import Colony

_NOT_TARGETS = frozenset({StructureType.ROAD, StructureType.CONTAINER})


def structure_target_at(world: WorldQuery, pos: RoomPosition) -> Structure | None:
    """First structure at *pos* that is worth attacking (not a road or container)."""
    for structure in world.structures_at(pos):
        if structure.structure_type not in _NOT_TARGETS:
            return structure
    return None


class _StructureDirective(Directive):

    def get_target(self) -> Structure | None:
        return structure_target_at(self.world, self.pos)

    def run(self) -> None:
        if self.memory.persistent or self.room is None:
            return
        if self.get_target() is None:
            self.remove()


class DirectiveTargetSiege(_StructureDirective):
    """Marks a structure for guards and siegers to hit first."""

    kind = DirectiveKind.TARGET_SIEGE

    @classmethod
    def targets_in(cls, flags: Iterable[Flag], world: WorldQuery) -> list[Structure]:
        """Structures marked by target-siege flags among *flags*."""
        targets = (structure_target_at(world, flag.pos) for flag in cls.find(flags))
        return [t for t in targets if t is not None]


class DirectiveDismantle(_StructureDirective):
    """Sends a dismantler at the marked structure."""

    kind = DirectiveKind.DISMANTLE

    def __init__(self, flag: Flag, colony: Colony) -> None:
        super().__init__(flag, colony)
        self.overlords = {"dismantle": DismantleOverlord(self)}
