"""Colony-keeping directive kinds."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hivemind.core.enums import DirectiveKind, Role
from hivemind.directives.base import Directive
from hivemind.overlords.bootstrap import BootstrapOverlord

if TYPE_CHECKING:
    from hivemind.core.models import Flag
    from hivemind.engine.colony import Colony


class DirectiveBootstrap(Directive):
    """Emergency mode after a colony crash: rebuild an energy supply from nothing."""

    kind = DirectiveKind.BOOTSTRAP

    def __init__(self, flag: Flag, colony: Colony) -> None:
        super().__init__(flag, colony)
        self.overlords = {"bootstrap": BootstrapOverlord(self)}

    def run(self) -> None:
        colony = self.colony
        # A queen or the bootstrap filler keeps the spawn supplied.
        has_supplier = bool(colony.creeps_by_role(Role.QUEEN) or colony.creeps_by_role(Role.FILLER))
        recovered = bool(colony.creeps_by_role(Role.MINER)) and has_supplier
        room = colony.room
        has_energy = room is not None and room.energy_available >= self.config.emergency_energy_threshold
        if recovered or has_energy:
            self.remove()
