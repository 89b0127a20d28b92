"""Defensive and offensive directive kinds."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hivemind.core.enums import DirectiveKind
from hivemind.directives.base import Directive, room_is_clear
from hivemind.overlords.guard import DefenderOverlord, GuardOverlord, GuardSwarmOverlord
from hivemind.overlords.siege import SiegeOverlord

if TYPE_CHECKING:
    from hivemind.core.memory import DirectiveMemory
    from hivemind.core.models import Flag, RoomPosition
    from hivemind.engine.colony import Colony

logger = logging.getLogger(__name__)


class DirectiveGuard(Directive):
    """Placed automatically on hostiles in outposts and incubated rooms."""

    kind = DirectiveKind.GUARD

    def __init__(self, flag: Flag, colony: Colony) -> None:
        super().__init__(flag, colony)
        self.overlords = {"guard": GuardOverlord(self)}

    def run(self) -> None:
        safe_for = self.track_safety(self.room)
        if self.memory.persistent or safe_for is None:
            return
        if safe_for >= self.config.guard_safe_ticks:
            self.remove()


class DirectiveGuardSwarm(Directive):
    kind = DirectiveKind.GUARD_SWARM

    def __init__(self, flag: Flag, colony: Colony) -> None:
        super().__init__(flag, colony)
        self.overlords = {"guard": GuardSwarmOverlord(self)}

    def run(self) -> None:
        # Grace period and full-health requirement keep the flag from flapping.
        room = self.room
        if self.memory.persistent or room is None:
            return
        if self.age >= self.config.guard_swarm_grace_ticks and room_is_clear(room):
            self.remove()


class DirectiveInvasionDefense(Directive):
    """Placed on the colony controller when hostile pressure crosses the threshold."""

    kind = DirectiveKind.INVASION_DEFENSE

    def __init__(self, flag: Flag, colony: Colony) -> None:
        super().__init__(flag, colony)
        self.overlords = {"defender": DefenderOverlord(self)}

    def run(self) -> None:
        room = self.room
        if room is not None and room.hostiles:
            if self.memory.safe_since is not None:
                self.memory.safe_since = None
                self.save()
            return
        if self.memory.safe_since is None:
            self.memory.safe_since = self.world.time
            self.save()
        if not self.memory.persistent and self.world.time - self.memory.safe_since >= self.config.invasion_safe_ticks:
            self.remove()


class DirectiveSiege(Directive):
    """Sends siegers into the flag's room; done once no hostile structure is left."""

    kind = DirectiveKind.SIEGE

    def __init__(self, flag: Flag, colony: Colony) -> None:
        # Flags placed by hand arrive without a creation stamp; create() warns for the rest.
        hand_placed = "created" not in flag.memory
        super().__init__(flag, colony)
        waypoint = self.memory.recovery_waypoint
        self.recovery_waypoint: RoomPosition | None = waypoint.to_pos() if waypoint is not None else None
        if self.recovery_waypoint is None and hand_placed:
            _warn_no_waypoint(self.name, colony.name)
        self.overlords = {"siege": SiegeOverlord(self)}

    def run(self) -> None:
        room = self.room
        if self.memory.persistent or room is None:
            return
        if not room.hostile_structures:
            self.remove()

    @classmethod
    def create(
        cls,
        pos: RoomPosition,
        colony: Colony,
        memory: DirectiveMemory | None = None,
    ) -> str | None:
        name = super().create(pos, colony, memory)
        if name is not None and (memory is None or memory.recovery_waypoint is None):
            _warn_no_waypoint(name, colony.name)
        return name


def _warn_no_waypoint(name: str, colony_name: str) -> None:
    logger.warning("Siege directive %s has no recovery waypoint; siegers will retreat to %s", name, colony_name)
