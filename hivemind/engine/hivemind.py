"""Hivemind: the tick driver over every colony.

Each tick is three phases over freshly built objects:
  1. build: wrap creeps, reload the assignment registry, construct colonies
     and materialise directives (and their overlords) from flags
  2. init: every colony's overseer init
  3. run: every colony's overseer run

Nothing but persisted memory crosses the tick boundary.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Callable

from hivemind.config import HivemindConfig
from hivemind.core.registry import AssignmentRegistry
from hivemind.core.zerg import Zerg
from hivemind.directives.factory import directive_from_flag
from hivemind.engine.colony import Colony
from hivemind.systems.pathfinding import Pathfinder
from hivemind.utils.event_log import EventLog, SimEvent

if TYPE_CHECKING:
    from hivemind.core.interfaces import Pathing, WorldQuery
    from hivemind.core.models import Flag
    from hivemind.directives.base import Directive

logger = logging.getLogger(__name__)


class Hivemind:
    """Owns the assignment registry and drives all colonies through a tick."""

    def __init__(
        self,
        world: WorldQuery,
        config: HivemindConfig | None = None,
        pathing: Pathing | None = None,
        events: EventLog | None = None,
    ) -> None:
        self.world = world
        self.config = config or HivemindConfig()
        self.pathing: Pathing = pathing or Pathfinder(world, self.config.pathfinder_max_nodes)
        self.events = events if events is not None else EventLog()
        self.registry = AssignmentRegistry()
        self.colonies: dict[str, Colony] = {}
        self.directives: dict[str, Directive] = {}

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def build(self) -> None:
        world = self.world
        zergs = [Zerg(handle, world, self.registry) for handle in world.own_creeps()]
        self.registry.load(zergs)

        self.colonies = {
            name: Colony(name, world, self.registry, self.config, self.pathing, self.events)
            for name in world.owned_room_names()
        }
        for colony in self.colonies.values():
            incubator = self.colonies.get(colony.memory.incubator or "")
            if incubator is not None:
                incubator.incubating_colonies.append(colony)
        for zerg in zergs:
            colony = self.colonies.get(zerg.colony_name or "")
            if colony is not None:
                colony.creeps.append(zerg)

        for colony in self.colonies.values():
            self._guarded(colony.name, "build", colony.build)

        self.directives = {}
        for flag in world.flags():
            colony = self.colony_for(flag)
            if colony is None:
                logger.warning("Flag %s at %s has no colony; skipping", flag.name, flag.pos)
                continue
            self._guarded(flag.name, "build", partial(self._materialise, flag, colony))

        self.registry.release_orphans()

    def init(self) -> None:
        for colony in self.colonies.values():
            self._guarded(colony.name, "init", colony.overseer.init)

    def run(self) -> None:
        for colony in self.colonies.values():
            self._guarded(colony.name, "run", colony.overseer.run)

    def tick(self) -> None:
        self.build()
        self.init()
        self.run()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def colony_for(self, flag: Flag) -> Colony | None:
        """The flag's recorded colony, else the colony owning or holding its room as an outpost."""
        recorded = flag.memory.get("colony")
        if isinstance(recorded, str) and recorded in self.colonies:
            return self.colonies[recorded]
        room_name = flag.pos.room_name
        if room_name in self.colonies:
            return self.colonies[room_name]
        for colony in self.colonies.values():
            if room_name in colony.outposts:
                return colony
        return None

    def _materialise(self, flag: Flag, colony: Colony) -> None:
        directive = directive_from_flag(flag, colony)
        if directive is not None:
            self.directives[directive.name] = directive

    def _guarded(self, ref: str, phase: str, fn: Callable[[], object]) -> bool:
        try:
            fn()
        except Exception:
            logger.exception("%s failed during %s", ref, phase)
            self.events.append(
                SimEvent(tick=self.world.time, category="fault", message=f"{ref} failed during {phase}", refs=(ref,))
            )
            return False
        return True
