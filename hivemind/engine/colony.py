"""Colony: one owned room, its outposts, creeps and colony-level overlords."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hivemind.core.memory import ColonyMemory, load_record, store_record
from hivemind.core.models import RoomPosition
from hivemind.engine.overseer import Overseer
from hivemind.engine.spawn_queue import SpawnQueue
from hivemind.overlords.fortify import FortifyOverlord
from hivemind.utils.event_log import SimEvent

if TYPE_CHECKING:
    from hivemind.config import HivemindConfig
    from hivemind.core.interfaces import Pathing, WorldQuery
    from hivemind.core.models import Room, Structure
    from hivemind.core.registry import AssignmentRegistry
    from hivemind.core.zerg import Zerg
    from hivemind.overlords.base import Overlord
    from hivemind.utils.event_log import EventLog

logger = logging.getLogger(__name__)


class Colony:
    """Everything the overseer of one owned room needs, rebuilt every tick."""

    def __init__(
        self,
        name: str,
        world: WorldQuery,
        registry: AssignmentRegistry,
        config: HivemindConfig,
        pathing: Pathing,
        events: EventLog,
    ) -> None:
        self.name = name
        self.ref = name
        self.world = world
        self.registry = registry
        self.config = config
        self.pathing = pathing
        self.events = events
        self._raw_memory: dict = world.memory.setdefault("colonies", {}).setdefault(name, {})
        self.memory = load_record(ColonyMemory, self._raw_memory)
        self.outposts: list[str] = list(self.memory.outposts)
        self.incubating_colonies: list[Colony] = []
        self.spawn_queue = SpawnQueue()
        self.creeps: list[Zerg] = []
        self.overlords: dict[str, Overlord] = {}
        self.overseer = Overseer(self)

    def __repr__(self) -> str:
        return f"Colony({self.name})"

    def build(self) -> None:
        """Create the colony-level overlords."""
        self.overlords = {"fortify": FortifyOverlord(self)}

    def save(self) -> None:
        store_record(self.memory, self._raw_memory)

    def emit(self, category: str, message: str, refs: tuple[str, ...] = ()) -> None:
        self.events.append(SimEvent(tick=self.world.time, category=category, message=message, refs=refs))

    # -- identity for overlords created by the colony itself --

    @property
    def colony(self) -> Colony:
        return self

    @property
    def pos(self) -> RoomPosition:
        """Anchor position: controller, else the first spawn, else the room centre."""
        controller = self.controller
        if controller is not None:
            return controller.pos
        hatchery = self.hatchery
        if hatchery is not None:
            return hatchery.pos
        return RoomPosition(25, 25, self.name)

    # -- rooms --

    @property
    def room(self) -> Room | None:
        return self.world.room(self.name)

    @property
    def rooms(self) -> list[str]:
        return [self.name, *self.outposts]

    @property
    def is_incubating(self) -> bool:
        return self.memory.incubator is not None

    @property
    def controller(self) -> Structure | None:
        room = self.room
        return room.controller if room is not None else None

    @property
    def spawns(self) -> list[Structure]:
        room = self.room
        return room.spawns if room is not None else []

    @property
    def hatchery(self) -> Structure | None:
        spawns = self.spawns
        return spawns[0] if spawns else None

    # -- creeps --

    def creeps_by_role(self, role: str) -> list[Zerg]:
        return [z for z in self.creeps if z.role == role]

    def roles(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for zerg in self.creeps:
            counts[zerg.role] = counts.get(zerg.role, 0) + 1
        return counts
