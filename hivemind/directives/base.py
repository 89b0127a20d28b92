"""Directive base: a flag-backed objective owning one or more overlords.

A directive is materialised from a flag on every build phase. Its colour
pair identifies the kind, its persisted memory lives on the flag, and its
overlords are created in the constructor. ``remove`` tears all of that down
synchronously so nothing stale survives into the next tick.
"""

from __future__ import annotations

import logging
from abc import ABC
from typing import TYPE_CHECKING, Any, ClassVar, Iterable

from hivemind.core.enums import DIRECTIVE_COLORS, DIRECTIVE_NAMES, DirectiveKind, FlagColor, ResultCode
from hivemind.core.memory import DirectiveMemory, load_record, store_record
from hivemind.systems.naming import unique_flag_name

if TYPE_CHECKING:
    from hivemind.config import HivemindConfig
    from hivemind.core.interfaces import WorldQuery
    from hivemind.core.models import Flag, Room, RoomPosition
    from hivemind.engine.colony import Colony
    from hivemind.overlords.base import Overlord

logger = logging.getLogger(__name__)


class Directive(ABC):
    """Base class for every objective kind."""

    kind: ClassVar[DirectiveKind]
    directive_name: ClassVar[str]
    color: ClassVar[FlagColor]
    secondary_color: ClassVar[FlagColor]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        kind = cls.__dict__.get("kind")
        if kind is not None:
            cls.directive_name = DIRECTIVE_NAMES[kind]
            cls.color, cls.secondary_color = DIRECTIVE_COLORS[kind]

    def __init__(self, flag: Flag, colony: Colony) -> None:
        self.flag = flag
        self.name = flag.name
        self.ref = flag.name
        self.pos: RoomPosition = flag.pos
        self.colony: Colony = colony
        self.memory = load_record(DirectiveMemory, flag.memory)
        if self.memory.created is None:
            self.memory.created = self.world.time
        if self.memory.colony is None:
            self.memory.colony = colony.name
        self.save()
        self.overlords: dict[str, Overlord] = {}
        self.removed = False
        colony.overseer.register_directive(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name} @ {self.pos})"

    # -- collaborators --

    @property
    def world(self) -> WorldQuery:
        return self.colony.world

    @property
    def config(self) -> HivemindConfig:
        return self.colony.config

    @property
    def room(self) -> Room | None:
        return self.world.room(self.pos.room_name)

    @property
    def age(self) -> int:
        assert self.memory.created is not None
        return self.world.time - self.memory.created

    def save(self) -> None:
        store_record(self.memory, self.flag.memory)

    # -- tick protocol --

    def init(self) -> None:
        pass

    def run(self) -> None:
        pass

    def visuals(self) -> None:
        pass

    def remove(self) -> None:
        """Detach from the overseer, drop every owned overlord and delete the flag."""
        if self.removed:
            return
        self.removed = True
        overseer = self.colony.overseer
        overseer.remove_directive(self)
        for overlord in self.overlords.values():
            overseer.unregister_overlord(overlord)
            released = self.colony.registry.unregister_overlord(overlord.ref)
            if released:
                logger.debug("%s released %s", overlord.ref, ", ".join(released))
        self.world.remove_flag(self.name)
        logger.info("Removed %s directive %s in %s", self.directive_name, self.name, self.pos.room_name)
        self.colony.emit("directive.removed", f"{self.directive_name} {self.name} removed", (self.name,))

    # -- safety bookkeeping shared by the guard and invasion kinds --

    def track_safety(self, room: Room | None) -> int | None:
        """Update ``safe_since`` from *room* and return how long it has been safe.

        Unknown (invisible) rooms leave the record untouched.
        """
        if room is not None:
            clear = room_is_clear(room)
            if clear and self.memory.safe_since is None:
                self.memory.safe_since = self.world.time
                self.save()
            elif not clear and self.memory.safe_since is not None:
                self.memory.safe_since = None
                self.save()
        if self.memory.safe_since is None:
            return None
        return self.world.time - self.memory.safe_since

    # -- flag helpers --

    @classmethod
    def filter(cls, flag: Flag) -> bool:
        return flag.color == cls.color and flag.secondary_color == cls.secondary_color

    @classmethod
    def find(cls, flags: Iterable[Flag]) -> list[Flag]:
        return [f for f in flags if cls.filter(f)]

    @classmethod
    def create(
        cls,
        pos: RoomPosition,
        colony: Colony,
        memory: DirectiveMemory | None = None,
    ) -> str | None:
        """Place a flag for this kind at *pos*; the directive materialises next tick."""
        world = colony.world
        memory = memory or DirectiveMemory()
        if memory.created is None:
            memory.created = world.time
        if memory.colony is None:
            memory.colony = colony.name
        taken = {f.name for f in world.flags()}
        name = unique_flag_name(cls.directive_name, pos, world.time, colony.config.seed, taken)
        result = world.create_flag(
            pos, name, cls.color, cls.secondary_color, memory.model_dump(mode="json", exclude_none=True)
        )
        if result != ResultCode.OK:
            logger.warning("Could not place %s directive at %s: %s", cls.directive_name, pos, ResultCode(result).name)
            return None
        logger.info("Placed %s directive %s at %s", cls.directive_name, name, pos)
        colony.emit("directive.placed", f"{cls.directive_name} {name} placed at {pos}", (name,))
        return name


def room_is_clear(room: Room) -> bool:
    """No hostiles, no hostile structures and nobody of ours hurt."""
    if room.hostiles or room.hostile_structures:
        return False
    return all(c.hits >= c.hits_max for c in room.creeps)
