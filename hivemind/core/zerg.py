"""Zerg: per-tick wrapper around one own creep.

Mirrors the creep's read state, forwards capability calls while recording
successes in the tick's action log, and owns the creep's task slot.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hivemind.core.actions import ActionLog
from hivemind.core.enums import BodyPart, Capability, Direction, ResultCode, Terrain
from hivemind.core.memory import CreepMemory, load_record, store_record
from hivemind.core.models import RoomPosition, pos_of

if TYPE_CHECKING:
    from hivemind.core.interfaces import CreepHandle, WorldQuery
    from hivemind.core.memory import MoveOptions
    from hivemind.core.models import BodyPartDef, Creep, HasPosLike, Room, Structure
    from hivemind.core.registry import AssignmentRegistry
    from hivemind.overlords.base import Overlord
    from hivemind.tasks.base import Task

logger = logging.getLogger(__name__)


class Zerg:
    """One own creep, as seen and driven during the current tick."""

    __slots__ = (
        "creep",
        "world",
        "registry",
        "id",
        "name",
        "pos",
        "body",
        "hits",
        "hits_max",
        "carry_energy",
        "carry_capacity",
        "ticks_to_live",
        "spawning",
        "fatigue",
        "memory",
        "role",
        "action_log",
        "_task",
        "_task_loaded",
    )

    def __init__(self, creep: CreepHandle, world: WorldQuery, registry: AssignmentRegistry) -> None:
        state: Creep = creep.state
        self.creep = creep
        self.world = world
        self.registry = registry
        self.id: str = state.id
        self.name: str = state.name
        self.pos: RoomPosition = state.pos
        self.body: list[BodyPartDef] = list(state.body)
        self.hits: int = state.hits
        self.hits_max: int = state.hits_max
        self.carry_energy: int = state.carry_energy
        self.carry_capacity: int = state.carry_capacity
        self.ticks_to_live: int | None = state.ticks_to_live
        self.spawning: bool = state.spawning
        self.fatigue: int = state.fatigue
        self.memory: CreepMemory = load_record(CreepMemory, creep.memory)
        self.role: str = self.memory.role
        self.action_log = ActionLog()
        self._task: Task | None = None
        self._task_loaded = False

    @property
    def ref(self) -> str:
        return self.id

    @property
    def room(self) -> Room | None:
        return self.world.room(self.pos.room_name)

    def __repr__(self) -> str:
        return f"Zerg({self.name}, role={self.role}, pos={self.pos})"

    # ------------------------------------------------------------------
    # Wrapped capability calls
    # ------------------------------------------------------------------

    def _record(self, capability: Capability, result: ResultCode) -> ResultCode:
        self.action_log.record(capability, result == ResultCode.OK)
        if result != ResultCode.OK:
            logger.debug("%s: %s -> %s", self.name, capability.name, ResultCode(result).name)
        return result

    def move(self, direction: Direction) -> ResultCode:
        return self._record(Capability.MOVE, self.creep.move(direction))

    def attack(self, target: Creep | Structure) -> ResultCode:
        return self._record(Capability.ATTACK, self.creep.attack(target))

    def ranged_attack(self, target: Creep | Structure) -> ResultCode:
        return self._record(Capability.RANGED_ATTACK, self.creep.ranged_attack(target))

    def ranged_mass_attack(self) -> ResultCode:
        return self._record(Capability.RANGED_MASS_ATTACK, self.creep.ranged_mass_attack())

    def dismantle(self, target: Structure) -> ResultCode:
        return self._record(Capability.DISMANTLE, self.creep.dismantle(target))

    def repair(self, target: Structure) -> ResultCode:
        return self._record(Capability.REPAIR, self.creep.repair(target))

    def heal(self, target: Creep | Zerg, ranged_heal_instead: bool = True) -> ResultCode:
        """Heal *target*, switching to a ranged heal when it is not adjacent."""
        if ranged_heal_instead and not self.pos.is_near_to(target):
            return self.ranged_heal(target)
        return self._record(Capability.HEAL, self.creep.heal(_unwrap(target)))

    def ranged_heal(self, target: Creep | Zerg) -> ResultCode:
        return self._record(Capability.RANGED_HEAL, self.creep.ranged_heal(_unwrap(target)))

    def say(self, message: str) -> ResultCode:
        return self.creep.say(message)

    def travel_to(self, destination: HasPosLike, options: MoveOptions | None = None) -> ResultCode:
        return self._record(Capability.MOVE, self.creep.travel_to(pos_of(destination), options))

    def can_execute(self, capability: Capability) -> bool:
        """Whether *capability* would conflict with something already done this tick."""
        return self.action_log.can_execute(capability)

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------

    def get_active_bodyparts(self, part: BodyPart) -> int:
        return sum(1 for p in self.body if p.type == part and p.hits > 0)

    def get_bodyparts(self, part: BodyPart) -> int:
        """Count parts of *part* regardless of their condition."""
        return sum(1 for p in self.body if p.type == part)

    @property
    def boosts(self) -> list[str]:
        return [p.boost for p in self.body if p.boost]

    @property
    def hits_ratio(self) -> float:
        return self.hits / self.hits_max if self.hits_max > 0 else 0.0

    # ------------------------------------------------------------------
    # Overlord assignment
    # ------------------------------------------------------------------

    @property
    def overlord(self) -> Overlord | None:
        return self.registry.overlord_of(self.name)

    def bind_overlord_ref(self, ref: str | None) -> None:
        """Persist the owning overlord ref. Only the registry should call this."""
        self.memory.overlord = ref
        store_record(self.memory, self.creep.memory)

    @property
    def colony_name(self) -> str | None:
        return self.memory.colony

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    @property
    def task(self) -> Task | None:
        """Current task, rebuilt from memory once per tick."""
        if not self._task_loaded:
            from hivemind.tasks import Tasks

            self._task_loaded = True
            proto = self.memory.task
            self._task = Tasks.from_proto(proto, self.world) if proto is not None else None
            if self._task is not None:
                self._task.bind(self)
        return self._task

    def set_task(self, task: Task | None) -> None:
        """Replace the current task, keeping the target index in step."""
        old = self.task
        if old is not None and old.target_ref:
            self.registry.unregister_target(old.target_ref, self.name)
        self._task = task
        self._task_loaded = True
        if task is not None:
            task.bind(self)
            if task.target_ref:
                self.registry.register_target(task.target_ref, self.name)
            self.memory.task = task.proto
        else:
            self.memory.task = None
        store_record(self.memory, self.creep.memory)

    @property
    def has_valid_task(self) -> bool:
        task = self.task
        return task is not None and task.is_valid()

    @property
    def is_idle(self) -> bool:
        return not self.has_valid_task

    def run(self) -> ResultCode | None:
        """Validate then execute the current task; None when idle."""
        if not self.has_valid_task:
            return None
        task = self.task
        return task.run() if task is not None else None

    # ------------------------------------------------------------------
    # Movement and location
    # ------------------------------------------------------------------

    def in_same_room_as(self, target: HasPosLike) -> bool:
        return self.pos.room_name == pos_of(target).room_name

    def park(self, anchor: RoomPosition | None = None, maintain_distance: bool = False) -> ResultCode:
        """Step off a road, preferring plain tiles over swamp."""
        anchor = anchor or self.pos
        if not self.world.has_road(self.pos):
            return ResultCode.OK

        candidates = [p for p in self.pos.neighbors() if self.world.is_walkable(p)]
        candidates.sort(key=lambda p: p.get_range_to(anchor))
        if maintain_distance:
            current_range = self.pos.get_range_to(anchor)
            candidates = [p for p in candidates if p.get_range_to(anchor) <= current_range]

        swamp: RoomPosition | None = None
        for candidate in candidates:
            if self.world.has_road(candidate):
                continue
            if self.world.terrain_at(candidate) == Terrain.SWAMP:
                swamp = swamp or candidate
                continue
            direction = self.pos.get_direction_to(candidate)
            if direction is not None:
                return self.move(direction)

        if swamp is not None:
            direction = self.pos.get_direction_to(swamp)
            if direction is not None:
                return self.move(direction)

        return self.travel_to(anchor)


def _unwrap(target: Creep | Zerg) -> Creep:
    if isinstance(target, Zerg):
        return target.creep.state
    return target
