"""SandboxWorld: a small headless stand-in for the game world.

Rooms are 50 x 50 tiles of plain, swamp or wall terrain. Own creeps expose
the capability interface with simple fixed combat numbers; hostile creeps
run a trivial attack-the-nearest behaviour in ``advance``. Rooms are
connected coarsely: changing room takes one tick and drops the creep on the
nearest walkable tile of the destination room.
"""

from __future__ import annotations

import itertools
import logging
from collections import deque
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Sequence

from hivemind.config import HivemindConfig
from hivemind.core.enums import BodyPart, FlagColor, ResultCode, Role, StructureType, Terrain
from hivemind.core.memory import MoveOptions
from hivemind.core.models import ROOM_SIZE, Creep, Flag, Room, RoomPosition, Structure, body
from hivemind.overlords.setups import body_cost
from hivemind.systems.pathfinding import Pathfinder

if TYPE_CHECKING:
    from hivemind.core.enums import Direction
    from hivemind.core.models import BodyPartDef
    from hivemind.engine.spawn_queue import SpawnRequest

logger = logging.getLogger(__name__)

PLAYER = "hivemind"

ATTACK_POWER = 30
RANGED_ATTACK_POWER = 10
RANGED_MASS_ATTACK_POWER = {1: 10, 2: 4, 3: 1}
HEAL_POWER = 12
RANGED_HEAL_POWER = 4
DISMANTLE_POWER = 50
REPAIR_POWER = 100
HARVEST_POWER = 2
PART_HITS = 100
CARRY_CAPACITY = 50
CREEP_LIFE_TIME = 1500
SAFE_MODE_DURATION = 20_000

_PASSABLE = frozenset({StructureType.ROAD, StructureType.CONTAINER})


class SandboxCreep:
    """Capability interface of one own creep, acting on the sandbox directly."""

    __slots__ = ("_world", "_state", "said", "moved")

    def __init__(self, world: SandboxWorld, state: Creep) -> None:
        self._world = world
        self._state = state
        self.said: str | None = None
        self.moved = False

    @property
    def state(self) -> Creep:
        return self._state

    @property
    def memory(self) -> dict[str, Any]:
        return self._world.memory.setdefault("creeps", {}).setdefault(self._state.name, {})

    def __repr__(self) -> str:
        return f"SandboxCreep({self._state.name} @ {self._state.pos})"

    def _check(self, part: BodyPart, target_pos: RoomPosition | None = None, range_: int = 1) -> ResultCode:
        state = self._state
        if state.spawning:
            return ResultCode.ERR_BUSY
        if state.get_active_bodyparts(part) == 0:
            return ResultCode.ERR_NO_BODYPART
        if target_pos is not None and state.pos.get_range_to(target_pos) > range_:
            return ResultCode.ERR_NOT_IN_RANGE
        return ResultCode.OK

    # -- movement --

    def move(self, direction: Direction) -> ResultCode:
        result = self._check(BodyPart.MOVE)
        if result != ResultCode.OK:
            return result
        if self.moved:
            return ResultCode.ERR_BUSY
        if self._state.fatigue > 0:
            return ResultCode.ERR_TIRED
        target = self._state.pos.get_position_at_direction(direction)
        if not self._world.is_walkable(target):
            return ResultCode.ERR_NO_PATH
        self._world.move_creep(self._state, target)
        self.moved = True
        return ResultCode.OK

    def travel_to(self, destination: RoomPosition, options: MoveOptions | None = None) -> ResultCode:
        return self._world.travel(self, destination, options or MoveOptions())

    # -- combat --

    def attack(self, target: Creep | Structure) -> ResultCode:
        result = self._check(BodyPart.ATTACK, target.pos, 1)
        if result != ResultCode.OK:
            return result
        if not self._world.is_attackable(target):
            return ResultCode.ERR_INVALID_TARGET
        self._world.damage(target, ATTACK_POWER * self._state.get_active_bodyparts(BodyPart.ATTACK))
        return ResultCode.OK

    def ranged_attack(self, target: Creep | Structure) -> ResultCode:
        result = self._check(BodyPart.RANGED_ATTACK, target.pos, 3)
        if result != ResultCode.OK:
            return result
        if not self._world.is_attackable(target):
            return ResultCode.ERR_INVALID_TARGET
        self._world.damage(target, RANGED_ATTACK_POWER * self._state.get_active_bodyparts(BodyPart.RANGED_ATTACK))
        return ResultCode.OK

    def ranged_mass_attack(self) -> ResultCode:
        result = self._check(BodyPart.RANGED_ATTACK)
        if result != ResultCode.OK:
            return result
        parts = self._state.get_active_bodyparts(BodyPart.RANGED_ATTACK)
        room = self._world.room(self._state.pos.room_name)
        assert room is not None
        for hostile in list(room.hostiles):
            distance = int(self._state.pos.get_range_to(hostile))
            power = RANGED_MASS_ATTACK_POWER.get(distance)
            if power:
                self._world.damage(hostile, power * parts)
        return ResultCode.OK

    def heal(self, target: Creep) -> ResultCode:
        result = self._check(BodyPart.HEAL, target.pos, 1)
        if result != ResultCode.OK:
            return result
        if not target.my or not target.alive:
            return ResultCode.ERR_INVALID_TARGET
        self._world.heal(target, HEAL_POWER * self._state.get_active_bodyparts(BodyPart.HEAL))
        return ResultCode.OK

    def ranged_heal(self, target: Creep) -> ResultCode:
        result = self._check(BodyPart.HEAL, target.pos, 3)
        if result != ResultCode.OK:
            return result
        if not target.my or not target.alive:
            return ResultCode.ERR_INVALID_TARGET
        self._world.heal(target, RANGED_HEAL_POWER * self._state.get_active_bodyparts(BodyPart.HEAL))
        return ResultCode.OK

    # -- work --

    def dismantle(self, target: Structure) -> ResultCode:
        result = self._check(BodyPart.WORK, target.pos, 1)
        if result != ResultCode.OK:
            return result
        if target.structure_type == StructureType.CONTROLLER or not self._world.is_attackable(target):
            return ResultCode.ERR_INVALID_TARGET
        self._world.damage(target, DISMANTLE_POWER * self._state.get_active_bodyparts(BodyPart.WORK))
        return ResultCode.OK

    def repair(self, target: Structure) -> ResultCode:
        result = self._check(BodyPart.WORK, target.pos, 3)
        if result != ResultCode.OK:
            return result
        if target.hits >= target.hits_max or not self._world.is_attackable(target):
            return ResultCode.ERR_INVALID_TARGET
        if self._state.carry_energy <= 0:
            return ResultCode.ERR_NOT_ENOUGH_RESOURCES
        spent = min(self._state.get_active_bodyparts(BodyPart.WORK), self._state.carry_energy)
        self._state.carry_energy -= spent
        target.hits = min(target.hits_max, target.hits + spent * REPAIR_POWER)
        return ResultCode.OK

    def say(self, message: str) -> ResultCode:
        self.said = message
        return ResultCode.OK


class SandboxWorld:
    """Rooms, terrain, creeps, structures, flags and memory for headless runs."""

    def __init__(self, config: HivemindConfig | None = None) -> None:
        self.config = config or HivemindConfig()
        self._time = 0
        self._memory: dict[str, Any] = {}
        self._rooms: dict[str, Room] = {}
        self._terrain: dict[tuple[str, int, int], Terrain] = {}
        self._handles: dict[str, SandboxCreep] = {}   # own creep name -> handle
        self._objects: dict[str, Creep | Structure] = {}
        self._safe_mode_until: dict[str, int] = {}
        self._ids = itertools.count(1)
        self._pathfinder = Pathfinder(self, self.config.pathfinder_max_nodes)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    def add_room(
        self,
        name: str,
        owned: bool = False,
        energy_available: int = 0,
        energy_capacity_available: int = 0,
        controller_pos: tuple[int, int] = (25, 25),
    ) -> Room:
        room = Room(name=name, energy_available=energy_available, energy_capacity_available=energy_capacity_available)
        self._rooms[name] = room
        if owned:
            controller = self.add_structure(StructureType.CONTROLLER, RoomPosition(*controller_pos, name), owner=PLAYER)
            room.controller = controller
        return room

    def set_terrain(self, pos: RoomPosition, terrain: Terrain) -> None:
        self._terrain[(pos.room_name, pos.x, pos.y)] = terrain

    def add_structure(
        self,
        structure_type: StructureType,
        pos: RoomPosition,
        hits: int = 1000,
        hits_max: int | None = None,
        owner: str | None = PLAYER,
    ) -> Structure:
        structure = Structure(
            id=f"{structure_type.name.lower()}-{next(self._ids)}",
            structure_type=structure_type,
            pos=pos,
            hits=hits,
            hits_max=hits_max if hits_max is not None else hits,
            my=owner == PLAYER,
            owner=owner,
        )
        self._rooms[pos.room_name].structures.append(structure)
        self._objects[structure.id] = structure
        return structure

    def add_road(self, pos: RoomPosition) -> Structure:
        return self.add_structure(StructureType.ROAD, pos, hits=5000, owner=None)

    def add_creep(
        self,
        name: str,
        pos: RoomPosition,
        parts: Sequence[BodyPart] | Sequence[BodyPartDef],
        role: str = "",
        colony: str | None = None,
        overlord: str | None = None,
        hits: int | None = None,
        carry_energy: int = 0,
        ticks_to_live: int | None = CREEP_LIFE_TIME,
    ) -> SandboxCreep:
        """Add an own creep and its memory record; returns its capability handle."""
        body_parts = _as_body(parts)
        hits_max = PART_HITS * len(body_parts)
        creep = Creep(
            id=f"creep-{next(self._ids)}",
            name=name,
            pos=pos,
            body=body_parts,
            hits=hits_max,
            hits_max=hits_max,
            owner=PLAYER,
            my=True,
            carry_energy=carry_energy,
            carry_capacity=CARRY_CAPACITY * sum(1 for p in body_parts if p.type == BodyPart.CARRY),
            ticks_to_live=ticks_to_live,
        )
        self._rooms[pos.room_name].creeps.append(creep)
        self._objects[creep.id] = creep
        handle = SandboxCreep(self, creep)
        self._handles[name] = handle
        memory: dict[str, Any] = {"role": role}
        if colony is not None:
            memory["colony"] = colony
        if overlord is not None:
            memory["overlord"] = overlord
        self._memory.setdefault("creeps", {})[name] = memory
        if hits is not None:
            self.set_hits(creep, hits)
        return handle

    def add_hostile(
        self,
        pos: RoomPosition,
        parts: Sequence[BodyPart] | Sequence[BodyPartDef],
        owner: str = "Invader",
        name: str | None = None,
    ) -> Creep:
        body_parts = _as_body(parts)
        creep_id = f"hostile-{next(self._ids)}"
        creep = Creep(
            id=creep_id,
            name=name or creep_id,
            pos=pos,
            body=body_parts,
            hits=PART_HITS * len(body_parts),
            hits_max=PART_HITS * len(body_parts),
            owner=owner,
            my=False,
        )
        self._rooms[pos.room_name].hostiles.append(creep)
        self._objects[creep.id] = creep
        return creep

    def set_hits(self, creep: Creep, hits: int) -> None:
        creep.hits = max(0, min(creep.hits_max, hits))
        _sync_body(creep)

    def handle(self, name: str) -> SandboxCreep | None:
        return self._handles.get(name)

    def add_flag(
        self,
        pos: RoomPosition,
        color: FlagColor,
        secondary_color: FlagColor,
        name: str,
        memory: dict[str, Any] | None = None,
    ) -> Flag:
        result = self.create_flag(pos, name, color, secondary_color, memory)
        if result != ResultCode.OK:
            raise ValueError(f"Cannot place flag {name} at {pos}: {result.name}")
        return self.flag(name)  # type: ignore[return-value]

    def flag(self, name: str) -> Flag | None:
        for room in self._rooms.values():
            for flag in room.flags:
                if flag.name == name:
                    return flag
        return None

    # ------------------------------------------------------------------
    # WorldQuery
    # ------------------------------------------------------------------

    @property
    def time(self) -> int:
        return self._time

    @time.setter
    def time(self, value: int) -> None:
        self._time = value

    @property
    def memory(self) -> dict[str, Any]:
        return self._memory

    @property
    def rooms(self) -> dict[str, Room]:
        return dict(self._rooms)

    def room(self, name: str) -> Room | None:
        return self._rooms.get(name)

    def owned_room_names(self) -> list[str]:
        return [name for name, room in self._rooms.items() if room.my]

    def own_creeps(self) -> list[SandboxCreep]:
        return list(self._handles.values())

    def flags(self) -> list[Flag]:
        return [flag for room in self._rooms.values() for flag in room.flags]

    def get_object_by_id(self, ref: str) -> Creep | Structure | None:
        return self._objects.get(ref)

    def structures_at(self, pos: RoomPosition) -> list[Structure]:
        room = self._rooms.get(pos.room_name)
        if room is None:
            return []
        return [s for s in room.structures if s.pos == pos]

    def terrain_at(self, pos: RoomPosition) -> Terrain:
        return self._terrain.get((pos.room_name, pos.x, pos.y), Terrain.PLAIN)

    def has_road(self, pos: RoomPosition) -> bool:
        return any(s.structure_type == StructureType.ROAD for s in self.structures_at(pos))

    def is_walkable(self, pos: RoomPosition) -> bool:
        if pos.room_name not in self._rooms or not pos.in_bounds:
            return False
        if self.terrain_at(pos) == Terrain.WALL:
            return False
        for structure in self.structures_at(pos):
            if structure.structure_type in _PASSABLE:
                continue
            if structure.structure_type == StructureType.RAMPART and structure.my:
                continue
            return False
        return True

    def create_flag(
        self,
        pos: RoomPosition,
        name: str,
        color: FlagColor,
        secondary_color: FlagColor,
        memory: dict[str, Any] | None = None,
    ) -> ResultCode:
        room = self._rooms.get(pos.room_name)
        if room is None or not pos.in_bounds or self.flag(name) is not None:
            return ResultCode.ERR_INVALID_TARGET
        room.flags.append(Flag(name=name, pos=pos, color=color, secondary_color=secondary_color, memory=dict(memory or {})))
        return ResultCode.OK

    def remove_flag(self, name: str) -> None:
        for room in self._rooms.values():
            room.flags[:] = [f for f in room.flags if f.name != name]

    def activate_safe_mode(self, room_name: str) -> ResultCode:
        room = self._rooms.get(room_name)
        if room is None or not room.my:
            return ResultCode.ERR_NOT_OWNER
        if self.safe_mode_active(room_name):
            return ResultCode.ERR_BUSY
        self._safe_mode_until[room_name] = self._time + SAFE_MODE_DURATION
        logger.info("Tick %d: safe mode active in %s", self._time, room_name)
        return ResultCode.OK

    def safe_mode_active(self, room_name: str) -> bool:
        return self._safe_mode_until.get(room_name, -1) > self._time

    # ------------------------------------------------------------------
    # Effects used by creep handles
    # ------------------------------------------------------------------

    def is_attackable(self, target: Creep | Structure) -> bool:
        return target.id in self._objects and target.hits > 0

    def damage(self, target: Creep | Structure, amount: int) -> None:
        target.hits = max(0, target.hits - amount)
        if isinstance(target, Creep):
            _sync_body(target)

    def heal(self, target: Creep, amount: int) -> None:
        target.hits = min(target.hits_max, target.hits + amount)
        _sync_body(target)

    def move_creep(self, creep: Creep, pos: RoomPosition) -> None:
        if pos.room_name != creep.pos.room_name:
            old_room, new_room = self._rooms[creep.pos.room_name], self._rooms[pos.room_name]
            bucket = "creeps" if creep.my else "hostiles"
            getattr(old_room, bucket).remove(creep)
            getattr(new_room, bucket).append(creep)
        creep.pos = pos

    def travel(self, handle: SandboxCreep, destination: RoomPosition, options: MoveOptions) -> ResultCode:
        """Step one tile (or one room) toward *destination*."""
        state = handle.state
        if state.spawning:
            return ResultCode.ERR_BUSY
        if state.get_active_bodyparts(BodyPart.MOVE) == 0:
            return ResultCode.ERR_NO_BODYPART
        if handle.moved:
            return ResultCode.ERR_BUSY
        if state.pos.room_name != destination.room_name:
            if destination.room_name not in self._rooms:
                return ResultCode.ERR_NO_PATH
            entry = self.nearest_walkable(RoomPosition(
                min(max(state.pos.x, 1), ROOM_SIZE - 2),
                min(max(state.pos.y, 1), ROOM_SIZE - 2),
                destination.room_name,
            ))
            if entry is None:
                return ResultCode.ERR_NO_PATH
            self.move_creep(state, entry)
            handle.moved = True
            return ResultCode.OK
        if state.pos.get_range_to(destination) <= options.range:
            return ResultCode.OK
        obstacles: list[RoomPosition] = []
        if not options.ignore_creeps:
            room = self._rooms[state.pos.room_name]
            obstacles = [c.pos for c in room.creeps + room.hostiles if c is not state]
        step = self._pathfinder.next_step(state.pos, destination, obstacles, options.range)
        if step is None:
            return ResultCode.ERR_NO_PATH
        self.move_creep(state, step)
        handle.moved = True
        return ResultCode.OK

    def nearest_walkable(self, origin: RoomPosition) -> RoomPosition | None:
        """Breadth-first search for the closest walkable, unoccupied tile."""
        room = self._rooms.get(origin.room_name)
        if room is None:
            return None
        occupied = {c.pos for c in room.creeps + room.hostiles}
        seen = {origin}
        queue = deque([origin])
        while queue:
            pos = queue.popleft()
            if self.is_walkable(pos) and pos not in occupied and not pos.is_edge:
                return pos
            for neighbor in pos.neighbors():
                if neighbor not in seen:
                    seen.add(neighbor)
                    queue.append(neighbor)
        return None

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------

    def spawn(self, request: SpawnRequest) -> str | None:
        """Serve *request* from the colony's first spawn if energy allows."""
        room = self._rooms.get(request.colony)
        if room is None or not room.spawns:
            return None
        parts = request.setup.generate_body(room.energy_available)
        if not parts:
            return None
        position = self.nearest_walkable(room.spawns[0].pos)
        if position is None:
            return None
        room.energy_available -= body_cost(parts)
        name = f"{request.role}-{next(self._ids)}"
        carry = CARRY_CAPACITY * parts.count(BodyPart.CARRY)
        self.add_creep(
            name,
            position,
            parts,
            role=request.role,
            colony=request.colony,
            overlord=request.overlord_ref,
            carry_energy=carry if request.role == Role.WORKER else 0,
        )
        logger.info("Tick %d: spawned %s for %s", self._time, name, request.overlord_ref)
        return name

    # ------------------------------------------------------------------
    # Advancement
    # ------------------------------------------------------------------

    def advance(self) -> None:
        """Hostiles act, the dead are swept, lifetimes and energy tick, time moves on."""
        for room in self._rooms.values():
            if not self.safe_mode_active(room.name):
                self._hostiles_act(room)
        self._produce_energy()
        self._sweep()
        for handle in self._handles.values():
            handle.moved = False
            handle.said = None
        self._time += 1

    def _hostiles_act(self, room: Room) -> None:
        for hostile in room.hostiles:
            if not hostile.alive:
                continue
            targets = [c for c in room.creeps if c.alive]
            target = hostile.pos.find_closest_by_range(targets)
            if target is None:
                continue
            distance = hostile.pos.get_range_to(target)
            attack = hostile.get_active_bodyparts(BodyPart.ATTACK)
            ranged = hostile.get_active_bodyparts(BodyPart.RANGED_ATTACK)
            if attack and distance <= 1:
                self.damage(target, ATTACK_POWER * attack)
            elif ranged and distance <= 3:
                self.damage(target, RANGED_ATTACK_POWER * ranged)
            elif attack or ranged:
                step = self._pathfinder.next_step(hostile.pos, target.pos, range_=1)
                if step is not None:
                    self.move_creep(hostile, step)

    def _produce_energy(self) -> None:
        for room in self._rooms.values():
            if not room.my:
                continue
            miners = [
                c for c in room.creeps
                if self._memory.get("creeps", {}).get(c.name, {}).get("role") == Role.MINER
            ]
            produced = sum(HARVEST_POWER * c.get_active_bodyparts(BodyPart.WORK) for c in miners)
            room.energy_available = min(room.energy_capacity_available, room.energy_available + produced)

    def _sweep(self) -> None:
        creep_memory = self._memory.setdefault("creeps", {})
        for room in self._rooms.values():
            for creep in list(room.creeps):
                if creep.ticks_to_live is not None:
                    creep.ticks_to_live -= 1
                if creep.hits <= 0 or (creep.ticks_to_live is not None and creep.ticks_to_live <= 0):
                    room.creeps.remove(creep)
                    self._objects.pop(creep.id, None)
                    self._handles.pop(creep.name, None)
                    creep_memory.pop(creep.name, None)
                    logger.debug("Tick %d: %s died in %s", self._time, creep.name, room.name)
            for hostile in list(room.hostiles):
                if hostile.hits <= 0:
                    room.hostiles.remove(hostile)
                    self._objects.pop(hostile.id, None)
            for structure in list(room.structures):
                if structure.hits <= 0 and structure.structure_type != StructureType.CONTROLLER:
                    room.structures.remove(structure)
                    self._objects.pop(structure.id, None)


def _as_body(parts: Sequence[BodyPart] | Sequence[BodyPartDef]) -> list[BodyPartDef]:
    return [p if not isinstance(p, BodyPart) else body(p)[0] for p in parts]


def _sync_body(creep: Creep) -> None:
    """Distribute hits over body parts, damaging the front of the body first."""
    remaining = creep.hits
    synced: list[BodyPartDef] = []
    for part in reversed(creep.body):
        hits = min(PART_HITS, remaining)
        remaining -= hits
        synced.append(replace(part, hits=hits))
    synced.reverse()
    creep.body[:] = synced
