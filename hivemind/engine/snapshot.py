"""Immutable snapshot of the sandbox and the colonies, safe to share across threads."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

from hivemind.core.enums import DIRECTIVE_NAMES, TaskKind, directive_kind_for

if TYPE_CHECKING:
    from hivemind.engine.colony import Colony
    from hivemind.engine.world_loop import WorldLoop


@dataclass(frozen=True, slots=True)
class CreepView:
    name: str
    role: str
    room: str
    x: int
    y: int
    hits: int
    hits_max: int
    colony: str | None
    overlord: str | None
    task: str | None


@dataclass(frozen=True, slots=True)
class HostileView:
    id: str
    owner: str
    room: str
    x: int
    y: int
    hits: int
    hits_max: int


@dataclass(frozen=True, slots=True)
class FlagView:
    name: str
    kind: str | None
    room: str
    x: int
    y: int


@dataclass(frozen=True, slots=True)
class OverlordView:
    ref: str
    priority: int
    creeps: Mapping[str, int]
    usage: Mapping[str, tuple[int, int]]


@dataclass(frozen=True, slots=True)
class ColonyView:
    name: str
    outposts: tuple[str, ...]
    energy_available: int
    energy_capacity_available: int
    directives: tuple[str, ...]
    overlords: tuple[OverlordView, ...]
    roles: Mapping[str, int]
    safe_mode_tick: int | None

    @classmethod
    def from_colony(cls, colony: Colony) -> ColonyView:
        room = colony.room
        owned = colony.registry.snapshot()
        return cls(
            name=colony.name,
            outposts=tuple(colony.outposts),
            energy_available=room.energy_available if room else 0,
            energy_capacity_available=room.energy_capacity_available if room else 0,
            directives=tuple(d.name for d in colony.overseer.directives),
            overlords=tuple(
                OverlordView(
                    ref=o.ref,
                    priority=o.priority,
                    creeps=MappingProxyType(owned.get(o.ref, {})),
                    usage=MappingProxyType({r: u for r, u in o.creep_usage_report.items() if u is not None}),
                )
                for o in colony.overseer.overlords
            ),
            roles=MappingProxyType(colony.roles()),
            safe_mode_tick=colony.memory.overseer.safe_mode_tick,
        )


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Read-only view taken after each tick."""

    tick: int
    creeps: tuple[CreepView, ...]
    hostiles: tuple[HostileView, ...]
    flags: tuple[FlagView, ...]
    colonies: Mapping[str, ColonyView]

    @classmethod
    def from_loop(cls, loop: WorldLoop) -> Snapshot:
        world = loop.world
        creeps = []
        for handle in world.own_creeps():
            state, memory = handle.state, handle.memory
            task = memory.get("task")
            creeps.append(CreepView(
                name=state.name,
                role=memory.get("role", ""),
                room=state.pos.room_name,
                x=state.pos.x,
                y=state.pos.y,
                hits=state.hits,
                hits_max=state.hits_max,
                colony=memory.get("colony"),
                overlord=memory.get("overlord"),
                task=_task_name(task),
            ))
        hostiles = tuple(
            HostileView(h.id, h.owner, h.pos.room_name, h.pos.x, h.pos.y, h.hits, h.hits_max)
            for room in world.rooms.values()
            for h in room.hostiles
        )
        flags = []
        for flag in world.flags():
            kind = directive_kind_for(flag.color, flag.secondary_color)
            flags.append(FlagView(
                name=flag.name,
                kind=DIRECTIVE_NAMES[kind] if kind is not None else None,
                room=flag.pos.room_name,
                x=flag.pos.x,
                y=flag.pos.y,
            ))
        colonies = {name: ColonyView.from_colony(c) for name, c in loop.hivemind.colonies.items()}
        return cls(
            tick=world.time,
            creeps=tuple(creeps),
            hostiles=hostiles,
            flags=tuple(flags),
            colonies=MappingProxyType(colonies),
        )


def _task_name(task: dict | None) -> str | None:
    if not task:
        return None
    return TaskKind(task["kind"]).name.lower()
