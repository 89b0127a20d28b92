"""Collaborator contracts consumed by the colony core.

The core never talks to a concrete game; it talks to these protocols.
``hivemind.sandbox`` provides an in-memory implementation of all of them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from hivemind.core.enums import Direction, FlagColor, ResultCode, Terrain
    from hivemind.core.memory import MoveOptions
    from hivemind.core.models import Creep, Flag, Room, RoomPosition, Structure


@runtime_checkable
class CreepHandle(Protocol):
    """Capability interface of one own creep.

    Every call is a side-effecting black box that returns a ResultCode.
    """

    @property
    def state(self) -> Creep: ...

    @property
    def memory(self) -> dict[str, Any]: ...

    def move(self, direction: Direction) -> ResultCode: ...
    def attack(self, target: Creep | Structure) -> ResultCode: ...
    def ranged_attack(self, target: Creep | Structure) -> ResultCode: ...
    def ranged_mass_attack(self) -> ResultCode: ...
    def heal(self, target: Creep) -> ResultCode: ...
    def ranged_heal(self, target: Creep) -> ResultCode: ...
    def dismantle(self, target: Structure) -> ResultCode: ...
    def repair(self, target: Structure) -> ResultCode: ...
    def say(self, message: str) -> ResultCode: ...
    def travel_to(self, destination: RoomPosition, options: MoveOptions | None = None) -> ResultCode: ...


@runtime_checkable
class WorldQuery(Protocol):
    """World-state query surface plus the few world mutations the core issues."""

    @property
    def time(self) -> int: ...

    @property
    def memory(self) -> dict[str, Any]: ...

    def room(self, name: str) -> Room | None: ...
    def owned_room_names(self) -> list[str]: ...
    def own_creeps(self) -> list[CreepHandle]: ...
    def flags(self) -> list[Flag]: ...
    def get_object_by_id(self, ref: str) -> Creep | Structure | None: ...
    def structures_at(self, pos: RoomPosition) -> list[Structure]: ...
    def terrain_at(self, pos: RoomPosition) -> Terrain: ...
    def has_road(self, pos: RoomPosition) -> bool: ...
    def is_walkable(self, pos: RoomPosition) -> bool: ...

    def create_flag(
        self,
        pos: RoomPosition,
        name: str,
        color: FlagColor,
        secondary_color: FlagColor,
        memory: dict[str, Any] | None = None,
    ) -> ResultCode: ...

    def remove_flag(self, name: str) -> None: ...
    def activate_safe_mode(self, room_name: str) -> ResultCode: ...


@runtime_checkable
class Pathing(Protocol):
    """Reachability queries."""

    def is_reachable(
        self,
        start: RoomPosition,
        goal: RoomPosition,
        obstacles: Sequence[RoomPosition] = (),
    ) -> bool: ...
