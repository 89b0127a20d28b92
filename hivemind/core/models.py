"""Core data models: RoomPosition, bodies, creeps, structures, flags, rooms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence, TypeVar, Union

from hivemind.core.enums import (
    BARRIER_TYPES,
    BodyPart,
    Direction,
    FlagColor,
    StructureType,
)

ROOM_SIZE = 50

DIRECTION_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.TOP: (0, -1),
    Direction.TOP_RIGHT: (1, -1),
    Direction.RIGHT: (1, 0),
    Direction.BOTTOM_RIGHT: (1, 1),
    Direction.BOTTOM: (0, 1),
    Direction.BOTTOM_LEFT: (-1, 1),
    Direction.LEFT: (-1, 0),
    Direction.TOP_LEFT: (-1, -1),
}

_OFFSET_DIRECTIONS: dict[tuple[int, int], Direction] = {v: k for k, v in DIRECTION_OFFSETS.items()}


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


@dataclass(frozen=True, slots=True)
class RoomPosition:
    """Immutable tile coordinate inside a named room."""

    x: int
    y: int
    room_name: str

    def get_range_to(self, target: HasPosLike) -> float:
        """Chebyshev range; infinite across rooms."""
        other = pos_of(target)
        if other.room_name != self.room_name:
            return float("inf")
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def in_range_to(self, target: HasPosLike, range_: int) -> bool:
        return self.get_range_to(target) <= range_

    def is_near_to(self, target: HasPosLike) -> bool:
        return self.get_range_to(target) <= 1

    def is_equal_to(self, target: HasPosLike) -> bool:
        return pos_of(target) == self

    @property
    def range_to_edge(self) -> int:
        return min(self.x, self.y, ROOM_SIZE - 1 - self.x, ROOM_SIZE - 1 - self.y)

    @property
    def is_edge(self) -> bool:
        return self.range_to_edge == 0

    @property
    def in_bounds(self) -> bool:
        return 0 <= self.x < ROOM_SIZE and 0 <= self.y < ROOM_SIZE

    def get_direction_to(self, target: HasPosLike) -> Direction | None:
        """Direction of the first step toward *target*; None when already there."""
        other = pos_of(target)
        offset = (_sign(other.x - self.x), _sign(other.y - self.y))
        return _OFFSET_DIRECTIONS.get(offset)

    def get_position_at_direction(self, direction: Direction) -> RoomPosition:
        dx, dy = DIRECTION_OFFSETS[direction]
        return RoomPosition(self.x + dx, self.y + dy, self.room_name)

    def neighbors(self) -> list[RoomPosition]:
        """In-bounds positions around this one, in direction order."""
        result = [self.get_position_at_direction(d) for d in Direction]
        return [p for p in result if p.in_bounds]

    def find_closest_by_range(self, candidates: Iterable[T]) -> T | None:
        """Closest candidate by range; ties keep list order."""
        best: T | None = None
        best_range = float("inf")
        for candidate in candidates:
            r = self.get_range_to(candidate)
            if best is None or r < best_range:
                best, best_range = candidate, r
        if best is not None and best_range == float("inf"):
            return None
        return best

    def find_in_range(self, candidates: Iterable[T], range_: int) -> list[T]:
        return [c for c in candidates if self.get_range_to(c) <= range_]

    def __repr__(self) -> str:
        return f"[{self.room_name} {self.x},{self.y}]"


@dataclass(frozen=True, slots=True)
class BodyPartDef:
    """One body part; a part with zero hits is inactive."""

    type: BodyPart
    hits: int = 100
    boost: str | None = None


def body(*parts: BodyPart, boost: str | None = None) -> list[BodyPartDef]:
    """Shorthand body builder: ``body(BodyPart.ATTACK, BodyPart.MOVE)``."""
    return [BodyPartDef(p, boost=boost) for p in parts]


@dataclass(slots=True)
class Creep:
    """Read state of a creep, own or hostile, as seen this tick."""

    id: str
    name: str
    pos: RoomPosition
    body: list[BodyPartDef] = field(default_factory=list)
    hits: int = 100
    hits_max: int = 100
    owner: str = "Invader"
    my: bool = False
    carry_energy: int = 0
    carry_capacity: int = 0
    ticks_to_live: int | None = 1500
    spawning: bool = False
    fatigue: int = 0

    @property
    def ref(self) -> str:
        return self.id

    @property
    def alive(self) -> bool:
        return self.hits > 0

    @property
    def is_player(self) -> bool:
        """Hostiles controlled by another player rather than the environment."""
        return not self.my and self.owner not in ("Invader", "Source Keeper")

    @property
    def boosts(self) -> list[str]:
        return [p.boost for p in self.body if p.boost]

    def get_active_bodyparts(self, part: BodyPart) -> int:
        return sum(1 for p in self.body if p.type == part and p.hits > 0)

    def get_bodyparts(self, part: BodyPart) -> int:
        return sum(1 for p in self.body if p.type == part)


@dataclass(slots=True)
class Structure:
    """A structure; ``owner`` None means unowned (walls, roads, containers)."""

    id: str
    structure_type: StructureType
    pos: RoomPosition
    hits: int = 1000
    hits_max: int = 1000
    my: bool = True
    owner: str | None = None

    @property
    def ref(self) -> str:
        return self.id

    @property
    def is_hostile(self) -> bool:
        return not self.my and self.owner is not None


@dataclass(slots=True)
class Flag:
    """A placed flag; its colour pair says which directive it stands for."""

    name: str
    pos: RoomPosition
    color: FlagColor
    secondary_color: FlagColor
    memory: dict[str, Any] = field(default_factory=dict)

    @property
    def ref(self) -> str:
        return self.name


@dataclass(slots=True)
class Room:
    """Room-level view. Lists are live: the world mutates them in place."""

    name: str
    creeps: list[Creep] = field(default_factory=list)
    hostiles: list[Creep] = field(default_factory=list)
    structures: list[Structure] = field(default_factory=list)
    flags: list[Flag] = field(default_factory=list)
    energy_available: int = 0
    energy_capacity_available: int = 0
    controller: Structure | None = None

    @property
    def player_hostiles(self) -> list[Creep]:
        return [h for h in self.hostiles if h.is_player]

    @property
    def hostile_structures(self) -> list[Structure]:
        return [s for s in self.structures if s.is_hostile and s.structure_type != StructureType.CONTROLLER]

    @property
    def barriers(self) -> list[Structure]:
        return [s for s in self.structures if s.structure_type in BARRIER_TYPES and not s.is_hostile]

    @property
    def spawns(self) -> list[Structure]:
        return [s for s in self.structures if s.structure_type == StructureType.SPAWN and s.my]

    @property
    def my(self) -> bool:
        return self.controller is not None and self.controller.my


HasPosLike = Union[RoomPosition, Creep, Structure, Flag, Any]
T = TypeVar("T")


def pos_of(target: HasPosLike) -> RoomPosition:
    """Return *target* itself if it is a position, else its ``pos``."""
    if isinstance(target, RoomPosition):
        return target
    return target.pos


def positions(targets: Sequence[HasPosLike]) -> list[RoomPosition]:
    return [pos_of(t) for t in targets]
