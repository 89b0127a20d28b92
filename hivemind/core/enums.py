"""Enumerations used throughout the colony core."""

from __future__ import annotations

from enum import IntEnum, unique


@unique
class ResultCode(IntEnum):
    """Outcome of a capability call. Never raised, always returned."""

    OK = 0
    ERR_NOT_OWNER = -1
    ERR_NO_PATH = -2
    ERR_BUSY = -4
    ERR_NOT_ENOUGH_RESOURCES = -6
    ERR_INVALID_TARGET = -7
    ERR_NOT_IN_RANGE = -9
    ERR_TIRED = -11
    ERR_NO_BODYPART = -12


@unique
class BodyPart(IntEnum):
    """Worker body part types."""

    MOVE = 0
    WORK = 1
    CARRY = 2
    ATTACK = 3
    RANGED_ATTACK = 4
    HEAL = 5
    TOUGH = 6
    CLAIM = 7


@unique
class Capability(IntEnum):
    """Capability calls a worker can make; value is the bit index in the action mask."""

    MOVE = 0
    ATTACK = 1
    RANGED_ATTACK = 2
    RANGED_MASS_ATTACK = 3
    HEAL = 4
    RANGED_HEAL = 5
    DISMANTLE = 6
    REPAIR = 7
    HARVEST = 8
    BUILD = 9
    ATTACK_CONTROLLER = 10
    SAY = 11


@unique
class Direction(IntEnum):
    """Eight movement directions, clockwise from the top."""

    TOP = 1
    TOP_RIGHT = 2
    RIGHT = 3
    BOTTOM_RIGHT = 4
    BOTTOM = 5
    BOTTOM_LEFT = 6
    LEFT = 7
    TOP_LEFT = 8


@unique
class Terrain(IntEnum):
    """Room terrain tiles."""

    PLAIN = 0
    SWAMP = 1
    WALL = 2


@unique
class StructureType(IntEnum):
    """Structure kinds the core needs to tell apart."""

    SPAWN = 0
    CONTROLLER = 1
    EXTENSION = 2
    TOWER = 3
    WALL = 4
    RAMPART = 5
    ROAD = 6
    CONTAINER = 7
    STORAGE = 8


BARRIER_TYPES = frozenset({StructureType.WALL, StructureType.RAMPART})


@unique
class FlagColor(IntEnum):
    """Flag colours; a (primary, secondary) pair identifies a directive kind."""

    RED = 1
    PURPLE = 2
    BLUE = 3
    CYAN = 4
    GREEN = 5
    YELLOW = 6
    ORANGE = 7
    BROWN = 8
    GREY = 9
    WHITE = 10


@unique
class TaskKind(IntEnum):
    """Closed set of task kinds."""

    GO_TO = 0
    DISMANTLE = 1
    FORTIFY = 2


@unique
class DirectiveKind(IntEnum):
    """Closed set of directive kinds."""

    GUARD = 0
    GUARD_SWARM = 1
    INVASION_DEFENSE = 2
    SIEGE = 3
    TARGET_SIEGE = 4
    DISMANTLE = 5
    BOOTSTRAP = 6


DIRECTIVE_NAMES: dict[DirectiveKind, str] = {
    DirectiveKind.GUARD: "guard",
    DirectiveKind.GUARD_SWARM: "guardSwarm",
    DirectiveKind.INVASION_DEFENSE: "invasionDefense",
    DirectiveKind.SIEGE: "siege",
    DirectiveKind.TARGET_SIEGE: "targetSiege",
    DirectiveKind.DISMANTLE: "dismantle",
    DirectiveKind.BOOTSTRAP: "bootstrap",
}

DIRECTIVE_COLORS: dict[DirectiveKind, tuple[FlagColor, FlagColor]] = {
    DirectiveKind.GUARD: (FlagColor.RED, FlagColor.BLUE),
    DirectiveKind.GUARD_SWARM: (FlagColor.RED, FlagColor.PURPLE),
    DirectiveKind.INVASION_DEFENSE: (FlagColor.RED, FlagColor.RED),
    DirectiveKind.SIEGE: (FlagColor.RED, FlagColor.ORANGE),
    DirectiveKind.TARGET_SIEGE: (FlagColor.GREY, FlagColor.ORANGE),
    DirectiveKind.DISMANTLE: (FlagColor.YELLOW, FlagColor.YELLOW),
    DirectiveKind.BOOTSTRAP: (FlagColor.ORANGE, FlagColor.ORANGE),
}


def directive_kind_for(color: FlagColor, secondary_color: FlagColor) -> DirectiveKind | None:
    """Return the directive kind for a flag colour pair, or None if the pair is unused."""
    for kind, pair in DIRECTIVE_COLORS.items():
        if pair == (color, secondary_color):
            return kind
    return None


class Role:
    """Worker role names used in memory and wishlists."""

    GUARD = "guard"
    DEFENDER = "defender"
    SIEGER = "sieger"
    WORKER = "worker"
    DISMANTLER = "dismantler"
    MINER = "miner"
    QUEEN = "queen"
    FILLER = "filler"
