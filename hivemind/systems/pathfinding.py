"""A* pathfinding over room terrain.

Provides a ``Pathfinder`` that computes paths inside one room, respecting
terrain walkability, swamp cost, roads and an obstacle set (typically the
colony's barriers). Moves are 8-way with Chebyshev distance as heuristic.

Usage:
    pf = Pathfinder(world)
    path = pf.find_path(start, goal)              # list[RoomPosition] or None
    ok = pf.is_reachable(start, goal, barriers)   # bool
"""

from __future__ import annotations

import heapq
from typing import TYPE_CHECKING, Iterable, Sequence

from hivemind.core.enums import Direction, Terrain
from hivemind.core.models import DIRECTION_OFFSETS, ROOM_SIZE, RoomPosition

if TYPE_CHECKING:
    from hivemind.core.interfaces import WorldQuery

# ---------------------------------------------------------------------------
# Terrain movement costs
# ---------------------------------------------------------------------------
# Roads cost 1, plain 2, swamp 10. Walls are impassable
# and handled by WorldQuery.is_walkable().

TERRAIN_MOVE_COST: dict[Terrain, float] = {
    Terrain.PLAIN: 2.0,
    Terrain.SWAMP: 10.0,
}
ROAD_MOVE_COST = 1.0

_DIRS = tuple(DIRECTION_OFFSETS[d] for d in Direction)


def tile_cost(world: WorldQuery, pos: RoomPosition) -> float:
    """Return the movement cost for stepping onto *pos*."""
    if world.has_road(pos):
        return ROAD_MOVE_COST
    return TERRAIN_MOVE_COST.get(world.terrain_at(pos), 2.0)


class Pathfinder:
    """A* pathfinder operating on one room of the world.

    Performance-bounded: explores at most ``max_nodes`` before giving up.
    """

    __slots__ = ("_world", "_max_nodes")

    def __init__(self, world: WorldQuery, max_nodes: int = 2500) -> None:
        self._world = world
        self._max_nodes = max_nodes

    def find_path(
        self,
        start: RoomPosition,
        goal: RoomPosition,
        obstacles: Iterable[RoomPosition] = (),
        range_: int = 0,
    ) -> list[RoomPosition] | None:
        """Compute an A* path from *start* to within *range_* of *goal*.

        Returns the positions to step on (excluding *start*), or None if no
        path exists within the node budget. Paths never leave the start room.
        """
        if start.room_name != goal.room_name:
            return None
        if start.get_range_to(goal) <= range_:
            return []

        world = self._world
        room_name = start.room_name
        blocked = {(p.x, p.y) for p in obstacles if p.room_name == room_name}
        gx, gy = goal.x, goal.y

        counter = 0
        open_heap: list[tuple[float, int, int, int]] = []
        heapq.heappush(open_heap, (0.0, counter, start.x, start.y))

        g_score: dict[tuple[int, int], float] = {(start.x, start.y): 0.0}
        came_from: dict[tuple[int, int], tuple[int, int]] = {}
        closed: set[tuple[int, int]] = set()
        nodes_explored = 0

        while open_heap and nodes_explored < self._max_nodes:
            _, _, cx, cy = heapq.heappop(open_heap)
            ckey = (cx, cy)

            if max(abs(cx - gx), abs(cy - gy)) <= range_:
                return self._reconstruct(came_from, ckey, room_name)

            if ckey in closed:
                continue
            closed.add(ckey)
            nodes_explored += 1

            current_g = g_score[ckey]

            for dx, dy in _DIRS:
                nx, ny = cx + dx, cy + dy
                nkey = (nx, ny)
                if nkey in closed or not (0 <= nx < ROOM_SIZE and 0 <= ny < ROOM_SIZE):
                    continue

                # The goal tile itself may hold a structure we want to reach.
                is_goal = nx == gx and ny == gy
                if nkey in blocked and not is_goal:
                    continue

                npos = RoomPosition(nx, ny, room_name)
                if not is_goal and not world.is_walkable(npos):
                    continue

                tentative_g = current_g + tile_cost(world, npos)
                if tentative_g < g_score.get(nkey, float("inf")):
                    g_score[nkey] = tentative_g
                    came_from[nkey] = ckey
                    h = max(abs(nx - gx), abs(ny - gy))
                    counter += 1
                    heapq.heappush(open_heap, (tentative_g + h, counter, nx, ny))

        return None

    def next_step(
        self,
        start: RoomPosition,
        goal: RoomPosition,
        obstacles: Iterable[RoomPosition] = (),
        range_: int = 0,
    ) -> RoomPosition | None:
        """Return the first step of the path, or None if there is none (or no step is needed)."""
        path = self.find_path(start, goal, obstacles, range_)
        if path:
            return path[0]
        return None

    def is_reachable(
        self,
        start: RoomPosition,
        goal: RoomPosition,
        obstacles: Sequence[RoomPosition] = (),
    ) -> bool:
        """True if a walkable path leads from *start* to a tile adjacent to *goal*."""
        return self.find_path(start, goal, obstacles, range_=1) is not None

    @staticmethod
    def _reconstruct(
        came_from: dict[tuple[int, int], tuple[int, int]],
        current: tuple[int, int],
        room_name: str,
    ) -> list[RoomPosition]:
        path: list[RoomPosition] = []
        while current in came_from:
            path.append(RoomPosition(current[0], current[1], room_name))
            current = came_from[current]
        path.reverse()
        return path
