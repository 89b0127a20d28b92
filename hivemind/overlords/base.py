"""Overlord base: a priority-ranked unit that owns and directs a set of creeps.

An overlord is created by its initializer (a directive or a colony), registers
itself with the colony's overseer and with the assignment registry at
construction, and from then on is driven through ``init`` and ``run`` every
tick. Its creeps are never stored on the overlord; they are read from the
registry each time they are needed.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol

from hivemind.engine.spawn_queue import SpawnRequest

if TYPE_CHECKING:
    from hivemind.config import HivemindConfig
    from hivemind.core.interfaces import WorldQuery
    from hivemind.core.models import Room, RoomPosition
    from hivemind.core.registry import AssignmentRegistry, ReassignResult
    from hivemind.core.zerg import Zerg
    from hivemind.engine.colony import Colony
    from hivemind.engine.overseer import Overseer
    from hivemind.overlords.setups import CreepSetup

logger = logging.getLogger(__name__)


class Initializer(Protocol):
    """Whatever creates an overlord: a directive or a colony."""

    @property
    def ref(self) -> str: ...

    @property
    def pos(self) -> RoomPosition: ...

    @property
    def colony(self) -> Colony: ...


class Overlord(ABC):
    """Base class for every assignment unit."""

    def __init__(self, initializer: Initializer, name: str, priority: int) -> None:
        self.initializer = initializer
        self.name = name
        self.priority = int(priority)
        self.ref = f"{initializer.ref}>{name}"
        self.pos: RoomPosition = initializer.pos
        self.colony: Colony = initializer.colony
        self.creep_usage_report: dict[str, tuple[int, int] | None] = {}
        self.overseer.register_overlord(self)
        self.registry.register_overlord(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.ref}, priority={self.priority})"

    # -- collaborators --

    @property
    def overseer(self) -> Overseer:
        return self.colony.overseer

    @property
    def registry(self) -> AssignmentRegistry:
        return self.colony.registry

    @property
    def world(self) -> WorldQuery:
        return self.colony.world

    @property
    def config(self) -> HivemindConfig:
        return self.colony.config

    @property
    def room(self) -> Room | None:
        """The room the overlord is positioned in; None when not visible."""
        return self.world.room(self.pos.room_name)

    # -- creeps --

    def creeps(self, role: str) -> list[Zerg]:
        """Creeps of *role* currently assigned to this overlord."""
        return self.registry.creeps_of(self.ref, role)

    def wishlist(self, quantity: int, setup: CreepSetup, prespawn: int | None = None) -> None:
        """Declare that *quantity* creeps of ``setup.role`` are wanted.

        Creeps that will die within *prespawn* ticks do not count, so the
        replacement is requested early. Nothing is spawned here.
        """
        prespawn = self.config.prespawn_ticks if prespawn is None else prespawn
        current = [
            c for c in self.creeps(setup.role)
            if c.spawning or c.ticks_to_live is None or c.ticks_to_live > prespawn
        ]
        if len(current) < quantity:
            self.colony.spawn_queue.request(
                SpawnRequest(setup=setup, overlord_ref=self.ref, priority=self.priority, colony=self.colony.name)
            )
        self.creep_usage_report[setup.role] = (len(current), quantity)

    def reassign_idle_creeps(self, role: str) -> list[ReassignResult]:
        """Adopt every creep of *role* in this colony that has no overlord."""
        results = []
        for zerg in self.colony.creeps_by_role(role):
            if self.registry.owner_ref(zerg.name) is None:
                results.append(self.registry.reassign(zerg, None, self.ref))
        adopted = [r.creep for r in results if r.ok]
        if adopted:
            logger.debug("%s adopted idle %s creeps: %s", self.ref, role, ", ".join(adopted))
        return results

    def flag_unreported_roles(self) -> None:
        """Mark roles this overlord holds creeps for but never wishlisted."""
        for role in self.registry.roles_of(self.ref):
            self.creep_usage_report.setdefault(role, None)

    # -- tick protocol --

    @abstractmethod
    def init(self) -> None:
        """Declare demand (wishlists, reassignment)."""

    @abstractmethod
    def run(self) -> None:
        """Direct this overlord's creeps for the current tick."""
