"""Colony-level fortify overlord: keeps walls and ramparts topped up."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hivemind.core.enums import Role
from hivemind.overlords.base import Overlord
from hivemind.overlords.priorities import OverlordPriority
from hivemind.overlords.setups import WORKER_SETUP
from hivemind.tasks import Tasks

if TYPE_CHECKING:
    from hivemind.core.models import Structure
    from hivemind.core.zerg import Zerg
    from hivemind.engine.colony import Colony

logger = logging.getLogger(__name__)


class FortifyOverlord(Overlord):
    """Hands the weakest barrier to each idle worker carrying energy."""

    def __init__(self, colony: Colony, priority: int = OverlordPriority.FORTIFY) -> None:
        super().__init__(colony, "fortify", priority)

    @property
    def workers(self) -> list[Zerg]:
        return self.creeps(Role.WORKER)

    def fortify_targets(self) -> list[Structure]:
        """Barriers below the hits target, least targeted then weakest first."""
        room = self.room
        if room is None:
            return []
        limit = self.config.fortify_hits_target
        barriers = [b for b in room.barriers if b.hits < min(b.hits_max, limit)]
        return sorted(barriers, key=lambda b: (len(self.registry.targeting(b.ref)), b.hits))

    def handle_worker(self, worker: Zerg) -> None:
        if worker.carry_energy == 0:
            worker.park(self.colony.pos)
            return
        targets = self.fortify_targets()
        if targets:
            worker.set_task(Tasks.fortify(targets[0]))

    def init(self) -> None:
        if self.config.fortifier_wishlist > 0:
            self.reassign_idle_creeps(Role.WORKER)
        self.wishlist(self.config.fortifier_wishlist, WORKER_SETUP)

    def run(self) -> None:
        for worker in self.workers:
            if worker.is_idle:
                self.handle_worker(worker)
            worker.run()
