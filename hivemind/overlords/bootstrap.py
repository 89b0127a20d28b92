"""Emergency bootstrap overlord: a minimal miner and filler to restart a crashed colony."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hivemind.core.enums import Role
from hivemind.overlords.base import Overlord
from hivemind.overlords.priorities import OverlordPriority
from hivemind.overlords.setups import FILLER_SETUP, MINER_SETUP

if TYPE_CHECKING:
    from hivemind.directives.core import DirectiveBootstrap


class BootstrapOverlord(Overlord):
    """Highest priority so its requests are served before anything else."""

    def __init__(self, directive: DirectiveBootstrap, priority: int = OverlordPriority.BOOTSTRAP) -> None:
        super().__init__(directive, "bootstrap", priority)

    def init(self) -> None:
        self.wishlist(self.config.bootstrap_wishlist, MINER_SETUP, prespawn=0)
        self.wishlist(self.config.bootstrap_wishlist, FILLER_SETUP, prespawn=0)

    def run(self) -> None:
        for zerg in self.creeps(Role.MINER) + self.creeps(Role.FILLER):
            if not zerg.pos.in_range_to(self.pos, 2):
                zerg.travel_to(self.pos)
            else:
                zerg.park(self.pos, maintain_distance=True)
