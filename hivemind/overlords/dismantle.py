"""Dismantle overlord: take down one flagged structure."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hivemind.core.enums import Role
from hivemind.overlords.base import Overlord
from hivemind.overlords.priorities import OverlordPriority
from hivemind.overlords.setups import DISMANTLER_SETUP
from hivemind.tasks import Tasks

if TYPE_CHECKING:
    from hivemind.core.zerg import Zerg
    from hivemind.directives.targeting import DirectiveDismantle


class DismantleOverlord(Overlord):

    def __init__(self, directive: DirectiveDismantle, priority: int = OverlordPriority.DISMANTLE) -> None:
        super().__init__(directive, "dismantle", priority)
        self.directive = directive

    @property
    def dismantlers(self) -> list[Zerg]:
        return self.creeps(Role.DISMANTLER)

    def init(self) -> None:
        self.wishlist(self.config.dismantler_wishlist, DISMANTLER_SETUP)

    def run(self) -> None:
        target = self.directive.get_target()
        for dismantler in self.dismantlers:
            if dismantler.is_idle:
                if target is None:
                    dismantler.travel_to(self.pos)
                    continue
                dismantler.set_task(Tasks.dismantle(target))
            dismantler.run()
