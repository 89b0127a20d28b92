"""fortify: repair a wall or rampart with carried energy."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hivemind.core.enums import ResultCode, TaskKind
from hivemind.tasks.base import Task

if TYPE_CHECKING:
    from hivemind.core.memory import TaskOptions
    from hivemind.core.models import RoomPosition, Structure


class TaskFortify(Task):
    kind = TaskKind.FORTIFY
    target: Structure | None

    def __init__(
        self,
        target: Structure | None,
        options: TaskOptions | None = None,
        *,
        target_pos: RoomPosition | None = None,
    ) -> None:
        super().__init__(target, options, target_pos=target_pos)
        self.settings.work_off_road = True

    def is_valid_task(self) -> bool:
        assert self.creep is not None
        return self.creep.carry_energy > 0

    def is_valid_target(self) -> bool:
        # Anything below max counts; topping off saves a return trip.
        return self.target is not None and self.target.hits < self.target.hits_max

    def work(self) -> ResultCode:
        assert self.creep is not None and self.target is not None
        return self.creep.repair(self.target)
