"""dismantle: take a structure apart with WORK parts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hivemind.core.enums import BodyPart, ResultCode, TaskKind
from hivemind.tasks.base import Task

if TYPE_CHECKING:
    from hivemind.core.memory import TaskOptions
    from hivemind.core.models import RoomPosition, Structure


class TaskDismantle(Task):
    kind = TaskKind.DISMANTLE
    target: Structure | None

    def __init__(
        self,
        target: Structure | None,
        options: TaskOptions | None = None,
        *,
        target_pos: RoomPosition | None = None,
    ) -> None:
        super().__init__(target, options, target_pos=target_pos)

    def is_valid_task(self) -> bool:
        assert self.creep is not None
        return self.creep.get_active_bodyparts(BodyPart.WORK) > 0

    def is_valid_target(self) -> bool:
        return self.target is not None and self.target.hits > 0

    def work(self) -> ResultCode:
        assert self.creep is not None and self.target is not None
        return self.creep.dismantle(self.target)
