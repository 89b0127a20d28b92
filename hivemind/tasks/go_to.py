"""goTo: pure movement toward a position."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hivemind.core.enums import ResultCode, TaskKind
from hivemind.core.models import pos_of
from hivemind.tasks.base import Task

if TYPE_CHECKING:
    from hivemind.core.memory import TaskOptions
    from hivemind.core.models import HasPosLike


class TaskGoTo(Task):
    """Valid until the creep is within ``target_range`` of the destination."""

    kind = TaskKind.GO_TO

    def __init__(self, target: HasPosLike, options: TaskOptions | None = None) -> None:
        super().__init__(None, options, target_pos=pos_of(target))
        self.settings.target_range = 1

    def is_valid_task(self) -> bool:
        assert self.creep is not None
        return not self.creep.pos.in_range_to(self.target_pos, self.settings.target_range)

    def is_valid_target(self) -> bool:
        return True

    def work(self) -> ResultCode:
        return ResultCode.OK
