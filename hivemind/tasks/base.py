"""Task base class and the parent-chain unwind.

A task binds one creep to one target (or a bare position) and performs a
single capability call per tick once the creep is in range. Tasks form a
singly linked chain through ``parent``: when the head becomes invalid it is
finished and the creep falls back to the parent, repeatedly, until a valid
task is found or the chain is exhausted.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from hivemind.core.enums import ResultCode, TaskKind
from hivemind.core.memory import MoveOptions, PosModel, TaskOptions, TaskProto, TaskSettings
from hivemind.core.models import RoomPosition, pos_of

if TYPE_CHECKING:
    from hivemind.core.models import Creep, Structure
    from hivemind.core.zerg import Zerg

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UnwindResult:
    """Where a chain unwind ended up.

    ``task`` is the surviving task (None when the creep is now idle) and
    ``popped`` the number of invalid tasks that were finished on the way.
    """

    task: Task | None
    popped: int

    @property
    def fell_back(self) -> bool:
        return self.popped > 0


class Task(ABC):
    """A resumable unit of work for one creep."""

    kind: ClassVar[TaskKind]

    def __init__(
        self,
        target: Creep | Structure | None,
        options: TaskOptions | None = None,
        *,
        target_pos: RoomPosition | None = None,
    ) -> None:
        if target_pos is None:
            if target is None:
                raise ValueError(f"{type(self).__name__} needs a target or a target position")
            target_pos = pos_of(target)
        self.target = target
        self.target_ref: str = target.ref if target is not None else ""
        self.target_pos: RoomPosition = target_pos
        self.settings = TaskSettings()
        self.options = options or TaskOptions()
        self.parent: Task | None = None
        self.creep: Zerg | None = None
        self.tick: int = 0

    @property
    def name(self) -> str:
        return self.kind.name.lower()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(target={self.target_ref or self.target_pos}, parent={self.parent!r})"

    # -- chain --

    @property
    def chain(self) -> list[Task]:
        """This task followed by its ancestors."""
        result: list[Task] = []
        node: Task | None = self
        while node is not None:
            result.append(node)
            node = node.parent
        return result

    def bind(self, creep: Zerg) -> None:
        """Attach *creep* to this task and every ancestor."""
        for node in self.chain:
            node.creep = creep
            if node.tick == 0:
                node.tick = creep.world.time

    def fork(self, new_task: Task) -> Task:
        """Push *new_task* in front of this one; this task becomes its parent."""
        new_task.parent = self
        if self.creep is not None:
            self.creep.set_task(new_task)
        return new_task

    @property
    def proto(self) -> TaskProto:
        """Serialise the whole chain, innermost parent first."""
        proto: TaskProto | None = None
        for node in reversed(self.chain):
            proto = TaskProto(
                kind=node.kind,
                target_ref=node.target_ref,
                target_pos=PosModel.of(node.target_pos),
                settings=node.settings.model_copy(),
                options=node.options.model_copy(deep=True),
                parent=proto,
                tick=node.tick,
            )
        assert proto is not None
        return proto

    # -- validity --

    @abstractmethod
    def is_valid_task(self) -> bool:
        """Creep-side precondition."""

    @abstractmethod
    def is_valid_target(self) -> bool:
        """Target-side precondition."""

    def _holds(self) -> bool:
        if self.creep is None:
            return False
        return self.is_valid_task() and self.is_valid_target()

    def unwind(self) -> UnwindResult:
        """Finish invalid tasks from this one upward until one holds.

        Iterative, so chain depth never grows the call stack. Every task that
        fails is finished, which hands the creep to its parent.
        """
        node: Task | None = self
        popped = 0
        while node is not None:
            if node._holds():
                if popped:
                    logger.debug("%s fell back %d task(s) to %s", _creep_name(node), popped, node.name)
                return UnwindResult(node, popped)
            parent = node.parent
            node.finish()
            node = parent
            popped += 1
        return UnwindResult(None, popped)

    def is_valid(self) -> bool:
        """True if this task or some ancestor is still valid.

        Says nothing about whether this particular task survived.
        """
        return self.unwind().task is not None

    def finish(self) -> None:
        """Detach this task; the creep continues with the parent (or goes idle)."""
        creep = self.creep
        parent = self.parent
        self.parent = None
        self.creep = None
        if creep is None:
            logger.debug("No creep executing %s", self.name)
            return
        if creep.task is self:
            creep.set_task(parent)

    # -- execution --

    def move_to_target(self) -> ResultCode:
        assert self.creep is not None
        options = self.options.move_options or MoveOptions(range=self.settings.target_range)
        return self.creep.travel_to(self.target_pos, options)

    def run(self) -> ResultCode:
        """Work if in range of the target, otherwise move toward it."""
        creep = self.creep
        assert creep is not None
        if creep.pos.in_range_to(self.target_pos, self.settings.target_range) and not creep.pos.is_edge:
            if self.settings.work_off_road:
                creep.park(self.target_pos, maintain_distance=True)
            result = self.work()
            if self.settings.one_shot and result == ResultCode.OK:
                self.finish()
            return result
        return self.move_to_target()

    @abstractmethod
    def work(self) -> ResultCode:
        """Perform the one underlying capability call."""


def _creep_name(task: Task) -> str:
    return task.creep.name if task.creep is not None else "?"
