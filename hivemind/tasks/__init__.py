"""Task chain: resumable units of work bound to one creep.

``Tasks`` is the factory used by overlords; ``Tasks.from_proto`` rebuilds a
persisted chain against the current world state at the start of a tick.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from hivemind.core.enums import TaskKind
from hivemind.tasks.base import Task, UnwindResult
from hivemind.tasks.dismantle import TaskDismantle
from hivemind.tasks.fortify import TaskFortify
from hivemind.tasks.go_to import TaskGoTo

if TYPE_CHECKING:
    from hivemind.core.interfaces import WorldQuery
    from hivemind.core.memory import TaskOptions, TaskProto
    from hivemind.core.models import HasPosLike, Structure


class Tasks:
    """Constructors for every task kind."""

    @staticmethod
    def go_to(target: HasPosLike, options: TaskOptions | None = None) -> TaskGoTo:
        return TaskGoTo(target, options)

    @staticmethod
    def dismantle(target: Structure, options: TaskOptions | None = None) -> TaskDismantle:
        return TaskDismantle(target, options)

    @staticmethod
    def fortify(target: Structure, options: TaskOptions | None = None) -> TaskFortify:
        return TaskFortify(target, options)

    @staticmethod
    def chain(*tasks: Task) -> Task:
        """Link *tasks* so each is the parent of the one before it; returns the head."""
        for child, parent in zip(tasks, tasks[1:]):
            child.parent = parent
        return tasks[0]

    @staticmethod
    def from_proto(proto: TaskProto, world: WorldQuery) -> Task:
        """Rebuild a persisted chain, resolving targets against *world*."""
        protos: list[TaskProto] = []
        node: TaskProto | None = proto
        while node is not None:
            protos.append(node)
            node = node.parent

        parent: Task | None = None
        for p in reversed(protos):
            task = _instantiate(p, world)
            task.parent = parent
            parent = task
        assert parent is not None
        return parent


def _instantiate(proto: TaskProto, world: WorldQuery) -> Task:
    target = world.get_object_by_id(proto.target_ref) if proto.target_ref else None
    pos = target.pos if target is not None else proto.target_pos.to_pos()

    task: Task
    match proto.kind:
        case TaskKind.GO_TO:
            task = TaskGoTo(pos)
        case TaskKind.DISMANTLE:
            task = TaskDismantle(target, target_pos=pos)  # type: ignore[arg-type]
        case TaskKind.FORTIFY:
            task = TaskFortify(target, target_pos=pos)  # type: ignore[arg-type]
        case _:
            raise ValueError(f"Unknown task kind {proto.kind!r}")

    # Targets that no longer exist keep their ref so the index stays consistent.
    task.target_ref = proto.target_ref
    task.settings = proto.settings.model_copy()
    task.options = proto.options.model_copy(deep=True)
    task.tick = proto.tick
    return task


__all__ = ["Task", "TaskDismantle", "TaskFortify", "TaskGoTo", "Tasks", "UnwindResult"]
