"""Typed views over persisted memory records.

The world collaborator stores memory as plain JSON-compatible dicts. These
pydantic models validate what is read back at the start of every tick and
produce the dicts that are written out again.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hivemind.core.enums import TaskKind
from hivemind.core.models import RoomPosition

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class PosModel(BaseModel):
    x: int
    y: int
    room_name: str

    @classmethod
    def of(cls, pos: RoomPosition) -> PosModel:
        return cls(x=pos.x, y=pos.y, room_name=pos.room_name)

    def to_pos(self) -> RoomPosition:
        return RoomPosition(self.x, self.y, self.room_name)


# --- Movement / tasks ---

class MoveOptions(BaseModel):
    """Options forwarded to the travel command."""

    range: int = 1
    allow_hostile: bool = False
    ignore_creeps: bool = True
    off_road: bool = False


class TaskSettings(BaseModel):
    """Behavioural parameters of a task kind."""

    target_range: int = 1
    work_off_road: bool = False
    one_shot: bool = False


class TaskOptions(BaseModel):
    """Per-instance options set by whoever issued the task."""

    move_options: MoveOptions | None = None


class TaskProto(BaseModel):
    """Serialised task chain; ``parent`` nests the rest of the chain."""

    kind: TaskKind
    target_ref: str = ""
    target_pos: PosModel
    settings: TaskSettings = Field(default_factory=TaskSettings)
    options: TaskOptions = Field(default_factory=TaskOptions)
    parent: TaskProto | None = None
    tick: int = 0


TaskProto.model_rebuild()


# --- Records ---

class CreepMemory(BaseModel):
    model_config = ConfigDict(extra="allow")

    role: str = ""
    colony: str | None = None
    overlord: str | None = None
    task: TaskProto | None = None


class DirectiveMemory(BaseModel):
    model_config = ConfigDict(extra="allow")

    created: int | None = None
    persistent: bool = False
    colony: str | None = None
    safe_since: int | None = None
    amount: int | None = None
    recovery_waypoint: PosModel | None = None


class OverseerMemory(BaseModel):
    model_config = ConfigDict(extra="allow")

    safe_mode_tick: int | None = None


class ColonyMemory(BaseModel):
    model_config = ConfigDict(extra="allow")

    outposts: list[str] = Field(default_factory=list)
    incubator: str | None = None
    overseer: OverseerMemory = Field(default_factory=OverseerMemory)


def load_record(model: type[M], raw: Mapping[str, Any] | None) -> M:
    """Validate *raw* as *model*; malformed records are replaced by defaults."""
    try:
        return model.model_validate(dict(raw or {}))
    except ValidationError as exc:
        logger.warning("Discarding malformed %s record (%d errors)", model.__name__, exc.error_count())
        return model()


def store_record(record: BaseModel, raw: dict[str, Any]) -> None:
    """Write *record* back into the mutable memory dict *raw* in place."""
    raw.clear()
    raw.update(record.model_dump(mode="json", exclude_none=True))
