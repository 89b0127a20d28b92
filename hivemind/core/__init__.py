"""Core enums, value models, memory records, registry and the worker wrapper."""

from hivemind.core.actions import ActionGroup, ActionLog
from hivemind.core.enums import BodyPart, Capability, DirectiveKind, FlagColor, ResultCode, Role, TaskKind
from hivemind.core.models import Creep, Flag, Room, RoomPosition, Structure
from hivemind.core.registry import AssignmentRegistry, ReassignResult
from hivemind.core.zerg import Zerg

__all__ = [
    "ActionGroup",
    "ActionLog",
    "AssignmentRegistry",
    "BodyPart",
    "Capability",
    "Creep",
    "DirectiveKind",
    "Flag",
    "FlagColor",
    "ReassignResult",
    "ResultCode",
    "Role",
    "Room",
    "RoomPosition",
    "Structure",
    "TaskKind",
    "Zerg",
]
