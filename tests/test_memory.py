"""Tests for the typed memory records."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from hivemind.core.enums import TaskKind
from hivemind.core.memory import (
    ColonyMemory,
    CreepMemory,
    DirectiveMemory,
    PosModel,
    TaskProto,
    load_record,
    store_record,
)
from hivemind.core.models import RoomPosition


class TestLoadRecord:
    def test_missing_record_gives_defaults(self):
        memory = load_record(CreepMemory, None)
        assert memory.role == ""
        assert memory.overlord is None
        assert memory.task is None

    def test_malformed_record_gives_defaults(self):
        memory = load_record(ColonyMemory, {"outposts": "not-a-list", "overseer": 7})
        assert memory.outposts == []
        assert memory.overseer.safe_mode_tick is None

    def test_unknown_keys_survive(self):
        raw = {"role": "guard", "boostLab": "L1"}
        memory = load_record(CreepMemory, raw)
        out: dict = {}
        store_record(memory, out)
        assert out["boostLab"] == "L1"

    def test_nested_task_chain(self):
        raw = {
            "role": "worker",
            "task": {
                "kind": int(TaskKind.GO_TO),
                "target_pos": {"x": 1, "y": 2, "room_name": "W1N1"},
                "parent": {"kind": int(TaskKind.FORTIFY), "target_ref": "wall-1",
                           "target_pos": {"x": 3, "y": 4, "room_name": "W1N1"}},
            },
        }
        memory = load_record(CreepMemory, raw)
        assert isinstance(memory.task, TaskProto)
        assert memory.task.kind == TaskKind.GO_TO
        assert memory.task.parent.target_ref == "wall-1"
        assert memory.task.parent.parent is None


class TestStoreRecord:
    def test_updates_in_place_and_drops_none(self):
        raw = {"role": "guard", "overlord": "guard:abc>guard"}
        same = raw
        memory = load_record(CreepMemory, raw)
        memory.overlord = None
        store_record(memory, raw)
        assert raw is same
        assert raw == {"role": "guard"}

    def test_waypoint_round_trip(self):
        memory = DirectiveMemory(recovery_waypoint=PosModel.of(RoomPosition(40, 25, "W2N1")))
        raw: dict = {}
        store_record(memory, raw)
        assert raw["recovery_waypoint"] == {"x": 40, "y": 25, "room_name": "W2N1"}
        assert load_record(DirectiveMemory, raw).recovery_waypoint.to_pos() == RoomPosition(40, 25, "W2N1")

    def test_task_options_store_only_movement(self):
        raw = {
            "role": "sieger",
            "task": {
                "kind": int(TaskKind.GO_TO),
                "target_pos": {"x": 40, "y": 25, "room_name": "W2N1"},
                "options": {"blind": True, "move_options": {"range": 3}},
            },
        }
        memory = load_record(CreepMemory, raw)
        store_record(memory, raw)
        assert set(raw["task"]["options"]) == {"move_options"}
        assert raw["task"]["options"]["move_options"]["range"] == 3
