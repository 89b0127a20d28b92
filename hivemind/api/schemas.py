"""Pydantic response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# --- Units ---

class CreepSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    role: str
    room: str
    x: int
    y: int
    hits: int
    hits_max: int
    colony: str | None = None
    overlord: str | None = None
    task: str | None = None


class HostileSchema(BaseModel):
    id: str
    owner: str
    room: str
    x: int
    y: int
    hits: int
    hits_max: int


class FlagSchema(BaseModel):
    name: str
    kind: str | None = Field(None, description="Directive kind, or null for an unused colour pair")
    room: str
    x: int
    y: int


# --- Colonies ---

class RoleUsageSchema(BaseModel):
    current: int
    needed: int


class OverlordSchema(BaseModel):
    ref: str
    priority: int
    creeps: dict[str, int] = Field(default_factory=dict)
    usage: dict[str, RoleUsageSchema] = Field(default_factory=dict)


class ColonySchema(BaseModel):
    name: str
    outposts: list[str] = Field(default_factory=list)
    energy_available: int = 0
    energy_capacity_available: int = 0
    directives: list[str] = Field(default_factory=list)
    overlords: list[OverlordSchema] = Field(default_factory=list)
    roles: dict[str, int] = Field(default_factory=dict)
    safe_mode_tick: int | None = None


# --- World State ---

class EventSchema(BaseModel):
    tick: int
    category: str
    message: str
    refs: list[str] = Field(default_factory=list)


class WorldStateResponse(BaseModel):
    tick: int
    creeps: list[CreepSchema]
    hostiles: list[HostileSchema] = Field(default_factory=list)
    flags: list[FlagSchema] = Field(default_factory=list)
    colonies: list[ColonySchema] = Field(default_factory=list)
    events: list[EventSchema] = Field(default_factory=list)


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    tick: int = 0


# --- Config ---

class HivemindConfigResponse(BaseModel):
    seed: int
    max_ticks: int
    spawn_interval: int
    emergency_energy_threshold: int
    invasion_pressure_threshold: int
    guard_swarm_grace_ticks: int
    siege_retreat_hits_percent: float
    siege_advance_hits_percent: float
    fortify_hits_target: int
    tick_rate: float
