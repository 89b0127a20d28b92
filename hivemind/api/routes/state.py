"""GET /api/v1/state, /colonies/{name} and /events: live colony data."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from hivemind.api.dependencies import get_engine_manager
from hivemind.api.engine_manager import EngineManager
from hivemind.api.schemas import (
    ColonySchema,
    CreepSchema,
    EventSchema,
    FlagSchema,
    HostileSchema,
    OverlordSchema,
    RoleUsageSchema,
    WorldStateResponse,
)
from hivemind.engine.snapshot import ColonyView, Snapshot
from hivemind.utils.event_log import SimEvent

router = APIRouter()


def _require_snapshot(manager: EngineManager) -> Snapshot:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=503, detail="No snapshot available yet.")
    return snapshot


def _serialize_colony(c: ColonyView) -> ColonySchema:
    return ColonySchema(
        name=c.name,
        outposts=list(c.outposts),
        energy_available=c.energy_available,
        energy_capacity_available=c.energy_capacity_available,
        directives=list(c.directives),
        overlords=[
            OverlordSchema(
                ref=o.ref,
                priority=o.priority,
                creeps=dict(o.creeps),
                usage={role: RoleUsageSchema(current=cur, needed=need) for role, (cur, need) in o.usage.items()},
            )
            for o in c.overlords
        ],
        roles=dict(c.roles),
        safe_mode_tick=c.safe_mode_tick,
    )


def _serialize_event(ev: SimEvent) -> EventSchema:
    return EventSchema(tick=ev.tick, category=ev.category, message=ev.message, refs=list(ev.refs))


@router.get("/state", response_model=WorldStateResponse)
def get_state(
    since_tick: int = Query(0, ge=0, description="Only return events since this tick"),
    manager: EngineManager = Depends(get_engine_manager),
) -> WorldStateResponse:
    snapshot = _require_snapshot(manager)

    creeps = [
        CreepSchema(
            name=c.name, role=c.role, room=c.room, x=c.x, y=c.y,
            hits=c.hits, hits_max=c.hits_max,
            colony=c.colony, overlord=c.overlord, task=c.task,
        )
        for c in snapshot.creeps
    ]
    hostiles = [
        HostileSchema(id=h.id, owner=h.owner, room=h.room, x=h.x, y=h.y, hits=h.hits, hits_max=h.hits_max)
        for h in snapshot.hostiles
    ]
    flags = [FlagSchema(name=f.name, kind=f.kind, room=f.room, x=f.x, y=f.y) for f in snapshot.flags]

    return WorldStateResponse(
        tick=snapshot.tick,
        creeps=creeps,
        hostiles=hostiles,
        flags=flags,
        colonies=[_serialize_colony(c) for c in snapshot.colonies.values()],
        events=[_serialize_event(ev) for ev in manager.event_log.since_tick(since_tick)],
    )


@router.get("/colonies/{name}", response_model=ColonySchema)
def get_colony(
    name: str,
    manager: EngineManager = Depends(get_engine_manager),
) -> ColonySchema:
    snapshot = _require_snapshot(manager)
    colony = snapshot.colonies.get(name)
    if colony is None:
        raise HTTPException(status_code=404, detail=f"Colony {name!r} not found.")
    return _serialize_colony(colony)


@router.get("/events", response_model=list[EventSchema])
def get_events(
    limit: int = Query(50, ge=1, le=1000),
    category: str | None = Query(None, description="Only return events of this category"),
    manager: EngineManager = Depends(get_engine_manager),
) -> list[EventSchema]:
    log = manager.event_log
    events = log.by_category(category)[-limit:] if category else log.latest(limit)
    return [_serialize_event(ev) for ev in events]
