"""GET /api/v1/config: expose the Hivemind configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from hivemind.api.dependencies import get_engine_manager
from hivemind.api.engine_manager import EngineManager
from hivemind.api.schemas import HivemindConfigResponse

router = APIRouter()


@router.get("/config", response_model=HivemindConfigResponse)
def get_config(
    manager: EngineManager = Depends(get_engine_manager),
) -> HivemindConfigResponse:
    cfg = manager.config
    return HivemindConfigResponse(
        seed=cfg.seed,
        max_ticks=cfg.max_ticks,
        spawn_interval=cfg.spawn_interval,
        emergency_energy_threshold=cfg.emergency_energy_threshold,
        invasion_pressure_threshold=cfg.invasion_pressure_threshold,
        guard_swarm_grace_ticks=cfg.guard_swarm_grace_ticks,
        siege_retreat_hits_percent=cfg.siege_retreat_hits_percent,
        siege_advance_hits_percent=cfg.siege_advance_hits_percent,
        fortify_hits_target=cfg.fortify_hits_target,
        tick_rate=manager.tick_rate,
    )
