"""Hivemind configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HivemindConfig:
    """Immutable configuration shared by every colony component."""

    # Naming
    seed: int = 42

    # Reactive directive placement
    emergency_energy_threshold: int = 1300
    invasion_pressure_threshold: int = 3
    boosted_hostile_weight: int = 2        # Boosted hostiles count this many times toward pressure

    # Directive lifecycle
    guard_swarm_grace_ticks: int = 100
    guard_safe_ticks: int = 100
    invasion_safe_ticks: int = 100

    # Overlords
    guard_wishlist: int = 1
    guard_reassign_idle: bool = True       # Adopt owner-less guards of the colony
    siege_wishlist: int = 3
    siege_retreat_hits_percent: float = 0.75
    siege_advance_hits_percent: float = 1.0
    prespawn_ticks: int = 50
    fortifier_wishlist: int = 1
    fortify_hits_target: int = 100_000
    dismantler_wishlist: int = 1
    bootstrap_wishlist: int = 1

    # Combat
    ranged_range: int = 3

    # Reporting
    usage_report_interval: int = 50        # Ticks between creep usage log lines

    # Sandbox / runner
    max_ticks: int = 500
    spawn_interval: int = 10
    pathfinder_max_nodes: int = 2500

    # Logging
    log_level: str = "INFO"
