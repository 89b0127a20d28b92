"""WorldLoop: drives the Hivemind against a sandbox world.

Tick cycle:
  1. Decide: Hivemind build / init / run over every colony
  2. Spawn: every ``spawn_interval`` ticks, serve each colony's top request
  3. Advance: hostiles act, the dead are swept, time moves on
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hivemind.engine.hivemind import Hivemind

if TYPE_CHECKING:
    from hivemind.config import HivemindConfig
    from hivemind.sandbox.world import SandboxWorld
    from hivemind.utils.event_log import EventLog

logger = logging.getLogger(__name__)


class WorldLoop:
    """Single-threaded tick loop over one sandbox world."""

    __slots__ = ("_config", "_world", "_hivemind")

    def __init__(
        self,
        config: HivemindConfig,
        world: SandboxWorld,
        hivemind: Hivemind | None = None,
        events: EventLog | None = None,
    ) -> None:
        self._config = config
        self._world = world
        self._hivemind = hivemind or Hivemind(world, config, events=events)

    @property
    def world(self) -> SandboxWorld:
        return self._world

    @property
    def hivemind(self) -> Hivemind:
        return self._hivemind

    def tick_once(self) -> bool:
        """Execute a single tick. Returns False if the run should stop."""
        tick = self._world.time
        if tick >= self._config.max_ticks:
            logger.info("Tick %d: Max ticks reached.", tick)
            return False
        self._hivemind.tick()
        self._serve_spawn_queues()
        self._world.advance()
        return True

    def run(self) -> None:
        """Tick until ``max_ticks``."""
        logger.info("=== Hivemind started (seed=%d) ===", self._config.seed)
        while self.tick_once():
            if self._world.time % 50 == 0:
                logger.info(
                    "Tick %d: %d creeps, %d flags",
                    self._world.time,
                    len(self._world.own_creeps()),
                    len(self._world.flags()),
                )
        logger.info("=== Hivemind finished at tick %d ===", self._world.time)

    def _serve_spawn_queues(self) -> None:
        interval = self._config.spawn_interval
        if interval <= 0 or self._world.time % interval != 0:
            return
        for colony in self._hivemind.colonies.values():
            request = colony.spawn_queue.pop_next()
            if request is not None:
                self._world.spawn(request)
