"""EngineManager: runs the WorldLoop on a background thread.

The API reads from an atomically swapped immutable Snapshot; the WorldLoop
mutates the sandbox exclusively on its own thread.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

from hivemind.engine.snapshot import Snapshot
from hivemind.engine.world_loop import WorldLoop
from hivemind.sandbox.scenarios import build_demo_world
from hivemind.utils.event_log import EventLog

if TYPE_CHECKING:
    from hivemind.config import HivemindConfig
    from hivemind.sandbox.world import SandboxWorld

logger = logging.getLogger(__name__)


class EngineManager:
    """Manages the tick loop lifecycle on a background thread.

    Provides thread-safe access to:
      - latest snapshot (atomic reference swap)
      - event log (lock-guarded ring buffer)
      - control commands (start / pause / resume / step / reset)
    """

    def __init__(self, config: HivemindConfig, world: SandboxWorld | None = None) -> None:
        self._config = config
        self.config = config
        self._tick_rate: float = 0.05  # seconds between ticks (20 tps default)
        self._initial_world = world

        self._loop: WorldLoop | None = None

        # Thread-safe shared state
        self._snapshot_lock = threading.Lock()
        self._latest_snapshot: Snapshot | None = None
        self._event_log = EventLog()

        # Control
        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._step_requested = threading.Event()
        self._stop_requested = threading.Event()

        self._build()

    # -- public properties --

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def tick_rate(self) -> float:
        return self._tick_rate

    @tick_rate.setter
    def tick_rate(self, value: float) -> None:
        self._tick_rate = max(0.01, min(value, 2.0))

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    # -- snapshot access --

    def get_snapshot(self) -> Snapshot | None:
        with self._snapshot_lock:
            return self._latest_snapshot

    # -- lifecycle --

    def start(self) -> None:
        if self._running.is_set():
            return
        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="hivemind-loop", daemon=True)
        self._thread.start()
        logger.info("EngineManager started (tick_rate=%.3fs)", self._tick_rate)

    def pause(self) -> None:
        self._paused.set()
        logger.info("EngineManager paused at tick %d", self._current_tick())

    def resume(self) -> None:
        self._paused.clear()
        logger.info("EngineManager resumed at tick %d", self._current_tick())

    def step(self) -> None:
        """Execute exactly one tick (must be paused)."""
        if not self._paused.is_set():
            self.pause()
        self._step_requested.set()

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        self._running.clear()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)
        logger.info("EngineManager stopped.")

    def reset(self) -> None:
        """Stop, rebuild the demo world, and leave the manager ready to start."""
        self.stop()
        self._event_log.clear()
        self._initial_world = None
        self._build()
        logger.info("EngineManager reset.")

    def tick_sync(self) -> bool:
        """Run one tick on the caller's thread. Only valid while the loop thread is not running."""
        if self._running.is_set():
            raise RuntimeError("tick_sync called while the loop thread is running")
        assert self._loop is not None
        can_continue = self._loop.tick_once()
        self._publish_snapshot()
        return can_continue

    # -- internals --

    def _build(self) -> None:
        world = self._initial_world or build_demo_world(self._config)
        self._loop = WorldLoop(self._config, world, events=self._event_log)
        self._publish_snapshot()

    def _run_loop(self) -> None:
        """Background thread main loop."""
        logger.info("Engine thread started.")
        assert self._loop is not None

        while not self._stop_requested.is_set():
            if self._paused.is_set() and not self._step_requested.is_set():
                time.sleep(0.01)
                continue

            single_step = self._step_requested.is_set()
            if single_step:
                self._step_requested.clear()

            can_continue = self._loop.tick_once()
            self._publish_snapshot()
            if not can_continue:
                logger.info("Run ended at tick %d.", self._loop.world.time)
                break

            if not single_step:
                time.sleep(self._tick_rate)

        self._running.clear()
        logger.info("Engine thread exited.")

    def _publish_snapshot(self) -> None:
        assert self._loop is not None
        snap = Snapshot.from_loop(self._loop)
        with self._snapshot_lock:
            self._latest_snapshot = snap

    def _current_tick(self) -> int:
        if self._loop:
            return self._loop.world.time
        return 0
