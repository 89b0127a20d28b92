"""Overseer: the per-colony scheduler.

Tick protocol:
  init: directives (registration order), then overlords (ascending priority)
  run:  directives, overlords, safe-mode check, reactive directive placement,
        directive visuals and the creep usage report

Every directive and overlord call is fault-isolated: an exception is logged
with its traceback, recorded as a ``fault`` event, and the remaining
components still run.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from hivemind.core.enums import BodyPart, ResultCode, Role
from hivemind.core.memory import OverseerMemory
from hivemind.directives.combat import DirectiveGuard, DirectiveGuardSwarm, DirectiveInvasionDefense
from hivemind.directives.core import DirectiveBootstrap
from hivemind.overlords.guard import hostile_pressure

if TYPE_CHECKING:
    from hivemind.core.models import Creep, Room
    from hivemind.directives.base import Directive
    from hivemind.engine.colony import Colony
    from hivemind.overlords.base import Overlord

logger = logging.getLogger(__name__)

_DANGEROUS_PARTS = (BodyPart.ATTACK, BodyPart.WORK, BodyPart.RANGED_ATTACK)


def creep_is_dangerous(creep: Creep) -> bool:
    return any(creep.get_active_bodyparts(part) > 0 for part in _DANGEROUS_PARTS)


class Overseer:
    """Runs one colony's directives and overlords each tick."""

    def __init__(self, colony: Colony) -> None:
        self.colony = colony
        self.directives: list[Directive] = []
        self._overlords: dict[int, list[Overlord]] = {}

    @property
    def memory(self) -> OverseerMemory:
        return self.colony.memory.overseer

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_directive(self, directive: Directive) -> None:
        self.directives.append(directive)

    def remove_directive(self, directive: Directive) -> None:
        if directive in self.directives:
            self.directives.remove(directive)

    def register_overlord(self, overlord: Overlord) -> None:
        """Insert *overlord* into the bucket for its priority."""
        self._overlords.setdefault(overlord.priority, []).append(overlord)

    def unregister_overlord(self, overlord: Overlord) -> None:
        bucket = self._overlords.get(overlord.priority)
        if bucket is None or overlord not in bucket:
            return
        bucket.remove(overlord)
        if not bucket:
            del self._overlords[overlord.priority]

    @property
    def overlords(self) -> list[Overlord]:
        """Every registered overlord in ascending priority, registration order within a bucket."""
        return [o for priority in sorted(self._overlords) for o in self._overlords[priority]]

    # ------------------------------------------------------------------
    # Tick phases
    # ------------------------------------------------------------------

    def init(self) -> None:
        for directive in list(self.directives):
            self._guarded(directive.ref, "init", directive.init)
        for overlord in self.overlords:
            self._guarded(overlord.ref, "init", overlord.init)

    def run(self) -> None:
        for directive in list(self.directives):
            self._guarded(directive.ref, "run", directive.run)
        # Directives removed above have already unregistered their overlords.
        for overlord in self.overlords:
            self._guarded(overlord.ref, "run", overlord.run)
        self._guarded(self.colony.name, "safe_mode", self.handle_safe_mode)
        self._guarded(self.colony.name, "place_directives", self.place_directives)
        for directive in list(self.directives):
            self._guarded(directive.ref, "visuals", directive.visuals)
        self.report_usage()

    def _guarded(self, ref: str, phase: str, fn: Callable[[], object]) -> bool:
        try:
            fn()
        except Exception:
            logger.exception("%s: %s failed during %s", self.colony.name, ref, phase)
            self.colony.emit("fault", f"{ref} failed during {phase}", (ref,))
            return False
        return True

    # ------------------------------------------------------------------
    # Reactive directive placement
    # ------------------------------------------------------------------

    def rooms_to_guard(self) -> list[Room]:
        """Outposts plus every room of the colonies this one is incubating."""
        names = list(self.colony.outposts)
        for incubating in self.colony.incubating_colonies:
            names.extend(incubating.rooms)
        rooms = (self.colony.world.room(n) for n in dict.fromkeys(names))
        return [r for r in rooms if r is not None]

    def place_directives(self) -> list[str]:
        """Create the directives current conditions call for. Idempotent.

        Returns the names of the flags placed this call.
        """
        colony = self.colony
        config = colony.config
        placed: list[str] = []

        for room in self.rooms_to_guard():
            defense_flags = [
                f for f in room.flags
                if DirectiveGuard.filter(f) or DirectiveInvasionDefense.filter(f) or DirectiveGuardSwarm.filter(f)
            ]
            if room.hostiles and not defense_flags:
                name = DirectiveGuard.create(room.hostiles[0].pos, colony)
                if name is not None:
                    placed.append(name)

        room = colony.room
        if room is not None:
            pressure = hostile_pressure(room.hostiles, config.boosted_hostile_weight)
            if pressure >= config.invasion_pressure_threshold and not DirectiveInvasionDefense.find(room.flags):
                name = DirectiveInvasionDefense.create(colony.pos, colony)
                if name is not None:
                    placed.append(name)

            if not colony.is_incubating:
                has_energy = room.energy_available >= config.emergency_energy_threshold
                has_miners = bool(colony.creeps_by_role(Role.MINER))
                has_queen = bool(colony.creeps_by_role(Role.QUEEN))
                bootstrapping = bool(DirectiveBootstrap.find(room.flags))
                hatchery = colony.hatchery
                if not (has_energy or has_miners or has_queen or bootstrapping) and hatchery is not None:
                    name = DirectiveBootstrap.create(hatchery.pos, colony)
                    if name is not None:
                        placed.append(name)

        return placed

    # ------------------------------------------------------------------
    # Safe mode
    # ------------------------------------------------------------------

    def handle_safe_mode(self) -> bool:
        """Activate safe mode if a dangerous player hostile can walk to the first spawn."""
        colony = self.colony
        room = colony.room
        spawns = colony.spawns
        if room is None or not spawns:
            return False
        barrier_positions = [b.pos for b in room.barriers]
        for hostile in room.player_hostiles:
            if not creep_is_dangerous(hostile):
                continue
            if not colony.pathing.is_reachable(hostile.pos, spawns[0].pos, barrier_positions):
                continue
            result = colony.world.activate_safe_mode(colony.name)
            if result != ResultCode.OK:
                logger.debug("Safe mode in %s not activated against %s: %s", colony.name, hostile.name, result.name)
                return False
            logger.info("Safe mode activated in %s against %s (%s)", colony.name, hostile.name, hostile.owner)
            self.memory.safe_mode_tick = colony.world.time
            colony.save()
            colony.emit("safe_mode", f"safe mode in {colony.name} against {hostile.owner}", (hostile.ref,))
            return True
        return False

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def role_occupancy(self) -> dict[str, tuple[int, int]]:
        """Sum of (current, needed) over every overlord, per role."""
        occupancy: dict[str, tuple[int, int]] = {}
        for overlord in self.overlords:
            overlord.flag_unreported_roles()
            for role, report in overlord.creep_usage_report.items():
                if report is None:
                    logger.warning("Role %s is not reported by %s", role, overlord.ref)
                    continue
                current, needed = occupancy.get(role, (0, 0))
                occupancy[role] = (current + report[0], needed + report[1])
        return occupancy

    def report_usage(self) -> list[str]:
        occupancy = self.role_occupancy()
        lines = [f"Creep usage for {self.colony.name}:"]
        pad = max((len(role) for role in occupancy), default=0) + 2
        for role, (current, needed) in occupancy.items():
            if needed > 0:
                lines.append(f"| {(role + ':').ljust(pad)}{int(100 * current / needed):>4}%")
        interval = self.colony.config.usage_report_interval
        if interval > 0 and self.colony.world.time % interval == 0:
            for line in lines:
                logger.info(line)
        return lines
