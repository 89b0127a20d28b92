"""Assignment registry: which overlord owns which creep, and who targets what.

One instance is owned by the Hivemind and passed by reference to every
colony, overseer, overlord and creep wrapper. It is rebuilt from creep
memory at the start of each tick and mutated synchronously afterwards, so no
component ever reads a stale bucket mid-tick.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from hivemind.core.zerg import Zerg
    from hivemind.overlords.base import Overlord

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReassignResult:
    """Outcome of a reassignment; ``previous``/``current`` are overlord refs."""

    ok: bool
    creep: str
    previous: str | None
    current: str | None
    reason: str = ""


class AssignmentRegistry:
    """Creep -> overlord index with per-overlord role buckets and a target index."""

    __slots__ = ("_owner", "_buckets", "_overlords", "_zergs", "_targets")

    def __init__(self) -> None:
        self._owner: dict[str, str] = {}                          # creep name -> overlord ref
        self._buckets: dict[str, dict[str, list[str]]] = {}       # overlord ref -> role -> [creep name]
        self._overlords: dict[str, Overlord] = {}                 # overlord ref -> live overlord
        self._zergs: dict[str, Zerg] = {}                         # creep name -> wrapper (this tick)
        self._targets: dict[str, set[str]] = defaultdict(set)     # target ref -> {creep name}

    # -- tick lifecycle --

    def load(self, zergs: Iterable[Zerg]) -> None:
        """Rebuild every index from the creeps' persisted memory."""
        self._owner.clear()
        self._buckets.clear()
        self._overlords.clear()
        self._targets.clear()
        self._zergs = {z.name: z for z in zergs}
        for zerg in self._zergs.values():
            ref = zerg.memory.overlord
            if ref:
                self._insert(zerg.name, zerg.role, ref)
            if zerg.memory.task is not None and zerg.memory.task.target_ref:
                self._targets[zerg.memory.task.target_ref].add(zerg.name)

    def release_orphans(self) -> list[str]:
        """Detach creeps whose overlord no longer exists (e.g. its directive was removed)."""
        orphans = [name for name, ref in self._owner.items() if ref not in self._overlords]
        for name in orphans:
            self._release(name)
        if orphans:
            logger.debug("Released %d orphaned creeps: %s", len(orphans), ", ".join(orphans))
        return orphans

    # -- overlords --

    def register_overlord(self, overlord: Overlord) -> None:
        self._overlords[overlord.ref] = overlord

    def unregister_overlord(self, ref: str) -> list[str]:
        """Forget *ref* and release every creep assigned to it."""
        self._overlords.pop(ref, None)
        names = [n for role_names in self._buckets.get(ref, {}).values() for n in role_names]
        for name in names:
            self._release(name)
        self._buckets.pop(ref, None)
        return names

    def overlord(self, ref: str | None) -> Overlord | None:
        if ref is None:
            return None
        return self._overlords.get(ref)

    def overlord_of(self, creep_name: str) -> Overlord | None:
        return self.overlord(self._owner.get(creep_name))

    def owner_ref(self, creep_name: str) -> str | None:
        return self._owner.get(creep_name)

    @property
    def overlords(self) -> dict[str, Overlord]:
        return dict(self._overlords)

    # -- creeps --

    def zerg(self, name: str) -> Zerg | None:
        return self._zergs.get(name)

    @property
    def zergs(self) -> list[Zerg]:
        return list(self._zergs.values())

    def creeps_of(self, ref: str, role: str) -> list[Zerg]:
        names = self._buckets.get(ref, {}).get(role, [])
        return [self._zergs[n] for n in names if n in self._zergs]

    def roles_of(self, ref: str) -> list[str]:
        return [role for role, names in self._buckets.get(ref, {}).items() if names]

    def memberships(self, creep_name: str) -> list[tuple[str, str]]:
        """Every (overlord ref, role) bucket that lists *creep_name*."""
        return [
            (ref, role)
            for ref, roles in self._buckets.items()
            for role, names in roles.items()
            if creep_name in names
        ]

    def reassign(self, zerg: Zerg, from_ref: str | None, to_ref: str | None) -> ReassignResult:
        """Move *zerg* from *from_ref* to *to_ref* as one remove-then-insert step.

        Rejected when *from_ref* is not the creep's current owner, or when
        *to_ref* names an overlord that is not registered.
        """
        current = self._owner.get(zerg.name)
        if current != from_ref:
            logger.debug("Rejected reassign of %s: owned by %s, not %s", zerg.name, current, from_ref)
            return ReassignResult(False, zerg.name, current, current, "stale source assignment")
        if to_ref is not None and to_ref not in self._overlords:
            return ReassignResult(False, zerg.name, current, current, f"unknown overlord {to_ref}")
        if current == to_ref:
            return ReassignResult(True, zerg.name, current, current, "unchanged")

        if current is not None:
            self._remove(zerg.name, current)
        if to_ref is not None:
            self._insert(zerg.name, zerg.role, to_ref)
        zerg.bind_overlord_ref(to_ref)
        return ReassignResult(True, zerg.name, current, to_ref)

    def assign(self, zerg: Zerg, overlord: Overlord | None) -> ReassignResult:
        """Reassign *zerg* from whatever currently owns it."""
        return self.reassign(zerg, self._owner.get(zerg.name), overlord.ref if overlord else None)

    # -- task targets --

    def register_target(self, target_ref: str, creep_name: str) -> None:
        if target_ref:
            self._targets[target_ref].add(creep_name)

    def unregister_target(self, target_ref: str, creep_name: str) -> None:
        names = self._targets.get(target_ref)
        if names is None:
            return
        names.discard(creep_name)
        if not names:
            del self._targets[target_ref]

    def targeting(self, target_ref: str) -> set[str]:
        return set(self._targets.get(target_ref, set()))

    # -- reporting --

    def snapshot(self) -> dict[str, dict[str, int]]:
        return {
            ref: {role: len(names) for role, names in roles.items() if names}
            for ref, roles in self._buckets.items()
        }

    # -- internals --

    def _insert(self, name: str, role: str, ref: str) -> None:
        self._owner[name] = ref
        bucket = self._buckets.setdefault(ref, {}).setdefault(role, [])
        if name not in bucket:
            bucket.append(name)

    def _remove(self, name: str, ref: str) -> None:
        self._owner.pop(name, None)
        for names in self._buckets.get(ref, {}).values():
            if name in names:
                names.remove(name)

    def _release(self, name: str) -> None:
        ref = self._owner.get(name)
        if ref is not None:
            self._remove(name, ref)
        zerg = self._zergs.get(name)
        if zerg is not None:
            zerg.bind_overlord_ref(None)
