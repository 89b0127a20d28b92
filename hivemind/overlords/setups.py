"""Creep setups: role name plus a repeating body pattern.

A setup is what an overlord hands to the spawn queue through ``wishlist``.
The body is generated against the spawning room's energy capacity when the
request is actually served.
"""

from __future__ import annotations

from dataclasses import dataclass

from hivemind.core.enums import BodyPart, Role

BODYPART_COST: dict[BodyPart, int] = {
    BodyPart.MOVE: 50,
    BodyPart.WORK: 100,
    BodyPart.CARRY: 50,
    BodyPart.ATTACK: 80,
    BodyPart.RANGED_ATTACK: 150,
    BodyPart.HEAL: 250,
    BodyPart.TOUGH: 10,
    BodyPart.CLAIM: 600,
}

MAX_CREEP_SIZE = 50


def body_cost(parts: tuple[BodyPart, ...] | list[BodyPart]) -> int:
    return sum(BODYPART_COST[p] for p in parts)


@dataclass(frozen=True, slots=True)
class CreepSetup:
    """Body template for one role."""

    role: str
    pattern: tuple[BodyPart, ...]
    size_limit: int = MAX_CREEP_SIZE // 2
    prefix: tuple[BodyPart, ...] = ()
    suffix: tuple[BodyPart, ...] = ()

    def generate_body(self, energy_capacity: int) -> list[BodyPart]:
        """Repeat the pattern as many times as energy and size allow.

        Returns an empty list if not even one repetition fits.
        """
        fixed = self.prefix + self.suffix
        pattern_cost = body_cost(self.pattern)
        budget = energy_capacity - body_cost(fixed)
        if pattern_cost <= 0 or budget < pattern_cost:
            return []
        room_for = (MAX_CREEP_SIZE - len(fixed)) // len(self.pattern)
        repeats = min(budget // pattern_cost, self.size_limit, room_for)
        return [*self.prefix, *(self.pattern * repeats), *self.suffix]


GUARD_SETUP = CreepSetup(Role.GUARD, (BodyPart.ATTACK, BodyPart.MOVE), size_limit=3, suffix=(BodyPart.HEAL, BodyPart.MOVE))
DEFENDER_SETUP = CreepSetup(Role.DEFENDER, (BodyPart.ATTACK, BodyPart.MOVE), size_limit=10)
WORKER_SETUP = CreepSetup(Role.WORKER, (BodyPart.WORK, BodyPart.CARRY, BodyPart.MOVE), size_limit=5)
DISMANTLER_SETUP = CreepSetup(Role.DISMANTLER, (BodyPart.WORK, BodyPart.MOVE), size_limit=10)
MINER_SETUP = CreepSetup(Role.MINER, (BodyPart.WORK, BodyPart.WORK, BodyPart.MOVE), size_limit=1)
FILLER_SETUP = CreepSetup(Role.FILLER, (BodyPart.CARRY, BodyPart.CARRY, BodyPart.MOVE), size_limit=1)


def sieger_setup(heal: bool = True) -> CreepSetup:
    suffix = (BodyPart.HEAL, BodyPart.MOVE) if heal else ()
    return CreepSetup(Role.SIEGER, (BodyPart.WORK, BodyPart.MOVE), size_limit=10, suffix=suffix)
