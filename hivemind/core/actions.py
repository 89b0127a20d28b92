"""Same-tick capability exclusivity.

Each capability belongs to zero or more exclusivity groups. A worker can run
at most one capability per group per tick; capabilities with no group
(move, say) never conflict.
"""

from __future__ import annotations

from enum import IntFlag

from hivemind.core.enums import Capability


class ActionGroup(IntFlag):
    """Exclusivity groups (action pipelines)."""

    NONE = 0
    MELEE = 1
    RANGED = 2


CAPABILITY_GROUPS: dict[Capability, ActionGroup] = {
    Capability.MOVE: ActionGroup.NONE,
    Capability.SAY: ActionGroup.NONE,
    Capability.HARVEST: ActionGroup.MELEE,
    Capability.ATTACK: ActionGroup.MELEE,
    Capability.DISMANTLE: ActionGroup.MELEE,
    Capability.ATTACK_CONTROLLER: ActionGroup.MELEE,
    Capability.HEAL: ActionGroup.MELEE,
    Capability.RANGED_ATTACK: ActionGroup.RANGED,
    Capability.RANGED_MASS_ATTACK: ActionGroup.RANGED,
    Capability.BUILD: ActionGroup.MELEE | ActionGroup.RANGED,
    Capability.REPAIR: ActionGroup.MELEE | ActionGroup.RANGED,
    Capability.RANGED_HEAL: ActionGroup.MELEE | ActionGroup.RANGED,
}


class ActionLog:
    """Per-worker, per-tick record of successful capability calls.

    ``_used`` is a bitmask over Capability values; ``_groups`` is the union
    of the groups those capabilities occupy.
    """

    __slots__ = ("_used", "_groups")

    def __init__(self) -> None:
        self._used = 0
        self._groups = ActionGroup.NONE

    def record(self, capability: Capability, success: bool) -> None:
        if not success:
            return
        self._used |= 1 << capability
        self._groups |= CAPABILITY_GROUPS[capability]

    def did(self, capability: Capability) -> bool:
        return bool(self._used & (1 << capability))

    def can_execute(self, capability: Capability) -> bool:
        """True if *capability* shares no group with anything already done this tick."""
        return not (self._groups & CAPABILITY_GROUPS[capability])

    @property
    def used(self) -> list[Capability]:
        return [c for c in Capability if self._used & (1 << c)]

    def clear(self) -> None:
        self._used = 0
        self._groups = ActionGroup.NONE
