"""Materialise directives from flags by their colour pair."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from hivemind.core.enums import DirectiveKind, directive_kind_for
from hivemind.directives.combat import DirectiveGuard, DirectiveGuardSwarm, DirectiveInvasionDefense, DirectiveSiege
from hivemind.directives.core import DirectiveBootstrap
from hivemind.directives.targeting import DirectiveDismantle, DirectiveTargetSiege

if TYPE_CHECKING:
    from hivemind.core.models import Flag
    from hivemind.directives.base import Directive
    from hivemind.engine.colony import Colony

logger = logging.getLogger(__name__)


def directive_from_flag(flag: Flag, colony: Colony) -> Directive | None:
    """Build the directive *flag* stands for, or None for an unknown colour pair."""
    kind = directive_kind_for(flag.color, flag.secondary_color)
    match kind:
        case DirectiveKind.GUARD:
            return DirectiveGuard(flag, colony)
        case DirectiveKind.GUARD_SWARM:
            return DirectiveGuardSwarm(flag, colony)
        case DirectiveKind.INVASION_DEFENSE:
            return DirectiveInvasionDefense(flag, colony)
        case DirectiveKind.SIEGE:
            return DirectiveSiege(flag, colony)
        case DirectiveKind.TARGET_SIEGE:
            return DirectiveTargetSiege(flag, colony)
        case DirectiveKind.DISMANTLE:
            return DirectiveDismantle(flag, colony)
        case DirectiveKind.BOOTSTRAP:
            return DirectiveBootstrap(flag, colony)
        case None:
            logger.warning("Flag %s has unknown colour pair (%s, %s)", flag.name, flag.color.name, flag.secondary_color.name)
            return None
