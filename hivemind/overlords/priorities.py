"""Overlord priorities. Lower values are serviced first in both phases."""

from __future__ import annotations

from enum import IntEnum


class OverlordPriority(IntEnum):
    BOOTSTRAP = 0
    INVASION_DEFENSE = 200
    GUARD = 202
    SIEGE = 302
    DISMANTLE = 310
    FORTIFY = 502
