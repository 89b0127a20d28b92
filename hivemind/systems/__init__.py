"""Engine systems: deterministic naming and pathfinding."""

from hivemind.systems.naming import directive_flag_name, unique_flag_name
from hivemind.systems.pathfinding import Pathfinder

__all__ = ["Pathfinder", "directive_flag_name", "unique_flag_name"]
