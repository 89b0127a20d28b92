"""Ready-made sandbox worlds."""

from __future__ import annotations

from hivemind.config import HivemindConfig
from hivemind.core.enums import DIRECTIVE_COLORS, BodyPart, DirectiveKind, Role, StructureType, Terrain
from hivemind.core.models import RoomPosition
from hivemind.sandbox.world import SandboxWorld

HOME = "W1N1"
OUTPOST = "W2N1"
ENEMY = "W3N1"


def build_demo_world(config: HivemindConfig | None = None) -> SandboxWorld:
    """One colony with an outpost under attack and a hostile room to siege.

    - ``W1N1``: the colony, with a spawn, a miner, a queen, a worker and a
      ring of damaged ramparts.
    - ``W2N1``: outpost with three invaders and a swamp patch.
    - ``W3N1``: enemy room with a tower, marked by a siege flag whose recovery
      waypoint sits in the outpost, and a target-siege flag on the tower.
    """
    config = config or HivemindConfig()
    world = SandboxWorld(config)

    world.add_room(HOME, owned=True, energy_available=1500, energy_capacity_available=1500)
    world.add_room(OUTPOST)
    world.add_room(ENEMY)
    world.memory.setdefault("colonies", {})[HOME] = {"outposts": [OUTPOST]}

    spawn = world.add_structure(StructureType.SPAWN, RoomPosition(20, 20, HOME), hits=5000)
    for x in range(17, 24):
        world.add_structure(StructureType.RAMPART, RoomPosition(x, 16, HOME), hits=2_000, hits_max=300_000)
    for x in range(18, 23):
        world.add_road(RoomPosition(x, 21, HOME))

    world.add_creep("miner-0", RoomPosition(22, 22, HOME), [BodyPart.WORK, BodyPart.WORK, BodyPart.MOVE],
                    role=Role.MINER, colony=HOME)
    world.add_creep("queen-0", RoomPosition(19, 21, HOME), [BodyPart.CARRY, BodyPart.CARRY, BodyPart.MOVE],
                    role=Role.QUEEN, colony=HOME)
    world.add_creep("worker-0", RoomPosition(spawn.pos.x, 18, HOME),
                    [BodyPart.WORK, BodyPart.CARRY, BodyPart.MOVE], role=Role.WORKER, colony=HOME, carry_energy=50)

    for x in range(30, 34):
        for y in range(30, 34):
            world.set_terrain(RoomPosition(x, y, OUTPOST), Terrain.SWAMP)
    for i, (x, y) in enumerate(((10, 10), (12, 11), (14, 9))):
        world.add_hostile(RoomPosition(x, y, OUTPOST), [BodyPart.ATTACK, BodyPart.MOVE], name=f"invader-{i}")

    tower = world.add_structure(StructureType.TOWER, RoomPosition(25, 25, ENEMY), hits=3000, owner="Enemy")
    siege_color, siege_secondary = DIRECTIVE_COLORS[DirectiveKind.SIEGE]
    world.add_flag(
        RoomPosition(24, 24, ENEMY), siege_color, siege_secondary, "siege:demo",
        memory={"colony": HOME, "recovery_waypoint": {"x": 40, "y": 25, "room_name": OUTPOST}},
    )
    target_color, target_secondary = DIRECTIVE_COLORS[DirectiveKind.TARGET_SIEGE]
    world.add_flag(tower.pos, target_color, target_secondary, "targetSiege:demo", memory={"colony": HOME})
    return world
