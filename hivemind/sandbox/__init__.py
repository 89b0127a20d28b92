"""In-memory world implementing every collaborator protocol of the core."""

from hivemind.sandbox.scenarios import build_demo_world
from hivemind.sandbox.world import SandboxCreep, SandboxWorld

__all__ = ["SandboxCreep", "SandboxWorld", "build_demo_world"]
