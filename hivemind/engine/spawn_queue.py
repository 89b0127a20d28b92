"""Per-colony spawn queue fed by overlord wishlists.

The queue only records demand. Serving it (turning a request into a creep)
is the world's business; the sandbox does it every ``spawn_interval`` ticks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hivemind.overlords.setups import CreepSetup

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SpawnRequest:
    """One missing creep: its template, who asked and how urgently."""

    setup: CreepSetup
    overlord_ref: str
    priority: int
    colony: str

    @property
    def role(self) -> str:
        return self.setup.role


class SpawnQueue:
    """Requests for the current tick, served lowest priority value first."""

    __slots__ = ("_requests",)

    def __init__(self) -> None:
        self._requests: dict[tuple[str, str], SpawnRequest] = {}

    def request(self, request: SpawnRequest) -> None:
        """Enqueue *request*; one request per (overlord, role) per tick."""
        key = (request.overlord_ref, request.role)
        if key not in self._requests:
            self._requests[key] = request
            logger.debug("Spawn request %s for %s (priority %d)", request.role, request.overlord_ref, request.priority)

    def pending(self) -> list[SpawnRequest]:
        return sorted(self._requests.values(), key=lambda r: r.priority)

    def pop_next(self) -> SpawnRequest | None:
        pending = self.pending()
        if not pending:
            return None
        head = pending[0]
        del self._requests[(head.overlord_ref, head.role)]
        return head

    def clear(self) -> None:
        self._requests.clear()

    def __len__(self) -> int:
        return len(self._requests)
