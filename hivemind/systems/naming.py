"""Deterministic flag naming using xxhash.

A directive flag name is ``<kind>:<6 hex digits>`` where the digest is a
pure function of (seed, kind, position, tick, salt). Re-running the same
placement on the same tick yields the same name, so a world that rejects
duplicate names can never end up with two flags for one placement.
"""

from __future__ import annotations

import struct

import xxhash

from hivemind.core.models import RoomPosition

NAME_DIGEST_LENGTH = 6


def directive_flag_name(kind: str, pos: RoomPosition, tick: int, seed: int, salt: int = 0) -> str:
    """Return the flag name for a *kind* directive placed at *pos* on *tick*."""
    payload = struct.pack("<qiiqi", seed, pos.x, pos.y, tick, salt) + f"{kind}@{pos.room_name}".encode()
    digest = xxhash.xxh64(payload).hexdigest()
    return f"{kind}:{digest[:NAME_DIGEST_LENGTH]}"


def unique_flag_name(
    kind: str,
    pos: RoomPosition,
    tick: int,
    seed: int,
    taken: set[str] | frozenset[str],
) -> str:
    """Like ``directive_flag_name`` but salted until the name is not in *taken*."""
    salt = 0
    name = directive_flag_name(kind, pos, tick, seed, salt)
    while name in taken:
        salt += 1
        name = directive_flag_name(kind, pos, tick, seed, salt)
    return name
