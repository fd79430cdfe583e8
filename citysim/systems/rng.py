"""Deterministic randomness for the city, derived from the world seed.

Nothing here keeps state between draws. Every roll is
``xxh64(seed, domain, key, day)`` mapped into [0, 1), so the same city
on the same day always rolls the same numbers, whatever order the rolls
happen in:

* **UPGRADE**: one roll per residential tile per day, keyed by the tile's
  row-major index (``tile_key``). A house's chance to level up on day D
  does not depend on how many other houses rolled before it.
* **GOAL**: goal generation keys its template, building-kind and
  step-size picks by ``serial``, ``serial + 1`` and ``serial + 2``. The
  serial counts goals handed out this session.

Replaying the same commands from the same seed reproduces every automatic
upgrade and every generated goal.
"""

from __future__ import annotations

import struct
from typing import Sequence, TypeVar

import xxhash

from citysim.core.enums import Domain

T = TypeVar("T")

# seed:int64, domain:int32, key:int64, day:int64
_PACK = struct.Struct("<qiqq")
_SPAN = 1 << 53


class DeterministicRNG:
    """Stateless roller keyed by (domain, key, day) under one world seed."""

    __slots__ = ("_seed",)

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    @staticmethod
    def tile_key(x: int, y: int, size: int) -> int:
        """Row-major index used as the key for per-tile rolls."""
        return y * size + x

    def _hash(self, domain: Domain, key: int, day: int) -> int:
        return xxhash.xxh64(_PACK.pack(self._seed, domain.value, key, day)).intdigest()

    def next_float(self, domain: Domain, key: int, day: int) -> float:
        """Float in [0.0, 1.0)."""
        # Top 53 bits: exact in a double, so the result never rounds up to 1.0
        return (self._hash(domain, key, day) >> 11) / _SPAN

    def next_int(self, domain: Domain, key: int, day: int, low: int, high: int) -> int:
        """Integer in [low, high] inclusive."""
        return low + int(self.next_float(domain, key, day) * (high - low + 1))

    def next_bool(self, domain: Domain, key: int, day: int, probability: float = 0.5) -> bool:
        # probability 0 never fires, 1 always fires
        return self.next_float(domain, key, day) < probability

    def choice(self, domain: Domain, key: int, day: int, options: Sequence[T]) -> T:
        if not options:
            raise ValueError("choice() from an empty sequence")
        return options[self.next_int(domain, key, day, 0, len(options) - 1)]
