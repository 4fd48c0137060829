"""Domain-separated deterministic RNG using xxhash.

Every draw is a pure function of (WorldSeed, Domain, Key, Step), so a run
with the same seed and the same sequence of decisions replays exactly.

Formula: RNG_Value = Hash(WorldSeed, Domain, Key, Step)
"""

from __future__ import annotations

import struct

import xxhash

from zonespawn.core.enums import Domain


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator.

    No internal mutable state: callers supply the step counter that makes
    consecutive draws differ.
    """

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, key: int, step: int) -> int:
        payload = struct.pack("<qiqq", self._seed, domain.value, key, step)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, key: int, step: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, key, step) / (self._MAX_UINT64 + 1)

    def next_bool(self, domain: Domain, key: int, step: int, probability: float = 0.5) -> bool:
        """Return True with the given probability."""
        return self.next_float(domain, key, step) < probability

    def next_uniform(self, domain: Domain, key: int, step: int, low: float, high: float) -> float:
        """Return a deterministic float in [low, high)."""
        return low + self.next_float(domain, key, step) * (high - low)
