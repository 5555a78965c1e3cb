"""Domain-separated deterministic RNG using xxhash.

Formula: RNG_Value = Hash(Seed, Domain, Key, Draw)

Keys used by the session:
    - ``Domain.DESTINATION``: the token id (draw 0).
    - ``Domain.ARROW_BIAS`` / ``Domain.ARROW_PICK``: the cell index
      ``row * grid_cols + col`` (draw 0).

Any object exposing ``next_float``/``next_int``/``next_bool`` with the same
signatures can stand in for :class:`DeterministicRNG` (tests inject stubs).
"""

from __future__ import annotations

import struct

import xxhash

from docket_router.core.enums import Domain


class DeterministicRNG:
    """Stateless domain-separated pseudo-random number generator.

    Each call is a pure function of (seed, domain, key, draw), so a session
    replays identically from its seed.
    """

    __slots__ = ("_seed",)

    _MAX_UINT64 = (1 << 64) - 1

    def __init__(self, seed: int) -> None:
        self._seed = seed

    @property
    def seed(self) -> int:
        return self._seed

    def _hash(self, domain: Domain, key: int, draw: int) -> int:
        payload = struct.pack("<qiqi", self._seed, domain.value, key, draw)
        return xxhash.xxh64(payload).intdigest()

    def next_float(self, domain: Domain, key: int, draw: int) -> float:
        """Return a deterministic float in [0.0, 1.0)."""
        return self._hash(domain, key, draw) / (self._MAX_UINT64 + 1)

    def next_int(self, domain: Domain, key: int, draw: int, low: int, high: int) -> int:
        """Return a deterministic integer in [low, high] inclusive."""
        f = self.next_float(domain, key, draw)
        return low + int(f * (high - low + 1))

    def next_bool(self, domain: Domain, key: int, draw: int, probability: float = 0.5) -> bool:
        """Return True with the given probability."""
        return self.next_float(domain, key, draw) < probability
