"""Engine systems: RNG and grid initialisation."""

from docket_router.systems.rng import DeterministicRNG
from docket_router.systems.arrow_init import initialize_grid

__all__ = ["DeterministicRNG", "initialize_grid"]
