"""
Random number helpers.

Generators are always created and handed over explicitly; nothing here
keeps a global PRNG. Unseeded runs get a short uuid-based seed, so every
run can still be replayed.
"""

import uuid
from typing import Optional, Union

from ..core.alea_prng import AleaPRNG


def new_seed() -> str:
    """Draw a fresh seed string for an unseeded run."""
    return str(uuid.uuid4())[:8]


def create_prng(seed: Optional[Union[str, int]] = None) -> AleaPRNG:
    """
    Create an Alea PRNG handle.

    Args:
        seed: Seed string or number; a fresh one is drawn when omitted

    Returns:
        AleaPRNG instance (its ``seed`` attribute records the seed used)
    """
    if seed is None:
        seed = new_seed()
    return AleaPRNG(seed)


def random_colour(prng: AleaPRNG, max_diff: float) -> int:
    """
    Draw one colour intensity in ``[0, max_diff)``.

    The float draw is truncated, so any ``max_diff`` at or below 1 always
    yields 0 while still consuming a draw.
    """
    return int(prng.random() * max_diff)
