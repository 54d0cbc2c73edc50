"""
Alea pseudo-random generator.

Johannes Baagøe's Alea algorithm: small state, fast, and fully determined
by a seed string, which makes seeded plasma fields reproducible across
runs and platforms.
"""

_MASH_SEED = 0xEFC8249D
_TWO_POW_32 = 0x100000000
_TWO_POW_MINUS_32 = 2.3283064365386963e-10


def _uint32(n):
    """Truncate to an unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class _Mash:
    """Hash function that turns seed material into floats in [0, 1)."""

    def __init__(self):
        self.n = _MASH_SEED

    def __call__(self, data):
        n = self.n
        for char in str(data):
            n += ord(char)
            h = 0.02519603282416938 * n
            n = _uint32(h)
            h -= n
            h *= n
            n = _uint32(h)
            h -= n
            n += h * _TWO_POW_32
        self.n = n
        return _uint32(n) * _TWO_POW_MINUS_32


class AleaPRNG:
    """
    Seedable Alea generator.

    Instances are passed explicitly to whatever needs randomness; there is
    no module-level generator.
    """

    def __init__(self, seed):
        """
        Initialize from a seed.

        Args:
            seed: String, number, or iterable of those
        """
        self.seed = seed
        self.call_count = 0

        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            parts = list(seed)
        else:
            parts = [seed]

        mash = _Mash()
        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for part in parts:
            self.s0 = self._wrap(self.s0 - mash(part))
            self.s1 = self._wrap(self.s1 - mash(part))
            self.s2 = self._wrap(self.s2 - mash(part))

    @staticmethod
    def _wrap(value):
        return value + 1 if value < 0 else value

    def random(self):
        """Next float in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * _TWO_POW_MINUS_32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def __repr__(self):
        return f"AleaPRNG(seed={self.seed!r}, calls={self.call_count})"
