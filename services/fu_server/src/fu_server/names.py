from __future__ import annotations

import random

# No 0/O, 1/l/I.
ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz23456789"
NAME_LENGTH = 5


class NameGenerator:
    """Short random names for stored files.

    Each generator owns its random source. Without an explicit seed it is
    seeded from OS entropy, so two processes never walk the same sequence.
    Uniqueness is not checked here; the catalog enforces it.
    """

    def __init__(self, seed: int | None = None, length: int = NAME_LENGTH):
        self._rng = random.Random(seed)
        self.length = length

    def generate(self, extension: str = "") -> str:
        stem = "".join(self._rng.choice(ALPHABET) for _ in range(self.length))
        return stem + extension
