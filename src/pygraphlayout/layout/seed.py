"""Seed functions producing starting positions."""

import random
from collections.abc import Hashable

from pygraphlayout.model.point import Dimension, Point


class RandomLocationSeed:
    """Place each node uniformly at random inside a canvas.

    Args:
        size: Canvas the points are drawn from
        rng: Random number generator to draw from (a fresh one if None)
        seed: Seed for the fresh generator when rng is None
    """

    def __init__(self, size: Dimension, rng: random.Random | None = None, seed: int | None = None) -> None:
        self.size = size
        self._rng = rng if rng is not None else random.Random(seed)

    def __call__(self, node: Hashable) -> Point:
        return Point(self._rng.random() * self.size.width, self._rng.random() * self.size.height)
