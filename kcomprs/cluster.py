"""Distance measures between colour vectors."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence

DistanceFunc = Callable[[Sequence[float], Sequence[float]], float]


def euclidean_distance_squared(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the squared Euclidean distance between two vectors."""
    return sum((x - y) * (x - y) for x, y in zip(a, b))


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Return the Euclidean distance between two vectors."""
    return math.sqrt(euclidean_distance_squared(a, b))