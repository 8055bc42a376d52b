"""K-means clustering with k-means++ seeding."""

from __future__ import annotations

import math
import random
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from kcomprs.cluster import DistanceFunc, euclidean_distance

Point = tuple[float, ...]


@dataclass
class Model:
    """Result of a clustering run.

    ``mapping[i]`` is the index in ``centroids`` of the cluster that the
    i-th input point belongs to; ``iterations`` is the number of rounds run.
    """

    centroids: list[Point]
    mapping: list[int]
    iterations: int


@dataclass
class Trainer:
    """Settings for a k-means run."""

    k: int
    distance_fn: DistanceFunc = euclidean_distance
    max_iterations: int = 100
    delta: float = 0.005
    rng: random.Random | None = field(default=None, repr=False, compare=False)

    def fit(self, data: Iterable[Sequence[float]]) -> Model:
        """Cluster ``data`` into ``k`` groups.

        Stops after ``max_iterations`` rounds or once fewer than
        ``len(data) * delta`` points changed cluster in a round.  A cluster
        that ends a round with no points gets a centroid of NaN values.
        """
        points = [tuple(float(v) for v in point) for point in data]
        if not points:
            raise ValueError("cannot cluster an empty dataset")
        if self.k < 1:
            raise ValueError(f"number of clusters must be at least 1, got {self.k}")

        rng = self.rng if self.rng is not None else random.Random()
        centroids = self._initial_centroids(points, rng)
        mapping = [0] * len(points)
        change_threshold = int(len(points) * self.delta)
        dimension = len(points[0])

        iterations = 0
        while iterations < self.max_iterations:
            iterations += 1

            counts = [0] * self.k
            sums = [[0.0] * dimension for _ in range(self.k)]
            changes = 0
            for index, point in enumerate(points):
                nearest = self._nearest(centroids, point)
                if mapping[index] != nearest:
                    changes += 1
                mapping[index] = nearest
                counts[nearest] += 1
                acc = sums[nearest]
                for axis, value in enumerate(point):
                    acc[axis] += value

            centroids = [_mean(total, count) for total, count in zip(sums, counts)]

            if changes < change_threshold:
                break

        return Model(centroids=centroids, mapping=mapping, iterations=iterations)

    def _nearest(self, centroids: list[Point], point: Point) -> int:
        best_distance = self.distance_fn(centroids[0], point)
        best = 0
        for index, centroid in enumerate(centroids[1:], start=1):
            distance = self.distance_fn(centroid, point)
            if distance < best_distance:
                best_distance = distance
                best = index
        return best

    def _initial_centroids(self, points: list[Point], rng: random.Random) -> list[Point]:
        """Pick starting centroids, weighting each choice by squared distance."""
        centroids = [points[rng.randrange(len(points))]]
        for _ in range(1, self.k):
            weights = []
            for point in points:
                closest = min(self.distance_fn(c, point) for c in centroids)
                weights.append(closest * closest)
            target = rng.random() * sum(weights)

            chosen = 0
            running = weights[0]
            while running < target and chosen < len(points) - 1:
                chosen += 1
                running += weights[chosen]
            centroids.append(points[chosen])
        return centroids


def _mean(total: list[float], count: int) -> Point:
    if count == 0:
        return tuple(math.nan for _ in total)
    return tuple(value / count for value in total)