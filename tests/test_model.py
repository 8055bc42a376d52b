import math
import random

import pytest

from kcomprs.cluster import euclidean_distance_squared
from kcomprs.model import Trainer

BLACK = (0.0, 0.0, 0.0, 255.0)
WHITE = (255.0, 255.0, 255.0, 255.0)


def _two_groups():
    return [BLACK] * 6 + [WHITE] * 6


def test_separated_groups_get_their_own_centroids():
    trainer = Trainer(k=2, rng=random.Random(1))
    model = trainer.fit(_two_groups())
    assert sorted(model.centroids) == sorted([BLACK, WHITE])
    for index, point in enumerate(_two_groups()):
        assert model.centroids[model.mapping[index]] == point


def test_squared_distance_gives_same_partition():
    trainer = Trainer(k=2, distance_fn=euclidean_distance_squared, rng=random.Random(7))
    model = trainer.fit(_two_groups())
    assert sorted(model.centroids) == sorted([BLACK, WHITE])
    assert len(set(model.mapping[:6])) == 1
    assert len(set(model.mapping[6:])) == 1
    assert model.mapping[0] != model.mapping[6]


def test_mapping_and_centroid_shapes():
    rng = random.Random(3)
    data = [tuple(float(rng.randrange(256)) for _ in range(4)) for _ in range(200)]
    model = Trainer(k=5, rng=random.Random(4)).fit(data)
    assert len(model.centroids) == 5
    assert len(model.mapping) == len(data)
    assert all(0 <= n < 5 for n in model.mapping)
    assert 1 <= model.iterations <= 100


def test_single_cluster_centroid_is_mean():
    data = [(0, 0, 0, 0), (2, 4, 6, 8)]
    model = Trainer(k=1, rng=random.Random(0)).fit(data)
    assert model.centroids == [(1.0, 2.0, 3.0, 4.0)]
    assert model.mapping == [0, 0]


def test_runs_all_rounds_when_threshold_is_zero():
    # Ten points with the default delta give a threshold of zero, which
    # "changes < threshold" can never satisfy.
    data = [BLACK] * 10
    model = Trainer(k=1, max_iterations=7, rng=random.Random(0)).fit(data)
    assert model.iterations == 7


def test_stops_early_when_few_points_change():
    data = [BLACK] * 10
    model = Trainer(k=1, max_iterations=50, delta=0.5, rng=random.Random(0)).fit(data)
    assert model.iterations == 1


def test_zero_rounds_keeps_initial_state():
    data = _two_groups()
    model = Trainer(k=2, max_iterations=0, rng=random.Random(2)).fit(data)
    assert model.iterations == 0
    assert model.mapping == [0] * len(data)
    assert all(c in data for c in model.centroids)


def test_empty_cluster_gets_nan_centroid():
    data = [BLACK, WHITE]
    model = Trainer(k=3, rng=random.Random(5)).fit(data)
    nan_indices = [i for i, c in enumerate(model.centroids) if all(math.isnan(v) for v in c)]
    assert len(nan_indices) == 1
    assert nan_indices[0] not in model.mapping


def test_seeded_runs_are_reproducible():
    rng = random.Random(11)
    data = [tuple(float(rng.randrange(256)) for _ in range(4)) for _ in range(100)]
    first = Trainer(k=4, rng=random.Random(9)).fit(data)
    second = Trainer(k=4, rng=random.Random(9)).fit(data)
    assert first == second


def test_empty_dataset_rejected():
    with pytest.raises(ValueError):
        Trainer(k=2).fit([])


def test_zero_clusters_rejected():
    with pytest.raises(ValueError):
        Trainer(k=0).fit([BLACK])