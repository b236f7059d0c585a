import numpy as np
import pytest

from chunkworld.noise import PERMUTATION_SIZE, NoiseField, build_permutation_table
from chunkworld.rng import RNG


@pytest.fixture
def field() -> NoiseField:
    return NoiseField(RNG(2024))


def test_permutation_table_is_a_doubled_permutation() -> None:
    table = build_permutation_table(RNG(5))
    assert table.shape == (2 * PERMUTATION_SIZE,)
    assert sorted(table[:PERMUTATION_SIZE]) == list(range(PERMUTATION_SIZE))
    assert np.array_equal(table[:PERMUTATION_SIZE], table[PERMUTATION_SIZE:])


def test_same_stream_seed_same_field() -> None:
    a = NoiseField(RNG(77))
    b = NoiseField(RNG(77))
    assert np.array_equal(a.permutation_table, b.permutation_table)
    assert a.sample(12.3, -4.56) == b.sample(12.3, -4.56)


def test_different_seeds_give_different_fields() -> None:
    a = NoiseField(RNG(1))
    b = NoiseField(RNG(2))
    xs, ys = np.meshgrid(np.linspace(0, 10, 20), np.linspace(0, 10, 20))
    assert not np.array_equal(a.sample_grid(xs + 0.37, ys + 0.61), b.sample_grid(xs + 0.37, ys + 0.61))


def test_repeated_samples_are_identical(field: NoiseField) -> None:
    assert field.sample(3.25, 8.75) == field.sample(3.25, 8.75)


def test_lattice_points_are_zero(field: NoiseField) -> None:
    for x, y in [(0, 0), (3, 5), (-7, 12), (300, -41)]:
        assert field.sample(x, y) == 0.0


def test_values_stay_in_range(field: NoiseField) -> None:
    xs, ys = np.meshgrid(np.linspace(-50, 50, 120), np.linspace(-50, 50, 120))
    values = field.sample_grid(xs + 0.13, ys + 0.29)
    assert values.min() >= -1.0
    assert values.max() <= 1.0
    assert values.std() > 0.01


def test_noise_is_continuous(field: NoiseField) -> None:
    step = 1e-4
    for x, y in [(0.3, 0.7), (10.5, -3.2), (-8.9, 4.4)]:
        assert abs(field.sample(x, y) - field.sample(x + step, y)) < 1e-2
        assert abs(field.sample(x, y) - field.sample(x, y + step)) < 1e-2


def test_sample_grid_matches_pointwise_sampling(field: NoiseField) -> None:
    xs, ys = np.meshgrid(np.arange(4, dtype=float), np.arange(3, dtype=float))
    grid = field.sample_grid(xs, ys, frequency=0.37)
    for i in range(3):
        for j in range(4):
            assert grid[i, j] == pytest.approx(field.sample(xs[i, j] * 0.37, ys[i, j] * 0.37))


def test_single_octave_fbm_equals_plain_noise(field: NoiseField) -> None:
    xs, ys = np.meshgrid(np.arange(8, dtype=float), np.arange(8, dtype=float))
    fbm = field.fbm(xs, ys, frequency=0.1, octaves=1, persistence=0.5, lacunarity=2.0, amplitude=3.0)
    assert np.allclose(fbm, field.sample_grid(xs, ys, frequency=0.1))
