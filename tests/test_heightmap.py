import numpy as np
import pytest

from chunkworld.errors import ConfigurationError
from chunkworld.heightmap import HeightmapGenerator, padded_world_grid
from chunkworld.noise import NoiseField
from chunkworld.rng import RNG
from chunkworld.types import GeneratorConfig, HeightmapParams


def _padded(config, make_context, coord, seed=31337):
    return HeightmapGenerator(RNG(seed)).generate(make_context(config, coord))


def test_padded_shape_and_dtype(small_config, make_context) -> None:
    heights = _padded(small_config, make_context, (0, 0))
    assert heights.shape == (small_config.chunk_size + 2, small_config.chunk_size + 2)
    assert heights.dtype == np.float32


def test_padded_grid_starts_one_cell_before_chunk(small_config, make_context) -> None:
    x_grid, z_grid = padded_world_grid(make_context(small_config, (2, -1)))
    size = small_config.chunk_size
    assert x_grid[0, 0] == 2 * size - 1
    assert z_grid[0, 0] == -1 * size - 1
    assert x_grid[0, -1] == 3 * size
    assert z_grid[-1, 0] == 0


def test_extract_center_area(small_config, make_context) -> None:
    padded = _padded(small_config, make_context, (0, 0))
    center = HeightmapGenerator.extract_center_area(padded, small_config.chunk_size)
    assert center.shape == (small_config.chunk_size, small_config.chunk_size)
    assert np.array_equal(center, padded[1:-1, 1:-1])


def test_extract_center_area_rejects_wrong_shape() -> None:
    with pytest.raises(ValueError):
        HeightmapGenerator.extract_center_area(np.zeros((10, 10), dtype=np.float32), 10)


@pytest.mark.parametrize("octaves", [1, 4, 8])
@pytest.mark.parametrize("persistence", [0.25, 0.5, 1.5])
@pytest.mark.parametrize("lacunarity", [1.5, 2.0, 3.0])
def test_heights_stay_within_unit_range(make_context, octaves, persistence, lacunarity) -> None:
    config = GeneratorConfig(
        seed=5,
        chunk_size=16,
        heightmap=HeightmapParams(frequency=0.07, octaves=octaves, persistence=persistence,
                                  lacunarity=lacunarity, amplitude=2.5),
    )
    heights = _padded(config, make_context, (3, -2))
    assert heights.min() >= -1.0
    assert heights.max() <= 1.0


def test_heightmap_is_not_flat(make_context) -> None:
    config = GeneratorConfig(seed=5, chunk_size=32, heightmap=HeightmapParams(frequency=0.05))
    heights = _padded(config, make_context, (0, 0))
    assert heights.max() - heights.min() > 0.05


class TestSeamContinuity:
    def test_horizontal_neighbours_share_border_columns(self, small_config, make_context) -> None:
        size = small_config.chunk_size
        left = _padded(small_config, make_context, (4, 7))
        right = _padded(small_config, make_context, (5, 7))
        # Columns size and size+1 of the left chunk are world x = 5*size - 1 and 5*size,
        # which are columns 0 and 1 of the right chunk.
        assert np.array_equal(left[:, size:size + 2], right[:, 0:2])

    def test_vertical_neighbours_share_border_rows(self, small_config, make_context) -> None:
        size = small_config.chunk_size
        top = _padded(small_config, make_context, (-1, -1))
        bottom = _padded(small_config, make_context, (-1, 0))
        assert np.array_equal(top[size:size + 2, :], bottom[0:2, :])


def test_non_finite_heights_are_rejected(small_config, make_context, monkeypatch) -> None:
    padded = small_config.chunk_size + 2

    def _overflowing_fbm(self, x_coords, y_coords, **params):
        heights = np.zeros((padded, padded))
        heights[3, 4] = np.nan
        heights[5, 6] = np.inf
        return heights

    monkeypatch.setattr(NoiseField, "fbm", _overflowing_fbm)
    with pytest.raises(ValueError, match="non-finite"):
        _padded(small_config, make_context, (0, 0))


def test_extreme_octave_growth_fails_at_configuration() -> None:
    with pytest.raises(ConfigurationError):
        GeneratorConfig(chunk_size=8, heightmap=HeightmapParams(octaves=3, persistence=1e300))
    with pytest.raises(ConfigurationError):
        GeneratorConfig(chunk_size=8, heightmap=HeightmapParams(octaves=3, lacunarity=1e300))
