import numpy as np
import pytest

from chunkworld.biomes import BiomeGenerator, classify, climate_band
from chunkworld.config import BIOME_LOOKUP_TABLE
from chunkworld.rng import RNG
from chunkworld.types import GeneratorConfig, TemperatureParams


def _biome_generator() -> BiomeGenerator:
    return BiomeGenerator(RNG(10), RNG(20))


class TestClassification:
    def test_bands_split_unit_range_in_thirds(self) -> None:
        values = np.array([0.0, 0.33, 0.34, 0.66, 0.67, 0.999, 1.0])
        assert climate_band(values).tolist() == [0, 0, 1, 1, 2, 2, 2]

    def test_out_of_range_values_are_clamped(self) -> None:
        assert climate_band(np.array([-0.5, 1.5])).tolist() == [0, 2]

    @pytest.mark.parametrize(
        "temperature, moisture, expected",
        [
            (0.1, 0.1, 0),  # cold, dry -> Tundra
            (0.5, 0.1, 1),  # temperate, dry -> Grassland
            (0.9, 0.1, 2),  # hot, dry -> Desert
            (0.1, 0.5, 3),  # cold, moderate -> Boreal Forest
            (0.5, 0.5, 4),
            (0.9, 0.5, 5),
            (0.1, 0.9, 6),  # cold, humid -> Taiga
            (0.5, 0.9, 7),
            (0.9, 0.9, 8),  # hot, humid -> Tropical Rainforest
        ],
    )
    def test_default_whittaker_table(self, temperature, moisture, expected) -> None:
        result = classify(np.array([temperature]), np.array([moisture]), BIOME_LOOKUP_TABLE)
        assert result.tolist() == [expected]

    def test_table_is_indexed_moisture_first(self) -> None:
        table = ((10, 11, 12), (13, 14, 15), (16, 17, 18))
        assert classify(np.array([0.9]), np.array([0.1]), table).tolist() == [12]
        assert classify(np.array([0.1]), np.array([0.9]), table).tolist() == [16]


class TestBiomeGenerator:
    def test_output_shapes_and_types(self, small_config, make_context) -> None:
        size = small_config.chunk_size
        fields = _biome_generator().generate(make_context(small_config, (1, 1)))
        assert fields.temperature.shape == (size, size)
        assert fields.moisture.shape == (size, size)
        assert fields.biome_map.shape == (size, size)
        assert fields.temperature.dtype == np.float32
        assert fields.biome_map.dtype == np.uint8

    def test_fields_stay_in_unit_range(self, small_config, make_context) -> None:
        fields = _biome_generator().generate(make_context(small_config, (-3, 9)))
        for values in (fields.temperature, fields.moisture):
            assert values.min() >= 0.0
            assert values.max() <= 1.0

    def test_biome_ids_come_from_the_lookup_table(self, small_config, make_context) -> None:
        fields = _biome_generator().generate(make_context(small_config, (0, 0)))
        allowed = {biome_id for row in small_config.biome_lookup_table for biome_id in row}
        assert set(np.unique(fields.biome_map).tolist()) <= allowed

    def test_biome_map_matches_classification_of_fields(self, small_config, make_context) -> None:
        fields = _biome_generator().generate(make_context(small_config, (2, 2)))
        expected = classify(fields.temperature, fields.moisture, small_config.biome_lookup_table)
        assert np.array_equal(fields.biome_map, expected)

    def test_higher_terrain_is_colder(self, make_context) -> None:
        config = GeneratorConfig(seed=1, chunk_size=16, temperature=TemperatureParams(altitude_lapse_rate=0.3))
        size = config.chunk_size
        low = _biome_generator().generate(make_context(config, heightmap=np.full((size, size), -1.0, dtype=np.float32)))
        high = _biome_generator().generate(make_context(config, heightmap=np.ones((size, size), dtype=np.float32)))
        assert np.all(high.temperature <= low.temperature)
        assert high.temperature.mean() < low.temperature.mean()
        # Moisture has no altitude adjustment.
        assert np.array_equal(high.moisture, low.moisture)

    def test_missing_heightmap_means_flat_terrain(self, small_config, make_context) -> None:
        size = small_config.chunk_size
        without = _biome_generator().generate(make_context(small_config))
        flat = _biome_generator().generate(make_context(small_config, heightmap=np.zeros((size, size), dtype=np.float32)))
        assert np.array_equal(without.temperature, flat.temperature)

    def test_base_temperature_shifts_climate(self, make_context) -> None:
        cold = GeneratorConfig(seed=1, chunk_size=16, temperature=TemperatureParams(base_temperature=0.2))
        warm = GeneratorConfig(seed=1, chunk_size=16, temperature=TemperatureParams(base_temperature=0.8))
        cold_fields = _biome_generator().generate(make_context(cold))
        warm_fields = _biome_generator().generate(make_context(warm))
        assert cold_fields.temperature.mean() < warm_fields.temperature.mean()

    def test_rejects_mismatched_heightmap(self, small_config, make_context) -> None:
        with pytest.raises(ValueError):
            _biome_generator().generate(make_context(small_config, heightmap=np.zeros((4, 4), dtype=np.float32)))
