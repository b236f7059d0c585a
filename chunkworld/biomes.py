# chunkworld/biomes.py

"""
================================================================================
CLIMATE & BIOME CLASSIFICATION
================================================================================
Temperature and moisture fields for one chunk, and the Whittaker-style lookup
that turns them into biome ids.

Data Contract:
---------------
- Inputs: a GenerationContext carrying the chunk's unpadded heightmap.
- Outputs: BiomeFields with float32 temperature/moisture in [0, 1] and a uint8
  biome-id map, all of shape (chunk_size, chunk_size), indexed [z, x].
- Side Effects: None.
- Invariants: Every biome id comes from the config's lookup table, so it
  always names a configured biome.
================================================================================
"""

from typing import NamedTuple

import numpy as np

from . import config as DEFAULTS
from .noise import NoiseField
from .rng import RNG
from .types import GenerationContext


class BiomeFields(NamedTuple):
    temperature: np.ndarray
    moisture: np.ndarray
    biome_map: np.ndarray


def climate_band(values: np.ndarray, bands: int = DEFAULTS.CLIMATE_BANDS) -> np.ndarray:
    """Splits [0, 1] into equal bands: floor(v * bands), clamped to [0, bands - 1]."""
    return np.clip(np.floor(values * bands), 0, bands - 1).astype(np.intp)


def classify(temperature: np.ndarray, moisture: np.ndarray, lookup_table) -> np.ndarray:
    """Biome id per cell from lookup_table[moisture_band][temperature_band]."""
    table = np.asarray(lookup_table, dtype=np.uint8)
    return table[climate_band(np.asarray(moisture)), climate_band(np.asarray(temperature))]


class BiomeGenerator:
    """Owns two independent noise fields: temperature and moisture."""

    def __init__(self, temperature_stream: RNG, moisture_stream: RNG):
        self.temperature_noise = NoiseField(temperature_stream)
        self.moisture_noise = NoiseField(moisture_stream)

    def generate(self, context: GenerationContext) -> BiomeFields:
        cfg = context.config
        size = context.chunk_size
        origin_x, origin_z = context.world_origin
        xs = np.arange(size, dtype=np.float64) + origin_x
        zs = np.arange(size, dtype=np.float64) + origin_z
        x_grid, z_grid = np.meshgrid(xs, zs)

        # Without a heightmap the chunk is treated as flat sea-level terrain.
        heights = context.heightmap
        if heights is None:
            heights = np.zeros((size, size), dtype=np.float32)
        elif heights.shape != (size, size):
            raise ValueError(f"Heightmap shape {heights.shape} does not match chunk size {size}")

        # 1. Base temperature from noise, remapped from [-1, 1] to [0, 1] and
        #    shifted by the configured base temperature (0.5 is neutral).
        temp_noise = self.temperature_noise.sample_grid(x_grid, z_grid, cfg.temperature.frequency)
        temperature = (temp_noise + 1.0) * 0.5 + (cfg.temperature.base_temperature - 0.5)

        # 2. Altitude cooling: higher terrain is colder.
        temperature = temperature - heights.astype(np.float64) * cfg.temperature.altitude_lapse_rate
        temperature = np.clip(temperature, 0.0, 1.0).astype(np.float32)

        # 3. Moisture has no altitude adjustment.
        moist_noise = self.moisture_noise.sample_grid(x_grid, z_grid, cfg.moisture.frequency)
        moisture = np.clip((moist_noise + 1.0) * 0.5, 0.0, 1.0).astype(np.float32)

        biome_map = classify(temperature, moisture, cfg.biome_lookup_table)
        return BiomeFields(temperature, moisture, biome_map)
