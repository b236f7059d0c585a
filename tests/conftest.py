import logging

import numpy as np
import pytest

from chunkworld.generator import WorldGenerator
from chunkworld.types import ChunkCoord, GenerationContext, GeneratorConfig


@pytest.fixture
def small_config() -> GeneratorConfig:
    """A default config with small chunks to keep pure-Python sampling fast."""
    return GeneratorConfig(seed=1234, chunk_size=32)


@pytest.fixture
def generator(small_config: GeneratorConfig) -> WorldGenerator:
    return WorldGenerator(small_config, logger=logging.getLogger("chunkworld.tests"))


@pytest.fixture
def make_context():
    """Factory for hand-built generation contexts."""

    def _make(config: GeneratorConfig, coord=(0, 0), heightmap=None, seed: int = 0) -> GenerationContext:
        return GenerationContext(
            seed=seed,
            chunk_coord=ChunkCoord.of(coord),
            chunk_size=config.chunk_size,
            config=config,
            heightmap=heightmap,
        )

    return _make


@pytest.fixture
def flat_fields():
    """Zero heightmap and uniform biome map of a given size and biome id."""

    def _make(size: int, biome_id: int = 0):
        heightmap = np.zeros((size, size), dtype=np.float32)
        biome_map = np.full((size, size), biome_id, dtype=np.uint8)
        return heightmap, biome_map

    return _make
