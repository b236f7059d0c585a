# chunkworld/__init__.py

# This file makes the 'chunkworld' directory a Python package and defines the
# public API of the generation pipeline.

from .errors import ChunkGenerationError, ChunkWorldError, ConfigurationError
from .generator import (
    ChunkResult,
    GenerationObserver,
    SpiralBatch,
    WorldGenerator,
    generate_chunk,
    spiral_coordinates,
)
from .rng import RNG
from .seeding import derive_seed, generate_hash, resolve_seed
from .types import (
    BiomeConfig,
    ChunkCoord,
    ChunkData,
    ChunkMetadata,
    GenerationContext,
    GeneratorConfig,
    HeightmapParams,
    MoistureParams,
    ObjectInstance,
    PlacementParams,
    TemperatureParams,
)

__version__ = "0.1.0"

__all__ = [
    "BiomeConfig",
    "ChunkCoord",
    "ChunkData",
    "ChunkGenerationError",
    "ChunkMetadata",
    "ChunkResult",
    "ChunkWorldError",
    "ConfigurationError",
    "GenerationContext",
    "GenerationObserver",
    "GeneratorConfig",
    "HeightmapParams",
    "MoistureParams",
    "ObjectInstance",
    "PlacementParams",
    "RNG",
    "SpiralBatch",
    "TemperatureParams",
    "WorldGenerator",
    "derive_seed",
    "generate_chunk",
    "generate_hash",
    "resolve_seed",
    "spiral_coordinates",
]
