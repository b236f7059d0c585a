# chunkworld/heightmap.py

"""
================================================================================
HEIGHTMAP GENERATION
================================================================================
Fractal (FBM) height field for one chunk, generated with a one-cell border so
a mesh builder can compute correct edge normals without touching a
neighbouring chunk.

Data Contract:
---------------
- Inputs: a GenerationContext (chunk coordinate, chunk size, config).
- Outputs: float32 array of shape (chunk_size + 2, chunk_size + 2), indexed
  [z, x], values in [-1, 1].
- Side Effects: None.
- Invariants: The height at a world cell depends only on the world seed and
  the cell's coordinates, so overlapping border cells of neighbouring chunks
  are identical.
================================================================================
"""

import numpy as np

from . import config as DEFAULTS
from .noise import NoiseField
from .rng import RNG
from .types import GenerationContext


def padded_world_grid(context: GenerationContext, padding: int = DEFAULTS.HEIGHTMAP_PADDING) -> tuple[np.ndarray, np.ndarray]:
    """World x/z coordinate grids for a chunk, including `padding` cells on every side."""
    size = context.chunk_size + 2 * padding
    origin_x, origin_z = context.world_origin
    xs = np.arange(size, dtype=np.float64) + (origin_x - padding)
    zs = np.arange(size, dtype=np.float64) + (origin_z - padding)
    return np.meshgrid(xs, zs)


class HeightmapGenerator:
    """Builds padded FBM heightmaps from one height noise field."""

    def __init__(self, stream: RNG):
        self.noise = NoiseField(stream)

    def generate(self, context: GenerationContext) -> np.ndarray:
        params = context.config.heightmap
        # Checked again here so a hand-built context cannot divide by zero.
        if params.octaves < 1:
            raise ValueError(f"octaves must be >= 1, got {params.octaves}")

        x_grid, z_grid = padded_world_grid(context)
        heights = self.noise.fbm(
            x_grid, z_grid,
            frequency=params.frequency,
            octaves=params.octaves,
            persistence=params.persistence,
            lacunarity=params.lacunarity,
            amplitude=params.amplitude,
        )
        if not np.all(np.isfinite(heights)):
            raise ValueError(
                f"Heightmap for chunk ({context.chunk_coord.x}, {context.chunk_coord.z}) contains non-finite values; "
                f"check the heightmap frequency/lacunarity against the world coordinates"
            )
        # Rounding in the running sums can overshoot by an ulp.
        return np.clip(heights, -1.0, 1.0).astype(np.float32)

    @staticmethod
    def extract_center_area(padded_data: np.ndarray, chunk_size: int, padding: int = DEFAULTS.HEIGHTMAP_PADDING) -> np.ndarray:
        """Strips the border, returning exactly (chunk_size, chunk_size) values."""
        expected = chunk_size + 2 * padding
        if padded_data.shape != (expected, expected):
            raise ValueError(f"Expected a padded heightmap of shape {(expected, expected)}, got {padded_data.shape}")
        if padding == 0:
            return padded_data.copy()
        return padded_data[padding:-padding, padding:-padding].copy()
