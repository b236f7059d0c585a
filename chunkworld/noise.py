# chunkworld/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides 2D Perlin (gradient) noise. The JIT-compiled kernels are
pure, stateless functions of a permutation table; NoiseField owns one such
table, built from a pseudo-random stream.

Data Contract:
---------------
- Inputs:
    - p: A pre-shuffled permutation table (int array, 512 entries).
    - x, y: Coordinates (scalars or 2D NumPy arrays).
    - frequency, octaves, persistence, lacunarity, amplitude: FBM parameters.
- Outputs:
    - Noise values in the range [-1, 1].
- Side Effects: None.
- Invariants: The shape of the output array matches the shape of input x and y.
  Identical arguments always give identical results.
================================================================================
"""

import numpy as np
from numba import njit

from .rng import RNG

PERMUTATION_SIZE = 256

# Axis-aligned gradients keep every corner contribution inside [-1, 1], and
# the fade weights are convex, so a single octave never leaves that range.
_GRADIENT_VECTORS = np.array([[0, 1], [0, -1], [1, 0], [-1, 0]])

@njit
def _lerp(a, b, x):
    "Linear interpolation."
    return a + x * (b - a)

@njit
def _fade(t):
    "6t^5 - 15t^4 + 10t^3"
    return t * t * t * (t * (t * 6 - 15) + 10)

@njit
def _gradient(h, x, y):
    """Calculates the dot product between a gradient vector and coordinates."""
    g = _GRADIENT_VECTORS[h % 4]
    return g[0] * x + g[1] * y

@njit
def perlin_2d(p, x, y):
    """Single-octave Perlin noise at one point."""
    xi = int(np.floor(x))
    yi = int(np.floor(y))

    xf = x - xi
    yf = y - yi

    u = _fade(xf)
    v = _fade(yf)

    px0 = xi % PERMUTATION_SIZE
    px1 = (px0 + 1) % PERMUTATION_SIZE
    py0 = yi % PERMUTATION_SIZE
    py1 = (py0 + 1) % PERMUTATION_SIZE

    idx00 = p[p[px0] + py0]
    idx01 = p[p[px0] + py1]
    idx10 = p[p[px1] + py0]
    idx11 = p[p[px1] + py1]

    g00 = _gradient(idx00, xf, yf)
    g01 = _gradient(idx01, xf, yf - 1)
    g10 = _gradient(idx10, xf - 1, yf)
    g11 = _gradient(idx11, xf - 1, yf - 1)

    x1 = _lerp(g00, g10, u)
    x2 = _lerp(g01, g11, u)
    return _lerp(x1, x2, v)

@njit
def perlin_grid_2d(p, x, y, frequency):
    """Single-octave noise over 2D coordinate arrays, sampled at (x*f, y*f)."""
    rows, cols = x.shape
    out = np.zeros((rows, cols))
    for i in range(rows):
        for j in range(cols):
            out[i, j] = perlin_2d(p, x[i, j] * frequency, y[i, j] * frequency)
    return out

@njit
def fbm_2d(p, x, y, frequency, octaves, persistence, lacunarity, amplitude):
    """
    Fractal Brownian motion over 2D coordinate arrays.

    Each octave samples at (x*freq, y*freq), adds value*amp to a running sum
    and amp to a running normalizer, then scales freq by lacunarity and amp by
    persistence. The result is sum / normalizer, so it stays in [-1, 1] for
    any octave count.
    """
    rows, cols = x.shape
    total_noise = np.zeros((rows, cols))

    for i in range(rows):
        for j in range(cols):
            noise_val = 0.0
            normalizer = 0.0
            amp = amplitude
            freq = frequency

            for _ in range(octaves):
                noise_val += perlin_2d(p, x[i, j] * freq, y[i, j] * freq) * amp
                normalizer += amp
                amp *= persistence
                freq *= lacunarity

            total_noise[i, j] = noise_val / normalizer

    return total_noise


def build_permutation_table(stream: RNG) -> np.ndarray:
    """
    Fisher-Yates shuffle of 0..255 driven by the stream, doubled to 512
    entries so lookups never need to wrap.
    """
    p = list(range(PERMUTATION_SIZE))
    for i in range(PERMUTATION_SIZE - 1, 0, -1):
        j = int(stream.random() * (i + 1))
        p[i], p[j] = p[j], p[i]
    table = np.array(p, dtype=np.int64)
    return np.concatenate([table, table])


class NoiseField:
    """
    A continuous, seed-deterministic 2D noise function.

    The stream is consumed exactly PERMUTATION_SIZE - 1 times, at construction.
    After that the field is immutable and may be shared freely.
    """

    def __init__(self, stream: RNG):
        self._p = build_permutation_table(stream)
        self._p.flags.writeable = False

    @property
    def permutation_table(self) -> np.ndarray:
        return self._p

    def sample(self, x: float, y: float) -> float:
        """Noise value in [-1, 1] at (x, y)."""
        return float(perlin_2d(self._p, float(x), float(y)))

    def sample_grid(self, x_coords: np.ndarray, y_coords: np.ndarray, frequency: float = 1.0) -> np.ndarray:
        """Single-octave noise for every (x, y) pair of two equally shaped 2D arrays."""
        return perlin_grid_2d(
            self._p,
            np.asarray(x_coords, dtype=np.float64),
            np.asarray(y_coords, dtype=np.float64),
            float(frequency),
        )

    def fbm(self, x_coords: np.ndarray, y_coords: np.ndarray, frequency: float, octaves: int,
            persistence: float, lacunarity: float, amplitude: float) -> np.ndarray:
        """Normalized fractal sum of several octaves, see fbm_2d."""
        return fbm_2d(
            self._p,
            np.asarray(x_coords, dtype=np.float64),
            np.asarray(y_coords, dtype=np.float64),
            float(frequency), int(octaves),
            float(persistence), float(lacunarity), float(amplitude),
        )
