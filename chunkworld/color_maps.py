# chunkworld/color_maps.py

"""
================================================================================
SHARED COLOR MAPPING UTILITIES
================================================================================
This module contains the color mapping constants and functions for converting
raw chunk data (height, temperature, moisture, biome ids) into RGB color
arrays for diagnostic previews.

It is a pure, stateless utility with no imaging dependencies; callers decide
how to write the arrays out. All returned arrays are (rows, cols, 3) uint8,
i.e. [z, x, channel], which is what Pillow expects.
================================================================================
"""
import numpy as np

COLOR_MAP_CLIMATE = {
    "cold": (0, 0, 255),
    "temperate": (255, 255, 0),
    "hot": (255, 0, 0),
    "dry": (210, 180, 140),
    "wet": (70, 130, 180),
}

# Color of object markers drawn over biome previews.
COLOR_OBJECT_MARKER = (255, 255, 255)

# --- Color Lookup Table (LUT) Generation ---
def create_biome_color_lut(biomes) -> np.ndarray:
    """
    Creates a 256-entry LUT where the index is the biome id and the value is
    the biome's configured RGB color. Unused ids map to black.
    """
    lut = np.zeros((256, 3), dtype=np.uint8)
    for biome in biomes:
        lut[biome.id] = biome.color
    return lut

def create_temperature_lut() -> np.ndarray:
    """Creates a 256-entry color LUT for normalized temperature [0, 1]."""
    t = np.linspace(0.0, 1.0, 256)[..., np.newaxis]
    cold = np.array(COLOR_MAP_CLIMATE["cold"])
    temperate = np.array(COLOR_MAP_CLIMATE["temperate"])
    hot = np.array(COLOR_MAP_CLIMATE["hot"])
    colors = np.where(
        t < 0.5,
        (1 - t / 0.5) * cold + (t / 0.5) * temperate,
        (1 - (t - 0.5) / 0.5) * temperate + ((t - 0.5) / 0.5) * hot,
    )
    return colors.astype(np.uint8)

def create_moisture_lut() -> np.ndarray:
    """Creates a 256-entry color LUT for normalized moisture [0, 1]."""
    t = np.linspace(0.0, 1.0, 256)[..., np.newaxis]
    colors = (1 - t) * np.array(COLOR_MAP_CLIMATE["dry"]) + t * np.array(COLOR_MAP_CLIMATE["wet"])
    return colors.astype(np.uint8)

# --- Color Array Generation Functions ---
def _to_lut_indices(normalized_values: np.ndarray) -> np.ndarray:
    return (np.clip(normalized_values, 0.0, 1.0) * 255).astype(np.uint8)

def get_biome_color_array(biome_map: np.ndarray, biome_lut: np.ndarray) -> np.ndarray:
    """Converts an integer biome map into an RGB color array using a LUT."""
    return biome_lut[biome_map]

def get_climate_color_array(values: np.ndarray, lut: np.ndarray) -> np.ndarray:
    """Converts normalized temperature or moisture [0, 1] into RGB using a LUT."""
    return lut[_to_lut_indices(values)]

def get_elevation_color_array(height_values: np.ndarray) -> np.ndarray:
    """Converts heights in [-1, 1] into a grayscale RGB color array."""
    gray_values = _to_lut_indices((np.asarray(height_values, dtype=np.float64) + 1.0) / 2.0)
    return np.stack([gray_values] * 3, axis=-1)

def draw_object_markers(color_array: np.ndarray, objects, chunk_origin: tuple) -> np.ndarray:
    """
    Returns a copy of a chunk color array with one marker pixel per object.
    `chunk_origin` is the world (x, z) of the chunk's first cell.
    """
    marked = color_array.copy()
    rows, cols = marked.shape[:2]
    origin_x, origin_z = chunk_origin
    for obj in objects:
        col = int(obj.position[0] - origin_x)
        row = int(obj.position[2] - origin_z)
        if 0 <= row < rows and 0 <= col < cols:
            marked[row, col] = COLOR_OBJECT_MARKER
    return marked
