# chunkworld/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the chunk
generator. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC SIMULATION.
Instead, pass a configuration dictionary to GeneratorConfig.from_dict() or
directly to the WorldGenerator instance.
================================================================================
"""

# --- Seeding ---
DEFAULT_SEED = 1337

# Tags mixed into the global seed to give every noise field its own,
# independent permutation table. Changing one invalidates every saved seed.
HEIGHT_SEED_TAG = "height"
TEMPERATURE_SEED_TAG = "temperature"
MOISTURE_SEED_TAG = "moisture"
OBJECTS_SEED_TAG = "objects"

# --- Chunk Geometry ---
DEFAULT_CHUNK_SIZE = 64  # Cells on one side of a chunk (32, 64, 128 are typical)
DEFAULT_WORLD_SCALE = 1.0  # World units per height unit
# One extra cell on every side so mesh builders can compute edge normals
# without reading a neighbouring chunk.
HEIGHTMAP_PADDING = 1

# --- Heightmap (fractal Brownian motion) ---
HEIGHTMAP_FREQUENCY = 0.01
HEIGHTMAP_OCTAVES = 4
HEIGHTMAP_PERSISTENCE = 0.5
HEIGHTMAP_LACUNARITY = 2.0
HEIGHTMAP_AMPLITUDE = 1.0

# --- Climate ---
# Base temperature shifts the whole [0, 1] temperature range. 0.5 is neutral.
BASE_TEMPERATURE = 0.5
TEMPERATURE_FREQUENCY = 0.005
# Temperature drop for a 1.0 change in height. Higher terrain is colder.
ALTITUDE_LAPSE_RATE = 0.1
MOISTURE_FREQUENCY = 0.008

# --- Object Placement ---
# Minimum planar distance between two objects of the same chunk, in cells.
MIN_OBJECT_DISTANCE = 5.0
# Candidate attempts around an active point before it is retired.
MAX_PLACEMENT_ATTEMPTS = 30
# Background grid cells searched in each direction around a candidate.
# With a cell size of min_distance / sqrt(2) anything below 2 misses neighbours.
PLACEMENT_SEARCH_RADIUS = 2
OBJECT_SCALE_MIN = 0.8
OBJECT_SCALE_MAX = 1.2
# Used when a biome definition omits its density.
DEFAULT_OBJECT_DENSITY = 0.5

# --- Biomes ---
# Simplified Whittaker model. The id doubles as the index into this list.
DEFAULT_BIOMES = [
    {"id": 0, "name": "Tundra", "color": (176, 176, 176), "object_density": 0.1,
     "object_types": ("rock_small",)},
    {"id": 1, "name": "Grassland", "color": (154, 205, 50), "object_density": 0.3,
     "object_types": ("grass_tall",)},
    {"id": 2, "name": "Desert", "color": (238, 203, 173), "object_density": 0.1,
     "object_types": ("cactus", "rock_desert")},
    {"id": 3, "name": "Boreal Forest", "color": (34, 139, 34), "object_density": 0.8,
     "object_types": ("tree_pine", "tree_spruce")},
    {"id": 4, "name": "Temperate Forest", "color": (34, 90, 34), "object_density": 0.7,
     "object_types": ("tree_oak", "tree_birch")},
    {"id": 5, "name": "Savanna", "color": (189, 183, 107), "object_density": 0.4,
     "object_types": ("tree_acacia", "rock_savanna")},
    {"id": 6, "name": "Taiga", "color": (47, 79, 47), "object_density": 0.9,
     "object_types": ("tree_pine_tall",)},
    {"id": 7, "name": "Temperate Rainforest", "color": (0, 100, 0), "object_density": 0.9,
     "object_types": ("tree_jungle", "bush_fern")},
    {"id": 8, "name": "Tropical Rainforest", "color": (0, 128, 0), "object_density": 1.0,
     "object_types": ("tree_palm", "tree_tropical", "bush_tropical")},
]

# Indexed as [moisture_band][temperature_band] -> biome id.
#                 cold  temperate  hot
BIOME_LOOKUP_TABLE = (
    (0, 1, 2),  # dry
    (3, 4, 5),  # moderate
    (6, 7, 8),  # humid
)

# Number of equal bands each climate axis is split into.
CLIMATE_BANDS = 3
