# chunkworld/placement.py

"""
================================================================================
OBJECT PLACEMENT
================================================================================
Scatters object instances (trees, rocks, ...) over a chunk in two passes:

1. Poisson-disk sampling produces blue-noise candidate positions, no two
   closer than the configured minimum distance.
2. Each candidate is accepted or rejected against its biome's object density,
   and accepted ones get an archetype, a yaw rotation and a scale.

Data Contract:
---------------
- Inputs: GenerationContext, the chunk's biome map and unpadded heightmap, and
  one pseudo-random stream owned by this call.
- Outputs: a list of ObjectInstance in generation order.
- Side Effects: Advances the given stream.
- Invariants: The stream is consumed in a fixed, sequence-only order (ordered
  lists and index grids, never set/dict iteration), so the same seed always
  gives the same instances in the same order.
================================================================================
"""

import math

import numpy as np
from scipy.spatial import cKDTree

from . import config as DEFAULTS
from .rng import RNG
from .types import GenerationContext, ObjectInstance

TWO_PI = 2.0 * math.pi
_EMPTY = -1


def _is_far_enough(px: float, pz: float, points: list, grid: np.ndarray, cell_size: float,
                   min_distance: float, search_radius: int) -> bool:
    """Checks the candidate against every point in the surrounding grid cells."""
    grid_h, grid_w = grid.shape
    gx = int(px // cell_size)
    gz = int(pz // cell_size)
    for dz in range(-search_radius, search_radius + 1):
        cz = gz + dz
        if cz < 0 or cz >= grid_h:
            continue
        for dx in range(-search_radius, search_radius + 1):
            cx = gx + dx
            if cx < 0 or cx >= grid_w:
                continue
            index = grid[cz, cx]
            if index == _EMPTY:
                continue
            ox, oz = points[index]
            if math.hypot(px - ox, pz - oz) < min_distance:
                return False
    return True


def poisson_disk_sampling(chunk_size: float, min_distance: float, stream: RNG,
                          max_attempts: int = DEFAULTS.MAX_PLACEMENT_ATTEMPTS,
                          search_radius: int = DEFAULTS.PLACEMENT_SEARCH_RADIUS) -> list:
    """
    Bridson-style minimum-distance sampling over [0, chunk_size)^2.

    Returns (x, z) tuples in the order they were accepted. The background grid
    has a cell size of min_distance / sqrt(2), so each cell holds at most one
    point and only a (2*search_radius + 1)^2 neighbourhood is ever scanned.
    """
    cell_size = min_distance / math.sqrt(2.0)
    grid_width = int(math.ceil(chunk_size / cell_size))
    grid = np.full((grid_width, grid_width), _EMPTY, dtype=np.int64)

    def cell_of(value: float) -> int:
        return min(int(value // cell_size), grid_width - 1)

    first = (stream.random() * chunk_size, stream.random() * chunk_size)
    points = [first]
    active = [0]
    grid[cell_of(first[1]), cell_of(first[0])] = 0

    while active:
        active_slot = int(stream.random() * len(active))
        base_x, base_z = points[active[active_slot]]

        found = False
        for _ in range(max_attempts):
            angle = stream.random() * TWO_PI
            distance = min_distance + stream.random() * min_distance
            px = base_x + math.cos(angle) * distance
            pz = base_z + math.sin(angle) * distance

            if not (0.0 <= px < chunk_size and 0.0 <= pz < chunk_size):
                continue
            if _is_far_enough(px, pz, points, grid, cell_size, min_distance, search_radius):
                points.append((px, pz))
                active.append(len(points) - 1)
                grid[cell_of(pz), cell_of(px)] = len(points) - 1
                found = True
                break

        if not found:
            # Order-preserving removal keeps the slot -> point mapping deterministic.
            del active[active_slot]

    return points


def place_objects(context: GenerationContext, biome_map: np.ndarray, heightmap: np.ndarray, stream: RNG) -> list:
    """Turns sampled candidates into object instances according to each biome's density."""
    cfg = context.config
    params = cfg.placement
    size = context.chunk_size
    origin_x, origin_z = context.world_origin

    candidates = poisson_disk_sampling(
        size, params.min_distance, stream,
        max_attempts=params.max_attempts,
        search_radius=params.search_radius,
    )

    scale_span = params.scale_max - params.scale_min
    objects = []
    for px, pz in candidates:
        cell_x = min(int(math.floor(px)), size - 1)
        cell_z = min(int(math.floor(pz)), size - 1)
        biome = cfg.biome(biome_map[cell_z, cell_x])

        # Biomes without archetypes consume no randomness.
        if not biome.object_types:
            continue
        if stream.random() >= biome.object_density:
            continue

        archetype = biome.object_types[int(stream.random() * len(biome.object_types))]
        rotation_y = stream.random() * TWO_PI
        scale = params.scale_min + stream.random() * scale_span

        position = (
            float(origin_x + px),
            float(heightmap[cell_z, cell_x]) * cfg.world_scale,
            float(origin_z + pz),
        )
        objects.append(ObjectInstance(archetype, position, rotation_y, scale))

    return objects


def nearest_neighbor_distances(objects) -> np.ndarray:
    """
    Planar (x, z) distance from each object to its closest neighbour.
    Diagnostic helper for previews and tests; returns an empty array for
    fewer than two objects.
    """
    if len(objects) < 2:
        return np.empty(0)
    planar = np.array([(obj.position[0], obj.position[2]) for obj in objects])
    tree = cKDTree(planar)
    dist, _ = tree.query(planar, k=2)
    return dist[:, 1]
