# bake_world.py

"""
================================================================================
CHUNK PREVIEW BAKER SCRIPT
================================================================================
This script is a command-line tool for generating a square spiral of chunks
and writing diagnostic previews of each one as PNG images: a biome map
(with object markers), a grayscale heightmap, and temperature and moisture
maps. A summary.json records per-chunk metadata. It is meant for eyeballing
seeds and checking that a configuration is reproducible, not as a storage
format.

Usage:
    python bake_world.py --config path/to/your/config.json --radius 2
================================================================================
"""
import os
import sys
import json
import logging
import argparse
import time
import numpy as np
from PIL import Image
from tqdm import tqdm

# Add project root to Python path to allow importing from chunkworld
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from chunkworld import color_maps
from chunkworld.errors import ConfigurationError
from chunkworld.generator import WorldGenerator
from chunkworld.placement import nearest_neighbor_distances
from chunkworld.types import ChunkCoord, GeneratorConfig

def save_chunk_image(color_array: np.ndarray, directory: str, coord: ChunkCoord) -> str:
    """Saves an (rows, cols, 3) uint8 array as <x>_<z>.png and returns the path."""
    os.makedirs(directory, exist_ok=True)
    file_path = os.path.join(directory, f"{coord.x}_{coord.z}.png")
    Image.fromarray(np.ascontiguousarray(color_array), 'RGB').save(file_path, 'PNG')
    return file_path

def summarize_chunk(chunk) -> dict:
    """The per-chunk entry written to summary.json."""
    spacing = nearest_neighbor_distances(chunk.objects)
    archetypes = {}
    for obj in chunk.objects:
        archetypes[obj.archetype] = archetypes.get(obj.archetype, 0) + 1
    return {
        "x": chunk.coord.x,
        "z": chunk.coord.z,
        "seed": chunk.metadata.seed,
        "min_height": chunk.metadata.min_height,
        "max_height": chunk.metadata.max_height,
        "generation_time_ms": round(chunk.metadata.generation_time_ms, 3),
        "object_count": len(chunk.objects),
        "min_object_spacing": float(spacing.min()) if spacing.size else None,
        "archetypes": dict(sorted(archetypes.items())),
    }

def load_generation_parameters(config_path: str) -> dict:
    """Reads the 'world_generation_parameters' object from a JSON config file."""
    with open(config_path, 'r') as f:
        config = json.load(f)
    return config.get('world_generation_parameters', {})

# --- Main Baking Function ---
def bake_world(world_params: dict, output_dir: str, center=(0, 0), radius: int = 1,
               workers: int = 1, logger: logging.Logger = None) -> dict:
    """
    Generates the spiral of chunks and writes previews and summary.json to
    `output_dir`. Returns the summary dictionary.
    """
    logger = logger or logging.getLogger("Baker")
    generator = WorldGenerator(config=world_params, logger=logger)
    cfg = generator.config

    biome_lut = color_maps.create_biome_color_lut(cfg.biomes)
    temperature_lut = color_maps.create_temperature_lut()
    moisture_lut = color_maps.create_moisture_lut()
    biome_dir = os.path.join(output_dir, "biome")
    height_dir = os.path.join(output_dir, "height")
    temperature_dir = os.path.join(output_dir, "temperature")
    moisture_dir = os.path.join(output_dir, "moisture")
    os.makedirs(output_dir, exist_ok=True)

    summary = {"seed": cfg.seed, "global_seed": cfg.global_seed, "chunks": [], "failures": []}
    total_chunks = (2 * radius + 1) ** 2
    start_time = time.perf_counter()

    results = generator.iter_chunks_spiral(center, radius, workers=workers)
    for result in tqdm(results, total=total_chunks, desc="Baking Chunks"):
        if result.error is not None:
            summary["failures"].append({"x": result.coord.x, "z": result.coord.z, "reason": result.error.reason})
            continue

        chunk = result.chunk
        origin = (chunk.coord.x * cfg.chunk_size, chunk.coord.z * cfg.chunk_size)
        biome_colors = color_maps.get_biome_color_array(chunk.biome_map, biome_lut)
        biome_colors = color_maps.draw_object_markers(biome_colors, chunk.objects, origin)
        save_chunk_image(biome_colors, biome_dir, chunk.coord)
        save_chunk_image(color_maps.get_elevation_color_array(chunk.heightmap), height_dir, chunk.coord)
        save_chunk_image(color_maps.get_climate_color_array(chunk.temperature, temperature_lut), temperature_dir, chunk.coord)
        save_chunk_image(color_maps.get_climate_color_array(chunk.moisture, moisture_lut), moisture_dir, chunk.coord)
        summary["chunks"].append(summarize_chunk(chunk))

    # --- Finalization ---
    with open(os.path.join(output_dir, "summary.json"), 'w') as f:
        json.dump(summary, f, indent=2)
    with open(os.path.join(output_dir, "generation_config.json"), 'w') as f:
        json.dump(cfg.to_dict(), f, indent=2)

    end_time = time.perf_counter()
    logger.info(
        f"Baking complete! {len(summary['chunks'])} chunks, {len(summary['failures'])} failures, "
        f"total time: {end_time - start_time:.2f} seconds."
    )
    logger.info(f"Previews and summary.json saved to: {output_dir}")
    return summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chunk preview baker for the deterministic chunk generator.")
    parser.add_argument("--config", type=str, help="Path to a JSON file with a 'world_generation_parameters' object.")
    parser.add_argument("--seed", type=str, help="World seed. Digits are used as an integer, anything else is hashed.")
    parser.add_argument("--center", type=int, nargs=2, default=(0, 0), metavar=("X", "Z"), help="Centre chunk of the spiral.")
    parser.add_argument("--radius", type=int, default=1, help="Spiral radius in chunks.")
    parser.add_argument("--workers", type=int, default=1, help="Worker processes (1 = generate in this process).")
    parser.add_argument("--output", type=str, default=None, help="Output directory (default: baked_chunks/seed_<seed>).")
    return parser


# --- Command-Line Interface ---
def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("Baker")

    world_params = {}
    if args.config:
        logger.info(f"Loading configuration from: {args.config}")
        try:
            world_params = load_generation_parameters(args.config)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            logger.critical(f"Failed to load or parse config file: {e}")
            return 1
    if args.seed is not None:
        seed = args.seed
        world_params['seed'] = int(seed) if seed.lstrip('-').isdigit() else seed

    # Validate before any output directory is created.
    try:
        seed = GeneratorConfig.from_dict(world_params).seed
    except ConfigurationError as e:
        logger.critical(f"Invalid configuration: {e}")
        return 2

    output_dir = args.output or os.path.join("baked_chunks", f"seed_{seed}")
    bake_world(world_params, output_dir, center=tuple(args.center), radius=args.radius,
               workers=args.workers, logger=logger)
    return 0


if __name__ == "__main__":
    sys.exit(main())
