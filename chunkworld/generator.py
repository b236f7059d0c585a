# chunkworld/generator.py

"""
================================================================================
CORE WORLD GENERATOR
================================================================================
This module contains the main WorldGenerator class, responsible for turning a
world seed and a chunk coordinate into a complete, self-consistent ChunkData
record (heightmap, climate, biomes, object placements).

Data Contract:
---------------
- Inputs (on initialization):
    - config (GeneratorConfig or dict): Generation parameters. A dict is
      treated as overrides of the internal defaults.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - ChunkData records, or a ChunkGenerationError for a failed chunk.
- Side Effects: Logs messages using the provided logger. Optional observers
  are notified synchronously at fixed milestones.
- Invariants: Given the same seed and configuration, the output is
  deterministic, regardless of which chunks were generated before, in which
  order, or in which process.
================================================================================
"""

import logging
import multiprocessing
import time
from dataclasses import dataclass, field
from typing import Iterator, NamedTuple, Optional

import numpy as np

from . import config as DEFAULTS
from .biomes import BiomeGenerator
from .errors import ChunkGenerationError
from .heightmap import HeightmapGenerator
from .placement import place_objects
from .rng import RNG
from .seeding import derive_seed
from .types import ChunkCoord, ChunkData, ChunkMetadata, GenerationContext, GeneratorConfig

# Fixed progress milestones reported to observers.
PROGRESS_START = 0.0
PROGRESS_HEIGHTMAP = 0.25
PROGRESS_BIOMES = 0.5
PROGRESS_OBJECTS = 0.75
PROGRESS_DONE = 1.0


class GenerationObserver:
    """
    Optional hooks for a progress indicator. Subclass and override what you
    need; nothing in the pipeline depends on them.
    """

    def on_progress(self, progress: float) -> None:
        pass

    def on_complete(self, chunk: ChunkData) -> None:
        pass

    def on_error(self, error: ChunkGenerationError) -> None:
        pass


_NULL_OBSERVER = GenerationObserver()


class ChunkResult(NamedTuple):
    coord: ChunkCoord
    chunk: Optional[ChunkData]
    error: Optional[ChunkGenerationError]


@dataclass
class SpiralBatch:
    chunks: list = field(default_factory=list)
    failures: list = field(default_factory=list)  # ChunkGenerationError per failed chunk
    cancelled: bool = False


def spiral_coordinates(center, radius: int) -> list:
    """
    Chunk coordinates of the (2r+1)^2 square around `center`, walking outward
    in a square spiral starting at the centre itself.
    """
    center = ChunkCoord.of(center)
    if radius < 0:
        raise ValueError(f"Spiral radius must be >= 0, got {radius}")

    coords = []
    x = z = 0
    dx, dz = 0, -1
    for _ in range((2 * radius + 1) ** 2):
        if abs(x) <= radius and abs(z) <= radius:
            coords.append(ChunkCoord(center.x + x, center.z + z))
        # Turn at the corners of each ring.
        if x == z or (x < 0 and x == -z) or (x > 0 and x == 1 - z):
            dx, dz = -dz, dx
        x += dx
        z += dz
    return coords


class WorldGenerator:
    """
    Generates chunk data on demand. Holds nothing but the immutable config,
    so one instance can serve any number of chunks in any order.
    """
    def __init__(self, config=None, logger: logging.Logger = None):
        """
        Initializes the world generator.

        Args:
            config (GeneratorConfig | dict, optional): Generation parameters.
                A dict overrides the internal defaults key by key.
            logger (logging.Logger, optional): The logger instance for all output.
        """
        self.logger = logger or logging.getLogger(__name__)
        self.logger.info("WorldGenerator initializing...")
        self._config = self._coerce_config(config)
        self._log_config()

    @staticmethod
    def _coerce_config(config) -> GeneratorConfig:
        if isinstance(config, GeneratorConfig):
            return config
        return GeneratorConfig.from_dict(config)

    def _log_config(self) -> None:
        cfg = self._config
        self.logger.info(f"WorldGenerator initialized with seed: {cfg.seed!r} (global seed {cfg.global_seed})")
        self.logger.info(
            f"Chunk size: {cfg.chunk_size} cells, world scale: {cfg.world_scale}, "
            f"{len(cfg.biomes)} biomes, heightmap octaves: {cfg.heightmap.octaves}"
        )

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    @property
    def seed(self) -> int:
        return self._config.global_seed

    def update_config(self, **changes) -> GeneratorConfig:
        """
        Replaces the config wholesale with a re-validated copy. Chunks already
        handed out keep the values they were generated with.
        """
        self._config = self._config.replace(**changes)
        self.logger.info(f"Configuration updated: {sorted(changes)}")
        return self._config

    # --- Seeds ---------------------------------------------------------------

    def chunk_seed(self, coord: ChunkCoord) -> int:
        return derive_seed(self._config.global_seed, coord.x, coord.z)

    def field_seed(self, tag: str) -> int:
        """
        Seed of a world-wide noise field. Independent of the chunk coordinate,
        so neighbouring chunks sample one continuous field and their borders
        line up.
        """
        return derive_seed(self._config.global_seed, tag)

    def object_seed(self, coord: ChunkCoord) -> int:
        return derive_seed(self._config.global_seed, coord.x, coord.z, DEFAULTS.OBJECTS_SEED_TAG)

    # --- Generation ------------------------------------------------------------

    def generate_chunk(self, chunk_coord, observer: GenerationObserver = None) -> ChunkData:
        """
        Generates one chunk. Returns a complete ChunkData or raises
        ChunkGenerationError; partial results are never returned.
        """
        observer = observer or _NULL_OBSERVER
        coord = ChunkCoord.of(chunk_coord)
        cfg = self._config
        start_time = time.perf_counter()

        try:
            observer.on_progress(PROGRESS_START)

            # 1. Derive every sub-seed up front and give each stage its own stream.
            chunk_seed = self.chunk_seed(coord)
            height_stream = RNG(self.field_seed(DEFAULTS.HEIGHT_SEED_TAG))
            temperature_stream = RNG(self.field_seed(DEFAULTS.TEMPERATURE_SEED_TAG))
            moisture_stream = RNG(self.field_seed(DEFAULTS.MOISTURE_SEED_TAG))
            object_stream = RNG(self.object_seed(coord))

            context = GenerationContext(
                seed=chunk_seed,
                chunk_coord=coord,
                chunk_size=cfg.chunk_size,
                config=cfg,
            )

            # 2. Heightmap, generated padded and then trimmed for the other stages.
            padded_heightmap = HeightmapGenerator(height_stream).generate(context)
            heightmap = HeightmapGenerator.extract_center_area(padded_heightmap, cfg.chunk_size)
            observer.on_progress(PROGRESS_HEIGHTMAP)

            # 3. Climate and biomes, cooled by altitude.
            biome_fields = BiomeGenerator(temperature_stream, moisture_stream).generate(
                context.with_heightmap(heightmap)
            )
            observer.on_progress(PROGRESS_BIOMES)

            # 4. Object placement.
            objects = place_objects(context, biome_fields.biome_map, heightmap, object_stream)
            observer.on_progress(PROGRESS_OBJECTS)

            # 5. Metadata.
            min_height = float(np.min(heightmap))
            max_height = float(np.max(heightmap))
            elapsed_ms = (time.perf_counter() - start_time) * 1000.0

            chunk = ChunkData(
                coord=coord,
                heightmap=heightmap,
                padded_heightmap=padded_heightmap,
                biome_map=biome_fields.biome_map,
                temperature=biome_fields.temperature,
                moisture=biome_fields.moisture,
                objects=tuple(objects),
                metadata=ChunkMetadata(
                    min_height=min_height,
                    max_height=max_height,
                    generation_time_ms=elapsed_ms,
                    seed=chunk_seed,
                ),
            )
        except Exception as exc:
            error = ChunkGenerationError(coord, f"{type(exc).__name__}: {exc}")
            self.logger.error(f"Failed to generate chunk ({coord.x}, {coord.z}): {exc}")
            observer.on_error(error)
            raise error from exc

        self.logger.debug(
            f"Chunk ({coord.x}, {coord.z}) generated in {elapsed_ms:.2f} ms "
            f"({len(chunk.objects)} objects, height {min_height:.3f}..{max_height:.3f})"
        )
        observer.on_progress(PROGRESS_DONE)
        observer.on_complete(chunk)
        return chunk

    def iter_chunks_spiral(self, center, radius: int, cancel_event=None, workers: int = 1) -> Iterator[ChunkResult]:
        """
        Generates the spiral around `center` chunk by chunk, yielding results
        in spiral order. `cancel_event` (anything with is_set()) is checked
        before each chunk. With workers > 1 chunks are generated on a process
        pool; each worker builds its own generator from the same config.
        """
        coords = spiral_coordinates(center, radius)
        self.logger.info(f"Generating {len(coords)} chunks in a spiral of radius {radius} around {tuple(ChunkCoord.of(center))}")

        if workers <= 1:
            for coord in coords:
                if cancel_event is not None and cancel_event.is_set():
                    self.logger.info("Spiral generation cancelled.")
                    return
                try:
                    yield ChunkResult(coord, self.generate_chunk(coord), None)
                except ChunkGenerationError as error:
                    yield ChunkResult(coord, None, error)
            return

        init_args = (self._config, self.logger.name)
        with multiprocessing.Pool(processes=workers, initializer=_init_worker, initargs=init_args) as pool:
            for result in pool.imap(_generate_in_worker, coords):
                if cancel_event is not None and cancel_event.is_set():
                    self.logger.info("Spiral generation cancelled.")
                    pool.terminate()
                    return
                if result.error is not None:
                    # Already logged by the worker that raised it.
                    self.logger.debug(str(result.error))
                yield result

    def generate_chunks_spiral(self, center, radius: int, cancel_event=None, workers: int = 1) -> SpiralBatch:
        """Collects iter_chunks_spiral() into a batch; failed chunks do not stop the others."""
        batch = SpiralBatch()
        expected = (2 * radius + 1) ** 2
        for result in self.iter_chunks_spiral(center, radius, cancel_event=cancel_event, workers=workers):
            if result.error is None:
                batch.chunks.append(result.chunk)
            else:
                batch.failures.append(result.error)
        batch.cancelled = len(batch.chunks) + len(batch.failures) < expected
        self.logger.info(
            f"Spiral batch finished: {len(batch.chunks)} chunks, {len(batch.failures)} failures"
            f"{' (cancelled)' if batch.cancelled else ''}"
        )
        return batch


def generate_chunk(chunk_coord, config, observer: GenerationObserver = None) -> ChunkData:
    """One-shot convenience wrapper around WorldGenerator.generate_chunk()."""
    return WorldGenerator(config).generate_chunk(chunk_coord, observer=observer)


# --- Worker process state (one generator per process) ---
worker_generator = None

def _init_worker(config: GeneratorConfig, logger_name: str):
    """Initializes the generator for each worker process."""
    global worker_generator
    worker_generator = WorldGenerator(config, logger=logging.getLogger(f"{logger_name}.worker"))

def _generate_in_worker(coord: ChunkCoord) -> ChunkResult:
    try:
        return ChunkResult(coord, worker_generator.generate_chunk(coord), None)
    except ChunkGenerationError as error:
        return ChunkResult(coord, None, error)
