# chunkworld/types.py

"""
================================================================================
DATA MODEL
================================================================================
Immutable value types shared by every stage of the generation pipeline.

- GeneratorConfig (and its parameter groups) is built once, validated, and
  then only ever replaced wholesale.
- GenerationContext is created fresh for each chunk request.
- ChunkData is the pipeline's output. Its arrays are read-only views; the
  pipeline keeps no reference to them once returned.
================================================================================
"""

import dataclasses
import math
import numbers
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Optional, Union

import numpy as np

from . import config as DEFAULTS
from .errors import ConfigurationError
from .seeding import resolve_seed


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigurationError(message)


def _is_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_positive(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value) and value > 0


def _octave_series_finite(start: float, ratio: float, octaves: int) -> bool:
    """True when start, start*ratio, ... over `octaves` terms, and their sum, stay finite."""
    if ratio <= 1.0:
        return math.isfinite(float(start) * octaves)
    term = float(start)
    total = 0.0
    for _ in range(octaves):
        total += term
        if not math.isfinite(total):
            return False
        term *= ratio
    return True


@dataclass(frozen=True)
class ChunkCoord:
    """Integer chunk address. A chunk covers [x*size, (x+1)*size) on each axis."""
    x: int
    z: int

    @classmethod
    def from_world(cls, world_x: float, world_z: float, chunk_size: int) -> "ChunkCoord":
        """The chunk containing a world position."""
        return cls(math.floor(world_x / chunk_size), math.floor(world_z / chunk_size))

    @classmethod
    def of(cls, value) -> "ChunkCoord":
        """Accepts a ChunkCoord or any (x, z) pair."""
        if isinstance(value, ChunkCoord):
            return value
        x, z = value
        return cls(int(x), int(z))

    def __iter__(self):
        yield self.x
        yield self.z


@dataclass(frozen=True)
class BiomeConfig:
    id: int
    name: str
    color: tuple = (255, 255, 255)
    object_density: float = DEFAULTS.DEFAULT_OBJECT_DENSITY
    object_types: tuple = ()
    # Surface friction for physics colliders built from the chunk. None means
    # the collider's own default.
    friction: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict) -> "BiomeConfig":
        _require(isinstance(data, Mapping), f"Biome definitions must be mappings, got {data!r}")
        _require("id" in data, f"Biome definition is missing its 'id': {data!r}")
        color = data.get("color", (255, 255, 255))
        if isinstance(color, dict):
            color = (color.get("r", 0), color.get("g", 0), color.get("b", 0))
        return cls(
            id=data["id"],
            name=data.get("name", f"Biome {data['id']}"),
            color=tuple(color),
            object_density=data.get("object_density", DEFAULTS.DEFAULT_OBJECT_DENSITY),
            object_types=tuple(data.get("object_types", ())),
            friction=data.get("friction"),
        )

    def validate(self) -> None:
        _require(_is_int(self.id) and 0 <= self.id <= 255, f"Biome id must be an integer in [0, 255], got {self.id!r}")
        _require(
            len(self.color) == 3 and all(_is_int(c) and 0 <= c <= 255 for c in self.color),
            f"Biome {self.id} color must be three integers in [0, 255], got {self.color!r}",
        )
        _require(
            isinstance(self.object_density, numbers.Real) and 0.0 <= self.object_density <= 1.0,
            f"Biome {self.id} object_density must be in [0, 1], got {self.object_density!r}",
        )
        _require(
            all(isinstance(t, str) and t for t in self.object_types),
            f"Biome {self.id} object_types must be non-empty strings",
        )
        _require(
            self.friction is None or (
                isinstance(self.friction, numbers.Real) and not isinstance(self.friction, bool)
                and math.isfinite(self.friction) and self.friction >= 0.0
            ),
            f"Biome {self.id} friction must be a finite number >= 0, got {self.friction!r}",
        )


@dataclass(frozen=True)
class HeightmapParams:
    frequency: float = DEFAULTS.HEIGHTMAP_FREQUENCY
    octaves: int = DEFAULTS.HEIGHTMAP_OCTAVES
    persistence: float = DEFAULTS.HEIGHTMAP_PERSISTENCE
    lacunarity: float = DEFAULTS.HEIGHTMAP_LACUNARITY
    amplitude: float = DEFAULTS.HEIGHTMAP_AMPLITUDE

    def validate(self) -> None:
        _require(_is_positive(self.frequency), f"Heightmap frequency must be > 0, got {self.frequency!r}")
        _require(_is_int(self.octaves) and self.octaves >= 1, f"Heightmap octaves must be an integer >= 1, got {self.octaves!r}")
        # A non-positive amplitude or persistence can make the FBM normalizer zero.
        _require(_is_positive(self.persistence), f"Heightmap persistence must be > 0, got {self.persistence!r}")
        _require(_is_positive(self.lacunarity), f"Heightmap lacunarity must be > 0, got {self.lacunarity!r}")
        _require(_is_positive(self.amplitude), f"Heightmap amplitude must be > 0, got {self.amplitude!r}")
        # Each value is fine on its own, but the octave loop multiplies them up.
        _require(
            _octave_series_finite(self.frequency, self.lacunarity, self.octaves),
            f"Heightmap frequency {self.frequency!r} overflows after {self.octaves} octaves of lacunarity {self.lacunarity!r}",
        )
        _require(
            _octave_series_finite(self.amplitude, self.persistence, self.octaves),
            f"Heightmap amplitude {self.amplitude!r} overflows after {self.octaves} octaves of persistence {self.persistence!r}",
        )


@dataclass(frozen=True)
class TemperatureParams:
    base_temperature: float = DEFAULTS.BASE_TEMPERATURE
    frequency: float = DEFAULTS.TEMPERATURE_FREQUENCY
    altitude_lapse_rate: float = DEFAULTS.ALTITUDE_LAPSE_RATE

    def validate(self) -> None:
        _require(
            isinstance(self.base_temperature, numbers.Real) and 0.0 <= self.base_temperature <= 1.0,
            f"Base temperature must be in [0, 1], got {self.base_temperature!r}",
        )
        _require(_is_positive(self.frequency), f"Temperature frequency must be > 0, got {self.frequency!r}")
        _require(
            isinstance(self.altitude_lapse_rate, numbers.Real) and math.isfinite(self.altitude_lapse_rate),
            f"Altitude lapse rate must be a finite number, got {self.altitude_lapse_rate!r}",
        )


@dataclass(frozen=True)
class MoistureParams:
    frequency: float = DEFAULTS.MOISTURE_FREQUENCY

    def validate(self) -> None:
        _require(_is_positive(self.frequency), f"Moisture frequency must be > 0, got {self.frequency!r}")


@dataclass(frozen=True)
class PlacementParams:
    min_distance: float = DEFAULTS.MIN_OBJECT_DISTANCE
    max_attempts: int = DEFAULTS.MAX_PLACEMENT_ATTEMPTS
    search_radius: int = DEFAULTS.PLACEMENT_SEARCH_RADIUS
    scale_min: float = DEFAULTS.OBJECT_SCALE_MIN
    scale_max: float = DEFAULTS.OBJECT_SCALE_MAX

    def validate(self) -> None:
        _require(_is_positive(self.min_distance), f"Minimum object distance must be > 0, got {self.min_distance!r}")
        _require(_is_int(self.max_attempts) and self.max_attempts >= 1, f"max_attempts must be an integer >= 1, got {self.max_attempts!r}")
        _require(_is_int(self.search_radius) and self.search_radius >= 2, f"search_radius must be an integer >= 2, got {self.search_radius!r}")
        _require(
            _is_positive(self.scale_min) and _is_positive(self.scale_max) and self.scale_min <= self.scale_max,
            f"Object scale band must satisfy 0 < scale_min <= scale_max, got ({self.scale_min!r}, {self.scale_max!r})",
        )


def _merge_group(cls, overrides, base=None):
    """Merges a mapping of overrides over `base` (or the defaults) key by key."""
    base = base if base is not None else cls()
    if overrides is None:
        return base
    if isinstance(overrides, cls):
        return overrides
    _require(isinstance(overrides, Mapping), f"{cls.__name__} overrides must be a mapping, got {overrides!r}")
    known = {f.name for f in dataclasses.fields(cls)}
    unknown = set(overrides) - known
    _require(not unknown, f"Unknown {cls.__name__} keys: {sorted(unknown)}")
    return dataclasses.replace(base, **overrides)


def _as_biome(value) -> "BiomeConfig":
    return value if isinstance(value, BiomeConfig) else BiomeConfig.from_dict(value)


def _is_sequence(value) -> bool:
    return isinstance(value, (list, tuple))


# GeneratorConfig field -> parameter group type.
_PARAMETER_GROUPS = {
    "heightmap": HeightmapParams,
    "temperature": TemperatureParams,
    "moisture": MoistureParams,
    "placement": PlacementParams,
}


@dataclass(frozen=True)
class GeneratorConfig:
    """
    Immutable generation parameters.

    Invariant: every entry of biome_lookup_table names a biome in `biomes`.
    """
    seed: Union[int, str] = DEFAULTS.DEFAULT_SEED
    chunk_size: int = DEFAULTS.DEFAULT_CHUNK_SIZE
    world_scale: float = DEFAULTS.DEFAULT_WORLD_SCALE
    heightmap: HeightmapParams = field(default_factory=HeightmapParams)
    temperature: TemperatureParams = field(default_factory=TemperatureParams)
    moisture: MoistureParams = field(default_factory=MoistureParams)
    placement: PlacementParams = field(default_factory=PlacementParams)
    biomes: tuple = field(default_factory=lambda: tuple(BiomeConfig.from_dict(b) for b in DEFAULTS.DEFAULT_BIOMES))
    biome_lookup_table: tuple = DEFAULTS.BIOME_LOOKUP_TABLE

    def __post_init__(self):
        # Plain mappings are accepted for the parameter groups and biomes.
        for name, group_cls in _PARAMETER_GROUPS.items():
            object.__setattr__(self, name, _merge_group(group_cls, getattr(self, name)))

        # Shape checks come first so malformed input fails as a configuration
        # error rather than while being normalized.
        _require(_is_sequence(self.biomes), f"biomes must be a list of biome definitions, got {self.biomes!r}")
        table = self.biome_lookup_table
        _require(
            _is_sequence(table) and all(_is_sequence(row) for row in table),
            f"biome_lookup_table must be a list of rows, got {table!r}",
        )

        # Normalize nested lists so the config hashes and pickles cleanly.
        object.__setattr__(self, "biomes", tuple(_as_biome(b) for b in self.biomes))
        object.__setattr__(self, "biome_lookup_table", tuple(tuple(row) for row in table))
        self.validate()
        object.__setattr__(self, "_global_seed", resolve_seed(self.seed))
        object.__setattr__(self, "_biomes_by_id", {b.id: b for b in self.biomes})

    @classmethod
    def from_dict(cls, user_config: Optional[dict] = None) -> "GeneratorConfig":
        """
        Builds a config from a plain dictionary. Missing keys fall back to the
        constants in chunkworld.config; nested parameter groups are merged key
        by key.
        """
        user_config = user_config or {}
        _require(isinstance(user_config, Mapping), f"Configuration must be a mapping, got {user_config!r}")
        return cls(
            seed=user_config.get("seed", DEFAULTS.DEFAULT_SEED),
            chunk_size=user_config.get("chunk_size", DEFAULTS.DEFAULT_CHUNK_SIZE),
            world_scale=user_config.get("world_scale", DEFAULTS.DEFAULT_WORLD_SCALE),
            heightmap=_merge_group(HeightmapParams, user_config.get("heightmap_params")),
            temperature=_merge_group(TemperatureParams, user_config.get("temperature_params")),
            moisture=_merge_group(MoistureParams, user_config.get("moisture_params")),
            placement=_merge_group(PlacementParams, user_config.get("placement_params")),
            biomes=user_config.get("biomes", DEFAULTS.DEFAULT_BIOMES),
            biome_lookup_table=user_config.get("biome_lookup_table", DEFAULTS.BIOME_LOOKUP_TABLE),
        )

    def to_dict(self) -> dict:
        """JSON-ready mapping accepted back by from_dict()."""
        return {
            "seed": self.seed,
            "chunk_size": self.chunk_size,
            "world_scale": self.world_scale,
            "heightmap_params": dataclasses.asdict(self.heightmap),
            "temperature_params": dataclasses.asdict(self.temperature),
            "moisture_params": dataclasses.asdict(self.moisture),
            "placement_params": dataclasses.asdict(self.placement),
            "biomes": [
                {**dataclasses.asdict(b), "color": list(b.color), "object_types": list(b.object_types)}
                for b in self.biomes
            ],
            "biome_lookup_table": [list(row) for row in self.biome_lookup_table],
        }

    def replace(self, **changes) -> "GeneratorConfig":
        """
        A new, re-validated config with the given fields replaced. A mapping
        given for a parameter group is merged over this config's values.
        """
        for name, group_cls in _PARAMETER_GROUPS.items():
            if isinstance(changes.get(name), Mapping):
                changes[name] = _merge_group(group_cls, changes[name], base=getattr(self, name))
        return dataclasses.replace(self, **changes)

    def validate(self) -> None:
        """Raises ConfigurationError on the first invalid parameter."""
        if isinstance(self.seed, bool) or not isinstance(self.seed, (numbers.Integral, str)):
            raise ConfigurationError(f"Seed must be an integer or a string, got {self.seed!r}")
        _require(_is_int(self.chunk_size) and self.chunk_size >= 1, f"chunk_size must be an integer >= 1, got {self.chunk_size!r}")
        _require(_is_positive(self.world_scale), f"world_scale must be > 0, got {self.world_scale!r}")
        self.heightmap.validate()
        self.temperature.validate()
        self.moisture.validate()
        self.placement.validate()

        _require(len(self.biomes) > 0, "At least one biome must be configured")
        for biome in self.biomes:
            _require(isinstance(biome, BiomeConfig), f"Biomes must be BiomeConfig instances, got {type(biome).__name__}")
            biome.validate()
        ids = [b.id for b in self.biomes]
        _require(len(ids) == len(set(ids)), f"Biome ids must be unique, got {ids}")

        table = self.biome_lookup_table
        bands = DEFAULTS.CLIMATE_BANDS
        _require(
            len(table) == bands and all(len(row) == bands for row in table),
            f"biome_lookup_table must be {bands}x{bands}",
        )
        known_ids = set(ids)
        for row in table:
            for biome_id in row:
                _require(_is_int(biome_id), f"biome_lookup_table entries must be integers, got {biome_id!r}")
                _require(biome_id in known_ids, f"biome_lookup_table references unknown biome id {biome_id}")

    @property
    def global_seed(self) -> int:
        """The integer seed every sub-seed is derived from."""
        return self._global_seed

    def biome(self, biome_id: int) -> BiomeConfig:
        return self._biomes_by_id[int(biome_id)]


@dataclass(frozen=True)
class GenerationContext:
    seed: int
    chunk_coord: ChunkCoord
    chunk_size: int
    config: GeneratorConfig
    # Unpadded heightmap, shape (chunk_size, chunk_size), for generators
    # that depend on terrain height.
    heightmap: Optional[np.ndarray] = None

    def with_heightmap(self, heightmap: np.ndarray) -> "GenerationContext":
        return dataclasses.replace(self, heightmap=heightmap)

    @property
    def world_origin(self) -> tuple:
        """World cell coordinates of the chunk's (0, 0) cell."""
        return (self.chunk_coord.x * self.chunk_size, self.chunk_coord.z * self.chunk_size)


@dataclass(frozen=True)
class ObjectInstance:
    archetype: str
    position: tuple  # (x, y, z) in world space
    rotation_y: float  # radians about the vertical axis
    scale: float

    @property
    def quaternion(self) -> tuple:
        """(x, y, z, w) of the yaw rotation."""
        half = self.rotation_y / 2.0
        return (0.0, math.sin(half), 0.0, math.cos(half))

    @property
    def scale_xyz(self) -> tuple:
        return (self.scale, self.scale, self.scale)


@dataclass(frozen=True)
class ChunkMetadata:
    min_height: float
    max_height: float
    # Diagnostic only; excluded from equality so reproducibility checks can
    # compare whole metadata records.
    generation_time_ms: float = field(compare=False)
    seed: int


@dataclass(frozen=True, eq=False)
class ChunkData:
    coord: ChunkCoord
    heightmap: np.ndarray
    padded_heightmap: np.ndarray
    biome_map: np.ndarray
    temperature: np.ndarray
    moisture: np.ndarray
    objects: tuple
    metadata: ChunkMetadata

    def __post_init__(self):
        for name in ("heightmap", "padded_heightmap", "biome_map", "temperature", "moisture"):
            getattr(self, name).flags.writeable = False

    def __setstate__(self, state):
        # Unpickled arrays come back writeable; restore the read-only views.
        self.__dict__.update(state)
        self.__post_init__()

    def same_content(self, other: "ChunkData") -> bool:
        """True when every deterministic field matches bit for bit."""
        return (
            self.coord == other.coord
            and self.metadata == other.metadata
            and self.objects == other.objects
            and all(
                np.array_equal(getattr(self, name), getattr(other, name))
                for name in ("heightmap", "padded_heightmap", "biome_map", "temperature", "moisture")
            )
        )
