import numpy as np

from chunkworld import color_maps
from chunkworld.types import GeneratorConfig, ObjectInstance


def test_biome_lut_uses_configured_colors() -> None:
    config = GeneratorConfig()
    lut = color_maps.create_biome_color_lut(config.biomes)
    assert lut.shape == (256, 3)
    assert lut.dtype == np.uint8
    for biome in config.biomes:
        assert tuple(lut[biome.id]) == biome.color
    assert tuple(lut[200]) == (0, 0, 0)


def test_biome_color_array_shape() -> None:
    lut = color_maps.create_biome_color_lut(GeneratorConfig().biomes)
    biome_map = np.array([[0, 8], [4, 4]], dtype=np.uint8)
    colors = color_maps.get_biome_color_array(biome_map, lut)
    assert colors.shape == (2, 2, 3)
    assert tuple(colors[0, 1]) == (0, 128, 0)


def test_climate_luts_span_their_endpoints() -> None:
    temperature = color_maps.create_temperature_lut()
    moisture = color_maps.create_moisture_lut()
    assert temperature.shape == moisture.shape == (256, 3)
    assert tuple(temperature[0]) == color_maps.COLOR_MAP_CLIMATE["cold"]
    assert tuple(temperature[255]) == color_maps.COLOR_MAP_CLIMATE["hot"]
    assert tuple(moisture[0]) == color_maps.COLOR_MAP_CLIMATE["dry"]
    assert tuple(moisture[255]) == color_maps.COLOR_MAP_CLIMATE["wet"]


def test_climate_values_are_clipped() -> None:
    lut = color_maps.create_moisture_lut()
    colors = color_maps.get_climate_color_array(np.array([[-0.5, 1.5]]), lut)
    assert tuple(colors[0, 0]) == tuple(lut[0])
    assert tuple(colors[0, 1]) == tuple(lut[255])


def test_elevation_is_grayscale() -> None:
    heights = np.array([[-1.0, 0.0, 1.0]], dtype=np.float32)
    colors = color_maps.get_elevation_color_array(heights)
    assert colors.shape == (1, 3, 3)
    assert colors.dtype == np.uint8
    assert tuple(colors[0, 0]) == (0, 0, 0)
    assert tuple(colors[0, 2]) == (255, 255, 255)
    assert len(set(colors[0, 1].tolist())) == 1


def test_object_markers_land_on_their_cells() -> None:
    base = np.zeros((8, 8, 3), dtype=np.uint8)
    objects = [
        ObjectInstance("rock", (17.5, 0.0, 34.2), 0.0, 1.0),
        ObjectInstance("rock", (100.0, 0.0, 100.0), 0.0, 1.0),  # outside the chunk
    ]
    marked = color_maps.draw_object_markers(base, objects, (16, 32))
    assert tuple(marked[2, 1]) == color_maps.COLOR_OBJECT_MARKER
    assert int(marked.sum()) == 3 * 255
    assert int(base.sum()) == 0
