"""Tests for the Cairo renderer and sprite loading."""

import io
import math

import numpy as np
import pytest
from PIL import Image

from config.render_config import PlantRenderConfig
from growth.branch import Entity, EntityKind, VisibleEntity
from growth.errors import AssetError
from growth.projector import GrowthSnapshot, SimpleBranch
from growth.species import get_species, rgb
from growth.vector import Vector2D
from rendering.sprites import SpriteLibrary, image_to_surface, load_sprite
from rendering.plant_renderer import PlantRenderer

from tests.conftest import make_sprite

SIZE = 100


@pytest.fixture
def renderer():
    return PlantRenderer(get_species('weathered'), PlantRenderConfig(output_width=SIZE, output_height=SIZE))


def _straight_branch(width=10.0):
    return SimpleBranch(Vector2D(10, 50), Vector2D(90, 50), Vector2D(50, 50), width)


def _entity(kind, size=10.0, opacity=1.0, **kwargs):
    entity = Entity(center=Vector2D(50, 50), size=size, kind=kind,
                    distance_from_root=0.0, base_color=(0.2, 0.6, 0.2), highlight_color=(0.4, 0.8, 0.4),
                    **kwargs)
    return VisibleEntity(entity, opacity)


def test_empty_snapshot_is_transparent(renderer):
    frame = renderer.render_frame(GrowthSnapshot(0.0))
    assert frame.shape == (SIZE, SIZE, 4)
    assert frame.dtype == np.uint8
    assert frame[:, :, 3].max() == 0


def test_bark_colour_on_branch(renderer):
    frame = renderer.render_frame(GrowthSnapshot(1.0, (_straight_branch(),)))
    r, g, b, a = frame[50, 50]
    expected = [round(c * 255) for c in rgb('#3E2723')]
    assert a == 255
    assert abs(int(r) - expected[0]) <= 2
    assert abs(int(g) - expected[1]) <= 2
    assert abs(int(b) - expected[2]) <= 2
    assert frame[5, 5, 3] == 0


def test_zero_width_branch_draws_nothing(renderer):
    frame = renderer.render_frame(GrowthSnapshot(1.0, (_straight_branch(0.0),)))
    assert frame[:, :, 3].max() == 0


def test_highlight_pass_changes_pixels():
    config = PlantRenderConfig(output_width=SIZE, output_height=SIZE)
    plain = PlantRenderer(get_species('cedar'), config).render_frame(GrowthSnapshot(1.0, (_straight_branch(),)))
    lit = PlantRenderer(get_species('tree'), config).render_frame(GrowthSnapshot(1.0, (_straight_branch(),)))
    assert not np.array_equal(plain, lit)


@pytest.mark.parametrize('kind', [EntityKind.LEAF, EntityKind.BLOSSOM, EntityKind.FOLIAGE, EntityKind.PETAL])
def test_vector_entities_paint_over_centre(renderer, kind):
    entity = _entity(kind)
    frame = renderer.render_frame(GrowthSnapshot(1.0, (), (entity,)))
    # petals hang up from their anchor
    y = 44 if kind is EntityKind.PETAL else 50
    assert frame[y, 50, 3] > 0


def test_fruit_and_cluster_use_sprites(tmp_path):
    sprites = SpriteLibrary({
        'pink_teddy': load_sprite(make_sprite(tmp_path / 'teddy.png')),
        'wisteria': load_sprite(make_sprite(tmp_path / 'wisteria.png', size=(20, 40))),
    })
    renderer = PlantRenderer(get_species('wisteria'), PlantRenderConfig(output_width=SIZE, output_height=SIZE),
                             sprites)
    fruit = _entity(EntityKind.FRUIT, sprite='pink_teddy')
    cluster = _entity(EntityKind.CLUSTER, size=1.0, sprite='wisteria')
    frame = renderer.render_frame(GrowthSnapshot(1.0, (), (fruit, cluster)))
    assert frame[50, 50, 3] == 255
    # cluster hangs below its anchor
    assert frame[70, 50, 3] == 255
    assert frame[30, 50, 3] == 0


def test_flower_sprite_follows_stem_rotation(tmp_path):
    sprites = SpriteLibrary({'lavender': load_sprite(make_sprite(tmp_path / 'lavender.png', size=(10, 20)))})
    renderer = PlantRenderer(get_species('lavender'), PlantRenderConfig(output_width=SIZE, output_height=SIZE),
                             sprites)
    upright = renderer.render_frame(GrowthSnapshot(1.0, (), (_entity(EntityKind.FLOWER, size=20.0, sprite='lavender'),)))
    # 40 tall, 20 wide around the centre
    assert upright[35, 50, 3] == 255
    assert upright[50, 35, 3] == 0

    sideways = renderer.render_frame(GrowthSnapshot(1.0, (), (
        _entity(EntityKind.FLOWER, size=20.0, sprite='lavender', rotation=math.pi / 2),)))
    assert sideways[50, 35, 3] == 255
    assert sideways[35, 50, 3] == 0


def test_missing_sprite_in_library(renderer):
    with pytest.raises(AssetError):
        renderer.render_frame(GrowthSnapshot(1.0, (), (_entity(EntityKind.FRUIT, sprite='pink_teddy'),)))


def test_render_png_round_trips_through_pil(renderer):
    png = renderer.render_png(GrowthSnapshot(1.0, (_straight_branch(),)))
    assert png.startswith(b'\x89PNG')
    with Image.open(io.BytesIO(png)) as image:
        assert image.size == (SIZE, SIZE)
        assert image.mode == 'RGBA'


def test_image_to_surface_premultiplies():
    surface = image_to_surface(Image.new('RGBA', (4, 4), (255, 0, 0, 128)))
    pixel = bytes(surface.get_data())[:4]
    assert list(pixel) == [0, 0, 128, 128]


def test_load_sprite_missing(tmp_path):
    with pytest.raises(AssetError) as exc:
        load_sprite(tmp_path / 'nope.png')
    assert 'nope.png' in exc.value.path


def test_load_sprite_undecodable(tmp_path):
    bad = tmp_path / 'bad.png'
    bad.write_bytes(b'not an image')
    with pytest.raises(AssetError):
        load_sprite(bad)


def test_sprite_library_for_species(assets_dir):
    library = SpriteLibrary.for_species(get_species('pink_balls_tree'), assets_dir)
    assert 'pink_teddy' in library
    assert len(library) == 1
    assert len(SpriteLibrary.for_species(get_species('tree'), assets_dir)) == 0
