"""Tests for the plant generator (still, video and info modes)."""

import dataclasses
import io

import pytest
from PIL import Image

from growth.branch import EntityKind
from growth.errors import AssetError, ConfigError, EncoderError
from growth.species import get_species
from rendering.encoder import FFmpegSink, MemorySink
from rendering.generator import PlantGenerator
from rendering.plant_renderer import PlantRenderer

from tests.conftest import CANVAS


def _alpha(png: bytes):
    with Image.open(io.BytesIO(png)) as image:
        return image.getchannel('A')


def test_still_image(small_config):
    result = PlantGenerator(small_config).generate()
    assert result.image_buffer.startswith(b'\x89PNG')
    assert result.image_path is None
    assert result.video_buffer is None
    with Image.open(io.BytesIO(result.image_buffer)) as image:
        assert image.size == (CANVAS, CANVAS)
    assert _alpha(result.image_buffer).getextrema()[1] == 255


def test_still_image_saved(small_config):
    config = dataclasses.replace(small_config, save_as_file=True)
    result = PlantGenerator(config).generate()
    with open(result.image_path, 'rb') as f:
        assert f.read() == result.image_buffer


def test_same_seed_same_image(small_config):
    first = PlantGenerator(small_config).generate().image_buffer
    second = PlantGenerator(small_config).generate().image_buffer
    assert first == second


def test_info_without_rendering(small_config):
    generator = PlantGenerator(small_config)
    info = generator.get_info()
    assert info.image_buffer is None
    assert info.trunk_start_position.x == pytest.approx(generator.plan().transform.apply(
        generator.plan().root.start).x)
    assert info.trunk_start_position.y <= CANVAS - small_config.padding + 1e-6


def test_trunk_start_matches_still(small_config):
    generator = PlantGenerator(small_config)
    assert generator.generate().trunk_start_position == generator.get_info().trunk_start_position


def test_video_frames_pushed_in_order(small_config):
    config = dataclasses.replace(small_config, photo_only=False, fps=4, duration_seconds=1.5,
                                 progress_curve='linear')
    generator = PlantGenerator(config)
    sink = MemorySink()
    result = generator.generate(sink=sink)

    assert result.frames_written == 6
    assert len(sink.frames) == 6
    assert sink.closed
    # nothing has grown on the first frame
    assert _alpha(sink.frames[0]).getextrema()[1] == 0
    # the last frame is the finished plant
    assert sink.frames[-1] == generator.render_still_at(generator.plan().full_distance)


def test_full_distance_includes_settle(small_config):
    config = dataclasses.replace(small_config, species='pink_balls_tree')
    plan = PlantGenerator(config).plan()
    assert plan.full_distance == pytest.approx(plan.max_distance + 700)


def test_full_distance_uses_growth_window(small_config):
    plan = PlantGenerator(small_config).plan()
    assert plan.full_distance == pytest.approx(plan.max_distance + get_species('tree').longest_window)


def test_missing_sprite_fails_before_any_frame(small_config, tmp_path):
    empty = tmp_path / 'empty'
    empty.mkdir()
    config = dataclasses.replace(small_config, species='wisteria', assets_dir=str(empty),
                                 photo_only=False, fps=2, duration_seconds=1)
    sink = MemorySink()
    with pytest.raises(AssetError):
        PlantGenerator(config).generate(sink=sink)
    assert sink.frames == []
    assert sink.closed


@pytest.mark.parametrize('species', ['pink_balls_tree', 'wisteria', 'sakura', 'cedar', 'lavender'])
def test_species_render_with_assets(small_config, species):
    config = dataclasses.replace(small_config, species=species)
    assert PlantGenerator(config).generate().image_buffer.startswith(b'\x89PNG')


def test_invalid_config_rejected_up_front(small_config):
    with pytest.raises(ConfigError):
        PlantGenerator(dataclasses.replace(small_config, width=0))


def test_zero_fps_video_rejected(small_config):
    with pytest.raises(ConfigError):
        PlantGenerator(dataclasses.replace(small_config, photo_only=False, fps=0))


def test_single_segment_still_fits(small_config):
    plan = PlantGenerator(dataclasses.replace(small_config, species='weathered', depth=0)).plan()
    assert plan.root.segment_count == 1
    assert plan.transform.scale > 0


def test_seek_renders_partial_growth(small_config):
    generator = PlantGenerator(small_config)
    early = generator.render_still_at(generator.plan().max_distance * 0.2)
    late = generator.render_still_at(generator.plan().full_distance)
    assert early != late


class FailingSink(MemorySink):
    """Memory sink that fails on the n-th write or on close, recording aborts."""

    def __init__(self, fail_on_write=None, fail_on_close=False):
        super().__init__()
        self.fail_on_write = fail_on_write
        self.fail_on_close = fail_on_close
        self.aborted = False

    def write(self, frame):
        if len(self.frames) + 1 == self.fail_on_write:
            raise EncoderError(f"Encoder input closed after {len(self.frames)} frames")
        super().write(frame)

    def close(self):
        if self.fail_on_close:
            raise EncoderError("Encoder exited with status 1", returncode=1)
        return super().close()

    def abort(self):
        self.aborted = True
        super().abort()


@pytest.fixture
def video_config(small_config):
    return dataclasses.replace(small_config, photo_only=False, fps=4, duration_seconds=2, progress_curve='linear')


@pytest.fixture
def render_count(monkeypatch):
    rendered = []
    render_png = PlantRenderer.render_png

    def counting(self, snapshot):
        rendered.append(snapshot.progress)
        return render_png(self, snapshot)
    monkeypatch.setattr(PlantRenderer, 'render_png', counting)
    return rendered


def test_sink_write_failure_stops_frame_loop(video_config, render_count):
    sink = FailingSink(fail_on_write=3)
    with pytest.raises(EncoderError):
        PlantGenerator(video_config).generate(sink=sink)
    assert len(render_count) == 3
    assert len(sink.frames) == 2
    assert sink.aborted


def test_sink_close_failure_reaches_caller(video_config, render_count):
    sink = FailingSink(fail_on_close=True)
    with pytest.raises(EncoderError) as exc:
        PlantGenerator(video_config).generate(sink=sink)
    assert exc.value.returncode == 1
    assert len(render_count) == 8
    assert len(sink.frames) == 8
    assert sink.aborted


def test_broken_encoder_pipe_stops_generation(video_config, fake_popen):
    popen, process = fake_popen(fail_after=2, stderr=b'Conversion failed!\n')
    sink = FFmpegSink(['-f', 'image2pipe', '-i', '-', 'out.webm'], popen=popen)
    with pytest.raises(EncoderError) as exc:
        PlantGenerator(video_config).generate(sink=sink)
    assert 'after 2 frames' in str(exc.value)
    assert len(process.stdin.chunks) == 2
    assert process.killed


def test_lavender_flowers_open_on_every_stem(small_config):
    generator = PlantGenerator(dataclasses.replace(small_config, species='lavender'))
    plan = generator.plan()
    stems = plan.root.children
    snapshot = generator.snapshot_at(plan.full_distance)
    flowers = [e for e in snapshot.entities if e.kind is EntityKind.FLOWER]
    assert len(flowers) == len(stems)
    assert all(e.entity.sprite == 'lavender' for e in flowers)
    # still closed while the stems are growing
    early = generator.snapshot_at(min(s.end_distance for s in stems) * 0.9)
    assert not [e for e in early.entities if e.kind is EntityKind.FLOWER]
