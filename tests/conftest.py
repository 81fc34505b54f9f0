"""Shared test fixtures."""

import io

import matplotlib
import pytest
from PIL import Image

matplotlib.use('Agg')

from config.generation import GenerationConfig  # noqa: E402
from growth.builder import grow_structure  # noqa: E402
from growth.species import get_species  # noqa: E402

SEED = 'abc'
CANVAS = 240
PADDING = 20


def make_sprite(path, size=(16, 24), color=(200, 40, 90, 255)):
    Image.new('RGBA', size, color).save(path)
    return path


class FakeStdin:
    def __init__(self, fail_after=None):
        self.chunks = []
        self.closed = False
        self.flushes = 0
        self.fail_after = fail_after

    def write(self, data):
        if self.fail_after is not None and len(self.chunks) >= self.fail_after:
            raise BrokenPipeError(32, 'Broken pipe')
        self.chunks.append(data)

    def flush(self):
        self.flushes += 1

    def close(self):
        self.closed = True


class FakeProcess:
    """Stands in for an ffmpeg subprocess."""

    def __init__(self, exit_code=0, stdout=b'', stderr=b'', fail_after=None):
        self.stdin = FakeStdin(fail_after)
        self.stdout = io.BytesIO(stdout)
        self.stderr = io.BytesIO(stderr)
        self.exit_code = exit_code
        self.returncode = None
        self.killed = False
        self.command = None

    def poll(self):
        return self.returncode

    def wait(self):
        self.returncode = -9 if self.killed else self.exit_code
        return self.returncode

    def kill(self):
        self.killed = True


@pytest.fixture
def fake_popen():
    """Returns (factory, process); the factory records the command it was called with."""
    def make(**kwargs):
        process = FakeProcess(**kwargs)

        def popen(command, **_):
            process.command = command
            return process
        return popen, process
    return make


@pytest.fixture
def assets_dir(tmp_path):
    directory = tmp_path / 'assets'
    directory.mkdir()
    make_sprite(directory / 'pink_teddy.png')
    make_sprite(directory / 'wisteria.png', size=(20, 40), color=(150, 110, 220, 255))
    make_sprite(directory / 'lavender.png', size=(12, 30), color=(160, 120, 210, 255))
    return directory


@pytest.fixture
def small_config(tmp_path, assets_dir):
    return GenerationConfig(
        seed=SEED,
        species='tree',
        width=CANVAS,
        height=CANVAS,
        padding=PADDING,
        assets_dir=str(assets_dir),
        image_filename=str(tmp_path / 'out' / 'plant.png'),
        filename=str(tmp_path / 'out' / 'plant.webm'),
    )


@pytest.fixture
def tree_profile():
    return get_species('tree')


@pytest.fixture
def tree(tree_profile):
    return grow_structure(tree_profile, SEED)
