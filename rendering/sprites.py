"""
Sprite images for entity kinds drawn from artwork (fruit, hanging clusters).

Images are decoded with PIL and converted once into Cairo surfaces; a species'
sprites are all loaded before the first frame so a missing file fails the
request up front.
"""

import logging
from pathlib import Path
from typing import Dict

import cairo
import numpy as np
from PIL import Image, UnidentifiedImageError

from growth.errors import AssetError
from growth.species import SpeciesProfile

logger = logging.getLogger(__name__)


def image_to_surface(image: Image.Image) -> cairo.ImageSurface:
    """PIL image -> premultiplied ARGB32 Cairo surface."""
    rgba = np.asarray(image.convert('RGBA'), dtype=np.float32)
    height, width = rgba.shape[:2]
    alpha = rgba[:, :, 3:4] / 255.0

    bgra = np.empty((height, width, 4), dtype=np.uint8)
    bgra[:, :, :3] = np.rint(rgba[:, :, 2::-1] * alpha)
    bgra[:, :, 3] = rgba[:, :, 3]

    stride = cairo.ImageSurface.format_stride_for_width(cairo.FORMAT_ARGB32, width)
    padded = np.zeros((height, stride), dtype=np.uint8)
    padded[:, :width * 4] = bgra.reshape(height, width * 4)
    return cairo.ImageSurface.create_for_data(
        bytearray(padded.tobytes()), cairo.FORMAT_ARGB32, width, height, stride)


def load_sprite(path) -> cairo.ImageSurface:
    path = Path(path)
    if not path.is_file():
        raise AssetError(path)
    try:
        with Image.open(path) as image:
            surface = image_to_surface(image)
    except (UnidentifiedImageError, OSError) as e:
        raise AssetError(path, f"cannot decode ({e})") from e
    logger.debug("Loaded sprite %s (%dx%d)", path, surface.get_width(), surface.get_height())
    return surface


class SpriteLibrary:
    """Named sprites for one species, keyed the way entities reference them."""

    def __init__(self, sprites: Dict[str, cairo.ImageSurface] = None):
        self._sprites = dict(sprites or {})

    @classmethod
    def for_species(cls, profile: SpeciesProfile, assets_dir) -> 'SpriteLibrary':
        assets_dir = Path(assets_dir)
        return cls({name: load_sprite(assets_dir / filename)
                    for name, filename in profile.sprites.items()})

    def __contains__(self, name: str) -> bool:
        return name in self._sprites

    def __len__(self) -> int:
        return len(self._sprites)

    def get(self, name: str) -> cairo.ImageSurface:
        try:
            return self._sprites[name]
        except KeyError:
            raise AssetError(name, "sprite not loaded") from None
