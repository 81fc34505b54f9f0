"""
Base renderer class defining the interface for all renderers.
"""

import io
from abc import ABC, abstractmethod
from typing import Tuple

import cairo
import numpy as np

from config.render_config import PlantRenderConfig


def quad_to_cubic(start: Tuple[float, float], control: Tuple[float, float],
                  end: Tuple[float, float]) -> Tuple[float, float, float, float]:
    """Cubic control points equivalent to a quadratic Bezier: CP = P + 2/3 (C - P)."""
    cp1x = start[0] + (2 / 3) * (control[0] - start[0])
    cp1y = start[1] + (2 / 3) * (control[1] - start[1])
    cp2x = end[0] + (2 / 3) * (control[0] - end[0])
    cp2y = end[1] + (2 / 3) * (control[1] - end[1])
    return cp1x, cp1y, cp2x, cp2y


class Renderer(ABC):
    def __init__(self, config: PlantRenderConfig):
        self.config = config

    def _create_surface(self) -> Tuple[cairo.ImageSurface, cairo.Context]:
        surface = cairo.ImageSurface(
            cairo.FORMAT_ARGB32,
            self.config.output_width,
            self.config.output_height
        )
        ctx = cairo.Context(surface)

        if self.config.antialiasing:
            ctx.set_antialias(cairo.ANTIALIAS_BEST)

        r, g, b, a = self.config.background_color
        if a > 0:
            ctx.set_source_rgba(r, g, b, a)
            ctx.paint()

        return surface, ctx

    def _surface_to_numpy(self, surface: cairo.ImageSurface) -> np.ndarray:
        """Cairo stores premultiplied BGRA in native-endian words; return straight RGBA."""
        surface.flush()
        arr = np.ndarray(
            shape=(surface.get_height(), surface.get_stride() // 4, 4),
            dtype=np.uint8,
            buffer=surface.get_data()
        )[:, :surface.get_width()]
        bgra = arr.astype(np.float32)
        alpha = bgra[:, :, 3:4]
        safe = np.where(alpha > 0, alpha, 1.0)
        rgb = np.where(alpha > 0, bgra[:, :, 2::-1] * 255.0 / safe, 0.0)
        rgba = np.concatenate([rgb, alpha], axis=2)
        return np.clip(np.rint(rgba), 0, 255).astype(np.uint8)

    def _surface_to_png(self, surface: cairo.ImageSurface) -> bytes:
        buffer = io.BytesIO()
        surface.write_to_png(buffer)
        return buffer.getvalue()

    @abstractmethod
    def render_frame(self, *args, **kwargs) -> np.ndarray:
        pass

    @abstractmethod
    def render_png(self, *args, **kwargs) -> bytes:
        pass
