"""
Bounds and auto-fit transform.

The logical structure is fitted into a padded canvas with one uniform scale;
the bounding box is centred horizontally and its bottom edge (the root) sits
on the bottom padding line.
"""

import math
from dataclasses import dataclass

from .branch import BranchSegment
from .errors import DegenerateGeometryError
from .vector import Vector2D


@dataclass(frozen=True)
class Bounds:
    min_x: float = math.inf
    max_x: float = -math.inf
    min_y: float = math.inf
    max_y: float = -math.inf

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center_x(self) -> float:
        return self.min_x + self.width / 2

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.min_x, self.max_x, self.min_y, self.max_y))


@dataclass(frozen=True)
class Transform:
    scale: float
    offset_x: float
    offset_y: float
    constraining_axis: str = 'y'

    def apply(self, point: Vector2D) -> Vector2D:
        return Vector2D(point.x * self.scale + self.offset_x, point.y * self.scale + self.offset_y)


def compute_bounds(root: BranchSegment) -> Bounds:
    min_x = min_y = math.inf
    max_x = max_y = -math.inf
    for segment in root.walk():
        for p in (segment.start, segment.end, segment.control):
            min_x, max_x = min(min_x, p.x), max(max_x, p.x)
            min_y, max_y = min(min_y, p.y), max(max_y, p.y)
        for entity in segment.entities:
            r = entity.extent
            min_x, max_x = min(min_x, entity.center.x - r), max(max_x, entity.center.x + r)
            min_y, max_y = min(min_y, entity.center.y - r), max(max_y, entity.center.y + r)
    return Bounds(min_x, max_x, min_y, max_y)


def _axis_scale(available: float, extent: float) -> float:
    if extent == 0:
        return math.inf
    return available / extent


def compute_transform(bounds: Bounds, canvas_width: int, canvas_height: int, padding: float) -> Transform:
    if not bounds.is_finite:
        raise DegenerateGeometryError(f"Structure bounds are not finite: {bounds}")

    avail_w = canvas_width - padding * 2
    avail_h = canvas_height - padding * 2
    if avail_w <= 0 or avail_h <= 0:
        raise DegenerateGeometryError(
            f"Padding {padding} leaves no drawable area on a {canvas_width}x{canvas_height} canvas")

    scale_x = _axis_scale(avail_w, bounds.width)
    scale_y = _axis_scale(avail_h, bounds.height)
    scale = min(scale_x, scale_y)
    if not math.isfinite(scale) or scale <= 0:
        raise DegenerateGeometryError(f"Cannot fit structure with bounds {bounds}: scale={scale}")

    offset_x = canvas_width / 2 - bounds.center_x * scale
    offset_y = (canvas_height - padding) - bounds.max_y * scale
    if not (math.isfinite(offset_x) and math.isfinite(offset_y)):
        raise DegenerateGeometryError(f"Transform offsets are not finite: ({offset_x}, {offset_y})")

    return Transform(scale, offset_x, offset_y, 'x' if scale_x <= scale_y else 'y')


def max_distance(root: BranchSegment) -> float:
    """Growth distance at which every segment and entity has been triggered."""
    furthest = 0.0
    for segment in root.walk():
        furthest = max(furthest, segment.end_distance)
        for entity in segment.entities:
            furthest = max(furthest, entity.distance_from_root)
    return furthest


def trunk_start(root: BranchSegment, transform: Transform) -> Vector2D:
    return transform.apply(root.start)
