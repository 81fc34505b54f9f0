"""
Structure types - a plant is a strict tree of branch segments, each owning
its children and the decorative entities attached to it.

All types are frozen; growth never mutates a structure; it re-projects it.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterator, Optional, Tuple

from .vector import Vector2D

Color = Tuple[float, float, float]


class Role(str, Enum):
    TRUNK = 'trunk'
    LATERAL = 'lateral'


class EntityKind(str, Enum):
    LEAF = 'leaf'
    BLOSSOM = 'blossom'
    PETAL = 'petal'
    FOLIAGE = 'foliage'
    FRUIT = 'fruit'
    CLUSTER = 'cluster'
    FLOWER = 'flower'


@dataclass(frozen=True)
class Entity:
    center: Vector2D
    size: float
    kind: EntityKind
    distance_from_root: float
    base_color: Color = (1.0, 1.0, 1.0)
    highlight_color: Color = (1.0, 1.0, 1.0)
    rotation: float = 0.0
    sprite: Optional[str] = None
    reach: Optional[float] = None  # bounds half-extent when it differs from size
    attachment: Optional[Vector2D] = None

    @property
    def extent(self) -> float:
        return self.size if self.reach is None else self.reach

    def with_growth(self, center: Vector2D, size: float, opacity: float) -> 'VisibleEntity':
        return VisibleEntity(entity=replace(self, center=center, size=size), opacity=opacity)


@dataclass(frozen=True)
class VisibleEntity:
    """An entity as it appears in one frame: canvas-space, eased size, opacity."""
    entity: Entity
    opacity: float

    @property
    def center(self) -> Vector2D:
        return self.entity.center

    @property
    def size(self) -> float:
        return self.entity.size

    @property
    def kind(self) -> EntityKind:
        return self.entity.kind


@dataclass(frozen=True)
class BranchSegment:
    start: Vector2D
    end: Vector2D
    control: Vector2D
    stroke_width: float
    length: float
    distance_from_root: float
    depth: int = 0
    role: Role = Role.TRUNK
    children: Tuple['BranchSegment', ...] = ()
    entities: Tuple[Entity, ...] = ()

    @property
    def end_distance(self) -> float:
        return self.distance_from_root + self.length

    @property
    def is_tip(self) -> bool:
        return not self.children

    def point_at(self, t: float) -> Vector2D:
        """Point on the quadratic curve at parameter ``t``."""
        omt = 1 - t
        return Vector2D(
            omt * omt * self.start.x + 2 * omt * t * self.control.x + t * t * self.end.x,
            omt * omt * self.start.y + 2 * omt * t * self.control.y + t * t * self.end.y,
        )

    def walk(self) -> Iterator['BranchSegment']:
        """Depth-first, generation order."""
        stack = [self]
        while stack:
            segment = stack.pop()
            yield segment
            stack.extend(reversed(segment.children))

    def iter_entities(self) -> Iterator[Entity]:
        for segment in self.walk():
            yield from segment.entities

    @property
    def segment_count(self) -> int:
        return sum(1 for _ in self.walk())

    def __repr__(self) -> str:
        return (f"BranchSegment({self.start} -> {self.end}, depth={self.depth}, "
                f"children={len(self.children)}, entities={len(self.entities)})")
