"""
Growth projector - turns an immutable structure plus a scalar growth distance
into a flat, canvas-space snapshot of everything visible at that moment.

A segment starts when the growth wave reaches its distance from the root and
finishes one segment-length later; entities ease in over a per-kind window
once the wave passes their own trigger distance. Nothing is cached, so any
progress value can be projected in any order.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .branch import BranchSegment, EntityKind, VisibleEntity
from .bounds import Transform
from .easing import clamp, smoothstep
from .species import DEFAULT_GROWTH_WINDOWS, FADING_KINDS, PAINT_LAST_KINDS
from .vector import Vector2D

MIN_VISIBLE_SCALE = 0.01


@dataclass(frozen=True)
class SimpleBranch:
    """Partially grown segment in canvas pixels."""
    start: Vector2D
    end: Vector2D
    control: Vector2D
    stroke_width: float
    local_t: float = 1.0


@dataclass(frozen=True)
class GrowthSnapshot:
    progress: float
    branches: Tuple[SimpleBranch, ...] = ()
    entities: Tuple[VisibleEntity, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.branches and not self.entities

    def ordered_entities(self) -> List[VisibleEntity]:
        """Back-to-front paint order; kinds such as fruit always go on top."""
        regular = [e for e in self.entities if e.kind not in PAINT_LAST_KINDS]
        last = [e for e in self.entities if e.kind in PAINT_LAST_KINDS]
        regular.sort(key=lambda e: e.center.y)
        last.sort(key=lambda e: e.center.y)
        return regular + last


def split_quadratic(start: Vector2D, control: Vector2D, end: Vector2D,
                    t: float) -> Tuple[Vector2D, Vector2D]:
    """
    De Casteljau split of a quadratic Bezier at ``t``.

    Returns the control point and end point of the ``[0, t]`` part; its start
    point is unchanged.
    """
    head_control = start.lerp(control, t)
    tail_control = control.lerp(end, t)
    return head_control, head_control.lerp(tail_control, t)


def project(
    root: BranchSegment,
    progress: float,
    transform: Transform,
    windows: Optional[Dict[EntityKind, float]] = None,
    fading: frozenset = FADING_KINDS,
) -> GrowthSnapshot:
    windows = windows or DEFAULT_GROWTH_WINDOWS
    branches: List[SimpleBranch] = []
    entities: List[VisibleEntity] = []
    scale = transform.scale

    for segment in root.walk():
        if progress <= segment.distance_from_root:
            continue

        local_t = clamp((progress - segment.distance_from_root) / segment.length, 0.0, 1.0)
        start = transform.apply(segment.start)
        control, end = split_quadratic(start, transform.apply(segment.control),
                                       transform.apply(segment.end), local_t)
        branches.append(SimpleBranch(start, end, control, segment.stroke_width * scale * local_t, local_t))

        for entity in segment.entities:
            if progress <= entity.distance_from_root:
                continue
            window = windows.get(entity.kind, DEFAULT_GROWTH_WINDOWS[entity.kind])
            age = progress - entity.distance_from_root
            growth = clamp(age / window, 0.0, 1.0) if window > 0 else 1.0
            eased = smoothstep(growth)
            if eased <= MIN_VISIBLE_SCALE:
                continue
            entities.append(entity.with_growth(
                center=transform.apply(entity.center),
                size=entity.size * scale * eased,
                opacity=eased if entity.kind in fading else 1.0,
            ))

    return GrowthSnapshot(progress, tuple(branches), tuple(entities))

