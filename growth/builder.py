"""
Structure builder - grows a plant skeleton from a seeded stream.

The builder is a single recursion shared by every species. Draw order per
segment is fixed: angle jitter, bend, taper, then each child in turn (fully
grown before the next child's parameters are drawn), then foliage.
"""

import logging
import math
from typing import Optional

from .branch import BranchSegment, Role
from .errors import GenerationError
from .seeded import SeededRandom
from .species import Draft, SpeciesProfile
from .vector import ORIGIN, Vector2D

logger = logging.getLogger(__name__)


def build(
    rng: SeededRandom,
    profile: SpeciesProfile,
    start: Vector2D,
    length: float,
    angle: float,
    depth: int,
    distance: float = 0.0,
    role: Role = Role.TRUNK,
) -> BranchSegment:
    if not (length > 0 and math.isfinite(length)):
        raise GenerationError(f"Branch length must be positive and finite, got {length}")
    if depth < 0:
        raise GenerationError(f"Depth must be non-negative, got {depth}")

    if profile.angle_jitter is not None:
        angle += rng.next_float(*profile.angle_jitter)
    end = Vector2D.polar(start, length, angle)

    if not profile.contains(end):
        depth = 0

    control = profile.bend(rng, start, end, length, role)
    stroke_width = profile.taper(rng, depth, role)
    draft = Draft(start, end, control, length, angle, depth, distance, role)

    children = []
    if depth > 0:
        for spec in profile.branching(rng, draft):
            children.append(build(
                rng, profile, end, spec.length, spec.angle, spec.depth,
                distance + length, spec.role,
            ))

    entities = profile.foliage(rng, draft)

    return BranchSegment(
        start=start,
        end=end,
        control=control,
        stroke_width=stroke_width,
        length=length,
        distance_from_root=distance,
        depth=depth,
        role=role,
        children=tuple(children),
        entities=tuple(entities),
    )


def grow_structure(profile: SpeciesProfile, seed: str, depth: Optional[int] = None,
                   initial_length: Optional[float] = None) -> BranchSegment:
    """Build a complete plant for ``seed`` rooted at the logical origin."""
    rng = SeededRandom(seed)
    depth = profile.max_depth if depth is None else depth
    initial_length = profile.initial_length if initial_length is None else initial_length
    root = build(rng, profile, ORIGIN, initial_length, profile.start_angle, depth)
    logger.debug("Built %s for seed %r: %d segments, %d draws",
                 profile.key, seed, root.segment_count, rng.draws)
    return root
