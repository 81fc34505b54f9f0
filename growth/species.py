"""
Species descriptors.

Every plant is grown by the same recursive builder; a species only supplies
the rules that differ: how a segment bends, how its stroke tapers, how it
branches and what it carries. Rules receive the shared generator and must
draw from it in a fixed order.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, NamedTuple, Optional, Tuple

from .branch import Color, Entity, EntityKind, Role
from .errors import ConfigError
from .seeded import SeededRandom
from .vector import Vector2D


class Draft(NamedTuple):
    """Geometry of the segment being built, handed to branching and foliage rules."""
    start: Vector2D
    end: Vector2D
    control: Vector2D
    length: float
    angle: float
    depth: int
    distance: float
    role: Role

    def point_at(self, t: float) -> Vector2D:
        omt = 1 - t
        return Vector2D(
            omt * omt * self.start.x + 2 * omt * t * self.control.x + t * t * self.end.x,
            omt * omt * self.start.y + 2 * omt * t * self.control.y + t * t * self.end.y,
        )


class ChildSpec(NamedTuple):
    length: float
    angle: float
    depth: int
    role: Role = Role.TRUNK


BendRule = Callable[[SeededRandom, Vector2D, Vector2D, float, Role], Vector2D]
TaperRule = Callable[[SeededRandom, int, Role], float]
BranchRule = Callable[[SeededRandom, Draft], Iterator[ChildSpec]]
FoliageRule = Callable[[SeededRandom, Draft], List[Entity]]

# Logical units of growth distance over which an entity eases to full size.
DEFAULT_GROWTH_WINDOWS: Dict[EntityKind, float] = {
    EntityKind.LEAF: 150.0,
    EntityKind.BLOSSOM: 150.0,
    EntityKind.PETAL: 150.0,
    EntityKind.FRUIT: 150.0,
    EntityKind.CLUSTER: 150.0,
    EntityKind.FLOWER: 150.0,
    EntityKind.FOLIAGE: 200.0,
}

FADING_KINDS = frozenset({EntityKind.FOLIAGE})
PAINT_LAST_KINDS = frozenset({EntityKind.FRUIT})


def rgb(hex_code: str) -> Color:
    hex_code = hex_code.lstrip('#')
    return tuple(int(hex_code[i:i + 2], 16) / 255.0 for i in (0, 2, 4))


def rgb255(r: float, g: float, b: float) -> Color:
    return (min(255.0, r) / 255.0, min(255.0, g) / 255.0, min(255.0, b) / 255.0)


def _no_foliage(rng: SeededRandom, draft: Draft) -> List[Entity]:
    return []


@dataclass(frozen=True)
class SpeciesProfile:
    key: str
    name: str
    description: str
    max_depth: int
    initial_length: float
    bend: BendRule
    taper: TaperRule
    branching: BranchRule
    foliage: FoliageRule = _no_foliage
    start_angle: float = -90.0
    angle_jitter: Optional[Tuple[float, float]] = None
    # (min_x, max_x, min_y, max_y) in logical units around the root; branches
    # whose end leaves it stop branching.
    containment: Optional[Tuple[float, float, float, float]] = None
    bark_color: Color = rgb('#3E2723')
    highlight_color: Optional[Color] = None
    growth_windows: Dict[EntityKind, float] = field(default_factory=lambda: dict(DEFAULT_GROWTH_WINDOWS))
    settle_distance: float = 0.0
    sprites: Dict[str, str] = field(default_factory=dict)

    def growth_window(self, kind: EntityKind) -> float:
        return self.growth_windows.get(kind, DEFAULT_GROWTH_WINDOWS[kind])

    @property
    def longest_window(self) -> float:
        return max(self.growth_windows.values(), default=0.0)

    def contains(self, point: Vector2D) -> bool:
        if self.containment is None:
            return True
        min_x, max_x, min_y, max_y = self.containment
        return min_x <= point.x <= max_x and min_y <= point.y <= max_y


# ==================== BEND RULES ====================

def perpendicular_bend(spread: float) -> BendRule:
    """Control point pushed off the chord midpoint along its normal."""
    def bend(rng: SeededRandom, start: Vector2D, end: Vector2D, length: float, role: Role) -> Vector2D:
        offset = rng.next_float(-spread, spread) * length
        mid = start.lerp(end, 0.5)
        return mid + (end - start).normal() * offset
    return bend


def diagonal_bend(trunk_spread: float, lateral_spread: float) -> BendRule:
    """Fixed-size diagonal offset; trunks stay straighter than laterals."""
    def bend(rng: SeededRandom, start: Vector2D, end: Vector2D, length: float, role: Role) -> Vector2D:
        spread = trunk_spread if role is Role.TRUNK else lateral_spread
        offset = rng.next_float(-spread, spread)
        mid = start.lerp(end, 0.5)
        return Vector2D(mid.x + offset, mid.y + offset)
    return bend


# ==================== TREE / WEATHERED ====================

def _bark_taper(rng: SeededRandom, depth: int, role: Role) -> float:
    return max(2.0, depth * 4 + rng.next_float(-1, 1))


def _fork_two_or_three(rng: SeededRandom, draft: Draft) -> Iterator[ChildSpec]:
    for _ in range(rng.next_int(2, 4)):
        angle = draft.angle + rng.next_float(-45, 45)
        length = draft.length * rng.next_float(0.7, 0.9)
        yield ChildSpec(length, angle, draft.depth - 1)


LEAF_GREENS = [(76, 140, 74), (98, 160, 82), (60, 118, 64)]


def _tree_leaves(rng: SeededRandom, draft: Draft) -> List[Entity]:
    if draft.depth > 4:
        return []
    entities = []
    for _ in range(rng.next_int(1, 3)):
        t = rng.next_float(0.3, 0.95)
        attachment = draft.start.lerp(draft.end, t)
        center = attachment + Vector2D(rng.next_float(-30, 30), rng.next_float(-30, 30))
        r, g, b = rng.choice(LEAF_GREENS)
        entities.append(Entity(
            center=center,
            size=rng.next_float(22, 34),
            kind=EntityKind.LEAF,
            distance_from_root=draft.distance + draft.length * t,
            base_color=rgb255(r, g, b),
            highlight_color=rgb255(r + 30, g + 30, b + 30),
            attachment=attachment,
        ))
    return entities


# ==================== PINK BALLS TREE ====================

BLOSSOM_PINKS = [(255, 182, 193), (255, 209, 220)]
FRUIT_PINKS = [(255, 182, 193), (255, 209, 220), (255, 240, 245)]
FRUIT_DELAY = 100.0


def _pink_taper(rng: SeededRandom, depth: int, role: Role) -> float:
    return (depth + 1) * rng.next_float(4.0, 8.0)


def _pink_balls(rng: SeededRandom, draft: Draft) -> List[Entity]:
    if draft.depth > 4:
        return []
    t = rng.next_float(0.3, 0.95)
    attachment = draft.start.lerp(draft.end, t)
    center = attachment + Vector2D(rng.next_float(-40, 40), rng.next_float(-40, 40))
    distance = draft.distance + draft.length * t

    if rng.next_float(0, 1) > 0.99:
        r, g, b = rng.choice(FRUIT_PINKS)
        return [Entity(
            center=center,
            size=50.0,
            kind=EntityKind.FRUIT,
            distance_from_root=distance + FRUIT_DELAY,
            base_color=rgb255(r, g, b),
            highlight_color=rgb255(r + 20, g + 20, b + 20),
            sprite='pink_teddy',
            # the sprite is painted fruit_scale (2.5) times the radius across
            reach=50.0 * 1.25,
            attachment=attachment,
        )]

    r, g, b = rng.choice(BLOSSOM_PINKS)
    return [Entity(
        center=center,
        size=50.0,
        kind=EntityKind.BLOSSOM,
        distance_from_root=distance,
        base_color=rgb255(r, g, b),
        highlight_color=rgb255(r + 15, g + 15, b + 15),
        attachment=attachment,
    )]


# ==================== CEDAR ====================

def _cedar_taper(rng: SeededRandom, depth: int, role: Role) -> float:
    if role is Role.TRUNK:
        return depth * depth * 1.1 + 18
    return depth * 4 + 2


def _cedar_tiers(rng: SeededRandom, draft: Draft) -> Iterator[ChildSpec]:
    if draft.role is Role.TRUNK:
        yield ChildSpec(draft.length * 0.82, draft.angle + rng.next_float(-6, 6), draft.depth - 1, Role.TRUNK)
        for _ in range(rng.next_int(2, 4)):
            if rng.next() > 0.5:
                side = rng.next_float(-15, 5)
            else:
                side = 175 + rng.next_float(-5, 15)
            yield ChildSpec(draft.length * 0.7, side, max(0, draft.depth - 2), Role.LATERAL)
    elif draft.depth > 2:
        yield ChildSpec(draft.length * 0.65, draft.angle + rng.next_float(-15, 15), draft.depth - 1, Role.LATERAL)


def _cedar_pads(rng: SeededRandom, draft: Draft) -> List[Entity]:
    if draft.depth > 4:
        return []
    entities = []
    for _ in range(rng.next_int(10, 40)):
        r = 45 + rng.next_float(0, 20)
        g = 110 + rng.next_float(0, 40)
        b = 30 + rng.next_float(0, 25)
        center = draft.end + Vector2D(rng.next_float(-60, 60), rng.next_float(-25, 25))
        radius = rng.next_float(1, 10)
        delay = rng.next_float(0, 150)
        entities.append(Entity(
            center=center,
            size=radius,
            kind=EntityKind.FOLIAGE,
            distance_from_root=draft.distance + draft.length + delay,
            base_color=rgb255(r, g, b),
            highlight_color=rgb255(r + 40, g + 40, b + 40),
            reach=radius * 1.6,
        ))
    return entities


# ==================== SAKURA ====================

SAKURA_PETALS = (rgb('#FFD1DC'), rgb('#FFF0F5'))
SAKURA_SECONDARY = rgb('#FFB7C5')
BLOSSOM_DELAY = 50.0


def _sakura_taper(rng: SeededRandom, depth: int, role: Role) -> float:
    return depth * 2.5 + 1


def _sakura_fork(rng: SeededRandom, draft: Draft) -> Iterator[ChildSpec]:
    # the last fork before the tips fans out 3-4 ways; elsewhere a third child is a 30% chance
    count = rng.next_int(3, 5) if draft.depth == 1 else 2 + (rng.next() < 0.3)
    for _ in range(count):
        angle = draft.angle + rng.next_float(-35, 35)
        length = draft.length * rng.next_float(0.7, 0.85)
        yield ChildSpec(length, angle, draft.depth - 1)


def _sakura_blossoms(rng: SeededRandom, draft: Draft) -> List[Entity]:
    if draft.depth >= 4:
        return []
    entities = []
    for _ in range(rng.next_int(5, 12)):
        t = rng.next_float(0.5, 1.0)
        on_curve = draft.point_at(t)
        center = on_curve + Vector2D(rng.next_float(-20, 20), rng.next_float(-20, 20))
        radius = rng.next_float(4, 8)
        color = SAKURA_PETALS[0] if rng.next() > 0.3 else SAKURA_PETALS[1]
        entities.append(Entity(
            center=center,
            size=radius,
            kind=EntityKind.PETAL,
            distance_from_root=draft.distance + draft.length * t + BLOSSOM_DELAY,
            base_color=color,
            highlight_color=SAKURA_SECONDARY,
            rotation=rng.next_float(0, math.pi * 2),
            # petals reach 1.5x their size above the anchor
            reach=radius * 1.5,
            attachment=on_curve,
        ))
    return entities


# ==================== WISTERIA ====================

CLUSTER_REACH = 60.0


def _wisteria_taper(rng: SeededRandom, depth: int, role: Role) -> float:
    return max(1.0, depth ** 1.4 * 2.5)


def _wisteria_fork(rng: SeededRandom, draft: Draft) -> Iterator[ChildSpec]:
    # two children, occasionally three; the extra draw shifts every later value
    count = 3 if rng.next() < 0.25 else 2
    for _ in range(count):
        angle = draft.angle + rng.next_float(-45, 45)
        length = draft.length * rng.next_float(0.7, 0.9)
        yield ChildSpec(length, angle, draft.depth - 1)


def _wisteria_clusters(rng: SeededRandom, draft: Draft) -> List[Entity]:
    if draft.depth >= 6 or rng.next_float(0, 1) <= 0.9:
        return []
    return [Entity(
        center=draft.start,
        size=rng.next_float(0.2, 0.8),
        kind=EntityKind.CLUSTER,
        distance_from_root=draft.distance,
        rotation=rng.next_float(-0.5, 1.0),
        sprite='wisteria',
        reach=CLUSTER_REACH,
        attachment=draft.start,
    )]


# ==================== LAVENDER ====================

LAVENDER_LEAF = (109, 156, 93)
LEAVES_PER_STEM = 8
LEAF_SPLAY = math.degrees(1.2)
FLOWER_HEIGHT = 120.0


def _stem_bend(rng: SeededRandom, start: Vector2D, end: Vector2D, length: float, role: Role) -> Vector2D:
    """Stems sway sideways only."""
    mid = start.lerp(end, 0.5)
    return Vector2D(mid.x + rng.next_float(-20, 20), mid.y)


def _lavender_taper(rng: SeededRandom, depth: int, role: Role) -> float:
    return 10.0 + depth * 6


def _lavender_stems(rng: SeededRandom, draft: Draft) -> Iterator[ChildSpec]:
    for _ in range(rng.next_int(5, 10)):
        angle = draft.angle + rng.next_float(-23, 23)
        yield ChildSpec(rng.next_float(400, 650), angle, 0)


def _lavender_foliage(rng: SeededRandom, draft: Draft) -> List[Entity]:
    """Paired leaves evenly up each stem, and a flower spike standing on the tip."""
    if draft.depth > 0:
        return []
    r, g, b = LAVENDER_LEAF
    entities = []
    for j in range(1, LEAVES_PER_STEM + 1):
        t = j / LEAVES_PER_STEM
        attachment = draft.point_at(t)
        size = 4 + 4 * rng.next_float(0, 1)
        for side in (LEAF_SPLAY, -LEAF_SPLAY):
            entities.append(Entity(
                center=Vector2D.polar(attachment, size * 1.5, draft.angle + side),
                size=size,
                kind=EntityKind.LEAF,
                distance_from_root=draft.distance + draft.length * t,
                base_color=rgb255(r, g, b),
                highlight_color=rgb255(r + 30, g + 30, b + 30),
                attachment=attachment,
            ))

    direction = draft.angle + math.degrees(rng.next_float(-0.15, 0.15))
    entities.append(Entity(
        center=Vector2D.polar(draft.end, FLOWER_HEIGHT / 2, direction),
        size=FLOWER_HEIGHT / 2,
        kind=EntityKind.FLOWER,
        distance_from_root=draft.distance + draft.length,
        # sprite's upward axis along the stem
        rotation=math.radians(direction + 90),
        sprite='lavender',
        attachment=draft.end,
    ))
    return entities


# ==================== REGISTRY ====================

SPECIES: Dict[str, SpeciesProfile] = {
    'tree': SpeciesProfile(
        key='tree',
        name='Tree',
        description='A generic tree.',
        max_depth=7,
        initial_length=200.0,
        angle_jitter=(-20.0, 20.0),
        bend=perpendicular_bend(0.2),
        taper=_bark_taper,
        branching=_fork_two_or_three,
        foliage=_tree_leaves,
        highlight_color=rgb('#6D4C41'),
    ),
    'weathered': SpeciesProfile(
        key='weathered',
        name='Weathered Tree',
        description='A tree that has weathered many storms.',
        max_depth=7,
        initial_length=200.0,
        angle_jitter=(-20.0, 20.0),
        bend=perpendicular_bend(0.2),
        taper=_bark_taper,
        branching=_fork_two_or_three,
        highlight_color=rgb('#6D4C41'),
    ),
    'pink_balls_tree': SpeciesProfile(
        key='pink_balls_tree',
        name='Pink Balls Tree',
        description='A tree with pink ball-shaped flowers.',
        max_depth=7,
        initial_length=200.0,
        angle_jitter=(-20.0, 20.0),
        bend=perpendicular_bend(0.2),
        taper=_pink_taper,
        branching=_fork_two_or_three,
        foliage=_pink_balls,
        highlight_color=rgb('#6D4C41'),
        settle_distance=700.0,
        sprites={'pink_teddy': 'pink_teddy.png'},
    ),
    'cedar': SpeciesProfile(
        key='cedar',
        name='Cedar',
        description='A tall cedar tree.',
        max_depth=8,
        initial_length=220.0,
        bend=diagonal_bend(12.0, 25.0),
        taper=_cedar_taper,
        branching=_cedar_tiers,
        foliage=_cedar_pads,
    ),
    'sakura': SpeciesProfile(
        key='sakura',
        name='Sakura',
        description='A beautiful cherry blossom tree.',
        max_depth=7,
        initial_length=180.0,
        bend=perpendicular_bend(0.2),
        taper=_sakura_taper,
        branching=_sakura_fork,
        foliage=_sakura_blossoms,
        containment=(-590.0, 590.0, -1030.0, 150.0),
    ),
    'wisteria': SpeciesProfile(
        key='wisteria',
        name='Wisteria',
        description='A cascading wisteria vine.',
        max_depth=8,
        initial_length=160.0,
        angle_jitter=(-20.0, 20.0),
        bend=perpendicular_bend(0.2),
        taper=_wisteria_taper,
        branching=_wisteria_fork,
        foliage=_wisteria_clusters,
        bark_color=rgb('#2D241B'),
        settle_distance=500.0,
        sprites={'wisteria': 'wisteria.png'},
    ),
    'lavender': SpeciesProfile(
        key='lavender',
        name='Lavender',
        description='A clump of lavender stems, each topped with a flower spike.',
        max_depth=1,
        initial_length=40.0,
        bend=_stem_bend,
        taper=_lavender_taper,
        branching=_lavender_stems,
        foliage=_lavender_foliage,
        bark_color=rgb('#2E4A25'),
        highlight_color=rgb('#4E7A3D'),
        growth_windows={**DEFAULT_GROWTH_WINDOWS, EntityKind.LEAF: 50.0, EntityKind.FLOWER: 100.0},
        sprites={'lavender': 'lavender.png'},
    ),
}


def get_species(key: str) -> SpeciesProfile:
    try:
        return SPECIES[key]
    except KeyError:
        raise ConfigError(f"Unknown species '{key}'. Available: {', '.join(sorted(SPECIES))}") from None


def list_species() -> List[Dict[str, str]]:
    return [
        {'key': p.key, 'name': p.name, 'description': p.description}
        for p in SPECIES.values()
    ]
