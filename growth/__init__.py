"""
Deterministic procedural plant growth.

A seed string drives a single linear congruential stream through a recursive
builder; the resulting immutable structure is fitted to a canvas and projected
at any growth distance.
"""

from .errors import (
    SeedbloomError,
    ConfigError,
    AssetError,
    GenerationError,
    DegenerateGeometryError,
    EncoderError,
)
from .vector import Vector2D
from .seeded import SeededRandom
from .branch import BranchSegment, Entity, EntityKind, Role, VisibleEntity
from .species import SpeciesProfile, get_species, list_species
from .builder import build, grow_structure
from .bounds import Bounds, Transform, compute_bounds, compute_transform, max_distance, trunk_start
from .easing import smoothstep, get_curve, progress_schedule
from .projector import GrowthSnapshot, SimpleBranch, project

__all__ = [
    'SeedbloomError',
    'ConfigError',
    'AssetError',
    'GenerationError',
    'DegenerateGeometryError',
    'EncoderError',
    'Vector2D',
    'SeededRandom',
    'BranchSegment',
    'Entity',
    'EntityKind',
    'Role',
    'VisibleEntity',
    'SpeciesProfile',
    'get_species',
    'list_species',
    'build',
    'grow_structure',
    'Bounds',
    'Transform',
    'compute_bounds',
    'compute_transform',
    'max_distance',
    'trunk_start',
    'smoothstep',
    'get_curve',
    'progress_schedule',
    'GrowthSnapshot',
    'SimpleBranch',
    'project',
]
