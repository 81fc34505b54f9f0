"""
Export built structures to JSON for offline inspection, and load them back.

Format:
{
    "species": str,
    "seed": str,
    "segment": {
        "start": [x, y], "end": [x, y], "control": [x, y],
        "stroke_width": float, "length": float,
        "distance_from_root": float, "depth": int, "role": "trunk" | "lateral",
        "entities": [{"center": [x, y], "size": float, "kind": str, ...}],
        "children": [<segment>, ...]
    }
}
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from growth.branch import BranchSegment, Entity, EntityKind, Role
from growth.vector import Vector2D

logger = logging.getLogger(__name__)


def _point(v: Optional[Vector2D]):
    return None if v is None else [v.x, v.y]


def _vector(data) -> Optional[Vector2D]:
    return None if data is None else Vector2D.from_tuple(data)


def entity_to_dict(entity: Entity) -> Dict[str, Any]:
    return {
        'center': _point(entity.center),
        'size': entity.size,
        'kind': entity.kind.value,
        'distance_from_root': entity.distance_from_root,
        'base_color': list(entity.base_color),
        'highlight_color': list(entity.highlight_color),
        'rotation': entity.rotation,
        'sprite': entity.sprite,
        'reach': entity.reach,
        'attachment': _point(entity.attachment),
    }


def entity_from_dict(data: Dict[str, Any]) -> Entity:
    return Entity(
        center=_vector(data['center']),
        size=data['size'],
        kind=EntityKind(data['kind']),
        distance_from_root=data['distance_from_root'],
        base_color=tuple(data.get('base_color', (1.0, 1.0, 1.0))),
        highlight_color=tuple(data.get('highlight_color', (1.0, 1.0, 1.0))),
        rotation=data.get('rotation', 0.0),
        sprite=data.get('sprite'),
        reach=data.get('reach'),
        attachment=_vector(data.get('attachment')),
    )


def segment_to_dict(segment: BranchSegment) -> Dict[str, Any]:
    return {
        'start': _point(segment.start),
        'end': _point(segment.end),
        'control': _point(segment.control),
        'stroke_width': segment.stroke_width,
        'length': segment.length,
        'distance_from_root': segment.distance_from_root,
        'depth': segment.depth,
        'role': segment.role.value,
        'entities': [entity_to_dict(e) for e in segment.entities],
        'children': [segment_to_dict(c) for c in segment.children],
    }


def segment_from_dict(data: Dict[str, Any]) -> BranchSegment:
    return BranchSegment(
        start=_vector(data['start']),
        end=_vector(data['end']),
        control=_vector(data['control']),
        stroke_width=data['stroke_width'],
        length=data['length'],
        distance_from_root=data['distance_from_root'],
        depth=data.get('depth', 0),
        role=Role(data.get('role', Role.TRUNK.value)),
        children=tuple(segment_from_dict(c) for c in data.get('children', [])),
        entities=tuple(entity_from_dict(e) for e in data.get('entities', [])),
    )


def export_structure(root: BranchSegment, output_path: str, species: str = None, seed: str = None):
    data = {
        'species': species,
        'seed': seed,
        'segment': segment_to_dict(root),
    }

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump(data, f, indent=2)

    logger.info("Exported %d segments to %s", root.segment_count, output_path)
    return data


def load_structure(input_path: str) -> Tuple[BranchSegment, Dict[str, Any]]:
    """Returns the structure and its metadata (species, seed)."""
    with open(input_path, 'r') as f:
        data = json.load(f)
    root = segment_from_dict(data['segment'])
    return root, {'species': data.get('species'), 'seed': data.get('seed')}
