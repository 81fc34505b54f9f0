"""
Debug plots of a logical plant structure (before any canvas fitting).
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection
from matplotlib.patches import Circle, Rectangle

from .bounds import compute_bounds
from .branch import BranchSegment

logger = logging.getLogger(__name__)


def _curve_points(segment: BranchSegment, samples: int = 8) -> np.ndarray:
    return np.array([segment.point_at(t).to_tuple() for t in np.linspace(0.0, 1.0, samples)])


def plot_structure(
    root: BranchSegment,
    show_entities: bool = True,
    show_bounds: bool = True,
    branch_color: str = 'saddlebrown',
    entity_color: str = 'green',
    figsize: Tuple[int, int] = (10, 10),
    save_path: Optional[str] = None,
    show: bool = False,
):
    """Draw the skeleton, its entities and its bounding box in logical units."""
    fig, ax = plt.subplots(figsize=figsize)

    segments = list(root.walk())
    widest = max(s.stroke_width for s in segments)
    lines = [_curve_points(s) for s in segments]
    widths = [0.5 + 3.0 * s.stroke_width / widest for s in segments]
    ax.add_collection(LineCollection(lines, colors=branch_color, linewidths=widths))

    if show_entities:
        for entity in root.iter_entities():
            ax.add_patch(Circle(entity.center.to_tuple(), entity.extent,
                                color=entity_color, alpha=0.3, linewidth=0))

    bounds = compute_bounds(root)
    if show_bounds:
        ax.add_patch(Rectangle((bounds.min_x, bounds.min_y), bounds.width, bounds.height,
                               fill=False, edgecolor='red', linestyle='--', linewidth=1))

    ax.set_xlim(bounds.min_x, bounds.max_x)
    # canvas y grows downwards
    ax.set_ylim(bounds.max_y, bounds.min_y)
    ax.set_aspect('equal')
    ax.axis('off')
    plt.tight_layout()

    if save_path:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, dpi=150, bbox_inches='tight', facecolor='white', edgecolor='none')
        logger.info("Saved structure plot to %s", save_path)

    if show:
        plt.show()
    return fig, ax


def plot_growth_distances(root: BranchSegment, bins: int = 40, save_path: Optional[str] = None,
                          show: bool = False):
    """Histogram of segment and entity trigger distances (how the growth wave is paced)."""
    segment_d = [s.distance_from_root for s in root.walk()]
    entity_d = [e.distance_from_root for e in root.iter_entities()]

    fig, ax = plt.subplots(figsize=(10, 4))
    ax.hist(segment_d, bins=bins, alpha=0.7, label=f'segments ({len(segment_d)})', color='saddlebrown')
    if entity_d:
        ax.hist(entity_d, bins=bins, alpha=0.5, label=f'entities ({len(entity_d)})', color='green')
    ax.set_xlabel('distance from root')
    ax.set_ylabel('count')
    ax.legend()
    ax.grid(True, alpha=0.3)
    plt.tight_layout()

    if save_path:
        Path(save_path).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(save_path, dpi=150)
        logger.info("Saved distance histogram to %s", save_path)

    if show:
        plt.show()
    return fig, ax
