"""
Configuration for the frame renderer.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass
class PlantRenderConfig:
    output_width: int = 1080
    output_height: int = 1080
    # Transparent so frames can be composited and encoded with alpha
    background_color: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)

    shadow_color: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.1)
    shadow_offset: float = 2.0
    highlight_offset: float = -1.0
    highlight_width_ratio: float = 0.5
    min_highlight_width: float = 1.0

    foliage_aspect: float = 1.6
    fruit_scale: float = 2.5
    cluster_scale: float = 0.8
    # flower sprites are stretched to this width:height ratio
    flower_aspect: float = 0.5

    antialiasing: bool = True
