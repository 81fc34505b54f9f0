"""
Configuration module.
"""

from .generation import GenerationConfig, load_config, save_config
from .render_config import PlantRenderConfig
from .ffmpeg import build_ffmpeg_args

__all__ = [
    'GenerationConfig',
    'load_config',
    'save_config',
    'PlantRenderConfig',
    'build_ffmpeg_args',
]
