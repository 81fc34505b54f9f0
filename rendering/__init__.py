"""
Rendering module for growing plants.
Uses Cairo for resolution-independent vector graphics and streams frames to an encoder.
"""

from config.render_config import PlantRenderConfig
from .plant_renderer import PlantRenderer
from .sprites import SpriteLibrary, load_sprite
from .encoder import FrameSink, FFmpegSink, ImageioSink, MemorySink, SinkResult
from .generator import GeneratorResult, GrowthPlan, PlantGenerator
from .exporters import export_structure, load_structure
