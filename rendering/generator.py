"""
Plant generator - drives one request from seed to PNG or video.

A structure is grown and fitted once per request; every frame is then a pure
projection of that structure at a growth distance, rendered and pushed to a
frame sink in order.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from config.ffmpeg import build_ffmpeg_args
from config.generation import GenerationConfig
from config.render_config import PlantRenderConfig
from growth.bounds import Bounds, Transform, compute_bounds, compute_transform, max_distance, trunk_start
from growth.branch import BranchSegment
from growth.builder import grow_structure
from growth.easing import get_curve, progress_schedule
from growth.errors import SeedbloomError
from growth.projector import GrowthSnapshot, project
from growth.species import SpeciesProfile, get_species
from growth.vector import Vector2D
from .encoder import FFmpegSink, FrameSink, StreamCallback
from .plant_renderer import PlantRenderer
from .sprites import SpriteLibrary

logger = logging.getLogger(__name__)


@dataclass
class GrowthPlan:
    """Everything fixed for a request before the first frame."""
    root: BranchSegment
    bounds: Bounds
    transform: Transform
    max_distance: float
    full_distance: float

    @property
    def trunk_start_position(self) -> Vector2D:
        return trunk_start(self.root, self.transform)


@dataclass
class GeneratorResult:
    image_buffer: Optional[bytes] = None
    image_path: Optional[str] = None
    video_buffer: Optional[bytes] = None
    video_path: Optional[str] = None
    trunk_start_position: Optional[Vector2D] = None
    frames_written: int = 0


class PlantGenerator:
    def __init__(self, config: GenerationConfig, render_config: PlantRenderConfig = None):
        self.config = config.validate()
        self.profile: SpeciesProfile = get_species(config.species)
        self.render_config = render_config or PlantRenderConfig(
            output_width=config.width, output_height=config.height)
        self._plan: Optional[GrowthPlan] = None

    def plan(self) -> GrowthPlan:
        if self._plan is None:
            root = grow_structure(self.profile, self.config.seed, self.config.depth, self.config.initial_length)
            bounds = compute_bounds(root)
            transform = compute_transform(bounds, self.config.width, self.config.height, self.config.padding)
            furthest = max_distance(root)
            # grow past the last trigger so late entities finish easing in
            full = furthest + max(self.profile.longest_window, self.profile.settle_distance)
            self._plan = GrowthPlan(root, bounds, transform, furthest, full)
            logger.info("Planned %s (seed %s): %d segments, %d entities, scale %.3f (%s-constrained)",
                        self.profile.key, self.config.seed, root.segment_count,
                        sum(1 for _ in root.iter_entities()), transform.scale, transform.constraining_axis)
        return self._plan

    def get_info(self) -> GeneratorResult:
        return GeneratorResult(trunk_start_position=self.plan().trunk_start_position)

    def snapshot_at(self, progress: float) -> GrowthSnapshot:
        plan = self.plan()
        return project(plan.root, progress, plan.transform, self.profile.growth_windows)

    def _renderer(self) -> PlantRenderer:
        sprites = SpriteLibrary.for_species(self.profile, self.config.assets_dir)
        return PlantRenderer(self.profile, self.render_config, sprites)

    def render_still_at(self, progress: float, renderer: PlantRenderer = None) -> bytes:
        """PNG of the plant at an arbitrary growth distance."""
        renderer = renderer or self._renderer()
        return renderer.render_png(self.snapshot_at(progress))

    def generate(self, sink: FrameSink = None, on_stream: StreamCallback = None) -> GeneratorResult:
        # sprites first: a missing asset must fail before anything is produced
        try:
            renderer = self._renderer()
            plan = self.plan()
        except SeedbloomError:
            if sink is not None:
                sink.abort()
            raise
        if self.config.photo_only:
            return self._generate_image(plan, renderer)
        return self._generate_video(plan, renderer, sink, on_stream)

    def _generate_image(self, plan: GrowthPlan, renderer: PlantRenderer) -> GeneratorResult:
        png = self.render_still_at(plan.full_distance, renderer)
        image_path = None
        if self.config.save_as_file:
            path = Path(self.config.image_filename)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(png)
            image_path = str(path)
            logger.info("Saved image to %s", image_path)
        return GeneratorResult(image_buffer=png, image_path=image_path,
                               trunk_start_position=plan.trunk_start_position)

    def _default_sink(self, on_stream: StreamCallback = None) -> FFmpegSink:
        output = self.config.filename if self.config.save_as_file else None
        args = build_ffmpeg_args(self.config.fps, output, self.config.video_codec, self.config.video_bitrate)
        return FFmpegSink(args, binary=self.config.ffmpeg_binary, output_path=output, on_stream=on_stream)

    def _generate_video(self, plan: GrowthPlan, renderer: PlantRenderer, sink: Optional[FrameSink],
                        on_stream: Optional[StreamCallback]) -> GeneratorResult:
        sink = sink or self._default_sink(on_stream)
        total = self.config.total_frames
        schedule = progress_schedule(total, plan.full_distance, get_curve(self.config.progress_curve))

        with sink:
            for progress in tqdm(schedule, total=total, desc=f"Growing {self.profile.key}"):
                sink.write(renderer.render_png(self.snapshot_at(progress)))
            result = sink.close()

        logger.info("Video complete: %d frames", result.frames_written)
        return GeneratorResult(
            video_buffer=result.buffer,
            video_path=result.path,
            trunk_start_position=plan.trunk_start_position,
            frames_written=result.frames_written,
        )
