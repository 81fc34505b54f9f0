"""
Request configuration for a single plant generation.

All parameters are validated up front; nothing is rendered or spawned for an
invalid request.
"""

import json
import logging
import math
import secrets
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from growth.easing import PROGRESS_CURVES
from growth.errors import ConfigError
from growth.species import SPECIES

logger = logging.getLogger(__name__)


def random_seed() -> str:
    return secrets.token_hex(16)


@dataclass
class GenerationConfig:
    """
    One generation request.

    ``photo_only`` renders only the fully grown plant; otherwise a growth
    video of ``fps * duration_seconds`` frames is streamed to the encoder.
    """

    # ==================== STRUCTURE ====================
    seed: str = field(default_factory=random_seed)
    species: str = 'tree'

    # ==================== CANVAS ====================
    width: int = 1080
    height: int = 1080
    padding: float = 80.0

    # ==================== OUTPUT ====================
    photo_only: bool = True
    save_as_file: bool = False
    filename: str = 'outputs/plant.webm'
    image_filename: str = 'outputs/plant.png'
    assets_dir: str = 'assets'

    # ==================== VIDEO ====================
    fps: int = 30
    duration_seconds: float = 30.0
    progress_curve: str = 'ease_out_cubic'
    ffmpeg_binary: str = 'ffmpeg'
    video_codec: str = 'libvpx-vp9'
    video_bitrate: str = '4M'

    # Optional overrides of the species defaults
    depth: Optional[int] = None
    initial_length: Optional[float] = None

    @property
    def total_frames(self) -> int:
        return int(self.fps * self.duration_seconds)

    def validate(self) -> 'GenerationConfig':
        if not isinstance(self.seed, str) or not self.seed:
            raise ConfigError("seed must be a non-empty string")
        if self.species not in SPECIES:
            raise ConfigError(f"Unknown species '{self.species}'. Available: {', '.join(sorted(SPECIES))}")
        if self.width <= 0 or self.height <= 0:
            raise ConfigError(f"Canvas must be positive, got {self.width}x{self.height}")
        if not math.isfinite(self.padding) or self.padding < 0:
            raise ConfigError(f"padding must be a non-negative number, got {self.padding}")
        if self.padding * 2 >= min(self.width, self.height):
            raise ConfigError(f"padding {self.padding} leaves no drawable area on {self.width}x{self.height}")
        if self.progress_curve not in PROGRESS_CURVES:
            raise ConfigError(f"Unknown progress curve '{self.progress_curve}'. "
                              f"Available: {', '.join(sorted(PROGRESS_CURVES))}")
        if self.depth is not None and self.depth < 0:
            raise ConfigError(f"depth must be non-negative, got {self.depth}")
        if self.initial_length is not None and not self.initial_length > 0:
            raise ConfigError(f"initial_length must be positive, got {self.initial_length}")
        if not self.photo_only:
            if self.fps <= 0:
                raise ConfigError(f"fps must be positive, got {self.fps}")
            if not self.duration_seconds > 0:
                raise ConfigError(f"duration_seconds must be positive, got {self.duration_seconds}")
            if self.total_frames < 1:
                raise ConfigError(f"{self.fps} fps for {self.duration_seconds}s yields no frames")
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GenerationConfig':
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ', '.join(sorted(unknown)))
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: str = 'config/generation.json') -> GenerationConfig:
    """Load config from JSON file, with defaults for missing fields."""
    config_path = Path(path)
    if not config_path.exists():
        logger.info("No config at %s, using defaults", config_path)
        return GenerationConfig()

    with open(config_path, 'r') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a JSON object")
    return GenerationConfig.from_dict(data)


def save_config(config: GenerationConfig, path: str = 'config/generation.json'):
    """Save config to JSON file."""
    config_path = Path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.info("Saved config to %s", config_path)
