"""
Command line entry point.

    python main.py image   --seed moss --species sakura -o outputs/sakura.png
    python main.py video   --seed moss --duration 10 -o outputs/sakura.webm
    python main.py info    --seed moss
    python main.py export  --seed moss -o outputs/moss.json --plot outputs/moss_plot.png
    python main.py species
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

from config.generation import GenerationConfig, load_config, save_config
from growth.errors import SeedbloomError
from growth.species import list_species
from logging_config import setup_logging
from rendering.encoder import ImageioSink
from rendering.exporters import export_structure
from rendering.generator import PlantGenerator

logger = logging.getLogger('seedbloom')

# argparse dest -> GenerationConfig field
OVERRIDES = {
    'seed': 'seed',
    'species': 'species',
    'width': 'width',
    'height': 'height',
    'padding': 'padding',
    'assets': 'assets_dir',
    'depth': 'depth',
    'fps': 'fps',
    'duration': 'duration_seconds',
    'curve': 'progress_curve',
    'ffmpeg': 'ffmpeg_binary',
    'codec': 'video_codec',
    'bitrate': 'video_bitrate',
}


def build_config(args: argparse.Namespace, **fixed) -> GenerationConfig:
    config = load_config(args.config) if args.config else GenerationConfig()
    changes = {field: getattr(args, dest) for dest, field in OVERRIDES.items()
               if getattr(args, dest, None) is not None}
    changes.update(fixed)
    config = dataclasses.replace(config, **changes)
    if args.save_config:
        save_config(config, args.save_config)
    return config


def cmd_image(args) -> int:
    config = build_config(args, photo_only=True, save_as_file=True, image_filename=args.output)
    generator = PlantGenerator(config)
    if args.at is not None:
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(generator.render_still_at(args.at))
    else:
        generator.generate()
    print(f"Saved {config.species} (seed {config.seed}) to {args.output}")
    return 0


def cmd_video(args) -> int:
    config = build_config(args, photo_only=False, save_as_file=True, filename=args.output)
    generator = PlantGenerator(config)
    sink = ImageioSink(args.output, config.fps) if args.sink == 'imageio' else None
    result = generator.generate(sink=sink)
    print(f"Saved {result.frames_written} frames of {config.species} (seed {config.seed}) to {result.video_path}")
    return 0


def cmd_info(args) -> int:
    config = build_config(args)
    generator = PlantGenerator(config)
    plan = generator.plan()
    start = plan.trunk_start_position
    print(json.dumps({
        'seed': config.seed,
        'species': config.species,
        'trunk_start_position': {'x': start.x, 'y': start.y},
        'scale': plan.transform.scale,
        'constraining_axis': plan.transform.constraining_axis,
        'segments': plan.root.segment_count,
        'max_distance': plan.max_distance,
        'full_distance': plan.full_distance,
    }, indent=2))
    return 0


def cmd_export(args) -> int:
    config = build_config(args)
    plan = PlantGenerator(config).plan()
    export_structure(plan.root, args.output, species=config.species, seed=config.seed)
    if args.plot:
        from growth.visualization import plot_structure
        plot_structure(plan.root, save_path=args.plot)
    print(f"Exported {config.species} (seed {config.seed}) to {args.output}")
    return 0


def cmd_species(args) -> int:
    for entry in list_species():
        print(f"{entry['key']:<18} {entry['name']:<16} {entry['description']}")
    return 0


def _add_generation_args(parser: argparse.ArgumentParser):
    parser.add_argument('--config', type=str, help='JSON config file (missing fields use defaults)')
    parser.add_argument('--save-config', type=str, help='Write the effective config to this JSON file')
    parser.add_argument('--seed', type=str, help='Seed string (default: random)')
    parser.add_argument('--species', type=str, help='Species key, see `species` command')
    parser.add_argument('--width', type=int)
    parser.add_argument('--height', type=int)
    parser.add_argument('--padding', type=float)
    parser.add_argument('--depth', type=int, help='Override the species recursion depth')
    parser.add_argument('--assets', type=str, help='Directory holding sprite images')


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Grow deterministic plants from a seed string.")
    parser.add_argument('--log-level', default='INFO', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    parser.add_argument('--log-file', type=str)
    sub = parser.add_subparsers(dest='command', required=True)

    image = sub.add_parser('image', help='Render the fully grown plant to PNG')
    _add_generation_args(image)
    image.add_argument('-o', '--output', default='outputs/plant.png')
    image.add_argument('--at', type=float, help='Render at this growth distance instead of fully grown')
    image.set_defaults(func=cmd_image)

    video = sub.add_parser('video', help='Render the growth animation')
    _add_generation_args(video)
    video.add_argument('-o', '--output', default='outputs/plant.webm')
    video.add_argument('--fps', type=int)
    video.add_argument('--duration', type=float, help='Duration in seconds')
    video.add_argument('--curve', type=str, help='Progress curve (linear, smoothstep, ease_out_cubic, ...)')
    video.add_argument('--ffmpeg', type=str, help='ffmpeg binary')
    video.add_argument('--codec', type=str)
    video.add_argument('--bitrate', type=str)
    video.add_argument('--sink', choices=['ffmpeg', 'imageio'], default='ffmpeg')
    video.set_defaults(func=cmd_video)

    info = sub.add_parser('info', help='Print the fitted layout without rendering')
    _add_generation_args(info)
    info.set_defaults(func=cmd_info)

    export = sub.add_parser('export', help='Export the built structure to JSON')
    _add_generation_args(export)
    export.add_argument('-o', '--output', default='outputs/structure.json')
    export.add_argument('--plot', type=str, help='Also save a debug plot to this path')
    export.set_defaults(func=cmd_export)

    species = sub.add_parser('species', help='List available species')
    species.set_defaults(func=cmd_species)
    return parser


def main(argv=None) -> int:
    args = create_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)
    try:
        return args.func(args)
    except SeedbloomError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1


if __name__ == '__main__':
    sys.exit(main())
