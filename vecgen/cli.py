#!/usr/bin/env python3

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List

from vecgen.config.options import GenerationOptions
from vecgen.config.settings import Settings
from vecgen.core.animation import AnimationDriver, FrameLoop
from vecgen.core.compositor import LayerCompositor
from vecgen.core.export import export_metadata, export_svg
from vecgen.core.palettes import category_colors, load_palettes
from vecgen.core.svg_writer import to_svg
from vecgen.patterns import PatternRegistry

logger = logging.getLogger(__name__)


def parse_assignments(assignments: List[str]) -> Dict[str, Any]:
    """Turn ['key=value', ...] into a dict, decoding JSON values where possible"""
    values: Dict[str, Any] = {}
    for item in assignments or []:
        if "=" not in item:
            raise argparse.ArgumentTypeError(f"Expected key=value, got {item!r}")
        key, raw = item.split("=", 1)
        try:
            values[key.strip()] = json.loads(raw)
        except ValueError:
            values[key.strip()] = raw
    return values


def build_options(args) -> GenerationOptions:
    raw = parse_assignments(args.set)
    if args.pattern:
        raw["pattern_type"] = args.pattern
    if args.seed is not None:
        raw["seed_override"] = args.seed
    if args.width:
        raw["viewport_width"] = args.width
    if args.height:
        raw["viewport_height"] = args.height
    if args.frames:
        raw["animation"] = True
    return GenerationOptions.from_dict(raw)


def write_frames(compositor: LayerCompositor, result, count: int, directory: str, frame_rate: int) -> int:
    """Render ``count`` animation frames to numbered SVG files"""
    os.makedirs(directory, exist_ok=True)
    loop = FrameLoop(frame_interval_ms=1000 / max(1, frame_rate))
    driver = AnimationDriver(scheduler=loop, period_ms=compositor.settings["animation_period_ms"])

    def save(frame):
        path = os.path.join(directory, f"frame_{frame.sequence:04d}.svg")
        with open(path, "w", encoding="utf-8") as f:
            f.write(to_svg(result, root=frame.root))

    driver.add_frame_observer(save)
    if not driver.start(result, now_ms=loop.time_ms):
        logger.warning("Nothing to animate, no frames written")
        return 0
    written = loop.run(count)
    driver.stop()
    return written


def cmd_generate(args, settings) -> int:
    compositor = LayerCompositor(settings=settings)
    options = build_options(args)
    result = compositor.generate(options)

    if args.out:
        export_svg(result, args.out)
    else:
        sys.stdout.write(to_svg(result) + "\n")

    if args.metadata:
        export_metadata(result, args.metadata)

    if args.frames:
        written = write_frames(
            compositor, result, args.frames, args.frames_dir, settings["frame_rate"]
        )
        print(f"Wrote {written} frames to {args.frames_dir}", file=sys.stderr)

    summary = result.summary()
    print(
        f"{summary['generator']}: {summary['total_elements']} elements, seed {summary['seed_used']}",
        file=sys.stderr,
    )
    if result.error:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    return 0


def cmd_patterns(args, settings) -> int:
    for definition in sorted(PatternRegistry.list_patterns(), key=lambda d: d.name):
        print(f"{definition.name:<12} [{definition.category}] {definition.description}")
        if args.verbose:
            for param in definition.parameters:
                print(
                    f"    {param.name:<22} default={param.default!r} "
                    f"range=[{param.min_value}, {param.max_value}]"
                )
    return 0


def cmd_palettes(args, settings) -> int:
    palettes = load_palettes(args.file or settings.get("palette_file") or None)
    if not palettes:
        print("No palettes available", file=sys.stderr)
        return 1
    for category in palettes:
        print(f"{category}: {' '.join(category_colors(palettes, category))}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Procedural SVG pattern generator")
    parser.add_argument("--config", help="JSON config file", default=os.getenv("VECGEN_CONFIG"))
    parser.add_argument("--log-level", help="Logging level (overrides config)")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Generate command
    gen_parser = subparsers.add_parser("generate", help="Generate an SVG")
    gen_parser.add_argument("--pattern", help="Pattern type")
    gen_parser.add_argument("--seed", help="Seed override (number or text)")
    gen_parser.add_argument("--out", help="SVG output file (stdout if omitted)")
    gen_parser.add_argument("--metadata", help="Metadata JSON output file")
    gen_parser.add_argument("--width", type=int, help="Viewport width")
    gen_parser.add_argument("--height", type=int, help="Viewport height")
    gen_parser.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Any generation option, e.g. --set complexity=7",
    )
    gen_parser.add_argument("--frames", type=int, default=0, help="Animation frames to render")
    gen_parser.add_argument("--frames-dir", default="frames", help="Directory for animation frames")

    # List patterns
    patterns_parser = subparsers.add_parser("patterns", help="List available patterns")
    patterns_parser.add_argument("-v", "--verbose", action="store_true", help="Show parameters")

    # List palettes
    palettes_parser = subparsers.add_parser("palettes", help="List palette categories")
    palettes_parser.add_argument("--file", help="Palette JSON file")

    args = parser.parse_args(argv)

    settings = Settings.load(args.config)
    Settings.setup_logging(args.log_level or settings["log_level"])

    if args.command == "generate":
        return cmd_generate(args, settings)
    elif args.command == "patterns":
        return cmd_patterns(args, settings)
    elif args.command == "palettes":
        return cmd_palettes(args, settings)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
