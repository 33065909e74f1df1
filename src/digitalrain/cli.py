"""
Argument handling shared by the window and offline render commands.
"""

import argparse
import sys
from pathlib import Path

from digitalrain.canvas import PygameCanvas
from digitalrain.config import LATIN, RainConfig, load_config


def add_config_arguments(parser: argparse.ArgumentParser):
    """Options common to every entry point."""
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with RainConfig overrides",
    )
    parser.add_argument("--width", type=int, default=None, help="Surface width in pixels")
    parser.add_argument("--height", type=int, default=None, help="Surface height in pixels")
    parser.add_argument("-f", "--fps", type=int, default=None, help="Frames per second")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible rain")
    parser.add_argument("--font", type=str, default=None, help="System font name for glyphs")
    parser.add_argument(
        "--show-rings", action="store_true", help="Draw shockwave outlines"
    )
    parser.add_argument("--no-audio", action="store_true", help="Start with audio reactivity off")


def config_from_args(args: argparse.Namespace) -> RainConfig:
    """Build the config from --config plus command-line overrides. Exits on bad input."""
    try:
        base = load_config(args.config) if args.config else RainConfig()
        cfg = base.with_overrides(
            width=args.width,
            height=args.height,
            fps=args.fps,
            font_name=args.font,
        )
        if args.show_rings:
            cfg.show_shockwave_circle = True
        if args.no_audio:
            cfg.enable_audio_reactivity = False
        return cfg.validate()
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def fit_alphabet(cfg: RainConfig, canvas: PygameCanvas):
    """Drop glyphs the canvas font can't draw, warning on stderr."""
    missing = canvas.missing_glyphs(cfg.alphabet, cfg.symbol_size)
    if not missing:
        return
    drawable = "".join(c for c in cfg.alphabet if c not in missing)
    cfg.alphabet = drawable or LATIN
    print(
        f"Warning: font has no glyphs for {len(missing)} of the rain characters; "
        "install a CJK font or pass --font to draw katakana.",
        file=sys.stderr,
    )
