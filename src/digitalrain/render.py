"""
Offline renderer for the digital rain.

Runs the engine headless and writes an MP4 (through ffmpeg) or a PNG
sequence. Clicks can be scripted and the audio flash can follow a
soundtrack file.

Usage:
    digitalrain-render -o rain.mp4 --frames 600 --click 640,360@30
    digitalrain-render --audio track.wav --frames-dir out/
"""

import argparse
import os
import sys
import time
from pathlib import Path
from typing import Iterator

import numpy as np
import pygame

from digitalrain.audio import AudioAnalyzer, FileSource
from digitalrain.canvas import PygameCanvas
from digitalrain.cli import add_config_arguments, config_from_args, fit_alphabet
from digitalrain.engine import RainEngine
from digitalrain.io import encode_video, write_png_frames

ScriptedClick = tuple[int, float, float]  # (frame, x, y)


def parse_click(text: str) -> ScriptedClick:
    """Parse 'X,Y@FRAME' into (frame, x, y)."""
    try:
        position, frame = text.split("@")
        x, y = position.split(",")
        return int(frame), float(x), float(y)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"Invalid click {text!r}, expected X,Y@FRAME"
        ) from None


def render_frames(
    engine: RainEngine,
    canvas: PygameCanvas,
    n_frames: int,
    clicks: list[ScriptedClick] | None = None,
) -> Iterator[np.ndarray]:
    """Step the engine n_frames times, firing scripted clicks before their frame."""
    pending: dict[int, list[tuple[float, float]]] = {}
    for frame, x, y in clicks or []:
        pending.setdefault(frame, []).append((x, y))

    for i in range(n_frames):
        for x, y in pending.get(i, []):
            engine.handle_click(x, y)
        engine.step(canvas)
        yield canvas.to_array()


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  frame {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  frame {current}/{total}", flush=True)


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        prog="digitalrain-render",
        description="Render the digital rain to video or PNG frames",
    )
    add_config_arguments(parser)
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("digitalrain.mp4"),
        help="Output MP4 path (default: digitalrain.mp4)",
    )
    parser.add_argument(
        "--frames-dir",
        type=Path,
        default=None,
        help="Write a PNG sequence here instead of encoding a video",
    )
    parser.add_argument("-n", "--frames", type=int, default=None, help="Number of frames to render")
    parser.add_argument(
        "--max-duration", type=float, default=None,
        help="Limit output to N seconds",
    )
    parser.add_argument(
        "--click",
        type=parse_click,
        action="append",
        default=[],
        help="Scripted click X,Y@FRAME (repeatable)",
    )
    parser.add_argument(
        "--audio",
        type=Path,
        default=None,
        help="Audio file driving the color flash (muxed into the MP4)",
    )
    parser.add_argument(
        "-q", "--quality", type=str, default="medium",
        choices=["high", "medium", "fast"],
        help="Encoding quality (default: medium)",
    )

    args = parser.parse_args(argv)
    cfg = config_from_args(args)

    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    pygame.init()
    engine = None
    try:
        source = FileSource(args.audio, cfg) if args.audio is not None else None
        if args.frames is not None:
            n_frames = args.frames
        elif args.max_duration is not None:
            n_frames = int(args.max_duration * cfg.fps)
        elif source is not None:
            n_frames = int(source.duration * cfg.fps)
        else:
            n_frames = 10 * cfg.fps

        canvas = PygameCanvas(cfg.width, cfg.height, font_name=cfg.font_name)
        fit_alphabet(cfg, canvas)
        engine = RainEngine(cfg, audio=AudioAnalyzer(cfg, source), seed=args.seed)
        frames = render_frames(engine, canvas, n_frames, args.click)

        print(f"Rendering {n_frames} frames at {cfg.width}x{cfg.height} @ {cfg.fps}fps")
        t0 = time.time()

        if args.frames_dir is not None:
            write_png_frames(frames, args.frames_dir, n_frames, _progress_bar)
            target = args.frames_dir
        else:
            encode_video(
                frame_iterator=frames,
                output_path=args.output,
                width=cfg.width,
                height=cfg.height,
                fps=cfg.fps,
                quality=args.quality,
                audio_path=args.audio,
                duration=n_frames / cfg.fps,
                total_frames=n_frames,
                progress_callback=_progress_bar,
            )
            target = args.output
    except (FileNotFoundError, RuntimeError, ValueError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        if engine is not None:
            engine.close()
        pygame.quit()

    elapsed = time.time() - t0
    print(f"\nDone! {n_frames} frames in {elapsed:.1f}s ({n_frames / max(elapsed, 0.01):.1f} fps)")
    print(f"  Output: {target}")


if __name__ == "__main__":
    main()
