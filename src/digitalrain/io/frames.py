"""
PNG frame sequence export.
"""

from pathlib import Path
from typing import Callable, Iterator

import numpy as np
from PIL import Image


def write_png_frames(
    frame_iterator: Iterator[np.ndarray],
    output_dir: Path,
    total_frames: int | None = None,
    progress_callback: Callable[[int, int], None] | None = None,
) -> list[Path]:
    """Save each (H, W, 3) frame as output_dir/frame_000000.png."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for i, frame in enumerate(frame_iterator):
        frame_path = output_dir / f"frame_{i:06d}.png"
        Image.fromarray(frame).save(frame_path, "PNG", compress_level=1)
        paths.append(frame_path)
        if progress_callback and total_frames:
            progress_callback(i + 1, total_frames)
    return paths
