"""
FFmpeg video encoder.

Frames are streamed to ffmpeg's stdin as rawvideo rgb24, optionally
muxed with a soundtrack. Nothing is written to disk except the MP4.
"""

import subprocess
from pathlib import Path
from typing import Callable, Iterator

import numpy as np

# name -> (x264 preset, crf, output pix_fmt)
QUALITY_PRESETS = {
    "high": ("slow", "18", "yuv444p"),
    "medium": ("medium", "23", "yuv420p"),
    "fast": ("ultrafast", "28", "yuv420p"),
}


def build_ffmpeg_command(
    output_path: Path,
    width: int,
    height: int,
    fps: int,
    quality: str = "medium",
    audio_path: Path | None = None,
    duration: float | None = None,
) -> list[str]:
    """Argument list for encoding a rawvideo pipe (plus optional audio) to H.264."""
    preset, crf, pix_fmt = QUALITY_PRESETS.get(quality, QUALITY_PRESETS["medium"])

    inputs = ["-f", "rawvideo", "-pix_fmt", "rgb24", "-s", f"{width}x{height}",
              "-r", str(fps), "-i", "pipe:0"]
    codecs = ["-c:v", "libx264", "-preset", preset, "-crf", crf, "-pix_fmt", pix_fmt]
    if audio_path is not None:
        inputs += ["-i", str(audio_path)]
        codecs += ["-c:a", "aac", "-b:a", "192k", "-shortest"]

    limit = ["-t", str(duration)] if duration is not None else []
    return ["ffmpeg", "-y", *inputs, *codecs, *limit, str(output_path)]


def _summarize_stderr(stderr: bytes) -> str:
    """Keep the last few error-looking lines of ffmpeg's log."""
    text = stderr.decode("utf-8", errors="replace")
    errors = [
        line for line in text.splitlines()
        if "error" in line.lower() or "invalid" in line.lower()
    ]
    return "\n".join(errors[-5:]) if errors else text[-500:]


def encode_video(
    frame_iterator: Iterator[np.ndarray],
    output_path: Path,
    width: int,
    height: int,
    fps: int = 60,
    quality: str = "medium",
    audio_path: Path | None = None,
    duration: float | None = None,
    total_frames: int | None = None,
    progress_callback: Callable[[int, int], None] | None = None,
) -> Path:
    """
    Encode (height, width, 3) uint8 frames to an MP4 at output_path.

    progress_callback(done, total_frames) is called after every frame when
    total_frames is given. Raises RuntimeError if ffmpeg is missing or
    fails, ValueError if a frame has the wrong shape.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    cmd = build_ffmpeg_command(
        output_path, width, height, fps,
        quality=quality, audio_path=audio_path, duration=duration,
    )

    try:
        proc = subprocess.Popen(
            cmd, stdin=subprocess.PIPE, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE
        )
    except FileNotFoundError as e:
        raise RuntimeError("ffmpeg not found on PATH") from e

    expected = (height, width, 3)
    written = 0
    try:
        for frame in frame_iterator:
            if frame.shape != expected:
                proc.kill()
                proc.wait()
                raise ValueError(f"Frame {written} has shape {frame.shape}, expected {expected}")
            proc.stdin.write(np.ascontiguousarray(frame, dtype=np.uint8).tobytes())
            written += 1
            if progress_callback and total_frames:
                progress_callback(written, total_frames)
    except BrokenPipeError:
        # ffmpeg exited early; its return code says why
        pass
    finally:
        try:
            proc.stdin.close()
        except BrokenPipeError:
            pass

    _, stderr = proc.communicate()
    if proc.returncode != 0:
        raise RuntimeError(
            f"ffmpeg exited with code {proc.returncode}: {_summarize_stderr(stderr)}"
        )
    return output_path
