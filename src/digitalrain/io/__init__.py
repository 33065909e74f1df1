"""Frame output: ffmpeg video and PNG sequences."""

from digitalrain.io.encoder import encode_video
from digitalrain.io.frames import write_png_frames

__all__ = ["encode_video", "write_png_frames"]
