"""Read duration, resolution and frame rate from an uploaded video."""

import math
from datetime import datetime
from typing import Optional

import cv2

from deepproof.config import Config
from deepproof.errors import MetadataError
from deepproof.models import MediaMetadata, UploadedMedia


def format_duration(seconds: float) -> str:
    """Format seconds as M:SS, or H:MM:SS from one hour on."""
    total = int(max(seconds, 0))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_modified(timestamp: Optional[datetime]) -> str:
    """Format a timestamp like 'Oct 17, 2026, 11:30 PM'."""
    if timestamp is None:
        return "Unknown"
    return timestamp.strftime("%b %d, %Y, %I:%M %p")


def extract_metadata(media: UploadedMedia) -> MediaMetadata:
    """
    Open the upload's playable reference with OpenCV and read its properties.

    The frame rate reported by the container is used when it looks sane;
    otherwise Config.ASSUMED_FPS stands in rather than failing.

    Raises:
        MetadataError: if the decoder cannot open the file
    """
    capture = cv2.VideoCapture(str(media.playable_path))
    try:
        if not capture.isOpened():
            raise MetadataError(f"Could not read video metadata from {media.name}")

        width = int(capture.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
        frame_count = capture.get(cv2.CAP_PROP_FRAME_COUNT)
        fps = capture.get(cv2.CAP_PROP_FPS)
    finally:
        capture.release()

    if not fps or not math.isfinite(fps) or fps <= 0:
        fps = Config.ASSUMED_FPS

    duration_seconds = 0.0
    if frame_count and math.isfinite(frame_count) and frame_count > 0:
        duration_seconds = frame_count / fps

    last_modified = media.last_modified
    if last_modified is None and media.playable_path.exists():
        last_modified = datetime.fromtimestamp(media.playable_path.stat().st_mtime)

    return MediaMetadata(
        duration=format_duration(duration_seconds),
        resolution=f"{width}x{height}",
        fps=round(fps, 2),
        last_modified=format_modified(last_modified),
        duration_seconds=duration_seconds,
    )
