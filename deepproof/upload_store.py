"""Single-slot holder for the video waiting to be analyzed."""

import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional

from deepproof.config import Config
from deepproof.models import UploadedMedia


_SUFFIXES = {
    "video/mp4": ".mp4",
    "video/webm": ".webm",
    "video/quicktime": ".mov",
}


def is_accepted_type(mime_type: Optional[str]) -> bool:
    """Check a MIME type against the containers the upload page accepts."""
    return bool(mime_type) and mime_type in Config.ACCEPTED_VIDEO_TYPES


class UploadStore:
    """
    Holds at most one UploadedMedia per session.

    The playable reference is a temporary file with the upload's bytes, read
    by the metadata decoder and the transcription call. Replacing or
    clearing the upload deletes that file first, so stale copies never pile
    up. None of the operations fail; an empty store means "go back to the
    upload step".
    """

    def __init__(self, temp_dir: Optional[Path] = None):
        self._temp_dir = temp_dir
        self._stored: Optional[UploadedMedia] = None

    def set_uploaded_file(
        self,
        data: bytes,
        name: str,
        mime_type: str,
        last_modified: Optional[datetime] = None,
    ) -> None:
        # Release the previous playable reference before creating a new one
        self._release()

        suffix = Path(name).suffix or _SUFFIXES.get(mime_type, ".bin")
        with tempfile.NamedTemporaryFile(
            prefix="deepproof_", suffix=suffix, dir=self._temp_dir, delete=False
        ) as handle:
            handle.write(data)
            playable_path = Path(handle.name)

        self._stored = UploadedMedia(
            data=data,
            name=name,
            size=len(data),
            mime_type=mime_type,
            playable_path=playable_path,
            last_modified=last_modified,
        )

    def get_uploaded_file(self) -> Optional[UploadedMedia]:
        return self._stored

    def clear_uploaded_file(self) -> None:
        self._release()
        self._stored = None

    def _release(self) -> None:
        if self._stored is not None:
            self._stored.playable_path.unlink(missing_ok=True)
