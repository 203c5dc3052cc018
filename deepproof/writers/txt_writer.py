"""Writer for TXT format with timestamps and speaker labels."""

from pathlib import Path
from typing import Sequence
from deepproof.models import TranscriptSegment


def write_txt(segments: Sequence[TranscriptSegment], output_path: Path) -> None:
    """
    Write transcript segments to a TXT file.

    Format: [mm:ss] Speaker A: text
    """
    with open(output_path, 'w', encoding='utf-8') as f:
        for segment in segments:
            f.write(f"[{segment.timestamp}] {segment.speaker}: {segment.text}\n")
