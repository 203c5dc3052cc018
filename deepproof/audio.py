"""Shrink oversize uploads to an audio-only file the speech API accepts."""

from pathlib import Path

from pydub import AudioSegment

from deepproof.errors import ValidationError

MIN_SPEECH_KBPS = 24
MAX_SPEECH_KBPS = 64


def _target_bitrate(max_size_bytes: int, duration_seconds: float, margin_kbps: int) -> int:
    # bitrate needed: (size_bytes * 8 bits) / (duration_seconds * 1000) = kbps
    kbps = int((max_size_bytes * 8) / (duration_seconds * 1000)) - margin_kbps
    return max(MIN_SPEECH_KBPS, min(kbps, MAX_SPEECH_KBPS))


def compress_for_transcription(media_path: Path, max_size_bytes: int) -> Path:
    """
    Return a path whose file fits under max_size_bytes.

    Files already under the limit are returned unchanged. Larger videos have
    their audio track extracted (pydub, needs ffmpeg) and exported as mono
    AAC at the highest speech bitrate that fits.

    Raises:
        ValidationError: if even the lowest bitrate is over the limit
    """
    original_size = media_path.stat().st_size
    if original_size <= max_size_bytes:
        return media_path

    print(f"⚠ {media_path.name} is {original_size / (1024 * 1024):.1f} MB, extracting audio track...")
    audio = AudioSegment.from_file(str(media_path)).set_channels(1)
    duration_seconds = max(len(audio) / 1000.0, 1.0)

    compressed_path = media_path.parent / f"{media_path.stem}_audio.m4a"
    for margin_kbps in (20, 40):
        bitrate = _target_bitrate(max_size_bytes, duration_seconds, margin_kbps)
        print(f"  Exporting audio at {bitrate} kbps...")
        audio.export(str(compressed_path), format="ipod", bitrate=f"{bitrate}k", codec="aac")

        compressed_size = compressed_path.stat().st_size
        if compressed_size <= max_size_bytes:
            print(f"  ✓ Compressed: {original_size / (1024 * 1024):.1f} MB -> {compressed_size / (1024 * 1024):.1f} MB")
            return compressed_path

    compressed_path.unlink(missing_ok=True)
    raise ValidationError(
        f"Audio is too long to transcribe: still {compressed_size / (1024 * 1024):.1f} MB "
        f"after compression (limit: {max_size_bytes / (1024 * 1024):.0f} MB)",
        status_code=413,
    )
