"""Whisper speech-to-text via Groq, reshaped into timestamped segments."""

from pathlib import Path
from typing import Any, Optional
from openai import OpenAI
from openai import APIError

from deepproof.audio import compress_for_transcription
from deepproof.config import Config
from deepproof.groq_client import create_client, to_transport_error
from deepproof.models import TranscriptSegment, TranscriptionResult


def format_timestamp(seconds: float) -> str:
    """Format seconds as zero-padded mm:ss (minutes are not wrapped into hours)."""
    seconds = max(float(seconds), 0.0)
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"


def speaker_label(index: int) -> str:
    """
    Alternate 'Speaker A' / 'Speaker B' by segment index.

    This is a display heuristic only. Whisper does no diarization, so the
    label says nothing about who is actually talking.
    """
    return "Speaker A" if index % 2 == 0 else "Speaker B"


def _field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def _response_to_dict(response: Any) -> dict:
    """Normalize the SDK response object into a plain dict."""
    if isinstance(response, dict):
        return response
    if hasattr(response, "model_dump"):
        return response.model_dump()
    return {
        "text": getattr(response, "text", ""),
        "language": getattr(response, "language", None),
        "segments": getattr(response, "segments", None),
    }


def build_segments(raw_segments: Optional[list], full_text: str) -> list[TranscriptSegment]:
    """
    Turn Whisper's verbose_json segments into display segments.

    If Whisper returned text but no segments, a single segment at 00:00
    carries the whole text so a successful call is never empty.
    """
    segments = [
        TranscriptSegment(
            timestamp=format_timestamp(_field(seg, "start", 0) or 0),
            speaker=speaker_label(index),
            text=(_field(seg, "text", "") or "").strip(),
        )
        for index, seg in enumerate(raw_segments or [])
    ]

    if not segments and full_text and full_text.strip():
        segments.append(TranscriptSegment(
            timestamp="00:00",
            speaker=speaker_label(0),
            text=full_text.strip(),
        ))

    return segments


def transcribe_file(
    media_path: Path,
    file_name: Optional[str] = None,
    client: Optional[OpenAI] = None,
) -> TranscriptionResult:
    """
    Transcribe a video or audio file with Whisper.

    Args:
        media_path: Path to the media file
        file_name: Name reported to the API (defaults to the file's name)
        client: Optional preconfigured client

    Returns:
        TranscriptionResult with language ('unknown' if not detected)

    Raises:
        TransportError: if the API call fails
    """
    media_path = Path(media_path)
    max_size_bytes = Config.MAX_TRANSCRIPTION_MB * 1024 * 1024
    upload_path = compress_for_transcription(media_path, max_size_bytes)
    if upload_path != media_path:
        file_name = upload_path.name

    client = client or create_client()

    print(f"Transcribing {file_name or media_path.name} with {Config.TRANSCRIPTION_MODEL}...")
    try:
        with open(upload_path, "rb") as media_file:
            response = client.audio.transcriptions.create(
                model=Config.TRANSCRIPTION_MODEL,
                file=(file_name or upload_path.name, media_file.read()),
                response_format="verbose_json",
            )
    except APIError as e:
        raise to_transport_error(e) from e
    finally:
        if upload_path != media_path:
            upload_path.unlink(missing_ok=True)

    response_dict = _response_to_dict(response)
    full_text = (response_dict.get("text") or "").strip()
    segments = build_segments(response_dict.get("segments"), full_text)

    print(f"✓ Transcription complete: {len(segments)} segments")
    return TranscriptionResult(
        language=response_dict.get("language") or "unknown",
        segments=segments,
        full_text=full_text,
    )
